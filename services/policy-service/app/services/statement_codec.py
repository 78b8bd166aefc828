from __future__ import annotations

import json
from typing import Any, Iterable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from ..models.statement import EFFECTS, STATEMENT_KEYS, ShapeError, Statement, ValidationError
from .validator import validate_list


class ParseOk(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["ok"] = "ok"
    statements: Tuple[Statement, ...] = ()


# Every parse ends in exactly one of these; callers switch on .kind
ParseResult = Union[ParseOk, ShapeError, ValidationError]


def serialize(statements: Iterable[Statement]) -> str:
    return json.dumps([s.to_document() for s in statements], indent=2, ensure_ascii=False)


def _string_array(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def check_shape(data: Any) -> Optional[ShapeError]:
    """
    Serialization shape gate. Runs before semantic validation so that a
    malformed document is never coerced into something that looks valid.
    """
    if not isinstance(data, list):
        return ShapeError(message="Statements must be an array")

    for i, stmt in enumerate(data):
        n = i + 1
        if not isinstance(stmt, dict):
            return ShapeError(statement_index=i, message=f"Statement {n}: must be an object")

        effect = stmt.get("effect")
        if not isinstance(effect, str) or effect not in EFFECTS:
            return ShapeError(statement_index=i, field="effect", message=f'Statement {n}: effect must be "Allow" or "Deny"')

        for key in ("actions", "resources"):
            if key not in stmt or not isinstance(stmt[key], list):
                return ShapeError(statement_index=i, field=key, message=f"Statement {n}: {key} must be an array")
            if not _string_array(stmt[key]):
                return ShapeError(statement_index=i, field=key, message=f"Statement {n}: {key} must contain only strings")

        sid = stmt.get("sid")
        if sid is not None and not isinstance(sid, str):
            return ShapeError(statement_index=i, field="sid", message=f"Statement {n}: sid must be a string or null")

        for key in stmt:
            if key not in STATEMENT_KEYS:
                return ShapeError(statement_index=i, field=key, message=f'Statement {n}: unknown field "{key}"')

    return None


def parse(text: str) -> ParseResult:
    """
    JSON text -> ParseOk | ShapeError | ValidationError. Never raises.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder can follow
        return ShapeError(message="Invalid JSON syntax")
    return parse_documents(data)


def parse_documents(data: Any) -> ParseResult:
    """Same gate for already-decoded JSON (API payloads)."""
    shape = check_shape(data)
    if shape is not None:
        return shape
    err = validate_list(data)
    if err is not None:
        return err
    return ParseOk(statements=tuple(Statement.from_document(d) for d in data))
