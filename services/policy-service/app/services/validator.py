from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from ..models.statement import EFFECTS, Statement, ValidationError

StatementLike = Union[Statement, Mapping[str, Any]]


def _get(s: StatementLike, key: str) -> Any:
    if isinstance(s, Statement):
        return getattr(s, key)
    return s.get(key)


def validate_statement(s: StatementLike, index: int = 0) -> Optional[ValidationError]:
    """
    First violation in field order effect -> actions -> resources, or None.

    Works on trusted Statement models and on raw mappings alike; nothing is
    assumed about where the input came from.
    """
    effect = _get(s, "effect")
    if not isinstance(effect, str) or effect not in EFFECTS:
        return ValidationError(
            statement_index=index,
            field="effect",
            message=f'Statement {index + 1}: effect must be "Allow" or "Deny"',
        )

    actions = _get(s, "actions")
    if not isinstance(actions, (list, tuple)) or len(actions) < 1:
        return ValidationError(
            statement_index=index,
            field="actions",
            message=f"Statement {index + 1} must have at least one action",
        )

    resources = _get(s, "resources")
    if not isinstance(resources, (list, tuple)) or len(resources) < 1:
        return ValidationError(
            statement_index=index,
            field="resources",
            message=f"Statement {index + 1} must have at least one resource",
        )

    return None


def validate_list(statements: Sequence[StatementLike]) -> Optional[ValidationError]:
    # an empty policy is valid at this layer
    for i, s in enumerate(statements):
        err = validate_statement(s, i)
        if err is not None:
            return err
    return None


def is_valid(statements: Sequence[StatementLike]) -> bool:
    return validate_list(statements) is None
