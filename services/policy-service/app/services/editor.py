from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..catalog.actions import ActionCatalog, default_categories, toggle
from ..catalog.resources import ResourceCatalog, default_resource_types
from ..models.catalog import WILDCARD
from ..models.statement import Effect, ShapeError, Statement, ValidationError
from ..errors import EditorModeError, InvalidStatements
from .statement_codec import ParseOk, ParseResult, parse, serialize
from .validator import validate_list

log = logging.getLogger("policy.editor")


class EditorMode(str, Enum):
    VISUAL = "visual"
    RAW = "raw"


def new_statement() -> Statement:
    return Statement(sid=None, effect=Effect.ALLOW.value, actions=(), resources=(WILDCARD,))


class PolicyEditor:
    """
    Single mutation surface for one policy's ordered statement list.

    Two views share the same canonical list:
      - visual: structured edits, applied immediately
      - raw:    JSON text, validated on every change; the canonical list is
                replaced only while the text is valid

    Raw -> visual is refused while the raw text does not parse cleanly; the
    text is kept so it can be fixed. Statements are replaced copy-on-write so
    fields a visual edit does not touch (conditions in particular) are carried
    over as the same object.
    """

    def __init__(
        self,
        statements: Iterable[Statement] = (),
        *,
        resources: Optional[ResourceCatalog] = None,
        actions: Optional[ActionCatalog] = None,
    ):
        self.resources = resources or ResourceCatalog(default_resource_types())
        self.actions = actions or ActionCatalog(default_categories())

        self._statements: Tuple[Statement, ...] = tuple(statements)
        self._mode = EditorMode.VISUAL
        self._raw_text = ""
        self._raw_error: Optional[Union[ShapeError, ValidationError]] = None

    # ------------------------------------------------------------------ state

    @property
    def mode(self) -> EditorMode:
        return self._mode

    @property
    def statements(self) -> Tuple[Statement, ...]:
        return self._statements

    @property
    def raw_text(self) -> str:
        return self._raw_text

    @property
    def error(self) -> Optional[Union[ShapeError, ValidationError]]:
        if self._mode is EditorMode.RAW and self._raw_error is not None:
            return self._raw_error
        return validate_list(self._statements)

    @property
    def can_save(self) -> bool:
        return self.error is None

    def has_conditions(self, index: int) -> bool:
        return self._at(index).has_conditions()

    def reset(self, statements: Iterable[Statement]) -> None:
        """Load a fresh list (e.g. after a fetch) and return to the visual view."""
        self._statements = tuple(statements)
        self._mode = EditorMode.VISUAL
        self._raw_text = ""
        self._raw_error = None

    def to_payload(self) -> List[Dict[str, Any]]:
        err = self.error
        if err is not None:
            raise InvalidStatements(err)
        return [s.to_document() for s in self._statements]

    # ------------------------------------------------------------ transitions

    def switch_to(self, mode: Union[EditorMode, str]) -> bool:
        mode = EditorMode(mode)
        if mode is self._mode:
            return True

        if mode is EditorMode.RAW:
            self._raw_text = serialize(self._statements)
            self._raw_error = None
            self._mode = EditorMode.RAW
            log.debug("switched to raw statements=%d", len(self._statements))
            return True

        result = parse(self._raw_text)
        if not isinstance(result, ParseOk):
            self._raw_error = result
            log.info(
                "raw->visual refused kind=%s index=%s field=%s",
                result.kind,
                result.statement_index,
                result.field,
            )
            return False

        self._statements = result.statements
        self._raw_error = None
        self._mode = EditorMode.VISUAL
        log.debug("switched to visual statements=%d", len(self._statements))
        return True

    # -------------------------------------------------------------- raw view

    def edit_raw(self, text: str) -> ParseResult:
        self._require(EditorMode.RAW)
        self._raw_text = text
        result = parse(text)
        if isinstance(result, ParseOk):
            self._statements = result.statements
            self._raw_error = None
        else:
            # last-known-good list stays in place
            self._raw_error = result
        return result

    # ----------------------------------------------------------- visual view

    def add_statement(self, statement: Optional[Statement] = None) -> int:
        self._require(EditorMode.VISUAL)
        self._statements = self._statements + (statement or new_statement(),)
        return len(self._statements) - 1

    def remove_statement(self, index: int) -> Statement:
        self._require(EditorMode.VISUAL)
        removed = self._at(index)
        self._statements = self._statements[:index] + self._statements[index + 1:]
        return removed

    def set_effect(self, index: int, effect: Union[Effect, str]) -> Statement:
        return self._replace(index, effect=Effect(effect).value)

    def set_sid(self, index: int, sid: Optional[str]) -> Statement:
        return self._replace(index, sid=sid or None)

    def toggle_action(self, index: int, action: str) -> Statement:
        return self._replace(index, actions=tuple(toggle(self._at(index).actions, action)))

    def remove_action(self, index: int, action: str) -> Statement:
        s = self._at(index)
        return self._replace(index, actions=tuple(a for a in s.actions if a != action))

    def add_resource(self, index: int, urn: str) -> Statement:
        s = self._at(index)
        if urn in s.resources:
            self._require(EditorMode.VISUAL)
            return s
        return self._replace(index, resources=(*s.resources, urn))

    def add_resource_of_type(self, index: int, resource_type_id: str, identifier: str) -> Statement:
        return self.add_resource(index, self.resources.resolve(resource_type_id, identifier))

    def add_all_resources(self, index: int) -> Statement:
        return self.add_resource(index, WILDCARD)

    def remove_resource(self, index: int, urn: str) -> Statement:
        s = self._at(index)
        return self._replace(index, resources=tuple(r for r in s.resources if r != urn))

    # ---------------------------------------------------------------- labels

    def label_for_action(self, action: str) -> str:
        return self.actions.label_of(action)

    def label_for_resource(self, urn: str) -> str:
        return self.resources.label(urn)

    # --------------------------------------------------------------- helpers

    def _require(self, mode: EditorMode) -> None:
        if self._mode is not mode:
            raise EditorModeError(f"Operation requires {mode.value} mode (editor is in {self._mode.value} mode)")

    def _at(self, index: int) -> Statement:
        if index < 0 or index >= len(self._statements):
            raise IndexError(f"No statement at index {index}")
        return self._statements[index]

    def _replace(self, index: int, **changes: Any) -> Statement:
        self._require(EditorMode.VISUAL)
        updated = self._at(index).model_copy(update=changes)
        self._statements = self._statements[:index] + (updated,) + self._statements[index + 1:]
        return updated
