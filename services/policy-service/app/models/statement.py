from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Effect(str, Enum):
    ALLOW = "Allow"
    DENY = "Deny"


EFFECTS = frozenset(e.value for e in Effect)

# keys accepted in the raw (serialized) form, in emit order
STATEMENT_KEYS = ("sid", "effect", "actions", "resources", "conditions")


class Statement(BaseModel):
    """
    One Allow/Deny rule naming actions and resources.

    effect is kept as a plain string so that untrusted input can be held and
    reported on; the validator decides whether it is one of Effect.

    actions and resources are tuples: a statement handed out by the editor
    cannot be changed behind its back.

    conditions is opaque: it is never interpreted, defaulted or normalised.
    Whether the key was supplied at all is tracked through model_fields_set so
    that a statement re-emits exactly what it was given.
    """
    model_config = ConfigDict(frozen=True)

    sid: Optional[str] = None
    effect: Optional[str] = None
    actions: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    conditions: Any = None

    @property
    def carries_conditions(self) -> bool:
        return "conditions" in self.model_fields_set

    def has_conditions(self) -> bool:
        # non-empty conditions can only be edited in raw mode
        c = self.conditions
        if c is None:
            return False
        if isinstance(c, (dict, list, str)):
            return len(c) > 0
        return True

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "sid": self.sid,
            "effect": self.effect,
            "actions": list(self.actions),
            "resources": list(self.resources),
        }
        if self.carries_conditions:
            doc["conditions"] = self.conditions
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Statement":
        return cls(**{k: doc[k] for k in STATEMENT_KEYS if k in doc})


class ShapeError(BaseModel):
    """
    Raw content is not a well-formed statement array.

    statement_index is None for document-level problems (bad JSON, not an array).
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["shape"] = "shape"
    statement_index: Optional[int] = None
    field: Optional[str] = None
    message: str


class ValidationError(BaseModel):
    """Well-formed but semantically invalid statement. statement_index is zero-based."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["validation"] = "validation"
    statement_index: int
    field: Literal["effect", "actions", "resources"]
    message: str
