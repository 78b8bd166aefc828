from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.policy import PolicyDoc


class PolicyCreate(BaseModel):
    """
    statements stays untyped here; the statement codec checks its shape and
    reports statement index + field.
    """
    name: str
    description: Optional[str] = None
    version: str = "1.0"
    statements: Any = Field(default_factory=list)


class PolicyReplace(BaseModel):
    # PUT: whole policy, statements replaced atomically
    name: str
    description: Optional[str] = None
    version: str = "1.0"
    statements: Any = Field(default_factory=list)


class StatementsText(BaseModel):
    text: str


class PolicyOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    version: str
    statements: List[Dict[str, Any]] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_doc(cls, p: PolicyDoc) -> "PolicyOut":
        return cls(
            id=p.id,
            name=p.name,
            description=p.description,
            version=p.version,
            statements=[s.to_document() for s in p.statements],
            created_at=p.created_at,
            updated_at=p.updated_at,
        )


class PolicySummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    version: str

    @classmethod
    def from_doc(cls, p: PolicyDoc) -> "PolicySummary":
        return cls(id=p.id, name=p.name, description=p.description, version=p.version)
