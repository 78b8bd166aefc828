from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ResolveUrnRequest(BaseModel):
    resource_type: str
    identifier: str = "*"


class UrnOut(BaseModel):
    urn: str
    label: str
    resource_type: Optional[str] = None
