from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .statement import Statement

class PolicyDoc(BaseModel):
    """
    Stored in MongoDB (or the in-memory store).

    statements: ordered; always replaced as a whole, never patched.
    version: free-form label chosen by the author (not semver).
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    description: Optional[str] = None
    version: str = "1.0"
    statements: List[Statement] = []

    created_at: datetime
    updated_at: datetime
