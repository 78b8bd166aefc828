from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict

ID_PLACEHOLDER = "{id}"
WILDCARD = "*"


class ResourceType(BaseModel):
    """
    urn_pattern contains exactly one {id} placeholder, e.g.
    "urn:revet:documents::document/{id}".
    """
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str = ""
    urn_pattern: str

    @property
    def placeholder(self) -> str:
        return self.urn_pattern.replace(ID_PLACEHOLDER, WILDCARD)


class ActionDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str          # "service:Verb" or bare "*"
    label: str
    description: str = ""


class ActionCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    actions: Tuple[ActionDefinition, ...] = ()


class ResourceOption(BaseModel):
    """One choice offered by a resource picker."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    urn: str
