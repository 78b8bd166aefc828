from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from ..models.attachment import AttachmentDoc
from .policy import PolicySummary


class AttachRequest(BaseModel):
    principal_urn: str


class AttachmentOut(BaseModel):
    id: str
    policy_id: str
    principal_urn: str
    principal_type: str      # "User" | "Group" | "Unknown"
    attached_on: datetime

    @classmethod
    def from_doc(cls, a: AttachmentDoc, principal_type: str) -> "AttachmentOut":
        return cls(
            id=a.attachment_id,
            policy_id=a.policy_id,
            principal_urn=a.principal_urn,
            principal_type=principal_type,
            attached_on=a.attached_on,
        )


class AttachedPolicyOut(BaseModel):
    """A principal's view of one attachment."""
    attachment_id: str
    attached_on: datetime
    policy: PolicySummary
