from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

class AttachmentDoc(BaseModel):
    """
    Stored in MongoDB (or the in-memory store).

    (policy_id, principal_urn) is unique. attachment_id is issued by the store
    and is the only handle used for detachment.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    attachment_id: str = Field(alias="_id")
    policy_id: str
    principal_urn: str
    attached_on: datetime
