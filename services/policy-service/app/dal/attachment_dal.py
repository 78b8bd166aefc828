from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from ..models.attachment import AttachmentDoc
from ..errors import AlreadyAttached
from ..settings import settings


def _now() -> datetime:
    return datetime.now(timezone.utc)


def to_attachment(d: Dict[str, Any]) -> AttachmentDoc:
    return AttachmentDoc(
        _id=str(d["_id"]),
        policy_id=d["policy_id"],
        principal_urn=d["principal_urn"],
        attached_on=d["attached_on"],
    )


class AttachmentDAL:
    """
    (policy_id, principal_urn) uniqueness is enforced by the index, so two
    concurrent attaches of the same pair cannot both insert.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_ATTACHMENTS]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("policy_id", ASCENDING), ("principal_urn", ASCENDING)], unique=True)
        await self.col.create_index([("principal_urn", ASCENDING)])

    async def insert(self, *, policy_id: str, principal_urn: str) -> AttachmentDoc:
        doc = {
            "_id": str(uuid.uuid4()),
            "policy_id": policy_id,
            "principal_urn": principal_urn,
            "attached_on": _now(),
        }
        try:
            await self.col.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyAttached(policy_id, principal_urn)
        return to_attachment(doc)

    async def delete(self, *, policy_id: str, attachment_id: str) -> bool:
        r = await self.col.delete_one({"_id": attachment_id, "policy_id": policy_id})
        return r.deleted_count == 1

    async def delete_by_policy(self, policy_id: str) -> int:
        r = await self.col.delete_many({"policy_id": policy_id})
        return r.deleted_count

    async def list_by_policy(self, policy_id: str) -> List[AttachmentDoc]:
        cur = self.col.find({"policy_id": policy_id}).sort("attached_on", ASCENDING)
        return [to_attachment(d) async for d in cur]

    async def list_by_principal(self, principal_urn: str) -> List[AttachmentDoc]:
        cur = self.col.find({"principal_urn": principal_urn}).sort("attached_on", ASCENDING)
        return [to_attachment(d) async for d in cur]
