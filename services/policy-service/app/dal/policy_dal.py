from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..models.policy import PolicyDoc
from ..models.statement import Statement
from ..settings import settings


def _now() -> datetime:
    return datetime.now(timezone.utc)


def to_policy(d: Dict[str, Any]) -> PolicyDoc:
    return PolicyDoc(
        _id=str(d["_id"]),
        name=d["name"],
        description=d.get("description"),
        version=d.get("version") or "1.0",
        statements=[Statement.from_document(s) for s in d.get("statements") or []],
        created_at=d["created_at"],
        updated_at=d["updated_at"],
    )


class PolicyDAL:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.col = db[settings.COL_POLICIES]

    async def ensure_indexes(self) -> None:
        await self.col.create_index([("name", ASCENDING)], unique=True)

    async def create(
        self,
        *,
        name: str,
        description: Optional[str],
        version: str,
        statements: Iterable[Statement],
    ) -> PolicyDoc:
        doc = {
            "_id": str(uuid.uuid4()),
            "name": name,
            "description": description,
            "version": version,
            "statements": [s.to_document() for s in statements],
            "created_at": _now(),
            "updated_at": _now(),
        }
        try:
            await self.col.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError(f"Policy already exists: {name}")
        return to_policy(doc)

    async def get(self, id: str) -> Optional[PolicyDoc]:
        d = await self.col.find_one({"_id": id})
        return to_policy(d) if d else None

    async def get_many(self, ids: List[str]) -> Dict[str, PolicyDoc]:
        if not ids:
            return {}
        cur = self.col.find({"_id": {"$in": list(set(ids))}})
        out: Dict[str, PolicyDoc] = {}
        async for d in cur:
            out[str(d["_id"])] = to_policy(d)
        return out

    async def list(self, *, limit: int = 200, skip: int = 0) -> List[PolicyDoc]:
        cur = self.col.find({}).sort("name", ASCENDING).skip(skip).limit(limit)
        return [to_policy(d) async for d in cur]

    async def replace(
        self,
        *,
        id: str,
        name: str,
        description: Optional[str],
        version: str,
        statements: Iterable[Statement],
    ) -> Optional[PolicyDoc]:
        """
        Whole-document update: the statement list is written in one $set, so
        readers see either the old list or the new one.
        """
        patch = {
            "name": name,
            "description": description,
            "version": version,
            "statements": [s.to_document() for s in statements],
            "updated_at": _now(),
        }
        try:
            r = await self.col.find_one_and_update(
                {"_id": id},
                {"$set": patch},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ValueError(f"Policy already exists: {name}")
        return to_policy(r) if r else None

    async def delete(self, *, id: str) -> bool:
        r = await self.col.delete_one({"_id": id})
        return r.deleted_count == 1
