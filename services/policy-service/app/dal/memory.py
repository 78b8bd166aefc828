from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.attachment import AttachmentDoc
from ..models.policy import PolicyDoc
from ..models.statement import Statement
from ..errors import AlreadyAttached


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryPolicyStore:
    """
    Same contract as PolicyDAL, for local runs and tests.
    Single-process only; use the Mongo backend for anything shared.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, PolicyDoc] = {}
        self._lock = asyncio.Lock()

    async def ensure_indexes(self) -> None:
        return None

    def _name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        return any(p.name == name and p.id != exclude_id for p in self._docs.values())

    async def create(
        self,
        *,
        name: str,
        description: Optional[str],
        version: str,
        statements: Iterable[Statement],
    ) -> PolicyDoc:
        async with self._lock:
            if self._name_taken(name):
                raise ValueError(f"Policy already exists: {name}")
            now = _now()
            doc = PolicyDoc(
                _id=str(uuid.uuid4()),
                name=name,
                description=description,
                version=version,
                statements=list(statements),
                created_at=now,
                updated_at=now,
            )
            self._docs[doc.id] = doc
            return doc

    async def get(self, id: str) -> Optional[PolicyDoc]:
        return self._docs.get(id)

    async def get_many(self, ids: List[str]) -> Dict[str, PolicyDoc]:
        return {i: self._docs[i] for i in set(ids) if i in self._docs}

    async def list(self, *, limit: int = 200, skip: int = 0) -> List[PolicyDoc]:
        docs = sorted(self._docs.values(), key=lambda p: p.name)
        return docs[skip:skip + limit]

    async def replace(
        self,
        *,
        id: str,
        name: str,
        description: Optional[str],
        version: str,
        statements: Iterable[Statement],
    ) -> Optional[PolicyDoc]:
        async with self._lock:
            current = self._docs.get(id)
            if current is None:
                return None
            if self._name_taken(name, exclude_id=id):
                raise ValueError(f"Policy already exists: {name}")
            doc = current.model_copy(
                update={
                    "name": name,
                    "description": description,
                    "version": version,
                    "statements": list(statements),
                    "updated_at": _now(),
                }
            )
            self._docs[id] = doc
            return doc

    async def delete(self, *, id: str) -> bool:
        async with self._lock:
            return self._docs.pop(id, None) is not None


class InMemoryAttachmentStore:
    """
    Same contract as AttachmentDAL. The pair check and the insert happen under
    one lock, giving the same guarantee as the unique index.
    """

    def __init__(self) -> None:
        self._rows: Dict[str, AttachmentDoc] = {}
        self._pairs: Dict[Tuple[str, str], str] = {}
        self._lock = asyncio.Lock()

    async def ensure_indexes(self) -> None:
        return None

    async def insert(self, *, policy_id: str, principal_urn: str) -> AttachmentDoc:
        async with self._lock:
            key = (policy_id, principal_urn)
            if key in self._pairs:
                raise AlreadyAttached(policy_id, principal_urn)
            doc = AttachmentDoc(
                _id=str(uuid.uuid4()),
                policy_id=policy_id,
                principal_urn=principal_urn,
                attached_on=_now(),
            )
            self._rows[doc.attachment_id] = doc
            self._pairs[key] = doc.attachment_id
            return doc

    async def delete(self, *, policy_id: str, attachment_id: str) -> bool:
        async with self._lock:
            doc = self._rows.get(attachment_id)
            if doc is None or doc.policy_id != policy_id:
                return False
            del self._rows[attachment_id]
            self._pairs.pop((doc.policy_id, doc.principal_urn), None)
            return True

    async def delete_by_policy(self, policy_id: str) -> int:
        async with self._lock:
            ids = [a for a, d in self._rows.items() if d.policy_id == policy_id]
            for a in ids:
                d = self._rows.pop(a)
                self._pairs.pop((d.policy_id, d.principal_urn), None)
            return len(ids)

    async def list_by_policy(self, policy_id: str) -> List[AttachmentDoc]:
        return sorted((d for d in self._rows.values() if d.policy_id == policy_id), key=lambda d: d.attached_on)

    async def list_by_principal(self, principal_urn: str) -> List[AttachmentDoc]:
        return sorted((d for d in self._rows.values() if d.principal_urn == principal_urn), key=lambda d: d.attached_on)
