from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from ..catalog.resources import ResourceCatalog
from ..models.attachment import AttachmentDoc
from ..models.policy import PolicyDoc
from ..errors import AttachmentNotFound, InvalidPrincipal

log = logging.getLogger("policy.attachments")


class AttachmentStore(Protocol):
    async def insert(self, *, policy_id: str, principal_urn: str) -> AttachmentDoc: ...

    async def delete(self, *, policy_id: str, attachment_id: str) -> bool: ...

    async def delete_by_policy(self, policy_id: str) -> int: ...

    async def list_by_policy(self, policy_id: str) -> List[AttachmentDoc]: ...

    async def list_by_principal(self, principal_urn: str) -> List[AttachmentDoc]: ...


class AttachmentRegistry:
    """
    Many-to-many relation between policies and principals (user/group URNs).

    Both read paths go to the same store rows, so a policy's attachment list
    and a principal's policy list always agree. Uniqueness of
    (policy, principal) is the store's job; nothing here retries on conflict.
    """

    def __init__(self, *, store: AttachmentStore, resources: ResourceCatalog):
        self.store = store
        self.resources = resources

    async def attach(self, policy_id: str, principal_urn: str) -> AttachmentDoc:
        if self.resources.parse_principal(principal_urn) is None:
            raise InvalidPrincipal(principal_urn)
        doc = await self.store.insert(policy_id=policy_id, principal_urn=principal_urn)
        log.info("attached policy=%s principal=%s attachment=%s", policy_id, principal_urn, doc.attachment_id)
        return doc

    async def detach(self, policy_id: str, attachment_id: str) -> None:
        ok = await self.store.delete(policy_id=policy_id, attachment_id=attachment_id)
        if not ok:
            raise AttachmentNotFound(policy_id, attachment_id)
        log.info("detached policy=%s attachment=%s", policy_id, attachment_id)

    async def detach_all(self, policy_id: str) -> int:
        n = await self.store.delete_by_policy(policy_id)
        if n:
            log.info("detached all policy=%s count=%d", policy_id, n)
        return n

    async def list_for_policy(self, policy_id: str) -> List[AttachmentDoc]:
        return await self.store.list_by_policy(policy_id)

    async def list_for_principal(self, principal_urn: str) -> List[AttachmentDoc]:
        return await self.store.list_by_principal(principal_urn)

    async def available_policies(self, principal_urn: str, policies: Sequence[PolicyDoc]) -> List[PolicyDoc]:
        """Candidates for the attach picker: everything not already attached to principal_urn."""
        attached = {a.policy_id for a in await self.store.list_by_principal(principal_urn)}
        return [p for p in policies if p.id not in attached]
