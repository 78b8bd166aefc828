from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from ..errors import UnknownResourceType
from ..schemas.attachment import AttachedPolicyOut
from ..schemas.policy import PolicySummary

router = APIRouter(prefix="/admin/principals", tags=["admin.principals"])

log = logging.getLogger("policy.api")


def _principal_urn(request: Request, kind: str, principal_id: str) -> str:
    try:
        return request.app.state.resources.principal_urn(kind, principal_id)
    except UnknownResourceType:
        raise HTTPException(400, f"Unknown principal kind: {kind}")


@router.get("/{kind}/{principal_id}/policies")
async def list_principal_policies(request: Request, kind: str, principal_id: str):
    urn = _principal_urn(request, kind, principal_id)
    attachments = await request.app.state.attachment_registry.list_for_principal(urn)
    policies = await request.app.state.policy_store.get_many([a.policy_id for a in attachments])

    out = []
    for a in attachments:
        p = policies.get(a.policy_id)
        if p is None:
            log.warning("attachment without policy attachment=%s policy=%s", a.attachment_id, a.policy_id)
            continue
        out.append(AttachedPolicyOut(attachment_id=a.attachment_id, attached_on=a.attached_on, policy=PolicySummary.from_doc(p)))
    return {"principal_urn": urn, "items": out}


@router.get("/{kind}/{principal_id}/available-policies")
async def list_available_policies(request: Request, kind: str, principal_id: str, limit: int = 200, skip: int = 0):
    urn = _principal_urn(request, kind, principal_id)
    policies = await request.app.state.policy_store.list(limit=limit, skip=skip)
    available = await request.app.state.attachment_registry.available_policies(urn, policies)
    return {"principal_urn": urn, "items": [PolicySummary.from_doc(p) for p in available]}
