from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from ..errors import AlreadyAttached, AttachmentNotFound, InvalidPrincipal
from ..schemas.attachment import AttachmentOut, AttachRequest

router = APIRouter(prefix="/admin/policies", tags=["admin.attachments"])

log = logging.getLogger("policy.api")


async def _require_policy(request: Request, policy_id: str) -> None:
    if not await request.app.state.policy_store.get(policy_id):
        raise HTTPException(404, "Policy not found")


@router.get("/{policy_id}/attachments")
async def list_attachments(request: Request, policy_id: str):
    await _require_policy(request, policy_id)
    registry = request.app.state.attachment_registry
    resources = request.app.state.resources
    items = await registry.list_for_policy(policy_id)
    return {"items": [AttachmentOut.from_doc(a, resources.principal_label(a.principal_urn)) for a in items]}


@router.post("/{policy_id}/attachments")
async def attach_policy(request: Request, policy_id: str, payload: AttachRequest):
    await _require_policy(request, policy_id)
    registry = request.app.state.attachment_registry
    try:
        a = await registry.attach(policy_id, payload.principal_urn)
    except InvalidPrincipal as e:
        raise HTTPException(400, str(e))
    except AlreadyAttached as e:
        raise HTTPException(409, str(e))

    # policy deleted while attaching: its detach_all may already have run
    if not await request.app.state.policy_store.get(policy_id):
        try:
            await registry.detach(policy_id, a.attachment_id)
        except AttachmentNotFound:
            log.info("attachment already removed by policy delete attachment=%s", a.attachment_id)
        log.warning("attach raced policy delete policy=%s attachment=%s", policy_id, a.attachment_id)
        raise HTTPException(404, "Policy not found")
    return AttachmentOut.from_doc(a, request.app.state.resources.principal_label(a.principal_urn))


@router.delete("/{policy_id}/attachments/{attachment_id}")
async def detach_policy(request: Request, policy_id: str, attachment_id: str):
    registry = request.app.state.attachment_registry
    try:
        await registry.detach(policy_id, attachment_id)
    except AttachmentNotFound as e:
        raise HTTPException(404, str(e))
    return {"ok": True}
