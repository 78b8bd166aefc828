from __future__ import annotations

import logging
from typing import Any, Tuple

from fastapi import APIRouter, HTTPException, Request

from ..models.statement import Statement
from ..schemas.policy import PolicyCreate, PolicyOut, PolicyReplace, StatementsText
from ..services.statement_codec import ParseOk, parse, parse_documents

router = APIRouter(prefix="/admin/policies", tags=["admin.policies"])

log = logging.getLogger("policy.api")


def _statements_or_422(raw: Any) -> Tuple[Statement, ...]:
    result = parse_documents(raw)
    if not isinstance(result, ParseOk):
        log.info("rejected statements kind=%s index=%s field=%s", result.kind, result.statement_index, result.field)
        raise HTTPException(422, result.model_dump())
    return result.statements


@router.post("")
async def create_policy(request: Request, payload: PolicyCreate):
    store = request.app.state.policy_store
    name = payload.name.strip()
    if not name:
        raise HTTPException(400, "Missing name")
    statements = _statements_or_422(payload.statements)
    try:
        p = await store.create(
            name=name,
            description=(payload.description or "").strip() or None,
            version=payload.version.strip() or "1.0",
            statements=statements,
        )
    except ValueError as e:
        raise HTTPException(409, str(e))
    return PolicyOut.from_doc(p)


@router.get("")
async def list_policies(request: Request, limit: int = 200, skip: int = 0):
    store = request.app.state.policy_store
    return {"items": [PolicyOut.from_doc(p) for p in await store.list(limit=limit, skip=skip)]}


@router.post("/statements/validate")
async def validate_statements(payload: StatementsText):
    """
    Raw-editor check: JSON text in, tagged result out (ok / shape / validation).
    Always 200; the verdict is in "kind".
    """
    result = parse(payload.text)
    if isinstance(result, ParseOk):
        return {"kind": "ok", "statements": [s.to_document() for s in result.statements]}
    return result.model_dump()


@router.get("/{policy_id}")
async def get_policy(request: Request, policy_id: str):
    store = request.app.state.policy_store
    p = await store.get(policy_id)
    if not p:
        raise HTTPException(404, "Not found")
    return PolicyOut.from_doc(p)


@router.put("/{policy_id}")
async def replace_policy(request: Request, policy_id: str, payload: PolicyReplace):
    store = request.app.state.policy_store
    name = payload.name.strip()
    if not name:
        raise HTTPException(400, "Missing name")
    statements = _statements_or_422(payload.statements)
    try:
        p = await store.replace(
            id=policy_id,
            name=name,
            description=(payload.description or "").strip() or None,
            version=payload.version.strip() or "1.0",
            statements=statements,
        )
    except ValueError as e:
        raise HTTPException(409, str(e))
    if not p:
        raise HTTPException(404, "Not found")
    return PolicyOut.from_doc(p)


@router.delete("/{policy_id}")
async def delete_policy(request: Request, policy_id: str):
    store = request.app.state.policy_store
    ok = await store.delete(id=policy_id)
    if not ok:
        raise HTTPException(404, "Not found")
    detached = await request.app.state.attachment_registry.detach_all(policy_id)
    return {"ok": True, "detached": detached}
