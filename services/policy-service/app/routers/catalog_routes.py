from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from ..errors import UnknownResourceType
from ..schemas.catalog import ResolveUrnRequest, UrnOut

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/actions")
async def list_actions(request: Request, q: str = ""):
    actions = request.app.state.actions
    return {"items": [c.model_dump() for c in actions.search(q)]}


@router.get("/resource-types")
async def list_resource_types(request: Request):
    resources = request.app.state.resources
    return {
        "items": [
            {**t.model_dump(), "placeholder": t.placeholder}
            for t in resources.types()
        ]
    }


@router.get("/resources/label", response_model=UrnOut)
async def label_urn(request: Request, urn: str):
    resources = request.app.state.resources
    t = resources.reverse_match(urn)
    return UrnOut(urn=urn, label=resources.label(urn), resource_type=t.id if t else None)


@router.post("/resources/resolve", response_model=UrnOut)
async def resolve_urn(request: Request, body: ResolveUrnRequest):
    resources = request.app.state.resources
    try:
        urn = resources.resolve(body.resource_type, body.identifier)
    except UnknownResourceType as e:
        raise HTTPException(404, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return UrnOut(urn=urn, label=resources.label(urn), resource_type=body.resource_type)
