from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    return {"ok": True}


@router.get("/readyz")
def readyz(request: Request):
    ready = getattr(request.app.state, "attachment_registry", None) is not None
    return {"ready": ready, "backend": getattr(request.app.state, "store_backend", None)}
