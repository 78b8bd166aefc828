from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from motor.motor_asyncio import AsyncIOMotorClient

from .logger import setup_logging
from .settings import settings
from .middleware.request_logging import RequestLoggingMiddleware
from .catalog import ActionCatalog, ResourceCatalog, default_categories, default_resource_types
from .dal import AttachmentDAL, InMemoryAttachmentStore, InMemoryPolicyStore, PolicyDAL
from .services.attachments import AttachmentRegistry

from .routers.health_routes import router as health_router
from .routers.catalog_routes import router as catalog_router
from .routers.admin_policies import router as admin_policies_router
from .routers.policy_attachments import router as policy_attachments_router
from .routers.principals import router as principals_router

setup_logging()
log = logging.getLogger("policy")

app = FastAPI(title="Policy Service (Statements / Attachments)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)


async def init_state(target: FastAPI, backend: Optional[str] = None) -> None:
    """
    Build catalogs and stores and hang them on target.state.

    Catalogs are built once here and shared read-only by every request.
    """
    backend = backend or settings.STORE_BACKEND

    resources = ResourceCatalog(default_resource_types(settings.URN_NAMESPACE))
    actions = ActionCatalog(default_categories(settings.ACTION_SERVICE))

    if backend == "memory":
        policy_store = InMemoryPolicyStore()
        attachment_store = InMemoryAttachmentStore()
    else:
        log.info("mongo connect mongo_db=%s", settings.MONGO_DB)
        client = AsyncIOMotorClient(settings.MONGO_URI)
        db = client[settings.MONGO_DB]
        target.state.mongo_client = client
        target.state.mongo_db = db
        policy_store = PolicyDAL(db)
        attachment_store = AttachmentDAL(db)

    # indexes
    await policy_store.ensure_indexes()
    await attachment_store.ensure_indexes()

    target.state.store_backend = backend
    target.state.resources = resources
    target.state.actions = actions
    target.state.policy_store = policy_store
    target.state.attachment_registry = AttachmentRegistry(store=attachment_store, resources=resources)


@app.on_event("startup")
async def startup():
    log.info("startup begin backend=%s namespace=%s", settings.STORE_BACKEND, settings.URN_NAMESPACE)
    await init_state(app)
    log.info("startup complete")


@app.on_event("shutdown")
async def shutdown():
    c = getattr(app.state, "mongo_client", None)
    if c:
        c.close()


app.include_router(health_router)
app.include_router(catalog_router)
app.include_router(admin_policies_router)
app.include_router(policy_attachments_router)
app.include_router(principals_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
