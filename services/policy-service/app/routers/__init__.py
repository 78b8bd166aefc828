from .health_routes import router as health_router
from .catalog_routes import router as catalog_router
from .admin_policies import router as admin_policies_router
from .policy_attachments import router as policy_attachments_router
from .principals import router as principals_router

__all__ = [
    "health_router",
    "catalog_router",
    "admin_policies_router",
    "policy_attachments_router",
    "principals_router",
]
