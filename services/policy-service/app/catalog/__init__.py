from .actions import ActionCatalog, default_categories, toggle
from .resources import ResourceCatalog, default_resource_types

__all__ = [
    "ActionCatalog",
    "ResourceCatalog",
    "default_categories",
    "default_resource_types",
    "toggle",
]
