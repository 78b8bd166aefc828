from .statement import Effect, Statement, ShapeError, ValidationError
from .policy import PolicyDoc
from .attachment import AttachmentDoc
from .catalog import ResourceType, ActionDefinition, ActionCategory, ResourceOption

__all__ = [
    "Effect",
    "Statement",
    "ShapeError",
    "ValidationError",
    "PolicyDoc",
    "AttachmentDoc",
    "ResourceType",
    "ActionDefinition",
    "ActionCategory",
    "ResourceOption",
]
