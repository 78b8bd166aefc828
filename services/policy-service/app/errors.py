from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models.statement import ShapeError, ValidationError


class PolicyServiceError(Exception):
    """Base for every rejected operation in the policy core."""


class UnknownResourceType(PolicyServiceError, LookupError):
    def __init__(self, resource_type_id: str):
        super().__init__(f"Unknown resource type: {resource_type_id}")
        self.resource_type_id = resource_type_id


class InvalidPrincipal(PolicyServiceError, ValueError):
    def __init__(self, principal_urn: str):
        super().__init__(f"Not a user or group URN: {principal_urn}")
        self.principal_urn = principal_urn


class AlreadyAttached(PolicyServiceError, ValueError):
    def __init__(self, policy_id: str, principal_urn: str):
        super().__init__(f"Policy {policy_id} is already attached to {principal_urn}")
        self.policy_id = policy_id
        self.principal_urn = principal_urn


class AttachmentNotFound(PolicyServiceError, LookupError):
    def __init__(self, policy_id: str, attachment_id: str):
        super().__init__(f"Attachment {attachment_id} not found on policy {policy_id}")
        self.policy_id = policy_id
        self.attachment_id = attachment_id


class EditorModeError(PolicyServiceError):
    pass


class InvalidStatements(PolicyServiceError, ValueError):
    """
    Raised only when a caller insists on a save payload while the editor holds
    invalid content. Carries the structured error for rendering.
    """

    def __init__(self, error: "ShapeError | ValidationError", detail: Optional[str] = None):
        super().__init__(detail or error.message)
        self.error = error
