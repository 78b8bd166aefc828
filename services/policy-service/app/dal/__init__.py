from .policy_dal import PolicyDAL
from .attachment_dal import AttachmentDAL
from .memory import InMemoryPolicyStore, InMemoryAttachmentStore

__all__ = ["PolicyDAL", "AttachmentDAL", "InMemoryPolicyStore", "InMemoryAttachmentStore"]
