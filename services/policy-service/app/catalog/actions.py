"""
Action catalog: the static taxonomy of permission identifiers.

Naming convention: <service>:<Verb>   e.g. documents:GetDocument
Wildcards:         <service>:*        every action of one service
                   *                  every action of every service

The catalog is reference data only. Which actions a statement carries is
decided by the caller (see toggle()).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.catalog import ActionCategory, ActionDefinition


# ------------------------------------------------------------------------------
# Default taxonomy: (category, description, [(verb, label, description), ...])
# ------------------------------------------------------------------------------
_TAXONOMY: List[Tuple[str, str, List[Tuple[str, str, str]]]] = [
    ("Organization", "Organization management actions", [
        ("ListOrganizations", "List Organizations", "View all organizations"),
        ("GetOrganization", "Get Organization", "View organization details"),
        ("CreateOrganization", "Create Organization", "Create new organizations"),
        ("UpdateOrganization", "Update Organization", "Modify organization settings"),
        ("DeleteOrganization", "Delete Organization", "Remove organizations"),
    ]),
    ("Project", "Project management actions", [
        ("ListProjects", "List Projects", "View all projects"),
        ("GetProject", "Get Project", "View project details"),
        ("CreateProject", "Create Project", "Create new projects"),
        ("UpdateProject", "Update Project", "Modify project settings"),
        ("DeleteProject", "Delete Project", "Remove projects"),
        ("AddProjectClient", "Add Project Client", "Add clients to projects"),
        ("RemoveProjectClient", "Remove Project Client", "Remove clients from projects"),
        ("AddProjectTag", "Add Project Tag", "Add tags to projects"),
        ("RemoveProjectTag", "Remove Project Tag", "Remove tags from projects"),
    ]),
    ("Document", "Document management actions", [
        ("ListDocuments", "List Documents", "View all documents"),
        ("GetDocument", "Get Document", "View document details"),
        ("CreateDocument", "Create Document", "Create new documents"),
        ("UpdateDocument", "Update Document", "Modify document metadata"),
        ("DeleteDocument", "Delete Document", "Remove documents"),
        ("DownloadDocument", "Download Document", "Download document files"),
        ("AddDocumentTag", "Add Document Tag", "Add tags to documents"),
        ("RemoveDocumentTag", "Remove Document Tag", "Remove tags from documents"),
    ]),
    ("Document Version", "Document version actions", [
        ("ListDocumentVersions", "List Versions", "View all document versions"),
        ("GetDocumentVersion", "Get Version", "View version details"),
        ("CreateDocumentVersion", "Create Version", "Create new document versions"),
        ("UpdateDocumentVersion", "Update Version", "Modify version metadata"),
        ("DeleteDocumentVersion", "Delete Version", "Remove document versions"),
        ("CompleteDocumentUpload", "Complete Upload", "Complete document upload process"),
    ]),
    ("Category", "Category management actions", [
        ("ListCategories", "List Categories", "View all categories"),
        ("GetCategory", "Get Category", "View category details"),
        ("CreateCategory", "Create Category", "Create new categories"),
        ("UpdateCategory", "Update Category", "Modify category settings"),
        ("DeleteCategory", "Delete Category", "Remove categories"),
    ]),
    ("Tag", "Tag management actions", [
        ("ListTags", "List Tags", "View all tags"),
        ("GetTag", "Get Tag", "View tag details"),
        ("CreateTag", "Create Tag", "Create new tags"),
        ("UpdateTag", "Update Tag", "Modify tag settings"),
        ("DeleteTag", "Delete Tag", "Remove tags"),
    ]),
    ("Bucket", "Storage bucket actions", [
        ("ListBuckets", "List Buckets", "View all storage buckets"),
        ("GetBucket", "Get Bucket", "View bucket details"),
        ("CreateBucket", "Create Bucket", "Create new storage buckets"),
        ("UpdateBucket", "Update Bucket", "Modify bucket settings"),
        ("DeleteBucket", "Delete Bucket", "Remove storage buckets"),
    ]),
    ("User", "User management actions", [
        ("ListUsers", "List Users", "View all users"),
        ("GetUser", "Get User", "View user details"),
        ("CreateUser", "Create User", "Create new users"),
        ("UpdateUser", "Update User", "Modify user settings"),
        ("DeleteUser", "Delete User", "Remove users"),
    ]),
    ("File Upload", "File upload actions", [
        ("InitiateUpload", "Initiate Upload", "Start file upload process"),
        ("GetDownloadUrl", "Get Download URL", "Get presigned download URLs"),
        ("CreateVersionWithUrl", "Create Version with URL", "Create version from external URL"),
    ]),
    ("Search", "Search actions", [
        ("SearchDocuments", "Search Documents", "Search across documents"),
    ]),
]

GLOBAL_WILDCARD = "*"


def action_key(service: str, verb: str) -> str:
    return f"{service}:{verb}"


def default_categories(service: str = "documents") -> Tuple[ActionCategory, ...]:
    cats = [
        ActionCategory(
            name=name,
            description=desc,
            actions=tuple(
                ActionDefinition(action=action_key(service, verb), label=label, description=d)
                for (verb, label, d) in actions
            ),
        )
        for (name, desc, actions) in _TAXONOMY
    ]
    cats.append(
        ActionCategory(
            name="Wildcards",
            description="Wildcard actions for broad permissions",
            actions=(
                ActionDefinition(
                    action=action_key(service, "*"),
                    label=f"All {service.capitalize()} Actions",
                    description=f"All actions in the {service.capitalize()} service",
                ),
                ActionDefinition(
                    action=GLOBAL_WILDCARD,
                    label="Global Wildcard",
                    description="All actions across all services",
                ),
            ),
        )
    )
    return tuple(cats)


class ActionCatalog:
    def __init__(self, categories: Iterable[ActionCategory]):
        self._categories: Tuple[ActionCategory, ...] = tuple(categories)
        self._by_action: Dict[str, ActionDefinition] = {}
        for cat in self._categories:
            for a in cat.actions:
                # first definition wins, matching lookup order of categories()
                self._by_action.setdefault(a.action, a)

    def categories(self) -> Tuple[ActionCategory, ...]:
        return self._categories

    def all_actions(self) -> List[ActionDefinition]:
        return [a for cat in self._categories for a in cat.actions]

    def actions_in(self, category_name: str) -> Tuple[ActionDefinition, ...]:
        for cat in self._categories:
            if cat.name == category_name:
                return cat.actions
        return ()

    def get(self, action: str) -> Optional[ActionDefinition]:
        return self._by_action.get(action)

    def is_known(self, action: str) -> bool:
        return action in self._by_action

    def label_of(self, action: str) -> str:
        found = self._by_action.get(action)
        return found.label if found else action

    def search(self, query: str) -> List[ActionCategory]:
        """
        Case-insensitive match on label, action or description.
        Categories left without actions are dropped.
        """
        if not query:
            return list(self._categories)
        q = query.lower()
        out: List[ActionCategory] = []
        for cat in self._categories:
            hits = tuple(
                a for a in cat.actions
                if q in a.label.lower() or q in a.action.lower() or q in a.description.lower()
            )
            if hits:
                out.append(cat.model_copy(update={"actions": hits}))
        return out


def toggle(values: Sequence[str], item: str) -> List[str]:
    """Add item if absent, else remove every occurrence of it."""
    if item in values:
        return [v for v in values if v != item]
    return [*values, item]
