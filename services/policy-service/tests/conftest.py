import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.catalog import ActionCatalog, ResourceCatalog, default_categories, default_resource_types
from app.dal import InMemoryAttachmentStore, InMemoryPolicyStore
from app.main import app, init_state
from app.models import Statement
from app.services import AttachmentRegistry


@pytest.fixture
def resources() -> ResourceCatalog:
    return ResourceCatalog(default_resource_types("revet"))


@pytest.fixture
def actions() -> ActionCatalog:
    return ActionCatalog(default_categories("documents"))


@pytest.fixture
def policy_store() -> InMemoryPolicyStore:
    return InMemoryPolicyStore()


@pytest.fixture
def registry(resources) -> AttachmentRegistry:
    return AttachmentRegistry(store=InMemoryAttachmentStore(), resources=resources)


@pytest.fixture
def read_docs() -> Statement:
    return Statement(
        sid="ReadDocs",
        effect="Allow",
        actions=["documents:GetDocument", "documents:ListDocuments"],
        resources=["urn:revet:documents::document/*"],
    )


@pytest_asyncio.fixture
async def client():
    await init_state(app, backend="memory")
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
