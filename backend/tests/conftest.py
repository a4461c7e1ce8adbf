"""
tests/conftest.py

Test fixtures for API and unit tests.
Includes the async client, fake users, sample projects and dependency overrides.
"""

from collections.abc import AsyncGenerator, Generator
from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shoreline.core.dependencies import get_current_user_optional
from shoreline.core.limiter import limiter
from shoreline.database.models import User
from shoreline.database.session import get_db
from shoreline.main import app
from shoreline.project import schemas as project_schemas

limiter.enabled = False


# --- Core Test Fixtures ---


@pytest.fixture(scope="session")
def transport() -> ASGITransport:
    """Fixture for ASGI transport."""
    return ASGITransport(app=app)


@pytest_asyncio.fixture(scope="function")
async def async_client(transport: ASGITransport) -> AsyncGenerator[AsyncClient, None]:
    """Fixture for HTTP async client."""
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# --- Fake User Fixtures ---


@pytest.fixture
def fake_admin_user() -> User:
    return User(
        id=uuid4(),
        email="owner@shorelinewoodworks.ca",
        name="Shop Owner",
        image=None,
        email_verified=True,
        is_admin=True,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_visitor_user() -> User:
    """A signed-in user that is not an admin."""
    return User(
        id=uuid4(),
        email="visitor@example.com",
        name="Visitor",
        image=None,
        email_verified=True,
        is_admin=False,
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


# --- Dependency Override Fixtures ---


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest_asyncio.fixture
async def override_get_db(mock_db: AsyncMock) -> AsyncGenerator[AsyncMock, None]:
    """Override for the database dependency."""

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield mock_db

    app.dependency_overrides[get_db] = _override
    yield mock_db
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def mock_admin_session(fake_admin_user: User) -> Generator[User, None, None]:
    """Signed in as an admin."""
    app.dependency_overrides[get_current_user_optional] = lambda: fake_admin_user
    yield fake_admin_user
    app.dependency_overrides.pop(get_current_user_optional, None)


@pytest.fixture
def mock_visitor_session(fake_visitor_user: User) -> Generator[User, None, None]:
    """Signed in as a non-admin."""
    app.dependency_overrides[get_current_user_optional] = lambda: fake_visitor_user
    yield fake_visitor_user
    app.dependency_overrides.pop(get_current_user_optional, None)


@pytest.fixture
def mock_anonymous_session() -> Generator[None, None, None]:
    """No session at all."""
    app.dependency_overrides[get_current_user_optional] = lambda: None
    yield
    app.dependency_overrides.pop(get_current_user_optional, None)


# --- Fake Data Fixtures (Schema Instances) ---


@pytest.fixture
def fake_project_read() -> project_schemas.ProjectRead:
    project_id = uuid4()
    image_id = uuid4()
    return project_schemas.ProjectRead(
        id=project_id,
        title="Walnut Dining Table",
        description="Live edge walnut with a steel base.",
        featured=True,
        image_url="https://res.cloudinary.com/demo/image/upload/v1/projects/20250201-000001/table.jpg",
        image_public_id="projects/20250201-000001/table",
        cloudinary_folder="projects/20250201-000001",
        display_order=0,
        date_is_month_only=False,
        created_at=datetime(2025, 2, 1, 0, 0, 1, tzinfo=timezone.utc),
        updated_at=datetime(2025, 2, 1, 0, 0, 1, tzinfo=timezone.utc),
        tags=["Tables"],
        images=[
            project_schemas.ProjectImageRead(
                id=image_id,
                project_id=project_id,
                image_url="https://res.cloudinary.com/demo/image/upload/v1/projects/20250201-000001/table.jpg",
                image_public_id="projects/20250201-000001/table",
                sort_order=0,
                created_at=datetime(2025, 2, 1, tzinfo=timezone.utc),
            )
        ],
    )


@pytest.fixture
def fake_project_list_item(
    fake_project_read: project_schemas.ProjectRead,
) -> project_schemas.ProjectListItem:
    data = fake_project_read.model_dump(exclude={"images"})
    data["image_url"] = (
        "https://res.cloudinary.com/demo/image/upload/f_auto,q_auto/v1/projects/20250201-000001/table.jpg"
    )
    return project_schemas.ProjectListItem(
        **data,
        images=[
            project_schemas.ProjectListImage(
                image_url=data["image_url"], image_public_id=data["image_public_id"]
            )
        ],
    )
