"""
tests/pages/test_page_routes.py

Tests for pages/routes.py covering:
- Public pages render with their data
- Admin login and error pages
- Dashboard access control and its project, tag and site content editors
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import status
from httpx import AsyncClient

from shoreline.database.models import User
from shoreline.project import schemas as project_schemas
from shoreline.project import services as project_services
from shoreline.site import services as site_services
from shoreline.tag import schemas as tag_schemas
from shoreline.tag import services as tag_services


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "list_projects", new_callable=AsyncMock)
@patch.object(site_services.SiteSettingService, "get_settings", new_callable=AsyncMock)
async def test_home_page(
    mock_settings: AsyncMock,
    mock_projects: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_list_item: project_schemas.ProjectListItem,
) -> None:
    mock_settings.return_value = {
        "landing.heroTitle": "Built by hand",
        "landing.heroTagline": "Furniture from the South Shore",
        "landing.heroImagePublicId": None,
        "landing.heroImagePosition": None,
    }
    mock_projects.return_value = project_schemas.ProjectPage(
        projects=[fake_project_list_item], has_more=False
    )

    response = await async_client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert "<h1>Shoreline Woodworks</h1>" in response.text
    assert "Furniture from the South Shore" in response.text
    assert "Walnut Dining Table" in response.text
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["x-content-type-options"] == "nosniff"
    mock_projects.assert_awaited_once_with(limit="3")


@pytest.mark.asyncio
@patch.object(tag_services.TagService, "list_names", new_callable=AsyncMock)
@patch.object(project_services.ProjectService, "list_years", new_callable=AsyncMock)
@patch.object(project_services.ProjectService, "list_projects", new_callable=AsyncMock)
async def test_projects_page_with_filters(
    mock_projects: AsyncMock,
    mock_years: AsyncMock,
    mock_tags: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_list_item: project_schemas.ProjectListItem,
) -> None:
    mock_projects.return_value = [fake_project_list_item]
    mock_years.return_value = [2025, 2024]
    mock_tags.return_value = ["Chairs", "Tables"]

    response = await async_client.get("/projects?tag=Tables&year=2025")

    assert response.status_code == status.HTTP_200_OK
    assert "<h1>Projects</h1>" in response.text
    assert '<option value="Tables" selected>' in response.text
    assert '<option value="2025" selected>' in response.text
    mock_projects.assert_awaited_once_with(tag="Tables", year="2025")


@pytest.mark.asyncio
@patch.object(site_services.SiteSettingService, "get_settings", new_callable=AsyncMock)
async def test_about_page(
    mock_settings: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    mock_settings.return_value = {
        "about.ourStoryHeading": "How it started",
        "about.ourStoryBody": "A garage and a table saw.",
        "about.whatWeDo": None,
    }
    response = await async_client.get("/about")
    assert response.status_code == status.HTTP_200_OK
    assert "<h1>About</h1>" in response.text
    assert "How it started" in response.text
    assert "What We Do" not in response.text


@pytest.mark.asyncio
async def test_contact_page(async_client: AsyncClient) -> None:
    response = await async_client.get("/contact")
    assert response.status_code == status.HTTP_200_OK
    assert "<h1>Contact</h1>" in response.text
    assert "cf-turnstile" in response.text


@pytest.mark.asyncio
async def test_admin_login_page(async_client: AsyncClient) -> None:
    response = await async_client.get("/admin/login")
    assert response.status_code == status.HTTP_200_OK
    assert "<h1>Admin Login</h1>" in response.text
    assert "Sign in to manage Shoreline Woodworks" in response.text
    assert 'href="/auth/google/login"' in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error, expected",
    [
        ("AccessDenied", "permission to access the admin panel"),
        ("OAuthCallback", "An error occurred during sign in. Please try again."),
    ],
)
async def test_admin_error_page(error: str, expected: str, async_client: AsyncClient) -> None:
    response = await async_client.get(f"/admin/error?error={error}")
    assert response.status_code == status.HTTP_200_OK
    assert "Authentication Error" in response.text
    assert expected in response.text


@pytest.mark.asyncio
async def test_admin_dashboard_redirects_anonymous(
    mock_anonymous_session: None,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.get("/admin")
    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"] == "/admin/login"


@pytest.mark.asyncio
async def test_admin_dashboard_redirects_non_admin(
    mock_visitor_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.get("/admin")
    assert response.status_code == status.HTTP_302_FOUND


@pytest.mark.asyncio
@patch.object(site_services.SiteSettingService, "get_settings", new_callable=AsyncMock)
@patch.object(tag_services.TagService, "list_with_counts", new_callable=AsyncMock)
@patch.object(project_services.ProjectService, "list_projects", new_callable=AsyncMock)
async def test_admin_dashboard_for_admin(
    mock_projects: AsyncMock,
    mock_tags: AsyncMock,
    mock_settings: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_list_item: project_schemas.ProjectListItem,
) -> None:
    tag_id = uuid4()
    mock_projects.return_value = [fake_project_list_item]
    mock_tags.return_value = [tag_schemas.TagRead(id=tag_id, name="Tables", project_count=4)]
    mock_settings.return_value = {"landing.heroTitle": "Handmade in Halifax"}

    response = await async_client.get("/admin")

    assert response.status_code == status.HTTP_200_OK
    html = response.text
    assert "Admin Dashboard" in html
    assert "Shop Owner" in html
    assert 'data-action="/api/projects"' in html
    assert f'data-action="/api/projects/{fake_project_list_item.id}"' in html
    assert 'value="projects/20250201-000001/table" checked' in html
    assert "/api/projects/order" in html
    assert "Category / Tag Editor" in html
    assert f'data-tag-id="{tag_id}"' in html
    assert 'data-key="landing.heroTitle"' in html
    assert "Handmade in Halifax" in html
    assert 'data-key="about.whatWeDo"' in html
    assert "landing.heroTitle" in mock_settings.await_args.args[0]
