"""
tests/project/test_project_routes.py

Tests for project/routes.py covering:
- Public listing, years and detail
- Admin create (JSON and multipart), update, delete and reorder
- Admin-only restricted access
"""

from uuid import uuid4
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from httpx import AsyncClient

from shoreline.core.exceptions import APIError
from shoreline.database.models import User
from shoreline.project import schemas
from shoreline.project import services as project_services


# --- Public Endpoints ---
@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "list_projects", new_callable=AsyncMock)
async def test_list_projects_returns_camel_case_items(
    mock_list: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_list_item: schemas.ProjectListItem,
) -> None:
    mock_list.return_value = [fake_project_list_item]
    response = await async_client.get("/api/projects?tag=Tables&year=2025")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["title"] == "Walnut Dining Table"
    assert data[0]["tags"] == ["Tables"]
    assert "f_auto,q_auto" in data[0]["imageUrl"]
    assert data[0]["cloudinaryFolder"] == "projects/20250201-000001"
    mock_list.assert_awaited_once_with(
        tag="Tables", featured=None, year="2025", limit=None, offset=None
    )


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "list_projects", new_callable=AsyncMock)
async def test_list_projects_paginated(
    mock_list: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_list_item: schemas.ProjectListItem,
) -> None:
    mock_list.return_value = schemas.ProjectPage(projects=[fake_project_list_item], has_more=True)
    response = await async_client.get("/api/projects?limit=1&offset=0")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["hasMore"] is True
    assert len(data["projects"]) == 1


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "list_years", new_callable=AsyncMock)
async def test_list_project_years(
    mock_years: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    mock_years.return_value = [2025, 2023]
    response = await async_client.get("/api/projects/years")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [2025, 2023]


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "get_project", new_callable=AsyncMock)
async def test_get_project(
    mock_get: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_read: schemas.ProjectRead,
) -> None:
    mock_get.return_value = fake_project_read
    response = await async_client.get(f"/api/projects/{fake_project_read.id}")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == str(fake_project_read.id)
    assert data["images"][0]["imagePublicId"] == "projects/20250201-000001/table"
    assert data["images"][0]["sortOrder"] == 0
    mock_get.assert_awaited_once_with(fake_project_read.id)


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "get_project", new_callable=AsyncMock)
async def test_get_project_not_found(
    mock_get: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    mock_get.side_effect = APIError(status.HTTP_404_NOT_FOUND, "Project not found")
    response = await async_client.get(f"/api/projects/{uuid4()}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Project not found"}


@pytest.mark.asyncio
async def test_get_project_malformed_id_is_not_found(
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.get("/api/projects/not-a-uuid")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Project not found"}


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "delete_project", new_callable=AsyncMock)
async def test_delete_project_malformed_id_is_not_found(
    mock_delete: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.delete("/api/projects/12345")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Project not found"}
    mock_delete.assert_not_awaited()


# --- Admin Create ---
@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "create_from_json", new_callable=AsyncMock)
async def test_create_project_from_json(
    mock_create: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_read: schemas.ProjectRead,
) -> None:
    mock_create.return_value = fake_project_read
    payload = {
        "title": "Walnut Dining Table",
        "tags": ["Tables", " "],
        "featured": True,
        "thumbnailIndex": 0,
        "uploadedImages": [
            {"secureUrl": "https://res.cloudinary.com/demo/image/upload/v1/a.jpg", "publicId": "projects/x/a"}
        ],
        "cloudinaryFolder": "projects/20250201-000001",
    }
    response = await async_client.post("/api/projects", json=payload)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["title"] == "Walnut Dining Table"

    sent: schemas.ProjectCreate = mock_create.await_args.args[0]
    assert sent.tags == ["Tables"]
    assert sent.featured is True
    assert sent.uploaded_images[0].public_id == "projects/x/a"
    assert sent.cloudinary_folder == "projects/20250201-000001"


@pytest.mark.asyncio
async def test_create_project_invalid_json(
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.post(
        "/api/projects",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Invalid JSON body"}


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "create_from_form", new_callable=AsyncMock)
async def test_create_project_from_multipart(
    mock_create: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_read: schemas.ProjectRead,
) -> None:
    mock_create.return_value = fake_project_read
    response = await async_client.post(
        "/api/projects",
        data={"title": "Cedar Chest", "tags": '["Storage"]', "featured": "true", "thumbnailIndex": "0"},
        files={"image": ("chest.jpg", b"\xff\xd8\xff\xe0fakejpeg", "image/jpeg")},
    )
    assert response.status_code == status.HTTP_201_CREATED

    form: schemas.ProjectForm = mock_create.await_args.args[0]
    assert form.title == "Cedar Chest"
    assert form.tag_names == ["Storage"]
    assert form.featured == "true"
    assert len(form.images) == 1


@pytest.mark.asyncio
async def test_create_project_requires_session(
    mock_anonymous_session: None,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.post("/api/projects", json={"title": "x"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_create_project_forbidden_for_non_admin(
    mock_visitor_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.post("/api/projects", json={"title": "x"})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "Forbidden"}


# --- Admin Update / Delete / Reorder ---
@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "update_project", new_callable=AsyncMock)
async def test_update_project(
    mock_update: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    fake_project_read: schemas.ProjectRead,
) -> None:
    mock_update.return_value = fake_project_read
    response = await async_client.patch(
        f"/api/projects/{fake_project_read.id}",
        data={
            "title": "Walnut Dining Table",
            "keepPublicIds": ["projects/20250201-000001/table"],
            "projectDateYear": "2025",
            "projectDateMonth": "2",
        },
    )
    assert response.status_code == status.HTTP_200_OK
    project_id, form = mock_update.await_args.args
    assert project_id == fake_project_read.id
    assert form.keep_public_ids == ["projects/20250201-000001/table"]
    assert form.project_date_year == "2025"
    assert form.project_date_day is None
    assert form.images == []


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "delete_project", new_callable=AsyncMock)
async def test_delete_project(
    mock_delete: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    project_id = uuid4()
    response = await async_client.delete(f"/api/projects/{project_id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    mock_delete.assert_awaited_once_with(project_id)


@pytest.mark.asyncio
@patch.object(project_services.ProjectService, "reorder_projects", new_callable=AsyncMock)
async def test_reorder_projects(
    mock_reorder: AsyncMock,
    mock_admin_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    ids = [str(uuid4()), str(uuid4())]
    response = await async_client.patch("/api/projects/order", json={"orderedIds": ids})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    mock_reorder.assert_awaited_once_with(ids)


@pytest.mark.asyncio
async def test_reorder_projects_requires_admin(
    mock_visitor_session: User,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    response = await async_client.patch("/api/projects/order", json={"orderedIds": [str(uuid4())]})
    assert response.status_code == status.HTTP_403_FORBIDDEN
