"""
backend/shoreline/pages/routes.py

Page Routes
Server-rendered public pages (home, projects, about, contact) and the admin
login, error and dashboard pages.
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core import upload
from shoreline.core.config import settings
from shoreline.core.dependencies import CurrentUserOptional
from shoreline.database.session import get_db
from shoreline.project.services import ProjectService
from shoreline.site import schemas as site_schemas
from shoreline.site.services import SiteSettingService
from shoreline.tag.services import TagService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "pages"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["site_name"] = settings.SITE_NAME

router = APIRouter(tags=["Pages"], include_in_schema=False)

DBDep = Annotated[AsyncSession, Depends(get_db)]

RECENT_PROJECT_COUNT = 3
ACCESS_DENIED_MESSAGE = (
    "You don't have permission to access the admin panel. Please contact the administrator."
)
SIGN_IN_ERROR_MESSAGE = "An error occurred during sign in. Please try again."
SITE_CONTENT_LABELS: dict[str, str] = {
    site_schemas.LANDING_HERO_TITLE: "Hero title",
    site_schemas.LANDING_HERO_TAGLINE: "Hero tagline",
    site_schemas.LANDING_HERO_IMAGE_PUBLIC_ID: "Hero image public id",
    site_schemas.LANDING_HERO_IMAGE_POSITION: "Hero image position (JSON {x, y})",
    "about.ourStoryHeading": "About: story heading",
    "about.ourStoryBody": "About: story body",
    "about.whatWeDo": "About: what we do",
}


def hero_image_url(public_id: str | None) -> str | None:
    """Landing hero delivery URL, or None when unset or Cloudinary is unavailable."""
    if not public_id:
        return None
    try:
        return upload.optimized_image_url(public_id, width=1920, crop="limit", quality="auto", format="auto")
    except upload.CloudinaryNotConfigured:
        logger.warning("Landing hero image configured but Cloudinary is not.")
        return None


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request, db: DBDep) -> HTMLResponse:
    landing = await SiteSettingService(db).get_settings(list(site_schemas.LANDING_KEYS))
    page = await ProjectService(db).list_projects(limit=str(RECENT_PROJECT_COUNT))
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "hero_title": landing.get(site_schemas.LANDING_HERO_TITLE) or settings.SITE_NAME,
            "hero_tagline": landing.get(site_schemas.LANDING_HERO_TAGLINE),
            "hero_image": hero_image_url(landing.get(site_schemas.LANDING_HERO_IMAGE_PUBLIC_ID)),
            "hero_position": site_schemas.HeroPosition.from_setting(
                landing.get(site_schemas.LANDING_HERO_IMAGE_POSITION)
            ),
            "projects": page.projects,
        },
    )


@router.get("/projects", response_class=HTMLResponse)
async def projects_page(
    request: Request,
    db: DBDep,
    tag: str | None = Query(default=None),
    year: str | None = Query(default=None),
) -> HTMLResponse:
    service = ProjectService(db)
    return templates.TemplateResponse(
        request,
        "projects.html",
        {
            "projects": await service.list_projects(tag=tag, year=year),
            "years": await service.list_years(),
            "tags": await TagService(db).list_names(),
            "selected_tag": tag or "",
            "selected_year": year or "",
        },
    )


@router.get("/about", response_class=HTMLResponse)
async def about_page(request: Request, db: DBDep) -> HTMLResponse:
    about = await SiteSettingService(db).get_settings(list(site_schemas.ABOUT_KEYS))
    return templates.TemplateResponse(
        request,
        "about.html",
        {
            "heading": about.get("about.ourStoryHeading") or "Our Story",
            "body": about.get("about.ourStoryBody"),
            "what_we_do": about.get("about.whatWeDo"),
        },
    )


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "contact.html", {"turnstile_site_key": settings.TURNSTILE_SITE_KEY}
    )


@router.get("/admin/login", response_class=HTMLResponse)
async def admin_login_page(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "admin/login.html", {})


@router.get("/admin/error", response_class=HTMLResponse)
async def admin_error_page(request: Request, error: str | None = Query(default=None)) -> HTMLResponse:
    message = ACCESS_DENIED_MESSAGE if error == "AccessDenied" else SIGN_IN_ERROR_MESSAGE
    return templates.TemplateResponse(request, "admin/error.html", {"message": message})


@router.get("/admin", response_class=HTMLResponse, response_model=None)
async def admin_page(
    request: Request, user: CurrentUserOptional, db: DBDep
) -> HTMLResponse | RedirectResponse:
    """Dashboard with the project, tag and site content editors."""
    if user is None or not user.is_admin:
        return RedirectResponse(url="/admin/login", status_code=302)
    content = await SiteSettingService(db).get_settings(list(SITE_CONTENT_LABELS))
    return templates.TemplateResponse(
        request,
        "admin/dashboard.html",
        {
            "user": user,
            "projects": await ProjectService(db).list_projects(),
            "tags": await TagService(db).list_with_counts(),
            "site_content": [
                (key, label, content.get(key) or "") for key, label in SITE_CONTENT_LABELS.items()
            ],
        },
    )
