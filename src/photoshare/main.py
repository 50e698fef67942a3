from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable
from urllib.parse import urlparse

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict, field_validator

from .adapters.photos import PhotoSource, PhotoSourceError, PicsumPhotoSource
from .domain.models import GalleryState, PhotoRecord
from .gallery import GalleryStateManager
from .logging_setup import configure_logging
from .settings import AppSettings, load_settings
from .uploads import UploadStore

LOGGER = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
WEB_DIR = BASE_DIR / "web"
TEMPLATES_DIR = WEB_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter()


class UrlUploadRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        # Blank input is passed through; the gallery treats it as a no-op.
        if not value.strip():
            return value
        parsed = urlparse(value.strip())
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value


class SelectionRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    photo_id: str | None = None


def build_photo_source(settings: AppSettings) -> PicsumPhotoSource:
    api = settings.yaml.api
    return PicsumPhotoSource(
        base_url=api.base_url,
        timeout_seconds=api.timeout_seconds,
        user_agent=api.user_agent,
    )


def _get_settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _get_gallery(request: Request) -> GalleryStateManager:
    return request.app.state.gallery


def _serialize_photo(photo: PhotoRecord, base_url: str) -> dict[str, Any]:
    return {
        **photo.model_dump(mode="json"),
        "thumbnail_url": photo.thumbnail_url(base_url=base_url),
        "full_size_url": photo.full_size_url(base_url=base_url),
    }


def _serialize_state(state: GalleryState, *, page: int, base_url: str) -> dict[str, Any]:
    selected = state.selected_photo
    return {
        "photos": [_serialize_photo(photo, base_url) for photo in state.photos],
        "is_loading": state.is_loading,
        "error": state.error,
        "selected_photo": _serialize_photo(selected, base_url) if selected is not None else None,
        "page": page,
        "count": len(state.photos),
    }


def _state_response(request: Request, state: GalleryState) -> JSONResponse:
    settings = _get_settings(request)
    gallery = _get_gallery(request)
    return JSONResponse(
        _serialize_state(state, page=gallery.current_page, base_url=settings.yaml.api.base_url)
    )


@router.get("/", response_class=HTMLResponse)
async def gallery_page(request: Request) -> HTMLResponse:
    settings = _get_settings(request)
    gallery = _get_gallery(request)
    context = _serialize_state(
        gallery.state,
        page=gallery.current_page,
        base_url=settings.yaml.api.base_url,
    )
    return templates.TemplateResponse(
        request,
        "gallery.html",
        {
            "title": settings.yaml.ui.title,
            "columns": settings.yaml.ui.columns,
            "environment": settings.env.photoshare_env,
            **context,
        },
    )


@router.get("/photos/{photo_id}", response_class=HTMLResponse)
async def photo_detail_page(request: Request, photo_id: str) -> HTMLResponse:
    settings = _get_settings(request)
    gallery = _get_gallery(request)

    photo = gallery.find_photo(photo_id)
    if photo is None:
        try:
            photo = await gallery.source.fetch_by_id(photo_id)
        except (PhotoSourceError, ValueError) as exc:
            raise HTTPException(status_code=404, detail="Photo not found") from exc

    gallery.select_photo(photo)
    return templates.TemplateResponse(
        request,
        "detail.html",
        {
            "title": settings.yaml.ui.title,
            "photo": _serialize_photo(photo, settings.yaml.api.base_url),
        },
    )


@router.get("/upload", response_class=HTMLResponse)
async def upload_page(request: Request) -> HTMLResponse:
    settings = _get_settings(request)
    return templates.TemplateResponse(
        request,
        "upload.html",
        {"title": settings.yaml.ui.title},
    )


@router.get("/api/state", response_class=JSONResponse)
async def get_state(request: Request) -> JSONResponse:
    return _state_response(request, _get_gallery(request).state)


@router.post("/api/refresh", response_class=JSONResponse)
async def refresh(request: Request) -> JSONResponse:
    state = await _get_gallery(request).refresh()
    return _state_response(request, state)


@router.post("/api/load-more", response_class=JSONResponse)
async def load_more(request: Request) -> JSONResponse:
    state = await _get_gallery(request).load_more()
    return _state_response(request, state)


@router.post("/api/uploads/random", response_class=JSONResponse)
async def upload_random(request: Request) -> JSONResponse:
    state = await _get_gallery(request).upload_random()
    return _state_response(request, state)


@router.post("/api/uploads/url", response_class=JSONResponse)
async def upload_from_url(request: Request, body: UrlUploadRequest) -> JSONResponse:
    state = await _get_gallery(request).upload_from_url(body.url)
    return _state_response(request, state)


@router.post("/api/selection", response_class=JSONResponse)
async def select_photo(request: Request, body: SelectionRequest) -> JSONResponse:
    gallery = _get_gallery(request)
    photo: PhotoRecord | None = None
    if body.photo_id is not None:
        photo = gallery.find_photo(body.photo_id)
        if photo is None:
            raise HTTPException(status_code=404, detail="Photo not found")
    state = gallery.select_photo(photo)
    return _state_response(request, state)


@router.get("/health", response_class=JSONResponse)
async def health(request: Request) -> JSONResponse:
    settings = _get_settings(request)
    gallery = _get_gallery(request)
    state = gallery.state
    return JSONResponse(
        {
            "status": "ok",
            "service": "photoshare",
            "environment": settings.env.photoshare_env,
            "photo_count": len(state.photos),
            "page": gallery.current_page,
            "is_loading": state.is_loading,
            "error": state.error,
            "started_at_utc": request.app.state.started_at_utc.isoformat(),
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        }
    )


def create_app(
    *,
    settings_loader: Callable[[], AppSettings] = load_settings,
    source_factory: Callable[[AppSettings], PhotoSource] = build_photo_source,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        settings = settings_loader()
        configure_logging(settings.env.photoshare_log_level)

        source = source_factory(settings)
        uploads = UploadStore(base_url=settings.yaml.api.base_url)
        gallery = GalleryStateManager(
            source=source,
            uploads=uploads,
            page_size=settings.yaml.api.page_size,
        )

        application.state.settings = settings
        application.state.gallery = gallery
        application.state.started_at_utc = datetime.now(timezone.utc)

        await gallery.load()
        LOGGER.info("PhotoShare started with %s photos", len(gallery.state.photos))

        try:
            yield
        finally:
            gallery.close()

    application = FastAPI(title="PhotoShare", version="0.1.0", lifespan=lifespan)
    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("photoshare.main:app", host="127.0.0.1", port=8000)
