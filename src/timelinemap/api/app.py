"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS (Cross-Origin Resource Sharing) for frontend access.
2.  **Exception Handling**: Handlers mapping the domain error taxonomy to
    structured JSON (`{message}`, `{message, errors}` or `{message, error}`).
3.  **Routing**: Mounting the API routers (events, geocode, timeline, health),
    the `/uploads` static directory and the single-page-app fallback.
4.  **Lifecycle**: Creating the uploads directory and seeding demo events.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (separate app instances with an in-memory store and a stub
    geocoder per test).
-   Configuration injection (passing distinct settings for Dev/Prod).
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from timelinemap import __version__
from timelinemap.api.routers import events, geocode, timeline
from timelinemap.api.schemas import HealthResponse
from timelinemap.core.errors import (
    GeocoderError,
    GeocoderNotFound,
    GeocodingFailed,
    StorageError,
    UploadRejected,
    ValidationError,
)
from timelinemap.core.settings import Settings, get_logger, load_settings
from timelinemap.geocoding.client import GeocoderClient
from timelinemap.ingestion.pipeline import EventIngestionPipeline
from timelinemap.ingestion.uploads import PUBLIC_PREFIX, UploadStorage
from timelinemap.store import EventStore, create_store, seed_if_empty

logger = get_logger("timelinemap.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    ASGI Lifespan context manager.

    - **Startup**: make sure the uploads root exists; seed demo events into an
      empty store when `SEED_DEMO_DATA` is enabled.
    - **Shutdown**: nothing to release (stores own their connections).
    """
    cfg: Settings = app.state.settings
    logger.info("Starting up (environment=%s, store=%s)", cfg.environment, cfg.store_backend)

    app.state.pipeline.uploads.ensure_root()
    logger.info("Uploads directory: %s", cfg.uploads_dir.resolve())

    if cfg.seed_demo_data:
        seed_if_empty(app.state.store)

    yield

    logger.info("Shutting down...")


def _error(status_code: int, message: str, **extra: object) -> JSONResponse:
    content: dict[str, object] = {"message": message}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content)


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        """Missing/malformed input -> 400 with the offending field names."""
        return _error(status.HTTP_400_BAD_REQUEST, exc.message, errors=exc.fields)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request shapes (FastAPI-level) use the same 400 body."""
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        return _error(status.HTTP_400_BAD_REQUEST, "Validation Error", errors=fields)

    @app.exception_handler(UploadRejected)
    async def upload_rejected_handler(request: Request, exc: UploadRejected) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(GeocodingFailed)
    async def geocoding_failed_handler(request: Request, exc: GeocodingFailed) -> JSONResponse:
        """No match is the caller's to fix (400); upstream trouble is ours (500)."""
        code = (
            status.HTTP_400_BAD_REQUEST
            if exc.reason == GeocoderNotFound.reason
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return _error(code, exc.message, error=exc.reason)

    @app.exception_handler(GeocoderError)
    async def geocoder_error_handler(request: Request, exc: GeocoderError) -> JSONResponse:
        """Suggestion lookups that fail upstream -> 502."""
        logger.warning("Address lookup failed: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Address lookup failed.", error=exc.reason)

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        message = (
            "Server error creating event."
            if request.method == "POST"
            else "Server error fetching events."
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message, error=exc.detail)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all: structured 500 without a traceback."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something broke!", error=str(exc))


def _register_spa_fallback(app: FastAPI, build_dir: Path) -> None:
    """Serve build assets, else `index.html`, for any GET not matched earlier."""
    root = build_dir.resolve()

    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str) -> Response:
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

        if full_path:
            candidate = (root / full_path).resolve()
            if root in candidate.parents and candidate.is_file():
                return FileResponse(candidate)

        index = root / "index.html"
        if not index.is_file():
            logger.error("Frontend entry point not found at %s", index)
            return PlainTextResponse("Frontend entry point not found.", status_code=404)
        return FileResponse(index)


def create_app(
    settings: Settings | None = None,
    *,
    store: EventStore | None = None,
    geocoder: GeocoderClient | None = None,
) -> FastAPI:
    """
    Construct and configure the TimelineMap FastAPI application.

    Parameters
    ----------
    settings:
        Configuration; defaults to the cached environment settings.
    store:
        Event store override; defaults to the backend named by `STORE_BACKEND`.
    geocoder:
        Geocoder override (tests pass a stub); defaults to `GEOCODER_*` settings.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = settings or load_settings()
    event_store = store if store is not None else create_store(cfg)
    client = geocoder if geocoder is not None else GeocoderClient.from_settings(cfg)

    app = FastAPI(
        title="TimelineMap API",
        description="Geocoded events on a map and a date timeline",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.store = event_store
    app.state.geocoder = client
    app.state.pipeline = EventIngestionPipeline(
        store=event_store,
        geocoder=client,
        uploads=UploadStorage(cfg.uploads_dir),
    )

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this to specific domains.
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(events.router)
    app.include_router(geocode.router)
    app.include_router(timeline.router)

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Simple liveness probe."""
        return HealthResponse(status="ok", environment=cfg.environment, version=__version__)

    app.mount(
        PUBLIC_PREFIX,
        StaticFiles(directory=cfg.uploads_dir, check_dir=False),
        name="uploads",
    )

    # Must stay last: it matches every GET path.
    _register_spa_fallback(app, cfg.frontend_build_dir)

    return app


__all__ = ["create_app"]
