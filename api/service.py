"""
Portfolio Site Service

FastAPI application that serves the public root and the contact API.
Requests under ``/api/`` get CORS headers and are dispatched to the API
router; everything else is a static asset request.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from api.contact import router as contact_router
from api.static_files import serve_static
from config.settings import Settings, load_settings
from core.contact_store import ContactStore
from core.logging_config import get_logger, log_error, log_request

event_logger = get_logger(__name__)

API_PREFIX = "/api/"
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


def cors_headers(allowed_origin: str) -> dict:
    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    store: ContactStore = app.state.store
    await store.ensure()
    event_logger.info(
        "service_started",
        public_dir=str(app.state.settings.public_dir),
        storage=str(store.path),
    )
    yield


def create_app(settings: Optional[Settings] = None,
               store: Optional[ContactStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Server settings, loaded from the environment when omitted
        store: Contact store, created over ``settings.contacts_file`` when omitted

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        settings = load_settings()
    if store is None:
        store = ContactStore(settings.contacts_file)

    # Interactive docs would shadow files in the public root
    app = FastAPI(
        title="Portfolio Site",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    @app.middleware("http")
    async def dispatch(request: Request, call_next):
        start = time.perf_counter()
        path = request.scope["path"]
        api_request = is_api_path(path)

        if api_request and request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            try:
                response = await call_next(request)
            except Exception as e:
                log_error(event_logger, e, "unhandled_request_error", method=request.method, path=path)
                response = JSONResponse(
                    status_code=500, content={"error": "Unexpected server error"}
                )

        if api_request:
            response.headers.update(cors_headers(settings.allowed_origin))

        log_request(
            event_logger,
            request.method,
            path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    app.include_router(contact_router)

    @app.api_route("/api/{endpoint:path}", methods=ALL_METHODS, include_in_schema=False)
    async def api_not_found(endpoint: str):
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})

    @app.api_route("/{asset_path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def static_asset(request: Request, asset_path: str):
        return await serve_static(settings.public_dir, request.scope["path"])

    return app
