import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from blogapi.core.config import get_settings
from blogapi.core.logging_config import configure_logging
from blogapi.routers import auth as auth_router
from blogapi.routers import blogs as blogs_router
from blogapi.routers import uploads as uploads_router
from blogapi.routers import users as users_router
from blogapi.services.storage_service import LOCAL_URL_PREFIX

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def set_headers(self, scope, resp, path, stat_result):
        # Upload keys are random and never rewritten
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"


def _cors_origins(settings) -> list[str]:
    allowed = set(settings.cors_origins)
    allowed.add(settings.public_base_url)
    if settings.app_env != "prod":
        allowed.update(
            {
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            }
        )
    return sorted(origin for origin in allowed if origin)


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (``--factory``)."""
    settings = get_settings()
    configure_logging()
    is_prod = settings.app_env == "prod"
    app = FastAPI(
        title="Blog API",
        docs_url=None if is_prod else "/docs",
        redoc_url=None if is_prod else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=is_prod)

    if settings.storage_backend == "local":
        os.makedirs(settings.uploads_dir, exist_ok=True)
        app.mount(LOCAL_URL_PREFIX, CachedStaticFiles(directory=settings.uploads_dir), name="uploads")

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "hello world"

    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(blogs_router.router)
    app.include_router(uploads_router.router)

    logger.info("Blog API ready (env=%s, storage=%s)", settings.app_env, settings.storage_backend)
    return app
