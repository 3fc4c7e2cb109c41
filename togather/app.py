import hashlib
import logging
import os
import pathlib
import shutil

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from togather.core.config import get_settings
from togather.core.log import configure_logging
from togather.routers import auth as auth_router
from togather.routers import pages as pages_router
from togather.services.backend import AuthBackend

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")
TEMPLATES = os.path.join(BASE, "..", "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'; script-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def set_headers(self, scope, resp, path, stat_result):
        # fingerprinted assets never change under the same name
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"


def _fingerprint_asset(rel_path: str) -> str:
    """
    Copy a static asset to a name carrying a short content hash:
    "togather.css" -> "togather.<hash8>.css". Returns the versioned name (without /static).
    """
    src = pathlib.Path(WEB) / rel_path
    if not src.exists():
        return rel_path.replace("\\", "/")
    h = hashlib.sha1(src.read_bytes()).hexdigest()[:8]
    dst = src.with_name(f"{src.stem}.{h}{src.suffix}")
    if not dst.exists():
        shutil.copy2(src, dst)
    return dst.name


def create_app(backend: AuthBackend | None = None) -> FastAPI:
    """Build the web app around an auth backend; defaults to the SQL-backed one."""
    settings = get_settings()
    configure_logging()
    if backend is None:
        from togather.db.create_tables import create_all
        from togather.services.sql_backend import SQLAuthBackend

        create_all()
        backend = SQLAuthBackend(settings=settings)

    app = FastAPI(title="ToGather")
    app.state.backend = backend

    try:
        css_href = f"/static/{_fingerprint_asset('togather.css')}"
    except OSError:
        logger.warning("Could not fingerprint togather.css, serving it unversioned")
        css_href = "/static/togather.css"
    templates = Jinja2Templates(directory=TEMPLATES)
    templates.env.globals["css_href"] = css_href
    app.state.templates = templates
    app.mount("/static", CachedStaticFiles(directory=WEB), name="static")

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:8000", "http://127.0.0.1:8000"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(auth_router.router)
    app.include_router(pages_router.router)
    # must stay last: redirects every unknown path to the registration page
    app.include_router(pages_router.fallback_router)
    logger.info("ToGather app ready (env=%s)", settings.app_env)
    return app
