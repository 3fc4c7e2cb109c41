"""Request-scoped dependencies shared by the routers."""
from __future__ import annotations

from fastapi import Request

from togather.core.rate_limiter import client_ip
from togather.services.backend import AuthBackend, AuthClient
from togather.services.session_cookie import SESSION_COOKIE_NAME


def get_backend(request: Request) -> AuthBackend:
    backend = getattr(getattr(request.app, "state", None), "backend", None)
    if backend is None:
        raise RuntimeError("Auth backend not configured")
    return backend


def get_auth_client(request: Request) -> AuthClient:
    """One backend client per request, bound to the browser's session cookie."""
    backend = get_backend(request)
    return backend.client(request.cookies.get(SESSION_COOKIE_NAME), client_key=client_ip(request))


def templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")
