from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from togather.controllers.session_gate import GateStatus, SessionGate
from togather.core import csrf
from togather.routers.deps import get_auth_client, templates
from togather.services.backend import AuthClient
from togather.services.session_cookie import SESSION_COOKIE_NAME, clear_session_cookie

router = APIRouter(prefix="", tags=["pages"])
fallback_router = APIRouter(prefix="", tags=["pages"])

REGISTER_PATH = "/register"

DASHBOARD_CARDS = (
    ("Invitations", "Create and send beautiful wedding invitations"),
    ("Guest List", "Manage your wedding guests and RSVPs"),
    ("Analytics", "Track invitation views and responses"),
)


@router.get("/")
def index():
    return RedirectResponse(REGISTER_PATH, status_code=307)


@router.get("/login")
def login(request: Request):
    return templates(request).TemplateResponse(request, "login.html", {})


@router.get("/dashboard")
def dashboard(request: Request, client: AuthClient = Depends(get_auth_client)):
    with SessionGate(client) as gate:
        if gate.status == GateStatus.LOADING:
            return templates(request).TemplateResponse(request, "loading.html", {}, headers={"Refresh": "1"})
        if gate.status == GateStatus.UNAUTHENTICATED:
            resp = RedirectResponse(gate.redirect_to, status_code=303)
            if request.cookies.get(SESSION_COOKIE_NAME):
                clear_session_cookie(resp)
            return resp
        token = csrf.ensure_csrf_token(request)
        response = templates(request).TemplateResponse(
            request,
            "dashboard.html",
            {"email": gate.email, "cards": DASHBOARD_CARDS, "csrf_token": token},
        )
    csrf.set_csrf_cookie(response, token)
    return response


# Chrome devtools probe; answered here so the catch-all does not redirect it
@router.get("/.well-known/appspecific/com.chrome.devtools.json")
def chrome_devtools_wellknown():
    return PlainTextResponse("", status_code=204)


@fallback_router.get("/{path:path}", include_in_schema=False)
def catch_all(path: str):
    return RedirectResponse(REGISTER_PATH, status_code=307)
