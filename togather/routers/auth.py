from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from togather.controllers.registration import RegistrationController, RegistrationForm
from togather.controllers.session_gate import SessionGate
from togather.core import csrf
from togather.core.config import get_settings
from togather.routers.deps import get_auth_client, templates
from togather.services.backend import AuthClient
from togather.services.session_cookie import clear_session_cookie, set_session_cookie

router = APIRouter(prefix="", tags=["auth"])

TOGGLES = ("password", "confirm_password")


def _register_page(request: Request, controller: RegistrationController, *, status_code: int = 200, keep_passwords: bool = False):
    token = csrf.ensure_csrf_token(request)
    form = controller.form
    if not keep_passwords:
        # passwords are only echoed back when the user toggles their visibility
        form = RegistrationForm(full_name=form.full_name, email=form.email)
    context = {
        "form": form,
        "errors": controller.errors,
        "submit_error": controller.submit_error,
        "disabled": controller.inputs_disabled,
        "password_visible": controller.password_visible,
        "confirm_password_visible": controller.confirm_password_visible,
        "csrf_token": token,
    }
    response = templates(request).TemplateResponse(request, "register.html", context, status_code=status_code)
    csrf.set_csrf_cookie(response, token)
    return response


@router.get("/register")
def register_form(request: Request):
    return _register_page(request, RegistrationController(client=None))


@router.post("/register")
async def register(
    request: Request,
    full_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    password_visible: str = Form(""),
    confirm_password_visible: str = Form(""),
    toggle: str = Form(""),
    csrf_token: str = Form(""),
    client: AuthClient = Depends(get_auth_client),
):
    csrf.validate_csrf(request, csrf_token)
    settings = get_settings()
    controller = RegistrationController(client, timeout=settings.registration_timeout_seconds)
    controller.password_visible = bool(password_visible)
    controller.confirm_password_visible = bool(confirm_password_visible)
    for name, value in (
        ("full_name", full_name),
        ("email", email),
        ("password", password),
        ("confirm_password", confirm_password),
    ):
        controller.edit(name, value)
    if toggle in TOGGLES:
        controller.toggle_password_visibility(confirm=toggle == "confirm_password")
        return _register_page(request, controller, keep_passwords=True)
    if not await controller.submit():
        return _register_page(request, controller, status_code=400)
    resp = RedirectResponse(controller.redirect_to, status_code=303)
    if client.session_token:
        set_session_cookie(resp, client.session_token)
    csrf.set_csrf_cookie(resp, csrf.ensure_csrf_token(request))
    return resp


@router.post("/logout")
async def logout(request: Request, csrf_token: str = Form(""), client: AuthClient = Depends(get_auth_client)):
    csrf.validate_csrf(request, csrf_token)
    with SessionGate(client) as gate:
        await gate.logout()
    resp = RedirectResponse(gate.redirect_to, status_code=303)
    clear_session_cookie(resp)
    return resp
