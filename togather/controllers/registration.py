"""Registration form state machine."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, fields
from enum import Enum

from togather.domain.errors import ErrorCode, translate
from togather.domain.validation import validate_registration
from togather.services.backend import AuthClient, BackendError, SessionHandle

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


class FormStatus(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"


class SubmissionInProgress(RuntimeError):
    """Raised when the form is used while a registration call is pending."""


@dataclass
class RegistrationForm:
    full_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


class RegistrationController:
    """
    Owns one registration attempt.

    Field errors live in ``errors`` (one message per field); a failure reported
    by the backend lives in ``submit_error``. At most one backend call is made
    per valid submit and it is never retried.
    """

    def __init__(self, client: AuthClient | None, *, timeout: float | None = None, form: RegistrationForm | None = None):
        self.client = client
        self.timeout = timeout if timeout and timeout > 0 else None
        self.form = form or RegistrationForm()
        self.errors: dict[str, str] = {}
        self.submit_error: str | None = None
        self.status = FormStatus.EDITING
        self.session: SessionHandle | None = None
        self.redirect_to: str | None = None
        self.password_visible = False
        self.confirm_password_visible = False

    @property
    def inputs_disabled(self) -> bool:
        return self.status == FormStatus.SUBMITTING

    def edit(self, field: str, value: str) -> None:
        if self.inputs_disabled:
            raise SubmissionInProgress("form is disabled while submitting")
        if field not in RegistrationForm.field_names():
            raise ValueError(f"unknown form field: {field!r}")
        setattr(self.form, field, value if value is not None else "")
        self.errors.pop(field, None)

    def toggle_password_visibility(self, *, confirm: bool = False) -> bool:
        if confirm:
            self.confirm_password_visible = not self.confirm_password_visible
            return self.confirm_password_visible
        self.password_visible = not self.password_visible
        return self.password_visible

    def validate(self) -> bool:
        self.errors = validate_registration(self.form)
        return not self.errors

    async def submit(self) -> bool:
        """Validate and register; returns True once the backend accepted the account."""
        if self.inputs_disabled:
            raise SubmissionInProgress("a registration call is already pending")
        self.submit_error = None
        if not self.validate():
            return False
        if self.client is None:
            raise RuntimeError("registration form has no backend client")

        self.status = FormStatus.SUBMITTING
        try:
            call = self.client.register(self.form.email, self.form.password, self.form.full_name)
            if self.timeout is not None:
                self.session = await asyncio.wait_for(call, self.timeout)
            else:
                self.session = await call
        except BackendError as exc:
            logger.info("Registration rejected by backend: %s", exc.code)
            self.submit_error = translate(exc.code)
            self.status = FormStatus.EDITING
            return False
        except asyncio.TimeoutError:
            logger.warning("Registration call timed out after %ss", self.timeout)
            self.submit_error = translate(ErrorCode.NETWORK_REQUEST_FAILED)
            self.status = FormStatus.EDITING
            return False
        except BaseException:
            self.status = FormStatus.EDITING
            raise

        self.status = FormStatus.SUCCESS
        self.redirect_to = DASHBOARD_PATH
        return True
