"""Session-gated view state."""
from __future__ import annotations

import logging
from enum import Enum

from togather.services.backend import AuthClient, SessionHandle, Subscription

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class GateStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionGate:
    """Turns backend session notifications into a view decision for the dashboard."""

    def __init__(self, client: AuthClient):
        self.client = client
        self.status = GateStatus.LOADING
        self.session: SessionHandle | None = None
        self.redirect_to: str | None = None
        self._subscription: Subscription | None = None

    @property
    def email(self) -> str | None:
        return self.session.email if self.session else None

    @property
    def mounted(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def mount(self) -> Subscription:
        if self.mounted:
            raise RuntimeError("session gate is already mounted")
        self._subscription = self.client.on_session_change(self._on_session_change)
        return self._subscription

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_session_change(self, session: SessionHandle | None) -> None:
        self.session = session
        if session is not None:
            self.status = GateStatus.AUTHENTICATED
            self.redirect_to = None
        else:
            self.status = GateStatus.UNAUTHENTICATED
            self.redirect_to = LOGIN_PATH

    async def logout(self) -> None:
        try:
            await self.client.sign_out()
        except Exception:
            logger.exception("Logout error")
        self.redirect_to = LOGIN_PATH

    def __enter__(self) -> "SessionGate":
        self.mount()
        return self

    def __exit__(self, *exc) -> None:
        self.unmount()
