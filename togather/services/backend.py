"""
Contract of the authentication/profile backend.

Controllers only talk to an ``AuthClient``: one client per browser context,
handed out by a process-wide ``AuthBackend`` that the app receives at
construction time. Tests substitute in-memory fakes for both.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from togather.domain.errors import ErrorCode

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Failure reported by the backend, identified by an ``auth/...`` code."""

    def __init__(self, code: str | ErrorCode, message: str = ""):
        if isinstance(code, ErrorCode):
            code = code.value
        super().__init__(message or code)
        self.code = code


@dataclass(frozen=True)
class SessionHandle:
    uid: str
    email: str


SessionCallback = Callable[[Optional[SessionHandle]], None]


class Subscription:
    """Handle returned by ``on_session_change``; ``unsubscribe()`` must be called once done."""

    def __init__(self, dispose: Callable[[], None]):
        self._dispose: Callable[[], None] | None = dispose

    @property
    def active(self) -> bool:
        return self._dispose is not None

    def unsubscribe(self) -> None:
        dispose, self._dispose = self._dispose, None
        if dispose is not None:
            dispose()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class AuthClient(ABC):
    """Backend operations available to one browser context."""

    def __init__(self) -> None:
        self._listeners: list[SessionCallback] = []
        self._session: SessionHandle | None = None

    @property
    def current_session(self) -> SessionHandle | None:
        return self._session

    @property
    def session_token(self) -> str | None:
        """Opaque token identifying the session to the backend (cookie value)."""
        return None

    @abstractmethod
    async def register(self, email: str, password: str, full_name: str) -> SessionHandle:
        """Create the account and its profile record, then start a session."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> SessionHandle:
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        ...

    def on_session_change(self, callback: SessionCallback) -> Subscription:
        """Call ``callback`` with the current session now and on every later change."""
        self._listeners.append(callback)
        callback(self._session)

        def dispose() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return Subscription(dispose)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _set_session(self, session: SessionHandle | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")


class AuthBackend(ABC):
    """Process-wide entry point that hands out per-context clients."""

    @abstractmethod
    def client(self, session_token: str | None = None, *, client_key: str = "") -> AuthClient:
        ...
