"""
SQLAlchemy-backed implementation of the authentication backend.

Accounts, profiles and session tokens live in the configured database;
passwords are hashed with argon2. Blocking database work runs in the
threadpool so the request loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.concurrency import run_in_threadpool

from togather.core.config import Settings, get_settings
from togather.core.rate_limiter import RateLimiter, RateLimitExceeded
from togather.core.security import hash_password, verify_password
from togather.domain.errors import ErrorCode
from togather.domain.validation import is_valid_email
from togather.repositories.sql_repository import SQLRepository
from togather.services.backend import AuthBackend, AuthClient, BackendError, SessionHandle

logger = logging.getLogger(__name__)

MIN_BACKEND_PASSWORD_LENGTH = 6


def _handle(user) -> SessionHandle:
    return SessionHandle(uid=user.uid, email=user.email)


class RegistrationAbandoned(Exception):
    """Raised inside the worker thread when the caller stopped waiting before commit."""


class PendingRegistration:
    """
    Shared state between an awaiting ``register`` call and its worker thread.

    The commit and the abandon decision are taken under the same lock, so the
    caller always learns whether the account was written before it gave up.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._abandoned = False
        self._uid: str | None = None

    @contextmanager
    def commit(self, uid: str):
        with self._lock:
            if self._abandoned:
                raise RegistrationAbandoned()
            yield
            self._uid = uid

    def abandon(self) -> str | None:
        """Stop any later commit; returns the uid already committed, if any."""
        with self._lock:
            self._abandoned = True
            return self._uid


@dataclass
class SQLAuthBackend(AuthBackend):
    """Hands out ``SQLAuthClient`` objects sharing one repository and rate limiter."""

    repository: SQLRepository = field(default_factory=SQLRepository)
    settings: Settings = field(default_factory=get_settings)
    limiter: RateLimiter = field(default_factory=RateLimiter)

    def client(self, session_token: str | None = None, *, client_key: str = "") -> "SQLAuthClient":
        return SQLAuthClient(self, session_token=session_token, client_key=client_key)


class SQLAuthClient(AuthClient):
    def __init__(self, backend: SQLAuthBackend, *, session_token: str | None = None, client_key: str = ""):
        super().__init__()
        self.backend = backend
        self.repository = backend.repository
        self.settings = backend.settings
        self.client_key = client_key or "unknown"
        self._token: Optional[str] = None
        if session_token:
            user = self.repository.get_session_user(session_token)
            if user:
                self._token = session_token
                self._session = _handle(user)

    @property
    def session_token(self) -> str | None:
        return self._token

    # -------------------------------------- registration --------------------------------------
    async def register(self, email: str, password: str, full_name: str) -> SessionHandle:
        try:
            self.backend.limiter.check(
                f"auth:register:{self.client_key}",
                self.settings.register_rate_limit,
                self.settings.register_rate_window_seconds,
            )
        except RateLimitExceeded as exc:
            logger.warning("Registration rate limit hit for %s", exc.key)
            raise BackendError(ErrorCode.TOO_MANY_REQUESTS) from exc
        raw_email = (email or "").strip()
        if not is_valid_email(raw_email):
            raise BackendError(ErrorCode.INVALID_EMAIL)
        if len(password or "") < MIN_BACKEND_PASSWORD_LENGTH:
            raise BackendError(ErrorCode.WEAK_PASSWORD)
        pending = PendingRegistration()
        token = None
        try:
            session, token = await self._call(self._create_account, raw_email, password, full_name, pending)
            await self._replace_token(token)
        except asyncio.CancelledError:
            committed_uid = pending.abandon()
            if committed_uid:
                # the worker thread committed before the caller gave up
                logger.warning("Registration %s abandoned by caller, removing account", committed_uid)
                self.repository.delete_user(committed_uid)
                if token is not None and self._token == token:
                    self._token = None
            raise
        logger.info("Registered account %s", session.uid)
        self._set_session(session)
        return session

    def _create_account(
        self, email: str, password: str, full_name: str, pending: PendingRegistration
    ) -> tuple[SessionHandle, str]:
        if self.repository.get_user_by_email(email):
            raise BackendError(ErrorCode.EMAIL_ALREADY_IN_USE)
        password_hash = hash_password(password)
        uid = secrets.token_hex(14)
        try:
            user, token = self.repository.create_account(
                email,
                password_hash,
                full_name,
                self.settings.session_ttl_seconds,
                uid=uid,
                commit_guard=pending.commit(uid),
            )
        except IntegrityError as exc:
            raise BackendError(ErrorCode.EMAIL_ALREADY_IN_USE) from exc
        return _handle(user), token

    # -------------------------------------- sign-in / sign-out --------------------------------------
    async def sign_in(self, email: str, password: str) -> SessionHandle:
        raw_email = (email or "").strip()
        if not is_valid_email(raw_email):
            raise BackendError(ErrorCode.INVALID_EMAIL)
        session, token = await self._call(self._authenticate, raw_email, password)
        await self._replace_token(token)
        self._set_session(session)
        return session

    def _authenticate(self, email: str, password: str) -> tuple[SessionHandle, str]:
        user = self.repository.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise BackendError(ErrorCode.INVALID_CREDENTIAL)
        return _handle(user), self.repository.create_session(user.uid, self.settings.session_ttl_seconds)

    async def sign_out(self) -> None:
        token, self._token = self._token, None
        if token:
            await self._call(self.repository.delete_session, token)
        self._set_session(None)

    async def _replace_token(self, token: str) -> None:
        # one session per browser context: the previous token stops working
        previous, self._token = self._token, token
        if previous and previous != token:
            await self._call(self.repository.delete_session, previous)

    async def _call(self, func, *args):
        try:
            return await run_in_threadpool(func, *args)
        except OperationalError as exc:
            logger.error("Database unavailable: %s", exc)
            raise BackendError(ErrorCode.NETWORK_REQUEST_FAILED) from exc
