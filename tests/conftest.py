from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest

# Make the togather package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from togather.core import config as core_config  # noqa: E402
from togather.db import models  # noqa: E402
from togather.db import session as db_session  # noqa: E402
from togather.services.backend import AuthBackend, AuthClient, BackendError, SessionHandle, Subscription  # noqa: E402


class FakeAuthClient(AuthClient):
    """In-memory backend client that records every call."""

    def __init__(self, *, session: SessionHandle | None = None, error: str | None = None,
                 sign_out_error: Exception | None = None, hang: bool = False):
        super().__init__()
        self._session = session
        self.error = error
        self.sign_out_error = sign_out_error
        self.hang = hang
        self.register_calls: list[tuple[str, str, str]] = []
        self.profile_writes: list[dict] = []
        self.sign_out_calls = 0

    @property
    def session_token(self) -> str | None:
        return f"token-{self._session.uid}" if self._session else None

    async def register(self, email: str, password: str, full_name: str) -> SessionHandle:
        self.register_calls.append((email, password, full_name))
        if self.hang:
            await asyncio.sleep(3600)
        if self.error:
            raise BackendError(self.error)
        handle = SessionHandle(uid=f"uid-{len(self.register_calls)}", email=email)
        self.profile_writes.append({"uid": handle.uid, "full_name": full_name, "email": email})
        self._set_session(handle)
        return handle

    async def sign_in(self, email: str, password: str) -> SessionHandle:
        handle = SessionHandle(uid="uid-signin", email=email)
        self._set_session(handle)
        return handle

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self._set_session(None)


class DeferredClient(AuthClient):
    """Client whose first session notification arrives only when ``emit`` is called."""

    def on_session_change(self, callback):
        self._listeners.append(callback)
        return Subscription(lambda: self._listeners.remove(callback))

    def emit(self, session):
        self._set_session(session)

    async def register(self, email, password, full_name):
        raise NotImplementedError

    async def sign_in(self, email, password):
        raise NotImplementedError

    async def sign_out(self):
        self._set_session(None)


class FakeAuthBackend(AuthBackend):
    def __init__(self, client: AuthClient):
        self._client = client

    def client(self, session_token: str | None = None, *, client_key: str = "") -> AuthClient:
        return self._client


@pytest.fixture()
def fake_client():
    return FakeAuthClient()


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Point the app at a temporary SQLite file and reset the settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def make_client():
    return FakeAuthClient


@pytest.fixture()
def make_backend():
    return FakeAuthBackend


@pytest.fixture()
def make_deferred_client():
    return DeferredClient
