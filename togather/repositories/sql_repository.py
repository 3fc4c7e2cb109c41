"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import secrets
from contextlib import nullcontext
from datetime import datetime, timedelta, timezone
from typing import ContextManager, Optional

from sqlalchemy import delete, func, select

from togather.db.models import Profile, User, UserSession
from togather.db.session import get_session


def _new_session(uid: str, ttl_seconds: int) -> UserSession:
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=max(60, ttl_seconds))
    return UserSession(token=secrets.token_urlsafe(32), uid=uid, expires_at=expires_at)


class SQLRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    # -------------------------- users --------------------------
    def get_user(self, uid: str) -> Optional[User]:
        with get_session() as session:
            return session.get(User, uid)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with get_session() as session:
            stmt = select(User).where(func.lower(User.email) == (email or "").lower())
            return session.execute(stmt).scalar_one_or_none()

    def create_account(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        ttl_seconds: int,
        *,
        uid: str | None = None,
        commit_guard: ContextManager | None = None,
    ) -> tuple[User, str]:
        """
        Insert user, profile and first session in one transaction.

        ``commit_guard`` wraps the commit; raising from it leaves nothing behind.
        Returns the user and the session token.
        """
        uid = uid or secrets.token_hex(14)
        with get_session() as session:
            user = User(uid=uid, email=email, password_hash=password_hash)
            session.add(user)
            session.flush()
            session.add(self.build_profile(uid, full_name, email))
            user_session = _new_session(uid, ttl_seconds)
            session.add(user_session)
            with commit_guard or nullcontext():
                session.commit()
            session.refresh(user)
            return user, user_session.token

    def delete_user(self, uid: str) -> None:
        with get_session() as session:
            session.execute(delete(UserSession).where(UserSession.uid == uid))
            session.execute(delete(Profile).where(Profile.uid == uid))
            session.execute(delete(User).where(User.uid == uid))
            session.commit()

    # -------------------------- profiles --------------------------
    def get_profile(self, uid: str) -> Optional[Profile]:
        with get_session() as session:
            return session.get(Profile, uid)

    def build_profile(self, uid: str, full_name: str, email: str) -> Profile:
        # created_at comes from the database server default
        return Profile(uid=uid, full_name=full_name, email=email)

    # -------------------------- sessions --------------------------
    def create_session(self, uid: str, ttl_seconds: int) -> str:
        entity = _new_session(uid, ttl_seconds)
        with get_session() as session:
            session.add(entity)
            session.commit()
        return entity.token

    def count_sessions(self, uid: str | None = None) -> int:
        with get_session() as session:
            stmt = select(func.count()).select_from(UserSession)
            if uid is not None:
                stmt = stmt.where(UserSession.uid == uid)
            return session.execute(stmt).scalar_one()

    def get_session_user(self, token: str) -> Optional[User]:
        """Return the user behind a live session token; expired tokens are removed."""
        if not token:
            return None
        now = datetime.now(timezone.utc)
        with get_session() as session:
            entity = session.get(UserSession, token)
            if not entity:
                return None
            expires_at = entity.expires_at
            if expires_at is not None and expires_at.tzinfo is None:
                # SQLite drops tzinfo on the way back
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at and expires_at < now:
                session.delete(entity)
                session.commit()
                return None
            return session.get(User, entity.uid)

    def delete_session(self, token: str) -> None:
        if not token:
            return
        with get_session() as session:
            entity = session.get(UserSession, token)
            if entity:
                session.delete(entity)
                session.commit()
