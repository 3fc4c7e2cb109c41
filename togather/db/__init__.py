"""Database helpers: engine/session plus the account models."""

from .session import Base, get_engine, get_session
from .models import Profile, User, UserSession

__all__ = ["Base", "get_engine", "get_session", "Profile", "User", "UserSession"]
