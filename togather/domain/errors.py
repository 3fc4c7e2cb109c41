"""Backend error codes and the messages shown for them."""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
    INVALID_EMAIL = "auth/invalid-email"
    WEAK_PASSWORD = "auth/weak-password"
    NETWORK_REQUEST_FAILED = "auth/network-request-failed"
    TOO_MANY_REQUESTS = "auth/too-many-requests"
    INVALID_CREDENTIAL = "auth/invalid-credential"


GENERIC_MESSAGE = "An error occurred. Please try again."

MESSAGES = {
    ErrorCode.EMAIL_ALREADY_IN_USE.value: "This email address is already registered. Please login instead.",
    ErrorCode.INVALID_EMAIL.value: "Please enter a valid email address.",
    ErrorCode.WEAK_PASSWORD.value: "Password is too weak. Please use at least 8 characters.",
    ErrorCode.NETWORK_REQUEST_FAILED.value: "Network error. Please check your internet connection.",
    ErrorCode.TOO_MANY_REQUESTS.value: "Too many attempts. Please try again later.",
}


def translate(code: str | ErrorCode | None) -> str:
    """Return the user-facing sentence for a backend error code, or the generic fallback."""
    if isinstance(code, ErrorCode):
        code = code.value
    return MESSAGES.get(code or "", GENERIC_MESSAGE)
