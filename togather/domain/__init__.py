"""Pure domain rules: form validation and error messages."""

from .errors import ErrorCode, translate
from .validation import (
    is_valid_email,
    is_valid_full_name,
    is_valid_password,
    passwords_match,
    validate_registration,
)

__all__ = [
    "ErrorCode",
    "translate",
    "is_valid_email",
    "is_valid_full_name",
    "is_valid_password",
    "passwords_match",
    "validate_registration",
]
