"""Field validation for the registration form."""
from __future__ import annotations

import re
from typing import Protocol

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PASSWORD_LENGTH = 8
MIN_FULL_NAME_LENGTH = 2

FULL_NAME = "full_name"
EMAIL = "email"
PASSWORD = "password"
CONFIRM_PASSWORD = "confirm_password"
FIELDS = (FULL_NAME, EMAIL, PASSWORD, CONFIRM_PASSWORD)


class RegistrationFields(Protocol):
    full_name: str
    email: str
    password: str
    confirm_password: str


def is_valid_email(value: str) -> bool:
    """Minimal ``local@domain.tld`` shape; no DNS or deliverability check."""
    return bool(EMAIL_PATTERN.fullmatch(value))


def is_valid_password(value: str) -> bool:
    return len(value) >= MIN_PASSWORD_LENGTH


def passwords_match(password: str, confirm_password: str) -> bool:
    return password == confirm_password


def is_valid_full_name(value: str) -> bool:
    # Only the trimmed length is checked, a single word is accepted.
    return len(value.strip()) >= MIN_FULL_NAME_LENGTH


def validate_registration(form: RegistrationFields) -> dict[str, str]:
    """
    Run every field rule against the form and return one message per failing field.

    An empty mapping means the form can be submitted.
    """
    errors: dict[str, str] = {}

    if not form.full_name.strip():
        errors[FULL_NAME] = "Full name is required"
    elif not is_valid_full_name(form.full_name):
        errors[FULL_NAME] = "Please enter your full name"

    if not form.email.strip():
        errors[EMAIL] = "Email is required"
    elif not is_valid_email(form.email):
        errors[EMAIL] = "Please enter a valid email address"

    if not form.password:
        errors[PASSWORD] = "Password is required"
    elif not is_valid_password(form.password):
        errors[PASSWORD] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

    if not form.confirm_password:
        errors[CONFIRM_PASSWORD] = "Please confirm your password"
    elif not passwords_match(form.password, form.confirm_password):
        errors[CONFIRM_PASSWORD] = "Passwords do not match"

    return errors
