from __future__ import annotations

import pytest

from togather.controllers.registration import RegistrationForm
from togather.domain.validation import (
    is_valid_email,
    is_valid_full_name,
    is_valid_password,
    passwords_match,
    validate_registration,
)


@pytest.mark.parametrize("value", ["a@b.c", "ana.souza@example.com", "x+tag@sub.domain.org"])
def test_valid_emails(value):
    assert is_valid_email(value) is True


@pytest.mark.parametrize(
    "value",
    ["", "plain", "a@b", "a.b@c", "@b.c", "a@.c", "a@b.", "a b@c.d", "a@b c.d", "a@@b.c", " a@b.c"],
)
def test_invalid_emails(value):
    assert is_valid_email(value) is False


def test_password_length_boundary():
    assert is_valid_password("1234567") is False
    assert is_valid_password("12345678") is True
    assert is_valid_password("") is False


@pytest.mark.parametrize("value", ["", "secret", "Secret!", "  "])
def test_passwords_match_is_reflexive(value):
    assert passwords_match(value, value) is True


def test_passwords_match_is_exact():
    assert passwords_match("a", "b") is False
    assert passwords_match("Secret123", "secret123") is False


def test_full_name_is_lenient():
    assert is_valid_full_name("J") is False
    assert is_valid_full_name("Jo") is True
    assert is_valid_full_name("  Jo  ") is True
    assert is_valid_full_name("   J   ") is False
    # a single word passes, no first/last name split is enforced
    assert is_valid_full_name("Madonna") is True


def test_validate_registration_empty_form_reports_every_field():
    errors = validate_registration(RegistrationForm())
    assert errors == {
        "full_name": "Full name is required",
        "email": "Email is required",
        "password": "Password is required",
        "confirm_password": "Please confirm your password",
    }


def test_validate_registration_invalid_values():
    form = RegistrationForm(full_name=" J ", email="nope", password="short", confirm_password="other")
    errors = validate_registration(form)
    assert errors == {
        "full_name": "Please enter your full name",
        "email": "Please enter a valid email address",
        "password": "Password must be at least 8 characters",
        "confirm_password": "Passwords do not match",
    }


def test_validate_registration_whitespace_only_counts_as_missing():
    form = RegistrationForm(full_name="   ", email="   ", password="longenough", confirm_password="longenough")
    errors = validate_registration(form)
    assert errors == {"full_name": "Full name is required", "email": "Email is required"}


def test_validate_registration_accepts_good_form():
    form = RegistrationForm(
        full_name="Ana Souza", email="ana@example.com", password="longenough", confirm_password="longenough"
    )
    assert validate_registration(form) == {}
