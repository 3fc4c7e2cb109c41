from __future__ import annotations

import asyncio

import pytest

from togather.controllers.registration import FormStatus, RegistrationController, SubmissionInProgress

GOOD = {
    "full_name": "Ana Souza",
    "email": "ana@example.com",
    "password": "longenough",
    "confirm_password": "longenough",
}


def _fill(controller, **overrides):
    for name, value in {**GOOD, **overrides}.items():
        controller.edit(name, value)


def test_initial_state(fake_client):
    controller = RegistrationController(fake_client)
    assert controller.status == FormStatus.EDITING
    assert controller.errors == {}
    assert controller.submit_error is None
    assert controller.inputs_disabled is False
    assert (controller.form.full_name, controller.form.email) == ("", "")
    assert (controller.form.password, controller.form.confirm_password) == ("", "")


def test_empty_submit_yields_four_errors_and_no_backend_call(fake_client):
    controller = RegistrationController(fake_client)
    assert asyncio.run(controller.submit()) is False
    assert set(controller.errors) == {"full_name", "email", "password", "confirm_password"}
    assert controller.status == FormStatus.EDITING
    assert fake_client.register_calls == []


def test_mismatched_passwords_yield_single_error(fake_client):
    controller = RegistrationController(fake_client)
    _fill(controller, confirm_password="different1")
    assert asyncio.run(controller.submit()) is False
    assert controller.errors == {"confirm_password": "Passwords do not match"}
    assert fake_client.register_calls == []


def test_editing_a_field_clears_only_its_error(fake_client):
    controller = RegistrationController(fake_client)
    asyncio.run(controller.submit())
    controller.edit("email", "a")
    assert "email" not in controller.errors
    assert set(controller.errors) == {"full_name", "password", "confirm_password"}
    assert controller.form.email == "a"


def test_editing_a_field_without_error_keeps_other_errors(fake_client):
    controller = RegistrationController(fake_client)
    _fill(controller, password="short", confirm_password="short")
    asyncio.run(controller.submit())
    assert set(controller.errors) == {"password"}
    controller.edit("full_name", "Ana S.")
    assert set(controller.errors) == {"password"}


def test_edit_rejects_unknown_fields(fake_client):
    controller = RegistrationController(fake_client)
    with pytest.raises(ValueError):
        controller.edit("submit", "x")


def test_successful_submit_registers_once_and_redirects(fake_client):
    controller = RegistrationController(fake_client)
    _fill(controller)
    assert asyncio.run(controller.submit()) is True
    assert fake_client.register_calls == [("ana@example.com", "longenough", "Ana Souza")]
    assert len(fake_client.profile_writes) == 1
    assert fake_client.profile_writes[0]["uid"] == controller.session.uid
    assert controller.status == FormStatus.SUCCESS
    assert controller.redirect_to == "/dashboard"
    assert controller.errors == {}


def test_backend_error_is_translated_into_submission_error(make_client):
    client = make_client(error="auth/email-already-in-use")
    controller = RegistrationController(client)
    _fill(controller)
    assert asyncio.run(controller.submit()) is False
    assert controller.submit_error == "This email address is already registered. Please login instead."
    assert controller.errors == {}
    assert controller.status == FormStatus.EDITING
    assert controller.inputs_disabled is False
    assert controller.redirect_to is None
    assert len(client.register_calls) == 1


def test_unknown_backend_error_gets_generic_message(make_client):
    controller = RegistrationController(make_client(error="auth/internal-error"))
    _fill(controller)
    asyncio.run(controller.submit())
    assert controller.submit_error == "An error occurred. Please try again."


def test_next_submit_clears_previous_submission_error(make_client):
    client = make_client(error="auth/too-many-requests")
    controller = RegistrationController(client)
    _fill(controller)
    asyncio.run(controller.submit())
    assert controller.submit_error
    controller.edit("email", "")
    asyncio.run(controller.submit())
    assert controller.submit_error is None
    assert controller.errors == {"email": "Email is required"}
    assert len(client.register_calls) == 1


def test_hung_backend_call_times_out_and_reenables_form(make_client):
    client = make_client(hang=True)
    controller = RegistrationController(client, timeout=0.05)
    _fill(controller)
    assert asyncio.run(controller.submit()) is False
    assert controller.submit_error == "Network error. Please check your internet connection."
    assert controller.status == FormStatus.EDITING


def test_form_is_disabled_while_submitting(make_client):
    client = make_client(hang=True)
    controller = RegistrationController(client, timeout=0.2)
    _fill(controller)

    async def scenario():
        task = asyncio.ensure_future(controller.submit())
        await asyncio.sleep(0.01)
        assert controller.status == FormStatus.SUBMITTING
        assert controller.inputs_disabled is True
        with pytest.raises(SubmissionInProgress):
            controller.edit("email", "other@example.com")
        with pytest.raises(SubmissionInProgress):
            await controller.submit()
        return await task

    assert asyncio.run(scenario()) is False
    assert len(client.register_calls) == 1
    assert controller.inputs_disabled is False


def test_password_visibility_toggles(fake_client):
    controller = RegistrationController(fake_client)
    assert controller.toggle_password_visibility() is True
    assert controller.toggle_password_visibility(confirm=True) is True
    assert controller.toggle_password_visibility() is False
    assert controller.confirm_password_visible is True


def test_form_without_client_renders_but_cannot_submit():
    controller = RegistrationController(None)
    assert controller.inputs_disabled is False
    assert asyncio.run(controller.submit()) is False
    for name, value in (
        ("full_name", "Ana Souza"),
        ("email", "ana@example.com"),
        ("password", "longenough"),
        ("confirm_password", "longenough"),
    ):
        controller.edit(name, value)
    with pytest.raises(RuntimeError):
        asyncio.run(controller.submit())
    assert controller.status == FormStatus.EDITING
