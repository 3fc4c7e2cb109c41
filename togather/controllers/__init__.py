"""
Page controllers.

Each controller owns the state of one page and talks to the backend through
an injected ``AuthClient``; routers only translate HTTP to controller calls.
"""

from .registration import FormStatus, RegistrationController, RegistrationForm, SubmissionInProgress
from .session_gate import GateStatus, SessionGate

__all__ = [
    "FormStatus",
    "RegistrationController",
    "RegistrationForm",
    "SubmissionInProgress",
    "GateStatus",
    "SessionGate",
]
