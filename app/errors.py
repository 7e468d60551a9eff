# app/errors.py
"""
Error taxonomy for the Healify client.

Every failure that reaches the session store or the assessment workflow
is one of four kinds:
- VALIDATION: malformed local input, caught before any network call
- UNAUTHORIZED: credential rejected by the remote service
- SERVICE: remote failure unrelated to the session (user may retry)
- INVALID_STATE: operation attempted in a state that forbids it

Transport-specific detail (httpx exceptions, status codes, bodies) is
converted into these classes at the remote service boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    """Normalized error kinds."""
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    SERVICE = "service"
    INVALID_STATE = "invalid_state"


class HealifyError(Exception):
    """Base error. `message` is safe to show to the user."""

    kind: ErrorKind = ErrorKind.SERVICE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HealifyError):
    """Local input failed validation."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class UnknownAssessmentTypeError(ValidationError):
    """Requested assessment type is not in the catalog."""

    def __init__(self, assessment_type: str):
        super().__init__(f"Unknown assessment type: {assessment_type}")
        self.assessment_type = assessment_type


class ProfileIncompleteError(ValidationError):
    """Profile lacks age, weight or height."""

    def __init__(self, message: str = "Please complete your profile before making predictions."):
        super().__init__(message)


class UnauthorizedError(HealifyError):
    """Credential rejected by the remote service."""

    kind = ErrorKind.UNAUTHORIZED


class ServiceError(HealifyError):
    """Remote call failed for a reason other than authorization."""

    kind = ErrorKind.SERVICE

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidCredentialsError(ServiceError):
    """Login rejected: wrong email or password."""

    def __init__(self, message: str = "Invalid credentials.", status_code: Optional[int] = 401):
        super().__init__(message, status_code=status_code)


class RegistrationRejectedError(ServiceError):
    """Registration refused by the remote service."""

    def __init__(self, reason: str, status_code: Optional[int] = 400):
        super().__init__(reason, status_code=status_code)
        self.reason = reason


class InvalidStateError(HealifyError):
    """Operation not allowed in the current state."""

    kind = ErrorKind.INVALID_STATE
