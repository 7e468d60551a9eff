# auth/validation.py
"""
Client-side form validation.

Runs before any network call. Each validator collects per-field errors
and raises a single ValidationError carrying all of them.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from app.errors import ValidationError
from auth.password import check_password_strength

FORM_ERROR_MESSAGE = "Please fix the errors below"

MIN_LOGIN_PASSWORD_LENGTH = 6

# (min, max, label, unit)
PROFILE_BOUNDS = {
    "age": (13, 120, "age", ""),
    "weight": (20, 200, "weight", " kg"),
    "height": (50, 300, "height", " cm"),
}

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def _check_email(email: Optional[str], errors: Dict[str, str]) -> None:
    if not email:
        errors["email"] = "Email is required"
    elif not _EMAIL_RE.search(email):
        errors["email"] = "Please enter a valid email address"


def _raise_if_any(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(FORM_ERROR_MESSAGE, field_errors=errors)


def validate_login_form(email: Optional[str], password: Optional[str]) -> None:
    """Validate the sign-in form."""
    errors: Dict[str, str] = {}
    _check_email(email, errors)

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_LOGIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"Password must be at least {MIN_LOGIN_PASSWORD_LENGTH} characters"
        )

    _raise_if_any(errors)


def validate_registration_form(
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
) -> None:
    """Validate the registration form, including password strength."""
    errors: Dict[str, str] = {}
    _check_email(email, errors)

    if not password:
        errors["password"] = "Password is required"
    else:
        strength = check_password_strength(password)
        if not strength.acceptable:
            errors["password"] = (
                "Password is too weak. Please include: " + ", ".join(strength.feedback)
            )

    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    _raise_if_any(errors)


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else number


def validate_profile_form(age: Any, weight: Any, height: Any) -> Dict[str, float]:
    """
    Validate the profile form.

    Returns:
        The numeric age/weight/height values

    Raises:
        ValidationError: With a message per failing field
    """
    errors: Dict[str, str] = {}
    values: Dict[str, float] = {}

    for name, raw in (("age", age), ("weight", weight), ("height", height)):
        low, high, label, unit = PROFILE_BOUNDS[name]
        number = _to_number(raw)
        if not number:
            errors[name] = f"{label.capitalize()} is required"
        elif number < low or number > high:
            errors[name] = f"Please enter a valid {label} ({low}-{high}{unit})"
        else:
            values[name] = number

    _raise_if_any(errors)
    return values
