# auth/password.py
"""
Password hashing and strength scoring.

Hashing (bcrypt) is used by the development backend. Strength scoring
runs client-side before a registration request is sent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List

import bcrypt

_logger = logging.getLogger(__name__)

# Work factor (cost) - higher = slower but more secure
BCRYPT_ROUNDS = 12

# Minimum strength score (out of 5) accepted at registration
MIN_PASSWORD_SCORE = 3

STRENGTH_LABELS = ("Very Weak", "Weak", "Fair", "Good", "Strong", "Strong")

_SPECIAL_RE = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Bcrypt hash string (includes salt)
    """
    if not password:
        raise ValueError("Password cannot be empty")

    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)

    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Returns:
        True if password matches, False otherwise
    """
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        _logger.warning(f"Password verification error: {e}")
        return False


@dataclass(frozen=True)
class PasswordStrength:
    """
    Result of scoring a password.

    Attributes:
        score: Number of satisfied rules (0-5)
        label: Human-readable strength
        feedback: Rules not yet satisfied
    """
    score: int
    label: str
    feedback: List[str] = field(default_factory=list)

    @property
    def acceptable(self) -> bool:
        return self.score >= MIN_PASSWORD_SCORE


def check_password_strength(password: str) -> PasswordStrength:
    """
    Score a password against five rules: length >= 8, an uppercase
    letter, a lowercase letter, a digit, a special character.
    """
    rules = (
        (len(password) >= 8, "At least 8 characters"),
        (any(c.isupper() for c in password), "One uppercase letter"),
        (any(c.islower() for c in password), "One lowercase letter"),
        (any(c.isdigit() for c in password), "One number"),
        (bool(_SPECIAL_RE.search(password)), "One special character"),
    )

    score = sum(1 for ok, _ in rules if ok)
    feedback = [hint for ok, hint in rules if not ok]

    return PasswordStrength(score=score, label=STRENGTH_LABELS[score], feedback=feedback)
