# auth/tokens.py
"""
JWT issuance and verification for the development backend.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7
DEFAULT_SECRET_KEY = "healify-dev-secret-change-in-production"


def get_secret_key() -> str:
    return os.environ.get("HEALIFY_JWT_SECRET", DEFAULT_SECRET_KEY)


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    secret_key: Optional[str] = None,
) -> str:
    """Create a signed access token for an account id."""
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta is not None else timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    )
    claims = {"sub": subject, "exp": expire}
    return jwt.encode(claims, secret_key or get_secret_key(), algorithm=ALGORITHM)


def decode_token(token: str, secret_key: Optional[str] = None) -> Optional[str]:
    """
    Verify a token and return its subject.

    Returns None for malformed, expired or wrongly signed tokens.
    """
    try:
        payload = jwt.decode(token, secret_key or get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")
