# auth/middleware.py
"""
FastAPI authentication dependencies for the development backend.

Provides:
- Bearer credential extraction
- Account lookup against the backend on app.state
- Envelope-shaped 401 responses
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.errors import UnauthorizedError

AUTHENTICATION_REQUIRED = "Authentication required"

bearer_scheme = HTTPBearer(auto_error=False)


def get_backend(request: Request):
    """FastAPI dependency: the MockBackend attached to the app."""
    return request.app.state.backend


async def get_optional_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """
    FastAPI dependency: bearer token if present.

    Returns None for anonymous requests (no error).
    """
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def get_required_token(
    request: Request,
    token: Optional[str] = Depends(get_optional_token),
) -> str:
    """
    FastAPI dependency: bearer token that the backend accepts.

    Raises 401 if missing, malformed, expired or unknown.
    """
    if not token:
        raise HTTPException(status_code=401, detail=AUTHENTICATION_REQUIRED)

    try:
        get_backend(request).get_profile(token)
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=e.message)
    return token
