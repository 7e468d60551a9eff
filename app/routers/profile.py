"""
Profile API endpoints for the development backend.
"""

from fastapi import APIRouter, Depends

from app.remote.mock_backend import MockBackend
from app.remote.wire import profile_to_wire
from app.schemas.health import ProfileUpdateRequest, envelope
from auth.middleware import get_backend, get_required_token
from auth.models import Profile

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
async def get_profile(
    token: str = Depends(get_required_token),
    backend: MockBackend = Depends(get_backend),
):
    """Current account's profile."""
    profile = backend.get_profile(token)
    return envelope(200, "Profile fetched successfully.", profile_to_wire(profile))


@router.put("")
async def update_profile(
    request: ProfileUpdateRequest,
    token: str = Depends(get_required_token),
    backend: MockBackend = Depends(get_backend),
):
    """Replace the profile; age, weight and height are required."""
    profile = backend.update_profile(token, Profile(**request.model_dump()))
    return envelope(200, "Profile updated successfully.", profile_to_wire(profile))
