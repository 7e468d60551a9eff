"""
Authentication API endpoints for the development backend.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.remote.mock_backend import MockBackend
from app.remote.wire import account_to_wire
from app.schemas.health import LoginRequest, RegisterRequest, envelope
from auth.middleware import get_backend

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Routes
# =============================================================================

@router.post("/register")
async def register(request: RegisterRequest, backend: MockBackend = Depends(get_backend)):
    """Register a new account. Errors are rendered by the app's error handler."""
    message = backend.register(email=request.email, password=request.password)
    return JSONResponse(status_code=201, content=envelope(201, message))


@router.post("/login")
async def login(request: LoginRequest, backend: MockBackend = Depends(get_backend)):
    """Login with email/password."""
    token, account = backend.login(email=request.email, password=request.password)
    return envelope(
        200,
        "Login successful.",
        {"token": token, "user": account_to_wire(account)},
    )
