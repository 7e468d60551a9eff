"""Healify development backend - FastAPI application entrypoint."""
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import load_config, log_config_snapshot
from app.errors import (
    HealifyError,
    ServiceError,
    UnauthorizedError,
    ValidationError,
)
from app.remote.mock_backend import MockBackend
from app.routers import auth
from app.routers import predictions
from app.routers import profile
from app.schemas.health import envelope

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

BANNER = "Healify Backend is Running Successfully"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        return response


def _status_for(error: HealifyError) -> int:
    if isinstance(error, UnauthorizedError):
        return 401
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, ServiceError) and error.status_code:
        return error.status_code
    return 500


def create_app(backend: Optional[MockBackend] = None) -> FastAPI:
    """
    Build the development backend.

    Args:
        backend: In-memory backend to serve (default: seeded MockBackend)
    """
    config = load_config(fail_fast=False)
    log_config_snapshot(config)

    started_at = datetime.now(timezone.utc)

    app = FastAPI(
        title="Healify",
        description="Health risk assessment backend (development)",
        version=config.service_version,
    )
    app.state.backend = backend if backend is not None else MockBackend()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(HealifyError)
    async def healify_error_handler(request: Request, exc: HealifyError):
        status = _status_for(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=status, content=envelope(status, exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request."
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ())[1:])
            message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()
        return JSONResponse(status_code=422, content=envelope(422, message))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=envelope(exc.status_code, str(exc.detail)),
        )

    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(predictions.router)

    @app.get("/")
    async def root():
        return envelope(200, BANNER)

    @app.get("/health")
    async def health():
        """Health check with service observability."""
        return {
            "status": "healthy",
            "service": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "database_url_present": config.database_url_present,
            "started_at": started_at.isoformat(),
        }

    return app


app = create_app()


def main() -> None:
    """Run the development backend with uvicorn on $PORT (default 5000)."""
    import uvicorn

    port = load_config(fail_fast=False).port
    logger.info(f"Starting Healify backend on port {port}")
    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
    main()
