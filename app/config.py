# app/config.py
"""
Centralized configuration management with startup validation.

Client settings (remote service, session persistence) and development
backend settings (port, database URL) are read from the environment.
Invalid values fall back to defaults with a collected warning.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

SERVICE_NAME = "healify"
SERVICE_VERSION = "0.1.0"

DEFAULT_API_BASE_URL = "http://localhost:3001/api"
DEFAULT_API_TIMEOUT_SECONDS = 10
MIN_API_TIMEOUT_SECONDS = 1
DEFAULT_SERVICE_BACKEND = "http"
SERVICE_BACKENDS = ("http", "mock")
DEFAULT_PORT = 5000
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "healify.db"

# Sensitive substrings that should never appear in logs
SENSITIVE_SUBSTRINGS = ("key", "token", "secret", "password", "credential", "auth")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class AppConfig:
    """Application configuration loaded from environment."""

    # Service info
    service_name: str = SERVICE_NAME
    service_version: str = SERVICE_VERSION
    environment: str = "development"

    # Remote service
    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: int = DEFAULT_API_TIMEOUT_SECONDS
    service_backend: str = DEFAULT_SERVICE_BACKEND

    # Durable client session (OPTIONAL - default in-memory only)
    persist_session: bool = False
    db_path: Path = DEFAULT_DB_PATH

    # Development backend
    port: int = DEFAULT_PORT
    database_url_present: bool = False
    jwt_secret_present: bool = False

    # Warnings collected during config load
    warnings: list = field(default_factory=list)


# =============================================================================
# Configuration Loading
# =============================================================================


def _parse_int_env(
    name: str, default: int, min_value: Optional[int] = None
) -> tuple[int, Optional[str]]:
    """
    Parse an integer environment variable with validation.

    Returns (value, warning_message).
    On invalid input, returns default with a warning.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default, None

    try:
        value = int(raw)
    except ValueError:
        warning = f"{name}='{raw}' is not a valid integer; using default {default}"
        return default, warning

    if min_value is not None and value < min_value:
        warning = f"{name}={value} is below minimum {min_value}; using default {default}"
        return default, warning

    return value, None


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    raw = os.environ.get(name, "").lower()
    if raw in ("true", "1", "yes", "on"):
        return True
    if raw in ("false", "0", "no", "off"):
        return False
    return default


def load_config(fail_fast: bool = True) -> AppConfig:
    """
    Load and validate application configuration from environment.

    Args:
        fail_fast: If True, raise ConfigurationError on critical issues.
                   If False, collect warnings and continue.

    Returns:
        AppConfig instance with validated configuration.

    Raises:
        ConfigurationError: If the API base URL is not http(s) and
                            fail_fast is True.
    """
    warnings = []

    environment = os.environ.get("HEALIFY_ENVIRONMENT", "development")

    # Remote service
    api_base_url = os.environ.get("HEALIFY_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
    if not re.match(r"^https?://", api_base_url):
        message = f"HEALIFY_API_BASE_URL='{api_base_url}' must start with http:// or https://"
        if fail_fast:
            raise ConfigurationError(message)
        warnings.append(f"{message}; using default {DEFAULT_API_BASE_URL}")
        api_base_url = DEFAULT_API_BASE_URL

    api_timeout, timeout_warning = _parse_int_env(
        "HEALIFY_API_TIMEOUT_SECONDS",
        DEFAULT_API_TIMEOUT_SECONDS,
        min_value=MIN_API_TIMEOUT_SECONDS,
    )
    if timeout_warning:
        warnings.append(timeout_warning)

    service_backend = os.environ.get("HEALIFY_SERVICE_BACKEND", DEFAULT_SERVICE_BACKEND).lower()
    if service_backend not in SERVICE_BACKENDS:
        warnings.append(
            f"HEALIFY_SERVICE_BACKEND='{service_backend}' is not one of {SERVICE_BACKENDS}; "
            f"using default {DEFAULT_SERVICE_BACKEND}"
        )
        service_backend = DEFAULT_SERVICE_BACKEND

    # Durable client session
    persist_session = _parse_bool_env("HEALIFY_PERSIST_SESSION", False)
    db_path = Path(os.environ.get("HEALIFY_DB_PATH", str(DEFAULT_DB_PATH)))

    # Development backend
    port, port_warning = _parse_int_env("PORT", DEFAULT_PORT, min_value=1)
    if port_warning:
        warnings.append(port_warning)

    database_url = os.environ.get("DATABASE_URL")
    jwt_secret = os.environ.get("HEALIFY_JWT_SECRET")
    jwt_secret_present = bool(jwt_secret)

    if environment == "production" and not jwt_secret_present:
        warnings.append(
            "HEALIFY_JWT_SECRET is not set in production; the development signing key is in use"
        )

    # Log warnings
    for warning in warnings:
        logger.warning(f"[CONFIG] {warning}")

    return AppConfig(
        environment=environment,
        api_base_url=api_base_url,
        api_timeout_seconds=api_timeout,
        service_backend=service_backend,
        persist_session=persist_session,
        db_path=db_path,
        port=port,
        database_url_present=bool(database_url),
        jwt_secret_present=jwt_secret_present,
        warnings=warnings,
    )


def log_config_snapshot(config: AppConfig) -> str:
    """
    Generate and log a safe configuration snapshot.

    Returns the snapshot string for testing purposes.
    Never logs actual secret values - only boolean presence flags.
    """
    snapshot = (
        f"[STARTUP] service={config.service_name} "
        f"version={config.service_version} "
        f"environment={config.environment} "
        f"api_base_url={config.api_base_url} "
        f"api_timeout_seconds={config.api_timeout_seconds} "
        f"service_backend={config.service_backend} "
        f"persist_session={config.persist_session} "
        f"port={config.port} "
        f"database_url_present={config.database_url_present} "
        f"jwt_secret_present={config.jwt_secret_present}"
    )
    logger.info(snapshot)
    return snapshot


def validate_config_snapshot_safety(snapshot: str) -> bool:
    """
    Validate that a config snapshot doesn't contain sensitive values.

    Returns True if safe, False if potentially unsafe.
    """
    snapshot_lower = snapshot.lower()

    # "secret_present=true" is fine, "secret=abc123" is not
    for sensitive in SENSITIVE_SUBSTRINGS:
        pattern = rf"{sensitive}=(?!true|false)"
        if re.search(pattern, snapshot_lower):
            return False

    return True
