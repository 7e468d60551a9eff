"""
Remote service facade.

Every network-dependent operation (login, registration, profile,
scoring, history) goes through a HealthService. Implementations can be
swapped without changing consumer code.

Example:
    from app.remote import ServiceFactory

    service = ServiceFactory.get_service("mock", latency_ms=0)
    result = await service.login("user@example.com", "password123")
"""

from app.remote.base import HealthService, LoginResult
from app.remote.http import HttpHealthService
from app.remote.mock import MockHealthService
from app.remote.mock_backend import MockBackend
from app.remote.factory import ServiceFactory

__all__ = [
    "HealthService",
    "LoginResult",
    "HttpHealthService",
    "MockHealthService",
    "MockBackend",
    "ServiceFactory",
]
