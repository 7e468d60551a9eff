"""
Factory for instantiating remote service implementations.
"""

from app.remote.base import HealthService
from app.remote.http import HttpHealthService
from app.remote.mock import MockHealthService


class ServiceFactory:
    """
    Factory for creating remote service instances.

    Usage:
        service = ServiceFactory.get_service("http", base_url="http://localhost:5000/api")
        service = ServiceFactory.get_service("mock", latency_ms=0)
    """

    _services = {
        "http": HttpHealthService,
        "mock": MockHealthService,
    }

    @classmethod
    def get_service(cls, source: str = "http", **kwargs) -> HealthService:
        """
        Get a remote service by source name.

        Args:
            source: Implementation identifier ("http", "mock", ...)
            **kwargs: Implementation-specific config (base_url, latency_ms, ...)

        Raises:
            ValueError: If source is unknown
        """
        if source not in cls._services:
            raise ValueError(
                f"Unknown remote service: {source}. "
                f"Available: {list(cls._services.keys())}"
            )

        service_class = cls._services[source]
        return service_class(**kwargs)

    @classmethod
    def register_service(cls, name: str, service_class: type):
        """Register a new service type."""
        cls._services[name] = service_class

    @classmethod
    def available_services(cls) -> list:
        return list(cls._services.keys())
