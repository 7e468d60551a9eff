# app/tests/test_config.py
"""Tests for configuration management and startup validation."""
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from app.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TIMEOUT_SECONDS,
    DEFAULT_PORT,
    SENSITIVE_SUBSTRINGS,
    AppConfig,
    ConfigurationError,
    load_config,
    log_config_snapshot,
    validate_config_snapshot_safety,
)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_default_values(self):
        """Config loads with sensible defaults when no env vars set."""
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        assert config.service_name == "healify"
        assert config.service_version == "0.1.0"
        assert config.environment == "development"
        assert config.api_base_url == DEFAULT_API_BASE_URL
        assert config.api_timeout_seconds == DEFAULT_API_TIMEOUT_SECONDS
        assert config.service_backend == "http"
        assert config.persist_session is False
        assert config.port == DEFAULT_PORT
        assert config.database_url_present is False
        assert config.warnings == []

    def test_client_settings_from_env(self):
        with patch.dict(
            os.environ,
            {
                "HEALIFY_API_BASE_URL": "https://api.example.test/api/",
                "HEALIFY_API_TIMEOUT_SECONDS": "30",
                "HEALIFY_SERVICE_BACKEND": "MOCK",
                "HEALIFY_PERSIST_SESSION": "yes",
                "HEALIFY_DB_PATH": "/tmp/elsewhere.db",
                "HEALIFY_ENVIRONMENT": "staging",
            },
            clear=True,
        ):
            config = load_config()

        assert config.api_base_url == "https://api.example.test/api"
        assert config.api_timeout_seconds == 30
        assert config.service_backend == "mock"
        assert config.persist_session is True
        assert config.db_path == Path("/tmp/elsewhere.db")
        assert config.environment == "staging"

    def test_server_settings_from_env(self):
        with patch.dict(
            os.environ,
            {"PORT": "8080", "DATABASE_URL": "postgres://user:pw@db/healify"},
            clear=True,
        ):
            config = load_config()

        assert config.port == 8080
        assert config.database_url_present is True


class TestValidation:
    """Invalid values fall back to defaults with a warning."""

    @pytest.mark.parametrize("raw", ["abc", "0", "-5"])
    def test_invalid_timeout(self, raw):
        with patch.dict(os.environ, {"HEALIFY_API_TIMEOUT_SECONDS": raw}, clear=True):
            config = load_config()

        assert config.api_timeout_seconds == DEFAULT_API_TIMEOUT_SECONDS
        assert len(config.warnings) == 1
        assert "HEALIFY_API_TIMEOUT_SECONDS" in config.warnings[0]

    def test_unknown_backend(self):
        with patch.dict(os.environ, {"HEALIFY_SERVICE_BACKEND": "grpc"}, clear=True):
            config = load_config()

        assert config.service_backend == "http"
        assert len(config.warnings) == 1

    def test_invalid_port(self):
        with patch.dict(os.environ, {"PORT": "not-a-port"}, clear=True):
            config = load_config()
        assert config.port == DEFAULT_PORT

    def test_bad_base_url_fail_fast(self):
        with patch.dict(os.environ, {"HEALIFY_API_BASE_URL": "localhost:3001"}, clear=True):
            with pytest.raises(ConfigurationError):
                load_config()

    def test_bad_base_url_lenient(self):
        with patch.dict(os.environ, {"HEALIFY_API_BASE_URL": "localhost:3001"}, clear=True):
            config = load_config(fail_fast=False)

        assert config.api_base_url == DEFAULT_API_BASE_URL
        assert len(config.warnings) == 1

    def test_production_without_jwt_secret_warns(self):
        with patch.dict(os.environ, {"HEALIFY_ENVIRONMENT": "production"}, clear=True):
            config = load_config()

        assert any("HEALIFY_JWT_SECRET" in w for w in config.warnings)

    def test_production_with_jwt_secret(self):
        with patch.dict(
            os.environ,
            {"HEALIFY_ENVIRONMENT": "production", "HEALIFY_JWT_SECRET": "s3cret"},
            clear=True,
        ):
            config = load_config()

        assert config.jwt_secret_present is True
        assert config.warnings == []


class TestConfigSnapshot:
    """Tests for log_config_snapshot and its safety check."""

    def test_snapshot_contains_settings(self):
        snapshot = log_config_snapshot(AppConfig(port=8080, persist_session=True))

        assert "[STARTUP]" in snapshot
        assert "service=healify" in snapshot
        assert "port=8080" in snapshot
        assert "persist_session=True" in snapshot

    def test_snapshot_never_contains_secrets(self):
        with patch.dict(
            os.environ,
            {
                "DATABASE_URL": "postgres://user:hunter2@db/healify",
                "HEALIFY_JWT_SECRET": "super-secret-value",
            },
            clear=True,
        ):
            snapshot = log_config_snapshot(load_config())

        assert "hunter2" not in snapshot
        assert "super-secret-value" not in snapshot
        assert validate_config_snapshot_safety(snapshot) is True

    def test_unsafe_snapshot_detected(self):
        assert validate_config_snapshot_safety("secret=abc123") is False
        assert validate_config_snapshot_safety("token=xyz") is False

    def test_presence_flags_are_safe(self):
        assert validate_config_snapshot_safety("jwt_secret_present=True") is True

    def test_sensitive_substrings_cover_credentials(self):
        assert "secret" in SENSITIVE_SUBSTRINGS
        assert "token" in SENSITIVE_SUBSTRINGS
