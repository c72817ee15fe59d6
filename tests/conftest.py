"""Pytest configuration and fixtures."""

import logging

import pytest
from fastapi.testclient import TestClient

from template_service.config import Settings, get_settings
from template_service.logger import ServiceLogger

# Variables read by Settings; cleared so a developer's shell cannot leak in
SETTINGS_ENV_VARS = (
    "LISTEN_ADDR",
    "OTEL_EXPORTER",
    "OTEL_SERVICE_NAME",
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove settings variables from the environment for every test."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings():
    """Provide test settings."""
    return Settings(
        _env_file=None,
        listen_addr="127.0.0.1:0",
        otel_exporter="console",
        otel_service_name="test-service",
        log_format="text",
    )


@pytest.fixture
def service_logger(caplog):
    """Provide a service logger whose records are captured by caplog."""
    caplog.set_level(logging.DEBUG, logger="template_service")
    return ServiceLogger(logging.getLogger("template_service.tests"))


@pytest.fixture
def app_context(test_settings, service_logger):
    """Provide an application context without running telemetry."""
    from template_service.context import AppContext

    return AppContext(settings=test_settings, logger=service_logger)


@pytest.fixture
def app(app_context):
    """Provide the FastAPI application."""
    from template_service.api import create_app

    return create_app(app_context)


@pytest.fixture
def client(app):
    """Provide a test client for the application."""
    return TestClient(app)


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by init_logging."""
    import template_service.logger.logger as logger_module
    from template_service.logger import JsonFormatter, TextFormatter

    root = logging.getLogger()
    level = root.level
    service_logger = logger_module._service_logger
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, (JsonFormatter, TextFormatter)):
            root.removeHandler(handler)
    root.setLevel(level)
    logger_module._service_logger = service_logger
