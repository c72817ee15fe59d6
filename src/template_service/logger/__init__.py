"""Structured logging with trace correlation."""

from template_service.logger.formatters import JsonFormatter, TextFormatter
from template_service.logger.logger import (
    ServiceLogger,
    debug,
    error,
    get_logger,
    info,
    init_logging,
    sync,
    warning,
)
from template_service.logger.otel import inject_trace

__all__ = [
    # Facade
    "ServiceLogger",
    "get_logger",
    "init_logging",
    "sync",
    # Leveled logging
    "debug",
    "error",
    "info",
    "warning",
    # Trace correlation
    "inject_trace",
    # Formatters
    "JsonFormatter",
    "TextFormatter",
]
