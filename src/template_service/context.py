"""Explicit application context shared by the router and its handlers."""

from dataclasses import dataclass

from template_service.config import Settings
from template_service.logger import ServiceLogger
from template_service.telemetry import Telemetry


@dataclass(frozen=True)
class AppContext:
    """Everything created once at startup that request handling needs.

    Attributes:
        settings: Loaded configuration.
        logger: Service logger.
        telemetry: Running telemetry, or None when tracing and metrics
                   were not initialized (tests, tooling).
    """

    settings: Settings
    logger: ServiceLogger
    telemetry: Telemetry | None = None
