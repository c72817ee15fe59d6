"""OpenTelemetry integration for distributed tracing and metrics."""

from template_service.telemetry.errors import (
    MeterShutdownError,
    MetricExporterError,
    ResourceCreationError,
    TelemetryError,
    TelemetrySetupError,
    TelemetryShutdownError,
    TraceExporterError,
    TracerShutdownError,
)
from template_service.telemetry.setup import (
    SHUTDOWN_TIMEOUT_SECONDS,
    Telemetry,
    TelemetryFactories,
    get_meter,
    get_tracer,
    init_telemetry,
)

__all__ = [
    # Lifecycle
    "SHUTDOWN_TIMEOUT_SECONDS",
    "Telemetry",
    "TelemetryFactories",
    "get_meter",
    "get_tracer",
    "init_telemetry",
    # Errors
    "MeterShutdownError",
    "MetricExporterError",
    "ResourceCreationError",
    "TelemetryError",
    "TelemetrySetupError",
    "TelemetryShutdownError",
    "TraceExporterError",
    "TracerShutdownError",
]
