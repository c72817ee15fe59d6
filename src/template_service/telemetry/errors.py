"""Errors raised while bringing telemetry up or tearing it down."""

from collections.abc import Sequence


class TelemetryError(Exception):
    """Base class for telemetry lifecycle failures."""


class _StageError(TelemetryError):
    """Failure of a single lifecycle stage, prefixed with the stage name."""

    stage = "telemetry error"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"{self.stage}: {cause}")


class TelemetrySetupError(_StageError):
    """Initialization failed; the process should not start."""


class ResourceCreationError(TelemetrySetupError):
    stage = "failed to create resource"


class TraceExporterError(TelemetrySetupError):
    stage = "failed to initialize OTLP trace exporter"


class MetricExporterError(TelemetrySetupError):
    stage = "failed to initialize Prometheus metric exporter"


class TelemetryTeardownError(_StageError):
    """One provider failed to shut down."""


class TracerShutdownError(TelemetryTeardownError):
    stage = "tracer shutdown error"


class MeterShutdownError(TelemetryTeardownError):
    stage = "meter shutdown error"


class TelemetryShutdownError(TelemetryError):
    """Every teardown failure collected during a shutdown, in order.

    The message joins the individual failures with ``"; "``.
    """

    def __init__(self, errors: Sequence[TelemetryTeardownError]):
        self.errors = tuple(errors)
        super().__init__("; ".join(str(error) for error in self.errors))

    @property
    def tracer_failed(self) -> bool:
        return any(isinstance(error, TracerShutdownError) for error in self.errors)

    @property
    def meter_failed(self) -> bool:
        return any(isinstance(error, MeterShutdownError) for error in self.errors)
