"""OpenTelemetry setup and teardown."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Protocol

from opentelemetry import metrics, propagate, trace
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from template_service import __version__
from template_service.config import Settings
from template_service.telemetry.errors import (
    MeterShutdownError,
    MetricExporterError,
    ResourceCreationError,
    TelemetryShutdownError,
    TelemetryTeardownError,
    TraceExporterError,
    TracerShutdownError,
)

logger = logging.getLogger(__name__)

# Total time shutdown may block, shared by both providers.
SHUTDOWN_TIMEOUT_SECONDS = 5.0


class TracerProviderHandle(Protocol):
    def force_flush(self, timeout_millis: int = ...) -> bool: ...

    def shutdown(self) -> None: ...


class MeterProviderHandle(Protocol):
    def shutdown(self, timeout_millis: float = ...) -> None: ...


def create_resource(settings: Settings) -> Resource:
    """Create the resource describing this service."""
    return Resource.create(
        {
            SERVICE_NAME: settings.otel_service_name,
            SERVICE_VERSION: __version__,
        }
    )


def create_span_exporter(settings: Settings) -> SpanExporter:
    """Create the appropriate span exporter based on configuration.

    With no endpoint configured the OTLP exporters fall back to their own
    ``OTEL_EXPORTER_OTLP_*`` environment handling.
    """
    exporter_type = settings.otel_exporter
    endpoint = settings.otel_exporter_otlp_endpoint

    if exporter_type == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(endpoint=endpoint)

    elif exporter_type == "otlp-http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter,
        )

        return OTLPSpanExporter(
            endpoint=f"{endpoint.rstrip('/')}/v1/traces" if endpoint else None
        )

    elif exporter_type == "console":
        return ConsoleSpanExporter()

    else:
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
        return ConsoleSpanExporter()


def create_metric_reader(settings: Settings) -> MetricReader:  # noqa: ARG001
    """Create the pull-based Prometheus reader scraped through ``/metrics``."""
    return PrometheusMetricReader()


def create_tracer_provider(resource: Resource, exporter: SpanExporter) -> TracerProvider:
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def create_meter_provider(resource: Resource, reader: MetricReader) -> MeterProvider:
    return MeterProvider(resource=resource, metric_readers=[reader])


@dataclass(frozen=True)
class TelemetryFactories:
    """Constructors for every external piece the telemetry stack is built from.

    Tests swap individual factories to force failures without touching
    module state.
    """

    resource: Callable[[Settings], Resource] = create_resource
    trace_exporter: Callable[[Settings], SpanExporter] = create_span_exporter
    metric_reader: Callable[[Settings], MetricReader] = create_metric_reader
    tracer_provider: Callable[[Resource, SpanExporter], TracerProviderHandle] = (
        create_tracer_provider
    )
    meter_provider: Callable[[Resource, MetricReader], MeterProviderHandle] = (
        create_meter_provider
    )


def _remaining_millis(deadline: float) -> int:
    return max(0, int((deadline - time.monotonic()) * 1000))


def _call_before(deadline: float, func: Callable[[], None], action: str) -> None:
    """Run ``func`` in a daemon thread and stop waiting for it at ``deadline``.

    A call still running at the deadline is abandoned, not cancelled.

    Raises:
        TimeoutError: If ``func`` did not return before the deadline.
    """
    failures: list[Exception] = []

    def run() -> None:
        try:
            func()
        except Exception as e:
            failures.append(e)

    worker = threading.Thread(target=run, name=f"otel-{action}", daemon=True)
    worker.start()
    worker.join(max(0.0, deadline - time.monotonic()))

    if worker.is_alive():
        raise TimeoutError(f"timed out waiting for {action}")
    if failures:
        raise failures[0]


class Telemetry:
    """Handles to the running tracer and meter providers."""

    def __init__(
        self,
        resource: Resource,
        tracer_provider: TracerProviderHandle,
        meter_provider: MeterProviderHandle,
        metric_reader: MetricReader,
    ):
        self.resource = resource
        self.tracer_provider = tracer_provider
        self.meter_provider = meter_provider
        self.metric_reader = metric_reader
        self._shut_down = False

    def shutdown(self, timeout: float | None = None) -> None:
        """Flush and close both providers.

        The tracer provider is torn down first and the meter provider is
        always attempted afterwards, even if the first step failed. Both
        share one budget of at most ``SHUTDOWN_TIMEOUT_SECONDS``; a shorter
        ``timeout`` tightens it. A provider still closing when the budget
        runs out is left behind and reported as timed out.

        Args:
            timeout: Optional budget in seconds.

        Raises:
            TelemetryShutdownError: If either provider failed to shut down.
        """
        if self._shut_down:
            logger.debug("OpenTelemetry already shut down")
            return
        self._shut_down = True

        budget = SHUTDOWN_TIMEOUT_SECONDS
        if timeout is not None:
            budget = min(timeout, SHUTDOWN_TIMEOUT_SECONDS)
        deadline = time.monotonic() + budget

        logger.info("Shutting down OpenTelemetry")
        errors: list[TelemetryTeardownError] = []

        try:
            _call_before(deadline, partial(self._close_tracer, deadline), "tracer provider")
        except Exception as e:
            errors.append(TracerShutdownError(e))

        try:
            _call_before(deadline, partial(self._close_meter, deadline), "meter provider")
        except Exception as e:
            errors.append(MeterShutdownError(e))

        if errors:
            raise TelemetryShutdownError(errors)

    def _close_tracer(self, deadline: float) -> None:
        # Shut down even when the flush ran out of time
        flushed = self.tracer_provider.force_flush(timeout_millis=_remaining_millis(deadline))
        self.tracer_provider.shutdown()
        if not flushed:
            raise TimeoutError("timed out flushing pending spans")

    def _close_meter(self, deadline: float) -> None:
        self.meter_provider.shutdown(timeout_millis=_remaining_millis(deadline))


def init_telemetry(
    settings: Settings,
    factories: TelemetryFactories | None = None,
) -> Telemetry:
    """Initialize OpenTelemetry tracing and metrics.

    Registers the tracer provider, the W3C trace context propagator and the
    meter provider globally. Call this early in application startup, before
    creating any traced components.

    Args:
        settings: Application settings.
        factories: Constructors to build the stack from (real SDK by default).

    Returns:
        The running telemetry, whose ``shutdown`` must be called on exit.

    Raises:
        ResourceCreationError: If the resource could not be built.
        TraceExporterError: If the span exporter could not be built.
        MetricExporterError: If the metric reader could not be built.
    """
    factories = factories or TelemetryFactories()

    logger.info(
        "Initializing OpenTelemetry (service=%s, exporter=%s)",
        settings.otel_service_name,
        settings.otel_exporter,
    )

    try:
        resource = factories.resource(settings)
    except Exception as e:
        raise ResourceCreationError(e) from e

    try:
        span_exporter = factories.trace_exporter(settings)
    except Exception as e:
        raise TraceExporterError(e) from e

    tracer_provider = factories.tracer_provider(resource, span_exporter)
    trace.set_tracer_provider(tracer_provider)
    propagate.set_global_textmap(TraceContextTextMapPropagator())

    try:
        metric_reader = factories.metric_reader(settings)
    except Exception as e:
        raise MetricExporterError(e) from e

    meter_provider = factories.meter_provider(resource, metric_reader)
    metrics.set_meter_provider(meter_provider)

    logger.info("OpenTelemetry initialized successfully")
    return Telemetry(resource, tracer_provider, meter_provider, metric_reader)


def get_tracer(name: str) -> trace.Tracer:
    """Return a tracer from the globally registered provider.

    Before ``init_telemetry`` runs this is a proxy that starts recording
    once a provider is registered.
    """
    return trace.get_tracer(name, __version__)


def get_meter(name: str) -> metrics.Meter:
    """Return a meter from the globally registered provider."""
    return metrics.get_meter(name, __version__)
