"""Template HTTP service with OpenTelemetry tracing and metrics."""

__version__ = "0.1.0"
