"""Trace correlation for log records."""

from collections.abc import Mapping
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context


def inject_trace(
    fields: Mapping[str, Any],
    context: Context | None = None,
) -> dict[str, Any]:
    """Add ``trace_id`` and ``span_id`` to the log fields if a trace is active.

    Args:
        fields: Structured fields of the log call.
        context: OpenTelemetry context to read the span from (current
                 context if not provided).

    Returns:
        A copy of the fields, extended with the hex trace and span IDs when
        the context carries a trace.
    """
    result = dict(fields)
    span_context = trace.get_current_span(context).get_span_context()
    if span_context.trace_id != trace.INVALID_TRACE_ID:
        result["trace_id"] = trace.format_trace_id(span_context.trace_id)
        result["span_id"] = trace.format_span_id(span_context.span_id)
    return result
