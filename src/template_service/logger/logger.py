"""Process-wide structured logger with trace correlation."""

import logging
import sys
from typing import Any

from opentelemetry.context import Context

from template_service.config import Settings
from template_service.logger.formatters import JsonFormatter, TextFormatter
from template_service.logger.otel import inject_trace

SERVICE_LOGGER_NAME = "template_service"

_service_logger: "ServiceLogger | None" = None


class ServiceLogger:
    """Leveled logging that stamps every record with the active trace.

    Structured fields are passed as keyword arguments and end up in the
    record's ``fields`` attribute, together with ``trace_id`` and
    ``span_id`` when the context carries a trace.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, args, context, fields)

    def info(self, msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
        self._log(logging.INFO, msg, args, context, fields)

    def warning(self, msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
        self._log(logging.WARNING, msg, args, context, fields)

    def error(
        self,
        msg: str,
        *args: Any,
        context: Context | None = None,
        exc_info: Any = None,
        **fields: Any,
    ) -> None:
        self._log(logging.ERROR, msg, args, context, fields, exc_info=exc_info)

    def sync(self) -> None:
        """Flush every handler a record from this logger can reach."""
        logger: logging.Logger | None = self._logger
        while logger is not None:
            for handler in logger.handlers:
                handler.flush()
            logger = logger.parent if logger.propagate else None

    def _log(
        self,
        level: int,
        msg: str,
        args: tuple[Any, ...],
        context: Context | None,
        fields: dict[str, Any],
        exc_info: Any = None,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra={"fields": inject_trace(fields, context)},
            # Report the caller of the leveled method, not this module
            stacklevel=3,
        )


def init_logging(settings: Settings) -> ServiceLogger:
    """Configure application logging and create the process-wide logger.

    Replaces any handler installed by a previous call.

    Args:
        settings: Application settings (level and format).

    Returns:
        The process-wide service logger.
    """
    global _service_logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter() if settings.log_format == "json" else TextFormatter()
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=[handler],
        force=True,
    )

    _service_logger = ServiceLogger(logging.getLogger(SERVICE_LOGGER_NAME))
    return _service_logger


def get_logger() -> ServiceLogger:
    """Get the process-wide service logger.

    Raises:
        RuntimeError: If ``init_logging`` has not been called.
    """
    if _service_logger is None:
        raise RuntimeError("logger is not initialized; call init_logging() first")
    return _service_logger


def sync() -> None:
    """Flush buffered log records before the process exits."""
    get_logger().sync()


def debug(msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
    get_logger()._log(logging.DEBUG, msg, args, context, fields)


def info(msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
    get_logger()._log(logging.INFO, msg, args, context, fields)


def warning(msg: str, *args: Any, context: Context | None = None, **fields: Any) -> None:
    get_logger()._log(logging.WARNING, msg, args, context, fields)


def error(
    msg: str,
    *args: Any,
    context: Context | None = None,
    exc_info: Any = None,
    **fields: Any,
) -> None:
    get_logger()._log(logging.ERROR, msg, args, context, fields, exc_info=exc_info)
