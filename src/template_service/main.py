"""Main entry point for the template service."""

import sys

import uvicorn
from dotenv import load_dotenv

from template_service.api import create_app
from template_service.config import get_settings, split_listen_addr
from template_service.context import AppContext
from template_service.logger import init_logging
from template_service.telemetry import (
    TelemetryError,
    TelemetryShutdownError,
    init_telemetry,
)


def main() -> None:
    """Run the template service."""
    # Load environment variables from .env file
    load_dotenv()

    settings = get_settings()

    # Set up logging
    logger = init_logging(settings)

    try:
        host, port = split_listen_addr(settings.listen_addr)
    except ValueError as e:
        logger.error("invalid listen address: %s", e)
        logger.sync()
        sys.exit(1)

    # Initialize OpenTelemetry (must be done before creating app)
    try:
        telemetry = init_telemetry(settings)
    except TelemetryError as e:
        logger.error("failed to init telemetry: %s", e, exc_info=e)
        logger.sync()
        sys.exit(1)

    logger.info(
        "Starting server on %s",
        settings.listen_addr,
        service=settings.otel_service_name,
        exporter=settings.otel_exporter,
    )

    app = create_app(AppContext(settings=settings, logger=logger, telemetry=telemetry))

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=settings.log_level.lower(),
        )
    finally:
        # Ensure telemetry is flushed and closed before the process exits
        try:
            telemetry.shutdown()
        except TelemetryShutdownError as e:
            logger.error(
                "failed to shutdown telemetry",
                error=str(e),
                tracer_failed=e.tracer_failed,
                meter_failed=e.meter_failed,
            )
        logger.sync()


if __name__ == "__main__":
    main()
