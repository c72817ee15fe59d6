"""Prometheus scrape endpoint."""

from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from starlette.responses import Response

router = APIRouter(include_in_schema=False)


@router.get("/metrics")
def metrics() -> Response:
    """Expose the default registry, which the OpenTelemetry reader feeds."""
    return Response(generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
