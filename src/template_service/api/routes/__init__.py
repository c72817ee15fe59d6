"""HTTP routes."""

from template_service.api.routes.docs import router as docs_router
from template_service.api.routes.metrics import router as metrics_router
from template_service.api.routes.root import router as root_router

__all__ = ["docs_router", "metrics_router", "root_router"]
