"""HTTP API: routes, middleware and the application factory."""

from template_service.api.app import create_app

__all__ = ["create_app"]
