"""Configuration module for the template service."""

from template_service.config.settings import (
    Settings,
    get_settings,
    load_settings,
    split_listen_addr,
)

__all__ = ["Settings", "get_settings", "load_settings", "split_listen_addr"]
