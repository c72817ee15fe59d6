"""Application settings and configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "0.0.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Server Configuration
    listen_addr: str = Field(
        default=":8080",
        description="Listen address in [host]:port form",
    )

    # OpenTelemetry Configuration
    otel_exporter: str = Field(
        default="otlp",
        description="Span exporter kind (otlp, otlp-http, console)",
    )
    otel_service_name: str = Field(
        default="template-go",
        description="Service name attached to all emitted telemetry",
    )
    otel_exporter_otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP collector endpoint; the exporter's own defaults apply when unset",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log format",
    )


def load_settings() -> Settings:
    """Read a fresh set of settings from the environment."""
    return Settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return load_settings()


def split_listen_addr(addr: str) -> tuple[str, int]:
    """Split a listen address into the host and port uvicorn expects.

    An empty host (``":8080"``) binds every interface. IPv6 hosts must be
    bracketed (``"[::1]:8080"``) and lose their brackets.

    Args:
        addr: Address in ``[host]:port`` form.

    Returns:
        Tuple of host and port.

    Raises:
        ValueError: If the port is missing, not numeric or out of range, or
            an IPv6 host is not bracketed.
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit() or int(port) > 65535:
        raise ValueError(f"invalid listen address {addr!r}: expected [host]:port")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host or "[" in host or "]" in host:
        raise ValueError(f"invalid listen address {addr!r}: IPv6 hosts must be bracketed")

    return host or DEFAULT_HOST, int(port)
