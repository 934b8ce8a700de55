"""Error types shared by services and routes.

Each ``GeodataError`` carries the HTTP status the API answers with.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """JSON body returned for every failed request."""

    error: str = Field(..., description="Human-readable error message")


class GeodataError(Exception):
    """Base class for errors raised while serving a geodata request."""

    status_code: int = 500


class ClientInputError(GeodataError):
    """Required query parameters are missing or malformed."""

    status_code = 400


class UpstreamError(GeodataError):
    """An upstream provider answered with a non-success status or timed out.

    Args:
        provider: Short provider name used in logs (e.g. ``"soilgrids"``).
        message: Description of the failure.
        upstream_status: HTTP status returned by the provider, if any.
    """

    status_code = 502

    def __init__(
        self,
        provider: str,
        message: str,
        upstream_status: Optional[int] = None,
    ) -> None:
        self.provider = provider
        self.upstream_status = upstream_status
        super().__init__(f"[{provider}] {message}")


class ConfigurationError(GeodataError):
    """A required setting (such as an API key) is not configured."""

    status_code = 500
