"""
Data Models Module

This module defines Pydantic models used across the proxy.

Models are organized by functional area:
- Endpoint descriptors (query parameter specs and per-endpoint response policy)
- Response envelopes (error bodies, health information)
"""

from typing import Dict, Literal, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field


# Output formats understood by the Management API and the media types they map to
FORMAT_MEDIA_TYPES: Dict[str, str] = {
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "text": "text/plain",
}

MANAGE_API_PREFIX = "/manage/v2"


# ============================================================================
# Endpoint Descriptors
# ============================================================================

class ParamSpec(BaseModel):
    """A single recognized query parameter."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Query parameter name as sent by callers and to MarkLogic")
    required: bool = Field(default=False, description="Reject the request when absent or blank")
    allowed: Optional[Tuple[str, ...]] = Field(
        default=None,
        description="Accepted values; None accepts anything",
    )
    default: Optional[str] = Field(default=None, description="Value used when the caller omits it")

    def invalid_message(self) -> str:
        """Error message naming this parameter and its allowed values."""
        quoted = [f"'{value}'" for value in self.allowed or ()]
        if len(quoted) == 1:
            choices = quoted[0]
        elif len(quoted) == 2:
            choices = f"{quoted[0]} or {quoted[1]}"
        else:
            choices = ", ".join(quoted[:-1]) + f", or {quoted[-1]}"
        return f"Invalid {self.name} parameter. Must be {choices}"

    def missing_message(self) -> str:
        return f"{self.name} parameter is required"


class ResourceEndpoint(BaseModel):
    """
    Everything that distinguishes one proxied endpoint from another.

    Attributes:
        name: Route name, e.g. ``databases-list``
        resource: Management API resource (databases, forests, ...)
        instance: True for ``/{idOrName}/properties`` endpoints
        params: Recognized parameters, in validation and forwarding order
        fallback_media_type: Content type used when no format is known
        echo_upstream_content_type: Relay MarkLogic's own Content-Type on success
        upstream_errors: ``envelope`` wraps error statuses in a JSON message,
            ``passthrough`` relays MarkLogic's error body
        collapse_error_status: Map upstream error statuses onto 400/401/404/500
    """

    model_config = ConfigDict(frozen=True)

    name: str
    resource: str
    instance: bool = False
    params: Tuple[ParamSpec, ...] = ()
    fallback_media_type: str = FORMAT_MEDIA_TYPES["json"]
    echo_upstream_content_type: bool = False
    upstream_errors: Literal["envelope", "passthrough"] = "envelope"
    collapse_error_status: bool = False

    @property
    def route_path(self) -> str:
        """Inbound route path, mirroring the upstream one."""
        path = f"{MANAGE_API_PREFIX}/{self.resource}"
        if self.instance:
            path += "/{id_or_name}/properties"
        return path

    def upstream_path(self, id_or_name: Optional[str] = None) -> str:
        """
        Path of the upstream request.

        Args:
            id_or_name: Resource instance, required for instance endpoints

        Returns:
            Path such as ``/manage/v2/databases/Documents/properties``
        """
        path = f"{MANAGE_API_PREFIX}/{self.resource}"
        if self.instance:
            if id_or_name is None:
                raise ValueError(f"{self.name} requires an idOrName")
            path += f"/{quote(id_or_name, safe='')}/properties"
        return path

    def media_type_for(self, fmt: Optional[str]) -> str:
        """Content type of a relayed response for the given effective format."""
        if fmt is None:
            return self.fallback_media_type
        return FORMAT_MEDIA_TYPES[fmt]


# ============================================================================
# Response Models
# ============================================================================

class ErrorEnvelope(BaseModel):
    """Body of every error the proxy produces itself."""
    error: str = Field(..., description="Human readable error message")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(default="ok", description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    upstream: str = Field(..., description="Management API base URL")
