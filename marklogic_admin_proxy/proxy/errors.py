"""
Proxy error taxonomy.

Every failure a proxied request can run into is raised as a ``ProxyError``
subclass. Each one knows its HTTP status and how to render itself; the
application registers a single exception handler that calls ``to_response``.
"""

from typing import Optional

from fastapi import status
from fastapi.responses import JSONResponse, Response

from ..models import ErrorEnvelope


class ProxyError(Exception):
    """Base exception for proxy failures"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Response:
        return JSONResponse(
            status_code=self.status_code,
            content=ErrorEnvelope(error=self.message).model_dump(),
        )


class LocalValidationError(ProxyError):
    """A query parameter is missing or outside its allowed set"""
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamUnreachable(ProxyError):
    """Transport failure before MarkLogic produced a response"""
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, cause: str):
        super().__init__(f"Failed to proxy to MarkLogic: {cause}")


class EmptyUpstreamResponse(ProxyError):
    """MarkLogic answered successfully but without a body"""
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self):
        super().__init__("No response from MarkLogic server")


class UnclassifiedError(ProxyError):
    """Anything else that went wrong while forwarding"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, cause: str):
        super().__init__(f"Unexpected error: {cause}")


# Upstream error statuses kept as-is when an endpoint collapses error codes
COLLAPSED_ERROR_STATUSES = (
    status.HTTP_400_BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND,
)


class UpstreamStatusError(ProxyError):
    """
    MarkLogic answered with a non-2xx status.

    Depending on the endpoint the error is either wrapped in the proxy's own
    JSON envelope or MarkLogic's body is relayed unchanged.

    Attributes:
        upstream_status: Status code returned by MarkLogic
        body: Raw upstream body
        media_type: Content type for a relayed body
        passthrough: Relay the upstream body instead of an envelope
        collapse: Map the status onto 400/401/404/500
    """

    def __init__(
        self,
        upstream_status: int,
        body: bytes = b"",
        media_type: Optional[str] = None,
        passthrough: bool = False,
        collapse: bool = False,
    ):
        super().__init__(f"MarkLogic returned status: {upstream_status}")
        self.upstream_status = upstream_status
        self.body = body
        self.media_type = media_type
        self.passthrough = passthrough
        self.collapse = collapse
        self.status_code = self._relayed_status()

    def _relayed_status(self) -> int:
        if not self.collapse or self.upstream_status in COLLAPSED_ERROR_STATUSES:
            return self.upstream_status
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_response(self) -> Response:
        if not self.passthrough:
            return super().to_response()

        return Response(
            content=self.body,
            status_code=self.status_code,
            media_type=self.media_type,
        )
