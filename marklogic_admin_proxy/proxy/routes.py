"""
Proxy Routes - Management API Forwarding
========================================

This module registers one GET route per entry of the endpoint table. Every
route mirrors its upstream path under ``/manage/v2`` and delegates to
``forward``, which validates, forwards and translates the response.

Error handling:
---------------
Handlers never build error responses themselves. ``forward`` raises a
``ProxyError`` subclass and the application-level exception handler renders it.
"""

import logging
from typing import Callable

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from ..models import ResourceEndpoint
from .endpoints import ENDPOINTS
from .forwarder import forward

logger = logging.getLogger(__name__)

# Create router
proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_marklogic_client(request: Request) -> httpx.AsyncClient:
    """
    Dependency to get the upstream MarkLogic client from app state.

    Args:
        request: FastAPI request object

    Returns:
        Digest-authenticated httpx.AsyncClient bound to the Management API

    Raises:
        HTTPException: 503 when the client has not been initialized
    """
    app_state = getattr(request.app.state, "app_state", None)
    client = getattr(app_state, "marklogic_client", None)
    if client is None:
        logger.error("MarkLogic client requested before initialization")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="MarkLogic client not available"
        )

    return client


# ============================================================================
# Route Generation
# ============================================================================

def _make_handler(endpoint: ResourceEndpoint) -> Callable:
    """Build the route handler for one endpoint descriptor."""
    if endpoint.instance:
        async def handler(
            id_or_name: str,
            request: Request,
            client: httpx.AsyncClient = Depends(get_marklogic_client),
        ) -> Response:
            return await forward(endpoint, request.query_params, client, id_or_name)
    else:
        async def handler(
            request: Request,
            client: httpx.AsyncClient = Depends(get_marklogic_client),
        ) -> Response:
            return await forward(endpoint, request.query_params, client)

    handler.__name__ = endpoint.name.replace("-", "_")
    return handler


def _describe(endpoint: ResourceEndpoint) -> str:
    lines = [f"Proxies `GET {endpoint.route_path}` to MarkLogic.", ""]
    for spec in endpoint.params:
        line = f"- `{spec.name}`"
        if spec.required:
            line += " (required)"
        if spec.allowed:
            line += f": one of {', '.join(spec.allowed)}"
        if spec.default:
            line += f", default {spec.default}"
        lines.append(line)
    return "\n".join(lines)


for _endpoint in ENDPOINTS:
    proxy_router.add_api_route(
        _endpoint.route_path,
        _make_handler(_endpoint),
        methods=["GET"],
        name=_endpoint.name,
        summary=f"{_endpoint.resource} {'properties' if _endpoint.instance else 'list'}",
        description=_describe(_endpoint),
        response_class=Response,
        tags=[_endpoint.resource],
    )
