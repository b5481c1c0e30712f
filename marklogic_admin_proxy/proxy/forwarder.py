"""
Request validation, forwarding and response translation.

Flow for every proxied request:
1. Validate the inbound query string against the endpoint's parameter specs
2. Build the upstream path and Accept header
3. Issue exactly one GET through the shared digest-authenticated client
4. Translate the upstream response (or failure) into the outbound response
"""

import logging
from typing import List, Mapping, Optional, Tuple

import httpx
from fastapi.responses import Response

from ..models import FORMAT_MEDIA_TYPES, ResourceEndpoint
from .errors import (
    EmptyUpstreamResponse,
    LocalValidationError,
    UnclassifiedError,
    UpstreamStatusError,
    UpstreamUnreachable,
)

logger = logging.getLogger(__name__)

QueryParams = List[Tuple[str, str]]


# ============================================================================
# Validation
# ============================================================================

def validate_query(endpoint: ResourceEndpoint, query: Mapping[str, str]) -> QueryParams:
    """
    Validate inbound query parameters for an endpoint.

    Blank values count as absent. Absent parameters take their default or are
    dropped; parameters the endpoint does not recognize are ignored.

    Args:
        endpoint: Endpoint descriptor
        query: Inbound query parameters

    Returns:
        Validated (name, value) pairs in the endpoint's declared order

    Raises:
        LocalValidationError: On the first missing or disallowed parameter
    """
    validated: QueryParams = []

    for spec in endpoint.params:
        value = query.get(spec.name)
        if value is not None and not value.strip():
            value = None

        if value is None:
            if spec.required:
                raise LocalValidationError(spec.missing_message())
            if spec.default is None:
                continue
            value = spec.default

        if spec.allowed is not None and value not in spec.allowed:
            raise LocalValidationError(spec.invalid_message())

        validated.append((spec.name, value))

    return validated


# ============================================================================
# Forwarding
# ============================================================================

async def forward(
    endpoint: ResourceEndpoint,
    query: Mapping[str, str],
    client: httpx.AsyncClient,
    id_or_name: Optional[str] = None,
) -> Response:
    """
    Proxy one inbound request to the Management API.

    Args:
        endpoint: Endpoint descriptor
        query: Inbound query parameters
        client: Shared upstream client (base URL and digest auth preconfigured)
        id_or_name: Resource instance for properties endpoints

    Returns:
        Response relaying the upstream body

    Raises:
        ProxyError: Subclass describing the failure
    """
    params = validate_query(endpoint, query)
    fmt = dict(params).get("format")

    headers = {}
    if fmt is not None:
        headers["Accept"] = FORMAT_MEDIA_TYPES[fmt]

    path = endpoint.upstream_path(id_or_name)

    logger.info(
        f"Proxying {endpoint.name} request to MarkLogic",
        extra={
            "endpoint": endpoint.name,
            "id_or_name": id_or_name,
            "params": params,
        }
    )
    logger.debug(f"Upstream request: GET {path} {params}")

    try:
        upstream = await client.get(path, params=params, headers=headers)
    except httpx.HTTPError as e:
        logger.error(
            f"Error communicating with MarkLogic: {e}",
            extra={"endpoint": endpoint.name, "exception_type": type(e).__name__}
        )
        raise UpstreamUnreachable(str(e)) from e
    except Exception as e:
        logger.error(
            f"Unexpected error in {endpoint.name} endpoint: {e}",
            exc_info=True,
            extra={"endpoint": endpoint.name}
        )
        raise UnclassifiedError(str(e)) from e

    return translate_response(endpoint, upstream, endpoint.media_type_for(fmt))


# ============================================================================
# Response Translation
# ============================================================================

def translate_response(
    endpoint: ResourceEndpoint,
    upstream: httpx.Response,
    media_type: str,
) -> Response:
    """
    Map an upstream response onto the outbound one.

    Args:
        endpoint: Endpoint descriptor
        upstream: Response returned by MarkLogic
        media_type: Content type derived from the requested format

    Returns:
        Outbound response for a successful upstream call

    Raises:
        EmptyUpstreamResponse: Upstream succeeded without a body
        UpstreamStatusError: Upstream returned a non-2xx status
    """
    upstream_content_type = upstream.headers.get("content-type")

    if not upstream.is_success:
        logger.warning(
            f"MarkLogic returned error status: {upstream.status_code}",
            extra={
                "endpoint": endpoint.name,
                "status_code": upstream.status_code,
                "body_length": len(upstream.content),
            }
        )
        raise UpstreamStatusError(
            upstream.status_code,
            body=upstream.content,
            media_type=upstream_content_type or media_type,
            passthrough=endpoint.upstream_errors == "passthrough",
            collapse=endpoint.collapse_error_status,
        )

    if not upstream.content:
        logger.error(
            "Received empty response body from MarkLogic",
            extra={"endpoint": endpoint.name, "status_code": upstream.status_code}
        )
        raise EmptyUpstreamResponse()

    if endpoint.echo_upstream_content_type:
        media_type = upstream_content_type or FORMAT_MEDIA_TYPES["json"]

    logger.debug(
        f"MarkLogic response status: {upstream.status_code}, body length: {len(upstream.content)}"
    )

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=media_type,
    )
