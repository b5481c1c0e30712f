"""
Shared fixtures for the proxy test suite.

The upstream MarkLogic client is replaced by an AsyncMock whose ``get``
returns real ``httpx.Response`` objects (or raises httpx exceptions), so the
whole request path runs except the network call.
"""

from typing import Optional
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from marklogic_admin_proxy.main import create_app


def upstream_response(
    status_code: int = 200,
    body: str = "",
    content_type: Optional[str] = "application/json",
) -> httpx.Response:
    """Build an upstream response the mock client hands back."""
    headers = {"content-type": content_type} if content_type else {}
    return httpx.Response(status_code, content=body.encode("utf-8"), headers=headers)


@pytest.fixture
def mock_marklogic_client():
    """Create mock MarkLogic HTTP client"""
    client = AsyncMock()
    client.get.return_value = upstream_response(200, '{"ok": true}')
    return client


@pytest.fixture
def app(mock_marklogic_client):
    """Create test FastAPI application with the mocked upstream client"""
    app = create_app()
    app.state.app_state.marklogic_client = mock_marklogic_client
    return app


@pytest.fixture
def client(app):
    """Create test client (lifespan is not run, so the mock stays in place)"""
    return TestClient(app)
