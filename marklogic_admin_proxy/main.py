"""
FastAPI Application Factory
===========================

This is the main entry point for the proxy that sits between the admin UI
(or any HTTP client) and the MarkLogic Management REST API.

Architecture:
    Admin UI → MarkLogic Admin Proxy (this service) → MarkLogic :8002/manage/v2

Routers:
    - /manage/v2/* : Validated GET requests forwarded to MarkLogic
    - /health      : Health check endpoint
    - anything else: Static 404 page

Environment Variables (all optional, see config.py):
    - MARKLOGIC_HOST, MARKLOGIC_SCHEME, MARKLOGIC_MANAGE_PORT
    - MARKLOGIC_USERNAME, MARKLOGIC_PASSWORD: Digest auth credentials
    - MARKLOGIC_TIMEOUT_SECONDS: Upstream request timeout
    - ALLOWED_ORIGINS: Comma-separated CORS origins
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn marklogic_admin_proxy.main:app --reload --port 8080

    Production:
        uvicorn marklogic_admin_proxy.main:app --host 0.0.0.0 --port 8080 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, get_settings, validate_configuration
from .models import ErrorEnvelope, HealthResponse
from .proxy import ProxyError, proxy_router
from .proxy.endpoints import ENDPOINTS

SERVICE_NAME = "marklogic-admin-proxy"

NOT_FOUND_PAGE = Path(__file__).parent / "static" / "404.html"
NOT_FOUND_FALLBACK = "<h1>404 Not Found</h1><p>The page you are looking for does not exist.</p>"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


class AppState:
    """
    Application state container.

    Holds the shared upstream client; handlers only ever read it.
    """
    def __init__(self):
        self.settings: Optional[Settings] = None
        self.marklogic_client: Optional[httpx.AsyncClient] = None


def create_marklogic_client(settings: Settings) -> httpx.AsyncClient:
    """
    Create the digest-authenticated client for the Management API.

    Args:
        settings: Application settings

    Returns:
        httpx.AsyncClient with base URL, digest auth and timeout applied
    """
    return httpx.AsyncClient(
        base_url=settings.manage_base_url,
        auth=httpx.DigestAuth(settings.MARKLOGIC_USERNAME, settings.MARKLOGIC_PASSWORD),
        timeout=httpx.Timeout(settings.MARKLOGIC_TIMEOUT_SECONDS),
    )


def load_not_found_page() -> str:
    """Read the static 404 page, falling back to inline HTML."""
    try:
        return NOT_FOUND_PAGE.read_text(encoding="utf-8")
    except OSError:
        logging.getLogger(__name__).warning(f"Could not read {NOT_FOUND_PAGE}, using inline 404 page")
        return NOT_FOUND_FALLBACK


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Load configuration and report problems
        - Create the shared MarkLogic client

    Shutdown tasks:
        - Close the MarkLogic client and its connection pool
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger(__name__)

    app_state: AppState = app.state.app_state
    app_state.settings = settings

    report = validate_configuration(settings)
    for error in report["errors"]:
        logger.error(f"Configuration error: {error}")
    for warning in report["warnings"]:
        logger.warning(f"Configuration warning: {warning}")

    app_state.marklogic_client = create_marklogic_client(settings)

    logger.info(
        "MarkLogic admin proxy started",
        extra={
            "service": SERVICE_NAME,
            "version": __version__,
            "upstream": settings.manage_base_url,
            "timeout_seconds": settings.MARKLOGIC_TIMEOUT_SECONDS,
        }
    )

    yield

    logger.info("Shutting down MarkLogic admin proxy")
    await app_state.marklogic_client.aclose()
    app_state.marklogic_client = None
    logger.info("MarkLogic client closed")


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Proxy routes
        - Exception handlers

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="MarkLogic Admin Proxy",
        description="Validating proxy for the MarkLogic Management REST API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.app_state = AppState()

    origins = settings.allowed_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(proxy_router)

    not_found_page = load_not_found_page()

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """
        Health check endpoint.

        Reports service metadata only; MarkLogic is not contacted.
        """
        return HealthResponse(
            service=SERVICE_NAME,
            version=__version__,
            upstream=get_settings().manage_base_url,
        )

    @app.get("/", tags=["System"])
    async def root() -> Dict[str, Any]:
        """
        Root endpoint with service information.

        Returns:
            dict: Service metadata and proxied endpoints
        """
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "description": "Validating proxy for the MarkLogic Management REST API",
            "endpoints": {endpoint.name: endpoint.route_path for endpoint in ENDPOINTS},
        }

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> Response:
        """Render proxy failures; each error type knows its own response."""
        return exc.to_response()

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
        """Serve the static 404 page for unmatched routes."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return HTMLResponse(content=not_found_page, status_code=status.HTTP_404_NOT_FOUND)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a standardized error response.
        """
        logger = logging.getLogger(__name__)
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorEnvelope(error=f"Unexpected error: {exc}").model_dump(),
        )

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "marklogic_admin_proxy.main:app",
        host=settings.PROXY_HOST,
        port=settings.PROXY_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
