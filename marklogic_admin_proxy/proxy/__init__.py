"""
Proxy Package
=============

Forwards validated Management API requests to MarkLogic.

Main Components:
----------------
- endpoints.py: Table of proxied endpoints and their parameter rules
- forwarder.py: Validation, upstream call and response translation
- errors.py: Error taxonomy rendered by the application exception handler
- routes.py: FastAPI router generated from the endpoint table

Usage:
------
    from marklogic_admin_proxy.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .errors import ProxyError
from .routes import get_marklogic_client, proxy_router

__all__ = ["ProxyError", "get_marklogic_client", "proxy_router"]
