"""
MarkLogic Admin Proxy
=====================

Thin HTTP proxy in front of the MarkLogic Management REST API.

Every ``GET /manage/v2/...`` request is validated against a per-endpoint
whitelist of query parameters, forwarded with digest authentication to the
management port, and the upstream body is relayed with a content type derived
from the requested format.

Modules:
- config: Environment-driven settings
- models: Endpoint descriptors and response envelopes
- proxy: Endpoint table, forwarding and error taxonomy
- main: FastAPI application factory
"""

__version__ = "1.0.0"
