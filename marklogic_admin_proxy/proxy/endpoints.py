"""
Endpoint table for the proxied Management API resources.

Each entry describes one ``GET /manage/v2/...`` route: the parameters it
accepts (in validation order), their allowed values and defaults, and how the
upstream response is relayed. Routes are generated from this table.

Reference: https://docs.marklogic.com/REST/management
"""

from typing import Dict, Optional, Tuple

from ..models import FORMAT_MEDIA_TYPES, ParamSpec, ResourceEndpoint


JSON_XML = ("json", "xml")
JSON_XML_HTML = ("json", "xml", "html")
TRUE_FALSE = ("true", "false")


def _format(allowed: Tuple[str, ...], default: Optional[str] = None) -> ParamSpec:
    return ParamSpec(name="format", allowed=allowed, default=default)


# ============================================================================
# Databases
# ============================================================================

DATABASES_LIST = ResourceEndpoint(
    name="databases-list",
    resource="databases",
    params=(
        _format(JSON_XML, default="json"),
        ParamSpec(name="view"),
    ),
)

DATABASE_PROPERTIES = ResourceEndpoint(
    name="database-properties",
    resource="databases",
    instance=True,
    params=(_format(JSON_XML, default="json"),),
)

# ============================================================================
# Forests
# ============================================================================

FORESTS_LIST = ResourceEndpoint(
    name="forests-list",
    resource="forests",
    params=(
        _format(JSON_XML),
        ParamSpec(
            name="view",
            allowed=("schema", "counts", "storage", "metrics", "default", "status"),
        ),
        ParamSpec(name="database-id"),
        ParamSpec(name="group-id"),
        ParamSpec(name="host-id"),
        ParamSpec(name="fullrefs", allowed=TRUE_FALSE),
    ),
    echo_upstream_content_type=True,
    upstream_errors="passthrough",
)

FOREST_PROPERTIES = ResourceEndpoint(
    name="forest-properties",
    resource="forests",
    instance=True,
    params=(_format(JSON_XML),),
    echo_upstream_content_type=True,
    upstream_errors="passthrough",
)

# ============================================================================
# Groups
# ============================================================================

GROUPS_LIST = ResourceEndpoint(
    name="groups-list",
    resource="groups",
    params=(
        _format(JSON_XML_HTML, default="json"),
        ParamSpec(name="view", allowed=("schema", "default")),
    ),
)

GROUP_PROPERTIES = ResourceEndpoint(
    name="group-properties",
    resource="groups",
    instance=True,
    params=(_format(JSON_XML, default="json"),),
)

# ============================================================================
# Hosts
# ============================================================================

HOSTS_LIST = ResourceEndpoint(
    name="hosts-list",
    resource="hosts",
    params=(
        _format(("html", "json", "xml")),
        ParamSpec(name="group-id"),
        ParamSpec(name="view", allowed=("schema", "status", "metrics", "default")),
    ),
    upstream_errors="passthrough",
)

HOST_PROPERTIES = ResourceEndpoint(
    name="host-properties",
    resource="hosts",
    instance=True,
    params=(_format(JSON_XML, default="json"),),
    upstream_errors="passthrough",
)

# ============================================================================
# Logs
# ============================================================================

# start, end and regex only apply to error logs; MarkLogic rejects them for
# access and audit logs with a 400 that is relayed as-is.
LOGS_LIST = ResourceEndpoint(
    name="logs",
    resource="logs",
    params=(
        _format(("json", "xml", "html", "text")),
        ParamSpec(name="filename", required=True),
        ParamSpec(name="host"),
        ParamSpec(name="start"),
        ParamSpec(name="end"),
        ParamSpec(name="regex"),
    ),
    fallback_media_type=FORMAT_MEDIA_TYPES["xml"],
    upstream_errors="passthrough",
    collapse_error_status=True,
)

# ============================================================================
# Roles
# ============================================================================

ROLES_LIST = ResourceEndpoint(
    name="roles-list",
    resource="roles",
    params=(_format(JSON_XML_HTML, default="xml"),),
)

ROLE_PROPERTIES = ResourceEndpoint(
    name="role-properties",
    resource="roles",
    instance=True,
    params=(_format(JSON_XML, default="xml"),),
)

# ============================================================================
# Servers
# ============================================================================

SERVERS_LIST = ResourceEndpoint(
    name="servers-list",
    resource="servers",
    params=(
        _format(JSON_XML_HTML, default="json"),
        ParamSpec(name="group-id"),
        ParamSpec(
            name="view",
            allowed=("default", "schema", "status", "metrics", "package"),
        ),
        ParamSpec(name="fullrefs", allowed=TRUE_FALSE),
    ),
)

# App servers are only unique within a group, hence the required group-id
SERVER_PROPERTIES = ResourceEndpoint(
    name="server-properties",
    resource="servers",
    instance=True,
    params=(
        _format(JSON_XML, default="json"),
        ParamSpec(name="group-id", required=True),
    ),
)

# ============================================================================
# Users
# ============================================================================

USERS_LIST = ResourceEndpoint(
    name="users-list",
    resource="users",
    params=(_format(JSON_XML_HTML, default="json"),),
)

USER_PROPERTIES = ResourceEndpoint(
    name="user-properties",
    resource="users",
    instance=True,
    params=(_format(JSON_XML, default="xml"),),
)


ENDPOINTS: Tuple[ResourceEndpoint, ...] = (
    DATABASES_LIST,
    DATABASE_PROPERTIES,
    FORESTS_LIST,
    FOREST_PROPERTIES,
    GROUPS_LIST,
    GROUP_PROPERTIES,
    HOSTS_LIST,
    HOST_PROPERTIES,
    LOGS_LIST,
    ROLES_LIST,
    ROLE_PROPERTIES,
    SERVERS_LIST,
    SERVER_PROPERTIES,
    USERS_LIST,
    USER_PROPERTIES,
)

ENDPOINTS_BY_NAME: Dict[str, ResourceEndpoint] = {endpoint.name: endpoint for endpoint in ENDPOINTS}
