"""
Unit Tests for Parameter Validation
===================================

Tests for marklogic_admin_proxy/proxy/forwarder.py (validate_query) and the
endpoint descriptors in marklogic_admin_proxy/models.py.

Run tests:
----------
    pytest marklogic_admin_proxy/tests/test_validation.py -v
"""

import pytest

from marklogic_admin_proxy.models import ParamSpec
from marklogic_admin_proxy.proxy.endpoints import (
    DATABASE_PROPERTIES,
    DATABASES_LIST,
    ENDPOINTS,
    FORESTS_LIST,
    HOSTS_LIST,
    LOGS_LIST,
    ROLES_LIST,
    SERVER_PROPERTIES,
    SERVERS_LIST,
)
from marklogic_admin_proxy.proxy.errors import LocalValidationError
from marklogic_admin_proxy.proxy.forwarder import validate_query


# ============================================================================
# Defaults and Omission
# ============================================================================

def test_default_format_applied_when_absent():
    assert validate_query(DATABASES_LIST, {}) == [("format", "json")]
    assert validate_query(ROLES_LIST, {}) == [("format", "xml")]


def test_absent_optional_without_default_is_dropped():
    assert validate_query(HOSTS_LIST, {}) == []


def test_blank_optional_value_treated_as_absent():
    assert validate_query(DATABASES_LIST, {"format": "  ", "view": ""}) == [("format", "json")]


def test_unknown_parameters_ignored():
    assert validate_query(DATABASES_LIST, {"format": "xml", "bogus": "1"}) == [("format", "xml")]


def test_free_form_values_passed_unmodified():
    params = validate_query(
        LOGS_LIST,
        {"filename": "ErrorLog.txt", "regex": "^Error.* [a-z]+$", "start": "2024-01-01T00:00:00"},
    )
    assert ("regex", "^Error.* [a-z]+$") in params
    assert ("start", "2024-01-01T00:00:00") in params


def test_validated_params_follow_declared_order():
    query = {
        "fullrefs": "true",
        "host-id": "h1",
        "view": "status",
        "format": "xml",
        "database-id": "Documents",
        "group-id": "Default",
    }
    names = [name for name, _ in validate_query(FORESTS_LIST, query)]
    assert names == ["format", "view", "database-id", "group-id", "host-id", "fullrefs"]


# ============================================================================
# Rejections
# ============================================================================

def test_invalid_format_rejected_with_allowed_values():
    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(DATABASE_PROPERTIES, {"format": "html"})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid format parameter. Must be 'json' or 'xml'"


def test_invalid_view_rejected():
    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(SERVERS_LIST, {"view": "everything"})

    assert exc_info.value.message == (
        "Invalid view parameter. Must be 'default', 'schema', 'status', 'metrics', or 'package'"
    )


def test_invalid_fullrefs_rejected():
    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(FORESTS_LIST, {"fullrefs": "yes"})

    assert exc_info.value.message == "Invalid fullrefs parameter. Must be 'true' or 'false'"


def test_format_checked_before_view_and_fullrefs():
    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(FORESTS_LIST, {"format": "csv", "view": "bad", "fullrefs": "bad"})
    assert "Invalid format parameter" in exc_info.value.message

    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(FORESTS_LIST, {"view": "bad", "fullrefs": "bad"})
    assert "Invalid view parameter" in exc_info.value.message


def test_enumerated_values_are_case_sensitive():
    with pytest.raises(LocalValidationError):
        validate_query(DATABASES_LIST, {"format": "JSON"})


@pytest.mark.parametrize("filename", [None, "", "   "])
def test_logs_filename_required(filename):
    query = {} if filename is None else {"filename": filename}

    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(LOGS_LIST, query)

    assert exc_info.value.message == "filename parameter is required"


def test_server_properties_requires_group_id():
    with pytest.raises(LocalValidationError) as exc_info:
        validate_query(SERVER_PROPERTIES, {"format": "xml"})

    assert exc_info.value.message == "group-id parameter is required"


def test_server_properties_forwards_format_then_group_id():
    params = validate_query(SERVER_PROPERTIES, {"group-id": "Default"})
    assert params == [("format", "json"), ("group-id", "Default")]


# ============================================================================
# Descriptors
# ============================================================================

def test_three_value_message_uses_serial_list():
    spec = ParamSpec(name="format", allowed=("json", "xml", "html"))
    assert spec.invalid_message() == "Invalid format parameter. Must be 'json', 'xml', or 'html'"


def test_upstream_path_encodes_id_or_name():
    assert DATABASE_PROPERTIES.upstream_path("App Services") == "/manage/v2/databases/App%20Services/properties"
    assert DATABASE_PROPERTIES.upstream_path("a/b") == "/manage/v2/databases/a%2Fb/properties"
    assert DATABASES_LIST.upstream_path() == "/manage/v2/databases"


def test_instance_endpoint_requires_id_or_name():
    with pytest.raises(ValueError):
        DATABASE_PROPERTIES.upstream_path()


def test_endpoint_table_covers_every_route():
    paths = {endpoint.route_path for endpoint in ENDPOINTS}
    for resource in ("databases", "forests", "groups", "hosts", "roles", "servers", "users"):
        assert f"/manage/v2/{resource}" in paths
        assert f"/manage/v2/{resource}/{{id_or_name}}/properties" in paths
    assert "/manage/v2/logs" in paths
    assert len(ENDPOINTS) == 15


def test_every_format_param_is_validated_first():
    for endpoint in ENDPOINTS:
        assert endpoint.params[0].name == "format"
        assert endpoint.params[0].allowed
