"""Tests for helper utilities."""

import logging

import pytest

from woo_trade.errors import (
    ApiRejected,
    DeserializationError,
    InvalidSignature,
    MaintenanceOutage,
)
from woo_trade.helpers import (
    check_success,
    check_system_status,
    create_with,
    deserialize_response,
    error_code,
    get_user_agent,
    print_data,
)
from woo_trade.types import PageMeta, SystemInfo


def test_deserialize_response():
    """Test that JSON object bodies are parsed and empty bodies become {}."""
    assert deserialize_response(b'{"success": true}', "https://x") == {"success": True}
    assert deserialize_response(b"", "https://x") == {}


@pytest.mark.parametrize("body", [b"not json", b"[]", b'"text"', b"{"])
def test_deserialize_response_invalid(body):
    """Test that anything but a JSON object raises DeserializationError."""
    with pytest.raises(DeserializationError) as exc_info:
        deserialize_response(body, "https://api.gaierror.xyz/v1/order")

    assert "https://api.gaierror.xyz/v1/order" in str(exc_info.value)


@pytest.mark.parametrize(
    "body, expected",
    [
        ({"code": -1001}, -1001),
        ({"code": "-1103"}, -1103),
        ({"code": "abc"}, None),
        ({"code": True}, None),
        ({}, None),
    ],
)
def test_error_code(body, expected):
    """Test extraction of numeric and textual error codes."""
    assert error_code(body) == expected


def test_check_success():
    """Test that only success: false bodies raise."""
    check_success({"success": True})
    check_success({})

    with pytest.raises(InvalidSignature):
        check_success({"success": False, "code": -1001, "message": "bad"})

    with pytest.raises(ApiRejected) as exc_info:
        check_success({"success": False})
    assert exc_info.value.code is None
    assert exc_info.value.message == "<no error message>"


def test_check_system_status_normal():
    """Test that status 0 passes."""
    check_system_status(0, "System is functioning properly.")


def test_check_system_status_maintenance(caplog):
    """Test that status 2 raises MaintenanceOutage with the reason."""
    with caplog.at_level(logging.WARNING, logger="woo_trade.helpers"):
        with pytest.raises(MaintenanceOutage) as exc_info:
            check_system_status(2, "System upgrade")

    assert str(exc_info.value) == (
        "Exchange is currently under maintenance. Reason: System upgrade"
    )
    assert "under maintenance" in caplog.text


def test_check_system_status_unknown():
    """Test that unknown non-zero statuses are also outages."""
    with pytest.raises(MaintenanceOutage) as exc_info:
        check_system_status(1)

    assert str(exc_info.value) == "Exchange is currently unavailable (status: 1)"


def test_create_with_ignores_extra_fields():
    """Test that unknown response fields are dropped."""
    meta = create_with(
        PageMeta, {"total": 31, "records_per_page": 25, "current_page": 1, "extra": 0}
    )

    assert meta == PageMeta(total=31, records_per_page=25, current_page=1)


def test_user_agent():
    """Test the SDK identification string."""
    assert get_user_agent().startswith("WooTradePythonSDK/")


def test_print_data(capsys):
    """Test that dataclasses are printed as dictionaries."""
    print_data(SystemInfo(status=0, msg="ok"))

    out = capsys.readouterr().out
    assert "status" in out
    assert "ok" in out
