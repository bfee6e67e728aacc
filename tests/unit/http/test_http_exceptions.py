"""Tests for HTTP exception handling in the API client."""

import pytest

from woo_trade.errors import (
    ApiRejected,
    BadGateway,
    BadHttpStatus,
    BadRequest,
    ExchangeError,
    Forbidden,
    GatewayTimeout,
    HttpConnectionError,
    InternalServerError,
    InvalidSignature,
    NotFound,
    RateLimited,
    ServiceUnavailable,
    Unauthorized,
)
from woo_trade.executors.interface import HttpResponse
from tests.mock_executors import MockExceptionOutput, MockSuccessfulOutput


@pytest.mark.parametrize(
    "status, error_type",
    [
        (400, BadRequest),
        (401, Unauthorized),
        (403, Forbidden),
        (404, NotFound),
        (429, RateLimited),
        (418, BadHttpStatus),
        (500, InternalServerError),
        (502, BadGateway),
        (503, ServiceUnavailable),
        (504, GatewayTimeout),
        (599, InternalServerError),
        (302, BadHttpStatus),
    ],
)
def test_status_codes(mock_http_client, status, error_type):
    """Test that each non-2XX status raises its own exception."""
    client, mock_http = mock_http_client

    error_body = {"success": False, "code": -1005, "message": "order_price is invalid"}

    mock_http.stage_output(
        MockSuccessfulOutput(output=HttpResponse(status=status, body=error_body))
    )

    with pytest.raises(error_type) as exc_info:
        client.cancel_order(1, "SPOT_BTC_USDT")

    assert exc_info.value.status_code == status
    assert "-1005" in exc_info.value.message
    assert "order_price is invalid" in exc_info.value.message


def test_error_without_body(mock_http_client):
    """Test that an empty error body still produces a readable message."""
    client, mock_http = mock_http_client

    mock_http.stage_output(MockSuccessfulOutput(output=HttpResponse(status=500)))

    with pytest.raises(InternalServerError) as exc_info:
        client.get_system_info()

    assert "<no error message>" in exc_info.value.message


def test_invalid_signature_with_error_status(mock_http_client):
    """Test that a signature rejection is distinguishable from other failures."""
    client, mock_http = mock_http_client

    error_body = {
        "success": False,
        "code": -1001,
        "message": "The api key or secret is in wrong format.",
    }
    mock_http.stage_output(
        MockSuccessfulOutput(output=HttpResponse(status=401, body=error_body))
    )

    with pytest.raises(InvalidSignature) as exc_info:
        client.get_trade_history()

    assert exc_info.value.code == -1001
    assert isinstance(exc_info.value, ExchangeError)


def test_invalid_signature_with_ok_status(mock_http_client):
    """Test that success: false with code -1001 on a 200 is a signature rejection."""
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=HttpResponse(
                status=200, body={"success": False, "code": "-1001", "message": "bad"}
            )
        )
    )

    with pytest.raises(InvalidSignature):
        client.get_trade_history()


def test_rejected_with_ok_status(mock_http_client):
    """Test that other success: false bodies raise ApiRejected."""
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=HttpResponse(
                status=200,
                body={"success": False, "code": -1103, "message": "price filter"},
            )
        )
    )

    with pytest.raises(ApiRejected) as exc_info:
        client.cancel_all_orders("SPOT_BTC_USDT")

    assert not isinstance(exc_info.value, InvalidSignature)
    assert exc_info.value.code == -1103
    assert str(exc_info.value) == "[-1103] price filter"


def test_transport_errors_propagate(mock_http_client):
    """Test that transport errors from the executor are not wrapped."""
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockExceptionOutput(exception=HttpConnectionError("refused", url="https://x"))
    )

    with pytest.raises(HttpConnectionError):
        client.get_system_info()
