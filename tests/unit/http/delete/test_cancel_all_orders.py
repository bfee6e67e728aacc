import pytest

from woo_trade.errors import DeserializationError
from woo_trade.executors.interface import HttpResponse
from tests.mock_executors import MockSuccessfulOutput, is_request


def test_cancel_all_orders(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(
            output=HttpResponse(status=200, body={"success": True, "status": "CANCEL_ALL_SENT"}),
            call_validation=is_request("DELETE", "/v1/orders?symbol=SPOT_BTC_USDT"),
        )
    )

    response = client.cancel_all_orders("SPOT_BTC_USDT")

    assert response.status == "CANCEL_ALL_SENT"


def test_cancel_all_orders_missing_status(mock_http_client):
    client, mock_http = mock_http_client

    mock_http.stage_output(
        MockSuccessfulOutput(output=HttpResponse(status=200, body={"success": True}))
    )

    with pytest.raises(DeserializationError):
        client.cancel_all_orders("SPOT_BTC_USDT")
