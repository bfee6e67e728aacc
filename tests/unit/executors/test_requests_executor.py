"""Tests for the requests executor."""

from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from woo_trade.errors import (
    DeserializationError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from woo_trade.executors import RequestsHttpExecutor
from woo_trade.request import build_authorized_request
from woo_trade.signing import (
    API_SIGNATURE_HEADER,
    ApiCredentials,
    canonical_query_string,
    sign,
)
from tests.unit.conftest import API_KEY, API_SECRET, TIMESTAMP

API_URL = "https://api.gaierror.xyz"


def make_response(status: int, content: bytes) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    return response


class FakeSession:
    def __init__(self, response=None, exception=None):
        self.response = response
        self.exception = exception
        self.proxies: dict[str, str] = {}
        self.calls: list[tuple[tuple, dict]] = []
        self.closed = False

    def request(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.exception is not None:
            raise self.exception
        return self.response

    def close(self):
        self.closed = True


def cancel_request():
    return build_authorized_request(
        "DELETE",
        API_URL,
        "/v1/order",
        {"order_id": 13, "symbol": "SPOT_BTC_USDT"},
        ApiCredentials(API_KEY, API_SECRET),
        clock=lambda: TIMESTAMP,
    )


def test_sends_prepared_request():
    """Test that method, URL, headers and body are passed through unchanged."""
    session = FakeSession(make_response(200, b'{"success":true,"status":"CANCEL_SENT"}'))
    executor = RequestsHttpExecutor(session=session, timeout=3.0)  # type: ignore[arg-type]
    prepared = cancel_request()

    response = executor.send_request(prepared)

    assert response.status == 200
    assert response.body == {"success": True, "status": "CANCEL_SENT"}
    assert response.headers == {"Content-Type": "application/json"}
    [(args, kwargs)] = session.calls
    assert args == ("DELETE", f"{API_URL}/v1/order?order_id=13&symbol=SPOT_BTC_USDT")
    assert kwargs["headers"] == prepared.headers
    assert kwargs["data"] is None
    assert kwargs["timeout"] == 3.0


def test_proxy_is_configured():
    """Test that a proxy URL applies to both schemes."""
    session = FakeSession()
    RequestsHttpExecutor(proxy="http://user:pw@proxy:3128", session=session)  # type: ignore[arg-type]

    assert session.proxies == {
        "http": "http://user:pw@proxy:3128",
        "https": "http://user:pw@proxy:3128",
    }


def test_invalid_body():
    """Test that a non-JSON body raises DeserializationError."""
    session = FakeSession(make_response(503, b"Service Unavailable"))
    executor = RequestsHttpExecutor(session=session)  # type: ignore[arg-type]

    with pytest.raises(DeserializationError):
        executor.send_request(cancel_request())


@pytest.mark.parametrize(
    "raised, expected",
    [
        (requests.ConnectionError("refused"), HttpConnectionError),
        (requests.ReadTimeout("slow"), TransportTimeoutError),
        (requests.exceptions.ConnectTimeout("slow"), TransportTimeoutError),
        (requests.exceptions.TooManyRedirects("loop"), TransportError),
    ],
)
def test_transport_errors(raised, expected):
    """Test that requests errors are mapped onto the SDK transport errors."""
    executor = RequestsHttpExecutor(session=FakeSession(exception=raised))  # type: ignore[arg-type]

    with pytest.raises(expected):
        executor.send_request(cancel_request())


def test_close():
    """Test that closing the executor closes the session."""
    session = FakeSession()
    executor = RequestsHttpExecutor(session=session)  # type: ignore[arg-type]

    executor.close()

    assert session.closed


class RecordingAdapter(BaseAdapter):
    """Transport adapter that records the requests prepared by a real session."""

    def __init__(self):
        super().__init__()
        self.sent: list[requests.PreparedRequest] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        response = make_response(200, b'{"success":true}')
        response.request = request
        response.url = request.url
        return response

    def close(self):
        pass


def recording_executor() -> tuple[RequestsHttpExecutor, RecordingAdapter]:
    adapter = RecordingAdapter()
    session = requests.Session()
    session.mount("https://", adapter)
    return RequestsHttpExecutor(session=session), adapter


@pytest.mark.parametrize("method", ["GET", "DELETE"])
def test_signed_query_reaches_the_wire_unchanged(method):
    """Test that requests' URL preparation leaves the signed query untouched."""
    params = {
        "symbol": "SPOT_BTC_USDT",
        "order_tag": "grid bot/1 & 50%",
        "client_order_id": 42,
        "filter": {"side": "BUY"},
    }
    executor, adapter = recording_executor()
    prepared = build_authorized_request(
        method,
        API_URL,
        "/v1/orders",
        params,
        ApiCredentials(API_KEY, API_SECRET),
        clock=lambda: TIMESTAMP,
    )

    executor.send_request(prepared)

    [sent] = adapter.sent
    query = urlsplit(sent.url).query
    assert sent.method == method
    assert query == canonical_query_string(params)
    assert sign(query, TIMESTAMP, API_SECRET) == sent.headers[API_SIGNATURE_HEADER]


def test_signed_body_reaches_the_wire_unchanged():
    """Test that the form body is sent as the signed bytes."""
    executor, adapter = recording_executor()
    prepared = build_authorized_request(
        "POST",
        API_URL,
        "/v1/order",
        {"symbol": "SPOT_BTC_USDT", "order_type": "MARKET", "side": "BUY", "order_tag": "a/b c"},
        ApiCredentials(API_KEY, API_SECRET),
        clock=lambda: TIMESTAMP,
    )

    executor.send_request(prepared)

    [sent] = adapter.sent
    assert sent.body == prepared.content
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
