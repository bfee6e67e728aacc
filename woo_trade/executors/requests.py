"""HTTP executor implementation using requests."""

import logging
from typing_extensions import override

import requests

from woo_trade.errors import (
    BaseError,
    HttpConnectionError,
    TransportError,
    TransportTimeoutError,
)
from woo_trade.executors.interface import HttpExecutor, HttpResponse
from woo_trade.helpers import deserialize_response
from woo_trade.request import PreparedRequest

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class RequestsHttpExecutor(HttpExecutor):
    def __init__(
        self,
        proxy: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        if proxy is not None:
            self.session.proxies.update({"http": proxy, "https": proxy})

    @override
    def send_request(self, request: PreparedRequest) -> HttpResponse:
        method, url = request.method, request.url
        try:
            response = self.session.request(
                method,
                url,
                headers=request.headers,
                data=request.content,
                timeout=self.timeout,
            )
        except BaseError:
            raise
        except requests.Timeout as e:
            raise TransportTimeoutError(
                f"{method} request to {url} timed out", timeout_seconds=self.timeout
            ) from e
        except requests.ConnectionError as e:
            raise HttpConnectionError(f"Failed to connect to {url}", url=url) from e
        except requests.RequestException as e:
            raise TransportError(f"{method} request to {url} failed: {e}") from e

        log.debug("%s %s -> %d", method, request.path, response.status_code)
        return HttpResponse(
            status=response.status_code,
            body=deserialize_response(response.content, url),
            headers=dict(response.headers),
        )

    @override
    def close(self) -> None:
        self.session.close()
