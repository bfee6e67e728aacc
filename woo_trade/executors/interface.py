"""Abstract interface for HTTP executors.

This module defines the abstract base class that all HTTP executor
implementations must follow, enabling pluggable transport layers.
"""

from abc import ABC, abstractmethod

from woo_trade.request import PreparedRequest
from woo_trade.types import JsonObject


class HttpResponse:
    """Container for HTTP response data.

    Encapsulates the status code, body, and headers from an HTTP response.
    """

    status: int
    body: JsonObject
    headers: dict[str, str] | None

    __slots__ = ("status", "body", "headers")

    def __init__(
        self,
        *,
        status: int,
        body: JsonObject | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize an HTTP response object.

        Args:
            status: The HTTP status code of the response.
            body: The JSON response body. Defaults to an empty dict if None.
            headers: Optional HTTP response headers as key-value pairs.

        """
        self.status = status
        self.body = body if body is not None else {}
        self.headers = headers


class HttpExecutor(ABC):
    """Abstract base class for HTTP request executors.

    Executors only transmit requests. Signing happens before a request reaches
    the executor, so the headers and body it sends are exactly the prepared ones.
    """

    @abstractmethod
    def send_request(self, request: PreparedRequest) -> HttpResponse:
        """Transmit a prepared request.

        Args:
            request: The request to send, headers and body included.

        Returns:
            An HttpResponse object containing the status, body, and headers.

        """
        ...

    def close(self) -> None:
        """Release pooled connections, if the executor holds any."""
        return None
