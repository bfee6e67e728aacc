"""Outgoing request construction.

Turns a method, a path and a signable parameter mapping into a
:class:`PreparedRequest` that an executor can transmit as-is. For authorized
requests the canonical query string is computed once and used both as the
signed string and as the transmitted query string or form body, so the values
the server receives are always the values that were signed.
"""

import logging
from time import time_ns
from typing import Callable, TypeAlias

from woo_trade.errors import MissingCredentialsError, ValidationError
from woo_trade.helpers import get_user_agent
from woo_trade.signing import ApiCredentials, SignableRequest, canonical_query_string

log = logging.getLogger(__name__)

# Returns milliseconds since the Unix epoch
Clock: TypeAlias = Callable[[], int]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

BODY_METHODS = frozenset({"POST", "PUT"})
SUPPORTED_METHODS = frozenset({"GET", "DELETE"}) | BODY_METHODS


def now_ms() -> int:
    """Return the current wall time in milliseconds since the Unix epoch."""
    return time_ns() // 1_000_000


class PreparedRequest:
    """A fully built HTTP request, ready to be sent by an executor."""

    method: str
    url: str
    headers: dict[str, str]
    content: bytes | None
    timestamp: int | None
    signature: str | None

    __slots__ = ("method", "url", "headers", "content", "timestamp", "signature")

    def __init__(
        self,
        *,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | None = None,
        timestamp: int | None = None,
        signature: str | None = None,
    ) -> None:
        """Initialize a prepared request.

        Args:
            method: Upper-case HTTP method.
            url: Absolute URL including the query string, if any.
            headers: Headers to send.
            content: Form-encoded body for POST/PUT requests.
            timestamp: The signed millisecond timestamp (authorized requests only).
            signature: The request signature (authorized requests only).

        """
        self.method = method
        self.url = url
        self.headers = headers
        self.content = content
        self.timestamp = timestamp
        self.signature = signature

    @property
    def path(self) -> str:
        """The URL without scheme and host, as used in log lines and mocks."""
        _, _, rest = self.url.partition("://")
        slash = rest.find("/")
        return rest[slash:] if slash >= 0 else "/"

    def __repr__(self) -> str:
        return f"PreparedRequest(method={self.method!r}, url={self.url!r})"


def _normalize_method(method: str) -> str:
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        raise ValidationError(f"Unsupported HTTP method {method!r}")
    return normalized


def _join_url(api_url: str, path: str) -> str:
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{api_url.rstrip('/')}{path}"


def build_public_request(
    api_url: str,
    path: str,
    params: SignableRequest | None = None,
) -> PreparedRequest:
    """Build an unauthenticated GET request.

    Parameters are encoded with the same canonical form as signed requests.
    """
    url = _join_url(api_url, path)
    query = canonical_query_string(params)
    if query:
        url = f"{url}?{query}"
    return PreparedRequest(
        method="GET",
        url=url,
        headers={"User-Agent": get_user_agent()},
    )


def build_authorized_request(
    method: str,
    api_url: str,
    path: str,
    params: SignableRequest | None,
    credentials: ApiCredentials | None,
    clock: Clock = now_ms,
) -> PreparedRequest:
    """Build a signed request for the trade API.

    GET and DELETE requests carry the canonical query string in the URL. POST
    and PUT requests carry it as an ``application/x-www-form-urlencoded`` body.
    For parameter-less calls the signed string is ``"|{timestamp}"``.

    Args:
        method: HTTP method (GET, POST, PUT, DELETE).
        api_url: Base URL of the selected environment.
        path: Endpoint path, e.g. ``/v1/order``.
        params: Request parameters, ``None`` values are omitted.
        credentials: API key and secret.
        clock: Millisecond timestamp source.

    Returns:
        PreparedRequest with ``x-api-key``, ``x-api-timestamp`` and
        ``x-api-signature`` headers.

    Raises:
        MissingCredentialsError: If no credentials are configured.
        EncodingError: If a parameter cannot be encoded.
        ValidationError: If the method or the clock value is invalid.

    """
    if credentials is None:
        raise MissingCredentialsError("API key and secret")

    method = _normalize_method(method)
    query = canonical_query_string(params)
    timestamp = clock()
    signature = credentials.sign(query, timestamp)

    headers = {
        "User-Agent": get_user_agent(),
        "Content-Type": FORM_CONTENT_TYPE,
        **credentials.headers(signature, timestamp),
    }

    url = _join_url(api_url, path)
    content: bytes | None = None
    if method in BODY_METHODS:
        content = query.encode("utf-8")
    elif query:
        url = f"{url}?{query}"

    log.debug("Prepared %s %s (timestamp=%d)", method, path, timestamp)
    return PreparedRequest(
        method=method,
        url=url,
        headers=headers,
        content=content,
        timestamp=timestamp,
        signature=signature,
    )
