"""Request authentication for the WOO trade API.

Every authenticated request is signed in two steps:

1. The request parameters are canonicalized: absent (``None``) fields are
   dropped, every present field is form-encoded as ``key=value``, and the
   encoded segments are sorted byte-wise and joined with ``&``.
2. ``"{canonical_query_string}|{timestamp_ms}"`` is signed with HMAC-SHA256
   keyed by the API secret, and the digest is hex-encoded in lowercase.

Both steps are pure functions. They are exposed separately so the canonical
form and the signature can be checked against the exchange's reference
vectors without building an HTTP request.

Example:
    .. code-block:: python

        from woo_trade.signing import canonical_query_string, sign

        query = canonical_query_string(
            {"symbol": "SPOT_BTC_USDT", "side": "BUY", "order_type": "LIMIT",
             "order_price": 9000.0, "order_quantity": 0.11}
        )
        # order_price=9000&order_quantity=0.11&order_type=LIMIT&side=BUY&symbol=SPOT_BTC_USDT
        signature = sign(query, 1578565539808, "QHKRXHPAW1MC9YGZMAT8YDJG2HPR")

"""

import hmac
import math
from collections.abc import Iterable, Iterator, Mapping
from decimal import Decimal
from enum import Enum
from hashlib import sha256
from typing import Any, TypeAlias
from urllib.parse import quote_plus

from woo_trade.errors import EncodingError, SigningError, ValidationError

# ============================================================================
# TYPE ALIASES
# ============================================================================

SignableScalar: TypeAlias = str | int | float | bool | Decimal | Enum
SignableValue: TypeAlias = (
    SignableScalar | list["SignableValue"] | tuple["SignableValue", ...] | Mapping[str, Any]
)
SignableRequest: TypeAlias = Mapping[str, SignableValue | None]
Secret: TypeAlias = str | bytes | bytearray

MAX_TIMESTAMP = 2**64 - 1

SIGNATURE_SEPARATOR = "|"
SEGMENT_SEPARATOR = "&"

API_KEY_HEADER = "x-api-key"
API_TIMESTAMP_HEADER = "x-api-timestamp"
API_SIGNATURE_HEADER = "x-api-signature"


# ============================================================================
# SCALAR CONVERSION
# ============================================================================


def format_float(value: float) -> str:
    """Format a float the way the exchange expects it on the wire.

    Produces the shortest decimal that round-trips to ``value``, never in
    exponent notation and without a trailing ``.0`` for integral values:
    ``9000.0 -> "9000"``, ``0.11 -> "0.11"``, ``1e-7 -> "0.0000001"``.

    Raises:
        EncodingError: If the value is NaN or infinite.

    """
    if not math.isfinite(value):
        raise EncodingError(f"Cannot encode non-finite float {value!r}")
    # repr gives the shortest round-trip digits, normalize drops the trailing zeros
    return format(Decimal(repr(value)).normalize(), "f")


def format_scalar(value: Any, field: str | None = None) -> str:
    """Convert a single scalar field value into its string form.

    Args:
        value: The value to convert.
        field: Field name used in error messages.

    Returns:
        The string form of the value, before percent-encoding.

    Raises:
        EncodingError: If the value is not a supported scalar.

    """
    if isinstance(value, Enum):
        value = value.value
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        try:
            return format_float(value)
        except EncodingError as e:
            raise EncodingError(e.message, field=field) from None
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise EncodingError(f"Cannot encode non-finite decimal {value}", field=field)
        return format(value, "f")
    raise EncodingError(
        f"Unsupported value type {type(value).__name__}", field=field
    )


# ============================================================================
# CANONICAL QUERY ENCODER
# ============================================================================


def _flatten(key: str, value: Any) -> Iterator[tuple[str, str]]:
    """Flatten one present field into ``(key, value)`` string pairs.

    Sequences become ``key[0]``, ``key[1]``, ... and mappings become
    ``key[sub]``. ``None`` inside a mapping is an absent field. ``None``
    inside a sequence has no position-preserving encoding and is rejected.
    """
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            if sub_value is None:
                continue
            if not isinstance(sub_key, str) or not sub_key:
                raise EncodingError(f"Invalid nested field name {sub_key!r}", field=key)
            yield from _flatten(f"{key}[{sub_key}]", sub_value)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            if item is None:
                raise EncodingError(f"Sequence element {index} has no value", field=key)
            yield from _flatten(f"{key}[{index}]", item)
    else:
        yield key, format_scalar(value, field=key)


def present_fields(request: SignableRequest | None) -> list[tuple[str, str]]:
    """Drop absent fields and flatten the rest into ``(key, value)`` pairs.

    The returned pairs keep the request's iteration order and are not yet
    percent-encoded.

    Raises:
        EncodingError: If a field name or value is not encodable.

    """
    if request is None:
        return []
    if not isinstance(request, Mapping):
        raise EncodingError(
            f"Request must be a mapping, got {type(request).__name__}"
        )

    pairs: list[tuple[str, str]] = []
    for key, value in request.items():
        if not isinstance(key, str) or not key:
            raise EncodingError(f"Invalid field name {key!r}")
        if value is None:
            continue
        pairs.extend(_flatten(key, value))
    return pairs


def encode_segments(pairs: Iterable[tuple[str, str]]) -> list[str]:
    """Form-encode each pair into a ``key=value`` segment."""
    return [f"{quote_plus(key, safe='')}={quote_plus(value, safe='')}" for key, value in pairs]


def sort_segments(segments: Iterable[str]) -> list[str]:
    """Sort fully encoded ``key=value`` segments in byte-wise order.

    The sort runs on the encoded segments, not on the raw keys: percent-escapes
    and the ``=`` separator take part in the ordering.
    """
    return sorted(segments, key=lambda segment: segment.encode("utf-8"))


def canonical_query_string(request: SignableRequest | None) -> str:
    """Build the canonical query string of a request.

    Args:
        request: Mapping of field name to value. ``None`` values are absent
            fields. ``None`` for the request itself means no parameters.

    Returns:
        Sorted, ``&``-joined ``key=value`` segments, or ``""`` when no field
        is present.

    Raises:
        EncodingError: If a field value cannot be represented as a string.

    """
    segments = encode_segments(present_fields(request))
    return SEGMENT_SEPARATOR.join(sort_segments(segments))


# ============================================================================
# SIGNER
# ============================================================================


def _check_timestamp(timestamp: int) -> None:
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise ValidationError(
            f"Timestamp must be an integer number of milliseconds, got {type(timestamp).__name__}"
        )
    if not 0 <= timestamp <= MAX_TIMESTAMP:
        raise ValidationError(f"Timestamp out of range: {timestamp}")


def secret_to_bytes(secret: Secret) -> bytes:
    """Return the secret as the raw bytes used to key HMAC-SHA256.

    Raises:
        SigningError: If the secret is neither text nor bytes.

    """
    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, (bytes, bytearray)):
        return bytes(secret)
    raise SigningError(
        f"Secret must be str or bytes, got {type(secret).__name__}"
    )


def signature_input(canonical_query: str, timestamp: int) -> str:
    """Join the canonical query string and the millisecond timestamp with ``|``."""
    _check_timestamp(timestamp)
    return f"{canonical_query}{SIGNATURE_SEPARATOR}{timestamp}"


def sign(canonical_query: str, timestamp: int, secret: Secret) -> str:
    """Sign a canonical query string.

    Args:
        canonical_query: Output of :func:`canonical_query_string`.
        timestamp: Milliseconds since the Unix epoch.
        secret: The API secret, as text or raw bytes. Any length is accepted.

    Returns:
        The lowercase hex HMAC-SHA256 digest (64 characters).

    Raises:
        SigningError: If the secret cannot key the HMAC.
        ValidationError: If the timestamp is not a valid millisecond value.

    """
    key = secret_to_bytes(secret)
    message = signature_input(canonical_query, timestamp).encode("utf-8")
    try:
        mac = hmac.new(key, message, sha256)
    except (TypeError, ValueError) as e:
        raise SigningError(f"Failed to initialize HMAC-SHA256: {e}") from e
    return mac.hexdigest()


def sign_request(
    request: SignableRequest | None, timestamp: int, secret: Secret
) -> str:
    """Canonicalize and sign a request in one call."""
    return sign(canonical_query_string(request), timestamp, secret)


# ============================================================================
# CREDENTIALS
# ============================================================================


class ApiCredentials:
    """API key and secret used to authenticate trade requests.

    The secret is kept as bytes and never appears in ``repr`` or ``str``.
    Instances are read-only and may be shared between threads.
    """

    __slots__ = ("_api_key", "_secret")

    def __init__(self, api_key: str, api_secret: Secret):
        """Initialize credentials.

        Args:
            api_key: The public API key sent in ``x-api-key``.
            api_secret: The shared secret used to key the HMAC.

        Raises:
            ValidationError: If the API key is not a non-empty string.
            SigningError: If the secret is neither text nor bytes.

        """
        if not isinstance(api_key, str) or not api_key:
            raise ValidationError("api_key must be a non-empty string")
        object.__setattr__(self, "_api_key", api_key)
        object.__setattr__(self, "_secret", secret_to_bytes(api_secret))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is read-only")

    @property
    def api_key(self) -> str:
        """The public API key."""
        return self._api_key

    def sign(self, canonical_query: str, timestamp: int) -> str:
        """Sign a canonical query string with this secret."""
        return sign(canonical_query, timestamp, self._secret)

    def headers(self, signature: str, timestamp: int) -> dict[str, str]:
        """Return the authentication headers of a signed request."""
        return {
            API_KEY_HEADER: self._api_key,
            API_TIMESTAMP_HEADER: str(timestamp),
            API_SIGNATURE_HEADER: signature,
        }

    def __repr__(self) -> str:
        return f"ApiCredentials(api_key={self._api_key!r}, api_secret='***')"

    __str__ = __repr__
