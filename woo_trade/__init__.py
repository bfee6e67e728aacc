"""Python SDK for the WOO exchange trade API."""

from importlib.metadata import PackageNotFoundError, version

from woo_trade.api import WooApiClient
from woo_trade.errors import (
    ApiRejected,
    BaseError,
    EncodingError,
    ExchangeError,
    InvalidSignature,
    MissingCredentialsError,
    SigningError,
    TransportError,
    ValidationError,
)
from woo_trade.request import PreparedRequest, build_authorized_request
from woo_trade.signing import (
    ApiCredentials,
    canonical_query_string,
    sign,
    sign_request,
    signature_input,
)
from woo_trade.types import (
    Environment,
    Order,
    OrderRequest,
    OrderResponse,
    OrderStatus,
    OrderType,
    PositionSide,
    Side,
    Trade,
)


def get_version() -> str:
    """Return the installed package version, or ``0.0.0+unknown`` from a source tree."""
    try:
        return version("woo-trade")
    except PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = get_version()

__all__ = [
    "WooApiClient",
    "ApiCredentials",
    "PreparedRequest",
    "build_authorized_request",
    "canonical_query_string",
    "sign",
    "sign_request",
    "signature_input",
    "Environment",
    "Order",
    "OrderRequest",
    "OrderResponse",
    "OrderStatus",
    "OrderType",
    "PositionSide",
    "Side",
    "Trade",
    "BaseError",
    "ExchangeError",
    "ApiRejected",
    "InvalidSignature",
    "TransportError",
    "ValidationError",
    "MissingCredentialsError",
    "EncodingError",
    "SigningError",
    "get_version",
    "__version__",
]
