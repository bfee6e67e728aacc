"""Helper utilities for the WOO trade SDK.

This module contains utility functions for environment URLs, response
deserialization, response checks and display formatting.
"""

import inspect
import logging
from dataclasses import asdict, is_dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, TypeVar

import orjson
from prettyprinter import cpprint

from woo_trade.errors import (
    ApiRejected,
    DeserializationError,
    InvalidSignature,
    MaintenanceOutage,
)
from woo_trade.types import Environment, Json, JsonObject

log = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_API_URL: str = "https://api.woo.org"
STAGING_API_URL: str = "https://api.staging.woo.org"

API_URLS: dict[Environment, str] = {
    Environment.PRODUCTION: DEFAULT_API_URL,
    Environment.STAGING: STAGING_API_URL,
}

INVALID_SIGNATURE_CODE = -1001

SYSTEM_STATUS_NORMAL = 0
SYSTEM_STATUS_MAINTENANCE = 2


def api_url_for(environment: Environment) -> str:
    """Return the REST base URL of an environment."""
    return API_URLS[environment]


# ============================================================================
# CLIENT IDENTIFICATION
# ============================================================================


@lru_cache(maxsize=1)
def get_user_agent() -> str:
    """Get the SDK identification string sent as ``User-Agent``."""
    import woo_trade

    return f"WooTradePythonSDK/{woo_trade.__version__}"


# ============================================================================
# REFLECTION UTILITIES
# ============================================================================

T = TypeVar("T")


def create_with(func: Callable[..., T], data: Dict[str, Any]) -> T:
    """Create an object from a dictionary, filtering to only valid parameters.

    This allows constructing objects from API responses that may contain
    additional fields beyond what the constructor expects.

    Args:
        func: Constructor or factory function to call
        data: Dictionary of data to pass as kwargs

    Returns:
        Instance created by calling func with filtered data

    """
    sig = inspect.signature(func)
    valid_keys = sig.parameters.keys()
    filtered_data = {k: v for k, v in data.items() if k in valid_keys}
    return func(**filtered_data)


# ============================================================================
# DESERIALIZATION
# ============================================================================


def deserialize_response(response_body: bytes, url: str) -> Json:
    """Deserialize a JSON response body.

    Args:
        response_body: Response bytes to deserialize
        url: URL that was requested (for error messages)

    Returns:
        Deserialized JSON object, or an empty dict for an empty body

    Raises:
        DeserializationError: If deserialization fails or the root is not an object

    """
    if not response_body:
        return {}
    try:
        body = orjson.loads(response_body)
    except orjson.JSONDecodeError as e:
        raise DeserializationError(
            f"Failed to parse JSON response from {url}: {e}"
        ) from e
    if not isinstance(body, dict):
        raise DeserializationError(
            f"Expected a JSON object from {url}, got {type(body).__name__}"
        )
    return body


# ============================================================================
# RESPONSE CHECKS
# ============================================================================


def error_code(body: JsonObject) -> int | None:
    """Extract the exchange error code from a response body, if any."""
    code = body.get("code")
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, str):
        try:
            return int(code)
        except ValueError:
            return None
    return None


def check_success(body: JsonObject) -> None:
    """Raise if a 2XX response body reports ``success: false``.

    Raises:
        InvalidSignature: If the exchange rejected the signature.
        ApiRejected: For any other application-level rejection.

    """
    if body.get("success", True) is not False:
        return

    code = error_code(body)
    message = str(body.get("message") or "<no error message>")
    if code == INVALID_SIGNATURE_CODE:
        raise InvalidSignature(code, message)
    raise ApiRejected(code, message)


def check_system_status(status: int, message: str | None = None) -> None:
    """Raise MaintenanceOutage unless the exchange reports normal operation.

    Args:
        status: ``data.status`` from ``/v1/public/system_info``
        message: ``data.msg`` from the same response

    Raises:
        MaintenanceOutage: For any status other than 0 (normal)

    """
    if status == SYSTEM_STATUS_NORMAL:
        return

    if status == SYSTEM_STATUS_MAINTENANCE:
        text = "Exchange is currently under maintenance"
    else:
        text = f"Exchange is currently unavailable (status: {status})"
    if message:
        text += f". Reason: {message}"
    log.warning("%s", text)
    raise MaintenanceOutage(text)


# ============================================================================
# DISPLAY UTILITIES
# ============================================================================


def print_data(response: Any) -> None:
    """Pretty-print response data, handling dataclasses specially.

    Dataclass instances are converted to dictionaries before printing
    for better formatting.

    Args:
        response: Data to print

    """
    if is_dataclass(response) and not isinstance(response, type):
        cpprint(asdict(response))
    else:
        cpprint(response)
