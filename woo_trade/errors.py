"""Exception hierarchy for the WOO trade SDK.

This module defines the public exception hierarchy for the entire SDK. All exceptions
raised by this library inherit from BaseError.

Exception Hierarchy
-------------------
BaseError
├── ExchangeError - API server returned an error response
├── TransportError - Network/protocol-level errors during transmission
└── ValidationError - Client-side input validation failures
    ├── EncodingError - A request field cannot be canonicalized
    └── SigningError - The secret cannot key the HMAC
"""


class BaseError(Exception):
    """Base exception for all WOO trade SDK errors.

    All exceptions raised by this library inherit from this class, allowing users
    to catch all SDK-related errors with a single except clause.

    This exception should not be raised directly. Use one of the specific subclasses
    instead (ExchangeError, TransportError, ValidationError).
    """

    pass


# ============================================================================
# EXCHANGE ERROR
# ============================================================================


class ExchangeError(BaseError):
    """Exception raised when the API server returns an error response.

    ExchangeError indicates that:
    - The network connection succeeded
    - The request was properly formatted and transmitted
    - A server processed the request and returned an error response
    """

    pass


class MaintenanceOutage(ExchangeError):
    """Raised when the exchange reports that it is under maintenance."""

    def __init__(self, message: str):
        """Initialize a MaintenanceOutage error.

        Args:
            message: Description of the maintenance outage.

        """
        super().__init__(message)


class ApiRejected(ExchangeError):
    """Raised when the exchange answers with ``success: false``."""

    code: int | None
    message: str

    def __init__(self, code: int | None, message: str):
        """Initialize an ApiRejected error.

        Args:
            code: The exchange error code, if the body carried one.
            message: The exchange error message.

        """
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}" if code is not None else message)


class InvalidSignature(ApiRejected):
    """Raised when the exchange rejects the request signature (code -1001).

    A signature rejection is a caller defect (wrong secret, clock skew, or a body
    that differs from the signed values), never a transient condition.
    """

    pass


class BadHttpStatus(ExchangeError):
    """Raised when response status from exchange is not 2XX."""

    status_code: int
    message: str

    def __init__(self, status_code: int, message: str):
        """Initialize a BadHttpStatus error.

        Args:
            status_code: The HTTP status code returned by the server.
            message: Description of the HTTP error.

        """
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


## 5xx status errors - unexpected - should be reported


class InternalServerError(BadHttpStatus):
    """Raised when the server returns a 500 Internal Server Error."""

    pass


class BadGateway(BadHttpStatus):
    """Raised when the server returns a 502 Bad Gateway error."""

    pass


class ServiceUnavailable(BadHttpStatus):
    """Raised when the server returns a 503 Service Unavailable error."""

    pass


class GatewayTimeout(BadHttpStatus):
    """Raised when the server returns a 504 Gateway Timeout error."""

    pass


## 4xx status errors


class BadRequest(BadHttpStatus):
    """Raised when the server returns a 400 Bad Request error."""

    pass


class NotFound(BadHttpStatus):
    """Raised when the server returns a 404 Not Found error."""

    pass


class RateLimited(BadHttpStatus):
    """Raised when the server returns a 429 Rate Limited error."""

    pass


class Unauthorized(BadHttpStatus):
    """Raised when the server returns a 401 Unauthorized error."""

    pass


class Forbidden(BadHttpStatus):
    """Raised when the server returns a 403 Forbidden error."""

    pass


# ============================================================================
# TRANSPORT ERROR
# ============================================================================


class TransportError(BaseError):
    """Exception raised for errors in the process of transporting data to/from the API server.

    TransportError indicates that:
    - The error occurred in the process of transporting data
    - Valid application-level data was not successfully exchanged
    - The error could be transient and may succeed on retry

    Common causes include DNS failures, proxy misconfiguration, TLS errors,
    refused or dropped connections, timeouts and undecodable response bodies.
    """

    pass


class HttpConnectionError(TransportError):
    """Raised when a connection cannot be established or is lost."""

    def __init__(self, message: str, url: str | None = None):
        """Initialize an HttpConnectionError.

        Args:
            message: Description of the connection error.
            url: The URL that failed to connect, if available.

        """
        self.message = message
        self.url = url
        if url:
            super().__init__(f"{message} (url: {url})")
        else:
            super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when a request or connection times out."""

    def __init__(self, message: str, timeout_seconds: float | None = None):
        """Initialize a TransportTimeoutError.

        Args:
            message: Description of the timeout error.
            timeout_seconds: The timeout duration in seconds, if available.

        """
        self.message = message
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            super().__init__(f"{message} (timeout: {timeout_seconds}s)")
        else:
            super().__init__(message)


class DeserializationError(TransportError):
    """Raised when response data cannot be deserialized/decoded."""

    def __init__(self, message: str):
        """Initialize a DeserializationError.

        Args:
            message: Description of the deserialization error.

        """
        self.message = message
        super().__init__(message)


# ============================================================================
# VALIDATION ERROR
# ============================================================================


class ValidationError(BaseError):
    """Exception raised for client-side input validation failures.

    ValidationError indicates that:
    - No network request was attempted
    - The error is due to invalid input from the caller
    - The error can be fixed by correcting the input parameters

    Retrying with the same input reproduces the same failure.
    """

    pass


class MissingCredentialsError(ValidationError):
    """Raised when required authentication credentials are missing."""

    def __init__(self, credential_type: str = "API key"):
        """Initialize a MissingCredentialsError.

        Args:
            credential_type: The type of credential that is missing (default: "API key").

        """
        self.credential_type = credential_type
        super().__init__(f"{credential_type} is not set")


class EncodingError(ValidationError):
    """Raised when a request field cannot be encoded into the canonical query string."""

    def __init__(self, message: str, field: str | None = None):
        """Initialize an EncodingError.

        Args:
            message: Description of the encoding failure.
            field: The offending field name, if known.

        """
        self.message = message
        self.field = field
        if field:
            super().__init__(f"{message} (field: {field})")
        else:
            super().__init__(message)


class SigningError(ValidationError):
    """Raised when the secret key cannot be used to initialize HMAC-SHA256."""

    def __init__(self, message: str):
        """Initialize a SigningError.

        Args:
            message: Description of the signing failure.

        """
        self.message = message
        super().__init__(message)
