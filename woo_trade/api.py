"""HTTP API client for the WOO exchange.

This module provides the main WooApiClient class for interacting with the
WOO v1 REST API: system status, order placement and cancellation, order
queries and trade history.
"""

import logging
from typing import Any, cast

from woo_trade.errors import (
    ApiRejected,
    BadGateway,
    BadHttpStatus,
    BadRequest,
    DeserializationError,
    Forbidden,
    GatewayTimeout,
    InternalServerError,
    InvalidSignature,
    MissingCredentialsError,
    NotFound,
    RateLimited,
    ServiceUnavailable,
    Unauthorized,
    ValidationError,
)
from woo_trade.env_setup import EnvironmentConfig
from woo_trade.executors import DEFAULT_HTTP_EXECUTOR, HttpExecutor
from woo_trade.executors.interface import HttpResponse
from woo_trade.helpers import (
    INVALID_SIGNATURE_CODE,
    api_url_for,
    check_success,
    check_system_status,
    create_with,
    error_code,
)
from woo_trade.request import (
    Clock,
    PreparedRequest,
    build_authorized_request,
    build_public_request,
    now_ms,
)
from woo_trade.signing import ApiCredentials, Secret, SignableRequest
from woo_trade.types import (
    CancelResponse,
    ClientOrderId,
    Environment,
    Json,
    JsonObject,
    Order,
    OrderId,
    OrderRequest,
    OrderResponse,
    OrdersResponse,
    OrderStatus,
    OrderType,
    PageMeta,
    PositionSide,
    Side,
    SystemInfo,
    Trade,
    TradesResponse,
    WooNumericInput,
)

log = logging.getLogger(__name__)


def raise_response_errors(response: HttpResponse) -> None:
    """Check HTTP response status and raise appropriate errors.

    Validates the response status code and raises pre-defined exceptions for non-2XX
    status codes with detailed error messages extracted from the response body.
    A rejected signature is reported as InvalidSignature whatever the status code,
    so callers can tell their own signing defects apart from other failures.

    Args:
        response: The HTTP response to validate

    Raises:
        InvalidSignature: For bodies carrying exchange code -1001
        BadRequest: For 400 status codes
        Unauthorized: For 401 status codes
        Forbidden: For 403 status codes
        NotFound: For 404 status codes
        RateLimited: For 429 status codes
        BadHttpStatus: For other 4XX status codes
        InternalServerError: For 500 status codes
        BadGateway: For 502 status codes
        ServiceUnavailable: For 503 status codes
        GatewayTimeout: For 504 status codes
        ApiRejected: For 2XX responses whose body reports ``success: false``

    """
    status = response.status
    body = response.body if isinstance(response.body, dict) else {}

    if 200 <= status < 300:
        check_success(body)
        return

    code = error_code(body)
    message = body.get("message")

    if code == INVALID_SIGNATURE_CODE:
        raise InvalidSignature(code, str(message or "invalid signature"))

    if code is not None and message is not None:
        error_message = f"[{code}] {message}"
    else:
        error_message = str(body) if body else "<no error message>"

    # 4xx Client Errors
    if status == 400:
        raise BadRequest(status, f"Bad request: {error_message}")

    if status == 401:
        raise Unauthorized(status, f"Unauthorized: {error_message}")

    if status == 403:
        raise Forbidden(status, f"Forbidden: {error_message}")

    if status == 404:
        raise NotFound(status, f"Not found: {error_message}")

    if status == 429:
        raise RateLimited(status, f"Rate limit exceeded: {error_message}")

    if 400 <= status < 500:
        raise BadHttpStatus(status, f"Client error ({status}): {error_message}")

    # 5xx Server Errors
    if status == 500:
        raise InternalServerError(status, f"Internal server error: {error_message}")

    if status == 502:
        raise BadGateway(status, f"Bad gateway: {error_message}")

    if status == 503:
        raise ServiceUnavailable(status, f"Service unavailable: {error_message}")

    if status == 504:
        raise GatewayTimeout(status, f"Gateway timeout: {error_message}")

    if 500 <= status < 600:
        raise InternalServerError(status, f"Server error ({status}): {error_message}")

    raise BadHttpStatus(status, f"Unexpected status code ({status}): {error_message}")


class WooApiClient:
    """WOO API client for trading operations.

    Examples:
        .. code-block:: python

            from woo_trade import Side, WooApiClient
            from woo_trade.env_setup import setup_environment

            woo = WooApiClient.from_config(setup_environment())

            print(woo.get_system_info())
            order = woo.place_limit_order("SPOT_BTC_USDT", Side.BUY, 0.11, 9000)
            woo.cancel_order(order.order_id, "SPOT_BTC_USDT")

    """

    _api_key: str | None = None
    _credentials: ApiCredentials | None = None

    _http_executor: HttpExecutor

    def __init__(
        self,
        environment: Environment = Environment.PRODUCTION,
        api_key: str | None = None,
        api_secret: Secret | None = None,
        api_url: str | None = None,
        executor: HttpExecutor | None = None,
        clock: Clock = now_ms,
    ):
        """Initialize the WOO API client.

        Args:
            environment: Production or staging; selects the default base URL.
            api_key: Your API key (optional, can be set later).
            api_secret: Your API secret (optional, can be set later).
            api_url: Base URL override for the selected environment.
            executor: Custom HTTP executor (optional, uses default if not provided).
            clock: Millisecond timestamp source used to sign requests.

        """
        self.environment = Environment(environment)
        self.api_url = api_url if api_url is not None else api_url_for(self.environment)
        self._clock = clock
        self._http_executor = (
            executor if executor is not None else DEFAULT_HTTP_EXECUTOR()
        )
        self._secret: Secret | None = None
        self.set_api_key(api_key)
        if api_secret is not None:
            self.set_api_secret(api_secret)

    @classmethod
    def from_config(
        cls, config: EnvironmentConfig, executor: HttpExecutor | None = None
    ) -> "WooApiClient":
        """Create a client from a loaded environment configuration.

        The default executor is routed through the configured proxy, if any.
        """
        if executor is None:
            executor = DEFAULT_HTTP_EXECUTOR(proxy=config.proxy_url)  # type: ignore[call-arg]
        return cls(
            environment=config.environment,
            api_key=config.api_key,
            api_secret=config.api_secret,
            api_url=config.api_url,
            executor=executor,
        )

    @property
    def api_key(self) -> str:
        """Get the current API key.

        Raises:
            ValidationError: If api_key has not been set

        """
        if self._api_key is None:
            raise ValidationError("api_key has not been set")
        return self._api_key

    def set_api_key(self, api_key: str | None) -> None:
        """Set the API key for authenticated requests.

        Args:
            api_key: The API key string (or None to clear)

        Raises:
            ValidationError: If the api_key is an invalid type

        """
        _api_key = cast(Any, api_key)
        if _api_key is not None and (not isinstance(_api_key, str) or not _api_key):
            raise ValidationError from TypeError(
                f"Unexpected value for api_key of type {type(api_key)}"
            )
        self._api_key = api_key
        self._refresh_credentials()

    def set_api_secret(self, api_secret: Secret) -> None:
        """Set the API secret used to sign requests.

        Args:
            api_secret: The secret as text or raw bytes

        Raises:
            ValidationError: If the api_secret is an invalid type

        """
        _api_secret = cast(Any, api_secret)
        if not isinstance(_api_secret, (str, bytes, bytearray)):
            raise ValidationError from TypeError(
                f"Unexpected type for api_secret {type(api_secret)}"
            )
        self._secret = bytes(_api_secret) if isinstance(_api_secret, bytearray) else _api_secret
        self._refresh_credentials()

    def _refresh_credentials(self) -> None:
        if self._api_key is not None and self._secret is not None:
            self._credentials = ApiCredentials(self._api_key, self._secret)
        else:
            self._credentials = None

    def close(self) -> None:
        """Release the executor's pooled connections."""
        self._http_executor.close()

    """ Market API endpoints, can be called without credentials """

    def get_system_info(self, raise_on_maintenance: bool = False) -> SystemInfo:
        """Get the exchange system status.

        Args:
            raise_on_maintenance: Raise MaintenanceOutage when status is not normal

        Returns:
            SystemInfo: status (0 normal, 2 maintenance) and message

        Raises:
            DeserializationError: If the API response cannot be parsed
            MaintenanceOutage: If requested and the exchange is not operating normally

        Endpoint:
            GET /v1/public/system_info

        """
        response = self.__send_simple_request("/v1/public/system_info")
        try:
            result = create_with(SystemInfo, response["data"])  # type: ignore
        except (TypeError, KeyError, ValueError) as e:
            raise DeserializationError(f"Received invalid response {response=}") from e
        if raise_on_maintenance:
            check_system_status(result.status, result.msg)
        return result

    ############################################################################
    ## Trade API endpoints, api_key and api_secret must be set

    def send_order(self, order: OrderRequest) -> OrderResponse:
        """Send an order.

        The order's present fields are signed and sent as the form body.

        Args:
            order: The order parameters

        Returns:
            OrderResponse: Order id and the parameters echoed by the exchange

        Raises:
            MissingCredentialsError: If api_key or api_secret are not set
            DeserializationError: If the API response cannot be parsed

        Example:
            .. code-block:: python

                client.send_order(
                    OrderRequest("SPOT_BTC_USDT", OrderType.LIMIT, Side.BUY,
                                 order_price=9000, order_quantity=0.11)
                )

        Endpoint:
            POST /v1/order

        """
        response = self.__send_authorized_request(
            "POST", "/v1/order", order.to_request()
        )
        try:
            result = create_with(OrderResponse, response)
        except (TypeError, KeyError, ValueError) as e:
            raise DeserializationError(f"Received invalid response {response=}") from e
        log.info("Order %d sent for %s", result.order_id, order.symbol)
        return result

    def place_limit_order(
        self,
        symbol: str,
        side: Side,
        quantity: WooNumericInput,
        price: WooNumericInput,
        client_order_id: ClientOrderId | None = None,
        order_tag: str | None = None,
        reduce_only: bool | None = None,
        visible_quantity: WooNumericInput | None = None,
        position_side: PositionSide | None = None,
    ) -> OrderResponse:
        """Place a limit order.

        Args:
            symbol: Trading symbol, e.g. ``SPOT_BTC_USDT``
            side: BUY or SELL
            quantity: Order quantity in base currency
            price: Limit price
            client_order_id: Optional caller identifier (0 to 2**32 - 1)
            order_tag: Optional tag
            reduce_only: Only reduce an existing position
            visible_quantity: Displayed quantity for iceberg orders
            position_side: Position side for hedge mode accounts

        Returns:
            OrderResponse: The exchange acknowledgement

        Endpoint:
            POST /v1/order

        """
        return self.send_order(
            OrderRequest(
                symbol=symbol,
                order_type=OrderType.LIMIT,
                side=side,
                order_price=price,
                order_quantity=quantity,
                client_order_id=client_order_id,
                order_tag=order_tag,
                reduce_only=reduce_only,
                visible_quantity=visible_quantity,
                position_side=position_side,
            )
        )

    def place_market_order(
        self,
        symbol: str,
        side: Side,
        quantity: WooNumericInput | None = None,
        amount: WooNumericInput | None = None,
        client_order_id: ClientOrderId | None = None,
        order_tag: str | None = None,
        reduce_only: bool | None = None,
        position_side: PositionSide | None = None,
    ) -> OrderResponse:
        """Place a market order sized either by quantity or by quote amount.

        Endpoint:
            POST /v1/order

        """
        return self.send_order(
            OrderRequest(
                symbol=symbol,
                order_type=OrderType.MARKET,
                side=side,
                order_quantity=quantity,
                order_amount=amount,
                client_order_id=client_order_id,
                order_tag=order_tag,
                reduce_only=reduce_only,
                position_side=position_side,
            )
        )

    def cancel_order(self, order_id: OrderId, symbol: str) -> CancelResponse:
        """Cancel an order by its exchange order id.

        Endpoint:
            DELETE /v1/order

        """
        response = self.__send_authorized_request(
            "DELETE", "/v1/order", {"order_id": order_id, "symbol": symbol}
        )
        return self.__cancel_response(response)

    def cancel_order_by_client_order_id(
        self, client_order_id: ClientOrderId, symbol: str
    ) -> CancelResponse:
        """Cancel an order by the client order id it was sent with.

        Endpoint:
            DELETE /v1/client/order

        """
        response = self.__send_authorized_request(
            "DELETE",
            "/v1/client/order",
            {"client_order_id": client_order_id, "symbol": symbol},
        )
        return self.__cancel_response(response)

    def cancel_all_orders(self, symbol: str) -> CancelResponse:
        """Cancel all pending orders of a symbol.

        Endpoint:
            DELETE /v1/orders

        """
        response = self.__send_authorized_request(
            "DELETE", "/v1/orders", {"symbol": symbol}
        )
        return self.__cancel_response(response)

    def get_order(self, order_id: OrderId) -> Order:
        """Get the details of one order.

        Args:
            order_id: The exchange order id

        Returns:
            Order: The order

        Raises:
            DeserializationError: If the API response cannot be parsed

        Endpoint:
            GET /v1/order/{order_id}

        """
        response = self.__send_authorized_request("GET", f"/v1/order/{int(order_id)}")
        try:
            result = create_with(Order, response)
        except (TypeError, KeyError, ValueError) as e:
            raise DeserializationError(f"Received invalid response {response=}") from e
        return result

    def get_orders(
        self,
        symbol: str | None = None,
        side: Side | None = None,
        order_type: OrderType | None = None,
        status: OrderStatus | None = None,
        order_tag: str | None = None,
        start_t: int | None = None,
        end_t: int | None = None,
        page: int | None = None,
        size: int | None = None,
    ) -> OrdersResponse:
        """Query orders, optionally filtered.

        Args:
            symbol: Trading symbol
            side: BUY or SELL
            order_type: LIMIT or MARKET
            status: Order status
            order_tag: Order tag
            start_t: Start time, milliseconds since the epoch
            end_t: End time, milliseconds since the epoch
            page: Page number, starting at 1
            size: Page size

        Returns:
            OrdersResponse: A page of orders

        Endpoint:
            GET /v1/orders

        """
        response = self.__send_authorized_request(
            "GET",
            "/v1/orders",
            {
                "symbol": symbol,
                "side": side,
                "order_type": order_type,
                "status": status,
                "order_tag": order_tag,
                "start_t": start_t,
                "end_t": end_t,
                "page": page,
                "size": size,
            },
        )
        try:
            result = OrdersResponse(
                meta=self.__page_meta(response),
                orders=[create_with(Order, row) for row in response["rows"]],  # type: ignore
            )
        except (TypeError, KeyError, ValueError) as e:
            raise DeserializationError(f"Received invalid response {response=}") from e
        return result

    def get_trade_history(
        self,
        symbol: str | None = None,
        start_t: int | None = None,
        end_t: int | None = None,
        page: int | None = None,
        size: int | None = None,
    ) -> TradesResponse:
        """Get the account's trade history.

        Without filters the request is signed over an empty query string.

        Endpoint:
            GET /v1/client/trades

        """
        response = self.__send_authorized_request(
            "GET",
            "/v1/client/trades",
            {
                "symbol": symbol,
                "start_t": start_t,
                "end_t": end_t,
                "page": page,
                "size": size,
            },
        )
        return self.__trades_response(response)

    def get_order_trades(self, order_id: OrderId) -> TradesResponse:
        """Get the executions of one order.

        Endpoint:
            GET /v1/order/{order_id}/trades

        """
        response = self.__send_authorized_request(
            "GET", f"/v1/order/{int(order_id)}/trades"
        )
        return self.__trades_response(response)

    """ Deferred helpers """

    def __send_simple_request(self, path: str) -> Json:
        """Send an unauthenticated request and validate the response."""
        request = build_public_request(self.api_url, path)
        return self.__execute(request)

    def __send_authorized_request(
        self,
        method: str,
        path: str,
        params: SignableRequest | None = None,
    ) -> Json:
        """Sign and send a request, then validate the response.

        Raises:
            MissingCredentialsError: If api_key or api_secret are not set

        """
        if self._credentials is None:
            missing = "API key" if self._api_key is None else "API secret"
            raise MissingCredentialsError(missing)
        request = build_authorized_request(
            method, self.api_url, path, params, self._credentials, self._clock
        )
        return self.__execute(request)

    def __execute(self, request: PreparedRequest) -> Json:
        response = self._http_executor.send_request(request)
        try:
            raise_response_errors(response)
        except InvalidSignature:
            log.error(
                "Signature rejected for %s %s (timestamp=%s)",
                request.method,
                request.path,
                request.timestamp,
            )
            raise
        except ApiRejected as e:
            log.warning("%s %s rejected: %s", request.method, request.path, e)
            raise
        return response.body

    """ Private helpers """

    @staticmethod
    def __cancel_response(response: JsonObject) -> CancelResponse:
        try:
            return CancelResponse(status=str(response["status"]))
        except KeyError as e:
            raise DeserializationError(f"Received invalid response {response=}") from e

    @staticmethod
    def __page_meta(response: JsonObject) -> PageMeta | None:
        meta = response.get("meta")
        if meta is None:
            return None
        return create_with(PageMeta, meta)  # type: ignore

    def __trades_response(self, response: JsonObject) -> TradesResponse:
        try:
            result = TradesResponse(
                meta=self.__page_meta(response),
                trades=[create_with(Trade, row) for row in response["rows"]],  # type: ignore
            )
        except (TypeError, KeyError, ValueError) as e:
            raise DeserializationError(f"Received invalid response {response=}") from e
        return result
