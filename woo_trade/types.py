"""Type definitions for the WOO trade SDK.

This module contains type definitions, enums, and dataclasses used throughout
the SDK, organized into logical sections for clarity.
"""

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, List, TypeAlias, overload

from woo_trade.errors import ValidationError

# ============================================================================
# TYPE ALIASES
# ============================================================================

OrderId: TypeAlias = int
ClientOrderId: TypeAlias = int

# JSON type hierarchy
JsonObject: TypeAlias = dict[str, "JsonValue"]
JsonArray: TypeAlias = list["JsonValue"]
JsonValue: TypeAlias = None | bool | int | float | str | JsonObject | JsonArray
# Every endpoint used by this SDK answers with a JSON object at the root
Json: TypeAlias = JsonObject

WooNumericInput: TypeAlias = Decimal | str | float | int

MAX_CLIENT_ORDER_ID = 2**32 - 1


# ============================================================================
# NUMERIC CONVERSION UTILITIES
# ============================================================================

DECIMAL_PATTERN = re.compile(r"^\d+(\.\d+)?$")


@overload
def numeric_input(n: WooNumericInput) -> Decimal | float | int: ...


@overload
def numeric_input(n: None) -> None: ...


def numeric_input(n: WooNumericInput | None) -> Decimal | float | int | None:
    """Validate a numeric order input.

    Floats and ints are passed through unchanged so they are encoded exactly as
    given; numeric strings are parsed into Decimal.
    """
    if n is None:
        return n
    if isinstance(n, bool):
        raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")
    if isinstance(n, str):
        if not DECIMAL_PATTERN.match(n):
            raise ValidationError(f"Invalid numeric input {n}")
        return Decimal(n)
    if isinstance(n, (int, float, Decimal)):
        if isinstance(n, Decimal) and not n.is_finite():
            raise ValidationError(f"Numeric input must be finite: {n}")
        if isinstance(n, float) and not math.isfinite(n):
            raise ValidationError(f"Numeric input must be finite: {n}")
        if n < 0:
            raise ValidationError(f"Numeric input must not be negative: {n}")
        return n
    raise ValidationError(f"Invalid numeric input type {n} - {type(n)}")


# ============================================================================
# CORE ENUMS
# ============================================================================


class Environment(Enum):
    """Exchange environment, each with its own base URL and credentials."""

    PRODUCTION = "production"
    STAGING = "staging"


class Side(Enum):
    """Order side."""

    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    """Order type."""

    LIMIT = "LIMIT"
    MARKET = "MARKET"
    IOC = "IOC"
    FOK = "FOK"
    POST_ONLY = "POST_ONLY"
    ASK = "ASK"
    BID = "BID"


# Order types that must carry a price
PRICED_ORDER_TYPES = frozenset(
    {OrderType.LIMIT, OrderType.IOC, OrderType.FOK, OrderType.POST_ONLY}
)


class PositionSide(Enum):
    """Position side for hedge mode accounts."""

    LONG = "LONG"
    SHORT = "SHORT"
    BOTH = "BOTH"


class OrderStatus(Enum):
    """Order status."""

    NEW = "NEW"
    CANCELLED = "CANCELLED"
    PARTIAL_FILLED = "PARTIAL_FILLED"
    FILLED = "FILLED"
    REJECTED = "REJECTED"
    INCOMPLETE = "INCOMPLETE"
    COMPLETED = "COMPLETED"


# ============================================================================
# REQUEST TYPES
# ============================================================================


@dataclass
class OrderRequest:
    """Parameters of ``POST /v1/order``.

    Unset optional fields are left out of both the signature and the body.
    """

    symbol: str
    order_type: OrderType
    side: Side
    order_price: WooNumericInput | None = None
    order_quantity: WooNumericInput | None = None
    order_amount: WooNumericInput | None = None
    client_order_id: ClientOrderId | None = None
    order_tag: str | None = None
    reduce_only: bool | None = None
    visible_quantity: WooNumericInput | None = None
    position_side: PositionSide | None = None

    def __post_init__(self) -> None:
        """Validate and normalize the order parameters.

        Raises:
            ValidationError: If the combination of parameters is invalid.

        """
        if not isinstance(self.symbol, str) or not self.symbol:
            raise ValidationError("symbol must be a non-empty string")
        try:
            self.order_type = OrderType(self.order_type)
            self.side = Side(self.side)
            if self.position_side is not None:
                self.position_side = PositionSide(self.position_side)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        self.order_price = numeric_input(self.order_price)
        self.order_quantity = numeric_input(self.order_quantity)
        self.order_amount = numeric_input(self.order_amount)
        self.visible_quantity = numeric_input(self.visible_quantity)

        if self.order_type in PRICED_ORDER_TYPES and self.order_price is None:
            raise ValidationError(f"{self.order_type.value} orders require order_price")
        if self.order_quantity is not None and self.order_amount is not None:
            raise ValidationError(
                "order_quantity and order_amount are mutually exclusive"
            )
        if self.order_quantity is None and self.order_amount is None:
            raise ValidationError("Either order_quantity or order_amount is required")
        if self.client_order_id is not None and (
            isinstance(self.client_order_id, bool)
            or not isinstance(self.client_order_id, int)
            or not 0 <= self.client_order_id <= MAX_CLIENT_ORDER_ID
        ):
            raise ValidationError(f"Invalid client_order_id {self.client_order_id!r}")

    def to_request(self) -> dict[str, Any]:
        """Return the signable request mapping, absent fields included as None."""
        return {
            "symbol": self.symbol,
            "client_order_id": self.client_order_id,
            "order_tag": self.order_tag,
            "order_type": self.order_type,
            "order_price": self.order_price,
            "order_quantity": self.order_quantity,
            "order_amount": self.order_amount,
            "reduce_only": self.reduce_only,
            "visible_quantity": self.visible_quantity,
            "side": self.side,
            "position_side": self.position_side,
        }


# ============================================================================
# RESPONSE TYPES
# ============================================================================


@dataclass
class SystemInfo:
    """Exchange system status (0 = normal, 2 = maintenance)."""

    status: int
    msg: str


@dataclass
class OrderResponse:
    """Acknowledgement of a newly sent order."""

    order_id: OrderId
    client_order_id: ClientOrderId | None
    order_type: OrderType
    order_price: float | None
    order_quantity: float | None
    order_amount: float | None
    reduce_only: bool | None
    timestamp: str | None

    def __init__(
        self,
        order_id: int | str,
        order_type: str,
        client_order_id: int | None = None,
        order_price: float | None = None,
        order_quantity: float | None = None,
        order_amount: float | None = None,
        reduce_only: bool | None = None,
        timestamp: str | float | None = None,
    ):
        """Initialize an OrderResponse from the exchange's acknowledgement.

        Args:
            order_id: Exchange order identifier.
            order_type: Type of the placed order.
            client_order_id: Caller-supplied identifier (0 when unset).
            order_price: Price echoed by the exchange.
            order_quantity: Quantity echoed by the exchange.
            order_amount: Amount echoed by the exchange (market orders).
            reduce_only: Reduce-only flag echoed by the exchange.
            timestamp: Server timestamp in seconds, as sent by the exchange.

        """
        self.order_id = int(order_id)
        self.client_order_id = client_order_id
        self.order_type = OrderType(order_type)
        self.order_price = order_price
        self.order_quantity = order_quantity
        self.order_amount = order_amount
        self.reduce_only = reduce_only
        self.timestamp = str(timestamp) if timestamp is not None else None


@dataclass
class CancelResponse:
    """Result of a cancel request (``CANCEL_SENT`` or ``CANCEL_ALL_SENT``)."""

    status: str


@dataclass
class PageMeta:
    """Pagination information of list endpoints."""

    total: int
    records_per_page: int
    current_page: int


@dataclass
class Order:
    """Represents an order in the exchange."""

    order_id: OrderId
    symbol: str
    side: Side
    type: OrderType
    status: OrderStatus
    price: float | None
    quantity: float | None
    amount: float | None
    executed: float | None
    visible: float | None
    total_fee: float | None
    fee_asset: str | None
    client_order_id: ClientOrderId | None
    order_tag: str | None
    created_time: str | None
    updated_time: str | None
    average_executed_price: float | None
    reduce_only: bool | None
    position_side: PositionSide | None

    def __init__(
        self,
        order_id: int | str,
        symbol: str,
        side: str,
        type: str,
        status: str,
        price: float | None = None,
        quantity: float | None = None,
        amount: float | None = None,
        executed: float | None = None,
        visible: float | None = None,
        total_fee: float | None = None,
        fee_asset: str | None = None,
        client_order_id: int | None = None,
        order_tag: str | None = None,
        created_time: str | float | None = None,
        updated_time: str | float | None = None,
        average_executed_price: float | None = None,
        reduce_only: bool | None = None,
        position_side: str | None = None,
    ):
        """Initialize an Order instance.

        Args:
            order_id: Exchange order identifier.
            symbol: Trading symbol, e.g. ``SPOT_BTC_USDT``.
            side: Order side (BUY, SELL).
            type: Order type (LIMIT, MARKET, ...).
            status: Current status of the order.
            price: Limit price, if any.
            quantity: Order quantity.
            amount: Order amount for amount-based market orders.
            executed: Executed quantity.
            visible: Visible quantity for iceberg orders.
            total_fee: Fees paid so far.
            fee_asset: Asset the fees are paid in.
            client_order_id: Caller-supplied identifier.
            order_tag: Caller-supplied tag.
            created_time: Creation time in seconds, as sent by the exchange.
            updated_time: Last update time in seconds, as sent by the exchange.
            average_executed_price: Average fill price.
            reduce_only: Reduce-only flag.
            position_side: Position side for hedge mode accounts.

        """
        self.order_id = int(order_id)
        self.symbol = symbol
        self.side = Side(side)
        self.type = OrderType(type)
        self.status = OrderStatus(status)
        self.price = price
        self.quantity = quantity
        self.amount = amount
        self.executed = executed
        self.visible = visible
        self.total_fee = total_fee
        self.fee_asset = fee_asset
        self.client_order_id = client_order_id
        self.order_tag = order_tag
        self.created_time = str(created_time) if created_time is not None else None
        self.updated_time = str(updated_time) if updated_time is not None else None
        self.average_executed_price = average_executed_price
        self.reduce_only = reduce_only
        self.position_side = PositionSide(position_side) if position_side else None


@dataclass
class OrdersResponse:
    """A page of orders."""

    meta: PageMeta | None
    orders: List[Order] = field(default_factory=list)


@dataclass
class Trade:
    """An execution of one of the account's orders."""

    id: int
    symbol: str
    order_id: OrderId
    side: Side
    executed_price: float
    executed_quantity: float
    executed_timestamp: str
    fee: float | None
    fee_asset: str | None
    is_maker: bool
    order_tag: str | None

    def __init__(
        self,
        id: int,
        symbol: str,
        order_id: int | str,
        side: str,
        executed_price: float,
        executed_quantity: float,
        executed_timestamp: str | float,
        fee: float | None = None,
        fee_asset: str | None = None,
        is_maker: int | bool = 0,
        order_tag: str | None = None,
    ):
        """Initialize a Trade from a trade history row."""
        self.id = id
        self.symbol = symbol
        self.order_id = int(order_id)
        self.side = Side(side)
        self.executed_price = executed_price
        self.executed_quantity = executed_quantity
        self.executed_timestamp = str(executed_timestamp)
        self.fee = fee
        self.fee_asset = fee_asset
        self.is_maker = bool(is_maker)
        self.order_tag = order_tag


@dataclass
class TradesResponse:
    """A page of trades."""

    meta: PageMeta | None
    trades: List[Trade] = field(default_factory=list)
