"""Domain models, ports and service for order placement.

The Order Engine is kept free of Django: it talks to the customer
directory, the product stock and the order store through the ports below,
and runs the whole placement through a unit-of-work callable that makes it
atomic. ``providers.get_order_service`` wires the ORM implementations.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, List, Protocol, Sequence

from apps.common.errors import ShopError, ValidationError

logger = logging.getLogger(__name__)


# ---- Enums ----
class OrderStatus(str, Enum):
    """Lifecycle of an order. Placement only ever writes PENDING; the other
    states belong to fulfillment."""

    PENDING = "pending"
    FINDING_SHIPPER = "finding_shipper"
    SHIPPING = "shipping"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class OrderLineRequest:
    """A line the caller wants to buy.

    Attributes:
        product_id: Product to buy.
        quantity: Units requested, positive.
        price: Unit price to record on the line, non-negative.
    """

    product_id: int
    quantity: int
    price: Decimal


@dataclass
class OrderLine:
    id: int | None
    order_id: int | None
    product_id: int
    quantity: int
    price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class Order:
    """A placed order and its lines.

    There is no stored total: ``total`` is always the sum of the lines.
    """

    id: int | None
    customer_id: int
    order_date: datetime
    status: OrderStatus = OrderStatus.PENDING
    shipper_id: int | None = None
    lines: List[OrderLine] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))


# ---- Ports (DIP) ----
class CustomerPort(Protocol):
    def get_customer_by_account(self, account_id: int) -> Any:
        """Return the customer owned by the account (anything with an ``id``).

        Raises:
            NotFound: If the account has no customer.
        """
        ...


class StockPort(Protocol):
    def reserve_stock(self, lines: Sequence[OrderLineRequest]) -> None:
        """Take the requested quantities out of stock, all or nothing.

        Raises:
            NotFound: For a line whose product does not exist.
            InsufficientStock: For a line asking for more than is available.
        """
        ...


class OrderStorePort(Protocol):
    def create(self, customer_id: int, lines: Sequence[OrderLineRequest]) -> Order:
        """Persist a pending order with one line per request and return it."""
        ...


UnitOfWork = Callable[[Callable[[], Order]], Order]


def _run_directly(fn: Callable[[], Order]) -> Order:
    return fn()


# ---- Domain service ----
class OrderService:
    """Domain service responsible for placing orders."""

    def __init__(
        self,
        customers: CustomerPort,
        stock: StockPort,
        orders: OrderStorePort,
        unit_of_work: UnitOfWork | None = None,
    ):
        """Initialize the service with its ports.

        Args:
            customers: Resolves the calling account to its customer.
            stock: Checks and decrements product stock.
            orders: Persists the order and its lines.
            unit_of_work: Runs a callable atomically. Defaults to a plain
                call, which is only suitable for in-memory ports.
        """
        self.customers = customers
        self.stock = stock
        self.orders = orders
        self.unit_of_work = unit_of_work or _run_directly

    def validate(self, lines: Sequence[OrderLineRequest]) -> None:
        """Reject malformed line lists before touching any store.

        Raises:
            ValidationError: With one ``{field, message}`` entry per problem.
        """
        if not lines:
            raise ValidationError(
                "Order must contain at least one line",
                errors=[{"field": "orderDetails", "message": "must not be empty"}],
            )
        errors = []
        for i, line in enumerate(lines):
            where = f"orderDetails.{i}"
            if isinstance(line.product_id, bool) or not isinstance(line.product_id, int) or line.product_id <= 0:
                errors.append({"field": f"{where}.productId", "message": "must be a positive integer"})
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity <= 0:
                errors.append({"field": f"{where}.quantity", "message": "must be a positive integer"})
            if line.price is None or Decimal(line.price) < 0:
                errors.append({"field": f"{where}.price", "message": "must be a non-negative amount"})
        if errors:
            raise ValidationError("Request validation failed", errors=errors)

    def place_order(self, account_id: int, lines: Sequence[OrderLineRequest]) -> Order:
        """Place an order for the customer owned by ``account_id``.

        Inside one unit of work: resolve the customer, reserve stock for
        every line in input order, then persist the order with its lines.
        Any failure rolls the whole unit back, so no stock is taken and no
        order exists afterwards.

        Args:
            account_id: Authenticated account placing the order.
            lines: Requested lines, non-empty.

        Returns:
            Order: The persisted order including its lines.

        Raises:
            ValidationError: If ``lines`` is empty or a line is malformed.
            NotFound: If the customer or a product does not exist.
            InsufficientStock: If a line exceeds the available stock.
        """
        self.validate(lines)

        def work() -> Order:
            customer = self.customers.get_customer_by_account(account_id)
            self.stock.reserve_stock(lines)
            return self.orders.create(customer.id, lines)

        try:
            order = self.unit_of_work(work)
        except ShopError as e:
            logger.warning(
                "order rejected",
                extra={"account_id": account_id, "code": e.code, "reason": e.message},
            )
            raise
        logger.info(
            "order placed",
            extra={"order_id": order.id, "customer_id": order.customer_id, "lines": len(order.lines)},
        )
        return order
