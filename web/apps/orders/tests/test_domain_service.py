"""Unit tests for the OrderService domain orchestration.

Stub ports keep the tests free of the database: they record calls and
mimic the all-or-nothing behavior of the real stores.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from apps.common.errors import InsufficientStock, NotFound, ValidationError
from apps.orders.domain import Order, OrderLine, OrderLineRequest, OrderService, OrderStatus


class Customer:
    def __init__(self, id):
        self.id = id


class StubCustomers:
    """Directory with one customer (id 7) owned by account 1."""

    def get_customer_by_account(self, account_id):
        if account_id != 1:
            raise NotFound(f"Customer not found for user ID {account_id}")
        return Customer(7)


class StubStock:
    """In-memory stock that validates every line before taking anything."""

    def __init__(self, stock):
        self.stock = dict(stock)

    def reserve_stock(self, lines):
        remaining = dict(self.stock)
        for line in lines:
            if line.product_id not in remaining:
                raise NotFound(f"Product with ID {line.product_id} not found")
            if remaining[line.product_id] < line.quantity:
                raise InsufficientStock(line.product_id, line.quantity, remaining[line.product_id])
            remaining[line.product_id] -= line.quantity
        self.stock = remaining


class StubOrders:
    def __init__(self):
        self.created = []

    def create(self, customer_id, lines):
        order = Order(
            id=len(self.created) + 1,
            customer_id=customer_id,
            order_date=datetime.now(timezone.utc),
            lines=[
                OrderLine(id=i + 1, order_id=len(self.created) + 1, product_id=l.product_id,
                          quantity=l.quantity, price=l.price)
                for i, l in enumerate(lines)
            ],
        )
        self.created.append(order)
        return order


def make_service(stock=None):
    stock_port = StubStock(stock or {1: 5})
    orders = StubOrders()
    return OrderService(StubCustomers(), stock_port, orders), stock_port, orders


def line(product_id=1, quantity=3, price="10"):
    return OrderLineRequest(product_id=product_id, quantity=quantity, price=Decimal(price))


def test_place_order_ok():
    """Happy path: stock goes from 5 to 2 and a pending order is returned."""
    service, stock, orders = make_service()
    out = service.place_order(1, [line()])
    assert out.status == OrderStatus.PENDING
    assert out.customer_id == 7
    assert [(l.product_id, l.quantity, l.price) for l in out.lines] == [(1, 3, Decimal("10"))]
    assert out.total == Decimal("30")
    assert stock.stock[1] == 2
    assert len(orders.created) == 1


def test_place_order_empty():
    """An empty line list is a validation error and nothing is touched."""
    service, stock, orders = make_service()
    with pytest.raises(ValidationError) as e:
        service.place_order(1, [])
    assert e.value.fields["errors"][0]["field"] == "orderDetails"
    assert stock.stock[1] == 5
    assert orders.created == []


@pytest.mark.parametrize(
    "bad, field",
    [
        (line(quantity=0), "quantity"),
        (line(quantity=-2), "quantity"),
        (line(product_id=0), "productId"),
        (line(price="-1"), "price"),
    ],
)
def test_place_order_rejects_malformed_lines(bad, field):
    service, stock, _ = make_service()
    with pytest.raises(ValidationError) as e:
        service.place_order(1, [line(), bad])
    assert e.value.fields["errors"][0]["field"] == f"orderDetails.1.{field}"
    assert stock.stock[1] == 5


def test_place_order_unknown_customer():
    service, stock, orders = make_service()
    with pytest.raises(NotFound):
        service.place_order(99, [line()])
    assert stock.stock[1] == 5
    assert orders.created == []


def test_place_order_unknown_product():
    service, stock, orders = make_service()
    with pytest.raises(NotFound) as e:
        service.place_order(1, [line(), line(product_id=999, quantity=1)])
    assert "999" in e.value.message
    assert stock.stock[1] == 5
    assert orders.created == []


def test_place_order_insufficient_stock():
    """Stock is checked per line; the error names product, requested and available."""
    service, stock, orders = make_service()
    with pytest.raises(InsufficientStock) as e:
        service.place_order(1, [line(quantity=10)])
    assert (e.value.product_id, e.value.requested, e.value.available) == (1, 10, 5)
    assert stock.stock[1] == 5
    assert orders.created == []


def test_place_order_runs_inside_unit_of_work():
    """Every port call happens inside the unit-of-work callable."""
    calls = []

    def uow(fn):
        calls.append("begin")
        out = fn()
        calls.append("commit")
        return out

    service = OrderService(StubCustomers(), StubStock({1: 5}), StubOrders(), unit_of_work=uow)
    service.place_order(1, [line()])
    assert calls == ["begin", "commit"]


def test_validation_happens_before_unit_of_work():
    def uow(fn):
        raise AssertionError("unit of work must not start for invalid input")

    service = OrderService(StubCustomers(), StubStock({1: 5}), StubOrders(), unit_of_work=uow)
    with pytest.raises(ValidationError):
        service.place_order(1, [])


def test_order_total_is_sum_of_lines():
    order = Order(
        id=1,
        customer_id=1,
        order_date=datetime.now(timezone.utc),
        lines=[
            OrderLine(id=1, order_id=1, product_id=1, quantity=2, price=Decimal("1199.99")),
            OrderLine(id=2, order_id=1, product_id=2, quantity=1, price=Decimal("0.02")),
        ],
    )
    assert order.total == Decimal("2400.00")
