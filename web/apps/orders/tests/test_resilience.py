"""Retry behavior of the transaction runner used by order placement."""

from decimal import Decimal

import pytest
from django.db import OperationalError

from apps.catalog.models import Product
from apps.common.errors import InsufficientStock
from apps.orders.domain import OrderLineRequest
from apps.orders.providers import get_order_service
from apps.orders.transactions import run_in_transaction


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("apps.orders.transactions.time.sleep", lambda s: sleeps.append(s))
    return sleeps


@pytest.mark.django_db
def test_transient_error_is_retried(settings, no_sleep):
    settings.DB_RETRY_MAX = 2
    settings.DB_RETRY_BACKOFF_BASE = 0.1
    calls = {"n": 0}

    def flaky():
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("could not serialize access due to concurrent update")
        return "ok"

    assert run_in_transaction(flaky) == "ok"
    assert calls["n"] == 2
    assert no_sleep == [0.1]


@pytest.mark.django_db
def test_retries_are_bounded_and_backoff_is_capped(settings, no_sleep):
    settings.DB_RETRY_MAX = 3
    settings.DB_RETRY_BACKOFF_BASE = 0.2
    settings.DB_RETRY_MAX_SLEEP = 0.5
    calls = {"n": 0}

    def always_down():
        calls["n"] += 1
        raise OperationalError("server closed the connection unexpectedly")

    with pytest.raises(OperationalError):
        run_in_transaction(always_down)
    assert calls["n"] == 4
    assert no_sleep == [0.2, 0.4, 0.5]


@pytest.mark.django_db
def test_business_errors_are_not_retried(settings, no_sleep):
    settings.DB_RETRY_MAX = 3
    calls = {"n": 0}

    def out_of_stock():
        calls["n"] += 1
        raise InsufficientStock(1, 10, 5)

    with pytest.raises(InsufficientStock):
        run_in_transaction(out_of_stock)
    assert calls["n"] == 1
    assert no_sleep == []


@pytest.mark.django_db
def test_order_placement_survives_one_transient_failure(settings, no_sleep, make_product, make_customer, monkeypatch):
    """A retried placement takes the stock exactly once."""
    settings.DB_RETRY_MAX = 2
    product = make_product(quantity=5)
    customer = make_customer()

    from apps.catalog.repository import ProductCatalog

    original = ProductCatalog.reserve_stock
    calls = {"n": 0}

    def flaky_reserve(self, lines):
        original(self, lines)
        calls["n"] += 1
        if calls["n"] == 1:
            # fails after the decrement; the rollback must undo it
            raise OperationalError("deadlock detected")

    monkeypatch.setattr(ProductCatalog, "reserve_stock", flaky_reserve)

    order = get_order_service().place_order(
        customer.user.pk, [OrderLineRequest(product_id=product.id, quantity=3, price=Decimal("10"))]
    )

    assert calls["n"] == 2
    assert order.id is not None
    assert Product.objects.get(pk=product.id).quantity == 2


@pytest.mark.django_db
def test_exhausted_retries_map_to_503(client, settings, no_sleep, make_product, make_customer, auth_headers, monkeypatch):
    settings.DB_RETRY_MAX = 1
    product = make_product(quantity=5)
    customer = make_customer()

    def down(self, lines):
        raise OperationalError("connection refused")

    monkeypatch.setattr("apps.catalog.repository.ProductCatalog.reserve_stock", down)

    r = client.post(
        "/orders",
        data={"orderDetails": [{"productId": product.id, "quantity": 1, "price": 1}]},
        content_type="application/json",
        **auth_headers(customer.user),
    )

    assert r.status_code == 503
    assert r.json()["detail"] == "SERVICE_UNAVAILABLE"
    assert "Traceback" not in r.content.decode()
