"""ProductCatalog.reserve_stock against the database."""

from types import SimpleNamespace

import pytest
from django.db import transaction

from apps.catalog.models import Product
from apps.catalog.repository import ProductCatalog
from apps.common.errors import InsufficientStock, NotFound


def line(product_id, quantity):
    return SimpleNamespace(product_id=product_id, quantity=quantity)


@pytest.mark.django_db
def test_reserve_stock_decrements_every_product(make_product):
    a = make_product(quantity=5)
    b = make_product(quantity=2)

    with transaction.atomic():
        ProductCatalog().reserve_stock([line(b.id, 2), line(a.id, 1), line(a.id, 1)])

    assert Product.objects.get(pk=a.id).quantity == 3
    assert Product.objects.get(pk=b.id).quantity == 0


@pytest.mark.django_db
def test_reserve_stock_reports_first_failing_line_in_input_order(make_product):
    a = make_product(quantity=1)
    b = make_product(quantity=1)

    with pytest.raises(InsufficientStock) as e:
        with transaction.atomic():
            ProductCatalog().reserve_stock([line(b.id, 5), line(a.id, 5)])

    assert e.value.product_id == b.id
    assert e.value.fields == {"productId": b.id, "requested": 5, "available": 1}


@pytest.mark.django_db
def test_reserve_stock_missing_product_takes_nothing(make_product):
    a = make_product(quantity=5)

    with pytest.raises(NotFound):
        with transaction.atomic():
            ProductCatalog().reserve_stock([line(a.id, 1), line(a.id + 500, 1)])

    assert Product.objects.get(pk=a.id).quantity == 5


@pytest.mark.django_db
def test_conditional_update_refuses_to_go_negative(make_product, monkeypatch):
    """Even if the locked read is stale, the guarded UPDATE keeps stock >= 0."""
    a = make_product(quantity=5)

    class StaleRows:
        def filter(self, **kwargs):
            return self

        def order_by(self, *fields):
            # stock drops behind our back after the locked read
            Product.objects.filter(pk=a.id).update(quantity=1)
            return [SimpleNamespace(pk=a.id, quantity=5)]

    monkeypatch.setattr(Product.objects, "select_for_update", lambda: StaleRows())
    with pytest.raises(InsufficientStock) as e:
        with transaction.atomic():
            ProductCatalog().reserve_stock([line(a.id, 3)])

    assert (e.value.requested, e.value.available) == (3, 1)
    assert Product.objects.get(pk=a.id).quantity == 5
