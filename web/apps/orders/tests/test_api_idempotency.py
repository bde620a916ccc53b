"""Idempotent order submission through the ``Idempotency-Key`` header."""

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.orders.models import IdempotencyKey, OrderModel

CREATE_URL = "/orders"


def post(client, headers, payload, key):
    return client.post(
        CREATE_URL, data=payload, content_type="application/json", **headers, **{"HTTP_IDEMPOTENCY_KEY": key}
    )


@pytest.mark.django_db
def test_idempotent_same_payload_returns_same_order_and_status_on_retry(
    client, make_product, make_customer, auth_headers
):
    """The retry is answered from the stored response; stock is taken once."""
    product = make_product(quantity=5)
    headers = auth_headers(make_customer().user)
    payload = {"orderDetails": [{"productId": product.id, "quantity": 2, "price": 10}]}

    r1 = post(client, headers, payload, "idem-same-1")
    assert r1.status_code == 201
    assert "Idempotent-Replay" not in r1.headers

    r2 = post(client, headers, payload, "idem-same-1")
    assert r2.status_code == 201
    assert r2.json() == r1.json()
    assert r2.headers.get("Idempotent-Replay") == "true"

    product.refresh_from_db()
    assert product.quantity == 3
    assert OrderModel.objects.count() == 1
    assert IdempotencyKey.objects.get().order_id == r1.json()["id"]


@pytest.mark.django_db
def test_idempotent_conflict_on_different_payload_with_same_key(client, make_product, make_customer, auth_headers):
    product = make_product(quantity=5)
    headers = auth_headers(make_customer().user)
    p1 = {"orderDetails": [{"productId": product.id, "quantity": 2, "price": 10}]}
    p2 = {"orderDetails": [{"productId": product.id, "quantity": 3, "price": 10}]}

    assert post(client, headers, p1, "idem-conflict-1").status_code == 201

    r2 = post(client, headers, p2, "idem-conflict-1")
    assert r2.status_code == 409
    assert r2.json()["detail"] == "IDEMPOTENCY_CONFLICT"
    product.refresh_from_db()
    assert product.quantity == 3


@pytest.mark.django_db
def test_idempotent_replay_preserves_422_status(client, make_product, make_customer, auth_headers):
    product = make_product(quantity=5)
    headers = auth_headers(make_customer().user)
    payload = {"orderDetails": [{"productId": product.id, "quantity": 999, "price": 10}]}

    r1 = post(client, headers, payload, "idem-422")
    assert r1.status_code == 422

    r2 = post(client, headers, payload, "idem-422")
    assert r2.status_code == 422
    assert r2.json() == r1.json()
    assert r2.headers.get("Idempotent-Replay") == "true"


@pytest.mark.django_db
def test_idempotency_keys_are_scoped_per_account(client, make_product, make_customer, auth_headers):
    """Two customers may use the same key value for unrelated orders."""
    product = make_product(quantity=5)
    payload = {"orderDetails": [{"productId": product.id, "quantity": 1, "price": 10}]}

    r1 = post(client, auth_headers(make_customer().user), payload, "shared-key")
    r2 = post(client, auth_headers(make_customer().user), payload, "shared-key")

    assert r1.status_code == r2.status_code == 201
    assert r1.json()["id"] != r2.json()["id"]
    assert "Idempotent-Replay" not in r2.headers


@pytest.mark.django_db
def test_idempotency_key_in_progress_is_409(client, make_product, make_customer, auth_headers):
    """A key whose first request has not stored a response yet is busy."""
    product = make_product(quantity=5)
    customer = make_customer()
    payload = {"orderDetails": [{"productId": product.id, "quantity": 1, "price": 10}]}

    from apps.orders.idempotency import get_or_create_idempotent

    existing, _ = get_or_create_idempotent(customer.user.pk, "busy-key", payload)
    assert existing is False

    r = post(client, auth_headers(customer.user), payload, "busy-key")
    assert r.status_code == 409
    assert r.json()["detail"] == "IDEMPOTENCY_IN_PROGRESS"


@pytest.mark.django_db
def test_stale_in_progress_key_is_taken_over(client, settings, make_product, make_customer, auth_headers):
    """A key abandoned mid-request stops blocking retries once it is old enough."""
    settings.IDEMPOTENCY_STALE_SECONDS = 60
    product = make_product(quantity=5)
    customer = make_customer()
    payload = {"orderDetails": [{"productId": product.id, "quantity": 1, "price": 10}]}

    from apps.orders.idempotency import get_or_create_idempotent

    get_or_create_idempotent(customer.user.pk, "abandoned", payload)
    IdempotencyKey.objects.update(created_at=timezone.now() - timedelta(seconds=61))

    r = post(client, auth_headers(customer.user), payload, "abandoned")
    assert r.status_code == 201
    assert "Idempotent-Replay" not in r.headers

    rec = IdempotencyKey.objects.get()
    assert rec.response_status == 201
    assert rec.order_id == r.json()["id"]
    product.refresh_from_db()
    assert product.quantity == 4


@pytest.mark.django_db
def test_idempotency_key_released_on_unexpected_error(
    client, make_product, make_customer, auth_headers, monkeypatch
):
    """An unexpected failure frees the key so the same request can be retried."""
    product = make_product(quantity=5)
    headers = auth_headers(make_customer().user)
    payload = {"orderDetails": [{"productId": product.id, "quantity": 1, "price": 10}]}

    class Boom:
        def place_order(self, account_id, lines):
            raise RuntimeError("boom")

    monkeypatch.setattr("apps.orders.views.get_order_service", lambda: Boom())
    r1 = post(client, headers, payload, "retry-me")
    assert r1.status_code == 500
    assert r1.json()["detail"] == "INTERNAL_ERROR"
    assert not IdempotencyKey.objects.exists()

    monkeypatch.undo()
    r2 = post(client, headers, payload, "retry-me")
    assert r2.status_code == 201
    assert "Idempotent-Replay" not in r2.headers
