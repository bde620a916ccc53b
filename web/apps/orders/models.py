from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class Shipper(models.Model):
    name = models.CharField(max_length=100)
    shipper_code = models.PositiveIntegerField(unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "shippers"

    def __str__(self):
        return self.name


class OrderModel(models.Model):
    """Persisted order header. The total is derived from its lines."""

    class Status(models.TextChoices):
        PENDING = "pending"
        FINDING_SHIPPER = "finding_shipper"
        SHIPPING = "shipping"
        DELIVERED = "delivered"
        CANCELLED = "cancelled"

    customer = models.ForeignKey("customers.Customer", on_delete=models.PROTECT, related_name="orders")
    shipper = models.ForeignKey(
        Shipper, on_delete=models.SET_NULL, related_name="orders", null=True, blank=True
    )
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.PENDING)
    status_updated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["-id"]


class OrderLineModel(models.Model):
    """One product line of an order. ``price`` is the unit price at purchase time."""

    order = models.ForeignKey(OrderModel, on_delete=models.CASCADE, related_name="lines")
    product = models.ForeignKey("catalog.Product", on_delete=models.PROTECT, related_name="order_lines")
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orderdetails"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(condition=Q(quantity__gt=0), name="orderdetails_quantity_positive"),
        ]


class IdempotencyKey(models.Model):
    """Stored outcome of a ``POST /orders`` call made with an ``Idempotency-Key``.

    ``response_status`` stays 0 while the first call is still running.
    """

    account = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+")
    key = models.CharField(max_length=255)
    request_hash = models.CharField(max_length=64)
    response_status = models.PositiveSmallIntegerField(default=0)
    response_body = models.JSONField(default=dict)
    order = models.ForeignKey(OrderModel, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "idempotency_keys"
        constraints = [
            models.UniqueConstraint(fields=["account", "key"], name="idempotency_key_per_account"),
        ]
