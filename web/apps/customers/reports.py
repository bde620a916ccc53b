"""Sales reports over customers and their orders (admin back office)."""

from decimal import Decimal

from django.db.models import DecimalField, ExpressionWrapper, F, Sum, Value
from django.db.models.functions import Coalesce

from apps.orders.models import OrderLineModel, OrderModel

from .models import Customer

TOP_SPENDING_SHARE = Decimal("0.10")
MONEY = DecimalField(max_digits=14, decimal_places=2)
ZERO = Value(Decimal("0.00"), output_field=MONEY)
CENT = Decimal("0.01")


def _line_amount(prefix: str = ""):
    return ExpressionWrapper(F(f"{prefix}quantity") * F(f"{prefix}price"), output_field=MONEY)


def total_revenue() -> Decimal:
    """Sum of quantity x price over every order line ever placed."""
    total = OrderLineModel.objects.aggregate(total=Coalesce(Sum(_line_amount()), ZERO))["total"]
    return Decimal(total).quantize(CENT)


def top_spending_customers() -> list[dict]:
    """Customers whose spend exceeds 10% of total revenue, biggest first.

    Returns:
        list[dict]: Rows with ``customerId``, ``customerName``,
        ``contactName``, ``country``, ``totalSpent`` and
        ``percentageOfTotal`` (0-100, two decimals).
    """
    revenue = total_revenue()
    if revenue <= 0:
        return []
    threshold = revenue * TOP_SPENDING_SHARE

    customers = Customer.objects.annotate(
        total_spent=Coalesce(Sum(_line_amount("orders__lines__")), ZERO)
    )
    rows = []
    for c in customers:
        spent = Decimal(c.total_spent).quantize(CENT)
        if spent <= threshold:
            continue
        rows.append(
            {
                "customerId": c.pk,
                "customerName": c.name,
                "contactName": c.contact_name,
                "country": c.country,
                "totalSpent": spent,
                "percentageOfTotal": (spent * 100 / revenue).quantize(CENT),
            }
        )
    rows.sort(key=lambda r: r["totalSpent"], reverse=True)
    return rows


def orders_summary() -> list[dict]:
    """Every order with its customer, shipper and computed amount, newest first."""
    orders = (
        OrderModel.objects.select_related("customer", "shipper")
        .annotate(total_amount=Coalesce(Sum(_line_amount("lines__")), ZERO))
        .order_by("-order_date", "-id")
    )
    return [
        {
            "orderId": o.pk,
            "orderDate": o.order_date,
            "customerName": o.customer.name,
            "shipperName": o.shipper.name if o.shipper_id else None,
            "totalAmount": Decimal(o.total_amount).quantize(CENT),
        }
        for o in orders
    ]
