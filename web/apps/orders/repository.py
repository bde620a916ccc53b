"""Repository layer for persisting orders.

Maps between the ORM models and the domain ``Order``/``OrderLine``
dataclasses so the domain service never sees Django types.
"""

from typing import Sequence

from apps.common.errors import NotFound
from apps.common.pagination import PageQuery, paginate

from .domain import Order, OrderLine, OrderLineRequest, OrderStatus
from .models import OrderLineModel, OrderModel


def to_domain(obj: OrderModel) -> Order:
    """Build a domain ``Order`` from a model with its lines loaded."""
    return Order(
        id=obj.pk,
        customer_id=obj.customer_id,
        order_date=obj.order_date,
        status=OrderStatus(obj.status),
        shipper_id=obj.shipper_id,
        lines=[
            OrderLine(
                id=line.pk,
                order_id=line.order_id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
            )
            for line in obj.lines.all()
        ],
    )


class OrderRepository:
    """Repository that persists Order domain objects using Django ORM."""

    def create(self, customer_id: int, lines: Sequence[OrderLineRequest]) -> Order:
        """Insert a pending order and one line per request.

        Must run in the same transaction as the stock reservation.

        Returns:
            Order: The persisted order, lines in input order.
        """
        obj = OrderModel.objects.create(customer_id=customer_id, status=OrderModel.Status.PENDING)
        OrderLineModel.objects.bulk_create(
            [
                OrderLineModel(order=obj, product_id=line.product_id, quantity=line.quantity, price=line.price)
                for line in lines
            ]
        )
        return self.get(obj.pk)

    def _queryset(self):
        return OrderModel.objects.prefetch_related("lines")

    def get(self, order_id: int) -> Order:
        obj = self._queryset().filter(pk=order_id).first()
        if obj is None:
            raise NotFound(f"Order with ID {order_id} not found")
        return to_domain(obj)

    def get_for_customer(self, order_id: int, customer_id: int) -> Order:
        """Return the order only if ``customer_id`` owns it; 404 otherwise."""
        obj = self._queryset().filter(pk=order_id, customer_id=customer_id).first()
        if obj is None:
            raise NotFound(f"Order with ID {order_id} not found")
        return to_domain(obj)

    def list_for_customer(self, customer_id: int, query: PageQuery) -> tuple[list[Order], int]:
        """Page through the customer's orders, newest first."""
        qs = self._queryset().filter(customer_id=customer_id).order_by("-order_date", "-id")
        items, total = paginate(qs, query)
        return [to_domain(o) for o in items], total
