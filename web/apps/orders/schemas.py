"""Pydantic schemas for orders."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .domain import Order, OrderLineRequest

# largest value a BigAutoField or BIGINT column can hold
MAX_ID = 2**63 - 1


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderDetailIn(CamelModel):
    """Input schema for a single order line.

    Attributes:
        product_id: Product to buy (``productId``).
        quantity: Positive integer number of units.
        price: Unit price recorded on the line, non-negative.
    """

    product_id: int = Field(gt=0, le=MAX_ID, strict=True)
    quantity: int = Field(gt=0, le=MAX_ID, strict=True)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)

    def to_domain(self) -> OrderLineRequest:
        return OrderLineRequest(product_id=self.product_id, quantity=self.quantity, price=self.price)


class CreateOrderDTO(CamelModel):
    order_details: list[OrderDetailIn] = Field(min_length=1)


class OrderLineReadDTO(CamelModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal


class OrderReadDTO(CamelModel):
    """Order as exposed by the API; ``total`` is computed from the lines."""

    id: int
    customer_id: int
    order_date: datetime
    status: str
    shipper_id: int | None = None
    total: Decimal
    order_details: list[OrderLineReadDTO]


def order_body(order: Order) -> dict:
    dto = OrderReadDTO(
        id=order.id,
        customer_id=order.customer_id,
        order_date=order.order_date,
        status=order.status.value,
        shipper_id=order.shipper_id,
        total=order.total,
        order_details=[
            OrderLineReadDTO(
                id=line.id,
                order_id=line.order_id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
            )
            for line in order.lines
        ],
    )
    return dto.model_dump(by_alias=True)
