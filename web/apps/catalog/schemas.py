"""Pydantic schemas for the catalog endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from apps.common.pagination import PageQuery


class SearchQuery(PageQuery):
    q: str = Field(default="", max_length=200)


class ProductReadDTO(BaseModel):
    """Product as exposed by the API.

    Attributes:
        unit_price: Current list price (``unitPrice`` on the wire).
        product_code: Business code of the product, if any.
        quantity: Units currently available for purchase.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    unit_price: Decimal
    product_code: int | None = None
    quantity: int
    created_at: datetime
    updated_at: datetime


def product_body(product) -> dict:
    return ProductReadDTO.model_validate(product).model_dump(by_alias=True)


def page_body(items, total: int) -> dict:
    return {"data": [product_body(p) for p in items], "total": total}
