"""Product Catalog Store on top of the Django ORM.

Read operations (listing, search, lookup) back the public catalog
endpoints. ``reserve_stock`` is the write path used by order placement: it
locks the affected rows and decrements stock atomically so that concurrent
orders can never oversell a product.
"""

from collections.abc import Sequence
from typing import Protocol

from django.db.models import F
from django.utils import timezone

from apps.common.errors import InsufficientStock, NotFound
from apps.common.pagination import PageQuery, paginate

from .models import Product


class StockRequest(Protocol):
    product_id: int
    quantity: int


class ProductCatalog:
    """Repository for ``Product`` records."""

    def list_products(self, query: PageQuery) -> tuple[list[Product], int]:
        """Return one page of products in ascending id order plus the total."""
        return paginate(Product.objects.order_by("id"), query)

    def search_products(self, text: str, query: PageQuery) -> tuple[list[Product], int]:
        """Case-insensitive substring search on the product name.

        An empty ``text`` matches every product.
        """
        qs = Product.objects.order_by("id")
        if text:
            qs = qs.filter(name__icontains=text)
        return paginate(qs, query)

    def get_product(self, product_id: int) -> Product:
        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            raise NotFound(f"Product with ID {product_id} not found", productId=product_id)
        return product

    def reserve_stock(self, lines: Sequence[StockRequest]) -> None:
        """Atomically take stock for every line, or for none.

        Must run inside ``transaction.atomic``. Rows are locked with SELECT FOR
        UPDATE in ascending id order so two orders touching the same products
        always lock them in the same sequence. Lines are then checked in input
        order against the locked quantities; a product requested by several
        lines is checked against what the earlier lines left. Decrements are
        issued as conditional updates so stock stays non-negative even where
        the backend ignores row locks.

        Args:
            lines: Objects with ``product_id`` and ``quantity``.

        Raises:
            NotFound: For the first line whose product does not exist.
            InsufficientStock: For the first line asking for more than is left.
        """
        ids = sorted({line.product_id for line in lines})
        locked = {
            p.pk: p.quantity
            for p in Product.objects.select_for_update().filter(pk__in=ids).order_by("pk")
        }

        remaining = dict(locked)
        for line in lines:
            if line.product_id not in remaining:
                raise NotFound(f"Product with ID {line.product_id} not found", productId=line.product_id)
            available = remaining[line.product_id]
            if available < line.quantity:
                raise InsufficientStock(line.product_id, line.quantity, available)
            remaining[line.product_id] = available - line.quantity

        now = timezone.now()
        for pk in ids:
            taken = locked[pk] - remaining[pk]
            if not taken:
                continue
            updated = Product.objects.filter(pk=pk, quantity__gte=taken).update(
                quantity=F("quantity") - taken, updated_at=now
            )
            if updated != 1:
                current = Product.objects.filter(pk=pk).values_list("quantity", flat=True).first() or 0
                raise InsufficientStock(pk, taken, current)
