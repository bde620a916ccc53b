from django.db import models


class Product(models.Model):
    """A sellable product and the stock left for it.

    ``quantity`` is only ever decremented by order placement, through
    ``ProductCatalog.reserve_stock``.
    """

    name = models.CharField(max_length=255)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    product_code = models.PositiveIntegerField(unique=True, null=True, blank=True)
    quantity = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["id"]

    def __str__(self):
        return self.name
