"""Service provider helpers for wiring OrderService with its ports.

``get_order_service`` returns an ``OrderService`` backed by the Django ORM
adapters and the retrying transaction runner. Tests that want in-memory
ports build ``OrderService`` directly.
"""

from apps.catalog.repository import ProductCatalog
from apps.customers.directory import CustomerDirectory

from .domain import OrderService
from .repository import OrderRepository
from .transactions import run_in_transaction


def get_order_service() -> OrderService:
    return OrderService(
        customers=CustomerDirectory(),
        stock=ProductCatalog(),
        orders=OrderRepository(),
        unit_of_work=run_in_transaction,
    )
