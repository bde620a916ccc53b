"""HTTP views for the orders app.

Views are kept small: they validate requests (via Pydantic), map them to
domain line requests, delegate to the ``OrderService`` returned by
``get_order_service()`` and shape the response. Business errors propagate
to the DRF exception handler in ``gateway.exceptions``.

Idempotency: when an ``Idempotency-Key`` header is provided, the create
endpoint processes the request once per (account, key). The first request
stores its response, success or business failure, and retries with the
same payload get that stored response back with ``Idempotent-Replay:
true``. Reusing the key with a different payload, or while the first
request is still running, returns HTTP 409.
"""

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.common.errors import ShopError, ValidationError
from apps.common.pagination import PageQuery
from apps.common.validation import parse
from apps.customers.directory import CustomerDirectory

from .idempotency import finalize, get_or_create_idempotent, release
from .providers import get_order_service
from .repository import OrderRepository
from .schemas import CreateOrderDTO, order_body

logger = logging.getLogger(__name__)

MAX_IDEMPOTENCY_KEY_LENGTH = 255


class OrdersCollectionView(APIView):
    """List the caller's orders (GET) or place a new one (POST)."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]

    def get_throttles(self):
        # throttles are evaluated in initial(), before get/post
        self.throttle_scope = "orders_list" if self.request.method == "GET" else "orders_create"
        return [throttle() for throttle in self.throttle_classes]

    def get(self, request):
        query = parse(PageQuery, request.query_params.dict())
        customer = CustomerDirectory().get_customer_by_account(request.user.pk)
        orders, total = OrderRepository().list_for_customer(customer.id, query)
        return Response({"data": [order_body(o) for o in orders], "total": total})

    def post(self, request):
        """Place an order for the calling customer.

        Args:
            request (Request): DRF request with JSON body
                ``{"orderDetails": [{"productId", "quantity", "price"}, ...]}``
                and optional ``Idempotency-Key`` header.

        Returns:
            Response: 201 with the hydrated order, or the stored response
            when an idempotent request is replayed.

        Raises:
            ValidationError: 400, malformed body or empty ``orderDetails``.
            NotFound: 404, no customer for the account or unknown product.
            Conflict: 409, idempotency key conflict.
            InsufficientStock: 422, a line exceeds the available stock.
        """
        idem_key = request.headers.get("Idempotency-Key")
        if idem_key is not None and not 0 < len(idem_key) <= MAX_IDEMPOTENCY_KEY_LENGTH:
            raise ValidationError(
                "Invalid Idempotency-Key",
                errors=[{"field": "Idempotency-Key", "message": f"must be 1-{MAX_IDEMPOTENCY_KEY_LENGTH} characters"}],
            )

        dto = parse(CreateOrderDTO, request.data)

        rec = None
        if idem_key:
            existing, rec = get_or_create_idempotent(request.user.pk, idem_key, request.data)
            if existing:
                resp = Response(rec.response_body, status=rec.response_status)
                resp["Idempotent-Replay"] = "true"
                return resp

        lines = [d.to_domain() for d in dto.order_details]
        try:
            order = get_order_service().place_order(request.user.pk, lines)
        except ShopError as e:
            if rec:
                finalize(rec, e.status_code, e.to_body())
            raise
        except Exception:
            if rec:
                release(rec)
                logger.warning("idempotency key released after failure", extra={"key": idem_key})
            raise

        body = order_body(order)
        if rec:
            finalize(rec, status.HTTP_201_CREATED, body, order_id=order.id)
        return Response(body, status=status.HTTP_201_CREATED)


class RetrieveOrderView(APIView):
    """One order by id. Customers only see their own orders; admins see all."""

    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"

    def get(self, request, order_id: int):
        repo = OrderRepository()
        if request.user.is_admin:
            order = repo.get(order_id)
        else:
            customer = CustomerDirectory().get_customer_by_account(request.user.pk)
            order = repo.get_for_customer(order_id, customer.id)
        return Response(order_body(order))
