"""Error taxonomy shared by every app.

Domain code raises these exceptions; the API layer renders them through
``gateway.exceptions.api_exception_handler``. Each error carries a short,
stable ``code`` (what clients switch on), the HTTP status it maps to, a
human readable message and optional structured fields that are merged into
the response body.
"""

from typing import Any


class ShopError(Exception):
    """Base class for business and request errors.

    Attributes:
        code: Stable machine readable error code.
        status_code: HTTP status the error maps to.
        message: Human readable description shown to end users.
        fields: Extra JSON-serializable fields added to the response body.
    """

    code = "ERROR"
    status_code = 400

    def __init__(self, message: str, *, code: str | None = None, **fields: Any):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.fields = fields

    def to_body(self) -> dict:
        """Return the JSON body for this error."""
        return {"detail": self.code, "message": self.message, **self.fields}


class NotFound(ShopError):
    code = "NOT_FOUND"
    status_code = 404


class InsufficientStock(ShopError):
    """Requested quantity exceeds the stock left for a product."""

    code = "INSUFFICIENT_STOCK"
    status_code = 422

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Product with ID {product_id} does not have enough stock "
            f"(requested {requested}, available {available})",
            productId=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class ValidationError(ShopError):
    code = "VALIDATION_ERROR"
    status_code = 400


class Conflict(ShopError):
    code = "CONFLICT"
    status_code = 409


class Unauthorized(ShopError):
    code = "UNAUTHORIZED"
    status_code = 401


class Forbidden(ShopError):
    code = "FORBIDDEN"
    status_code = 403
