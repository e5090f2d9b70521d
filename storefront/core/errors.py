"""Typed failures of order placement and order lookup.

Raised by the order engine and the read routes, translated into HTTP
responses by the API layer.
"""

from typing import Any, Dict


class OrderError(Exception):
    """Base class for every failure the service reports to clients."""

    code = "order_error"
    category = "unknown"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, **self.details()}


class InvalidRequest(OrderError):
    """The request itself is malformed; nothing was read from storage."""

    code = "invalid_request"
    category = "input"

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index

    def details(self):
        return {} if self.index is None else {"index": self.index}


class ProductNotFound(OrderError):
    code = "product_not_found"
    category = "business"

    def __init__(self, product_id: int):
        super().__init__(f"product {product_id} not found")
        self.product_id = product_id

    def details(self):
        return {"productId": self.product_id}


class OrderNotFound(OrderError):
    code = "order_not_found"
    category = "business"

    def __init__(self, order_id: int):
        super().__init__(f"order {order_id} not found")
        self.order_id = order_id

    def details(self):
        return {"orderId": self.order_id}


class InsufficientStock(OrderError):
    code = "insufficient_stock"
    category = "business"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"product {product_id} out of stock: requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available

    def details(self):
        return {
            "productId": self.product_id,
            "requested": self.requested,
            "available": self.available,
        }


class StorageFailure(OrderError):
    """The reservation could not be committed. No partial change is visible."""

    code = "storage_failure"
    category = "infrastructure"

    def __init__(self, message: str = "order could not be stored"):
        super().__init__(message)
