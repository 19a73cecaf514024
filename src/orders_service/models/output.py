"""
Outcome models for order placement.

PlaceOrder never raises for domain problems; it returns an OrderResult that either
carries the confirmed Order or a DomainError describing the first failing check.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import Field

from orders_service.models.common import CamelModel
from orders_service.models.order import Order


class OrderErrorCode(str, Enum):
    """Domain error codes surfaced by order placement."""

    CUSTOMER_ID_REQUIRED = 'CUSTOMER_ID_REQUIRED'
    ITEMS_REQUIRED = 'ITEMS_REQUIRED'
    INVALID_QUANTITY = 'INVALID_QUANTITY'
    PRODUCT_NOT_FOUND = 'PRODUCT_NOT_FOUND'
    PRODUCT_OUT_OF_STOCK = 'PRODUCT_OUT_OF_STOCK'


class DomainError(CamelModel):
    """A validation or business rule failure."""

    code: OrderErrorCode
    message: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None

    @classmethod
    def customer_id_required(cls) -> 'DomainError':
        return cls(code=OrderErrorCode.CUSTOMER_ID_REQUIRED, message='CustomerId is required')

    @classmethod
    def items_required(cls) -> 'DomainError':
        return cls(code=OrderErrorCode.ITEMS_REQUIRED, message='At least one item is required')

    @classmethod
    def invalid_quantity(cls, product_id: str) -> 'DomainError':
        return cls(
            code=OrderErrorCode.INVALID_QUANTITY,
            message=f"Quantity for '{product_id}' must be greater than zero",
            product_id=product_id,
        )

    @classmethod
    def product_not_found(cls, product_id: str) -> 'DomainError':
        return cls(
            code=OrderErrorCode.PRODUCT_NOT_FOUND,
            message=f"Product '{product_id}' not found in the catalog",
            product_id=product_id,
        )

    @classmethod
    def product_out_of_stock(cls, product_id: str, product_name: str) -> 'DomainError':
        return cls(
            code=OrderErrorCode.PRODUCT_OUT_OF_STOCK,
            message=f"Product '{product_name}' is currently out of stock",
            product_id=product_id,
            product_name=product_name,
        )


class OrderResult(CamelModel):
    """Outcome of a PlaceOrder call: exactly one of order or error is set."""

    order: Annotated[Optional[Order], Field(default=None)] = None
    error: Annotated[Optional[DomainError], Field(default=None)] = None

    @property
    def is_success(self) -> bool:
        return self.order is not None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    @classmethod
    def success(cls, order: Order) -> 'OrderResult':
        return cls(order=order)

    @classmethod
    def failure(cls, error: DomainError) -> 'OrderResult':
        return cls(error=error)
