"""
Service Models Package

This package contains the Pydantic models used throughout the service: order
requests, the Order domain model, the catalog contract, placement outcomes and the
queue/event message shapes.
"""

from .catalog import ProductDetails
from .input import OrderLineRequest, OrderRequest
from .messages import (
    ORDER_PLACED_EVENT_TYPE,
    OrderAccepted,
    OrderPlacedEvent,
    PartialFailureReport,
    PublishAccepted,
    QueueMessage,
)
from .order import EnrichedOrderLine, Order, OrderStatus
from .output import DomainError, OrderErrorCode, OrderResult

__all__ = [
    # Input models
    "OrderRequest",
    "OrderLineRequest",

    # Domain models
    "Order",
    "OrderStatus",
    "EnrichedOrderLine",
    "ProductDetails",

    # Outcomes
    "OrderResult",
    "DomainError",
    "OrderErrorCode",

    # Messages
    "ORDER_PLACED_EVENT_TYPE",
    "QueueMessage",
    "OrderAccepted",
    "PartialFailureReport",
    "OrderPlacedEvent",
    "PublishAccepted",
]
