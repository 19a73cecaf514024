"""
Order Topologies Service Module.

One order domain service delivered through three interchangeable topologies on
AWS Lambda:

- direct: synchronous invocation, no buffering, no retry
- queue: SQS producer and consumer with partial batch failure reporting
- events: EventBridge fan-out to independent subscribers

Packages:

- handlers: Lambda entry points, configuration and HTTP plumbing
- logic: order service and topology workflows
- adapters: catalog, queue, bus, notification and downstream function clients
- dal: order store implementations
- models: data models and wire shapes
"""

__version__ = "1.0.0"

# Re-export commonly used classes for convenience
from orders_service.models.input import OrderLineRequest, OrderRequest
from orders_service.models.order import Order, OrderStatus
from orders_service.models.output import DomainError, OrderResult
from orders_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "Order",
    "OrderStatus",
    "OrderRequest",
    "OrderLineRequest",
    "OrderResult",
    "DomainError",
    "logger",
    "tracer",
    "metrics",
]
