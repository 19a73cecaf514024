"""
Message shapes exchanged through the queue and the event bus.
"""

from datetime import datetime, timezone
from typing import Annotated, List
from uuid import UUID, uuid4, uuid5

from pydantic import ConfigDict, Field

from orders_service.models.common import CamelModel, Money
from orders_service.models.input import OrderLineRequest, OrderRequest
from orders_service.models.order import EnrichedOrderLine, Order

ORDER_PLACED_EVENT_TYPE = 'order.placed'

# Namespace for order ids derived from queue correlation ids
QUEUED_ORDER_NAMESPACE = UUID('6f1c2a4e-8d3b-4f7a-9c5e-2b8d4a6f0e13')


class QueueMessage(CamelModel):
    """Serialized projection of an accepted order request; one message is one placement attempt."""

    correlation_id: Annotated[str, Field(min_length=1)]
    customer_id: str
    items: List[OrderLineRequest]
    submitted_at: datetime

    @classmethod
    def from_request(cls, request: OrderRequest) -> 'QueueMessage':
        return cls(
            correlation_id=str(uuid4()),
            customer_id=request.customer_id,
            items=list(request.items),
            submitted_at=datetime.now(timezone.utc),
        )

    def to_order_request(self) -> OrderRequest:
        return OrderRequest(customer_id=self.customer_id, items=self.items)

    @property
    def order_id(self) -> str:
        """Order id for this message; every redelivery of the message maps to the same id."""
        return str(uuid5(QUEUED_ORDER_NAMESPACE, self.correlation_id))


class OrderAccepted(CamelModel):
    """Producer acknowledgement: accepted for processing, not processed."""

    correlation_id: str
    status: str = 'QUEUED'


class PartialFailureReport(CamelModel):
    """Identifiers of the batch records that must be redelivered."""

    failed_message_ids: List[str] = Field(default_factory=list)

    def to_batch_response(self) -> dict:
        """Render in the SQS partial batch response shape expected by Lambda."""
        return {'batchItemFailures': [{'itemIdentifier': message_id} for message_id in self.failed_message_ids]}


class OrderPlacedEvent(CamelModel):
    """Immutable snapshot of a confirmed order broadcast as 'order.placed'.

    productId and quantity describe the first line; items carries every line.
    """

    model_config = ConfigDict(frozen=True)

    order_id: str
    customer_id: str
    product_id: str
    quantity: int
    total_amount: Money
    placed_at: datetime
    items: List[EnrichedOrderLine] = Field(default_factory=list)

    @classmethod
    def from_order(cls, order: Order) -> 'OrderPlacedEvent':
        first_line = order.items[0]
        return cls(
            order_id=order.order_id,
            customer_id=order.customer_id,
            product_id=first_line.product_id,
            quantity=first_line.quantity,
            total_amount=order.total_amount,
            placed_at=order.created_at,
            items=list(order.items),
        )

    @property
    def total_units(self) -> int:
        return sum(line.quantity for line in self.items) if self.items else self.quantity


class PublishAccepted(CamelModel):
    """Publisher acknowledgement: the bus accepted the event."""

    event_id: str
    order_id: str
    event_type: str = ORDER_PLACED_EVENT_TYPE
