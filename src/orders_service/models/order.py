"""
Order domain model.

An Order is created in one step by the order service once every line has been
validated and enriched from the catalog; it is read-only afterwards.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional
from uuid import uuid4

from pydantic import ConfigDict, Field

from orders_service.models.common import CamelModel, Money


class OrderStatus(str, Enum):
    """Order status enumeration. Failed orders are never materialized."""

    CONFIRMED = 'CONFIRMED'


class EnrichedOrderLine(CamelModel):
    """An order line priced from a catalog snapshot taken at enrichment time."""

    model_config = ConfigDict(frozen=True)

    product_id: Annotated[str, Field(description='Catalog product identifier', examples=['P001'])]
    product_name: Annotated[str, Field(description='Product name at enrichment time', examples=['Widget Pro'])]
    category: Annotated[str, Field(description='Product category', examples=['Electronics'])]
    quantity: Annotated[int, Field(gt=0, description='Ordered units', examples=[2])]
    unit_price: Annotated[Money, Field(ge=0, description='Unit price snapshot', examples=[29.99])]
    line_total: Annotated[Money, Field(ge=0, description='unit_price x quantity', examples=[59.98])]


class Order(CamelModel):
    """Core Order domain model."""

    model_config = ConfigDict(frozen=True)

    order_id: Annotated[str, Field(
        description='Unique identifier for the order',
        examples=['550e8400-e29b-41d4-a716-446655440000']
    )]

    customer_id: Annotated[str, Field(
        min_length=1,
        description='Customer placing the order',
        examples=['CUST-123']
    )]

    status: Annotated[OrderStatus, Field(
        description='Current status of the order'
    )] = OrderStatus.CONFIRMED

    created_at: Annotated[datetime, Field(
        description='UTC timestamp when the order was persisted'
    )]

    items: Annotated[List[EnrichedOrderLine], Field(
        min_length=1,
        description='Enriched order lines in request order'
    )]

    total_amount: Annotated[Money, Field(
        ge=0,
        description='Sum of line totals',
        examples=[59.98]
    )]

    @classmethod
    def create(cls, customer_id: str, items: List[EnrichedOrderLine], order_id: Optional[str] = None) -> 'Order':
        """
        Create a confirmed order stamped with the current UTC time.

        Args:
            customer_id: Customer placing the order
            items: Fully enriched order lines
            order_id: Id to use instead of a fresh uuid4

        Returns:
            New Order instance with generated fields
        """
        return cls(
            order_id=order_id or str(uuid4()),
            customer_id=customer_id,
            status=OrderStatus.CONFIRMED,
            created_at=datetime.now(timezone.utc),
            items=items,
            total_amount=sum((line.line_total for line in items), Decimal('0')),
        )
