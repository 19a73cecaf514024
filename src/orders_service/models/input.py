"""
Input models for order requests.

The shapes here are deliberately permissive: an empty customer id, an empty item
list or a non-positive quantity still parse, because rejecting them is a domain
decision made by the order service and reported as a typed outcome.
"""

from typing import Annotated, List

from pydantic import Field

from orders_service.models.common import CamelModel


class OrderLineRequest(CamelModel):
    """A requested product and quantity."""

    product_id: Annotated[str, Field(
        default='',
        description='Catalog product identifier',
        examples=['P001']
    )] = ''

    quantity: Annotated[int, Field(
        default=0,
        description='Requested units; must be greater than zero to be accepted',
        examples=[2]
    )] = 0


class OrderRequest(CamelModel):
    """Request model for placing a new order."""

    customer_id: Annotated[str, Field(
        default='',
        description='Customer placing the order',
        examples=['CUST-123']
    )] = ''

    items: Annotated[List[OrderLineRequest], Field(
        default_factory=list,
        description='Ordered lines, processed in order'
    )]
