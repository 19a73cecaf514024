"""
Product catalog contract.

This model is the contract between the order service and the upstream Product
Catalog API. Every field is required: if upstream renames a field, parsing fails
loudly instead of yielding empty names and zero prices.
"""

from typing import Annotated

from pydantic import Field

from orders_service.models.common import CamelModel, Money


class ProductDetails(CamelModel):
    """Product snapshot returned by the catalog; valid only at the instant it was read."""

    product_id: Annotated[str, Field(min_length=1, examples=['P001'])]
    product_name: Annotated[str, Field(min_length=1, examples=['Widget Pro'])]
    unit_price: Annotated[Money, Field(ge=0, examples=[29.99])]
    category: Annotated[str, Field(examples=['Electronics'])]
    in_stock: Annotated[bool, Field(examples=[True])]
