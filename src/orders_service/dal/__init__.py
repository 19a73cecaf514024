"""
Data Access Layer (DAL) for order persistence.

The order service depends only on the OrderStore protocol: key-value semantics keyed
on order id, with read-after-write consistency per key and no cross-order guarantees.
"""

from typing import Optional, Protocol, runtime_checkable

from orders_service.models.order import Order


@runtime_checkable
class OrderStore(Protocol):
    """Protocol defining the order store interface."""

    def save(self, order: Order) -> None:
        """Persist a newly confirmed order."""
        ...

    def get_by_id(self, order_id: str) -> Optional[Order]:
        """Retrieve an order by its ID, or None when it does not exist."""
        ...


def get_order_store(table_name: str, endpoint_url: Optional[str] = None) -> OrderStore:
    """
    Factory function to get the DynamoDB backed order store.

    Args:
        table_name: Name of the DynamoDB table
        endpoint_url: DynamoDB endpoint URL (for local testing)

    Returns:
        Order store instance
    """
    # Import here to avoid circular imports
    from orders_service.dal.dynamodb_handler import DynamoDBOrderStore

    return DynamoDBOrderStore(table_name=table_name, endpoint_url=endpoint_url)


__all__ = [
    'OrderStore',
    'get_order_store',
]
