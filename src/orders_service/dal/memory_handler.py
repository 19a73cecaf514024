"""
In-memory implementation of the order store for local runs and tests.
"""

import threading
from typing import Dict, Optional

from orders_service.handlers.utils.errors import DuplicateOrderError
from orders_service.models.order import Order


class InMemoryOrderStore:
    """Order store backed by a dict; a lock makes each per-key read and write atomic."""

    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()

    def save(self, order: Order) -> None:
        with self._lock:
            if order.order_id in self._orders:
                raise DuplicateOrderError(order_id=order.order_id, table_name="in-memory")
            self._orders[order.order_id] = order

    def get_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)
