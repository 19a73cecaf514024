"""
Business logic layer: the order service and the three delivery topologies built on it.
"""

from .direct_workflow import DirectOrderWorkflow
from .event_topology import (
    AnalyticsSubscriber,
    FulfilmentSubscriber,
    NotificationsSubscriber,
    OrderEventPublisher,
    OrderPlacedSubscriber,
    QueuedSubscriber,
)
from .order_service import OrderService
from .queue_topology import OrderQueueConsumer, OrderQueueProducer

__all__ = [
    'OrderService',
    'DirectOrderWorkflow',
    'OrderQueueProducer',
    'OrderQueueConsumer',
    'OrderEventPublisher',
    'OrderPlacedSubscriber',
    'FulfilmentSubscriber',
    'NotificationsSubscriber',
    'AnalyticsSubscriber',
    'QueuedSubscriber',
]
