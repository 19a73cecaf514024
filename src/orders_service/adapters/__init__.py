"""
Adapters for the collaborators the order topologies talk to.

Each adapter sits behind a small Protocol so the order service and the topology
workflows can be exercised with in-memory fakes.
"""

from .catalog_gateway import CatalogGateway, HttpCatalogGateway
from .downstream import LambdaOrderPlacer, OrderPlacer
from .event_bus import DeliveryOutcome, EventBridgeBusClient, EventBusClient, InMemoryEventBus
from .notifier import Notifier, SnsNotifier
from .queue_client import QueueClient, SqsQueueClient

__all__ = [
    'CatalogGateway',
    'HttpCatalogGateway',
    'OrderPlacer',
    'LambdaOrderPlacer',
    'EventBusClient',
    'EventBridgeBusClient',
    'InMemoryEventBus',
    'DeliveryOutcome',
    'QueueClient',
    'SqsQueueClient',
    'Notifier',
    'SnsNotifier',
]
