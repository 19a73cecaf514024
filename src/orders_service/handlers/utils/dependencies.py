"""
Collaborator factories shared by the Lambda entry points.

Each factory builds its object on first use and caches it for the lifetime of the
execution environment, so boto3 and httpx clients are reused across warm
invocations. Tests replace these factories at the handler module.
"""

from functools import lru_cache

from orders_service.adapters.catalog_gateway import HttpCatalogGateway
from orders_service.adapters.downstream import LambdaOrderPlacer
from orders_service.adapters.event_bus import EventBridgeBusClient
from orders_service.adapters.notifier import SnsNotifier
from orders_service.adapters.queue_client import SqsQueueClient
from orders_service.dal import OrderStore, get_order_store
from orders_service.handlers.models.env_vars import (
    get_direct_workflow_env_vars,
    get_event_publisher_env_vars,
    get_notifications_env_vars,
    get_order_service_env_vars,
    get_queue_consumer_env_vars,
    get_queue_producer_env_vars,
)
from orders_service.logic.direct_workflow import DirectOrderWorkflow
from orders_service.logic.event_topology import (
    AnalyticsSubscriber,
    FulfilmentSubscriber,
    NotificationsSubscriber,
    OrderEventPublisher,
)
from orders_service.logic.order_service import OrderService
from orders_service.logic.queue_topology import OrderQueueConsumer, OrderQueueProducer


@lru_cache
def get_store() -> OrderStore:
    env_vars = get_order_service_env_vars()
    return get_order_store(table_name=env_vars.ORDERS_TABLE_NAME, endpoint_url=env_vars.DYNAMODB_ENDPOINT)


@lru_cache
def get_catalog() -> HttpCatalogGateway:
    env_vars = get_order_service_env_vars()
    return HttpCatalogGateway(
        base_url=str(env_vars.PRODUCT_CATALOG_URL),
        timeout_seconds=env_vars.CATALOG_TIMEOUT_SECONDS,
    )


@lru_cache
def get_order_service() -> OrderService:
    return OrderService(catalog=get_catalog(), store=get_store())


@lru_cache
def get_direct_workflow() -> DirectOrderWorkflow:
    env_vars = get_direct_workflow_env_vars()
    return DirectOrderWorkflow(placer=LambdaOrderPlacer(function_name=env_vars.DOWNSTREAM_FUNCTION_NAME))


@lru_cache
def get_queue_producer() -> OrderQueueProducer:
    env_vars = get_queue_producer_env_vars()
    return OrderQueueProducer(queue=SqsQueueClient(queue_url=env_vars.ORDER_QUEUE_URL))


@lru_cache
def get_queue_consumer() -> OrderQueueConsumer:
    env_vars = get_queue_consumer_env_vars()
    return OrderQueueConsumer(service=get_order_service(), max_batch_size=env_vars.MAX_BATCH_SIZE)


@lru_cache
def get_event_publisher() -> OrderEventPublisher:
    env_vars = get_event_publisher_env_vars()
    return OrderEventPublisher(bus=EventBridgeBusClient(event_bus_name=env_vars.EVENT_BUS_NAME, source=env_vars.EVENT_SOURCE))


@lru_cache
def get_fulfilment_subscriber() -> FulfilmentSubscriber:
    return FulfilmentSubscriber()


@lru_cache
def get_notifications_subscriber() -> NotificationsSubscriber:
    topic_arn = get_notifications_env_vars().NOTIFICATION_TOPIC_ARN
    return NotificationsSubscriber(notifier=SnsNotifier(topic_arn=topic_arn) if topic_arn else None)


@lru_cache
def get_analytics_subscriber() -> AnalyticsSubscriber:
    return AnalyticsSubscriber()
