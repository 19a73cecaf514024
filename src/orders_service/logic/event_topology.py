"""
Event-bus topology: publish 'order.placed' and react to it in independent subscribers.

The publisher knows nothing about who consumes the event. Each subscriber owns its
failure domain: handle() returns normally to acknowledge and raises to have the bus
(or the subscriber's own queue) retry that subscriber alone.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord

from orders_service.adapters.event_bus import EventBusClient
from orders_service.adapters.notifier import Notifier
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.logic.batch import process_sqs_batch
from orders_service.models.messages import ORDER_PLACED_EVENT_TYPE, OrderPlacedEvent, PartialFailureReport, PublishAccepted
from orders_service.models.order import Order


class OrderEventPublisher:
    """Publishes confirmed orders as 'order.placed' events."""

    def __init__(self, bus: EventBusClient):
        self.bus = bus

    @tracer.capture_method
    def publish_order_placed(self, order: Order) -> PublishAccepted:
        """
        Publish an immutable snapshot of a confirmed order.

        Args:
            order: Persisted, confirmed order

        Returns:
            PublishAccepted with the bus-assigned event id

        Raises:
            EventPublishError: The bus did not accept the event
        """
        event = OrderPlacedEvent.from_order(order)
        event_id = self.bus.publish(ORDER_PLACED_EVENT_TYPE, event.model_dump_json(by_alias=True))

        metrics.add_metric(name='OrderPlacedEventPublished', unit=MetricUnit.Count, value=1)
        logger.info('order.placed published', extra={'order_id': order.order_id, 'event_id': event_id})

        return PublishAccepted(event_id=event_id, order_id=order.order_id)


class OrderPlacedSubscriber(ABC):
    """Base class for 'order.placed' subscribers."""

    name = 'subscriber'

    @abstractmethod
    def handle(self, event: OrderPlacedEvent) -> None:
        """Return to acknowledge the event, raise to have it retried."""

    def __call__(self, detail: Dict[str, Any]) -> None:
        """Entry point for in-process buses: decode the event detail and handle it."""
        self.handle(OrderPlacedEvent.model_validate(detail))


class FulfilmentSubscriber(OrderPlacedSubscriber):
    """Requests stock reservation for every line of the order."""

    name = 'fulfilment'

    @tracer.capture_method
    def handle(self, event: OrderPlacedEvent) -> None:
        reservations = [(line.product_id, line.quantity) for line in event.items]
        for product_id, quantity in reservations or [(event.product_id, event.quantity)]:
            logger.info('Fulfilment: reserving stock', extra={
                'order_id': event.order_id,
                'product_id': product_id,
                'quantity': quantity,
            })
        metrics.add_metric(name='FulfilmentReservationRequested', unit=MetricUnit.Count, value=1)


class NotificationsSubscriber(OrderPlacedSubscriber):
    """Sends an order confirmation to the customer when a notifier is configured."""

    name = 'notifications'

    def __init__(self, notifier: Optional[Notifier] = None):
        self.notifier = notifier

    @tracer.capture_method
    def handle(self, event: OrderPlacedEvent) -> None:
        if self.notifier is None:
            logger.info('Notifications: no topic configured, confirmation logged only', extra={
                'order_id': event.order_id,
                'customer_id': event.customer_id,
            })
            return

        message = {
            'orderId': event.order_id,
            'customerId': event.customer_id,
            'totalAmount': float(event.total_amount),
            'itemCount': len(event.items) or 1,
            'placedAt': event.placed_at.isoformat(),
        }
        self.notifier.notify(
            subject=f'Order Confirmation - {event.order_id}',
            message=json.dumps(message),
            customer_id=event.customer_id,
        )
        metrics.add_metric(name='OrderConfirmationSent', unit=MetricUnit.Count, value=1)


class AnalyticsSubscriber(OrderPlacedSubscriber):
    """Records business metrics for placed orders."""

    name = 'analytics'

    @tracer.capture_method
    def handle(self, event: OrderPlacedEvent) -> None:
        metrics.add_metric(name='AnalyticsOrderRecorded', unit=MetricUnit.Count, value=1)
        metrics.add_metric(name='AnalyticsUnitsOrdered', unit=MetricUnit.Count, value=event.total_units)
        metrics.add_metric(name='AnalyticsRevenue', unit=MetricUnit.NoUnit, value=float(event.total_amount))
        logger.info('Analytics: order recorded', extra={
            'order_id': event.order_id,
            'customer_id': event.customer_id,
            'total_units': event.total_units,
            'total_amount': str(event.total_amount),
        })


class QueuedSubscriber:
    """
    Puts a subscriber behind its own SQS queue.

    The queue delivers the EventBridge envelope as the message body. Each record is
    handled independently and failed records are reported back for redelivery.
    """

    def __init__(self, subscriber: OrderPlacedSubscriber):
        self.subscriber = subscriber

    def process_batch(self, records: list) -> PartialFailureReport:
        return process_sqs_batch(records, self.process_record)

    def process_record(self, record: SQSRecord) -> None:
        envelope = record.json_body
        detail = envelope['detail'] if isinstance(envelope, dict) and 'detail' in envelope else envelope
        self.subscriber(detail)
