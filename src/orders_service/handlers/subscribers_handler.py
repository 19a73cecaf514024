"""
Subscriber Handlers - independent reactions to 'order.placed'.

Each subscriber is deployed as its own function behind its own EventBridge rule, so a
failure in one is retried by the bus for that subscriber only. The *_queued_handler
variants put a subscriber behind a dedicated SQS queue (EventBridge rule target)
and report failed records individually.
"""

from typing import Any, Dict

from aws_lambda_powertools.utilities.parser import envelopes, parse
from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import (
    get_analytics_subscriber,
    get_fulfilment_subscriber,
    get_notifications_subscriber,
)
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.logic.event_topology import OrderPlacedSubscriber, QueuedSubscriber
from orders_service.models.messages import OrderPlacedEvent


def _handle_eventbridge_event(subscriber: OrderPlacedSubscriber, event: Dict[str, Any]) -> None:
    order_event: OrderPlacedEvent = parse(event=event, model=OrderPlacedEvent, envelope=envelopes.EventBridgeEnvelope)
    logger.append_keys(order_id=order_event.order_id, subscriber=subscriber.name)
    try:
        subscriber.handle(order_event)
    finally:
        logger.remove_keys(['order_id', 'subscriber'])


def _handle_sqs_batch(subscriber: OrderPlacedSubscriber, event: Dict[str, Any]) -> Dict[str, Any]:
    logger.append_keys(subscriber=subscriber.name)
    try:
        report = QueuedSubscriber(subscriber).process_batch(event.get('Records', []))
    finally:
        logger.remove_keys(['subscriber'])
    return report.to_batch_response()


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def fulfilment_handler(event: Dict[str, Any], context: LambdaContext) -> None:
    _handle_eventbridge_event(get_fulfilment_subscriber(), event)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def notifications_handler(event: Dict[str, Any], context: LambdaContext) -> None:
    _handle_eventbridge_event(get_notifications_subscriber(), event)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def analytics_handler(event: Dict[str, Any], context: LambdaContext) -> None:
    _handle_eventbridge_event(get_analytics_subscriber(), event)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def fulfilment_queued_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return _handle_sqs_batch(get_fulfilment_subscriber(), event)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def notifications_queued_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return _handle_sqs_batch(get_notifications_subscriber(), event)


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def analytics_queued_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return _handle_sqs_batch(get_analytics_subscriber(), event)
