"""
Event bus clients.

EventBridgeBusClient publishes to an EventBridge bus; the bus routes each event to
every matching rule and each target retries independently. InMemoryEventBus gives
the same one-to-many semantics in process, for local runs and tests: every
subscriber receives its own decoded copy of the payload, and a failing subscriber
neither blocks nor fails the others.
"""

import json
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, runtime_checkable
from uuid import uuid4

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from orders_service.handlers.utils.errors import EventPublishError
from orders_service.handlers.utils.observability import logger, metrics, tracer

DEFAULT_EVENT_SOURCE = 'order-service'
DEFAULT_MAX_DELIVERIES = 1000

SubscriberHandler = Callable[[Dict[str, Any]], None]


@runtime_checkable
class EventBusClient(Protocol):
    """Publish-only view of an event bus."""

    def publish(self, event_type: str, detail: str) -> str:
        """Publish a serialized event detail and return the bus-assigned event id."""
        ...


class EventBridgeBusClient:
    """Event bus client backed by Amazon EventBridge."""

    def __init__(
        self,
        event_bus_name: str,
        source: str = DEFAULT_EVENT_SOURCE,
        region_name: Optional[str] = None,
        events_client=None,
    ):
        """
        Initialize EventBridge publisher.

        Args:
            event_bus_name: Name of the EventBridge bus
            source: Source attribute stamped on every event
            region_name: AWS region
            events_client: Pre-built boto3 events client
        """
        self.event_bus_name = event_bus_name
        self.source = source
        self.eventbridge = events_client or boto3.client('events', region_name=region_name)

    @tracer.capture_method
    def publish(self, event_type: str, detail: str) -> str:
        """
        Put a single event on the bus.

        Args:
            event_type: EventBridge detail-type
            detail: JSON encoded event detail

        Returns:
            Event id assigned by EventBridge

        Raises:
            EventPublishError: If the call fails or the entry is rejected
        """
        try:
            response = self.eventbridge.put_events(
                Entries=[
                    {
                        'Source': self.source,
                        'DetailType': event_type,
                        'Detail': detail,
                        'EventBusName': self.event_bus_name,
                    }
                ]
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error('EventBridge put_events failed', extra={
                'event_type': event_type,
                'event_bus_name': self.event_bus_name,
                'error': str(exc),
            })
            raise EventPublishError(
                message=f'Failed to publish {event_type}: {exc}',
                event_type=event_type,
                event_bus_name=self.event_bus_name,
            ) from exc

        if response.get('FailedEntryCount', 0) > 0:
            entry = response['Entries'][0]
            logger.error('EventBridge rejected event', extra={
                'event_type': event_type,
                'error_code': entry.get('ErrorCode'),
                'error_message': entry.get('ErrorMessage'),
            })
            raise EventPublishError(
                message=f"EventBridge rejected {event_type}: {entry.get('ErrorCode')} {entry.get('ErrorMessage')}",
                event_type=event_type,
                event_bus_name=self.event_bus_name,
            )

        event_id = response['Entries'][0]['EventId']
        logger.info('Event published', extra={'event_type': event_type, 'event_id': event_id})
        return event_id


@dataclass
class DeliveryOutcome:
    """Result of delivering one event to one subscriber."""

    subscriber: str
    success: bool
    error_message: Optional[str] = None


@dataclass
class _Subscription:
    name: str
    handler: SubscriberHandler


class InMemoryEventBus:
    """
    In-process one-to-many dispatcher with per-subscriber failure isolation.

    The outcomes of the most recent max_deliveries publishes are kept by event id;
    older entries are dropped as new events are published.
    """

    def __init__(self, max_deliveries: int = DEFAULT_MAX_DELIVERIES):
        self._subscriptions: Dict[str, List[_Subscription]] = {}
        self._lock = threading.Lock()
        self._deliveries: 'OrderedDict[str, List[DeliveryOutcome]]' = OrderedDict()
        self.max_deliveries = max_deliveries

    def subscribe(self, event_type: str, handler: SubscriberHandler, name: Optional[str] = None) -> None:
        """Register a handler for an event type. Subscribers are invoked in registration order."""
        subscription = _Subscription(name=name or getattr(handler, '__name__', repr(handler)), handler=handler)
        with self._lock:
            self._subscriptions.setdefault(event_type, []).append(subscription)
        logger.debug('Subscriber registered', extra={'event_type': event_type, 'subscriber': subscription.name})

    def subscribers(self, event_type: str) -> List[str]:
        with self._lock:
            return [subscription.name for subscription in self._subscriptions.get(event_type, [])]

    @property
    def deliveries(self) -> Dict[str, List[DeliveryOutcome]]:
        """Snapshot of the retained outcomes, oldest event first."""
        with self._lock:
            return dict(self._deliveries)

    def publish(self, event_type: str, detail: str) -> str:
        """Dispatch the event to every subscriber and record the outcomes under a new event id."""
        event_id = str(uuid4())
        outcomes = self.dispatch(event_type, detail)
        with self._lock:
            self._deliveries[event_id] = outcomes
            while len(self._deliveries) > self.max_deliveries:
                self._deliveries.popitem(last=False)
        return event_id

    def dispatch(self, event_type: str, detail: str) -> List[DeliveryOutcome]:
        """
        Deliver an event to every subscriber of its type.

        Args:
            event_type: Event type to route on
            detail: JSON encoded event detail

        Returns:
            One DeliveryOutcome per subscriber, in registration order
        """
        with self._lock:
            subscriptions = list(self._subscriptions.get(event_type, []))

        if not subscriptions:
            logger.warning('No subscribers for event type', extra={'event_type': event_type})

        outcomes = []
        for subscription in subscriptions:
            try:
                subscription.handler(json.loads(detail))
            except Exception as exc:
                metrics.add_metric(name='SubscriberDeliveryFailed', unit=MetricUnit.Count, value=1)
                logger.exception('Subscriber failed', extra={
                    'event_type': event_type,
                    'subscriber': subscription.name,
                })
                outcomes.append(DeliveryOutcome(subscriber=subscription.name, success=False, error_message=str(exc)))
            else:
                outcomes.append(DeliveryOutcome(subscriber=subscription.name, success=True))

        return outcomes
