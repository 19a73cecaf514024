"""
Unit tests for the event-bus topology: publisher, in-process fan-out and subscribers.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import Mock

import pytest

from conftest import make_eventbridge_event, make_sqs_record
from orders_service.adapters.event_bus import InMemoryEventBus
from orders_service.logic.event_topology import (
    AnalyticsSubscriber,
    FulfilmentSubscriber,
    NotificationsSubscriber,
    OrderEventPublisher,
    OrderPlacedSubscriber,
    QueuedSubscriber,
)
from orders_service.models import ORDER_PLACED_EVENT_TYPE, OrderPlacedEvent, OrderRequest


@pytest.fixture
def placed_order(order_service):
    return order_service.place_order(OrderRequest.model_validate({
        "customerId": "CUST-123",
        "items": [{"productId": "P001", "quantity": 2}],
    })).order


class RecordingSubscriber:
    def __init__(self):
        self.received = []

    def __call__(self, detail):
        self.received.append(detail)


class TestOrderEventPublisher:
    def test_publishes_order_placed_snapshot(self, placed_order):
        bus = Mock()
        bus.publish.return_value = "evt-1"

        accepted = OrderEventPublisher(bus=bus).publish_order_placed(placed_order)

        assert accepted.event_id == "evt-1"
        assert accepted.order_id == placed_order.order_id
        assert accepted.event_type == "order.placed"
        event_type, detail = bus.publish.call_args.args
        assert event_type == ORDER_PLACED_EVENT_TYPE
        payload = json.loads(detail)
        assert payload["orderId"] == placed_order.order_id
        assert payload["customerId"] == "CUST-123"
        assert payload["productId"] == "P001"
        assert payload["quantity"] == 2
        assert payload["totalAmount"] == 59.98
        assert payload["placedAt"]

    def test_every_subscriber_receives_the_event(self, placed_order):
        bus = InMemoryEventBus()
        subscribers = [RecordingSubscriber() for _ in range(3)]
        for index, subscriber in enumerate(subscribers):
            bus.subscribe(ORDER_PLACED_EVENT_TYPE, subscriber, name=f"s{index}")

        accepted = OrderEventPublisher(bus=bus).publish_order_placed(placed_order)

        assert all(len(subscriber.received) == 1 for subscriber in subscribers)
        assert all(outcome.success for outcome in bus.deliveries[accepted.event_id])


class TestInMemoryEventBus:
    def test_failing_subscriber_does_not_affect_others(self):
        bus = InMemoryEventBus()
        first, third = RecordingSubscriber(), RecordingSubscriber()

        def broken(detail):
            raise RuntimeError("notification channel down")

        bus.subscribe("order.placed", first, name="first")
        bus.subscribe("order.placed", broken, name="broken")
        bus.subscribe("order.placed", third, name="third")

        outcomes = bus.dispatch("order.placed", json.dumps({"orderId": "o-1"}))

        assert [(o.subscriber, o.success) for o in outcomes] == [("first", True), ("broken", False), ("third", True)]
        assert outcomes[1].error_message == "notification channel down"
        assert first.received == [{"orderId": "o-1"}]
        assert third.received == [{"orderId": "o-1"}]

    def test_each_subscriber_gets_its_own_copy(self):
        bus = InMemoryEventBus()
        observed = RecordingSubscriber()

        def mutating(detail):
            detail["orderId"] = "tampered"

        bus.subscribe("order.placed", mutating, name="mutating")
        bus.subscribe("order.placed", observed, name="observed")

        bus.dispatch("order.placed", json.dumps({"orderId": "o-1"}))

        assert observed.received == [{"orderId": "o-1"}]

    def test_routes_by_event_type(self):
        bus = InMemoryEventBus()
        placed, cancelled = RecordingSubscriber(), RecordingSubscriber()
        bus.subscribe("order.placed", placed, name="placed")
        bus.subscribe("order.cancelled", cancelled, name="cancelled")

        outcomes = bus.dispatch("order.placed", "{}")

        assert len(outcomes) == 1
        assert cancelled.received == []
        assert bus.subscribers("order.placed") == ["placed"]

    def test_no_subscribers_is_not_an_error(self):
        assert InMemoryEventBus().dispatch("order.placed", "{}") == []

    def test_delivery_history_is_bounded(self):
        bus = InMemoryEventBus(max_deliveries=2)
        bus.subscribe("order.placed", RecordingSubscriber(), name="recorder")

        event_ids = [bus.publish("order.placed", "{}") for _ in range(5)]

        assert list(bus.deliveries) == event_ids[-2:]

    def test_deliveries_is_a_snapshot(self):
        bus = InMemoryEventBus()
        event_id = bus.publish("order.placed", "{}")

        snapshot = bus.deliveries
        bus.publish("order.placed", "{}")

        assert list(snapshot) == [event_id]

    def test_concurrent_publishes_are_all_recorded(self):
        bus = InMemoryEventBus()
        bus.subscribe("order.placed", RecordingSubscriber(), name="recorder")

        with ThreadPoolExecutor(max_workers=8) as executor:
            event_ids = list(executor.map(lambda _: bus.publish("order.placed", "{}"), range(200)))

        assert set(bus.deliveries) == set(event_ids)


class TestSubscribers:
    def test_fulfilment_handles_event(self, placed_order):
        FulfilmentSubscriber().handle(OrderPlacedEvent.from_order(placed_order))

    def test_analytics_handles_event(self, placed_order):
        AnalyticsSubscriber().handle(OrderPlacedEvent.from_order(placed_order))

    def test_notifications_without_topic_only_logs(self, placed_order):
        NotificationsSubscriber(notifier=None).handle(OrderPlacedEvent.from_order(placed_order))

    def test_notifications_sends_confirmation(self, placed_order):
        notifier = Mock()

        NotificationsSubscriber(notifier=notifier).handle(OrderPlacedEvent.from_order(placed_order))

        kwargs = notifier.notify.call_args.kwargs
        assert kwargs["subject"] == f"Order Confirmation - {placed_order.order_id}"
        assert kwargs["customer_id"] == "CUST-123"
        message = json.loads(kwargs["message"])
        assert message["orderId"] == placed_order.order_id
        assert message["totalAmount"] == 59.98
        assert message["itemCount"] == 1

    def test_notifications_failure_raises(self, placed_order):
        notifier = Mock()
        notifier.notify.side_effect = RuntimeError("sns down")

        with pytest.raises(RuntimeError):
            NotificationsSubscriber(notifier=notifier).handle(OrderPlacedEvent.from_order(placed_order))

    def test_subscriber_decodes_wire_detail(self, placed_order):
        subscriber = FulfilmentSubscriber()
        subscriber.handle = Mock()

        subscriber(OrderPlacedEvent.from_order(placed_order).to_json_dict())

        event = subscriber.handle.call_args.args[0]
        assert event.order_id == placed_order.order_id
        assert event.total_amount == Decimal("59.98")

    def test_subscriber_without_handle_cannot_be_built(self):
        class Incomplete(OrderPlacedSubscriber):
            name = "incomplete"

        with pytest.raises(TypeError):
            Incomplete()

    def test_fan_out_isolates_failing_notifications(self, placed_order):
        notifier = Mock()
        notifier.notify.side_effect = RuntimeError("sns down")
        bus = InMemoryEventBus()
        for subscriber in (FulfilmentSubscriber(), NotificationsSubscriber(notifier=notifier), AnalyticsSubscriber()):
            bus.subscribe(ORDER_PLACED_EVENT_TYPE, subscriber, name=subscriber.name)

        accepted = OrderEventPublisher(bus=bus).publish_order_placed(placed_order)

        outcomes = {o.subscriber: o.success for o in bus.deliveries[accepted.event_id]}
        assert outcomes == {"fulfilment": True, "notifications": False, "analytics": True}


class TestQueuedSubscriber:
    def test_failed_records_are_reported(self, placed_order):
        detail = OrderPlacedEvent.from_order(placed_order).to_json_dict()
        records = [
            make_sqs_record(make_eventbridge_event(detail), message_id="ok"),
            make_sqs_record(make_eventbridge_event({"orderId": "missing-fields"}), message_id="bad"),
            make_sqs_record("not json", message_id="garbage"),
        ]

        report = QueuedSubscriber(AnalyticsSubscriber()).process_batch(records)

        assert report.failed_message_ids == ["bad", "garbage"]

    def test_subscriber_failure_marks_record_failed(self, placed_order):
        notifier = Mock()
        notifier.notify.side_effect = [None, RuntimeError("sns down")]
        detail = OrderPlacedEvent.from_order(placed_order).to_json_dict()
        records = [make_sqs_record(make_eventbridge_event(detail), message_id=m) for m in ("m1", "m2")]

        report = QueuedSubscriber(NotificationsSubscriber(notifier=notifier)).process_batch(records)

        assert report.failed_message_ids == ["m2"]
