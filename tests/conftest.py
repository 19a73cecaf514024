"""
Pytest configuration and shared fixtures for the order topologies.

This module provides the test environment, in-memory collaborators, a Lambda
context and event factories used across unit, contract and integration tests.
"""

import json
import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

import pytest

# Powertools reads its settings when logger/tracer/metrics are created at import time
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SECURITY_TOKEN": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "POWERTOOLS_SERVICE_NAME": "test-order-topologies",
    "POWERTOOLS_TRACE_DISABLED": "true",
    "POWERTOOLS_LOG_LEVEL": "DEBUG",
    "LAMBDA_ENV_MODELER_DISABLE_CACHE": "true",
    "ORDERS_TABLE_NAME": "test-orders-table",
    "PRODUCT_CATALOG_URL": "https://catalog.example.com",
    "ORDER_QUEUE_URL": "https://sqs.us-east-1.amazonaws.com/123456789012/orders",
    "EVENT_BUS_NAME": "test-order-bus",
    "DOWNSTREAM_FUNCTION_NAME": "order-processor",
})

from orders_service.dal.memory_handler import InMemoryOrderStore  # noqa: E402
from orders_service.logic.order_service import OrderService  # noqa: E402
from orders_service.models.catalog import ProductDetails  # noqa: E402

WIDGET_PRO = ProductDetails(
    product_id="P001",
    product_name="Widget Pro",
    unit_price=Decimal("29.99"),
    category="Electronics",
    in_stock=True,
)

GADGET_MINI = ProductDetails(
    product_id="P002",
    product_name="Gadget Mini",
    unit_price=Decimal("10.00"),
    category="Accessories",
    in_stock=True,
)


class FakeCatalog:
    """In-memory catalog that records every lookup."""

    def __init__(self, products: Optional[List[ProductDetails]] = None):
        self.products = {product.product_id: product for product in products or []}
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def get_product(self, product_id: str) -> Optional[ProductDetails]:
        self.calls.append(product_id)
        if self.error is not None:
            raise self.error
        return self.products.get(product_id)


class RecordingOrderStore(InMemoryOrderStore):
    """In-memory store that counts writes and can be told to fail."""

    def __init__(self):
        super().__init__()
        self.save_calls = 0
        self.error: Optional[Exception] = None

    def save(self, order) -> None:
        self.save_calls += 1
        if self.error is not None:
            raise self.error
        super().save(order)


class FakeQueue:
    """Queue client that keeps sent messages in memory."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []
        self.error: Optional[Exception] = None

    def send(self, body: str, correlation_id: str) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append((body, correlation_id))
        return f"msg-{len(self.sent)}"


@dataclass
class LambdaContext:
    function_name: str = "test-order-function"
    memory_limit_in_mb: int = 256
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:test-order-function"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"

    def get_remaining_time_in_millis(self) -> int:
        return 30000


@pytest.fixture
def lambda_context() -> LambdaContext:
    """Create a Lambda context for testing."""
    return LambdaContext()


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog([WIDGET_PRO, GADGET_MINI])


@pytest.fixture
def store() -> RecordingOrderStore:
    return RecordingOrderStore()


@pytest.fixture
def order_service(catalog, store) -> OrderService:
    return OrderService(catalog=catalog, store=store)


@pytest.fixture
def order_request_data() -> Dict[str, Any]:
    """Sample order request body in wire format."""
    return {"customerId": "CUST-123", "items": [{"productId": "P001", "quantity": 2}]}


def make_api_gateway_event(method: str, path: str, body: Any = None) -> Dict[str, Any]:
    """Build an API Gateway REST proxy event."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return {
        "resource": path,
        "path": path,
        "httpMethod": method,
        "headers": {"Content-Type": "application/json"},
        "multiValueHeaders": {},
        "queryStringParameters": None,
        "multiValueQueryStringParameters": None,
        "pathParameters": None,
        "stageVariables": None,
        "requestContext": {
            "requestId": f"req-{uuid4()}",
            "accountId": "123456789012",
            "stage": "test",
            "httpMethod": method,
            "path": path,
            "resourcePath": path,
            "protocol": "HTTP/1.1",
            "identity": {"sourceIp": "127.0.0.1", "userAgent": "pytest"},
        },
        "body": body,
        "isBase64Encoded": False,
    }


def make_sqs_record(body: Any, message_id: Optional[str] = None) -> Dict[str, Any]:
    """Build one record of an SQS Lambda event."""
    if not isinstance(body, str):
        body = json.dumps(body)
    return {
        "messageId": message_id or str(uuid4()),
        "receiptHandle": "AQEBwJnKyrHigUMZj6rYigCgxlaS3SLy0a",
        "body": body,
        "attributes": {
            "ApproximateReceiveCount": "1",
            "SentTimestamp": "1545082649183",
            "SenderId": "AIDAIENQZJOLO23YVJ4VO",
            "ApproximateFirstReceiveTimestamp": "1545082649185",
        },
        "messageAttributes": {},
        "md5OfBody": "e4e68fb7bd0e697a0ae8f1bb342846b3",
        "eventSource": "aws:sqs",
        "eventSourceARN": "arn:aws:sqs:us-east-1:123456789012:orders",
        "awsRegion": "us-east-1",
    }


def make_eventbridge_event(detail: Dict[str, Any], detail_type: str = "order.placed") -> Dict[str, Any]:
    """Build an EventBridge event as delivered to a rule target."""
    return {
        "version": "0",
        "id": str(uuid4()),
        "detail-type": detail_type,
        "source": "order-service",
        "account": "123456789012",
        "time": "2024-01-01T12:00:00Z",
        "region": "us-east-1",
        "resources": [],
        "detail": detail,
    }


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        elif f"{os.sep}integration{os.sep}" in path:
            item.add_marker(pytest.mark.integration)
        elif f"{os.sep}contract{os.sep}" in path:
            item.add_marker(pytest.mark.contract)
