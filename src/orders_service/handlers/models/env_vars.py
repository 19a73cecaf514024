"""
Environment variable models for type-safe configuration.

Each Lambda entry point validates only the variables it needs, through
aws_lambda_env_modeler; a missing or malformed variable fails the first invocation
before any request is served.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, HttpUrl


class OrderStoreEnvVars(BaseModel):
    """Variables for handlers that read or write orders."""

    # DynamoDB table name for storing orders
    ORDERS_TABLE_NAME: Annotated[str, Field(
        min_length=1,
        description='DynamoDB table name for order storage'
    )]

    # Local DynamoDB endpoint, unset in AWS
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB endpoint URL override for local testing'
    )] = None


class OrderServiceEnvVars(OrderStoreEnvVars):
    """Variables for handlers that place orders."""

    PRODUCT_CATALOG_URL: Annotated[HttpUrl, Field(
        description='Base URL of the Product Catalog API'
    )]

    CATALOG_TIMEOUT_SECONDS: Annotated[float, Field(
        default=5.0,
        gt=0,
        le=30,
        description='Per-call timeout for catalog requests'
    )] = 5.0


class QueueProducerEnvVars(BaseModel):
    ORDER_QUEUE_URL: Annotated[str, Field(min_length=1, description='SQS queue URL for order submissions')]


class QueueConsumerEnvVars(OrderServiceEnvVars):
    MAX_BATCH_SIZE: Annotated[int, Field(
        default=10,
        ge=1,
        le=10000,
        description='Expected upper bound of an SQS batch'
    )] = 10


class EventPublisherEnvVars(OrderServiceEnvVars):
    EVENT_BUS_NAME: Annotated[str, Field(min_length=1, description='EventBridge bus name')]

    EVENT_SOURCE: Annotated[str, Field(
        default='order-service',
        min_length=1,
        description='Source attribute of published events'
    )] = 'order-service'


class DirectWorkflowEnvVars(BaseModel):
    DOWNSTREAM_FUNCTION_NAME: Annotated[str, Field(
        min_length=1,
        description='Name or ARN of the order processor function invoked synchronously'
    )]


class NotificationsEnvVars(BaseModel):
    # Unset means confirmations are logged only
    NOTIFICATION_TOPIC_ARN: Annotated[Optional[str], Field(
        default=None,
        description='SNS topic ARN for order confirmations'
    )] = None


def get_order_service_env_vars() -> OrderServiceEnvVars:
    return get_environment_variables(model=OrderServiceEnvVars)


def get_queue_producer_env_vars() -> QueueProducerEnvVars:
    return get_environment_variables(model=QueueProducerEnvVars)


def get_queue_consumer_env_vars() -> QueueConsumerEnvVars:
    return get_environment_variables(model=QueueConsumerEnvVars)


def get_event_publisher_env_vars() -> EventPublisherEnvVars:
    return get_environment_variables(model=EventPublisherEnvVars)


def get_direct_workflow_env_vars() -> DirectWorkflowEnvVars:
    return get_environment_variables(model=DirectWorkflowEnvVars)


def get_notifications_env_vars() -> NotificationsEnvVars:
    """
    Get typed environment variables for the notifications subscriber.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=NotificationsEnvVars)
