"""
SQS queue client used by the order queue producer.
"""

from typing import Optional, Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from orders_service.handlers.utils.errors import QueueSendError
from orders_service.handlers.utils.observability import logger, tracer


@runtime_checkable
class QueueClient(Protocol):
    """Durable queue that accepts serialized messages."""

    def send(self, body: str, correlation_id: str) -> str:
        """Enqueue a message body and return the queue's message id."""
        ...


class SqsQueueClient:
    """Queue client backed by an SQS standard queue."""

    def __init__(self, queue_url: str, region_name: Optional[str] = None, sqs_client=None):
        self.queue_url = queue_url
        self.sqs = sqs_client or boto3.client('sqs', region_name=region_name)

    @tracer.capture_method
    def send(self, body: str, correlation_id: str) -> str:
        """
        Send a message to the queue.

        Args:
            body: Serialized message body
            correlation_id: Correlation id, also attached as a message attribute

        Returns:
            SQS message id

        Raises:
            QueueSendError: If SQS rejects the message or cannot be reached
        """
        try:
            response = self.sqs.send_message(
                QueueUrl=self.queue_url,
                MessageBody=body,
                MessageAttributes={
                    'correlationId': {'DataType': 'String', 'StringValue': correlation_id},
                },
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error('Failed to send message to queue', extra={
                'queue_url': self.queue_url,
                'correlation_id': correlation_id,
                'error': str(exc),
            })
            raise QueueSendError(
                message=f'Failed to enqueue order {correlation_id}: {exc}',
                queue_url=self.queue_url,
            ) from exc

        message_id = response['MessageId']
        logger.debug('Message sent to queue', extra={'message_id': message_id, 'correlation_id': correlation_id})
        return message_id
