"""
Customer notification channel used by the notifications subscriber.
"""

from typing import Optional, Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from orders_service.handlers.utils.errors import ExternalServiceError
from orders_service.handlers.utils.observability import logger, tracer


@runtime_checkable
class Notifier(Protocol):
    def notify(self, subject: str, message: str, customer_id: str) -> None:
        ...


class SnsNotifier:
    """Publishes order notifications to an SNS topic."""

    def __init__(self, topic_arn: str, region_name: Optional[str] = None, sns_client=None):
        self.topic_arn = topic_arn
        self.sns = sns_client or boto3.client('sns', region_name=region_name)

    @tracer.capture_method
    def notify(self, subject: str, message: str, customer_id: str) -> None:
        try:
            response = self.sns.publish(
                TopicArn=self.topic_arn,
                Subject=subject,
                Message=message,
                MessageAttributes={
                    'customerId': {'DataType': 'String', 'StringValue': customer_id},
                },
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error('Failed to publish notification', extra={'topic_arn': self.topic_arn, 'error': str(exc)})
            raise ExternalServiceError(
                message=f'Failed to publish notification: {exc}',
                service_name='SNS',
                error_code='NOTIFICATION_FAILED',
            ) from exc

        logger.info('Notification published', extra={
            'topic_arn': self.topic_arn,
            'message_id': response.get('MessageId'),
            'customer_id': customer_id,
        })
