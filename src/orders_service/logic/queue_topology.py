"""
Queue topology: a producer that accepts orders onto SQS and a consumer that places them.

The producer answers as soon as the message is durably enqueued. The consumer works
through a batch record by record; a record is reported failed when its body does not
parse, when the order is rejected, or when a collaborator faults. Rejected orders are
redelivered like any other failure and end up in the dead-letter queue once the
queue's maxReceiveCount is exhausted. The order id is derived from the message's
correlation id, so a message redelivered after its order was saved is acknowledged
without placing the order twice.
"""

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord

from orders_service.adapters.queue_client import QueueClient
from orders_service.handlers.utils.errors import OrderRejectedError
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.logic.batch import DEFAULT_MAX_BATCH_SIZE, process_sqs_batch
from orders_service.logic.order_service import OrderService
from orders_service.models.input import OrderRequest
from orders_service.models.messages import OrderAccepted, PartialFailureReport, QueueMessage
from orders_service.models.order import Order


class OrderQueueProducer:
    """Accepts order requests onto the order queue."""

    def __init__(self, queue: QueueClient):
        self.queue = queue

    @tracer.capture_method
    def submit_order(self, request: OrderRequest) -> OrderAccepted:
        """
        Enqueue an order request for asynchronous placement.

        Args:
            request: Order request; not validated here

        Returns:
            OrderAccepted with the correlation id of the queued message

        Raises:
            QueueSendError: The message could not be enqueued
        """
        message = QueueMessage.from_request(request)
        message_id = self.queue.send(message.model_dump_json(by_alias=True), correlation_id=message.correlation_id)

        tracer.put_annotation('correlation_id', message.correlation_id)
        metrics.add_metric(name='OrderQueued', unit=MetricUnit.Count, value=1)
        logger.info('Order queued', extra={'correlation_id': message.correlation_id, 'message_id': message_id})

        return OrderAccepted(correlation_id=message.correlation_id)


class OrderQueueConsumer:
    """Places queued orders, reporting failed records individually."""

    def __init__(self, service: OrderService, max_batch_size: int = DEFAULT_MAX_BATCH_SIZE):
        self.service = service
        self.max_batch_size = max_batch_size

    def process_batch(self, records: list) -> PartialFailureReport:
        """Process a batch of raw SQS records and return the ids of the failed ones."""
        return process_sqs_batch(records, self.process_record, max_batch_size=self.max_batch_size)

    @tracer.capture_method
    def process_record(self, record: SQSRecord) -> Order:
        """
        Place the order carried by one queue message.

        Raises:
            pydantic.ValidationError: The body is not a QueueMessage
            OrderRejectedError: The order service rejected the order
            InfrastructureFault: A collaborator failed
        """
        message = QueueMessage.model_validate_json(record.body)
        logger.append_keys(correlation_id=message.correlation_id)
        try:
            result = self.service.place_order(message.to_order_request(), order_id=message.order_id)
        finally:
            logger.remove_keys(['correlation_id'])

        if not result.is_success:
            raise OrderRejectedError(result.error, correlation_id=message.correlation_id)

        logger.info('Queued order placed', extra={
            'message_id': record.message_id,
            'correlation_id': message.correlation_id,
            'order_id': result.order.order_id,
        })
        return result.order
