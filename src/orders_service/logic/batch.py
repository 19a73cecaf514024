"""
SQS batch processing with partial batch failure reporting.

Each record is handled independently: a record handler that raises marks only that
record failed, and the failed message ids are returned so SQS redelivers just those.
Redelivery limits and dead-lettering are queue configuration, not handled here.
"""

from typing import Any, Callable, Dict, List

from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.batch import BatchProcessor, EventType
from aws_lambda_powertools.utilities.data_classes.sqs_event import SQSRecord

from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.messages import PartialFailureReport

# Lambda's upper bound for an SQS event source mapping without a batching window
DEFAULT_MAX_BATCH_SIZE = 10

RecordHandler = Callable[[SQSRecord], Any]


@tracer.capture_method
def process_sqs_batch(
    records: List[Dict[str, Any]],
    record_handler: RecordHandler,
    max_batch_size: int = DEFAULT_MAX_BATCH_SIZE,
) -> PartialFailureReport:
    """
    Run a record handler over every SQS record in a batch.

    Args:
        records: Raw SQS records from the Lambda event
        record_handler: Called once per record; raising marks the record failed
        max_batch_size: Expected upper bound of the batch, larger batches are logged

    Returns:
        PartialFailureReport with the message ids of the failed records
    """
    if len(records) > max_batch_size:
        logger.warning('Batch larger than configured maximum', extra={
            'batch_size': len(records),
            'max_batch_size': max_batch_size,
        })

    processor = BatchProcessor(event_type=EventType.SQS, raise_on_entire_batch_failure=False)

    def _logged_handler(record: SQSRecord) -> Any:
        try:
            return record_handler(record)
        except Exception:
            logger.exception('Record processing failed', extra={'message_id': record.message_id})
            raise

    with processor(records=records, handler=_logged_handler):
        processor.process()

    failed_ids = [failure['itemIdentifier'] for failure in processor.response()['batchItemFailures']]

    metrics.add_metric(name='BatchRecordProcessed', unit=MetricUnit.Count, value=len(records) - len(failed_ids))
    if failed_ids:
        metrics.add_metric(name='BatchRecordFailed', unit=MetricUnit.Count, value=len(failed_ids))

    logger.info('Batch processed', extra={
        'batch_size': len(records),
        'failed_count': len(failed_ids),
    })

    return PartialFailureReport(failed_message_ids=failed_ids)
