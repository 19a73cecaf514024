"""
Queue Consumer Handler - places queued orders from an SQS batch.

The function must be wired with ReportBatchItemFailures enabled so SQS redelivers
only the records listed in batchItemFailures.
"""

from typing import Any, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_queue_consumer
from orders_service.handlers.utils.observability import logger, metrics, tracer


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda handler for the order queue.

    Args:
        event: SQS event
        context: Lambda context

    Returns:
        Partial batch response with the failed message ids
    """
    report = get_queue_consumer().process_batch(event.get('Records', []))
    return report.to_batch_response()
