"""
Order Processor Handler - the downstream function of the direct workflow.

Invoked with RequestResponse, it receives an OrderRequest as the raw payload and
answers with an OrderResult. Domain failures are part of the answer; infrastructure
faults propagate and surface to the caller as a function error.
"""

from typing import Any, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_order_service
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.input import OrderRequest


@tracer.capture_lambda_handler
@logger.inject_lambda_context
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    request = OrderRequest.model_validate(event)
    result = get_order_service().place_order(request)
    return result.to_json_dict()
