"""
Direct Workflow Handler - synchronous order placement through a downstream function.

POST /direct/orders blocks until the order processor function answers. A failed or
timed-out downstream invocation fails this request immediately with 502.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_direct_workflow
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.handlers.utils.rest_api_resolver import create_resolver, domain_error_response, json_response, parse_body
from orders_service.models.input import OrderRequest

app = create_resolver()


@app.post('/direct/orders')
@tracer.capture_method
def place_order_direct() -> Response:
    request = parse_body(app, OrderRequest)

    result = get_direct_workflow().place_order_sync(request)
    if not result.is_success:
        return domain_error_response(result.error)

    order = result.order
    logger.info('Order placed through direct workflow', extra={'order_id': order.order_id})
    return json_response(200, {
        'orderId': order.order_id,
        'status': order.status.value,
        'order': order.to_json_dict(),
    })


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return app.resolve(event, context)
