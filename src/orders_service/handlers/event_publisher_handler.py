"""
Event Publisher Handler - places an order and announces it on the event bus.

POST /eventbridge/orders places the order through the order service and, once it is
persisted, publishes 'order.placed'. The publisher does not know which subscribers
exist. If the bus rejects the event after the order was persisted the request fails
with 502 while the order remains stored.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_event_publisher, get_order_service
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.handlers.utils.rest_api_resolver import create_resolver, domain_error_response, json_response, parse_body
from orders_service.models.input import OrderRequest

app = create_resolver()


@app.post('/eventbridge/orders')
@tracer.capture_method
def place_and_publish_order() -> Response:
    request = parse_body(app, OrderRequest)

    result = get_order_service().place_order(request)
    if not result.is_success:
        return domain_error_response(result.error)

    accepted = get_event_publisher().publish_order_placed(result.order)
    logger.info('Order placed and announced', extra={'order_id': accepted.order_id, 'event_id': accepted.event_id})

    return json_response(201, {'orderId': accepted.order_id, 'status': 'PLACED'})


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return app.resolve(event, context)
