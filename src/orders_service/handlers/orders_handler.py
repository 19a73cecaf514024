"""
Orders Handler - Lambda function for placing and reading orders over HTTP.

POST /orders places an order through the order service in the same invocation;
GET /orders/<order_id> reads it back.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_order_service
from orders_service.handlers.utils.errors import ResourceNotFoundError
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.handlers.utils.rest_api_resolver import create_resolver, domain_error_response, json_response, parse_body
from orders_service.models.input import OrderRequest

app = create_resolver()


@app.post('/orders')
@tracer.capture_method
def place_order() -> Response:
    """
    Place a new order.

    Returns:
        201 with the confirmed order, or 400 with the domain error
    """
    request = parse_body(app, OrderRequest)
    tracer.put_annotation('customer_id', request.customer_id)

    result = get_order_service().place_order(request)
    if not result.is_success:
        return domain_error_response(result.error)

    order = result.order
    return json_response(201, order, headers={'Location': f'/orders/{order.order_id}'})


@app.get('/orders/<order_id>')
@tracer.capture_method
def get_order(order_id: str) -> Response:
    """
    Get an order by ID.

    Args:
        order_id: Order identifier

    Returns:
        200 with the order, or 404 when it does not exist
    """
    tracer.put_annotation('order_id', order_id)

    order = get_order_service().get_order(order_id)
    if order is None:
        raise ResourceNotFoundError(resource_type='Order', resource_id=order_id)

    logger.info('Order retrieved', extra={'order_id': order_id})
    return json_response(200, order)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda handler for the orders API.

    Args:
        event: API Gateway event
        context: Lambda context

    Returns:
        API Gateway response
    """
    return app.resolve(event, context)
