"""
Queue Producer Handler - accepts orders onto the order queue.

POST /sqs/orders answers 202 as soon as the order is enqueued; the order has not
been validated or placed yet. Only a malformed body is rejected here.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from orders_service.handlers.utils.dependencies import get_queue_producer
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.handlers.utils.rest_api_resolver import create_resolver, json_response, parse_body
from orders_service.models.input import OrderRequest

app = create_resolver()


@app.post('/sqs/orders')
@tracer.capture_method
def submit_order() -> Response:
    request = parse_body(app, OrderRequest)
    accepted = get_queue_producer().submit_order(request)
    return json_response(202, accepted)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return app.resolve(event, context)
