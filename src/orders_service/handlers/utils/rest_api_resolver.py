"""
REST API resolver utility for the API Gateway facing Lambda handlers.

Every HTTP entry point builds its own resolver through create_resolver so the shared
CORS policy and error mapping are applied identically across topologies.
"""

import json
from typing import Any, Dict, Type, TypeVar

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response, content_types
from aws_lambda_powertools.metrics import MetricUnit
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from orders_service.handlers.utils.errors import (
    BaseServiceError,
    ValidationError,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from orders_service.handlers.utils.observability import logger, metrics
from orders_service.models.output import DomainError

ModelT = TypeVar('ModelT', bound=BaseModel)

# Configure CORS
cors_config = CORSConfig(
    allow_origin='*',
    max_age=600,
    allow_headers=['content-type', 'authorization'],
)


def json_response(status_code: int, body: Any, headers: Dict[str, str] = None) -> Response:
    """Build a JSON response; pydantic models are dumped with their wire field names."""
    if isinstance(body, BaseModel):
        body = body.model_dump_json(by_alias=True)
    elif not isinstance(body, str):
        body = json.dumps(body)
    return Response(status_code=status_code, content_type=content_types.APPLICATION_JSON, body=body, headers=headers)


def domain_error_response(error: DomainError) -> Response:
    """400 response for an order the domain rejected."""
    return json_response(400, {'error': error.to_json_dict()})


def parse_body(app: APIGatewayRestResolver, model: Type[ModelT]) -> ModelT:
    """
    Parse the current request body into a model.

    Raises:
        ValidationError: The body is not JSON or does not fit the model
    """
    try:
        body = json.loads(app.current_event.decoded_body or '{}')
    except json.JSONDecodeError as exc:
        raise ValidationError(message='Invalid JSON in request body') from exc
    return model.model_validate(body)


def register_error_handlers(app: APIGatewayRestResolver) -> None:
    """Map service errors and pydantic validation errors to JSON error responses."""

    @app.exception_handler(BaseServiceError)
    def handle_service_error(error: BaseServiceError) -> Response:
        log_error_metrics(error)
        return json_response(
            get_http_status_code(error),
            format_error_response(error),
            headers={'Retry-After': str(error.retry_after)} if error.retry_after else None,
        )

    @app.exception_handler(PydanticValidationError)
    def handle_validation_error(error: PydanticValidationError) -> Response:
        logger.warning('Request validation failed', extra={'error_count': error.error_count()})
        metrics.add_metric(name='ValidationError', unit=MetricUnit.Count, value=1)

        field_errors = [
            {'field': '.'.join(str(part) for part in detail['loc']), 'message': detail['msg']}
            for detail in error.errors()
        ]
        validation_error = ValidationError(message='Request validation failed', field_errors=field_errors)
        return json_response(400, format_error_response(validation_error))


def create_resolver() -> APIGatewayRestResolver:
    app = APIGatewayRestResolver(cors=cors_config)
    register_error_handlers(app)
    return app
