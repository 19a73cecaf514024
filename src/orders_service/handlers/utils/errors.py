"""
Error taxonomy and error response utilities for the order topology handlers.

Domain outcomes (bad request shape, unknown product, out of stock) are never raised:
they travel as typed values inside an OrderResult. The exceptions defined here cover
request parsing at the HTTP boundary and infrastructure faults raised by the
collaborators (catalog, order store, queue, bus, downstream function).
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.metrics import MetricUnit

from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.output import DomainError


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        retry_after: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.retry_after = retry_after
        self.user_message = user_message or "An error occurred while processing your request."
        self.error_id = str(uuid.uuid4())


class ValidationError(BaseServiceError):
    """Raised when a request body cannot be parsed into the expected shape."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[List[Dict[str, str]]] = None,
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            user_message="Invalid input provided. Please check your request and try again.",
        )
        self.field_errors = field_errors or []


class ResourceNotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
    ):
        message = f"{resource_type} '{resource_id}' not found"
        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            user_message=message,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class OrderRejectedError(BaseServiceError):
    """Raised inside a batch record handler when the domain rejects a queued order."""

    def __init__(self, domain_error: DomainError, correlation_id: Optional[str] = None):
        super().__init__(
            message=domain_error.message,
            error_code=domain_error.code.value,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
            user_message=domain_error.message,
        )
        self.domain_error = domain_error
        self.correlation_id = correlation_id


class InfrastructureFault(BaseServiceError):
    """Base class for failures of an external collaborator, as opposed to domain failures."""

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory = ErrorCategory.INFRASTRUCTURE,
        retry_after: Optional[int] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=category,
            retry_after=retry_after,
            user_message=user_message or "A required service is temporarily unavailable. Please try again later.",
        )


class ExternalServiceError(InfrastructureFault):
    """Raised when a call to an external service fails."""

    def __init__(
        self,
        message: str,
        service_name: str,
        error_code: str = "EXTERNAL_SERVICE_ERROR",
        retry_after: Optional[int] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.EXTERNAL_SERVICE,
            retry_after=retry_after,
        )
        self.service_name = service_name


class CatalogUnavailableError(ExternalServiceError):
    """The product catalog could not be reached or answered with an unexpected status."""

    def __init__(self, message: str, product_id: str, status_code: Optional[int] = None):
        super().__init__(message=message, service_name="ProductCatalog", error_code="CATALOG_UNAVAILABLE")
        self.product_id = product_id
        self.status_code = status_code


class CatalogContractError(ExternalServiceError):
    """The product catalog answered with a body that does not match the agreed contract."""

    def __init__(self, message: str, product_id: str):
        super().__init__(message=message, service_name="ProductCatalog", error_code="CATALOG_CONTRACT_VIOLATION")
        self.product_id = product_id


class OrderStoreError(InfrastructureFault):
    """Raised when the order store fails to read or write."""

    def __init__(self, message: str, operation: str, table_name: str, retry_after: Optional[int] = None):
        super().__init__(
            message=message,
            error_code="ORDER_STORE_ERROR",
            retry_after=retry_after,
            user_message="A database error occurred. Please try again later.",
        )
        self.operation = operation
        self.table_name = table_name


class DuplicateOrderError(OrderStoreError):
    """Raised when an order id is written a second time."""

    def __init__(self, order_id: str, table_name: str):
        super().__init__(message=f"Order '{order_id}' already exists", operation="save", table_name=table_name)
        self.order_id = order_id


class QueueSendError(ExternalServiceError):
    """Raised when a message could not be enqueued."""

    def __init__(self, message: str, queue_url: str):
        super().__init__(message=message, service_name="SQS", error_code="QUEUE_SEND_FAILED", retry_after=5)
        self.queue_url = queue_url


class EventPublishError(ExternalServiceError):
    """Raised when an event could not be put on the bus."""

    def __init__(self, message: str, event_type: str, event_bus_name: str):
        super().__init__(message=message, service_name="EventBridge", error_code="EVENT_PUBLISH_FAILED")
        self.event_type = event_type
        self.event_bus_name = event_bus_name


class DownstreamInvocationError(ExternalServiceError):
    """Raised when a synchronously invoked downstream function fails or times out."""

    def __init__(self, message: str, function_name: str, function_error: Optional[str] = None):
        super().__init__(message=message, service_name="Lambda", error_code="DOWNSTREAM_INVOCATION_FAILED")
        self.function_name = function_name
        self.function_error = function_error


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)

    logger.error(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
        }
    )


def format_error_response(error: BaseServiceError) -> Dict[str, Any]:
    """Format error for API response."""

    response = {
        "error": {
            "code": error.error_code,
            "message": error.user_message,
            "error_id": error.error_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }

    if error.retry_after:
        response["retry_after"] = error.retry_after

    if isinstance(error, ValidationError) and error.field_errors:
        response["error"]["field_errors"] = error.field_errors

    return response


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "RESOURCE_NOT_FOUND": 404,
        "CATALOG_UNAVAILABLE": 502,
        "CATALOG_CONTRACT_VIOLATION": 502,
        "DOWNSTREAM_INVOCATION_FAILED": 502,
        "EVENT_PUBLISH_FAILED": 502,
        "EXTERNAL_SERVICE_ERROR": 502,
        "QUEUE_SEND_FAILED": 503,
        "ORDER_STORE_ERROR": 503,
    }

    return status_mapping.get(error.error_code, 500)
