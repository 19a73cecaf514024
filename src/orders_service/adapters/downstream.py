"""
Synchronous invocation of the downstream order processor function.

The caller blocks until the downstream function answers. The client is configured
with a single attempt so a downstream failure or timeout surfaces to the caller
immediately instead of being retried by the SDK.
"""

import json
from typing import Optional, Protocol, runtime_checkable

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from orders_service.handlers.utils.errors import DownstreamInvocationError
from orders_service.handlers.utils.observability import logger, tracer
from orders_service.models.input import OrderRequest
from orders_service.models.output import OrderResult

# Lambda's maximum execution time; the read timeout must not cut a running invocation short
_READ_TIMEOUT_SECONDS = 900

_NO_RETRY_CONFIG = Config(
    retries={'total_max_attempts': 1, 'mode': 'standard'},
    read_timeout=_READ_TIMEOUT_SECONDS,
)


@runtime_checkable
class OrderPlacer(Protocol):
    """Anything that can place an order and answer with a typed result."""

    def place_order(self, request: OrderRequest) -> OrderResult:
        ...


class LambdaOrderPlacer:
    """Places orders by invoking the order processor function with RequestResponse."""

    def __init__(self, function_name: str, region_name: Optional[str] = None, lambda_client=None):
        self.function_name = function_name
        self.lambda_client = lambda_client or boto3.client('lambda', region_name=region_name, config=_NO_RETRY_CONFIG)

    @tracer.capture_method
    def place_order(self, request: OrderRequest) -> OrderResult:
        """
        Invoke the downstream processor and wait for its answer.

        Args:
            request: Order request forwarded as the invocation payload

        Returns:
            OrderResult decoded from the downstream response

        Raises:
            DownstreamInvocationError: Invocation failed, timed out, the function raised,
                or the response was not an OrderResult
        """
        try:
            response = self.lambda_client.invoke(
                FunctionName=self.function_name,
                InvocationType='RequestResponse',
                Payload=json.dumps(request.to_json_dict()).encode('utf-8'),
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error('Downstream invocation failed', extra={'function_name': self.function_name, 'error': str(exc)})
            raise DownstreamInvocationError(
                message=f'Invocation of {self.function_name} failed: {exc}',
                function_name=self.function_name,
            ) from exc

        payload = response['Payload'].read()

        function_error = response.get('FunctionError')
        if function_error:
            logger.error('Downstream function returned an error', extra={
                'function_name': self.function_name,
                'function_error': function_error,
                'payload': payload.decode('utf-8', errors='replace'),
            })
            raise DownstreamInvocationError(
                message=f'{self.function_name} failed with {function_error}',
                function_name=self.function_name,
                function_error=function_error,
            )

        try:
            return OrderResult.model_validate_json(payload)
        except ValidationError as exc:
            raise DownstreamInvocationError(
                message=f'{self.function_name} returned an unexpected payload',
                function_name=self.function_name,
            ) from exc
