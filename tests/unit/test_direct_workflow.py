"""
Unit tests for the direct invocation topology and the Lambda order placer.
"""

import io
import json
from decimal import Decimal
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, ReadTimeoutError

from orders_service.adapters.downstream import LambdaOrderPlacer
from orders_service.handlers.utils.errors import DownstreamInvocationError
from orders_service.logic.direct_workflow import DirectOrderWorkflow
from orders_service.models import DomainError, OrderErrorCode, OrderRequest, OrderResult


def _request() -> OrderRequest:
    return OrderRequest.model_validate({"customerId": "CUST-123", "items": [{"productId": "P001", "quantity": 2}]})


def _invoke_response(payload: dict, function_error: str = None) -> dict:
    response = {"StatusCode": 200, "Payload": io.BytesIO(json.dumps(payload).encode("utf-8"))}
    if function_error:
        response["FunctionError"] = function_error
    return response


class TestDirectOrderWorkflowInProcess:
    def test_returns_placed_order(self, order_service, store):
        result = DirectOrderWorkflow(placer=order_service).place_order_sync(_request())

        assert result.is_success
        assert result.order.total_amount == Decimal("59.98")
        assert len(store) == 1

    def test_returns_domain_failure_unchanged(self, order_service, catalog):
        catalog.products.clear()

        result = DirectOrderWorkflow(placer=order_service).place_order_sync(_request())

        assert result.error.code == OrderErrorCode.PRODUCT_NOT_FOUND

    def test_placer_fault_propagates(self):
        placer = Mock()
        placer.place_order.side_effect = DownstreamInvocationError(message="timed out", function_name="order-processor")

        with pytest.raises(DownstreamInvocationError):
            DirectOrderWorkflow(placer=placer).place_order_sync(_request())

        placer.place_order.assert_called_once()


class TestLambdaOrderPlacer:
    def test_invokes_request_response_and_decodes_result(self, order_service):
        expected = order_service.place_order(_request())
        lambda_client = Mock()
        lambda_client.invoke.return_value = _invoke_response(expected.to_json_dict())

        result = LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

        assert result.order.order_id == expected.order.order_id
        assert result.order.total_amount == Decimal("59.98")
        kwargs = lambda_client.invoke.call_args.kwargs
        assert kwargs["FunctionName"] == "order-processor"
        assert kwargs["InvocationType"] == "RequestResponse"
        assert json.loads(kwargs["Payload"]) == {
            "customerId": "CUST-123",
            "items": [{"productId": "P001", "quantity": 2}],
        }

    def test_domain_failure_is_returned(self):
        failure = OrderResult.failure(DomainError.items_required())
        lambda_client = Mock()
        lambda_client.invoke.return_value = _invoke_response(failure.to_json_dict())

        result = LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

        assert result.error.code == OrderErrorCode.ITEMS_REQUIRED

    def test_function_error_raises(self):
        lambda_client = Mock()
        lambda_client.invoke.return_value = _invoke_response(
            {"errorMessage": "Task timed out after 30.00 seconds"}, function_error="Unhandled"
        )

        with pytest.raises(DownstreamInvocationError) as exc_info:
            LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

        assert exc_info.value.function_error == "Unhandled"
        lambda_client.invoke.assert_called_once()

    def test_client_error_raises_without_retry(self):
        lambda_client = Mock()
        lambda_client.invoke.side_effect = ClientError(
            {"Error": {"Code": "TooManyRequestsException", "Message": "Rate exceeded"}}, "Invoke"
        )

        with pytest.raises(DownstreamInvocationError):
            LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

        lambda_client.invoke.assert_called_once()

    def test_read_timeout_raises(self):
        lambda_client = Mock()
        lambda_client.invoke.side_effect = ReadTimeoutError(endpoint_url="https://lambda.us-east-1.amazonaws.com")

        with pytest.raises(DownstreamInvocationError):
            LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

    def test_unexpected_payload_raises(self):
        lambda_client = Mock()
        lambda_client.invoke.return_value = _invoke_response({"order": {"unexpected": True}})

        with pytest.raises(DownstreamInvocationError):
            LambdaOrderPlacer(function_name="order-processor", lambda_client=lambda_client).place_order(_request())

    def test_default_client_makes_a_single_attempt(self):
        placer = LambdaOrderPlacer(function_name="order-processor", region_name="us-east-1")

        retries = placer.lambda_client.meta.config.retries

        assert retries["total_max_attempts"] == 1
