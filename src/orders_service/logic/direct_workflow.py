"""
Direct invocation topology: one synchronous hop from the caller to the order placer.

There is no buffering and no retry. Whatever the placer answers, or raises, is what
the caller gets.
"""

from aws_lambda_powertools.metrics import MetricUnit

from orders_service.adapters.downstream import OrderPlacer
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.input import OrderRequest
from orders_service.models.output import OrderResult


class DirectOrderWorkflow:
    def __init__(self, placer: OrderPlacer):
        self.placer = placer

    @tracer.capture_method
    def place_order_sync(self, request: OrderRequest) -> OrderResult:
        """Block until the placer answers; downstream faults propagate unchanged."""
        logger.debug('Placing order synchronously', extra={'placer': type(self.placer).__name__})
        result = self.placer.place_order(request)
        metrics.add_metric(
            name='DirectOrderPlaced' if result.is_success else 'DirectOrderRejected',
            unit=MetricUnit.Count,
            value=1,
        )
        return result
