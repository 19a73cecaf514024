"""
Business Logic Layer for order placement.

The OrderService validates an order request, enriches every line from the product
catalog, prices the order and persists it. It is shared by every delivery topology
(direct invocation, queue consumer, event publisher), which differ only in how a
request reaches place_order and what happens to the result.

Domain failures are returned as OrderResult values. Catalog and store faults are
raised as InfrastructureFault subclasses and are never retried here.
"""

from typing import List, Optional, Union

from aws_lambda_powertools.metrics import MetricUnit

from orders_service.adapters.catalog_gateway import CatalogGateway
from orders_service.dal import OrderStore
from orders_service.handlers.utils.errors import DuplicateOrderError
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.input import OrderLineRequest, OrderRequest
from orders_service.models.order import EnrichedOrderLine, Order
from orders_service.models.output import DomainError, OrderResult


class OrderService:
    """Business logic service for order placement."""

    def __init__(self, catalog: CatalogGateway, store: OrderStore):
        """
        Initialize order service.

        Args:
            catalog: Product catalog gateway
            store: Order store the confirmed orders are written to
        """
        self.catalog = catalog
        self.store = store

    @tracer.capture_method
    def place_order(self, request: OrderRequest, order_id: Optional[str] = None) -> OrderResult:
        """
        Validate, enrich, price and persist an order.

        Lines are checked in request order and processing stops at the first failing
        line. The store is written exactly once, and only when every line passed.

        Passing an order_id makes placement repeatable: when an order with that id is
        already stored it is returned as is, without catalog calls or a second write.

        Args:
            request: Order request
            order_id: Caller-derived order id, e.g. from a queue correlation id

        Returns:
            OrderResult carrying the confirmed Order or the first DomainError

        Raises:
            InfrastructureFault: The catalog or the store failed
        """
        customer_id = request.customer_id.strip()
        if not customer_id:
            return self._reject(DomainError.customer_id_required(), request)

        if not request.items:
            return self._reject(DomainError.items_required(), request)

        if order_id is not None:
            existing = self.store.get_by_id(order_id)
            if existing is not None:
                return self._already_placed(existing)

        enriched_lines: List[EnrichedOrderLine] = []
        for line in request.items:
            enriched = self._enrich_line(line)
            if isinstance(enriched, DomainError):
                return self._reject(enriched, request)
            enriched_lines.append(enriched)

        order = Order.create(customer_id=customer_id, items=enriched_lines, order_id=order_id)
        try:
            self.store.save(order)
        except DuplicateOrderError:
            # a concurrent delivery of the same order won the write
            existing = self.store.get_by_id(order.order_id) if order_id is not None else None
            if existing is None:
                raise
            return self._already_placed(existing)

        tracer.put_annotation('order_id', order.order_id)
        metrics.add_metric(name='OrderPlaced', unit=MetricUnit.Count, value=1)
        metrics.add_metric(name='OrderValue', unit=MetricUnit.NoUnit, value=float(order.total_amount))

        logger.info('Order placed', extra={
            'order_id': order.order_id,
            'customer_id': order.customer_id,
            'line_count': len(order.items),
            'total_amount': str(order.total_amount),
        })

        return OrderResult.success(order)

    def _already_placed(self, order: Order) -> OrderResult:
        metrics.add_metric(name='OrderAlreadyPlaced', unit=MetricUnit.Count, value=1)
        logger.info('Order already placed', extra={'order_id': order.order_id})
        return OrderResult.success(order)

    def _enrich_line(self, line: OrderLineRequest) -> Union[EnrichedOrderLine, DomainError]:
        if line.quantity <= 0:
            return DomainError.invalid_quantity(line.product_id)

        product = self.catalog.get_product(line.product_id)
        if product is None:
            return DomainError.product_not_found(line.product_id)

        if not product.in_stock:
            return DomainError.product_out_of_stock(line.product_id, product.product_name)

        unit_price = product.unit_price
        return EnrichedOrderLine(
            product_id=line.product_id,
            product_name=product.product_name,
            category=product.category,
            quantity=line.quantity,
            unit_price=unit_price,
            line_total=unit_price * line.quantity,
        )

    def _reject(self, error: DomainError, request: OrderRequest) -> OrderResult:
        metrics.add_metric(name='OrderRejected', unit=MetricUnit.Count, value=1)
        logger.info('Order rejected', extra={
            'error_code': error.code.value,
            'error_message': error.message,
            'customer_id': request.customer_id,
        })
        return OrderResult.failure(error)

    @tracer.capture_method
    def get_order(self, order_id: str) -> Optional[Order]:
        """
        Retrieve an order by ID.

        Raises:
            OrderStoreError: The store failed
        """
        return self.store.get_by_id(order_id)
