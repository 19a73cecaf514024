"""
DynamoDB implementation of the order store.

Orders are written once with a conditional put on the order id and read back with
strongly consistent reads, which gives read-after-write consistency per order.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from orders_service.handlers.utils.errors import DuplicateOrderError, OrderStoreError
from orders_service.handlers.utils.observability import logger, metrics, tracer
from orders_service.models.order import EnrichedOrderLine, Order, OrderStatus

_RETRY_AFTER_BY_ERROR_CODE = {
    'ProvisionedThroughputExceededException': 60,
    'ThrottlingException': 30,
}


class DynamoDBOrderStore:
    """DynamoDB backed order store keyed on 'orderId'."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ):
        """
        Initialize the DynamoDB order store.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
        """
        self.table_name = table_name

        session_config = {}
        if region_name:
            session_config['region_name'] = region_name
        if endpoint_url:
            session_config['endpoint_url'] = endpoint_url

        self.dynamodb = boto3.resource('dynamodb', **session_config)
        self.table = self.dynamodb.Table(table_name)

        logger.debug('DynamoDB order store initialized', extra={
            'table_name': table_name,
            'endpoint_url': endpoint_url,
        })

    @tracer.capture_method
    def save(self, order: Order) -> None:
        """
        Persist a new order.

        Args:
            order: Confirmed order to persist

        Raises:
            OrderStoreError: If the write fails or the order id already exists
        """
        try:
            self.table.put_item(
                Item=self._order_to_dynamodb_item(order),
                ConditionExpression='attribute_not_exists(orderId)',
            )
        except (ClientError, BotoCoreError) as exc:
            raise self._translate_error(exc, operation='save', order_id=order.order_id) from exc

        metrics.add_metric(name='OrderStoreWrite', unit=MetricUnit.Count, value=1)
        tracer.put_annotation('order_saved', order.order_id)
        logger.info('Order persisted', extra={'order_id': order.order_id, 'table_name': self.table_name})

    @tracer.capture_method
    def get_by_id(self, order_id: str) -> Optional[Order]:
        """
        Retrieve an order by its ID.

        Args:
            order_id: Unique identifier of the order

        Returns:
            Order instance if found, None otherwise

        Raises:
            OrderStoreError: If the read fails
        """
        try:
            response = self.table.get_item(Key={'orderId': order_id}, ConsistentRead=True)
        except (ClientError, BotoCoreError) as exc:
            raise self._translate_error(exc, operation='get_by_id', order_id=order_id) from exc

        item = response.get('Item')
        if not item:
            logger.info('Order not found', extra={'order_id': order_id})
            return None

        return self._dynamodb_item_to_order(item)

    def _translate_error(self, exc: Exception, operation: str, order_id: str) -> OrderStoreError:
        if isinstance(exc, ClientError):
            error_code = exc.response['Error']['Code']
            error_message = exc.response['Error'].get('Message', '')
        else:
            error_code = type(exc).__name__
            error_message = str(exc)

        metrics.add_metric(name='OrderStoreError', unit=MetricUnit.Count, value=1)
        logger.error(f'DynamoDB {operation} error', extra={
            'error_code': error_code,
            'error_message': error_message,
            'table_name': self.table_name,
            'order_id': order_id,
        })

        if error_code == 'ConditionalCheckFailedException':
            return DuplicateOrderError(order_id=order_id, table_name=self.table_name)

        return OrderStoreError(
            message=f'DynamoDB {operation} failed: {error_code}',
            operation=operation,
            table_name=self.table_name,
            retry_after=_RETRY_AFTER_BY_ERROR_CODE.get(error_code),
        )

    @staticmethod
    def _order_to_dynamodb_item(order: Order) -> Dict[str, Any]:
        """Convert an Order to DynamoDB item format; numbers stay Decimal."""
        return {
            'orderId': order.order_id,
            'customerId': order.customer_id,
            'status': order.status.value,
            'createdAt': order.created_at.isoformat(),
            'totalAmount': order.total_amount,
            'items': [
                {
                    'productId': line.product_id,
                    'productName': line.product_name,
                    'category': line.category,
                    'quantity': line.quantity,
                    'unitPrice': line.unit_price,
                    'lineTotal': line.line_total,
                }
                for line in order.items
            ],
        }

    def _dynamodb_item_to_order(self, item: Dict[str, Any]) -> Order:
        """Convert a DynamoDB item back into an Order."""
        try:
            return Order(
                order_id=item['orderId'],
                customer_id=item['customerId'],
                status=OrderStatus(item['status']),
                created_at=datetime.fromisoformat(item['createdAt']),
                total_amount=Decimal(str(item['totalAmount'])),
                items=[
                    EnrichedOrderLine(
                        product_id=line['productId'],
                        product_name=line['productName'],
                        category=line.get('category', ''),
                        quantity=int(line['quantity']),
                        unit_price=Decimal(str(line['unitPrice'])),
                        line_total=Decimal(str(line['lineTotal'])),
                    )
                    for line in item['items']
                ],
            )
        except (KeyError, ValueError, TypeError) as exc:
            logger.error('Failed to convert DynamoDB item to Order', extra={'order_id': item.get('orderId')})
            raise OrderStoreError(
                message=f'Invalid order data in table: {exc}',
                operation='get_by_id',
                table_name=self.table_name,
            ) from exc
