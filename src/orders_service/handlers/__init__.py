"""
AWS Lambda Handlers Module.

Entry points of the order topologies. Each module is deployed as its own function
(or, for subscribers_handler, as one function per subscriber) and follows the
three-layer pattern: the handler parses the event and maps outcomes, the logic
layer places orders, and the adapters and DAL talk to AWS and the catalog.

REST API handlers (API Gateway):
- orders_handler: POST /orders, GET /orders/<order_id>
- direct_workflow_handler: POST /direct/orders
- queue_producer_handler: POST /sqs/orders
- event_publisher_handler: POST /eventbridge/orders

Event handlers:
- order_processor_handler: synchronous downstream of the direct workflow
- queue_consumer_handler: SQS batch consumer
- subscribers_handler: EventBridge and SQS subscribers of 'order.placed'
"""

from orders_service.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
