"""
Centralized observability utilities for the order topology handlers.

This module provides configured instances of AWS Lambda Powertools for logging,
tracing, and metrics collection shared by every Lambda entry point.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Metrics namespace for business KPIs
METRICS_NAMESPACE = 'OrderTopologies'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger()

# Disabled by setting POWERTOOLS_TRACE_DISABLED to "true"
tracer: Tracer = Tracer()

# Business KPIs share one namespace across every entry point
metrics = Metrics(namespace=METRICS_NAMESPACE)
