"""
Powertools logger, tracer and metrics shared by every open house function.

All three read their service name from ``POWERTOOLS_SERVICE_NAME``. Tracing is
off outside Lambda or when ``POWERTOOLS_TRACE_DISABLED`` is set.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

# Overridden by POWERTOOLS_METRICS_NAMESPACE
METRICS_NAMESPACE = 'OpenHouse'

logger: Logger = Logger()

tracer: Tracer = Tracer()

metrics = Metrics(namespace=METRICS_NAMESPACE)
