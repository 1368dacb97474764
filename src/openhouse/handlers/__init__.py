"""
AWS Lambda Handlers Module.

One Lambda entry point per resource. Each handler builds its dispatcher from
environment configuration and routes API Gateway proxy events by HTTP method.
"""

from openhouse.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
