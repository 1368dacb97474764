"""
Open House API Service Module.

Serverless CRUD API for campus open days, split into three layers:

- handlers: Lambda entry points, request dispatch and response formatting
- logic: Validation, reference checks, cascades and attendee counting
- dal: DynamoDB table stores
- models: Request schemas
"""

__version__ = "1.0.0"

from openhouse.handlers.utils.observability import logger, metrics, tracer

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
