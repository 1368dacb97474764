"""
Error handling utilities for the open house Lambda handlers.

Every client-facing failure is raised as a ``BaseServiceError`` subclass and
translated into an API Gateway response in one place, so handlers never build
error envelopes themselves.
"""

import json
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit

from openhouse.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseServiceError):
    """Raised when a request payload fails schema validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )


class MissingPathParameterError(BaseServiceError):
    """Raised when an operation needs the ``uuid`` path parameter and it is absent."""

    def __init__(self, message: str = "Missing UUID in URL path"):
        super().__init__(
            message=message,
            error_code="MISSING_PATH_PARAMETER",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )


class InvalidReferenceError(BaseServiceError):
    """Raised when a payload references a record that does not exist."""

    def __init__(self, resource_label: str, suffix: str = ""):
        super().__init__(
            message=f"Specified {resource_label} does not exist{suffix}",
            error_code="INVALID_REFERENCE",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.resource_label = resource_label


class ResourceNotFoundError(BaseServiceError):
    """Raised when the record addressed by the path does not exist."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            message=f"{resource_type} does not exist",
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MethodNotAllowedError(BaseServiceError):
    """Raised for HTTP methods a handler does not serve."""

    def __init__(self, http_method: Optional[str]):
        super().__init__(
            message=f"Method {http_method} not allowed",
            error_code="METHOD_NOT_ALLOWED",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )
        self.http_method = http_method


# Errors whose response carries no body
BODILESS_ERROR_CODES = frozenset({"METHOD_NOT_ALLOWED"})


def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ClientErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_metadata("error_details", error.to_dict())

    logger.warning(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
        }
    )


def get_http_status_code(error: BaseServiceError) -> int:
    """Get appropriate HTTP status code for error."""

    status_mapping = {
        "VALIDATION_ERROR": 400,
        "MISSING_PATH_PARAMETER": 400,
        "INVALID_REFERENCE": 400,
        "RESOURCE_NOT_FOUND": 404,
        "METHOD_NOT_ALLOWED": 405,
    }

    return status_mapping.get(error.error_code, 500)


def format_error_response(error: BaseException) -> Optional[Dict[str, Any]]:
    """Format error for API response."""
    if isinstance(error, BaseServiceError):
        if error.error_code in BODILESS_ERROR_CODES:
            return None
        return {"error": error.message}
    return {"error": str(error)}


def _json_default(value: Any) -> Any:
    # DynamoDB hands numbers back as Decimal
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(body: Any) -> str:
    """Serialize a response body, converting DynamoDB numbers back to JSON numbers."""
    return json.dumps(body, default=_json_default)


def create_api_response(
    status_code: int,
    body: Any = None,
    cors_origin: str = "*",
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create standardized API Gateway response."""

    response_headers = {
        "Access-Control-Allow-Origin": cors_origin,
    }
    if body is not None:
        response_headers["Content-Type"] = "application/json"

    if headers:
        response_headers.update(headers)

    response: Dict[str, Any] = {
        "statusCode": status_code,
        "headers": response_headers,
    }
    if body is not None:
        response["body"] = body if isinstance(body, str) else to_json(body)

    return response
