"""
Request dispatching for API Gateway proxy events.

A dispatcher picks the operation for the event's HTTP method, runs it, and turns
the outcome (or any exception) into an API Gateway response.
"""

import json
from typing import Any, Callable, Dict, Tuple

from aws_lambda_powertools.metrics import MetricUnit

from openhouse.handlers.utils.errors import (
    BaseServiceError,
    MethodNotAllowedError,
    MissingPathParameterError,
    ValidationError,
    create_api_response,
    format_error_response,
    get_http_status_code,
    log_error_metrics,
)
from openhouse.handlers.utils.observability import logger, metrics, tracer
from openhouse.logic import AttendeeService, EntityService

# An operation returns the status code and the (not yet serialized) body
OperationResult = Tuple[int, Any]
Operation = Callable[[Dict[str, Any]], OperationResult]


def get_path_uuid(event: Dict[str, Any]) -> str:
    """Return ``pathParameters.uuid`` or raise when it is missing or empty."""
    uuid = (event.get('pathParameters') or {}).get('uuid')
    if not uuid:
        raise MissingPathParameterError()
    return uuid


def parse_json_body(event: Dict[str, Any]) -> Any:
    """Decode the JSON request body."""
    body = event.get('body')
    if body is None:
        raise ValidationError('Missing request body')
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError(f'Invalid JSON in request body: {e.msg}') from e


class RequestDispatcher:
    """Routes events to operations keyed by HTTP method."""

    def __init__(self, cors_origin: str = '*'):
        self.cors_origin = cors_origin
        self.routes: Dict[str, Operation] = {}

    @tracer.capture_method
    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Dispatch an API Gateway event.

        Args:
            event: API Gateway proxy event

        Returns:
            API Gateway response; never raises
        """
        http_method = event.get('httpMethod')
        metrics.add_metric(name='RequestCount', unit=MetricUnit.Count, value=1)
        tracer.put_annotation('http_method', str(http_method))

        try:
            operation = self.routes.get(http_method)
            if operation is None:
                raise MethodNotAllowedError(http_method)

            status_code, body = operation(event)
        except Exception as e:
            return self._error_response(e)

        metrics.add_metric(name='RequestSuccess', unit=MetricUnit.Count, value=1)
        return create_api_response(status_code, body, cors_origin=self.cors_origin)

    def _error_response(self, error: Exception) -> Dict[str, Any]:
        status_code = get_http_status_code(error) if isinstance(error, BaseServiceError) else 500

        if status_code < 500:
            log_error_metrics(error)
        else:
            metrics.add_metric(name='RequestError', unit=MetricUnit.Count, value=1)
            logger.exception('Unexpected error while handling request', extra={'error': str(error)})

        return create_api_response(status_code, format_error_response(error), cors_origin=self.cors_origin)


class CrudDispatcher(RequestDispatcher):
    """List, create, update and delete for one entity."""

    def __init__(self, service: EntityService, cors_origin: str = '*'):
        super().__init__(cors_origin)
        self.service = service
        self.routes = {
            'GET': self.list_records,
            'POST': self.create_records,
            'PUT': self.update_record,
            'DELETE': self.delete_record,
        }

    def list_records(self, event: Dict[str, Any]) -> OperationResult:
        return 200, self.service.list_records()

    def create_records(self, event: Dict[str, Any]) -> OperationResult:
        return 201, self.service.create_records(parse_json_body(event))

    def update_record(self, event: Dict[str, Any]) -> OperationResult:
        uuid = get_path_uuid(event)
        return 200, self.service.update_record(uuid, parse_json_body(event))

    def delete_record(self, event: Dict[str, Any]) -> OperationResult:
        uuid = get_path_uuid(event)
        self.service.delete_record(uuid)
        return 200, None


class AttendeeDispatcher(RequestDispatcher):
    """POST adds an attendee, DELETE removes one."""

    def __init__(self, service: AttendeeService, cors_origin: str = '*'):
        super().__init__(cors_origin)
        self.service = service
        self.routes = {
            'POST': self.increment,
            'DELETE': self.decrement,
        }

    def increment(self, event: Dict[str, Any]) -> OperationResult:
        self.service.increment(get_path_uuid(event))
        return 200, None

    def decrement(self, event: Dict[str, Any]) -> OperationResult:
        self.service.decrement(get_path_uuid(event))
        return 200, None
