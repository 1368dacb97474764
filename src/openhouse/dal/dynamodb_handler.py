"""
Data Access Layer (DAL) for DynamoDB operations.

Every open house table is keyed by a single ``uuid`` string attribute, so one
table handler class covers all of them. Errors raised by boto3 are translated
into DAL errors so the handler layer only has to deal with service exceptions.
"""

import time
from decimal import Decimal
from functools import wraps
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from openhouse.dal import get_dynamodb_resource
from openhouse.dal.batching import BATCH_GET_MAX, BATCH_WRITE_MAX, chunked, run_batches
from openhouse.handlers.utils.errors import BaseServiceError, ErrorCategory, ErrorSeverity
from openhouse.handlers.utils.observability import logger, metrics, tracer

KEY_ATTRIBUTE = 'uuid'


def to_dynamodb_item(value: Any) -> Any:
    """Convert floats (rejected by the boto3 serializer) to Decimal, recursively."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {key: to_dynamodb_item(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_dynamodb_item(item) for item in value]
    return value


class DALError(BaseServiceError):
    """Base exception for Data Access Layer errors."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "DAL_ERROR",
        severity: ErrorSeverity = ErrorSeverity.HIGH,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=severity,
            category=ErrorCategory.INFRASTRUCTURE,
        )
        self.operation = operation
        self.table_name = table_name


class ConditionalCheckFailedError(DALError):
    """Raised when a conditional check fails in DynamoDB."""

    def __init__(self, table_name: str, operation: str, condition: str):
        super().__init__(
            message=f"Conditional check failed: {condition}",
            operation=operation,
            table_name=table_name,
            error_code="CONDITIONAL_CHECK_FAILED",
            severity=ErrorSeverity.MEDIUM,
        )
        self.condition = condition


def _handle_dynamodb_errors(operation: str):
    """Decorator translating boto3 failures into DAL errors and recording metrics."""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            operation_start = time.time()

            try:
                result = func(self, *args, **kwargs)
            except DALError:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                raise
            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']

                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)

                if error_code == 'ConditionalCheckFailedException':
                    # Expected outcome of guarded writes; callers decide how to react
                    raise ConditionalCheckFailedError(
                        table_name=self.table_name,
                        operation=operation,
                        condition=error_message,
                    ) from e

                logger.error(f"DynamoDB {operation} error", extra={
                    "error_code": error_code,
                    "error_message": error_message,
                    "table_name": self.table_name,
                    "operation": operation,
                })

                if error_code == 'ResourceNotFoundException':
                    raise DALError(
                        message=f"Table {self.table_name} not found",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="TABLE_NOT_FOUND",
                    ) from e
                raise DALError(
                    message=f"DynamoDB error: {error_message}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code=f"DYNAMODB_{error_code}",
                ) from e
            except BotoCoreError as e:
                metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                logger.error(f"DynamoDB connection error during {operation}", extra={
                    "error": str(e),
                    "table_name": self.table_name,
                })
                raise DALError(
                    message=f"Database connection error: {str(e)}",
                    operation=operation,
                    table_name=self.table_name,
                    error_code="DATABASE_CONNECTION_ERROR",
                ) from e

            operation_duration = (time.time() - operation_start) * 1000
            metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=operation_duration)
            return result

        return wrapper
    return decorator


class DynamoDBHandler:
    """DynamoDB table handler for tables keyed by ``uuid``."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        dynamodb: Optional[Any] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            dynamodb: Existing boto3 DynamoDB service resource to share between tables
        """
        self.table_name = table_name

        if dynamodb is None:
            dynamodb = get_dynamodb_resource(region_name, endpoint_url)

        self.dynamodb = dynamodb
        self.table = self.dynamodb.Table(table_name)
        # Batch chunks run on worker threads and go through the client, never the resource.
        # It carries the resource's Python to DynamoDB type conversion.
        self.client = self.dynamodb.meta.client

        logger.debug("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    @tracer.capture_method
    @_handle_dynamodb_errors("Scan")
    def scan_items(self) -> List[Dict[str, Any]]:
        """
        Read every item in the table, following scan pagination.

        Returns:
            All items in the table
        """
        items: List[Dict[str, Any]] = []
        scan_kwargs: Dict[str, Any] = {}

        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get('Items', []))

            last_evaluated_key = response.get('LastEvaluatedKey')
            if not last_evaluated_key:
                break
            scan_kwargs['ExclusiveStartKey'] = last_evaluated_key

        logger.debug("Scan completed", extra={
            "table_name": self.table_name,
            "items_count": len(items),
        })
        return items

    @tracer.capture_method
    @_handle_dynamodb_errors("GetItem")
    def get_item(self, uuid: str) -> Optional[Dict[str, Any]]:
        """
        Get a single item by its key.

        Returns:
            Item data or None if not found
        """
        response = self.table.get_item(Key={KEY_ATTRIBUTE: uuid})
        return response.get('Item')

    def item_exists(self, uuid: str) -> bool:
        """Check whether an item with the given key exists."""
        return self.get_item(uuid) is not None

    @tracer.capture_method
    @_handle_dynamodb_errors("PutItem")
    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create or fully replace an item."""
        self.table.put_item(Item=to_dynamodb_item(item))

        logger.debug("Item stored", extra={
            "table_name": self.table_name,
            "uuid": item.get(KEY_ATTRIBUTE),
        })
        return item

    @tracer.capture_method
    @_handle_dynamodb_errors("DeleteItem")
    def delete_item(self, uuid: str) -> None:
        """Delete an item by its key. Deleting a missing item is not an error."""
        self.table.delete_item(Key={KEY_ATTRIBUTE: uuid})

        logger.debug("Item deleted", extra={
            "table_name": self.table_name,
            "uuid": uuid,
        })

    @tracer.capture_method
    def batch_put_items(self, items: List[Dict[str, Any]]) -> None:
        """Put many items, chunked to the BatchWriteItem limit."""
        requests = [{'PutRequest': {'Item': to_dynamodb_item(item)}} for item in items]
        run_batches(self._batch_write_chunk, chunked(requests, BATCH_WRITE_MAX))

    @tracer.capture_method
    def batch_delete_items(self, uuids: List[str]) -> None:
        """Delete many items by key, chunked to the BatchWriteItem limit."""
        requests = [{'DeleteRequest': {'Key': {KEY_ATTRIBUTE: uuid}}} for uuid in uuids]
        run_batches(self._batch_write_chunk, chunked(requests, BATCH_WRITE_MAX))

    @tracer.capture_method
    def batch_get_items(self, uuids: List[str]) -> List[Dict[str, Any]]:
        """
        Fetch many items by key, chunked to the BatchGetItem limit.

        Keys without an item are silently absent from the result.
        """
        keys = [{KEY_ATTRIBUTE: uuid} for uuid in dict.fromkeys(uuids)]
        results = run_batches(self._batch_get_chunk, chunked(keys, BATCH_GET_MAX))
        return [item for chunk_items in results for item in chunk_items]

    @_handle_dynamodb_errors("BatchWriteItem")
    def _batch_write_chunk(self, requests: List[Dict[str, Any]]) -> None:
        response = self.client.batch_write_item(RequestItems={self.table_name: requests})
        unprocessed = response.get('UnprocessedItems', {}).get(self.table_name, [])

        logger.debug("Batch write completed", extra={
            "table_name": self.table_name,
            "requests": len(requests),
            "unprocessed_items": len(unprocessed),
        })

        if unprocessed:
            raise DALError(
                message=f"{len(unprocessed)} of {len(requests)} batch write requests were not processed",
                operation="BatchWriteItem",
                table_name=self.table_name,
                error_code="UNPROCESSED_ITEMS",
            )

    @_handle_dynamodb_errors("BatchGetItem")
    def _batch_get_chunk(self, keys: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        response = self.client.batch_get_item(RequestItems={self.table_name: {'Keys': keys}})
        items = response.get('Responses', {}).get(self.table_name, [])
        unprocessed = response.get('UnprocessedKeys', {}).get(self.table_name, {}).get('Keys', [])

        if unprocessed:
            raise DALError(
                message=f"{len(unprocessed)} of {len(keys)} batch get keys were not processed",
                operation="BatchGetItem",
                table_name=self.table_name,
                error_code="UNPROCESSED_KEYS",
            )
        return items


class CounterTableHandler(DynamoDBHandler):
    """Table handler for the attendee counter tables."""

    COUNTER_ATTRIBUTE = 'attendees'

    def new_counter(self, uuid: str) -> Dict[str, Any]:
        """Build the initial counter item for a freshly created record."""
        return {KEY_ATTRIBUTE: uuid, self.COUNTER_ATTRIBUTE: 0}

    @tracer.capture_method
    @_handle_dynamodb_errors("UpdateItem")
    def increment(self, uuid: str) -> None:
        """Add one to the counter."""
        self.table.update_item(
            Key={KEY_ATTRIBUTE: uuid},
            UpdateExpression='SET #count = #count + :incr',
            ExpressionAttributeNames={'#count': self.COUNTER_ATTRIBUTE},
            ExpressionAttributeValues={':incr': 1},
        )

    @tracer.capture_method
    @_handle_dynamodb_errors("UpdateItem")
    def decrement(self, uuid: str) -> None:
        """
        Subtract one from the counter while it is above zero.

        Raises:
            ConditionalCheckFailedError: If the counter is already at zero
        """
        self.table.update_item(
            Key={KEY_ATTRIBUTE: uuid},
            UpdateExpression='SET #count = #count - :decr',
            ConditionExpression='#count > :min',
            ExpressionAttributeNames={'#count': self.COUNTER_ATTRIBUTE},
            ExpressionAttributeValues={':decr': 1, ':min': 0},
        )
