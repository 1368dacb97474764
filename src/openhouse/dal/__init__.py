"""
Data Access Layer (DAL) for the open house API.

Handlers never talk to boto3 directly: they receive table stores through their
constructor. These protocols describe what a store must offer so tests can hand
in fakes or mocks in place of DynamoDB-backed tables.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import boto3


@runtime_checkable
class TableStore(Protocol):
    """Protocol for a table of records keyed by ``uuid``."""

    table_name: str

    def scan_items(self) -> List[Dict[str, Any]]:
        """Read every record in the table."""
        ...

    def get_item(self, uuid: str) -> Optional[Dict[str, Any]]:
        """Retrieve a record by its key."""
        ...

    def item_exists(self, uuid: str) -> bool:
        """Check whether a record exists."""
        ...

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Create or fully replace a record."""
        ...

    def delete_item(self, uuid: str) -> None:
        """Delete a record by its key."""
        ...

    def batch_put_items(self, items: List[Dict[str, Any]]) -> None:
        """Create or replace many records."""
        ...

    def batch_delete_items(self, uuids: List[str]) -> None:
        """Delete many records by key."""
        ...

    def batch_get_items(self, uuids: List[str]) -> List[Dict[str, Any]]:
        """Retrieve many records by key; missing keys are omitted."""
        ...


@runtime_checkable
class CounterStore(TableStore, Protocol):
    """Protocol for an attendee counter table."""

    def new_counter(self, uuid: str) -> Dict[str, Any]:
        """Build the initial counter record."""
        ...

    def increment(self, uuid: str) -> None:
        """Add one to the counter."""
        ...

    def decrement(self, uuid: str) -> None:
        """Subtract one from the counter, refusing to go below zero."""
        ...


def get_dynamodb_resource(region_name: Optional[str] = None, endpoint_url: Optional[str] = None) -> Any:
    """
    Create the boto3 DynamoDB service resource shared by all tables of a handler.

    Args:
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint URL, e.g. DynamoDB Local
    """
    session_config = {}
    if region_name:
        session_config['region_name'] = region_name
    if endpoint_url:
        session_config['endpoint_url'] = endpoint_url
    return boto3.resource('dynamodb', **session_config)


def get_dal_handler(table_name: str, region_name: Optional[str] = None,
                    endpoint_url: Optional[str] = None, dynamodb: Optional[Any] = None) -> TableStore:
    """
    Factory function to get the DynamoDB-backed store for a table.

    Args:
        table_name: Name of the DynamoDB table
        region_name: AWS region name
        endpoint_url: DynamoDB endpoint URL (for local testing)
        dynamodb: Shared boto3 DynamoDB service resource

    Returns:
        Table store instance
    """
    # Import here to avoid circular imports
    from openhouse.dal.dynamodb_handler import DynamoDBHandler

    return DynamoDBHandler(table_name, region_name=region_name, endpoint_url=endpoint_url, dynamodb=dynamodb)


def get_counter_handler(table_name: str, region_name: Optional[str] = None,
                        endpoint_url: Optional[str] = None, dynamodb: Optional[Any] = None) -> CounterStore:
    """Factory function to get the DynamoDB-backed store for an attendee counter table."""
    from openhouse.dal.dynamodb_handler import CounterTableHandler

    return CounterTableHandler(table_name, region_name=region_name, endpoint_url=endpoint_url, dynamodb=dynamodb)


__all__ = [
    'TableStore',
    'CounterStore',
    'get_dynamodb_resource',
    'get_dal_handler',
    'get_counter_handler',
]
