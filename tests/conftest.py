"""
Pytest configuration and shared fixtures for the open house API.

This module provides the environment, moto-backed tables, services, dispatchers
and API Gateway event builders shared by unit and integration tests.
"""

import json
import os
from types import SimpleNamespace
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws

REGION = "us-east-2"

TABLE_NAMES = {
    "AREAS_TABLE": "OpenHouse-Areas",
    "BUILDINGS_TABLE": "OpenHouse-Buildings",
    "EATERIES_TABLE": "OpenHouse-Eateries",
    "EVENTS_TABLE": "OpenHouse-Events",
    "EVENT_ATTENDEES_TABLE": "OpenHouse-EventAttendees",
    "OPEN_HOUSES_TABLE": "OpenHouse-OpenHouses",
    "OPEN_HOUSE_ATTENDEES_TABLE": "OpenHouse-OpenHouseAttendees",
}


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_REGION": REGION,
        "AWS_DEFAULT_REGION": REGION,
        "AWS_ACCESS_KEY_ID": "test",
        "AWS_SECRET_ACCESS_KEY": "test",
        "POWERTOOLS_SERVICE_NAME": "test-openhouse-api",
        "POWERTOOLS_METRICS_NAMESPACE": "TestOpenHouse",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
        # The attendee functions are deployed once per counter table
        "TABLE_NAME": TABLE_NAMES["EVENT_ATTENDEES_TABLE"],
        **TABLE_NAMES,
    })
    os.environ.pop("ENDPOINT_OVERRIDE", None)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached dispatchers and buffered metrics between tests."""
    from openhouse.handlers import (
        areas_handler,
        buildings_handler,
        eateries_handler,
        event_attendees_handler,
        events_handler,
        openhouse_attendees_handler,
        openhouses_handler,
    )
    from openhouse.handlers.utils.observability import metrics

    handler_modules = [
        areas_handler,
        buildings_handler,
        eateries_handler,
        event_attendees_handler,
        events_handler,
        openhouse_attendees_handler,
        openhouses_handler,
    ]
    for module in handler_modules:
        module.get_dispatcher.cache_clear()
    metrics.clear_metrics()
    yield
    for module in handler_modules:
        module.get_dispatcher.cache_clear()
    metrics.clear_metrics()


# DynamoDB fixtures
@pytest.fixture
def dynamodb():
    """Create every open house table in a mocked DynamoDB."""
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name=REGION)

        for table_name in TABLE_NAMES.values():
            table = resource.create_table(
                TableName=table_name,
                KeySchema=[{"AttributeName": "uuid", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "uuid", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
            table.wait_until_exists()

        yield resource


@pytest.fixture
def tables(dynamodb):
    """Table stores over the mocked tables."""
    from openhouse.dal import get_counter_handler, get_dal_handler

    return SimpleNamespace(
        areas=get_dal_handler(TABLE_NAMES["AREAS_TABLE"], dynamodb=dynamodb),
        buildings=get_dal_handler(TABLE_NAMES["BUILDINGS_TABLE"], dynamodb=dynamodb),
        eateries=get_dal_handler(TABLE_NAMES["EATERIES_TABLE"], dynamodb=dynamodb),
        events=get_dal_handler(TABLE_NAMES["EVENTS_TABLE"], dynamodb=dynamodb),
        event_attendees=get_counter_handler(TABLE_NAMES["EVENT_ATTENDEES_TABLE"], dynamodb=dynamodb),
        open_houses=get_dal_handler(TABLE_NAMES["OPEN_HOUSES_TABLE"], dynamodb=dynamodb),
        open_house_attendees=get_counter_handler(TABLE_NAMES["OPEN_HOUSE_ATTENDEES_TABLE"], dynamodb=dynamodb),
    )


@pytest.fixture
def api(tables):
    """One dispatcher per resource, wired to the mocked tables."""
    from openhouse.handlers.utils.dispatcher import AttendeeDispatcher, CrudDispatcher
    from openhouse.logic import (
        AreaService,
        AttendeeService,
        BuildingService,
        EateryService,
        EventService,
        OpenHouseService,
    )

    return SimpleNamespace(
        areas=CrudDispatcher(AreaService(tables.areas, tables.events, tables.event_attendees)),
        buildings=CrudDispatcher(
            BuildingService(tables.buildings, tables.events, tables.event_attendees, tables.eateries)
        ),
        eateries=CrudDispatcher(EateryService(tables.eateries, tables.buildings)),
        events=CrudDispatcher(EventService(
            tables.events,
            tables.event_attendees,
            open_houses=tables.open_houses,
            areas=tables.areas,
            buildings=tables.buildings,
        )),
        open_houses=CrudDispatcher(
            OpenHouseService(tables.open_houses, tables.open_house_attendees, tables.events, tables.event_attendees)
        ),
        event_attendees=AttendeeDispatcher(AttendeeService(tables.event_attendees, "Event")),
        open_house_attendees=AttendeeDispatcher(AttendeeService(tables.open_house_attendees, "Open house")),
    )


# API Gateway event fixtures
@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Build API Gateway proxy events; non-string bodies are JSON encoded."""

    def _make_event(http_method: str, body: Any = None, uuid: Optional[str] = None) -> Dict[str, Any]:
        return {
            "httpMethod": http_method,
            "path": f"/{uuid}" if uuid else "/",
            "headers": {"Content-Type": "application/json"},
            "body": body if body is None or isinstance(body, str) else json.dumps(body),
            "pathParameters": {"uuid": uuid} if uuid else None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "stage": "test",
                "httpMethod": http_method,
            },
            "isBase64Encoded": False,
        }

    return _make_event


@pytest.fixture
def call(make_event) -> Callable[..., SimpleNamespace]:
    """Dispatch an event and decode the response body."""

    def _call(dispatcher, http_method: str, body: Any = None, uuid: Optional[str] = None) -> SimpleNamespace:
        response = dispatcher.handle(make_event(http_method, body, uuid))
        return SimpleNamespace(
            status_code=response["statusCode"],
            headers=response["headers"],
            body=json.loads(response["body"]) if "body" in response else None,
            raw=response,
        )

    return _call


# Sample data fixtures
@pytest.fixture
def sample_area() -> Dict[str, Any]:
    return {"name": "Faculty of Engineering", "color": "#1e90ff"}


@pytest.fixture
def sample_building() -> Dict[str, Any]:
    return {"name": "Engineering Hall", "position": {"lat": 43.0096, "lng": -81.2737}}


@pytest.fixture
def sample_open_house() -> Dict[str, Any]:
    return {"name": "Fall Preview Day", "date": 1572580800000, "info": "Campus tours all day", "visible": True}


@pytest.fixture
def seeded(api, call, sample_area, sample_building, sample_open_house) -> SimpleNamespace:
    """An open house, an area and a building that events and eateries can reference."""
    return SimpleNamespace(
        open_house=call(api.open_houses, "POST", sample_open_house).body["uuid"],
        area=call(api.areas, "POST", sample_area).body["uuid"],
        building=call(api.buildings, "POST", sample_building).body["uuid"],
    )


@pytest.fixture
def event_payload(seeded) -> Callable[..., Dict[str, Any]]:
    """Build a valid event payload referencing the seeded records."""

    def _event_payload(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "name": "Robotics Demo",
            "description": "Watch the rovers race",
            "area": seeded.area,
            "building": seeded.building,
            "room": "ENG 101",
            "openHouse": seeded.open_house,
            "startTime": "10:00",
            "endTime": "11:30",
        }
        payload.update(overrides)
        return payload

    return _event_payload


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-2:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = 512
    context.get_remaining_time_in_millis = lambda: 30000
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    return context


# Error simulation fixtures
@pytest.fixture
def client_error():
    """Build botocore ClientErrors for error handling tests."""
    from botocore.exceptions import ClientError

    def create_error(error_code: str, message: str = "Test error"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name="TestOperation"
        )

    return create_error


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.unit)
        elif f"{os.sep}integration{os.sep}" in path:
            item.add_marker(pytest.mark.integration)
