"""
Environment variable models for type-safe configuration.

Each Lambda function is deployed with only the table names it touches, so every
handler declares its own model on top of the shared settings.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field

TableName = Annotated[str, Field(min_length=1, description='DynamoDB table name')]


class HandlerEnvVars(BaseModel):
    """Settings shared by every open house handler."""

    AWS_REGION: Annotated[str, Field(
        default='us-east-2',
        description='AWS region for the DynamoDB client'
    )] = 'us-east-2'

    # Points the client at DynamoDB Local when running the functions offline
    ENDPOINT_OVERRIDE: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB endpoint URL override for local testing'
    )] = None

    CORS_ALLOW_ORIGIN: Annotated[str, Field(
        default='*',
        description='Value of the Access-Control-Allow-Origin response header'
    )] = '*'

    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='openhouse-api',
        description='Service name for AWS Powertools'
    )] = 'openhouse-api'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'


class AreasEnvVars(HandlerEnvVars):
    AREAS_TABLE: TableName
    EVENTS_TABLE: TableName
    EVENT_ATTENDEES_TABLE: TableName


class BuildingsEnvVars(HandlerEnvVars):
    BUILDINGS_TABLE: TableName
    EVENTS_TABLE: TableName
    EVENT_ATTENDEES_TABLE: TableName
    EATERIES_TABLE: TableName


class EateriesEnvVars(HandlerEnvVars):
    EATERIES_TABLE: TableName
    BUILDINGS_TABLE: TableName


class EventsEnvVars(HandlerEnvVars):
    EVENTS_TABLE: TableName
    EVENT_ATTENDEES_TABLE: TableName
    AREAS_TABLE: TableName
    BUILDINGS_TABLE: TableName
    OPEN_HOUSES_TABLE: TableName


class OpenHousesEnvVars(HandlerEnvVars):
    OPEN_HOUSES_TABLE: TableName
    OPEN_HOUSE_ATTENDEES_TABLE: TableName
    EVENTS_TABLE: TableName
    EVENT_ATTENDEES_TABLE: TableName


class AttendeesEnvVars(HandlerEnvVars):
    """Attendee counter functions are deployed once per counter table."""

    TABLE_NAME: TableName


def get_handler_env_vars(model: type[HandlerEnvVars]) -> HandlerEnvVars:
    """
    Get typed environment variables for a Lambda handler.

    Args:
        model: Environment model declaring the variables the handler needs

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=model)
