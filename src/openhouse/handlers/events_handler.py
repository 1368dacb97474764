"""
Events Handler - Lambda function for the events API.

Events reference an open house, an area and a building, and own an attendee
counter that is created and deleted alongside them.
"""

from functools import lru_cache
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from openhouse.dal import get_counter_handler, get_dal_handler, get_dynamodb_resource
from openhouse.handlers.models.env_vars import EventsEnvVars, get_handler_env_vars
from openhouse.handlers.utils.dispatcher import CrudDispatcher
from openhouse.handlers.utils.observability import logger, metrics, tracer
from openhouse.logic import EventService


@lru_cache(maxsize=1)
def get_dispatcher() -> CrudDispatcher:
    """Build the dispatcher from environment configuration, once per container."""
    env = get_handler_env_vars(EventsEnvVars)
    dynamodb = get_dynamodb_resource(env.AWS_REGION, env.ENDPOINT_OVERRIDE)

    service = EventService(
        store=get_dal_handler(env.EVENTS_TABLE, dynamodb=dynamodb),
        counters=get_counter_handler(env.EVENT_ATTENDEES_TABLE, dynamodb=dynamodb),
        open_houses=get_dal_handler(env.OPEN_HOUSES_TABLE, dynamodb=dynamodb),
        areas=get_dal_handler(env.AREAS_TABLE, dynamodb=dynamodb),
        buildings=get_dal_handler(env.BUILDINGS_TABLE, dynamodb=dynamodb),
    )
    return CrudDispatcher(service, cors_origin=env.CORS_ALLOW_ORIGIN)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Main Lambda handler function."""
    tracer.put_annotation("entity", "event")
    return get_dispatcher().handle(event)
