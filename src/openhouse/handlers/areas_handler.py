"""
Areas Handler - Lambda function for the areas API.

Deleting an area also deletes every event held in it.
"""

from functools import lru_cache
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from openhouse.dal import get_counter_handler, get_dal_handler, get_dynamodb_resource
from openhouse.handlers.models.env_vars import AreasEnvVars, get_handler_env_vars
from openhouse.handlers.utils.dispatcher import CrudDispatcher
from openhouse.handlers.utils.observability import logger, metrics, tracer
from openhouse.logic import AreaService


@lru_cache(maxsize=1)
def get_dispatcher() -> CrudDispatcher:
    """Build the dispatcher from environment configuration, once per container."""
    env = get_handler_env_vars(AreasEnvVars)
    dynamodb = get_dynamodb_resource(env.AWS_REGION, env.ENDPOINT_OVERRIDE)

    service = AreaService(
        store=get_dal_handler(env.AREAS_TABLE, dynamodb=dynamodb),
        events=get_dal_handler(env.EVENTS_TABLE, dynamodb=dynamodb),
        event_attendees=get_counter_handler(env.EVENT_ATTENDEES_TABLE, dynamodb=dynamodb),
    )
    return CrudDispatcher(service, cors_origin=env.CORS_ALLOW_ORIGIN)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway response
    """
    tracer.put_annotation("entity", "area")
    return get_dispatcher().handle(event)
