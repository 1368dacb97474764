"""
Open House Attendees Handler - Lambda function counting attendees of an open house.
"""

from functools import lru_cache
from typing import Any, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from openhouse.dal import get_counter_handler
from openhouse.handlers.models.env_vars import AttendeesEnvVars, get_handler_env_vars
from openhouse.handlers.utils.dispatcher import AttendeeDispatcher
from openhouse.handlers.utils.observability import logger, metrics, tracer
from openhouse.logic import AttendeeService


@lru_cache(maxsize=1)
def get_dispatcher() -> AttendeeDispatcher:
    """Build the dispatcher from environment configuration, once per container."""
    env = get_handler_env_vars(AttendeesEnvVars)
    counters = get_counter_handler(env.TABLE_NAME, region_name=env.AWS_REGION, endpoint_url=env.ENDPOINT_OVERRIDE)
    return AttendeeDispatcher(AttendeeService(counters, 'Open house'), cors_origin=env.CORS_ALLOW_ORIGIN)


@tracer.capture_lambda_handler
@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """Main Lambda handler function."""
    tracer.put_annotation("entity", "open_house_attendees")
    return get_dispatcher().handle(event)
