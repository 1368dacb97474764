"""
Attendee counter operations for events and open houses.
"""

from aws_lambda_powertools.metrics import MetricUnit

from openhouse.dal import CounterStore
from openhouse.dal.dynamodb_handler import ConditionalCheckFailedError
from openhouse.handlers.utils.errors import ResourceNotFoundError
from openhouse.handlers.utils.observability import logger, metrics, tracer


class AttendeeService:
    """Increments and decrements the attendee count of one parent record."""

    def __init__(self, counters: CounterStore, resource_type: str):
        """
        Args:
            counters: Counter table for the parent entity
            resource_type: Parent name used in not-found messages, e.g. ``Event``
        """
        self.counters = counters
        self.resource_type = resource_type

    def _require_counter(self, uuid: str) -> None:
        if not self.counters.item_exists(uuid):
            raise ResourceNotFoundError(self.resource_type, uuid)

    @tracer.capture_method
    def increment(self, uuid: str) -> None:
        """Add one attendee."""
        self._require_counter(uuid)
        self.counters.increment(uuid)

        metrics.add_metric(name='AttendeesIncremented', unit=MetricUnit.Count, value=1)
        logger.info('Attendee count incremented', extra={'uuid': uuid, 'resource_type': self.resource_type})

    @tracer.capture_method
    def decrement(self, uuid: str) -> None:
        """Remove one attendee; at zero the count stays at zero and nothing fails."""
        self._require_counter(uuid)

        try:
            self.counters.decrement(uuid)
        except ConditionalCheckFailedError:
            logger.info('Attempted to decrement attendee count below 0', extra={
                'uuid': uuid,
                'resource_type': self.resource_type,
            })
            return

        metrics.add_metric(name='AttendeesDecremented', unit=MetricUnit.Count, value=1)
        logger.info('Attendee count decremented', extra={'uuid': uuid, 'resource_type': self.resource_type})
