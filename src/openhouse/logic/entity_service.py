"""
Business Logic Layer for entity CRUD operations.

Every entity follows the same list / create / update / delete flow; the entity
services in ``openhouse.logic.entities`` only declare their schema, references,
cascades and storage quirks.
"""

from typing import Any, Dict, List, Optional, Type, Union
from uuid import uuid4

from aws_lambda_powertools.metrics import MetricUnit

from openhouse.dal import CounterStore, TableStore
from openhouse.handlers.utils.errors import ResourceNotFoundError
from openhouse.handlers.utils.observability import logger, metrics, tracer
from openhouse.logic.references import Reference, verify_references
from openhouse.logic.validation import batch_suffix, validate_entity
from openhouse.models.input import EntityRequest

Record = Dict[str, Any]


class EntityService:
    """Base service implementing the CRUD flow for one entity table."""

    model: Type[EntityRequest]
    # Lower-case name used in validation messages, e.g. "open house"
    label: str
    # Name used in not-found messages, e.g. "Open House"
    resource_type: str

    def __init__(self, store: TableStore, counters: Optional[CounterStore] = None):
        """
        Initialize the service.

        Args:
            store: Table holding the entity records
            counters: Attendee counter table for entities that own one
        """
        self.store = store
        self.counters = counters

    def references(self, record: Record) -> List[Reference]:
        """References that must exist before ``record`` can be written."""
        return []

    def cascade(self, uuid: str) -> None:
        """Delete records depending on the record being deleted."""

    def to_item(self, record: Record) -> Record:
        """Convert a validated record to its stored form."""
        return record

    def from_item(self, item: Record) -> Record:
        """Convert a stored item back to its API form."""
        return item

    @tracer.capture_method
    def list_records(self) -> List[Record]:
        """Return every record, with attendee counts merged in where the entity has counters."""
        records = [self.from_item(item) for item in self.store.scan_items()]

        if self.counters is not None and records:
            counts = {
                counter['uuid']: counter['attendees']
                for counter in self.counters.batch_get_items([record['uuid'] for record in records])
                if 'attendees' in counter
            }
            for record in records:
                if record['uuid'] in counts:
                    record['attendees'] = counts[record['uuid']]

        logger.info(f'Listed {len(records)} {self.label} records', extra={'count': len(records)})
        return records

    @tracer.capture_method
    def create_records(self, payload: Any) -> Union[Record, List[Record]]:
        """
        Create one record, or one per element when ``payload`` is a list.

        Every element is validated and reference-checked before anything is
        written, so a bad element aborts the whole batch.

        Returns:
            The created record, or the created records in input order for a list payload
        """
        is_batch = isinstance(payload, list)
        candidates = payload if is_batch else [payload]

        validated = []
        for index, candidate in enumerate(candidates):
            record = validate_entity(self.model, candidate, self.label, index)
            verify_references(self.references(record), batch_suffix(self.label, index))
            validated.append(record)

        records = [{'uuid': str(uuid4()), **record} for record in validated]
        self.store.batch_put_items([self.to_item(record) for record in records])

        if self.counters is not None:
            self.counters.batch_put_items([self.counters.new_counter(record['uuid']) for record in records])
            records = [{**record, 'attendees': 0} for record in records]

        tracer.put_annotation(f'{self.label.replace(" ", "_")}_created_count', len(records))
        metrics.add_metric(name='RecordsCreated', unit=MetricUnit.Count, value=len(records))
        logger.info(f'Created {len(records)} {self.label} records', extra={
            'uuids': [record['uuid'] for record in records],
        })

        return records if is_batch else records[0]

    @tracer.capture_method
    def update_record(self, uuid: str, payload: Any) -> Record:
        """
        Replace an existing record in full.

        Raises:
            ResourceNotFoundError: If no record has this uuid; checked before anything else
            ValidationError: If the payload is not a complete valid record
            InvalidReferenceError: If the payload references a missing record
        """
        if self.store.get_item(uuid) is None:
            raise ResourceNotFoundError(self.resource_type, uuid)

        record = validate_entity(self.model, payload, self.label)
        verify_references(self.references(record))

        record = {'uuid': uuid, **record}
        self.store.put_item(self.to_item(record))

        tracer.put_annotation('uuid', uuid)
        logger.info(f'Updated {self.label}', extra={'uuid': uuid})
        return record

    @tracer.capture_method
    def delete_record(self, uuid: str) -> None:
        """
        Delete a record, its dependents and its attendee counter.

        Dependents go first; none of the deletes are transactional.

        Raises:
            ResourceNotFoundError: If no record has this uuid
        """
        if self.store.get_item(uuid) is None:
            raise ResourceNotFoundError(self.resource_type, uuid)

        self.cascade(uuid)
        self.store.delete_item(uuid)
        if self.counters is not None:
            self.counters.delete_item(uuid)

        tracer.put_annotation('uuid', uuid)
        metrics.add_metric(name='RecordsDeleted', unit=MetricUnit.Count, value=1)
        logger.info(f'Deleted {self.label}', extra={'uuid': uuid})
