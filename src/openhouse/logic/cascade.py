"""
Cascade deletes of records that reference a deleted parent.
"""

from typing import Optional

from aws_lambda_powertools.metrics import MetricUnit

from openhouse.dal import TableStore
from openhouse.handlers.utils.observability import logger, metrics, tracer


@tracer.capture_method
def cascade_delete(
    dependents: TableStore,
    attribute: str,
    parent_uuid: str,
    counters: Optional[TableStore] = None,
) -> int:
    """
    Delete every record in ``dependents`` whose ``attribute`` equals ``parent_uuid``.

    The dependent table is scanned in full and filtered in memory; matches are
    removed with chunked batch deletes. When the dependents own attendee counters,
    the counters for the deleted records are removed as well.

    Returns:
        Number of dependent records deleted
    """
    uuids = [item['uuid'] for item in dependents.scan_items() if item.get(attribute) == parent_uuid]
    if not uuids:
        return 0

    dependents.batch_delete_items(uuids)
    if counters is not None:
        counters.batch_delete_items(uuids)

    logger.info('Cascade delete completed', extra={
        'table_name': dependents.table_name,
        'attribute': attribute,
        'parent_uuid': parent_uuid,
        'deleted_count': len(uuids),
    })
    metrics.add_metric(name='CascadeDeletedCount', unit=MetricUnit.Count, value=len(uuids))

    return len(uuids)
