"""
Foreign-key style existence checks across tables.

DynamoDB does not enforce relationships, so writes that reference other records
check each reference with a point read first.
"""

from typing import Iterable, Tuple

from openhouse.dal import TableStore
from openhouse.handlers.utils.errors import InvalidReferenceError
from openhouse.handlers.utils.observability import logger, tracer

# (label used in messages, table holding the referenced record, referenced uuid)
Reference = Tuple[str, TableStore, str]


@tracer.capture_method
def verify_references(references: Iterable[Reference], suffix: str = '') -> None:
    """
    Check references in order and stop at the first one that is missing.

    Raises:
        InvalidReferenceError: Naming the first reference whose record does not exist
    """
    for label, store, uuid in references:
        if not store.item_exists(uuid):
            logger.info('Referenced record does not exist', extra={
                'reference': label,
                'uuid': uuid,
                'table_name': store.table_name,
            })
            raise InvalidReferenceError(label, suffix)
