"""
Batch chunking for DynamoDB batch operations.

DynamoDB rejects BatchWriteItem requests with more than 25 items and
BatchGetItem requests with more than 100 keys. Larger lists are split into
chunks that are sent concurrently; the overall call succeeds only when every
chunk does.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Sequence, TypeVar

T = TypeVar('T')
R = TypeVar('R')

BATCH_WRITE_MAX = 25
BATCH_GET_MAX = 100

# Upper bound on simultaneous batch requests from a single invocation
MAX_PARALLEL_BATCHES = 8


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError('chunk size must be positive')
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def run_batches(operation: Callable[[List[T]], R], chunks: List[List[T]]) -> List[R]:
    """
    Run ``operation`` once per chunk, concurrently, and join all of them.

    Results are returned in chunk order. Every chunk is awaited before the first
    failure (in chunk order) is re-raised.
    """
    if not chunks:
        return []
    if len(chunks) == 1:
        return [operation(chunks[0])]

    with ThreadPoolExecutor(max_workers=min(len(chunks), MAX_PARALLEL_BATCHES)) as executor:
        futures = [executor.submit(operation, chunk) for chunk in chunks]

    return [future.result() for future in futures]
