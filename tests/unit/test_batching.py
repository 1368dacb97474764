"""
Unit tests for batch chunking and concurrent chunk execution.
"""

import threading

import pytest

from openhouse.dal.batching import BATCH_GET_MAX, BATCH_WRITE_MAX, chunked, run_batches


class TestChunked:
    """Test cases for chunked."""

    def test_limits(self):
        """Test the DynamoDB batch limits."""
        assert BATCH_WRITE_MAX == 25
        assert BATCH_GET_MAX == 100

    def test_splits_into_bounded_chunks(self):
        """Test 60 items become chunks of 25, 25 and 10."""
        chunks = chunked(list(range(60)), 25)

        assert [len(chunk) for chunk in chunks] == [25, 25, 10]
        assert [item for chunk in chunks for item in chunk] == list(range(60))

    def test_exact_multiple(self):
        """Test no empty trailing chunk is produced."""
        assert [len(chunk) for chunk in chunked(list(range(50)), 25)] == [25, 25]

    def test_empty(self):
        """Test an empty list yields no chunks."""
        assert chunked([], 25) == []

    def test_invalid_size(self):
        """Test chunk size must be positive."""
        with pytest.raises(ValueError):
            chunked([1, 2], 0)


class TestRunBatches:
    """Test cases for run_batches."""

    def test_no_chunks(self):
        """Test nothing runs when there are no chunks."""
        assert run_batches(lambda chunk: pytest.fail("should not run"), []) == []

    def test_single_chunk_runs_inline(self):
        """Test a single chunk runs on the calling thread."""
        caller = threading.get_ident()
        threads = []

        def operation(chunk):
            threads.append(threading.get_ident())
            return sum(chunk)

        assert run_batches(operation, [[1, 2, 3]]) == [6]
        assert threads == [caller]

    def test_results_in_chunk_order(self):
        """Test results keep chunk order whatever the completion order."""
        results = run_batches(lambda chunk: chunk[0], chunked(list(range(100)), 10))

        assert results == list(range(0, 100, 10))

    def test_every_chunk_runs_and_first_failure_raised(self):
        """Test a failing chunk fails the call after every chunk has run."""
        seen = []
        lock = threading.Lock()

        def operation(chunk):
            with lock:
                seen.append(chunk[0])
            if chunk[0] in (25, 75):
                raise RuntimeError(f"chunk {chunk[0]} failed")
            return chunk[0]

        with pytest.raises(RuntimeError, match="chunk 25 failed"):
            run_batches(operation, chunked(list(range(100)), 25))

        assert sorted(seen) == [0, 25, 50, 75]
