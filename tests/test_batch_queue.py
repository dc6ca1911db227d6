"""
Batch Queue Tests
=================

Tests for the bounded telemetry batch queue.
"""

import asyncio
import threading

import pytest

from wifi_rrm.modeler.queue import BatchQueue, InputBatch, InputDataType, TelemetryRecord


def _batch(serial_number: str) -> InputBatch:
    return InputBatch(InputDataType.STATE, [TelemetryRecord(serial_number, {})])


class TestBatchQueue:
    """Tests for BatchQueue."""

    def test_invalid_maxsize(self):
        with pytest.raises(ValueError):
            BatchQueue(maxsize=0)

    def test_fifo_order(self):
        async def scenario():
            queue = BatchQueue(maxsize=10)
            queue.bind()
            for name in ("a", "b", "c"):
                queue.offer(_batch(name))
            return [(await queue.get()).records[0].serial_number for _ in range(3)]

        assert asyncio.run(scenario()) == ["a", "b", "c"]

    def test_overflow_drops_oldest(self):
        queue = BatchQueue(maxsize=2)
        for name in ("a", "b", "c"):
            queue.offer(_batch(name))

        assert queue.dropped_count == 1
        assert queue.size == 2
        assert queue.get_nowait().records[0].serial_number == "b"
        assert queue.get_nowait().records[0].serial_number == "c"
        assert queue.get_nowait() is None

    def test_offer_from_other_threads(self):
        async def scenario():
            queue = BatchQueue(maxsize=1000)
            queue.bind()

            def producer(prefix: str) -> None:
                for i in range(50):
                    queue.offer(_batch(f"{prefix}-{i}"))

            threads = [
                threading.Thread(target=producer, args=(f"p{n}",)) for n in range(4)
            ]
            for t in threads:
                t.start()
            received = [
                (await asyncio.wait_for(queue.get(), timeout=5)).records[0].serial_number
                for _ in range(200)
            ]
            for t in threads:
                t.join()
            return received

        received = asyncio.run(scenario())
        assert len(received) == 200
        # Per-producer order is preserved
        for n in range(4):
            own = [name for name in received if name.startswith(f"p{n}-")]
            assert own == [f"p{n}-{i}" for i in range(50)]

    def test_get_is_cancellable(self):
        async def scenario():
            queue = BatchQueue()
            queue.bind()
            task = asyncio.create_task(queue.get())
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())

    def test_metrics(self):
        queue = BatchQueue(maxsize=1)
        queue.offer(_batch("a"))
        queue.offer(_batch("b"))
        assert queue.metrics() == {
            "size": 1,
            "maxsize": 1,
            "dropped_count": 1,
            "total_put": 2,
        }

    def test_concurrent_offers_before_bind(self):
        queue = BatchQueue(maxsize=1)
        start = threading.Barrier(8)
        errors = []

        def producer(prefix: str) -> None:
            start.wait()
            for i in range(200):
                try:
                    queue.offer(_batch(f"{prefix}-{i}"))
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=producer, args=(f"p{n}",)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert queue.size == 1
        assert queue.total_put == 1600
        assert queue.dropped_count == 1599
