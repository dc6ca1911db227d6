"""
Batch Queue
===========

Bounded FIFO queue of telemetry batches between the listeners and the
modeler worker.

Design Rules:
    - Fixed maximum size (drops oldest batch on overflow)
    - offer() never blocks and may be called from any thread
    - Exactly one consumer awaits get() on the bound event loop
    - Exposes minimal metrics for observability
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


class InputDataType(str, Enum):
    """Kind of telemetry carried by a batch."""

    STATE = "STATE"
    WIFISCAN = "WIFISCAN"


@dataclass(frozen=True, slots=True)
class TelemetryRecord:
    """
    One telemetry record from the streaming broker.

    Attributes:
        serial_number: Device identifier
        payload: Unparsed structured payload
    """

    serial_number: str
    payload: Dict[str, Any]


@dataclass(slots=True)
class InputBatch:
    """A list of records of a single kind, enqueued together."""

    type: InputDataType
    records: List[TelemetryRecord] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"InputBatch(type={self.type.value}, records={len(self.records)})"


class BatchQueue:
    """
    Bounded queue of InputBatch objects.

    The queue is bound to the consumer's event loop by bind(). After that,
    offers from other threads are handed to the loop with
    call_soon_threadsafe, so producers never touch the asyncio.Queue from
    a foreign thread.

    Attributes:
        maxsize: Maximum number of queued batches
        dropped_count: Number of batches dropped due to overflow

    Example:
        queue = BatchQueue(maxsize=1000)

        # Consumer (on the event loop)
        queue.bind()
        batch = await queue.get()

        # Producer (any thread)
        queue.offer(InputBatch(InputDataType.STATE, records))
    """

    def __init__(self, maxsize: int = 1000) -> None:
        """
        Initialize batch queue.

        Args:
            maxsize: Maximum batches to buffer. Must be >= 1.
        """
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")

        self._maxsize = maxsize
        self._queue: asyncio.Queue[InputBatch] = asyncio.Queue(maxsize=maxsize)
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._counter_lock = threading.Lock()
        # Serializes check-drop-put; offers run on producer threads until bind()
        self._put_lock = threading.Lock()
        self._dropped_count: int = 0
        self._total_put: int = 0

    @property
    def maxsize(self) -> int:
        """Maximum queue size."""
        return self._maxsize

    @property
    def size(self) -> int:
        """Current number of queued batches."""
        return self._queue.qsize()

    @property
    def dropped_count(self) -> int:
        """Number of batches dropped due to overflow."""
        return self._dropped_count

    @property
    def total_put(self) -> int:
        """Total batches ever offered."""
        return self._total_put

    def bind(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """
        Bind the queue to the consumer's event loop.

        Args:
            loop: Event loop to bind to. Defaults to the running loop.
        """
        self._loop = loop or asyncio.get_running_loop()

    def offer(self, batch: InputBatch) -> None:
        """
        Enqueue a batch without blocking.

        Safe to call from any thread. When called off the bound loop the
        batch is enqueued asynchronously, in call order per thread.
        """
        with self._counter_lock:
            self._total_put += 1

        loop = self._loop
        if loop is None or _running_loop() is loop:
            self._put_now(batch)
            return

        try:
            loop.call_soon_threadsafe(self._put_now, batch)
        except RuntimeError:
            # Loop already closed: the consumer is gone
            self._count_drop()
            logger.warning(f"Event loop closed, dropped {batch!r}")

    def _put_now(self, batch: InputBatch) -> None:
        with self._put_lock:
            if self._queue.full():
                try:
                    dropped = self._queue.get_nowait()
                    self._count_drop()
                    logger.warning(
                        f"Queue full, dropped oldest {dropped!r}. "
                        f"Total dropped: {self._dropped_count}"
                    )
                except asyncio.QueueEmpty:
                    pass

            try:
                self._queue.put_nowait(batch)
            except asyncio.QueueFull:
                self._count_drop()
                logger.error(f"Failed to enqueue {batch!r} after dropping - queue full")

    def _count_drop(self) -> None:
        with self._counter_lock:
            self._dropped_count += 1

    async def get(self) -> InputBatch:
        """
        Wait for the next batch (oldest first).

        This is the only blocking point of the consumer; it is cancellable.
        """
        return await self._queue.get()

    def get_nowait(self) -> Optional[InputBatch]:
        """Return the next batch if one is queued, else None."""
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    def metrics(self) -> dict:
        """
        Get queue metrics for observability.

        Returns:
            Dict with size, maxsize, dropped_count, total_put
        """
        return {
            "size": self.size,
            "maxsize": self._maxsize,
            "dropped_count": self._dropped_count,
            "total_put": self._total_put,
        }


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
