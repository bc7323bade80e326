"""
Fan-in change notifications.

Every tailed file has its own worker thread. When a worker reads new
lines it needs to tell the render loop "something changed", but the
render loop should not have to check N sources one by one. The
ChangeBus collapses all those signals into a single bounded queue with
one consumer.

Design Decisions:
    - Signals carry no data; lines live in each tailer's history, so a
      redraw always reads current state
    - Bounded queue with blocking sends: a flood of changes slows the
      workers down instead of growing memory
    - Blocking sends wake up periodically so close() can release a
      worker stuck behind a full queue at shutdown
"""

import threading
from queue import Empty, Full, Queue

# How often a blocked sender re-checks whether the bus was closed
_SEND_RETRY = 0.1

CHANGED = object()


class ChangeBus:
    """
    Bounded multi-producer / single-consumer "redraw needed" queue.

    Attributes:
        capacity: Maximum number of pending signals.

    Example:
        >>> bus = ChangeBus(capacity=10)
        >>> bus.notify()
        >>> bus.wait(timeout=0.1)
        True
        >>> bus.wait(timeout=0.01)
        False
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._queue: Queue = Queue(maxsize=capacity)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def notify(self) -> None:
        """
        Signal that some tailer changed.

        Blocks while the queue is full (backpressure). Returns without
        sending once the bus has been closed.
        """
        while not self._closed.is_set():
            try:
                self._queue.put(CHANGED, timeout=_SEND_RETRY)
                return
            except Full:
                continue

    def wait(self, timeout: float) -> bool:
        """
        Wait up to ``timeout`` seconds for one signal.

        Returns:
            bool: True if a signal was received, False on timeout.
        """
        try:
            self._queue.get(timeout=timeout)
        except Empty:
            return False
        return True

    def drain(self) -> int:
        """Discard all pending signals and return how many there were."""
        count = 0
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                return count
            count += 1

    def pending(self) -> int:
        return self._queue.qsize()

    def close(self) -> None:
        """Stop accepting signals and release any blocked sender."""
        self._closed.set()
        self.drain()
