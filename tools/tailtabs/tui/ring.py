"""
Fixed-capacity history buffer.

Each tailed file keeps its recent lines in a RingBuffer. The buffer
never grows past its capacity: once full, every push evicts the oldest
entry. This bounds memory for long-running sessions the same way the
viewer's rolling deque did, but adds a restartable "last N" view the
renderer can iterate without copying the whole history.
"""

from collections import deque
from itertools import islice
from typing import Deque, Generic, Iterator, TypeVar

T = TypeVar("T")


class TailWindow(Generic[T]):
    """
    Lazy view over the newest entries of a RingBuffer.

    Iterating yields at most ``n`` items, oldest of the window first.
    The window can be iterated any number of times; each pass reflects
    the buffer's state at the moment iteration starts.

    Note:
        The underlying deque must not be mutated during a single pass.
        FileTailer guarantees this by iterating under its lock.
    """

    def __init__(self, items: Deque[T], n: int):
        self._items = items
        self._n = max(0, n)

    def __len__(self) -> int:
        return min(self._n, len(self._items))

    def __iter__(self) -> Iterator[T]:
        skip = len(self._items) - len(self)
        return islice(self._items, skip, None)


class RingBuffer(Generic[T]):
    """
    Ordered container that drops its oldest item when full.

    Attributes:
        capacity: Maximum number of items held. A capacity of 0 is
                  allowed and produces a buffer that keeps nothing.

    Example:
        >>> buf = RingBuffer(3)
        >>> for i in range(5):
        ...     buf.push(i)
        >>> list(buf)
        [2, 3, 4]
        >>> list(buf.iter_last(2))
        [3, 4]
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        # deque(maxlen=0) silently discards every append
        self._items: Deque[T] = deque(maxlen=capacity)

    def push(self, item: T) -> None:
        """Append an item, evicting the oldest one if the buffer is full."""
        self._items.append(item)

    def extend(self, items) -> None:
        self._items.extend(items)

    def clear(self) -> None:
        """Drop every item (used after a truncation)."""
        self._items.clear()

    def iter_last(self, n: int) -> TailWindow[T]:
        """Return a lazy, re-iterable view of the newest ``n`` items."""
        return TailWindow(self._items, n)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)
