"""
FIFO queue with amortized O(1) dequeue for breadth-first search
"""
from typing import Generic, List, TypeVar

T = TypeVar("T")


class TopicQueue(Generic[T]):
    """List plus head cursor.

    Dequeue advances the cursor instead of shifting the list; consumed slots
    are dropped once they exceed ``compact_ratio`` of the buffer.
    """

    def __init__(self, compact_ratio: float = 0.5):
        if not 0 < compact_ratio <= 1:
            raise ValueError(f"compact_ratio must be in (0, 1], got {compact_ratio}")
        self.compact_ratio = compact_ratio
        self._items: List[T] = []
        self._head = 0
        self.max_size = 0

    def enqueue(self, item: T) -> None:
        self._items.append(item)
        self.max_size = max(self.max_size, len(self))

    def dequeue(self) -> T:
        """Remove and return the front item."""
        if self.is_empty():
            raise IndexError("dequeue from an empty queue")

        item = self._items[self._head]
        self._head += 1

        if self._head > len(self._items) * self.compact_ratio:
            del self._items[:self._head]
            self._head = 0

        return item

    def peek(self) -> T:
        if self.is_empty():
            raise IndexError("peek at an empty queue")
        return self._items[self._head]

    def is_empty(self) -> bool:
        return self._head >= len(self._items)

    @property
    def buffer_size(self) -> int:
        """Slots currently held, consumed ones included."""
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items) - self._head
