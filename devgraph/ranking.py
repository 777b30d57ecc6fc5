"""
Ranked sequence — the drainable priority structure shared by the feed and
the recommendation engine.

Items come out highest priority first; equal priorities come out in the order
they were pushed. An optional capacity keeps only the best `capacity` items.

Entries are held in a min-heap with the worst entry at the root, so a full
sequence admits or rejects a push in O(log n). Popping sorts the held entries
once; a list sorted ascending is still a valid heap, so later pops are O(1)
until the next push.
"""
import heapq
import itertools
import logging
from typing import Generic, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RankedSequence(Generic[T]):
    def __init__(self, capacity: Optional[int] = None) -> None:
        if capacity is not None and capacity < 1:
            raise ValueError("Capacity must be positive")
        self.capacity = capacity
        # (priority, -seq, item): a later push ranks below an earlier one at equal priority
        self._entries: list[tuple[float, int, T]] = []
        self._sorted = True
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[T]:
        """Drain the sequence in ranked order."""
        while self._entries:
            yield self.pop()

    def push(self, item: T, priority: float) -> bool:
        """Add `item`. Returns False if the sequence is full and `item` ranks below all held items."""
        entry = (priority, -next(self._seq), item)
        if self.capacity is None or len(self._entries) < self.capacity:
            heapq.heappush(self._entries, entry)
            self._sorted = False
            return True

        # The new entry has the highest seq, so a tie with the root loses
        if entry[:2] <= self._entries[0][:2]:
            logger.debug("Ranked sequence full (%d) — dropped item", self.capacity)
            return False
        heapq.heapreplace(self._entries, entry)
        self._sorted = False
        return True

    def _best(self) -> tuple[float, int, T]:
        if not self._sorted:
            self._entries.sort(key=lambda e: e[:2])
            self._sorted = True
        return self._entries[-1]

    def peek(self) -> T:
        if not self._entries:
            raise IndexError("peek from an empty ranked sequence")
        return self._best()[2]

    def pop_with_priority(self) -> tuple[T, float]:
        if not self._entries:
            raise IndexError("pop from an empty ranked sequence")
        self._best()
        priority, _, item = self._entries.pop()
        return item, priority

    def pop(self) -> T:
        item, _ = self.pop_with_priority()
        return item

    def drain(self, limit: Optional[int] = None) -> list[T]:
        """Pop up to `limit` items (all of them when None) in ranked order."""
        out: list[T] = []
        while self._entries and (limit is None or len(out) < limit):
            out.append(self.pop())
        return out
