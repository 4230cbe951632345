"""
Domain: Bounded undo history.

Invariants:
- Holds sale ids in push order (= record order).
- len(stack) <= capacity (50 by default).
- Pushing past capacity evicts the oldest id. Eviction only removes undo
  eligibility; the sale itself stays in the log.
- Pop is LIFO.

Pure in-memory structure; persistence is handled by the repositories layer.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, List, Optional

UNDO_CAPACITY: int = 50


class UndoStack:
    """Capacity-bounded LIFO of sale ids."""

    __slots__ = ("_ids", "capacity")

    def __init__(self, ids: Iterable[str] = (), capacity: int = UNDO_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        # deque(maxlen=...) drops from the left (oldest) when full
        self._ids: Deque[str] = deque(ids, maxlen=capacity)

    def push(self, sale_id: str) -> Optional[str]:
        """
        Push a sale id.

        Returns the evicted (oldest) id when the stack was already full.
        """

        evicted = self._ids[0] if len(self._ids) == self.capacity else None
        self._ids.append(sale_id)
        return evicted

    def pop(self) -> Optional[str]:
        """Pop the most recent id, or None if empty."""

        if not self._ids:
            return None
        return self._ids.pop()

    def peek(self) -> Optional[str]:
        return self._ids[-1] if self._ids else None

    def clear(self) -> None:
        self._ids.clear()

    def to_list(self) -> List[str]:
        """Ids oldest-first, the persisted order."""

        return list(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __contains__(self, sale_id: object) -> bool:
        return sale_id in self._ids

    def __repr__(self) -> str:
        return f"UndoStack(depth={len(self._ids)}, capacity={self.capacity})"
