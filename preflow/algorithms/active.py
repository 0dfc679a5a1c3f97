"""Bucket queue of active vertices ordered by height.

The head is always a vertex with the greatest height among queued vertices;
vertices of equal height leave in insertion order.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Deque, Dict, Hashable, Set


class ActiveVertexQueue:
    """Highest-label work queue for push-relabel.

    Each vertex is held at most once. ``add`` places a vertex in the bucket
    for its height, ``head`` returns the front of the highest non-empty
    bucket, and ``move_head`` re-files the head after it was relabeled.
    """

    def __init__(self) -> None:
        self._buckets: Dict[int, Deque[Hashable]] = defaultdict(deque)
        self._heights: Dict[Hashable, int] = {}
        self._top = -1

    def __len__(self) -> int:
        return len(self._heights)

    def __bool__(self) -> bool:
        return bool(self._heights)

    def __contains__(self, node: Hashable) -> bool:
        return node in self._heights

    def add(self, node: Hashable, height: int) -> None:
        """Queue ``node`` at ``height``."""
        if node in self._heights:
            raise ValueError(f"Vertex '{node}' is already active.")
        self._buckets[height].append(node)
        self._heights[node] = height
        if height > self._top:
            self._top = height

    def head(self) -> Hashable:
        """Return the highest-labeled queued vertex without removing it."""
        if not self._heights:
            raise IndexError("head() on an empty ActiveVertexQueue")
        while not self._buckets[self._top]:
            self._top -= 1
        return self._buckets[self._top][0]

    def pop_head(self) -> Hashable:
        """Remove and return the head vertex."""
        node = self.head()
        self._buckets[self._top].popleft()
        del self._heights[node]
        return node

    def move_head(self, new_height: int) -> None:
        """Re-file the head vertex under ``new_height``."""
        self.add(self.pop_head(), new_height)

    def clear(self) -> None:
        self._buckets.clear()
        self._heights.clear()
        self._top = -1
