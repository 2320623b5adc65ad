"""
Priority indexes over the vocabulary collection.

A PriorityIndex is an array-backed binary min-heap of VocabularyItem
references. Keys are never stored: they are recomputed from the item's
current card on every comparison, so an item whose card was replaced only
needs `reposition` to restore heap order.

Two keys are used by the store:
- due_key:     soonest due first
- recency_key: most recently reviewed first, never-reviewed items last
"""

from __future__ import annotations

import heapq
import math
from typing import Callable, Iterable

from core.fsrs import as_utc
from core.vocab.models import VocabularyItem


SortKey = Callable[[VocabularyItem], float]


def due_key(item: VocabularyItem) -> float:
    return as_utc(item.card.due).timestamp()


def recency_key(item: VocabularyItem) -> float:
    last_review = item.card.last_review
    if last_review is None:
        return math.inf
    return -as_utc(last_review).timestamp()


class PriorityIndex:
    """Binary min-heap with O(log n) insert, remove and reposition."""

    def __init__(self, key: SortKey, items: Iterable[VocabularyItem] = ()):
        self._key = key
        self._heap: list[VocabularyItem] = []
        self._positions: dict[VocabularyItem, int] = {}
        self.rebuild(items)

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, item: object) -> bool:
        return item in self._positions

    def rebuild(self, items: Iterable[VocabularyItem]) -> None:
        """Replace the whole heap with `items`."""
        self._heap = list(items)
        self._positions = {item: i for i, item in enumerate(self._heap)}
        if len(self._positions) != len(self._heap):
            raise ValueError("duplicate item in index rebuild")
        for i in reversed(range(len(self._heap) // 2)):
            self._sift_down(i)

    def insert(self, item: VocabularyItem) -> None:
        if item in self._positions:
            raise ValueError(f"item already indexed: {item.text}")
        self._heap.append(item)
        self._positions[item] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def remove(self, item: VocabularyItem) -> None:
        position = self._positions.pop(item, None)
        if position is None:
            raise ValueError(f"item not indexed: {item.text}")
        last = self._heap.pop()
        if position < len(self._heap):
            self._heap[position] = last
            self._positions[last] = position
            self._sift_up(self._sift_down(position))

    def reposition(self, item: VocabularyItem) -> None:
        """Restore heap order after the item's card changed."""
        self.remove(item)
        self.insert(item)

    def top(self, limit: int) -> list[VocabularyItem]:
        """
        Up to `limit` items in key order, without modifying the heap.

        Walks the heap best-first with a small frontier, so the cost is
        O(limit log limit) regardless of collection size.
        """
        if limit <= 0 or not self._heap:
            return []

        result: list[VocabularyItem] = []
        frontier = [(self._key(self._heap[0]), 0)]
        size = len(self._heap)
        while frontier and len(result) < limit:
            _, position = heapq.heappop(frontier)
            result.append(self._heap[position])
            for child in (2 * position + 1, 2 * position + 2):
                if child < size:
                    heapq.heappush(frontier, (self._key(self._heap[child]), child))
        return result

    # ---- Heap maintenance ----

    def _less(self, i: int, j: int) -> bool:
        return self._key(self._heap[i]) < self._key(self._heap[j])

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._positions[heap[i]] = i
        self._positions[heap[j]] = j

    def _sift_up(self, position: int) -> int:
        while position > 0:
            parent = (position - 1) // 2
            if not self._less(position, parent):
                break
            self._swap(position, parent)
            position = parent
        return position

    def _sift_down(self, position: int) -> int:
        size = len(self._heap)
        while True:
            smallest = position
            for child in (2 * position + 1, 2 * position + 2):
                if child < size and self._less(child, smallest):
                    smallest = child
            if smallest == position:
                return position
            self._swap(position, smallest)
            position = smallest
