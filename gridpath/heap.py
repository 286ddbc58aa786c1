"""
Binary min-heap with an element-to-index map, so the priority of any queued
element can be decreased or increased in O(log n).
"""

from __future__ import annotations
from typing import Callable, Dict, Generic, List, TypeVar

T = TypeVar("T")


class BinaryHeap(Generic[T]):
    """
    Priority queue ordered by ascending score.

    The scoring function is evaluated on push and on update only; mutate an
    element in place and call update() to change its priority.
    Elements are tracked by object identity, so they need not be hashable and
    equal but distinct objects are queued independently. Pushing the very
    same object twice queues two copies; update() then re-scores one of them.

    Usage:
        heap = BinaryHeap(lambda node: node.f_score)
        heap.push(node)
        node.g_score = 3
        heap.update(node)
        best = heap.pop()
    """

    def __init__(self, score: Callable[[T], float]) -> None:
        self.score = score
        self._elements: List[T] = []
        # score recorded for each slot of _elements on push or last update
        self._scores: List[float] = []
        # id(element) -> current position in _elements
        self._indices: Dict[int, int] = {}
        # id(element) -> number of queued copies
        self._counts: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._elements)

    def __bool__(self) -> bool:
        return bool(self._elements)

    def __contains__(self, element: T) -> bool:
        return id(element) in self._counts

    def has(self, element: T) -> bool:
        """Return True if element (this very object) is currently queued."""
        return id(element) in self._counts

    def push(self, element: T) -> None:
        key = id(element)
        self._elements.append(element)
        self._scores.append(self.score(element))
        self._counts[key] = self._counts.get(key, 0) + 1
        self._bubble_up(len(self._elements) - 1)

    def peek(self) -> T:
        """Return the element with the smallest score without removing it."""
        if not self._elements:
            raise IndexError("peek from empty heap")
        return self._elements[0]

    def pop(self) -> T:
        """Remove and return the element with the smallest score."""
        if not self._elements:
            raise IndexError("pop from empty heap")
        result = self._elements[0]
        end = self._elements.pop()
        end_score = self._scores.pop()
        key = id(result)
        remaining = self._counts[key] - 1
        if remaining:
            self._counts[key] = remaining
        else:
            del self._counts[key]
            del self._indices[key]
        if self._elements:
            self._elements[0] = end
            self._scores[0] = end_score
            self._indices[id(end)] = 0
            self._sink_down(0)
        return result

    def update(self, element: T) -> None:
        """
        Re-score a queued element and restore heap order.
        Does nothing if the element is not queued or its score is unchanged.
        """
        if id(element) not in self._counts:
            return
        index = self._index_of(element)
        old_score = self._scores[index]
        new_score = self.score(element)
        if old_score == new_score:
            return
        self._scores[index] = new_score
        if old_score < new_score:
            self._sink_down(index)
        else:
            self._bubble_up(index)

    def _index_of(self, element: T) -> int:
        index = self._indices[id(element)]
        if self._elements[index] is not element:
            # stale after popping another copy of the same object
            index = next(
                i for i, queued in enumerate(self._elements) if queued is element
            )
            self._indices[id(element)] = index
        return index

    def _bubble_up(self, index: int) -> None:
        elements = self._elements
        scores = self._scores
        element = elements[index]
        score = scores[index]
        while index > 0:
            parent_index = ((index + 1) >> 1) - 1
            if score >= scores[parent_index]:
                break
            parent = elements[parent_index]
            elements[index] = parent
            scores[index] = scores[parent_index]
            self._indices[id(parent)] = index
            index = parent_index
        elements[index] = element
        scores[index] = score
        self._indices[id(element)] = index

    def _sink_down(self, index: int) -> None:
        elements = self._elements
        scores = self._scores
        length = len(elements)
        element = elements[index]
        score = scores[index]
        while True:
            right_index = (index + 1) << 1
            left_index = right_index - 1
            swap_index = -1
            swap_score = score
            if left_index < length and scores[left_index] < swap_score:
                swap_index = left_index
                swap_score = scores[left_index]
            # right child wins only when strictly smaller than the left one
            if right_index < length and scores[right_index] < swap_score:
                swap_index = right_index
            if swap_index == -1:
                break
            child = elements[swap_index]
            elements[index] = child
            scores[index] = scores[swap_index]
            self._indices[id(child)] = index
            index = swap_index
        elements[index] = element
        scores[index] = score
        self._indices[id(element)] = index
