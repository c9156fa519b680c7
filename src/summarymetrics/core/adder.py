"""Striped floating point accumulator."""

import itertools
import threading
from typing import List

DEFAULT_STRIPES = 16


class _Cell:
    __slots__ = ("value", "lock")

    def __init__(self) -> None:
        self.value = 0.0
        self.lock = threading.Lock()


class DoubleAdder:
    """A sum that many threads can add to without contending on one lock.

    The total is spread over a fixed number of cells. Each thread is assigned
    a cell round-robin on its first ``add`` and only takes that cell's lock, so
    concurrent ``add`` calls never lose increments and memory stays bounded no
    matter how many threads come and go. ``sum()`` folds all cells; it is not
    an atomic snapshot and may miss additions that are in flight while it runs.
    """

    def __init__(self, stripes: int = DEFAULT_STRIPES) -> None:
        if stripes < 1:
            raise ValueError(f"DoubleAdder needs at least one stripe, got {stripes}")
        self._cells: List[_Cell] = [_Cell() for _ in range(stripes)]
        self._next_index = itertools.count()
        self._local = threading.local()

    @property
    def stripes(self) -> int:
        return len(self._cells)

    def _cell(self) -> _Cell:
        index = getattr(self._local, "index", None)
        if index is None:
            index = next(self._next_index) % len(self._cells)
            self._local.index = index
        return self._cells[index]

    def add(self, amount: float) -> None:
        cell = self._cell()
        with cell.lock:
            cell.value += amount

    def sum(self) -> float:
        total = 0.0
        for cell in self._cells:
            total += cell.value
        return total

    def __float__(self) -> float:
        return self.sum()

    def __repr__(self) -> str:
        return f"DoubleAdder({self.sum()!r})"
