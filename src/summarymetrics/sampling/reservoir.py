"""Bounded uniform sampling of an unbounded stream of observations."""

import logging
import threading
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 1028


class UniformSampling:
    """Fixed-capacity reservoir filled with Vitter's Algorithm R.

    The first ``capacity`` values are stored as they arrive. After that the
    k-th value replaces a random slot with probability ``capacity / k``, so
    every value seen so far is equally likely to be in the sample.

    A single lock, owned by the reservoir, guards slot assignment and the
    random generator. Nothing else in a summary shares it.
    """

    def __init__(self, capacity: int = DEFAULT_SIZE, seed: Optional[int] = None):
        """Initialize an empty reservoir.

        Args:
            capacity: Maximum number of values kept. Zero keeps nothing.
            seed: Optional seed for the replacement generator
        """
        if capacity < 0:
            raise ValueError(f"Reservoir capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._values = np.empty(capacity, dtype=np.float64)
        self._count = 0
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    def add(self, value: float) -> None:
        with self._lock:
            self._count += 1
            if self._count <= self.capacity:
                self._values[self._count - 1] = value
                return
            slot = int(self._rng.integers(0, self._count))
            if slot < self.capacity:
                self._values[slot] = value

    def values(self) -> np.ndarray:
        """Return an unsorted copy of the sampled values."""
        with self._lock:
            return self._values[: min(self._count, self.capacity)].copy()

    @property
    def count(self) -> int:
        """Number of values offered to the reservoir so far."""
        return self._count

    def size(self) -> int:
        return min(self._count, self.capacity)

    def __len__(self) -> int:
        return self.size()
