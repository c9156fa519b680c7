"""Low-level building blocks: clocks and concurrent accumulators."""

from .adder import DoubleAdder
from .time_provider import (
    DEFAULT_TIME_PROVIDER,
    NANOSECONDS_PER_SECOND,
    ManualTimeProvider,
    MonotonicTimeProvider,
    SimulationTimeProvider,
    TimeProvider,
)

__all__ = [
    "DoubleAdder",
    "TimeProvider",
    "MonotonicTimeProvider",
    "ManualTimeProvider",
    "SimulationTimeProvider",
    "DEFAULT_TIME_PROVIDER",
    "NANOSECONDS_PER_SECOND",
]
