"""Clock abstractions used to measure durations."""

import logging
import time

import simpy

logger = logging.getLogger(__name__)

NANOSECONDS_PER_SECOND = 1e9


class TimeProvider:
    """Source of nanosecond timestamps for timers.

    Only differences between two readings are meaningful.
    """

    def nano_time(self) -> int:
        raise NotImplementedError


class MonotonicTimeProvider(TimeProvider):
    """Reads the process's high-resolution monotonic clock."""

    def nano_time(self) -> int:
        return time.perf_counter_ns()


class ManualTimeProvider(TimeProvider):
    """A clock that only moves when told to.

    Useful in tests and replays where durations must be deterministic.
    """

    def __init__(self, start_ns: int = 0) -> None:
        self._now_ns = start_ns

    def nano_time(self) -> int:
        return self._now_ns

    def set(self, now_ns: int) -> None:
        self._now_ns = now_ns

    def advance(self, seconds: float) -> None:
        self._now_ns += int(round(seconds * NANOSECONDS_PER_SECOND))


class SimulationTimeProvider(TimeProvider):
    """Reads simulated time from a SimPy environment.

    SimPy keeps time as (fractional) seconds, so ``env.now`` is scaled to
    nanoseconds to match the other providers.
    """

    def __init__(self, simpy_env: simpy.Environment) -> None:
        self.simpy_env = simpy_env
        logger.debug(f"SimulationTimeProvider bound to environment at t={simpy_env.now}")

    def nano_time(self) -> int:
        return int(round(self.simpy_env.now * NANOSECONDS_PER_SECOND))


DEFAULT_TIME_PROVIDER = MonotonicTimeProvider()
