"""Summary metric: count, sum and sampled quantiles of observed events.

Typical uses are request latency and request size::

    request_latency = Summary("requests_latency_seconds", "Request latency in seconds.")
    received_bytes = Summary("requests_size_bytes", "Request size in bytes.")

    def process_request(req):
        timer = request_latency.start_timer()
        try:
            ...
        finally:
            received_bytes.observe(len(req))
            timer.observe_duration()

This tracks request rate, average latency and average request size, plus
approximate latency quantiles from a bounded uniform sample.
"""

import functools
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.adder import DoubleAdder
from ..core.time_provider import DEFAULT_TIME_PROVIDER, NANOSECONDS_PER_SECOND, TimeProvider
from ..sampling.reservoir import DEFAULT_SIZE, UniformSampling
from ..utils.config_validator import ConfigurationError, validate_quantiles
from .collector import REGISTRY, CollectorRegistry, SimpleCollector
from .models import MetricFamilySamples, MetricType, Sample

logger = logging.getLogger(__name__)

QUANTILE_LABEL = "quantile"
DEFAULT_QUANTILES = (0.5, 0.95, 0.98, 0.99, 0.999)


@dataclass(frozen=True, eq=False)
class SummaryValue:
    """Point-in-time view of a summary child.

    ``values`` is a sorted, read-only copy of the sample taken at read time.
    """

    count: float
    sum: float
    values: np.ndarray

    def get_quantile(self, phi: float) -> float:
        """Return the phi-quantile estimate of the observed events.

        The estimate interpolates linearly between the two sampled values
        whose rank brackets ``phi * (n + 1)``.

        Args:
            phi: Quantile to estimate, in [0, 1]

        Returns:
            The approximate phi-quantile, or 0.0 when nothing was sampled
        """
        if not 0 <= phi <= 1:
            raise ValueError("quantile value must be in interval [0, 1]")

        length = len(self.values)

        if length == 0:
            return 0.0

        if length == 1:
            return float(self.values[0])

        index = self._index(phi)

        if index < 1:
            return float(self.values[0])

        if index >= length:
            return float(self.values[length - 1])

        return self._approx_quantile(index)

    def _index(self, phi: float) -> float:
        """Real-valued, 1-based rank of the phi-quantile."""
        length = len(self.values)
        if phi == 0:
            return 0.0
        if phi == 1:
            return float(length)
        return phi * (length + 1)

    def _approx_quantile(self, index: float) -> float:
        int_idx = int(index)
        lower = float(self.values[int_idx - 1])
        upper = float(self.values[int_idx])
        return lower + (index - int_idx) * (upper - lower)


class Timer:
    """Represents an event being timed."""

    def __init__(self, child: "SummaryChild"):
        self.child = child
        self.start = child.time_provider.nano_time()

    def observe_duration(self) -> float:
        """Observe the time in seconds since ``start_timer`` was called.

        Returns:
            The measured duration in seconds
        """
        elapsed = (self.child.time_provider.nano_time() - self.start) / NANOSECONDS_PER_SECOND
        self.child.observe(elapsed)
        return elapsed


class _Timed:
    """Context manager and decorator that times a block or a function.

    One instance may be entered from several threads, or nested in one
    thread; each thread keeps its own stack of running timers.
    """

    def __init__(self, child: "SummaryChild"):
        self._child = child
        self._local = threading.local()

    def _timers(self) -> List[Timer]:
        timers = getattr(self._local, "timers", None)
        if timers is None:
            timers = self._local.timers = []
        return timers

    def __enter__(self) -> Timer:
        timer = self._child.start_timer()
        self._timers().append(timer)
        return timer

    def __exit__(self, exc_type, exc, tb) -> None:
        self._timers().pop().observe_duration()

    def __call__(self, func):
        @functools.wraps(func)
        def wrapped(*args, **kwargs):
            with _Timed(self._child):
                return func(*args, **kwargs)
        return wrapped


class SummaryChild:
    """The per-label-set state of a summary.

    Count, sum and sample are updated independently rather than under one
    lock, so a concurrent ``get()`` can see a count that includes an
    observation whose value has not reached the sum or the sample yet.

    References to a child are no longer collected after ``Summary.remove`` or
    ``Summary.clear``.
    """

    def __init__(
        self,
        reservoir_size: int = DEFAULT_SIZE,
        time_provider: TimeProvider = DEFAULT_TIME_PROVIDER,
    ):
        self._count = DoubleAdder()
        self._sum = DoubleAdder()
        self._sampling = UniformSampling(reservoir_size)
        self.time_provider = time_provider

    def observe(self, amount: float) -> None:
        """Observe the given amount."""
        self._count.add(1.0)
        self._sum.add(amount)
        self._sampling.add(amount)

    def start_timer(self) -> Timer:
        """Start a timer; call ``observe_duration`` on it when the event ends."""
        return Timer(self)

    def time(self) -> _Timed:
        """Time a ``with`` block or decorated function into this child."""
        return _Timed(self)

    def get(self) -> SummaryValue:
        """Return a snapshot of count, sum and the sorted sample."""
        values = np.sort(self._sampling.values())
        values.flags.writeable = False
        return SummaryValue(count=self._count.sum(), sum=self._sum.sum(), values=values)


class Summary(SimpleCollector[SummaryChild]):
    """Tracks the size and number of events, with sampled quantiles.

    Args:
        name: Metric name, without namespace or subsystem prefix
        documentation: Help text
        labelnames: Label dimensions; ``quantile`` is reserved
        namespace: Optional name prefix
        subsystem: Optional name prefix after the namespace
        unit: Optional unit suffix
        quantiles: Quantiles to report, each in [0, 1]; empty reports none
        reservoir_size: Capacity of each child's sample
        time_provider: Clock used by timers
        registry: Registry to register with, or None
    """

    Child = SummaryChild
    Value = SummaryValue
    _type_name = "Summary"
    _reserved_labelnames = (QUANTILE_LABEL,)

    def __init__(
        self,
        name: str,
        documentation: str,
        labelnames: Sequence[str] = (),
        namespace: str = "",
        subsystem: str = "",
        unit: str = "",
        quantiles: Optional[Sequence[float]] = DEFAULT_QUANTILES,
        reservoir_size: int = DEFAULT_SIZE,
        time_provider: Optional[TimeProvider] = None,
        registry: Optional[CollectorRegistry] = REGISTRY,
    ):
        self.quantiles: Tuple[float, ...] = validate_quantiles(quantiles)
        if reservoir_size < 0:
            raise ConfigurationError(f"reservoir_size must be non-negative, got {reservoir_size}")
        self.reservoir_size = reservoir_size
        self.time_provider = time_provider or DEFAULT_TIME_PROVIDER
        super().__init__(name, documentation, labelnames, namespace, subsystem, unit, registry)
        logger.info(
            f"Summary {self.fullname} created with quantiles={list(self.quantiles)}, "
            f"reservoir_size={self.reservoir_size}"
        )

    @classmethod
    def build(cls) -> "SummaryBuilder":
        """Return a builder to configure a new Summary step by step."""
        return SummaryBuilder()

    def new_child(self) -> SummaryChild:
        return SummaryChild(self.reservoir_size, self.time_provider)

    # Convenience methods for summaries without labels.

    def observe(self, amount: float) -> None:
        """Observe the given amount on the summary with no labels."""
        self._require_no_labels().observe(amount)

    def start_timer(self) -> Timer:
        """Start a timer on the summary with no labels."""
        return self._require_no_labels().start_timer()

    def time(self) -> _Timed:
        """Time a block or function on the summary with no labels."""
        return self._require_no_labels().time()

    def collect(self) -> List[MetricFamilySamples]:
        samples = []
        labelnames_with_quantile = self.labelnames + (QUANTILE_LABEL,)
        for labelvalues, child in self.children():
            value = child.get()
            for q in self.quantiles:
                samples.append(
                    Sample(
                        self.fullname,
                        labelnames_with_quantile,
                        labelvalues + (repr(q),),
                        value.get_quantile(q),
                    )
                )
            samples.append(Sample(self.fullname + "_count", self.labelnames, labelvalues, value.count))
            samples.append(Sample(self.fullname + "_sum", self.labelnames, labelvalues, value.sum))

        return [MetricFamilySamples(self.fullname, MetricType.SUMMARY, self.help, samples)]


class SummaryBuilder:
    """Fluent configuration for a :class:`Summary`."""

    def __init__(self) -> None:
        self._kwargs = {"quantiles": DEFAULT_QUANTILES}
        self._name = ""
        self._help = ""

    def name(self, name: str) -> "SummaryBuilder":
        self._name = name
        return self

    def help(self, documentation: str) -> "SummaryBuilder":
        self._help = documentation
        return self

    def namespace(self, namespace: str) -> "SummaryBuilder":
        self._kwargs["namespace"] = namespace
        return self

    def subsystem(self, subsystem: str) -> "SummaryBuilder":
        self._kwargs["subsystem"] = subsystem
        return self

    def unit(self, unit: str) -> "SummaryBuilder":
        self._kwargs["unit"] = unit
        return self

    def label_names(self, *labelnames: str) -> "SummaryBuilder":
        self._kwargs["labelnames"] = labelnames
        return self

    def quantiles(self, *quantiles: float) -> "SummaryBuilder":
        self._kwargs["quantiles"] = quantiles
        return self

    def reservoir_size(self, size: int) -> "SummaryBuilder":
        self._kwargs["reservoir_size"] = size
        return self

    def time_provider(self, time_provider: TimeProvider) -> "SummaryBuilder":
        self._kwargs["time_provider"] = time_provider
        return self

    def create(self) -> Summary:
        """Build an unregistered Summary."""
        return Summary(self._name, self._help, registry=None, **self._kwargs)

    def register(self, registry: CollectorRegistry = REGISTRY) -> Summary:
        """Build a Summary and register it."""
        return Summary(self._name, self._help, registry=registry, **self._kwargs)
