"""summarymetrics: concurrent Summary metrics with sampled quantiles."""

from .core import ManualTimeProvider, MonotonicTimeProvider, SimulationTimeProvider, TimeProvider
from .metrics import (
    DEFAULT_QUANTILES,
    QUANTILE_LABEL,
    REGISTRY,
    CollectorRegistry,
    MetricFamilySamples,
    MetricType,
    Sample,
    Summary,
    SummaryChild,
    SummaryValue,
    Timer,
)
from .sampling import UniformSampling
from .utils import ConfigurationError, ReservedLabelError

__version__ = "0.1.0"

__all__ = [
    "Summary",
    "SummaryChild",
    "SummaryValue",
    "Timer",
    "DEFAULT_QUANTILES",
    "QUANTILE_LABEL",
    "CollectorRegistry",
    "REGISTRY",
    "MetricFamilySamples",
    "MetricType",
    "Sample",
    "UniformSampling",
    "TimeProvider",
    "MonotonicTimeProvider",
    "ManualTimeProvider",
    "SimulationTimeProvider",
    "ConfigurationError",
    "ReservedLabelError",
]
