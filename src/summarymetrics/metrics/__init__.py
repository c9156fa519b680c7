"""Summary metric, collectors and sample export."""

from .collector import REGISTRY, CollectorRegistry, SimpleCollector
from .export import samples_to_dataframe, write_samples_csv
from .models import MetricFamilySamples, MetricType, Sample
from .summary import (
    DEFAULT_QUANTILES,
    QUANTILE_LABEL,
    Summary,
    SummaryBuilder,
    SummaryChild,
    SummaryValue,
    Timer,
)

__all__ = [
    "Summary",
    "SummaryBuilder",
    "SummaryChild",
    "SummaryValue",
    "Timer",
    "DEFAULT_QUANTILES",
    "QUANTILE_LABEL",
    "SimpleCollector",
    "CollectorRegistry",
    "REGISTRY",
    "Sample",
    "MetricFamilySamples",
    "MetricType",
    "samples_to_dataframe",
    "write_samples_csv",
]
