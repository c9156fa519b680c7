"""Data models for collected samples."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class MetricType(str, Enum):
    """Kinds of metric family a collector can emit."""

    COUNTER = "counter"
    GAUGE = "gauge"
    SUMMARY = "summary"
    HISTOGRAM = "histogram"
    UNTYPED = "untyped"


@dataclass(frozen=True)
class Sample:
    """A single named, labelled value within a metric family."""

    name: str
    labelnames: Tuple[str, ...]
    labelvalues: Tuple[str, ...]
    value: float

    @property
    def labels(self) -> Dict[str, str]:
        return dict(zip(self.labelnames, self.labelvalues))


@dataclass
class MetricFamilySamples:
    """All samples emitted for one metric during a collection pass."""

    name: str
    type: MetricType
    documentation: str
    samples: List[Sample] = field(default_factory=list)
