"""Label-keyed child registries and process-wide collector registration."""

import logging
import threading
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from ..utils.config_validator import ConfigurationError, validate_label_names, validate_metric_name
from .models import MetricFamilySamples

logger = logging.getLogger(__name__)

ChildT = TypeVar("ChildT")


def build_fullname(name: str, namespace: str = "", subsystem: str = "", unit: str = "") -> str:
    """Join the name parts with underscores, skipping empty parts."""
    if unit and not name.endswith("_" + unit):
        name = f"{name}_{unit}"
    return "_".join(part for part in (namespace, subsystem, name) if part)


class CollectorRegistry:
    """Holds the collectors that are scraped together."""

    def __init__(self) -> None:
        self._collectors: Dict[str, "SimpleCollector"] = {}
        self._lock = threading.Lock()

    def register(self, collector: "SimpleCollector") -> None:
        with self._lock:
            if collector.fullname in self._collectors:
                raise ConfigurationError(f"Collector already registered under name: {collector.fullname}")
            self._collectors[collector.fullname] = collector
        logger.debug(f"Registered collector {collector.fullname}")

    def unregister(self, collector: "SimpleCollector") -> None:
        with self._lock:
            if self._collectors.get(collector.fullname) is collector:
                del self._collectors[collector.fullname]
                logger.debug(f"Unregistered collector {collector.fullname}")

    def collect(self) -> Iterator[MetricFamilySamples]:
        with self._lock:
            collectors = list(self._collectors.values())
        for collector in collectors:
            yield from collector.collect()

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Return the value of the sample with this name and label set, if any."""
        labels = labels or {}
        for family in self.collect():
            for sample in family.samples:
                if sample.name == name and sample.labels == labels:
                    return sample.value
        return None


REGISTRY = CollectorRegistry()


class SimpleCollector(Generic[ChildT]):
    """Base class for metrics that keep one child per label-value combination.

    The collector owns its children: they are created on first use of a label
    combination by ``new_child`` and only dropped by ``remove`` or ``clear``.
    """

    _type_name = "Metric"
    _reserved_labelnames: Tuple[str, ...] = ()

    def __init__(
        self,
        name: str,
        documentation: str,
        labelnames: Tuple[str, ...] = (),
        namespace: str = "",
        subsystem: str = "",
        unit: str = "",
        registry: Optional[CollectorRegistry] = REGISTRY,
    ):
        validate_metric_name(name)
        if not documentation:
            raise ConfigurationError(f"Help text is required for metric {name}")
        self.fullname = build_fullname(name, namespace, subsystem, unit)
        validate_metric_name(self.fullname)
        self.help = documentation
        self.labelnames = validate_label_names(labelnames, self._reserved_labelnames, self._type_name)

        self._children: Dict[Tuple[str, ...], ChildT] = {}
        self._lock = threading.Lock()
        self._init_no_labels_child()

        if registry is not None:
            registry.register(self)

    def _init_no_labels_child(self) -> None:
        if not self.labelnames:
            self._no_labels_child = self.new_child()
            self._children[()] = self._no_labels_child
        else:
            self._no_labels_child = None

    def new_child(self) -> ChildT:
        raise NotImplementedError

    def labels(self, *labelvalues, **labelkwargs) -> ChildT:
        """Return the child for the given label values, creating it if needed."""
        key = self._label_key(labelvalues, labelkwargs)
        with self._lock:
            child = self._children.get(key)
            if child is None:
                child = self.new_child()
                self._children[key] = child
                logger.debug(f"Created child {self.fullname}{dict(zip(self.labelnames, key))}")
            return child

    def remove(self, *labelvalues) -> None:
        """Drop the child for the given label values.

        References to the removed child keep working but are no longer collected.
        """
        key = self._label_key(labelvalues, {})
        with self._lock:
            self._children.pop(key, None)

    def clear(self) -> None:
        """Drop all children."""
        with self._lock:
            self._children = {}
            self._init_no_labels_child()

    def children(self) -> List[Tuple[Tuple[str, ...], ChildT]]:
        """Return a stable snapshot of (label values, child) pairs."""
        with self._lock:
            return list(self._children.items())

    def _label_key(self, labelvalues, labelkwargs) -> Tuple[str, ...]:
        if not self.labelnames:
            raise ValueError(f"No label names were set when constructing {self.fullname}")
        if labelvalues and labelkwargs:
            raise ValueError("Can't pass both *args and **kwargs")
        if labelkwargs:
            if sorted(labelkwargs) != sorted(self.labelnames):
                raise ValueError(f"Incorrect label names: expected {self.labelnames}")
            return tuple(str(labelkwargs[name]) for name in self.labelnames)
        if len(labelvalues) != len(self.labelnames):
            raise ValueError(f"Incorrect label count: expected {len(self.labelnames)}, got {len(labelvalues)}")
        return tuple(str(value) for value in labelvalues)

    def _require_no_labels(self) -> ChildT:
        if self._no_labels_child is None:
            raise ValueError(f"{self.fullname} has labels; use labels() to select a child")
        return self._no_labels_child

    def collect(self) -> List[MetricFamilySamples]:
        raise NotImplementedError
