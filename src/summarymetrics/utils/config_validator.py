"""
Configuration validation for summaries and simulated workloads.

This module provides validation for:
- Metric and label names
- Quantile lists
- Summary configuration sections
- Workload simulation configurations
"""

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import yaml

logger = logging.getLogger(__name__)

METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
RESERVED_LABEL_PREFIX = "__"

KNOWN_DISTRIBUTIONS = {
    "Constant", "Fixed", "Exponential", "Uniform", "Normal",
    "LogNormal", "Pareto", "Weibull", "Gamma", "Mixture",
}


class ConfigurationError(ValueError):
    """Raised when a metric or experiment is configured incorrectly."""
    pass


class ReservedLabelError(ConfigurationError):
    """Raised when a summary declares the label it reserves for quantiles."""
    pass


def validate_metric_name(name: str) -> None:
    if not name:
        raise ConfigurationError("Metric name must not be empty")
    if not METRIC_NAME_RE.match(name):
        raise ConfigurationError(f"Invalid metric name: {name!r}")


def validate_label_names(
    labelnames: Iterable[str], reserved: Sequence[str] = (), kind: str = "Metric"
) -> Tuple[str, ...]:
    """Check label names and return them as a tuple.

    Args:
        labelnames: Names declared by the metric
        reserved: Names the metric type emits itself (e.g. ``quantile``)
        kind: Metric type name used in error messages

    Raises:
        ReservedLabelError: if one of ``reserved`` is declared
        ConfigurationError: for malformed or duplicate names
    """
    if isinstance(labelnames, str):
        raise ConfigurationError(f"Label names must be a sequence of strings, got {labelnames!r}")
    names = tuple(labelnames)
    seen = set()
    for label in names:
        if label in reserved:
            raise ReservedLabelError(f"{kind} cannot have a label named '{label}'.")
        if not LABEL_NAME_RE.match(label):
            raise ConfigurationError(f"Invalid label name: {label!r}")
        if label.startswith(RESERVED_LABEL_PREFIX):
            raise ConfigurationError(f"Label names starting with '__' are reserved: {label!r}")
        if label in seen:
            raise ConfigurationError(f"Duplicate label name: {label!r}")
        seen.add(label)
    return names


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_quantiles(quantiles: Optional[Sequence[float]]) -> Tuple[float, ...]:
    """Check that every quantile lies in [0, 1]; keep order and duplicates."""
    if not quantiles:
        return ()
    checked = []
    for q in quantiles:
        q = float(q)
        if math.isnan(q) or q < 0 or q > 1:
            raise ConfigurationError("quantile value must be in interval [0, 1]")
        checked.append(q)
    return tuple(checked)


class SummaryConfigValidator:
    """Validates the ``summary`` section of a simulation config."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        if not isinstance(config, dict):
            return ["summary section must be a mapping"]

        errors = []

        quantiles = config.get("quantiles")
        if quantiles is not None:
            if not isinstance(quantiles, list):
                errors.append("summary.quantiles must be a list")
            else:
                for q in quantiles:
                    if not _is_number(q) or not 0 <= q <= 1:
                        errors.append(f"Invalid quantile {q!r} (must be in [0, 1])")

        reservoir_size = config.get("reservoir_size")
        if reservoir_size is not None:
            if not isinstance(reservoir_size, int) or isinstance(reservoir_size, bool) or reservoir_size < 0:
                errors.append(f"Invalid reservoir_size: {reservoir_size!r}")

        namespace = config.get("namespace", "")
        if not isinstance(namespace, str):
            errors.append(f"Invalid namespace: {namespace!r}")
        elif namespace and not METRIC_NAME_RE.match(namespace):
            errors.append(f"Invalid namespace: {namespace!r}")

        return errors


class WorkloadConfigValidator:
    """Validates the ``workload`` section of a simulation config."""

    REQUIRED_DISTRIBUTIONS = ("inter_arrival_time_dist_config", "service_time_dist_config")

    @classmethod
    def validate(cls, workload: Dict[str, Any]) -> List[str]:
        if not isinstance(workload, dict):
            return ["workload section must be a mapping"]

        errors = []

        profiles = workload.get("client_profiles")
        if not profiles:
            errors.append("Workload missing client_profiles")
            return errors
        if not isinstance(profiles, list):
            errors.append("workload.client_profiles must be a list")
            return errors

        names = set()
        for i, profile in enumerate(profiles):
            if not isinstance(profile, dict):
                errors.append(f"Client profile {i} must be a mapping")
                continue

            name = profile.get("profile_name")
            if not name:
                errors.append(f"Client profile {i} missing profile_name")
            elif name in names:
                errors.append(f"Duplicate client profile name: {name}")
            names.add(name)

            for dist_field in cls.REQUIRED_DISTRIBUTIONS:
                if dist_field not in profile:
                    errors.append(f"Client profile {i} missing {dist_field}")
                else:
                    errors.extend(cls._validate_distribution(profile[dist_field], f"Client profile {i} {dist_field}"))

            if "request_size_dist_config" in profile:
                errors.extend(
                    cls._validate_distribution(
                        profile["request_size_dist_config"], f"Client profile {i} request_size_dist_config"
                    )
                )

        return errors

    @classmethod
    def _validate_distribution(cls, dist: Dict[str, Any], where: str) -> List[str]:
        if not isinstance(dist, dict):
            return [f"{where} must be a mapping"]
        if "type" not in dist:
            return [f"{where} missing type"]
        if dist["type"] not in KNOWN_DISTRIBUTIONS:
            return [f"{where} has unknown type {dist['type']!r}"]
        errors = []
        if dist["type"] == "Exponential":
            rate = dist.get("rate", 1.0)
            if not _is_number(rate):
                errors.append(f"{where} rate must be a number, got {rate!r}")
            elif rate <= 0:
                errors.append(f"{where} rate must be positive")
        if dist["type"] == "Mixture":
            components = dist.get("components", [])
            if not isinstance(components, list):
                return errors + [f"{where} components must be a list"]
            for j, component in enumerate(components):
                errors.extend(cls._validate_distribution(component, f"{where} component {j}"))
        return errors


class ExperimentConfigValidator:
    """Validates a complete simulation configuration."""

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        all_errors = []

        if not isinstance(config, dict):
            return False, ["Configuration must be a mapping"]

        required_top = {"simulation", "workload"}
        missing_top = required_top - set(config.keys())
        if missing_top:
            all_errors.append(f"Missing top-level fields: {missing_top}")
            return False, all_errors

        all_errors.extend(cls._validate_simulation(config["simulation"]))
        if "summary" in config:
            all_errors.extend(SummaryConfigValidator.validate(config["summary"]))
        all_errors.extend(WorkloadConfigValidator.validate(config["workload"]))

        return len(all_errors) == 0, all_errors

    @classmethod
    def _validate_simulation(cls, simulation: Dict[str, Any]) -> List[str]:
        if not isinstance(simulation, dict):
            return ["simulation section must be a mapping"]

        errors = []

        if "max_simulation_time" not in simulation:
            errors.append("Simulation missing max_simulation_time")
        else:
            max_time = simulation["max_simulation_time"]
            if not _is_number(max_time) or max_time <= 0:
                errors.append(f"Invalid max_simulation_time: {max_time!r}")

        return errors


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file based on its suffix."""
    config_file = Path(config_path)
    with open(config_file) as f:
        if config_file.suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
        return json.load(f)


def validate_and_fix_config(config_path: str) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
    """
    Load, validate, and fill in defaults for a configuration file.

    Returns:
        (is_valid, errors, fixed_config)
    """
    config = load_config_file(config_path)

    # A summary section of the wrong type is left for the validator to report
    if isinstance(config, dict) and isinstance(config.setdefault("summary", {}), dict):
        summary = config["summary"]
        if "quantiles" not in summary:
            summary["quantiles"] = [0.5, 0.95, 0.98, 0.99, 0.999]
            logger.warning("summary.quantiles not set, using defaults")

    is_valid, errors = ExperimentConfigValidator.validate(config)

    if not is_valid:
        logger.warning(f"Configuration has {len(errors)} validation errors")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more errors")

    return is_valid, errors, config
