"""Discrete-event workload simulation instrumented with summaries."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import simpy
import yaml

from ..core.time_provider import SimulationTimeProvider
from ..metrics.collector import CollectorRegistry
from ..metrics.models import MetricFamilySamples
from ..metrics.summary import DEFAULT_QUANTILES, Summary
from ..sampling.reservoir import DEFAULT_SIZE
from ..utils.config_validator import ConfigurationError, ExperimentConfigValidator
from .sampler import DistributionSampler

logger = logging.getLogger(__name__)


class WorkloadSimulator:
    """Replays a synthetic request stream on simulated time.

    Every request is timed with a summary timer whose clock is the SimPy
    environment, so the recorded latencies are exact simulated durations.
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize the simulator from a configuration dictionary.

        Args:
            config: Simulation configuration containing:
                - simulation: max_simulation_time and optional random_seed
                - summary (optional): quantiles, reservoir_size, namespace
                - workload: client_profiles and optional server_capacity
        """
        is_valid, errors = ExperimentConfigValidator.validate(config)
        if not is_valid:
            raise ConfigurationError("Invalid simulation configuration: " + "; ".join(errors))

        self.config = config
        self.simulation_config = config["simulation"]
        self.summary_config = config.get("summary", {})
        self.workload_config = config["workload"]
        self.client_profiles: List[Dict[str, Any]] = self.workload_config["client_profiles"]

        self.sampler = DistributionSampler(self.simulation_config.get("random_seed"))
        self.request_counter = 0

        self.env: Optional[simpy.Environment] = None
        self.registry: Optional[CollectorRegistry] = None
        self.latency: Optional[Summary] = None
        self.request_size: Optional[Summary] = None
        self.server: Optional[simpy.Resource] = None

        logger.info(f"WorkloadSimulator initialized with {len(self.client_profiles)} client profiles")

    @classmethod
    def from_yaml_file(cls, path: str) -> "WorkloadSimulator":
        with open(path) as f:
            return cls(yaml.safe_load(f))

    @classmethod
    def from_json_file(cls, path: str) -> "WorkloadSimulator":
        with open(Path(path)) as f:
            return cls(json.load(f))

    def setup(self) -> None:
        """Create the environment, clock, registry and summaries."""
        self.env = simpy.Environment()
        time_provider = SimulationTimeProvider(self.env)
        self.registry = CollectorRegistry()

        quantiles = self.summary_config.get("quantiles", list(DEFAULT_QUANTILES))
        reservoir_size = self.summary_config.get("reservoir_size", DEFAULT_SIZE)
        namespace = self.summary_config.get("namespace", "")

        self.latency = Summary(
            "request_latency_seconds",
            "Simulated request latency in seconds.",
            labelnames=("profile",),
            namespace=namespace,
            quantiles=quantiles,
            reservoir_size=reservoir_size,
            time_provider=time_provider,
            registry=self.registry,
        )
        self.request_size = Summary(
            "request_size",
            "Simulated request size in bytes.",
            labelnames=("profile",),
            namespace=namespace,
            unit="bytes",
            quantiles=quantiles,
            reservoir_size=reservoir_size,
            time_provider=time_provider,
            registry=self.registry,
        )

        capacity = self.workload_config.get("server_capacity")
        self.server = simpy.Resource(self.env, capacity=capacity) if capacity else None

        for profile in self.client_profiles:
            self.env.process(self._arrival_process(profile))

    def _arrival_process(self, profile: Dict[str, Any]):
        while True:
            yield self.env.timeout(self.sampler.sample(profile["inter_arrival_time_dist_config"]))
            self.request_counter += 1
            self.env.process(self._handle_request(profile, f"req_{self.request_counter}"))

    def _handle_request(self, profile: Dict[str, Any], request_id: str):
        name = profile["profile_name"]
        timer = self.latency.labels(name).start_timer()
        service_time = self.sampler.sample(profile["service_time_dist_config"])

        if self.server is not None:
            with self.server.request() as slot:
                yield slot
                yield self.env.timeout(service_time)
        else:
            yield self.env.timeout(service_time)

        elapsed = timer.observe_duration()
        if "request_size_dist_config" in profile:
            self.request_size.labels(name).observe(self.sampler.sample(profile["request_size_dist_config"]))
        logger.debug(f"Request {request_id} ({name}) completed in {elapsed:.6f}s")

    def run(self) -> Dict[str, Any]:
        """Run the simulation and return the summary report."""
        if self.env is None:
            self.setup()

        max_simulation_time = self.simulation_config["max_simulation_time"]
        logger.info(f"Starting simulation (max time: {max_simulation_time}s)")
        try:
            self.env.run(until=max_simulation_time)
        except Exception as e:
            logger.error(f"Error during simulation at time {self.env.now}: {e}")
            raise
        logger.info(f"Simulation ended at time {self.env.now} after {self.request_counter} arrivals")

        return self.generate_summary_report()

    def families(self) -> List[MetricFamilySamples]:
        """Collect every family from the simulator's registry."""
        return list(self.registry.collect())

    def generate_summary_report(self) -> Dict[str, Any]:
        """Build per-profile latency and size statistics from the summaries."""
        report: Dict[str, Any] = {
            "simulation": {
                "duration_s": self.env.now,
                "arrivals": self.request_counter,
            },
            "latency_seconds": self._report_for(self.latency),
            "request_size_bytes": self._report_for(self.request_size),
        }

        completed = sum(stats["count"] for stats in report["latency_seconds"].values())
        report["simulation"]["completed"] = completed
        report["simulation"]["requests_per_second"] = completed / self.env.now if self.env.now > 0 else 0

        logger.info("=" * 60)
        logger.info("SIMULATION SUMMARY")
        logger.info("=" * 60)
        for name, stats in report["latency_seconds"].items():
            logger.info(
                f"{name}: {stats['count']:.0f} requests, mean latency {stats['mean']:.4f}s, "
                f"quantiles {stats['quantiles']}"
            )
        logger.info("=" * 60)

        return report

    @staticmethod
    def _report_for(summary: Summary) -> Dict[str, Dict[str, Any]]:
        stats = {}
        for labelvalues, child in summary.children():
            value = child.get()
            stats[labelvalues[0]] = {
                "count": value.count,
                "sum": value.sum,
                "mean": value.sum / value.count if value.count else 0.0,
                "quantiles": {repr(q): value.get_quantile(q) for q in summary.quantiles},
            }
        return stats
