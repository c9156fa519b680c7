"""Simulated workloads that exercise summaries on simulated time."""

from .sampler import DistributionSampler
from .simulator import WorkloadSimulator

__all__ = ["DistributionSampler", "WorkloadSimulator"]
