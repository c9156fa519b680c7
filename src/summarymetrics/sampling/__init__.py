"""Reservoir sampling module."""

from .reservoir import DEFAULT_SIZE, UniformSampling

__all__ = ["UniformSampling", "DEFAULT_SIZE"]
