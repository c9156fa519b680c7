"""Shared helpers: configuration validation and errors."""

from .config_validator import ConfigurationError, ReservedLabelError

__all__ = ["ConfigurationError", "ReservedLabelError"]
