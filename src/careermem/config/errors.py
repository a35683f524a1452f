"""Errors raised while reading careermem settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Base class for every settings problem careermem reports."""


class MissingConfigurationError(ConfigurationError):
    """A required credential or setting was not provided."""


class InvalidConfigurationError(ConfigurationError):
    """A setting was provided but cannot be used as given."""
