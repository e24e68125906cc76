"""Project-wide custom exceptions."""

from __future__ import annotations


class StatementNormalizerError(Exception):
    """Base exception for the statement normalizer CLI."""


class ConfigurationError(StatementNormalizerError):
    """Raised when configuration loading or validation fails."""


class PayloadError(StatementNormalizerError):
    """Raised when an extraction response file cannot be read."""
