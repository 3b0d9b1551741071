"""Exception types for the condition-set package.

Building a condition set never raises: malformed lines are reported as
diagnostics and skipped. These errors cover the surrounding plumbing
(reading files, writing output, configuration).
"""

from __future__ import annotations


class ConditionSetError(Exception):
    """Base error for all condition-set errors."""


class DataFileError(ConditionSetError):
    """A data file could not be read or decoded."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class DataWriterError(ConditionSetError):
    """Output was written with unbalanced child blocks."""


class ConfigError(ConditionSetError):
    """Invalid configuration file or values."""
