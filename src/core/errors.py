"""Rollup exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Recoverable data problems are logged, not raised; these types cover
the failures callers must see.
"""

from __future__ import annotations


class RollupError(Exception):
    """Base exception for all rollup failures."""


class RollupConfigError(RollupError):
    """Raised for invalid runtime configuration or override tables."""


class RollupIngestError(RollupError):
    """Raised for invalid date arguments and range requests."""


class RollupStoreError(RollupError):
    """Raised when a daily document cannot be persisted."""


class RollupDependencyError(RollupError):
    """Raised when an optional runtime dependency is missing."""
