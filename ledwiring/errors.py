"""Exception types raised at the planner boundary."""

from __future__ import annotations


class WiringError(Exception):
    """Base class for all ledwiring errors."""


class ValidationError(WiringError, ValueError):
    """Input violates the caller contract (negative grid, zero pitch, ...)."""


class CatalogError(WiringError):
    """Controller catalog is empty or malformed."""


class ConfigError(WiringError):
    """Planner configuration file could not be applied."""
