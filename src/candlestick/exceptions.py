"""Chart exception hierarchy.

All chart-specific exceptions derive from :class:`ChartError` so callers can
catch all chart-related errors uniformly.
"""

from __future__ import annotations


class ChartError(Exception):
    """Base class for chart-related exceptions.

    Derived exceptions should extend this class so that callers can catch all
    chart-specific errors uniformly.
    """


class ConfigError(ChartError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(ChartError):
    """Raised when reading or converting a point source fails."""


class EmptySeriesError(ChartError):
    """Raised when an operation needs at least one point and the series is empty."""


class InvalidWindowError(ChartError):
    """Raised in strict mode when a window selects fewer than two points."""


__all__ = [
    "ChartError",
    "ConfigError",
    "DataSourceError",
    "EmptySeriesError",
    "InvalidWindowError",
]
