"""Exception hierarchy for gridbt."""

from __future__ import annotations


class GridBacktestError(Exception):
    """Base class for all gridbt errors."""


class InvalidInputError(GridBacktestError, ValueError):
    """Raised when the price series handed to the engine is unusable.

    Covers empty series, out-of-order or duplicate timestamps, and
    bars with non-finite or non-positive prices.
    """


class InvalidConfigError(InvalidInputError):
    """Raised when a GridConfig violates its invariants."""


class InvalidStateTransition(GridBacktestError):
    """Raised when a grid position is filled from the wrong state."""
