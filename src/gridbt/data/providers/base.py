"""Base data provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from ..types import Bar


class DataProvider(ABC):
    """Abstract base for all price series providers.

    A DataProvider yields Bar objects for a single symbol in
    ascending timestamp order. The engine materializes the whole
    series before the run starts, so providers may do I/O freely.
    """

    @abstractmethod
    def __iter__(self) -> Iterator[Bar]:
        """Yield bars in chronological order."""
        ...

    @abstractmethod
    def symbol(self) -> str:
        """Return the symbol this provider serves."""
        ...

    @abstractmethod
    def timeframe(self) -> str:
        """Return the bar timeframe (e.g. '1d')."""
        ...
