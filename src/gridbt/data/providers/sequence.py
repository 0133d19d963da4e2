"""In-memory provider over a pre-loaded list of bars."""

from __future__ import annotations

from typing import Iterable, Iterator, List

from ..types import Bar
from .base import DataProvider


class SequenceProvider(DataProvider):
    """Serve bars that are already in memory.

    Symbol and timeframe default to those of the first bar.

    Args:
        bars: Bars in chronological order.
        symbol_name: Override for the symbol.
        timeframe: Override for the timeframe.
    """

    def __init__(
        self,
        bars: Iterable[Bar],
        symbol_name: str = "",
        timeframe: str = "",
    ):
        self._bars: List[Bar] = list(bars)
        first = self._bars[0] if self._bars else None
        self._symbol = symbol_name or (first.symbol if first else "")
        self._timeframe = timeframe or (first.timeframe if first else "1d")

    def __iter__(self) -> Iterator[Bar]:
        return iter(self._bars)

    def symbol(self) -> str:
        return self._symbol

    def timeframe(self) -> str:
        return self._timeframe

    def __len__(self) -> int:
        return len(self._bars)
