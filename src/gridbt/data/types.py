"""Core data types used throughout gridbt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True, slots=True)
class Bar:
    """Universal OHLCV data unit."""
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    symbol: str = ""
    timeframe: str = "1d"


@dataclass(frozen=True, slots=True)
class TradeRecord:
    """A single grid fill, appended to the ledger and never mutated.

    Profit fields are only populated on sells:
    ``realized_profit`` is gross (before the sell fee),
    ``net_profit`` is ``realized_profit - fee`` and
    ``cumulative_profit`` is the running sum of ``net_profit`` over
    all sells up to and including this one.
    """
    timestamp: datetime
    action: TradeAction
    price: float
    quantity: float
    grid_level: int
    fee: float
    realized_profit: Optional[float] = None
    net_profit: Optional[float] = None
    cumulative_profit: Optional[float] = None

    @property
    def is_sell(self) -> bool:
        return self.action == TradeAction.SELL

    @property
    def notional(self) -> float:
        return self.quantity * self.price
