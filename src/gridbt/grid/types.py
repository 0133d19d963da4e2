"""Data types for the grid backtest module."""

from __future__ import annotations

import math
import numbers
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..errors import InvalidConfigError, InvalidStateTransition

# Fraction of one grid step within which a close counts as touching a buy level.
BUY_THRESHOLD_RATIO = 0.1


class PositionState(str, Enum):
    AWAITING_ENTRY = "awaiting_entry"
    HOLDING = "holding"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class GridConfig:
    """Configuration for a grid backtest.

    Prices bound an evenly spaced grid of ``levels`` buy levels.
    Each level is allotted ``investment_amount / levels`` of capital
    and sells once price reaches ``profit_percent`` above its grid
    buy price. Buys pay ``taker_fee`` and sells pay ``maker_fee``,
    both as fractions of notional.

    Raises:
        InvalidConfigError: If any invariant is violated.
    """

    upper_price: float
    lower_price: float
    levels: int = 10
    profit_percent: float = 1.0
    investment_amount: float = 1000.0
    maker_fee: float = 0.001
    taker_fee: float = 0.001

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidConfigError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidConfigError(f"{f.name} must be finite, got {value!r}")
        if not isinstance(self.levels, numbers.Integral) or self.levels < 1:
            raise InvalidConfigError(f"levels must be an integer >= 1, got {self.levels!r}")

        # Stored as builtin int / float, whatever numeric type was passed.
        for f in fields(self):
            cast = int if f.name == "levels" else float
            object.__setattr__(self, f.name, cast(getattr(self, f.name)))

        if self.lower_price <= 0:
            raise InvalidConfigError(
                f"lower_price must be positive, got {self.lower_price}"
            )
        if self.upper_price <= self.lower_price:
            raise InvalidConfigError(
                f"upper_price ({self.upper_price}) must exceed "
                f"lower_price ({self.lower_price})"
            )
        if self.profit_percent < 0:
            raise InvalidConfigError(
                f"profit_percent must be non-negative, got {self.profit_percent}"
            )
        if self.investment_amount <= 0:
            raise InvalidConfigError(
                f"investment_amount must be positive, got {self.investment_amount}"
            )
        for name in ("maker_fee", "taker_fee"):
            rate = getattr(self, name)
            if not 0 <= rate < 1:
                raise InvalidConfigError(f"{name} must be in [0, 1), got {rate}")

    @property
    def spacing(self) -> float:
        return (self.upper_price - self.lower_price) / self.levels

    @property
    def capital_per_level(self) -> float:
        return self.investment_amount / self.levels

    @property
    def buy_threshold(self) -> float:
        return self.spacing * BUY_THRESHOLD_RATIO

    def contains(self, price: float) -> bool:
        """True if price lies within [lower_price, upper_price]."""
        return self.lower_price <= price <= self.upper_price

    def level_of(self, price: float) -> int:
        """Grid level index a price falls in, clamped to the grid."""
        level = math.floor((price - self.lower_price) / self.spacing)
        return min(max(level, 0), self.levels - 1)

    def level(self, index: int) -> "GridLevel":
        """Derive the constant parameters of one level."""
        if not 0 <= index < self.levels:
            raise IndexError(f"level {index} outside grid of {self.levels} levels")
        buy_price = self.lower_price + index * self.spacing
        allocated = self.capital_per_level
        return GridLevel(
            index=index,
            buy_price=buy_price,
            target_sell_price=buy_price * (1 + self.profit_percent / 100),
            allocated_capital=allocated,
            target_quantity=allocated / buy_price,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GridConfig":
        """Build a config from a plain mapping (e.g. parsed JSON).

        Raises:
            InvalidConfigError: On unknown keys, missing bounds or
                invariant violations.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfigError(f"Unknown GridConfig keys: {', '.join(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise InvalidConfigError(str(e)) from e


@dataclass(frozen=True, slots=True)
class GridLevel:
    """Derived, run-constant parameters of one grid level."""

    index: int
    buy_price: float
    target_sell_price: float
    allocated_capital: float
    target_quantity: float


@dataclass(slots=True)
class GridPosition:
    """Mutable per-level position.

    Lifecycle: AWAITING_ENTRY -> HOLDING -> COMPLETED. A completed
    position is never re-armed within a run.
    """

    level: int
    buy_price: float
    target_sell_price: float
    quantity: float
    state: PositionState = PositionState.AWAITING_ENTRY
    actual_buy_price: Optional[float] = None

    @classmethod
    def from_level(cls, level: GridLevel) -> "GridPosition":
        return cls(
            level=level.index,
            buy_price=level.buy_price,
            target_sell_price=level.target_sell_price,
            quantity=level.target_quantity,
        )

    def fill_buy(self, price: float) -> None:
        if self.state != PositionState.AWAITING_ENTRY:
            raise InvalidStateTransition(
                f"level {self.level}: cannot buy from {self.state.value}"
            )
        self.actual_buy_price = price
        self.state = PositionState.HOLDING

    def fill_sell(self, price: float) -> float:
        """Complete the position and return the gross realized profit."""
        if self.state != PositionState.HOLDING:
            raise InvalidStateTransition(
                f"level {self.level}: cannot sell from {self.state.value}"
            )
        self.state = PositionState.COMPLETED
        return self.quantity * price - self.quantity * self.actual_buy_price
