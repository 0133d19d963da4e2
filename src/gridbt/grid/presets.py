"""Grid presets derived from the observed price range of a series.

The grid is centred on the midpoint of the series' low/high range
and widened to 80% of that range on each side. Three presets trade
off density against profit target:

- standard: 10 levels, 1.0% target, 1000 invested
- conservative: narrower bounds, 8 levels, 0.5% target, 800 invested
- aggressive: wider bounds, 15 levels, 1.5% target, 1500 invested
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from ..data.types import Bar
from ..errors import InvalidConfigError, InvalidInputError
from .types import GridConfig

logger = logging.getLogger(__name__)

RANGE_EXPANSION = 0.8
# Lower bound used when the expanded range would reach below zero.
MIN_LOWER_FRACTION = 0.1


@dataclass(frozen=True)
class PresetSpec:
    """Multipliers and parameters applied to the derived bounds."""

    lower_mult: float
    upper_mult: float
    levels: int
    profit_percent: float
    investment_amount: float


PRESETS: Dict[str, PresetSpec] = {
    "standard": PresetSpec(1.0, 1.0, 10, 1.0, 1000.0),
    "conservative": PresetSpec(1.05, 0.95, 8, 0.5, 800.0),
    "aggressive": PresetSpec(0.9, 1.1, 15, 1.5, 1500.0),
}


def grid_bounds(bars: Iterable[Bar]) -> Tuple[float, float]:
    """Lower and upper grid bounds covering the series' traded range.

    Raises:
        InvalidInputError: If the series is empty.
    """
    lows = []
    highs = []
    for bar in bars:
        lows.append(bar.low)
        highs.append(bar.high)
    if not lows:
        raise InvalidInputError("Cannot derive grid bounds from an empty series")

    low, high = min(lows), max(highs)
    mid = (high + low) / 2
    spread = high - low

    lower = mid - spread * RANGE_EXPANSION
    upper = mid + spread * RANGE_EXPANSION
    if lower <= 0:
        lower = mid * MIN_LOWER_FRACTION
    return lower, upper


def dynamic_presets(
    bars: Iterable[Bar],
    maker_fee: float = 0.001,
    taker_fee: float = 0.001,
) -> Dict[str, GridConfig]:
    """Build the standard, conservative and aggressive configs for a series.

    The conservative preset narrows the bounds, so on a series whose
    range is small next to its price the narrowed bounds cross. Such a
    preset is left out and logged; the standard preset always fits a
    series that moves.

    Raises:
        InvalidInputError: If the series is empty.
        InvalidConfigError: If the series is flat, so no grid fits, or
            a fee is out of range.
    """
    lower, upper = grid_bounds(bars)
    if upper <= lower:
        raise InvalidConfigError(
            f"Flat series at {lower:.8g} has no range to build a grid over"
        )

    presets: Dict[str, GridConfig] = {}
    for name, spec in PRESETS.items():
        preset_lower = lower * spec.lower_mult
        preset_upper = upper * spec.upper_mult
        if preset_upper <= preset_lower:
            logger.info(
                "Skipping %s preset: bounds [%.8g, %.8g] cross for range [%.8g, %.8g]",
                name, preset_lower, preset_upper, lower, upper,
            )
            continue
        presets[name] = GridConfig(
            upper_price=preset_upper,
            lower_price=preset_lower,
            levels=spec.levels,
            profit_percent=spec.profit_percent,
            investment_amount=spec.investment_amount,
            maker_fee=maker_fee,
            taker_fee=taker_fee,
        )
    return presets


def preset_name(config: GridConfig) -> str:
    """Name of the preset a config was built from, or 'custom'."""
    for name, spec in PRESETS.items():
        if (
            config.levels == spec.levels
            and config.profit_percent == spec.profit_percent
        ):
            return name
    return "custom"
