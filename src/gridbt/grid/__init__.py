"""Grid backtest module for gridbt.

Provides the per-level grid simulation engine, its configuration and
position state store, and range-derived configuration presets.
"""

from .engine import GridBacktestEngine, run_backtest
from .presets import PRESETS, dynamic_presets, grid_bounds, preset_name
from .state import GridStateStore
from .types import GridConfig, GridLevel, GridPosition, PositionState

__all__ = [
    "GridBacktestEngine",
    "GridConfig",
    "GridLevel",
    "GridPosition",
    "GridStateStore",
    "PRESETS",
    "PositionState",
    "dynamic_presets",
    "grid_bounds",
    "preset_name",
    "run_backtest",
]
