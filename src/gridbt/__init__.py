"""gridbt: deterministic grid-trading backtest simulator.

Replays a historical price series against an evenly spaced price grid.
Each level buys once near its grid price and sells once at its profit
target. Fees on both sides. Summary statistics over the trade ledger.

Quick start:
    from gridbt import CSVProvider, GridBacktestEngine, GridConfig

    config = GridConfig(
        upper_price=110, lower_price=90, levels=10, profit_percent=1.0,
        investment_amount=1000, maker_fee=0.001, taker_fee=0.001,
    )
    engine = GridBacktestEngine(data=CSVProvider('BTCUSDT_1d.csv'), config=config)
    result = engine.run()
    print(result.summary())
"""

from .version import __version__

# Errors
from .errors import GridBacktestError, InvalidConfigError, InvalidInputError, InvalidStateTransition

# Grid engine
from .grid.engine import GridBacktestEngine, run_backtest
from .grid.state import GridStateStore
from .grid.types import GridConfig, GridLevel, GridPosition, PositionState
from .grid.presets import dynamic_presets, grid_bounds, preset_name

# Data
from .data.types import Bar, TradeAction, TradeRecord
from .data.validation import DataIssue, check_series, validate_bars
from .data.providers.base import DataProvider
from .data.providers.csv import CSVProvider
from .data.providers.sequence import SequenceProvider

# Reporting
from .reporting.metrics import BacktestResult, summarize
from .reporting.comparison import ConfigStats, ResultComparison

# Optimization
from .optimize.sweep import ParameterSweep
from .optimize.results import SweepResults

__all__ = [
    "__version__",
    # Errors
    "GridBacktestError",
    "InvalidConfigError",
    "InvalidInputError",
    "InvalidStateTransition",
    # Grid
    "GridBacktestEngine",
    "run_backtest",
    "GridStateStore",
    "GridConfig",
    "GridLevel",
    "GridPosition",
    "PositionState",
    "dynamic_presets",
    "grid_bounds",
    "preset_name",
    # Data
    "Bar",
    "TradeAction",
    "TradeRecord",
    "DataIssue",
    "check_series",
    "validate_bars",
    "DataProvider",
    "CSVProvider",
    "SequenceProvider",
    # Reporting
    "BacktestResult",
    "summarize",
    "ConfigStats",
    "ResultComparison",
    # Optimization
    "ParameterSweep",
    "SweepResults",
]
