"""Parallel parameter grid search over GridConfig fields."""

from __future__ import annotations

import itertools
import logging
from dataclasses import fields, replace
from multiprocessing import Pool, cpu_count
from typing import Dict, List, Optional, Tuple

from ..data.providers.base import DataProvider
from ..data.types import Bar
from ..errors import InvalidConfigError
from ..grid.engine import GridBacktestEngine
from ..grid.types import GridConfig
from .results import SweepResults

logger = logging.getLogger(__name__)


def _run_single_combo(args: Tuple[List[Bar], str, GridConfig, dict]) -> dict:
    """Run one backtest combo. Module-level for multiprocessing pickling."""
    bars, symbol, config, params = args

    engine = GridBacktestEngine(data=bars, config=config)
    result = engine.run()

    return {
        **params,
        "symbol": symbol,
        "net_profit": result.net_profit,
        "total_profit": result.total_profit,
        "total_fees": result.total_fees,
        "max_drawdown": result.max_drawdown,
        "total_trades": result.total_trades,
        "sell_trades": result.sell_trades,
        "win_rate": result.win_rate,
        "sharpe_ratio": result.sharpe_ratio,
        "annualized_return": result.annualized_return,
    }


class ParameterSweep:
    """Parallel parameter grid search.

    Every combination of ``param_grid`` values is applied to
    ``base_config`` and backtested as an independent run, in a
    process pool.

    Usage:
        sweep = ParameterSweep(
            data=CSVProvider('BTCUSDT_1d.csv'),
            base_config=GridConfig(upper_price=70000, lower_price=50000),
            param_grid={
                'levels': [5, 10, 20],
                'profit_percent': [0.5, 1.0, 2.0],
            },
            n_workers=4,
        )
        results = sweep.run()
        print(results.summary())

    Args:
        data: DataProvider or sequence of bars.
        base_config: Config whose fields are overridden per combo.
        param_grid: Dict of GridConfig field name -> list of values.
        n_workers: Number of parallel workers (default: cpu_count).

    Raises:
        InvalidConfigError: If the grid names an unknown field or any
            combination is an invalid config. Checked before any run.
    """

    def __init__(
        self,
        data,
        base_config: GridConfig,
        param_grid: Dict[str, list],
        n_workers: Optional[int] = None,
    ):
        known = {f.name for f in fields(GridConfig)}
        unknown = sorted(set(param_grid) - known)
        if unknown:
            raise InvalidConfigError(f"Unknown sweep parameters: {', '.join(unknown)}")

        self._data = data
        self._base_config = base_config
        self._param_grid = param_grid
        self._n_workers = n_workers
        self._combos = self._build_combos()

    def _build_combos(self) -> List[Tuple[dict, GridConfig]]:
        """Build all parameter combinations and their validated configs."""
        keys = sorted(self._param_grid.keys())
        values = [self._param_grid[k] for k in keys]
        combos = []
        for combo in itertools.product(*values):
            params = dict(zip(keys, combo))
            combos.append((params, replace(self._base_config, **params)))
        return combos

    def __len__(self) -> int:
        return len(self._combos)

    def run(self) -> SweepResults:
        """Run all combos. Returns SweepResults."""
        bars = list(self._data)
        if isinstance(self._data, DataProvider):
            symbol = self._data.symbol()
        else:
            symbol = bars[0].symbol if bars else ""

        worker_args = [
            (bars, symbol, config, params)
            for params, config in self._combos
        ]

        n = self._n_workers or cpu_count()
        logger.info("Sweeping %d grid configs on %d workers", len(worker_args), n)

        if n == 1:
            raw_results = [_run_single_combo(a) for a in worker_args]
        else:
            with Pool(n) as pool:
                raw_results = pool.map(_run_single_combo, worker_args)

        return SweepResults(combos=raw_results, param_names=sorted(self._param_grid))
