"""Side-by-side comparison of backtests across symbols and grid configs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from ..grid.presets import preset_name
from .metrics import BacktestResult


@dataclass
class ConfigStats:
    """Aggregate of every result that used the same grid preset."""
    name: str
    runs: int = 0
    avg_net_profit: float = 0.0
    avg_win_rate: float = 0.0
    total_trades: int = 0


def _config_name(result: BacktestResult) -> str:
    if result.config is None:
        return "custom"
    return preset_name(result.config)


@dataclass
class ResultComparison:
    """Ranks independent backtests and groups them by grid preset.

    Results usually come from running every preset of
    ``dynamic_presets`` over several symbols.
    """
    results: List[BacktestResult] = field(default_factory=list)

    def ranked(self) -> List[BacktestResult]:
        """Results by net profit, best first. Ties keep input order."""
        return sorted(self.results, key=lambda r: r.net_profit, reverse=True)

    def best(self) -> Optional[BacktestResult]:
        ranked = self.ranked()
        return ranked[0] if ranked else None

    def by_config(self) -> Dict[str, ConfigStats]:
        groups: Dict[str, List[BacktestResult]] = {}
        for res in self.results:
            groups.setdefault(_config_name(res), []).append(res)

        stats = {}
        for name, group in groups.items():
            n = len(group)
            stats[name] = ConfigStats(
                name=name,
                runs=n,
                avg_net_profit=sum(r.net_profit for r in group) / n,
                avg_win_rate=sum(r.win_rate for r in group) / n,
                total_trades=sum(r.total_trades for r in group),
            )
        return stats

    def to_dataframe(self) -> pd.DataFrame:
        """One row per result, best first."""
        return pd.DataFrame([
            {
                "symbol": r.symbol,
                "config": _config_name(r),
                "net_profit": r.net_profit,
                "total_profit": r.total_profit,
                "total_fees": r.total_fees,
                "win_rate": r.win_rate,
                "total_trades": r.total_trades,
                "max_drawdown": r.max_drawdown,
                "sharpe_ratio": r.sharpe_ratio,
                "annualized_return": r.annualized_return,
            }
            for r in self.ranked()
        ])

    def summary(self) -> str:
        if not self.results:
            return "No results."

        best = self.best()
        lines = [
            f"{'='*60}",
            f"  Grid Backtest Comparison ({len(self.results)} runs)",
            f"{'='*60}",
            f"  Best:             {best.symbol or 'N/A'} - {_config_name(best)}",
            f"  Net Profit:       ${best.net_profit:,.2f} "
            f"(win rate {best.win_rate * 100:.1f}%, {best.total_trades} trades)",
            f"  {'─'*56}",
            f"    {'Config':<14s} {'Runs':>4s} {'Avg Net':>10s} {'Avg WR%':>8s} {'Trades':>6s}",
            f"    {'─'*46}",
        ]
        for name, s in sorted(self.by_config().items()):
            lines.append(
                f"    {name:<14s} {s.runs:>4d} ${s.avg_net_profit:>+9,.2f} "
                f"{s.avg_win_rate * 100:>7.1f}% {s.total_trades:>6d}"
            )
        lines.append(f"{'='*60}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.results)
