"""Ranking and tabulation of parameter sweep runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

SUMMARY_METRICS = ["net_profit", "win_rate", "max_drawdown", "total_trades"]


@dataclass
class SweepResults:
    """One row per swept GridConfig.

    Each combo maps the swept field names to their values and adds
    the run's metrics: net_profit, total_profit, total_fees,
    max_drawdown, total_trades, sell_trades, win_rate, sharpe_ratio,
    annualized_return and symbol.
    """
    combos: List[Dict[str, Any]] = field(default_factory=list)
    param_names: List[str] = field(default_factory=list)

    def _ranked(self, metric: str, descending: bool) -> List[Dict[str, Any]]:
        # Combos without the metric rank last either way.
        missing = float("-inf") if descending else float("inf")
        return sorted(
            self.combos,
            key=lambda c: c.get(metric, missing),
            reverse=descending,
        )

    def best(self, metric: str = "net_profit", n: int = 10) -> List[Dict[str, Any]]:
        return self._ranked(metric, descending=True)[:n]

    def worst(self, metric: str = "net_profit", n: int = 10) -> List[Dict[str, Any]]:
        return self._ranked(metric, descending=False)[:n]

    def filter(self, **params: Any) -> "SweepResults":
        """Combos whose swept values equal ``params``, e.g. ``filter(levels=10)``."""
        kept = [c for c in self.combos if all(c.get(k) == v for k, v in params.items())]
        return SweepResults(combos=kept, param_names=list(self.param_names))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.combos)

    def summary(self, metric: str = "net_profit", top_n: int = 20) -> str:
        if not self.combos:
            return "No results."

        top = pd.DataFrame(self.best(metric=metric, n=top_n))
        columns = [c for c in [*self.param_names, *SUMMARY_METRICS] if c in top.columns]
        table = top[columns].to_string(index=False, float_format=lambda v: f"{v:,.4f}")
        rule = "-" * max(len(line) for line in table.splitlines())
        return "\n".join([
            f"Grid Sweep Results (top {len(top)} of {len(self.combos)} by {metric})",
            rule,
            table,
            rule,
        ])

    def __len__(self) -> int:
        return len(self.combos)
