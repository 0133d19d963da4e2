"""Backtest results and the statistics aggregator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..data.types import TradeRecord

if TYPE_CHECKING:
    from ..grid.types import GridConfig

# Sharpe ratio is annualized over daily bars.
ANNUALIZATION_DAYS = 365


@dataclass
class BacktestResult:
    """Complete results from a grid backtest.

    Built once by ``summarize`` and owned by the caller afterwards.
    ``win_rate`` is a fraction in [0, 1] over sell trades.
    ``max_drawdown`` is in quote currency, measured on cumulative
    net profit of sells.
    """
    symbol: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    config: Optional["GridConfig"] = None
    total_trades: int = 0
    buy_trades: int = 0
    sell_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    total_profit: float = 0.0
    total_fees: float = 0.0
    net_profit: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    bars_processed: int = 0
    bars_skipped: int = 0
    open_positions: int = 0
    trades: List[TradeRecord] = field(default_factory=list)

    @property
    def elapsed_days(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() / 86400

    @property
    def annualized_return(self) -> float:
        """Net profit over investment, scaled to a year, in percent.

        0 when the run spans no time or has no config.
        """
        days = self.elapsed_days
        if days <= 0 or self.config is None:
            return 0.0
        return self.net_profit / self.config.investment_amount * (365 / days) * 100

    def to_dataframe(self) -> pd.DataFrame:
        """Trade ledger as a DataFrame, one row per TradeRecord."""
        columns = [
            "timestamp", "action", "price", "quantity", "notional", "grid_level", "fee",
            "realized_profit", "net_profit", "cumulative_profit",
        ]
        rows = [
            {
                "timestamp": t.timestamp,
                "action": t.action.value,
                "price": t.price,
                "quantity": t.quantity,
                "notional": t.notional,
                "grid_level": t.grid_level,
                "fee": t.fee,
                "realized_profit": t.realized_profit,
                "net_profit": t.net_profit,
                "cumulative_profit": t.cumulative_profit,
            }
            for t in self.trades
        ]
        return pd.DataFrame(rows, columns=columns)

    def summary(self) -> str:
        """Return formatted summary string."""
        lines = [
            f"{'='*60}",
            f"  Grid Backtest Results: {self.symbol or 'N/A'}",
            f"{'='*60}",
        ]
        if self.start_time is not None and self.end_time is not None:
            lines.append(
                f"  Period:           {self.start_time:%Y-%m-%d} - {self.end_time:%Y-%m-%d}"
            )
        if self.config is not None:
            c = self.config
            lines.append(
                f"  Grid:             {c.lower_price:,.2f} - {c.upper_price:,.2f} "
                f"x {c.levels} levels, target {c.profit_percent:g}%"
            )
        lines.extend([
            f"  Total Trades:     {self.total_trades} "
            f"({self.buy_trades} buys, {self.sell_trades} sells)",
            f"  Winning Trades:   {self.winning_trades}",
            f"  Losing Trades:    {self.losing_trades}",
            f"  Win Rate:         {self.win_rate * 100:.2f}%",
            f"  {'─'*56}",
            f"  Total Profit:     ${self.total_profit:,.2f}",
            f"  Total Fees:       ${self.total_fees:,.2f}",
            f"  Net Profit:       ${self.net_profit:,.2f}",
            f"  Max Drawdown:     ${self.max_drawdown:,.2f}",
        ])
        if self.sharpe_ratio != 0:
            lines.append(f"  Sharpe Ratio:     {self.sharpe_ratio:.4f}")
        if self.elapsed_days > 0 and self.config is not None:
            lines.append(f"  Annualized:       {self.annualized_return:.2f}%")
        lines.extend([
            f"  {'─'*56}",
            f"  Bars:             {self.bars_processed} ({self.bars_skipped} out of range)",
            f"  Open Positions:   {self.open_positions}",
            f"{'='*60}",
        ])
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BacktestResult(symbol={self.symbol!r}, net_profit=${self.net_profit:,.2f}, "
            f"trades={self.total_trades}, win_rate={self.win_rate * 100:.1f}%, "
            f"max_dd=${self.max_drawdown:,.2f})"
        )


def _max_drawdown(cumulative: np.ndarray) -> float:
    """Largest fall of cumulative profit below its running peak.

    The peak starts at 0, so a run whose first sells lose money
    registers that loss as drawdown.
    """
    if cumulative.size == 0:
        return 0.0
    peaks = np.maximum.accumulate(np.maximum(cumulative, 0.0))
    return float(max(np.max(peaks - cumulative), 0.0))


def _sharpe(net_profits: np.ndarray) -> float:
    """Per-sell Sharpe ratio, annualized by sqrt(365). 0 when undefined.

    np.std of identical values can be rounding noise rather than 0.
    """
    if net_profits.size == 0 or np.ptp(net_profits) == 0:
        return 0.0
    std = float(np.std(net_profits))
    if not std > 0:
        return 0.0
    ratio = float(np.mean(net_profits)) / std * math.sqrt(ANNUALIZATION_DAYS)
    return ratio if math.isfinite(ratio) else 0.0


def summarize(
    trades: Sequence[TradeRecord],
    start_time: Optional[datetime],
    end_time: Optional[datetime],
    config: Optional["GridConfig"],
    symbol: str = "",
    bars_processed: int = 0,
    bars_skipped: int = 0,
    open_positions: int = 0,
) -> BacktestResult:
    """Aggregate a trade ledger into a BacktestResult.

    Wins and losses count sells by net profit (after the sell fee);
    a sell that nets exactly zero is a loss. Fees include both buys
    and sells, so buys still open at the end of the run reduce
    ``net_profit``.
    """
    sells = [t for t in trades if t.is_sell]
    net = np.array([t.net_profit for t in sells], dtype=np.float64)
    winning = int(np.count_nonzero(net > 0))

    total_profit = sum(t.realized_profit for t in sells)
    total_fees = sum(t.fee for t in trades)

    return BacktestResult(
        symbol=symbol,
        start_time=start_time,
        end_time=end_time,
        config=config,
        total_trades=len(trades),
        buy_trades=len(trades) - len(sells),
        sell_trades=len(sells),
        winning_trades=winning,
        losing_trades=len(sells) - winning,
        win_rate=winning / len(sells) if sells else 0.0,
        total_profit=float(total_profit),
        total_fees=float(total_fees),
        net_profit=float(total_profit - total_fees),
        max_drawdown=_max_drawdown(np.cumsum(net)),
        sharpe_ratio=_sharpe(net),
        bars_processed=bars_processed,
        bars_skipped=bars_skipped,
        open_positions=open_positions,
        trades=list(trades),
    )
