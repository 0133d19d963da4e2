"""Tests for summarize() and BacktestResult."""

import math
from datetime import datetime, timedelta
from typing import List

import pytest

from gridbt.data.types import TradeAction, TradeRecord
from gridbt.grid.types import GridConfig
from gridbt.reporting.metrics import BacktestResult, summarize

T0 = datetime(2024, 1, 1)
CONFIG = GridConfig(
    upper_price=110.0, lower_price=90.0, levels=5, profit_percent=2.0,
    investment_amount=1000.0,
)


def _ledger(net_profits: List[float], fee: float = 0.1) -> List[TradeRecord]:
    """Buy/sell pairs whose sells net the given profits, one day apart."""
    trades = []
    cumulative = 0.0
    for i, net in enumerate(net_profits):
        ts = T0 + timedelta(days=i)
        trades.append(TradeRecord(
            timestamp=ts, action=TradeAction.BUY, price=100.0, quantity=1.0,
            grid_level=i, fee=fee,
        ))
        cumulative += net
        trades.append(TradeRecord(
            timestamp=ts, action=TradeAction.SELL, price=100.0 + net + fee,
            quantity=1.0, grid_level=i, fee=fee,
            realized_profit=net + fee, net_profit=net, cumulative_profit=cumulative,
        ))
    return trades


class TestCounts:
    def test_trade_counts(self):
        result = summarize(_ledger([10.0, -5.0, 20.0]), T0, T0 + timedelta(days=2), CONFIG)
        assert result.total_trades == 6
        assert result.buy_trades == 3
        assert result.sell_trades == 3
        assert result.winning_trades == 2
        assert result.losing_trades == 1
        assert result.win_rate == pytest.approx(2 / 3)

    def test_zero_net_is_a_loss(self):
        result = summarize(_ledger([0.0, 1.0]), T0, T0, CONFIG)
        assert result.winning_trades == 1
        assert result.losing_trades == 1
        assert result.win_rate == 0.5

    def test_buys_only(self):
        buys = [t for t in _ledger([1.0, 2.0]) if t.action == TradeAction.BUY]
        result = summarize(buys, T0, T0 + timedelta(days=1), CONFIG)
        assert result.total_trades == 2
        assert result.sell_trades == 0
        assert result.win_rate == 0.0
        assert result.total_fees == pytest.approx(0.2)
        assert result.net_profit == pytest.approx(-0.2)
        assert result.max_drawdown == 0.0
        assert result.sharpe_ratio == 0.0


class TestMoney:
    def test_totals(self):
        result = summarize(_ledger([10.0, -5.0, 20.0], fee=0.5), T0, T0, CONFIG)
        # Gross = net + sell fee for each sell
        assert result.total_profit == pytest.approx(25.0 + 1.5)
        assert result.total_fees == pytest.approx(3.0)
        assert result.net_profit == pytest.approx(result.total_profit - result.total_fees)

    def test_empty_ledger(self):
        result = summarize([], T0, T0 + timedelta(days=30), CONFIG)
        assert result.total_trades == 0
        assert result.total_profit == 0.0
        assert result.total_fees == 0.0
        assert result.net_profit == 0.0
        assert result.win_rate == 0.0
        assert result.max_drawdown == 0.0
        assert result.sharpe_ratio == 0.0
        assert result.annualized_return == 0.0


class TestDrawdown:
    def test_peak_to_trough(self):
        # cumulative: 10, 5, 25, 10, 15 -> worst fall 25 -> 10
        result = summarize(_ledger([10.0, -5.0, 20.0, -15.0, 5.0]), T0, T0, CONFIG)
        assert result.max_drawdown == pytest.approx(15.0)

    def test_initial_loss_counts_from_zero(self):
        result = summarize(_ledger([-10.0, 4.0]), T0, T0, CONFIG)
        assert result.max_drawdown == pytest.approx(10.0)

    def test_monotonic_gains(self):
        result = summarize(_ledger([1.0, 2.0, 3.0]), T0, T0, CONFIG)
        assert result.max_drawdown == 0.0

    def test_only_new_peak_resets(self):
        # cumulative: 10, 2, 8, 1 -> drawdown keeps growing from peak 10
        result = summarize(_ledger([10.0, -8.0, 6.0, -7.0]), T0, T0, CONFIG)
        assert result.max_drawdown == pytest.approx(9.0)


class TestSharpe:
    def test_population_std(self):
        profits = [10.0, -5.0, 20.0, -15.0, 5.0]
        mean = sum(profits) / len(profits)
        std = math.sqrt(sum((p - mean) ** 2 for p in profits) / len(profits))
        result = summarize(_ledger(profits), T0, T0, CONFIG)
        assert result.sharpe_ratio == pytest.approx(mean / std * math.sqrt(365))

    def test_single_sell_is_zero(self):
        result = summarize(_ledger([12.0]), T0, T0, CONFIG)
        assert result.sharpe_ratio == 0.0

    def test_identical_profits_is_zero(self):
        result = summarize(_ledger([0.1, 0.1, 0.1]), T0, T0, CONFIG)
        assert result.sharpe_ratio == 0.0

    @pytest.mark.parametrize("net", [0.1, 3.3, -0.7, 1e-9])
    def test_constant_series_never_blows_up(self, net):
        result = summarize(_ledger([net] * 7), T0, T0, CONFIG)
        assert result.sharpe_ratio == 0.0

    def test_negative_mean(self):
        result = summarize(_ledger([-1.0, -3.0]), T0, T0, CONFIG)
        assert result.sharpe_ratio < 0
        assert math.isfinite(result.sharpe_ratio)


class TestAnnualizedReturn:
    def test_scaled_to_year(self):
        result = summarize(_ledger([10.0, 20.0]), T0, T0 + timedelta(days=10), CONFIG)
        expected = result.net_profit / 1000.0 * (365 / 10) * 100
        assert result.elapsed_days == pytest.approx(10.0)
        assert result.annualized_return == pytest.approx(expected)

    def test_zero_elapsed(self):
        result = summarize(_ledger([10.0]), T0, T0, CONFIG)
        assert result.annualized_return == 0.0

    def test_without_config(self):
        result = summarize(_ledger([10.0]), T0, T0 + timedelta(days=5), None)
        assert result.annualized_return == 0.0


class TestBacktestResultOutput:
    def test_summary_text(self):
        result = summarize(_ledger([10.0, -5.0]), T0, T0 + timedelta(days=1), CONFIG, symbol="BTCUSDT")
        text = result.summary()
        assert "Grid Backtest Results: BTCUSDT" in text
        assert "Win Rate:         50.00%" in text
        assert "Net Profit" in text
        assert "Max Drawdown" in text
        assert "Annualized" in text

    def test_summary_default_result(self):
        text = BacktestResult().summary()
        assert "N/A" in text

    def test_repr(self):
        result = summarize(_ledger([10.0]), T0, T0, CONFIG, symbol="ETHUSDT")
        assert "ETHUSDT" in repr(result)
        assert "trades=2" in repr(result)

    def test_to_dataframe(self):
        result = summarize(_ledger([10.0, -5.0]), T0, T0, CONFIG)
        df = result.to_dataframe()
        assert len(df) == 4
        assert list(df["action"]) == ["BUY", "SELL", "BUY", "SELL"]
        assert df["cumulative_profit"].iloc[-1] == pytest.approx(5.0)
        assert df["notional"].iloc[0] == pytest.approx(100.0)

    def test_to_dataframe_empty(self):
        df = BacktestResult().to_dataframe()
        assert len(df) == 0
        assert "net_profit" in df.columns


class TestTradeRecord:
    def test_sell_and_notional(self):
        buy, sell = _ledger([4.0], fee=0.5)
        assert not buy.is_sell
        assert sell.is_sell
        assert buy.notional == pytest.approx(100.0)
        assert sell.notional == pytest.approx(104.5)
