"""GridBacktestEngine: replays a price series against an evenly spaced grid.

Each level buys once when the close comes within a tenth of a grid
step of its buy price, and sells once when the close reaches the
level's profit target. Levels are never re-armed within a run.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Union

from ..data.providers.base import DataProvider
from ..data.providers.sequence import SequenceProvider
from ..data.types import Bar, TradeAction, TradeRecord
from ..data.validation import check_series
from ..reporting.metrics import BacktestResult, summarize
from .state import GridStateStore
from .types import GridConfig, GridPosition, PositionState

logger = logging.getLogger(__name__)

PriceSeries = Union[DataProvider, Iterable[Bar]]


class GridBacktestEngine:
    """Run a grid backtest through the bars of one symbol.

    Args:
        data: DataProvider or any iterable of Bars in ascending
            timestamp order.
        config: Validated grid configuration.
    """

    def __init__(self, data: PriceSeries, config: GridConfig) -> None:
        if not isinstance(data, DataProvider):
            data = SequenceProvider(data)
        self.data = data
        self.config = config

    def run(self) -> BacktestResult:
        """Replay all bars and return the summarized result.

        Raises:
            InvalidInputError: If the series is empty or its timestamps
                do not strictly increase.
        """
        config = self.config
        bars = list(self.data)
        check_series(bars)

        store = GridStateStore(config)
        trades: List[TradeRecord] = []
        cumulative = 0.0
        skipped = 0

        for bar in bars:
            price = bar.close
            if not config.contains(price):
                skipped += 1
                logger.debug(
                    "%s close %.8g outside grid [%.8g, %.8g], bar skipped",
                    bar.timestamp, price, config.lower_price, config.upper_price,
                )
                continue

            logger.debug(
                "%s close %.8g in grid level %d",
                bar.timestamp, price, config.level_of(price),
            )

            # Levels filled on this bar must not also sell on it.
            holding = store.in_state(PositionState.HOLDING)

            for position in store.in_state(PositionState.AWAITING_ENTRY):
                if abs(price - position.buy_price) <= config.buy_threshold:
                    trades.append(self._buy(bar, position))

            for position in holding:
                if price >= position.target_sell_price:
                    record = self._sell(bar, position, cumulative)
                    cumulative = record.cumulative_profit
                    trades.append(record)

        result = summarize(
            trades,
            start_time=bars[0].timestamp,
            end_time=bars[-1].timestamp,
            config=config,
            symbol=self.data.symbol() or bars[0].symbol,
            bars_processed=len(bars),
            bars_skipped=skipped,
            open_positions=len(store.in_state(PositionState.HOLDING)),
        )
        logger.info("Grid backtest finished: %r", result)
        return result

    def _buy(self, bar: Bar, position: GridPosition) -> TradeRecord:
        price = bar.close
        fee = position.quantity * price * self.config.taker_fee
        position.fill_buy(price)
        logger.debug(
            "%s BUY level %d qty %.8g @ %.8g fee %.8g",
            bar.timestamp, position.level, position.quantity, price, fee,
        )
        return TradeRecord(
            timestamp=bar.timestamp,
            action=TradeAction.BUY,
            price=price,
            quantity=position.quantity,
            grid_level=position.level,
            fee=fee,
        )

    def _sell(
        self, bar: Bar, position: GridPosition, cumulative: float
    ) -> TradeRecord:
        price = bar.close
        fee = position.quantity * price * self.config.maker_fee
        gross = position.fill_sell(price)
        net = gross - fee
        logger.debug(
            "%s SELL level %d qty %.8g @ %.8g net %.8g",
            bar.timestamp, position.level, position.quantity, price, net,
        )
        return TradeRecord(
            timestamp=bar.timestamp,
            action=TradeAction.SELL,
            price=price,
            quantity=position.quantity,
            grid_level=position.level,
            fee=fee,
            realized_profit=gross,
            net_profit=net,
            cumulative_profit=cumulative + net,
        )


def run_backtest(prices: PriceSeries, config: GridConfig) -> BacktestResult:
    """Functional form of ``GridBacktestEngine(prices, config).run()``."""
    return GridBacktestEngine(prices, config).run()
