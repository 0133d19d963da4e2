"""Tests for GridStateStore: one position per level, arena access."""

import pytest

from gridbt.grid.state import GridStateStore
from gridbt.grid.types import GridConfig, PositionState


def _config(levels: int = 5) -> GridConfig:
    return GridConfig(
        upper_price=150.0, lower_price=100.0, levels=levels,
        profit_percent=1.0, investment_amount=5000.0,
    )


class TestInitialization:
    @pytest.mark.parametrize("levels", [1, 2, 5, 37])
    def test_one_position_per_level(self, levels):
        store = GridStateStore(_config(levels))
        assert len(store) == levels
        assert [p.level for p in store] == list(range(levels))

    @pytest.mark.parametrize("levels", [1, 3, 10, 100])
    def test_buy_prices_strictly_increase(self, levels):
        store = GridStateStore(_config(levels))
        prices = [p.buy_price for p in store]
        assert all(a < b for a, b in zip(prices, prices[1:]))
        assert prices[0] == 100.0

    def test_all_awaiting_entry(self):
        store = GridStateStore(_config())
        assert all(p.state == PositionState.AWAITING_ENTRY for p in store)
        assert store.counts() == {
            PositionState.AWAITING_ENTRY: 5,
            PositionState.HOLDING: 0,
            PositionState.COMPLETED: 0,
        }

    def test_quantity_from_allocated_capital(self):
        store = GridStateStore(_config())
        for pos, level in zip(store, store.levels):
            assert pos.quantity == pytest.approx(1000.0 / level.buy_price)

    def test_positions_not_shared(self):
        store = GridStateStore(_config())
        assert len({id(p) for p in store}) == len(store)


class TestAccess:
    def test_getitem_by_level(self):
        store = GridStateStore(_config())
        assert store[3].level == 3
        assert store[3].buy_price == pytest.approx(130.0)

    def test_in_state_tracks_transitions(self):
        store = GridStateStore(_config())
        store[1].fill_buy(110.0)
        store[4].fill_buy(140.0)
        store[4].fill_sell(142.0)

        assert [p.level for p in store.in_state(PositionState.HOLDING)] == [1]
        assert [p.level for p in store.in_state(PositionState.COMPLETED)] == [4]
        assert [p.level for p in store.in_state(PositionState.AWAITING_ENTRY)] == [0, 2, 3]

    def test_positions_tuple_is_a_view(self):
        store = GridStateStore(_config())
        positions = store.positions
        assert isinstance(positions, tuple)
        assert positions[0] is store[0]

    def test_independent_stores(self):
        config = _config()
        a = GridStateStore(config)
        b = GridStateStore(config)
        a[0].fill_buy(100.0)
        assert b[0].state == PositionState.AWAITING_ENTRY
