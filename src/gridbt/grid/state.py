"""Grid State Store: the per-run arena of grid positions, indexed by level."""

from __future__ import annotations

from typing import Dict, Iterator, List, Tuple

from .types import GridConfig, GridLevel, GridPosition, PositionState


class GridStateStore:
    """Holds exactly one GridPosition per grid level for a single run.

    Positions live in a list whose index is the level, so no two
    levels can share a position. A fresh store is built for every
    run; only the engine's per-bar step calls the positions' fill
    methods.
    """

    __slots__ = ("config", "_levels", "_positions")

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self._levels: Tuple[GridLevel, ...] = tuple(
            config.level(i) for i in range(config.levels)
        )
        self._positions: List[GridPosition] = [
            GridPosition.from_level(level) for level in self._levels
        ]

    @property
    def levels(self) -> Tuple[GridLevel, ...]:
        return self._levels

    @property
    def positions(self) -> Tuple[GridPosition, ...]:
        return tuple(self._positions)

    def __getitem__(self, index: int) -> GridPosition:
        return self._positions[index]

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[GridPosition]:
        return iter(self._positions)

    def in_state(self, state: PositionState) -> List[GridPosition]:
        """Positions currently in ``state``, in ascending level order."""
        return [p for p in self._positions if p.state == state]

    def counts(self) -> Dict[PositionState, int]:
        counts = {state: 0 for state in PositionState}
        for p in self._positions:
            counts[p.state] += 1
        return counts
