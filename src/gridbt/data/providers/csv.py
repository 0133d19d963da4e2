"""Price series provider backed by a CSV or Parquet file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd

from ...errors import InvalidInputError
from ..types import Bar
from .base import DataProvider

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["open", "high", "low", "close", "volume"]
_TIMESTAMP_FALLBACKS = ("date", "time", "datetime")


class CSVProvider(DataProvider):
    """Serve the bars of one symbol from a file on disk.

    Rows are served in file order. The engine rejects a series whose
    timestamps do not strictly increase, so an unsorted export fails
    the run instead of being silently reordered.

    Column names are matched case-insensitively. The timestamp column
    is ``timestamp_col``, else the first of date / time / datetime.

    Args:
        path: ``.csv`` or ``.parquet`` file.
        symbol_name: Symbol for the bars. Defaults to the filename
            prefix, so ``BTCUSDT_1d.csv`` serves ``BTCUSDT``.
        timeframe: Bar timeframe label.
        start: Keep rows at or after this timestamp.
        end: Keep rows at or before this timestamp.
        timestamp_col: Name of the timestamp column.

    Raises:
        InvalidInputError: On first read, if the timestamp column or any
            of open, high, low, close, volume is missing.
    """

    def __init__(
        self,
        path: str | Path,
        symbol_name: str = "",
        timeframe: str = "1d",
        start: Optional[str] = None,
        end: Optional[str] = None,
        timestamp_col: str = "timestamp",
    ):
        self.path = Path(path)
        self._symbol = symbol_name or self.path.stem.split("_")[0]
        self._timeframe = timeframe
        self._start = pd.Timestamp(start) if start else None
        self._end = pd.Timestamp(end) if end else None
        self._timestamp_col = timestamp_col.lower()
        self._frame: Optional[pd.DataFrame] = None
        self._bars: Optional[List[Bar]] = None

    def _read(self) -> pd.DataFrame:
        if self.path.suffix == ".parquet":
            raw = pd.read_parquet(self.path)
        else:
            raw = pd.read_csv(self.path)
        raw.columns = [str(c).strip().lower() for c in raw.columns]
        return raw

    def _timestamp_column(self, columns) -> str:
        for name in (self._timestamp_col, *_TIMESTAMP_FALLBACKS):
            if name in columns:
                return name
        raise InvalidInputError(f"{self.path.name}: no timestamp column")

    def frame(self) -> pd.DataFrame:
        """Timestamp plus OHLCV columns after date filtering."""
        if self._frame is not None:
            return self._frame

        raw = self._read()
        missing = [c for c in PRICE_COLUMNS if c not in raw.columns]
        if missing:
            raise InvalidInputError(
                f"{self.path.name}: missing required column: {', '.join(missing)}"
            )

        df = raw[PRICE_COLUMNS].astype("float64")
        df.insert(0, "timestamp", pd.to_datetime(raw[self._timestamp_column(raw.columns)]))

        keep = pd.Series(True, index=df.index)
        if self._start is not None:
            keep &= df["timestamp"] >= self._start
        if self._end is not None:
            keep &= df["timestamp"] <= self._end
        df = df[keep].reset_index(drop=True)

        logger.debug("Loaded %d bars of %s from %s", len(df), self._symbol, self.path)
        self._frame = df
        return df

    def _build_bars(self) -> List[Bar]:
        df = self.frame()
        stamps = pd.DatetimeIndex(df["timestamp"]).to_pydatetime()
        values = df[PRICE_COLUMNS].to_numpy()
        return [
            Bar(
                timestamp=ts,
                open=float(op), high=float(hi), low=float(lo), close=float(cl), volume=float(vol),
                symbol=self._symbol, timeframe=self._timeframe,
            )
            for ts, (op, hi, lo, cl, vol) in zip(stamps, values)
        ]

    def __iter__(self) -> Iterator[Bar]:
        if self._bars is None:
            self._bars = self._build_bars()
        return iter(self._bars)

    def symbol(self) -> str:
        return self._symbol

    def timeframe(self) -> str:
        return self._timeframe

    def to_dataframe(self) -> pd.DataFrame:
        return self.frame().copy()

    def __len__(self) -> int:
        return len(self.frame())
