"""Tests for price series validation."""

import logging
from datetime import datetime, timedelta

import pytest

from gridbt.data.types import Bar
from gridbt.data.validation import DataIssue, check_series, format_issues, validate_bars
from gridbt.errors import InvalidInputError


def _bar(day: int, close: float = 100.0, **kw) -> Bar:
    params = dict(
        timestamp=datetime(2024, 1, 1) + timedelta(days=day),
        open=close, high=close + 1, low=close - 1, close=close, volume=10.0,
    )
    params.update(kw)
    return Bar(**params)


class TestValidateBars:
    def test_clean(self):
        assert validate_bars([_bar(0), _bar(1), _bar(2)]) == []

    def test_empty(self):
        issues = validate_bars([])
        assert [(i.severity, i.check) for i in issues] == [("ERROR", "empty")]

    def test_out_of_order(self):
        issues = validate_bars([_bar(0), _bar(2), _bar(1)])
        assert [(i.check, i.index) for i in issues] == [("monotonic", 2)]

    def test_duplicate(self):
        issues = validate_bars([_bar(0), _bar(0)])
        assert issues[0].check == "duplicates"
        assert issues[0].severity == "ERROR"

    @pytest.mark.parametrize("close", [0.0, -1.0, float("nan"), float("inf")])
    def test_bad_close(self, close):
        issues = validate_bars([_bar(0, close=close)])
        assert any(i.check == "close" and i.severity == "ERROR" for i in issues)

    def test_ohlc_inconsistency_is_warning(self):
        issues = validate_bars([_bar(0, high=90.0)])
        assert [(i.severity, i.check) for i in issues] == [("WARNING", "ohlc")]

    def test_negative_volume_is_warning(self):
        issues = validate_bars([_bar(0, volume=-1.0)])
        assert [(i.severity, i.check) for i in issues] == [("WARNING", "volume")]


class TestCheckSeries:
    def test_clean_passes(self):
        check_series([_bar(0), _bar(1)])

    def test_raises_on_error(self):
        with pytest.raises(InvalidInputError, match="precedes"):
            check_series([_bar(1), _bar(0)])

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError, match="empty"):
            check_series([])

    def test_warnings_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="gridbt.data.validation"):
            check_series([_bar(0, volume=-5.0)])
        assert "Negative volume" in caplog.text


class TestFormatIssues:
    def test_clean(self):
        assert "CLEAN" in format_issues([])

    def test_counts(self):
        text = format_issues([
            DataIssue("ERROR", "monotonic", "bad order", index=3),
            DataIssue("WARNING", "volume", "neg volume"),
        ])
        assert "2 issues (1 errors, 1 warnings)" in text
        assert "[index 3]" in text
