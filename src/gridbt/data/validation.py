"""Price series validation run before every backtest."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from ..errors import InvalidInputError
from .types import Bar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataIssue:
    """A single data quality issue found during validation.

    Attributes:
        severity: 'ERROR' or 'WARNING'.
        check: Short identifier (e.g. 'empty', 'monotonic', 'ohlc').
        message: Human-readable description.
        index: Position of the offending bar in the series, if applicable.
        timestamp: Bar timestamp if applicable.
    """

    severity: str
    check: str
    message: str
    index: Optional[int] = None
    timestamp: Optional[datetime] = None


def validate_bars(bars: Sequence[Bar]) -> List[DataIssue]:
    """Run all checks on a bar sequence.

    ERROR issues make a series unusable for a backtest:
    emptiness, timestamps that do not strictly increase, and
    closes that are not finite positive numbers.
    OHLC inconsistencies and negative volume are WARNINGs because
    the engine only reads the close.

    Returns:
        List of DataIssue objects (empty if clean).
    """
    if len(bars) == 0:
        return [DataIssue("ERROR", "empty", "Price series is empty")]

    issues: List[DataIssue] = []
    prev: Optional[Bar] = None

    for i, bar in enumerate(bars):
        if prev is not None:
            if bar.timestamp == prev.timestamp:
                issues.append(DataIssue(
                    "ERROR", "duplicates",
                    f"Duplicate timestamp {bar.timestamp} at index {i}",
                    index=i, timestamp=bar.timestamp,
                ))
            elif bar.timestamp < prev.timestamp:
                issues.append(DataIssue(
                    "ERROR", "monotonic",
                    f"Timestamp {bar.timestamp} at index {i} precedes {prev.timestamp}",
                    index=i, timestamp=bar.timestamp,
                ))

        if not math.isfinite(bar.close) or bar.close <= 0:
            issues.append(DataIssue(
                "ERROR", "close",
                f"Close {bar.close!r} at index {i} is not a positive number",
                index=i, timestamp=bar.timestamp,
            ))
        elif bar.high < bar.low or bar.close > bar.high or bar.close < bar.low:
            issues.append(DataIssue(
                "WARNING", "ohlc",
                f"Inconsistent OHLC at index {i} "
                f"(high={bar.high}, low={bar.low}, close={bar.close})",
                index=i, timestamp=bar.timestamp,
            ))

        if bar.volume < 0:
            issues.append(DataIssue(
                "WARNING", "volume",
                f"Negative volume at index {i}",
                index=i, timestamp=bar.timestamp,
            ))

        prev = bar

    return issues


def format_issues(issues: List[DataIssue]) -> str:
    """Format issues as a human-readable report."""
    if not issues:
        return "Data validation: CLEAN (no issues found)"

    errors = sum(1 for i in issues if i.severity == "ERROR")
    warnings = sum(1 for i in issues if i.severity == "WARNING")
    lines = [f"Data validation: {len(issues)} issues ({errors} errors, {warnings} warnings)"]
    for issue in issues:
        loc = f" [index {issue.index}]" if issue.index is not None else ""
        lines.append(f"  {issue.severity} ({issue.check}){loc}: {issue.message}")
    return "\n".join(lines)


def check_series(bars: Sequence[Bar]) -> None:
    """Validate a series and raise if it cannot be backtested.

    Warnings are logged; the first ERROR raises InvalidInputError.
    """
    issues = validate_bars(bars)
    if not issues:
        return

    errors = [i for i in issues if i.severity == "ERROR"]
    if errors:
        raise InvalidInputError(
            f"Price series rejected with {len(errors)} errors. "
            f"First: {errors[0].message}"
        )

    logger.warning("Price series issues:\n%s", format_issues(issues))
