from .types import Bar, TradeAction, TradeRecord
from .validation import DataIssue, check_series, format_issues, validate_bars

__all__ = [
    "Bar", "TradeAction", "TradeRecord",
    "DataIssue", "check_series", "format_issues", "validate_bars",
]
