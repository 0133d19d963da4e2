from .metrics import BacktestResult, summarize
from .comparison import ConfigStats, ResultComparison

__all__ = [
    "BacktestResult",
    "summarize",
    "ConfigStats",
    "ResultComparison",
]
