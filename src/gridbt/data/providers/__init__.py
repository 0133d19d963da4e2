from .base import DataProvider
from .csv import CSVProvider
from .sequence import SequenceProvider

__all__ = [
    "DataProvider",
    "CSVProvider",
    "SequenceProvider",
]
