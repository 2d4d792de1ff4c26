"""TUI components."""

from .search_bar import SearchBar
from .results_list import ResultsList, AccountItem
from .status_bar import StatusBar

__all__ = [
    "SearchBar",
    "ResultsList",
    "AccountItem",
    "StatusBar",
]
