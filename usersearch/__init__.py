"""User Search - find GitHub accounts as you type."""

__version__ = "0.1.0"
