"""History logic module.

This module contains the chat history store that keeps one transcript per
chat identifier.
"""

from logic.history.store import HistoryStore

__all__ = ["HistoryStore"]
