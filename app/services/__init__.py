"""
Services module for account-level flows.
"""

from app.services.account import AccountService, HistoryRow

__all__ = ["AccountService", "HistoryRow"]
