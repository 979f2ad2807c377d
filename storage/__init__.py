"""
Cardwise Storage - SQLite persistence for sets, settings and progress.
"""

from storage.database import Database, SetNotFoundError

__all__ = [
    "Database",
    "SetNotFoundError",
]
