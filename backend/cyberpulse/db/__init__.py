"""Database connections package."""

from cyberpulse.db.database import Database

__all__ = ["Database"]
