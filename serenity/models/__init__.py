"""Importing this package registers every table with ``Base.metadata``."""

from .activity import Activity, UserActivity
from .journal import Journal
from .mood import MoodLog

__all__ = ["Activity", "Journal", "MoodLog", "UserActivity"]
