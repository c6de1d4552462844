# File: utils/__init__.py
"""Pure Python utilities for Routine Tracker.

Submodules:
    - dt_utils: Calendar arithmetic (month lengths, Nth weekday, date ranges)

Usage:
    from . import dt_utils
    from .dt_utils import last_day_of_month
"""

from . import dt_utils

__all__ = ["dt_utils"]
