"""
Utility functions for caching and data helpers.

All utilities are lightweight with minimal dependencies.
"""

from utils.cache import CacheEntry, ThreadCache
from utils.helpers import format_relative_time, start_of_local_day

__all__ = [
    # Cache
    "ThreadCache",
    "CacheEntry",
    # Helpers
    "start_of_local_day",
    "format_relative_time",
]
