"""
API routers.
"""

from . import reports, time_entries

__all__ = ["reports", "time_entries"]
