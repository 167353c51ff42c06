"""
Time Tracker core.
Timer lifecycle, role-based authorization and scoped reporting for time entries.
"""

__version__ = "1.0.0"
