"""
Duration arithmetic for time entries.
"""

from datetime import datetime, timedelta

MILLISECONDS_PER_MINUTE = 60_000
_ONE_MILLISECOND = timedelta(milliseconds=1)


def elapsed_milliseconds(start: datetime, end: datetime) -> int:
    """Whole milliseconds between two timestamps (may be negative)."""
    return (end - start) // _ONE_MILLISECOND


def calculate_duration_minutes(start: datetime, end: datetime) -> int:
    """
    Convert the elapsed time between start and end into whole minutes.
    
    Rounds to the nearest minute with halves going up, so 90 seconds is
    2 minutes and 89.999 seconds is 1 minute. Inverted ranges produce
    negative values rounded the same way.
    """
    elapsed_ms = elapsed_milliseconds(start, end)
    return (elapsed_ms + MILLISECONDS_PER_MINUTE // 2) // MILLISECONDS_PER_MINUTE
