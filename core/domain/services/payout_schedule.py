"""Weekly payout calendar."""
from datetime import datetime, timedelta

FRIDAY = 4


def next_payout_date(now: datetime, weekday: int = FRIDAY, hour: int = 12) -> datetime:
    """
    Next payout run strictly after today.

    Returns the next `weekday` (Monday=0) at `hour`:00. When `now` already
    falls on that weekday the run is pushed to the following week.
    """
    days_ahead = (weekday - now.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    target = now + timedelta(days=days_ahead)
    return target.replace(hour=hour, minute=0, second=0, microsecond=0)
