# apps/tasks/domain/services/listing.py
from datetime import datetime, timedelta
from enum import Enum



class DeadlineScope(str, Enum):
    ALL = 'ALL'
    TODAY = 'TODAY'
    WEEK = 'WEEK'


def completed_cutoff(now: datetime, window_days: int) -> datetime:
    return now - timedelta(days=window_days)


def deadline_window(scope: DeadlineScope, start_of_today: datetime):
    """Zwraca (od, do) dla terminu; None = brak ograniczenia z tej strony."""
    if scope == DeadlineScope.TODAY:
        return start_of_today, start_of_today + timedelta(days=1)
    if scope == DeadlineScope.WEEK:
        # Zaległe też wpadają do tygodnia
        return None, start_of_today + timedelta(days=7)
    return None, None
