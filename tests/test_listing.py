from datetime import datetime, timedelta, timezone

from apps.tasks.domain.services import DeadlineScope, completed_cutoff, deadline_window

NOW = datetime(2024, 6, 15, 14, 30, tzinfo=timezone.utc)
TODAY = NOW.replace(hour=0, minute=0)


def test_completed_cutoff_goes_back_by_window():
    assert completed_cutoff(NOW, 7) == NOW - timedelta(days=7)
    assert completed_cutoff(NOW, 3) == datetime(2024, 6, 12, 14, 30, tzinfo=timezone.utc)


def test_deadline_window_today_is_half_open_day():
    assert deadline_window(DeadlineScope.TODAY, TODAY) == (TODAY, TODAY + timedelta(days=1))


def test_deadline_window_week_has_no_lower_bound():
    assert deadline_window(DeadlineScope.WEEK, TODAY) == (None, TODAY + timedelta(days=7))


def test_deadline_window_all_is_unbounded():
    assert deadline_window(DeadlineScope.ALL, TODAY) == (None, None)
