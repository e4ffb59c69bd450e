from datetime import datetime, timezone

import pytest

from conftest import add_session
from flight_mode.stats import FocusAnalytics, SessionStats, get_focus_analytics, get_session_stats

NOW = datetime(2024, 1, 3, 12, 0, tzinfo=timezone.utc)


def test_stats_count_completed_sessions(store):
    add_session(store, start_time="2024-01-03T08:00:00Z", duration_minutes=25)
    add_session(store, start_time="2024-01-03T10:00:00Z", duration_minutes=30)
    add_session(store, start_time="2024-01-02T09:00:00Z", duration_minutes=50)
    add_session(store, start_time="2024-01-01T09:00:00Z", duration_minutes=15)
    add_session(store, start_time="2024-01-03T11:00:00Z", duration_minutes=90, status="abandoned")
    add_session(store, "user-2", start_time="2024-01-03T09:00:00Z", duration_minutes=40)

    stats = get_session_stats(store, "user-1", now=NOW)

    assert stats == SessionStats(today_minutes=55, total_flights=4, streak=3)


def test_streak_may_end_yesterday(store):
    add_session(store, start_time="2024-01-02T09:00:00Z")
    add_session(store, start_time="2024-01-01T09:00:00Z")

    assert get_session_stats(store, "user-1", now=NOW).streak == 2


def test_gap_breaks_the_streak(store):
    add_session(store, start_time="2024-01-03T09:00:00Z")
    add_session(store, start_time="2023-12-31T09:00:00Z")

    stats = get_session_stats(store, "user-1", now=NOW)

    assert stats.streak == 1
    assert stats.total_flights == 2


def test_stats_use_the_callers_timezone(store):
    # 23:30 UTC on the 2nd is already the 3rd in UTC+2.
    add_session(store, start_time="2024-01-02T23:30:00Z", duration_minutes=20)
    now = datetime.fromisoformat("2024-01-03T12:00:00+02:00")

    assert get_session_stats(store, "user-1", now=now).today_minutes == 20


def test_stats_without_user_are_empty(store):
    add_session(store)

    assert get_session_stats(store, None, now=NOW) == SessionStats()


def test_focus_analytics_aggregates_completed_sessions(store):
    # NOW is Wednesday 2024-01-03.
    add_session(store, start_time="2024-01-03T09:10:00Z", duration_minutes=30)
    add_session(store, start_time="2024-01-03T09:40:00Z", duration_minutes=90)
    add_session(store, start_time="2024-01-01T14:00:00Z", duration_minutes=60)
    add_session(store, start_time="2023-12-27T09:00:00Z", duration_minutes=20)
    add_session(store, start_time="2023-12-20T22:00:00Z", duration_minutes=40)
    add_session(store, start_time="2024-01-03T11:00:00Z", duration_minutes=300, status="abandoned")

    analytics = get_focus_analytics(store, "user-1", now=NOW)

    assert analytics.average_minutes == 48
    assert analytics.longest_minutes == 90
    assert analytics.weekly_hours == pytest.approx((1.0, 0, 2.0, 0, 0, 0, 0))
    assert analytics.hourly_sessions[9] == 3
    assert analytics.hourly_sessions[14] == 1
    assert analytics.hourly_sessions[22] == 1
    assert sum(analytics.hourly_sessions) == 5
    assert analytics.peak_hour == 9


def test_focus_analytics_week_window_includes_six_days_back(store):
    add_session(store, start_time="2023-12-28T09:00:00Z", duration_minutes=30)
    add_session(store, start_time="2023-12-27T09:00:00Z", duration_minutes=60)

    analytics = get_focus_analytics(store, "user-1", now=NOW)

    # 2023-12-28 is a Thursday; 2023-12-27 falls outside the window.
    assert analytics.weekly_hours == pytest.approx((0, 0, 0, 0.5, 0, 0, 0))


def test_focus_analytics_use_local_hours(store):
    add_session(store, start_time="2024-01-03T07:30:00Z")
    now = datetime.fromisoformat("2024-01-03T12:00:00+02:00")

    assert get_focus_analytics(store, "user-1", now=now).peak_hour == 9


def test_focus_analytics_without_sessions_are_empty(store):
    assert get_focus_analytics(store, "user-1", now=NOW) == FocusAnalytics()
    assert get_focus_analytics(store, None, now=NOW) == FocusAnalytics()
