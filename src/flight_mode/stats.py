"""Dashboard statistics and focus analytics computed from completed local sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from flight_mode.local_store import LocalStore
from flight_mode.local_store.record_ops import STATUS_COMPLETED, parse_iso_timestamp

logger = logging.getLogger(__name__)

STATS_SESSION_LIMIT = 1000


@dataclass(frozen=True)
class SessionStats:
    today_minutes: int = 0
    total_flights: int = 0
    streak: int = 0


@dataclass(frozen=True)
class FocusAnalytics:
    """Aggregates behind the stats screen.

    ``weekly_hours`` is indexed Monday=0 .. Sunday=6 and covers the last seven
    local days including today. ``hourly_sessions`` counts session starts per
    local hour of day across all completed sessions.
    """

    average_minutes: int = 0
    longest_minutes: int = 0
    weekly_hours: tuple[float, ...] = (0.0,) * 7
    hourly_sessions: tuple[int, ...] = (0,) * 24
    peak_hour: int | None = None


def _local_time(value: Any, now: datetime) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=now.tzinfo)
    return parsed.astimezone(now.tzinfo)


def _local_day(value: Any, now: datetime) -> date | None:
    local = _local_time(value, now)
    return local.date() if local is not None else None


def _duration(session: dict[str, Any]) -> int:
    try:
        return int(session.get("duration_minutes") or 0)
    except (TypeError, ValueError):
        logger.debug("Ignoring bad duration on session %s", session.get("id"))
        return 0


def _resolve_now(now: datetime | None) -> datetime:
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    return now


def _streak(days: set[date], today: date) -> int:
    """Consecutive days with a session, ending today or yesterday."""
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def get_session_stats(
    store: LocalStore, user_id: str | None, *, now: datetime | None = None
) -> SessionStats:
    if not user_id:
        return SessionStats()

    now = _resolve_now(now)
    sessions = store.get_sessions_by_user(
        user_id, status=STATUS_COMPLETED, limit=STATS_SESSION_LIMIT
    )

    today = now.date()
    today_minutes = 0
    days: set[date] = set()
    for session in sessions:
        day = _local_day(session.get("start_time"), now)
        if day is None:
            continue
        days.add(day)
        if day >= today:
            today_minutes += _duration(session)

    return SessionStats(
        today_minutes=today_minutes,
        total_flights=len(sessions),
        streak=_streak(days, today),
    )


def get_focus_analytics(
    store: LocalStore, user_id: str | None, *, now: datetime | None = None
) -> FocusAnalytics:
    if not user_id:
        return FocusAnalytics()

    now = _resolve_now(now)
    sessions = store.get_sessions_by_user(
        user_id, status=STATUS_COMPLETED, limit=STATS_SESSION_LIMIT
    )
    if not sessions:
        return FocusAnalytics()

    durations = [_duration(session) for session in sessions]
    week_start = now.date() - timedelta(days=6)
    weekly_minutes = [0] * 7
    hourly = [0] * 24
    for session, minutes in zip(sessions, durations):
        started = _local_time(session.get("start_time"), now)
        if started is None:
            continue
        hourly[started.hour] += 1
        if week_start <= started.date() <= now.date():
            weekly_minutes[started.weekday()] += minutes

    peak_hour = max(range(24), key=lambda hour: hourly[hour]) if any(hourly) else None
    return FocusAnalytics(
        average_minutes=round(sum(durations) / len(durations)),
        longest_minutes=max(durations),
        weekly_hours=tuple(minutes / 60 for minutes in weekly_minutes),
        hourly_sessions=tuple(hourly),
        peak_hour=peak_hour,
    )
