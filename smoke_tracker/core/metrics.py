"""Derived statistics computed from configuration, event log and the current instant.

Every function here is pure: no I/O, no clock reads, no mutation. Day-boundary
logic uses calendar days in the caller-supplied local time zone rather than
24-hour windows.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Sequence, Tuple

from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.milestone import Milestone
from smoke_tracker.core.entities.smoking_event import SmokingEvent
from smoke_tracker.core.entities.stats import DayProgress

ONE_HOUR = dt.timedelta(hours=1)
ONE_DAY = dt.timedelta(days=1)


def ensure_aware(instant: dt.datetime, tz: dt.tzinfo) -> dt.datetime:
    """Interpret a naive datetime as local time in ``tz``."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant


def calendar_day(instant: dt.datetime, tz: dt.tzinfo) -> dt.date:
    return ensure_aware(instant, tz).astimezone(tz).date()


def days_since_quit(quit_date: dt.datetime, now: dt.datetime, tz: dt.tzinfo) -> int:
    """Whole calendar days between the quit date and now (0 for a future quit date)."""
    days = (calendar_day(now, tz) - calendar_day(quit_date, tz)).days
    return max(0, days)


def hours_since_quit(quit_date: dt.datetime, now: dt.datetime) -> int:
    return (now - quit_date) // ONE_HOUR


def cigarettes_avoided(days: int, cigarettes_per_day_before: int, session_count: int) -> int:
    # session_count is the all-time total, including sessions logged before the quit date
    return max(0, days * cigarettes_per_day_before - session_count)


def money_saved(avoided: int, cigarettes_per_pack: int, price_per_pack: float) -> float:
    return avoided / cigarettes_per_pack * price_per_pack


def current_streak(
    events: Iterable[SmokingEvent],
    quit_date: dt.datetime,
    now: dt.datetime,
    tz: dt.tzinfo,
) -> int:
    """Consecutive smoke-free calendar days before today.

    Scans backwards from today down to the quit date's day. Today never counts
    (it is still in progress) but an event today ends the scan immediately.
    """
    smoked_days = {calendar_day(e.timestamp, tz) for e in events}
    today = calendar_day(now, tz)
    first_day = calendar_day(quit_date, tz)

    streak = 0
    day = today
    while day >= first_day:
        if day in smoked_days:
            break
        if day < today:
            streak += 1
        day -= ONE_DAY
    return streak


def milestone_status(hours: int, milestones: Sequence[Milestone]) -> List[Tuple[Milestone, bool]]:
    return [(m, hours >= m.hours_required) for m in milestones]


def craving_success_rate(cravings: Sequence[CravingEvent]) -> float:
    """Percentage of successful cravings, 0 for an empty collection."""
    total = len(cravings)
    if total == 0:
        return 0.0
    successful = sum(1 for c in cravings if c.was_successful)
    return successful / total * 100


def cravings_today(cravings: Iterable[CravingEvent], now: dt.datetime, tz: dt.tzinfo) -> int:
    today = calendar_day(now, tz)
    return sum(1 for c in cravings if calendar_day(c.timestamp, tz) == today)


def weekly_progress(
    events: Iterable[SmokingEvent],
    now: dt.datetime,
    tz: dt.tzinfo,
    days: int = 7,
) -> Tuple[DayProgress, ...]:
    """Smoked / smoke-free flag per day, today first."""
    smoked_days = {calendar_day(e.timestamp, tz) for e in events}
    today = calendar_day(now, tz)
    return tuple(
        DayProgress(day=today - offset * ONE_DAY, smoked=(today - offset * ONE_DAY) in smoked_days)
        for offset in range(days)
    )
