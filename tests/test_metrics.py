"""
Tests for the pure metrics engine

Covers day/hour arithmetic, streak scan, avoidance and savings,
milestones and craving statistics.
"""

import datetime as dt
from zoneinfo import ZoneInfo

import pytest

from smoke_tracker.core import metrics
from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.milestone import MILESTONES
from smoke_tracker.core.entities.smoking_event import MoodType, SmokingEvent, TriggerType
from tests.conftest import UTC, at


def smoke(when: dt.datetime) -> SmokingEvent:
    return SmokingEvent(timestamp=when, trigger_type=TriggerType.HABIT, mood=MoodType.NEUTRAL)


def craving(when: dt.datetime, successful: bool = True) -> CravingEvent:
    return CravingEvent(timestamp=when, intensity=5, duration=60.0, was_successful=successful)


# ============================================
# Days / hours since quit
# ============================================


def test_days_since_quit_uses_calendar_days():
    quit_date = dt.datetime(2025, 1, 1, 23, 0, tzinfo=UTC)
    now = dt.datetime(2025, 1, 2, 1, 0, tzinfo=UTC)
    # only two hours elapsed, but a calendar day boundary was crossed
    assert metrics.days_since_quit(quit_date, now, UTC) == 1


def test_days_since_quit_same_day_is_zero():
    assert metrics.days_since_quit(at(0, 1), at(0, 23), UTC) == 0


def test_days_since_quit_future_quit_date_clamps_to_zero():
    assert metrics.days_since_quit(at(3), at(0), UTC) == 0


def test_days_since_quit_respects_local_timezone():
    tz = ZoneInfo("America/New_York")
    # 03:00 UTC on Jan 2 is still Jan 1 in New York
    quit_date = dt.datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
    now = dt.datetime(2025, 1, 2, 3, 0, tzinfo=UTC)
    assert metrics.days_since_quit(quit_date, now, UTC) == 1
    assert metrics.days_since_quit(quit_date, now, tz) == 0


def test_hours_since_quit_floors():
    quit_date = at(0, 0)
    assert metrics.hours_since_quit(quit_date, quit_date + dt.timedelta(hours=24, minutes=59)) == 24
    assert metrics.hours_since_quit(quit_date, quit_date + dt.timedelta(minutes=59)) == 0


# ============================================
# Current streak
# ============================================


def test_streak_no_events_counts_days_before_today():
    # quit day 0, now day 5: days 4..0 are smoke-free, today excluded
    assert metrics.current_streak([], at(0, 8), at(5), UTC) == 5


def test_streak_stops_at_day_with_event():
    events = [smoke(at(3, 18))]
    # day 4 counts, day 3 has an event and ends the scan
    assert metrics.current_streak(events, at(0, 8), at(5), UTC) == 1


def test_streak_event_today_is_zero():
    events = [smoke(at(5, 9))]
    assert metrics.current_streak(events, at(0, 8), at(5, 20), UTC) == 0


def test_streak_event_yesterday_is_zero():
    events = [smoke(at(4, 23, 59))]
    assert metrics.current_streak(events, at(0, 8), at(5), UTC) == 0


def test_streak_quit_today_is_zero():
    assert metrics.current_streak([], at(5, 6), at(5, 20), UTC) == 0


def test_streak_ignores_events_before_quit_day():
    events = [smoke(at(-2))]
    assert metrics.current_streak(events, at(0, 8), at(3), UTC) == 3


def test_streak_uses_latest_relapse_regardless_of_insertion_order():
    events = [smoke(at(4)), smoke(at(1))]
    assert metrics.current_streak(events, at(0, 8), at(7), UTC) == 2


def test_streak_day_boundaries_follow_local_timezone():
    tz = ZoneInfo("Europe/Berlin")
    # 23:30 UTC on Jan 3 is 00:30 on Jan 4 in Berlin
    events = [smoke(dt.datetime(2025, 1, 3, 23, 30, tzinfo=UTC))]
    now = dt.datetime(2025, 1, 5, 12, 0, tzinfo=tz)
    quit_date = dt.datetime(2025, 1, 1, 9, 0, tzinfo=tz)

    assert metrics.current_streak(events, quit_date, now, UTC) == 1
    assert metrics.current_streak(events, quit_date, now, tz) == 0


# ============================================
# Avoidance and savings
# ============================================


def test_cigarettes_avoided_basic():
    assert metrics.cigarettes_avoided(10, 10, 5) == 95


@pytest.mark.parametrize(
    "days,per_day,sessions",
    [(0, 10, 0), (0, 10, 3), (1, 1, 50), (3, 20, 61), (365, 50, 0)],
)
def test_cigarettes_avoided_never_negative(days, per_day, sessions):
    assert metrics.cigarettes_avoided(days, per_day, sessions) >= 0


def test_money_saved_scenario():
    avoided = metrics.cigarettes_avoided(10, 10, 5)
    assert metrics.money_saved(avoided, 20, 8.0) == pytest.approx(38.0)


def test_money_saved_zero_when_nothing_avoided():
    assert metrics.money_saved(0, 20, 8.0) == 0


# ============================================
# Milestones
# ============================================


def test_milestone_status_at_24_hours():
    statuses = metrics.milestone_status(24, MILESTONES)
    achieved = {m.hours_required for m, done in statuses if done}
    assert achieved == {0, 12, 24}
    assert [m for m, _ in statuses] == list(MILESTONES)


def test_milestone_status_is_monotonic():
    previous: set = set()
    for hours in range(0, 9000, 7):
        current = {m.title for m, done in metrics.milestone_status(hours, MILESTONES) if done}
        assert previous <= current
        previous = current
    assert len(previous) == len(MILESTONES)


def test_milestone_list_is_fixed():
    assert len(MILESTONES) == 9
    assert MILESTONES[0].hours_required == 0
    assert MILESTONES[-1].hours_required == 8760
    hours = [m.hours_required for m in MILESTONES]
    assert hours == sorted(hours)


# ============================================
# Cravings
# ============================================


def test_craving_success_rate_empty():
    assert metrics.craving_success_rate([]) == 0


def test_craving_success_rate_all_successful():
    assert metrics.craving_success_rate([craving(at(1)), craving(at(2))]) == 100


def test_craving_success_rate_partial():
    cravings = [craving(at(1), False), craving(at(1)), craving(at(2), False), craving(at(3), False)]
    assert metrics.craving_success_rate(cravings) == pytest.approx(25.0)


def test_cravings_today_counts_calendar_day_only():
    cravings = [craving(at(5, 0, 5)), craving(at(5, 22)), craving(at(4, 23, 59)), craving(at(6, 0))]
    assert metrics.cravings_today(cravings, at(5, 23), UTC) == 2


# ============================================
# Weekly progress
# ============================================


def test_weekly_progress_today_first():
    events = [smoke(at(10, 7)), smoke(at(8))]
    progress = metrics.weekly_progress(events, at(10, 20), UTC)

    assert len(progress) == 7
    assert progress[0].day == at(10).date()
    assert progress[-1].day == at(4).date()
    assert [p.smoked for p in progress] == [True, False, True, False, False, False, False]
