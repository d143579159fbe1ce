"""Build the dashboard statistics snapshot for a given instant."""

from __future__ import annotations

import datetime as dt

from smoke_tracker.core import metrics
from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import SmokingEvent
from smoke_tracker.core.entities.stats import StatsSnapshot
from smoke_tracker.core.errors import ValidationError
from smoke_tracker.core.state import TrackerState


def check_quit_date(quit_date: dt.datetime, now: dt.datetime) -> None:
    if quit_date > now:
        raise ValidationError("quit_date", "quit date is in the future")


def execute(state: TrackerState, now: dt.datetime) -> StatsSnapshot:
    tz = state.tz
    now = metrics.ensure_aware(now, tz)
    config = state.config_store.get()
    sessions = state.event_log.all(SmokingEvent)
    cravings = state.event_log.all(CravingEvent)
    check_quit_date(config.quit_date, now)

    days = metrics.days_since_quit(config.quit_date, now, tz)
    avoided = metrics.cigarettes_avoided(days, config.cigarettes_per_day_before, len(sessions))

    return StatsSnapshot(
        days_since_quit=days,
        hours_since_quit=metrics.hours_since_quit(config.quit_date, now),
        current_streak=metrics.current_streak(sessions, config.quit_date, now, tz),
        cigarettes_avoided=avoided,
        money_saved=metrics.money_saved(avoided, config.cigarettes_per_pack, config.price_per_pack),
        cravings_today=metrics.cravings_today(cravings, now, tz),
        craving_success_rate=metrics.craving_success_rate(cravings),
        total_sessions=len(sessions),
        total_cravings=len(cravings),
        weekly_progress=metrics.weekly_progress(sessions, now, tz),
    )
