"""Use case listing health milestones with their achieved flag."""

from __future__ import annotations

import datetime as dt
from typing import List, Tuple

from smoke_tracker.core import metrics
from smoke_tracker.core.entities.milestone import MILESTONES, Milestone
from smoke_tracker.core.state import TrackerState
from smoke_tracker.core.usecases.compute_dashboard_stats import check_quit_date


def execute(state: TrackerState, now: dt.datetime) -> List[Tuple[Milestone, bool]]:
    now = metrics.ensure_aware(now, state.tz)
    quit_date = state.config_store.get().quit_date
    check_quit_date(quit_date, now)
    return metrics.milestone_status(metrics.hours_since_quit(quit_date, now), MILESTONES)
