"""Read-only results produced by the metrics engine."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class DayProgress:
    day: dt.date
    smoked: bool


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    days_since_quit: int
    hours_since_quit: int
    current_streak: int
    cigarettes_avoided: int
    money_saved: float
    cravings_today: int
    craving_success_rate: float
    total_sessions: int
    total_cravings: int
    weekly_progress: tuple[DayProgress, ...] = field(default_factory=tuple)
