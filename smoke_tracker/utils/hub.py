"""Utilities to generate the dashboard (hub) message and its keyboards."""

from __future__ import annotations

import datetime as dt
import html
from typing import Iterable, Sequence, Tuple

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from smoke_tracker.core.entities.configuration import Configuration
from smoke_tracker.core.entities.coping_strategy import CopingStrategy
from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.milestone import Milestone
from smoke_tracker.core.entities.smoking_event import MoodType, SmokingEvent, TriggerType
from smoke_tracker.core.entities.stats import DayProgress, StatsSnapshot

# Presentation lookup tables, keyed by the stable tag
TRIGGER_ICONS: dict[str, str] = {
    TriggerType.STRESS.value: "⚠️",
    TriggerType.SOCIAL.value: "👥",
    TriggerType.BOREDOM.value: "🕒",
    TriggerType.HABIT.value: "🔁",
    TriggerType.ALCOHOL.value: "🍷",
    TriggerType.BREAK.value: "⏸",
}

MOOD_EMOJI: dict[str, str] = {
    MoodType.HAPPY.value: "😊",
    MoodType.STRESSED.value: "😰",
    MoodType.ANXIOUS.value: "😟",
    MoodType.RELAXED.value: "😌",
    MoodType.SAD.value: "😢",
    MoodType.NEUTRAL.value: "😐",
}


def progress_bar(current: int, total: int, length: int = 10) -> str:
    if total <= 0:
        return ""  # avoid div/zero
    filled = int((current / total) * length)
    filled = min(max(filled, 0), length)
    return "🟩" * filled + "⬜" * (length - filled)


def build_weekly_line(progress: Iterable[DayProgress]) -> str:
    # oldest day on the left
    return "".join("🟥" if day.smoked else "🟩" for day in reversed(tuple(progress)))


def build_hub_text(stats: StatsSnapshot, config: Configuration) -> str:
    lines: list[str] = ["🚭 <b>Smoke-free dashboard</b>"]

    lines.append(f"Days smoke-free: <b>{stats.days_since_quit}</b>")
    lines.append(f"Current streak: {stats.current_streak} days")
    lines.append(f"Cigarettes avoided: {stats.cigarettes_avoided}")
    lines.append(f"Money saved: ${stats.money_saved:.2f}")

    lines.append("")
    lines.append(f"Last 7 days: {build_weekly_line(stats.weekly_progress)}")
    lines.append(
        f"Cravings today: {stats.cravings_today}  "
        f"(resisted {stats.craving_success_rate:.0f}% overall)"
    )

    lines.append("")
    lines.append(f"Quit date: {config.quit_date:%Y-%m-%d}")
    lines.append(f"Sessions logged: {stats.total_sessions} · Cravings tracked: {stats.total_cravings}")

    return "\n".join(lines)


def build_milestones_text(statuses: Sequence[Tuple[Milestone, bool]], hours_since_quit: int) -> str:
    lines: list[str] = ["🏅 <b>Health milestones</b>"]
    achieved = sum(1 for _, done in statuses if done)
    lines.append(f"{achieved}/{len(statuses)}  {progress_bar(achieved, len(statuses))}")
    for milestone, done in statuses:
        mark = "✅" if done else "⏳"
        line = f"{mark} <b>{milestone.title}</b>: {milestone.description}"
        if not done:
            line += f" (in {milestone.hours_required - hours_since_quit} h)"
        lines.append(line)
    return "\n".join(lines)


def build_strategies_text(strategies: Iterable[CopingStrategy]) -> str:
    lines = ["🧘 <b>Craving strategies</b>"]
    lines.extend(f"• <b>{s.title}</b>: {s.description}" for s in strategies)
    return "\n".join(lines)


def format_countdown(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_ago(when: dt.datetime, now: dt.datetime) -> str:
    """Short relative time, e.g. ``5 min ago``."""
    minutes = int((now - when).total_seconds()) // 60
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if minutes < 24 * 60:
        return f"{minutes // 60} h ago"
    return f"{minutes // (24 * 60)} d ago"


def build_recent_sessions_text(sessions: Sequence[SmokingEvent], now: dt.datetime, limit: int = 3) -> str:
    """Newest ``limit`` sessions first. User text is HTML-escaped."""
    lines = ["🚬 <b>Recent sessions</b>"]
    if not sessions:
        lines.append("<i>No sessions recorded yet</i>")
        return "\n".join(lines)
    for session in reversed(sessions[-limit:]):
        trigger = session.trigger_type.value
        line = f"{TRIGGER_ICONS[trigger]} {trigger} {MOOD_EMOJI[session.mood.value]} · {format_ago(session.timestamp, now)}"
        if session.location:
            line += f" · 📍 {html.escape(session.location)}"
        lines.append(line)
    return "\n".join(lines)


def build_recent_cravings_text(cravings: Sequence[CravingEvent], now: dt.datetime, limit: int = 5) -> str:
    lines = ["😤 <b>Recent cravings</b>"]
    if not cravings:
        lines.append("<i>No cravings recorded yet</i>")
        return "\n".join(lines)
    for craving in reversed(cravings[-limit:]):
        mark = "✅" if craving.was_successful else "❌"
        line = (
            f"{mark} Intensity {craving.intensity}/10 · {format_countdown(int(craving.duration))}"
            f" · {format_ago(craving.timestamp, now)}"
        )
        if craving.coping_strategy:
            line += f" · {html.escape(craving.coping_strategy)}"
        lines.append(line)
    return "\n".join(lines)


def build_hub_keyboard() -> InlineKeyboardMarkup:
    row1 = [
        InlineKeyboardButton(text="🚬 I smoked", callback_data="SMOKE_NOW"),
        InlineKeyboardButton(text="😤 Craving", callback_data="CRAVING"),
    ]
    row2 = [
        InlineKeyboardButton(text="🏅 Milestones", callback_data="MILESTONES"),
        InlineKeyboardButton(text="🔄 Refresh", callback_data="REFRESH"),
    ]
    return InlineKeyboardMarkup(inline_keyboard=[row1, row2])


def build_trigger_keyboard() -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(text=f"{TRIGGER_ICONS[t.value]} {t.value}", callback_data=f"TRIGGER:{t.value}")
        for t in TriggerType
    ]
    return InlineKeyboardMarkup(inline_keyboard=[buttons[:3], buttons[3:]])


def build_mood_keyboard() -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(text=f"{MOOD_EMOJI[m.value]} {m.value}", callback_data=f"MOOD:{m.value}")
        for m in MoodType
    ]
    return InlineKeyboardMarkup(inline_keyboard=[buttons[:3], buttons[3:]])


def build_intensity_keyboard() -> InlineKeyboardMarkup:
    buttons = [InlineKeyboardButton(text=str(i), callback_data=f"INTENSITY:{i}") for i in range(1, 11)]
    return InlineKeyboardMarkup(inline_keyboard=[buttons[:5], buttons[5:]])


def build_craving_keyboard(strategies: Sequence[CopingStrategy] = ()) -> InlineKeyboardMarkup:
    """Strategy picks (by catalog index) two per row, outcome buttons last."""
    buttons = [
        InlineKeyboardButton(text=s.title, callback_data=f"STRATEGY:{i}") for i, s in enumerate(strategies)
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    rows.append(
        [
            InlineKeyboardButton(text="💪 I made it", callback_data="CRAVING_RESISTED"),
            InlineKeyboardButton(text="🚬 I smoked", callback_data="CRAVING_FAILED"),
        ]
    )
    return InlineKeyboardMarkup(inline_keyboard=rows)
