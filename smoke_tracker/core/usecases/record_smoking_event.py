"""Register a smoking session (relapse) in the event log."""

from __future__ import annotations

import datetime as dt

from smoke_tracker.core.entities.smoking_event import MoodType, SmokingEvent, TriggerType, parse_tag
from smoke_tracker.core.state import TrackerState


def execute(
    state: TrackerState,
    *,
    trigger_type: TriggerType | str,
    mood: MoodType | str,
    location: str = "",
    notes: str = "",
    timestamp: dt.datetime | None = None,
    now: dt.datetime | None = None,
) -> SmokingEvent:
    """Append a smoking event; ``timestamp`` may be backdated and defaults to now."""
    if timestamp is None:
        timestamp = now or dt.datetime.now(state.tz)

    event = SmokingEvent(
        timestamp=timestamp,
        trigger_type=parse_tag(TriggerType, trigger_type, "trigger_type"),
        mood=parse_tag(MoodType, mood, "mood"),
        location=location.strip(),
        notes=notes.strip(),
    )
    return state.event_log.append(event)
