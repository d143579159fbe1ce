"""Register a finished craving episode."""

from __future__ import annotations

import datetime as dt

from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.state import TrackerState


def execute(
    state: TrackerState,
    *,
    intensity: int,
    duration: float,
    was_successful: bool,
    coping_strategy: str = "",
    timestamp: dt.datetime | None = None,
    now: dt.datetime | None = None,
) -> CravingEvent:
    """Append a craving; ``timestamp`` is the episode start (defaults to now - duration)."""
    if timestamp is None:
        end = now or dt.datetime.now(state.tz)
        timestamp = end - dt.timedelta(seconds=max(duration, 0))

    craving = CravingEvent(
        timestamp=timestamp,
        intensity=intensity,
        duration=duration,
        was_successful=was_successful,
        coping_strategy=coping_strategy.strip(),
    )
    return state.event_log.append(craving)
