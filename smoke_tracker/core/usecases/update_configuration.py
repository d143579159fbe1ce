"""Apply settings changes to the stored configuration."""

from __future__ import annotations

import datetime as dt

from smoke_tracker.core.entities.configuration import Configuration
from smoke_tracker.core.metrics import ensure_aware
from smoke_tracker.core.state import TrackerState


def execute(state: TrackerState, now: dt.datetime | None = None, **changes) -> Configuration:
    """Validate and persist ``changes``; raises ValidationError / PersistenceError."""
    now = ensure_aware(now, state.tz) if now else dt.datetime.now(state.tz)
    if isinstance(changes.get("quit_date"), dt.datetime):
        changes["quit_date"] = ensure_aware(changes["quit_date"], state.tz)
    return state.config_store.update(now=now, **changes)
