"""Errors surfaced by the tracker engine."""

from __future__ import annotations


class TrackerError(Exception):
    pass


class ValidationError(TrackerError):
    """A field violates its declared bound."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PersistenceError(TrackerError):
    """Durable state could not be read or written."""
