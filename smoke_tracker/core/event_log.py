"""Append-only in-memory event log backed by the event repositories."""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import uuid
from collections.abc import Sequence
from typing import Generic, List, TypeVar, Union, overload

from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import SmokingEvent
from smoke_tracker.core.errors import PersistenceError, ValidationError
from smoke_tracker.core.interfaces.repositories.event_repo import (
    AbstractCravingRepository,
    AbstractSmokingEventRepository,
)
from smoke_tracker.core.metrics import ensure_aware

logger = logging.getLogger(__name__)

Event = Union[SmokingEvent, CravingEvent]
E = TypeVar("E", SmokingEvent, CravingEvent)


class EventSequence(Sequence, Generic[E]):
    """Read-only view over the first ``length`` stored events.

    Iterating never copies the log and can be repeated; events appended after
    the view was taken are not visible through it.
    """

    __slots__ = ("_items", "_length")

    def __init__(self, items: List[E], length: int) -> None:
        self._items = items
        self._length = length

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> E: ...

    @overload
    def __getitem__(self, index: slice) -> List[E]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._items[i] for i in range(*index.indices(self._length))]
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("event index out of range")
        return self._items[index]

    def __repr__(self) -> str:
        return f"EventSequence(len={self._length})"


class EventLog:
    def __init__(
        self,
        smoking_repo: AbstractSmokingEventRepository,
        craving_repo: AbstractCravingRepository,
        tz: dt.tzinfo,
        sessions: List[SmokingEvent] | None = None,
        cravings: List[CravingEvent] | None = None,
    ) -> None:
        self._smoking_repo = smoking_repo
        self._craving_repo = craving_repo
        self._tz = tz
        self._sessions: List[SmokingEvent] = list(sessions or [])
        self._cravings: List[CravingEvent] = list(cravings or [])

    @classmethod
    def load(
        cls,
        smoking_repo: AbstractSmokingEventRepository,
        craving_repo: AbstractCravingRepository,
        tz: dt.tzinfo,
    ) -> "EventLog":
        """Build the log from storage; an unreadable kind starts out empty."""
        try:
            sessions = smoking_repo.list_all()
        except PersistenceError as exc:
            logger.warning("Could not load smoking sessions, starting with an empty log: %s", exc)
            sessions = []
        try:
            cravings = craving_repo.list_all()
        except PersistenceError as exc:
            logger.warning("Could not load cravings, starting with an empty log: %s", exc)
            cravings = []
        return cls(smoking_repo, craving_repo, tz, sessions, cravings)

    def append(self, event: E) -> E:
        """Store ``event`` and return the stored copy (with id assigned).

        Plain string tags are accepted; a type-level violation raises
        ValidationError before anything is stored.
        The event is kept in memory even if persisting it fails; the
        PersistenceError is re-raised so the caller can tell the user.
        """
        if isinstance(event, CravingEvent):
            target, repo = self._cravings, self._craving_repo
        elif isinstance(event, SmokingEvent):
            event = event.with_parsed_tags()
            target, repo = self._sessions, self._smoking_repo
        else:
            raise ValidationError("event", f"unsupported event type {type(event).__name__}")
        event.validate()

        stored = dataclasses.replace(
            event,
            id=event.id or uuid.uuid4().hex,
            timestamp=ensure_aware(event.timestamp, self._tz),
        )
        target.append(stored)
        repo.add(stored)
        logger.info("Recorded %s %s", type(stored).__name__, stored.id)
        return stored

    @overload
    def all(self, kind: type[SmokingEvent]) -> EventSequence[SmokingEvent]: ...

    @overload
    def all(self, kind: type[CravingEvent]) -> EventSequence[CravingEvent]: ...

    def all(self, kind):
        if kind is SmokingEvent:
            return EventSequence(self._sessions, len(self._sessions))
        if kind is CravingEvent:
            return EventSequence(self._cravings, len(self._cravings))
        raise ValidationError("kind", f"unsupported event kind {kind!r}")
