"""Repository interfaces for the append-only event log."""

from __future__ import annotations

import abc
from typing import List, Protocol

from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import SmokingEvent


class AbstractSmokingEventRepository(Protocol):
    """Contract for persisting smoking events.

    Implementations raise ``PersistenceError`` on any storage or decode failure.
    """

    @abc.abstractmethod
    def add(self, event: SmokingEvent) -> None: ...

    @abc.abstractmethod
    def list_all(self) -> List[SmokingEvent]:
        """Return every stored event in insertion order."""


class AbstractCravingRepository(Protocol):
    """Contract for persisting craving episodes."""

    @abc.abstractmethod
    def add(self, craving: CravingEvent) -> None: ...

    @abc.abstractmethod
    def list_all(self) -> List[CravingEvent]: ...
