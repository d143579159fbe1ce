"""SQLAlchemy implementations of the event log repositories."""

from __future__ import annotations

import datetime as dt
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import MoodType, SmokingEvent, TriggerType
from smoke_tracker.core.errors import PersistenceError
from smoke_tracker.core.interfaces.repositories.event_repo import (
    AbstractCravingRepository,
    AbstractSmokingEventRepository,
)
from smoke_tracker.dataproviders.db import session_scope
from smoke_tracker.dataproviders.repositories._models import CravingModel, SmokingEventModel


def to_db_time(value: dt.datetime) -> dt.datetime:
    """Aware datetime -> naive UTC for storage."""
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)


def from_db_time(value: dt.datetime) -> dt.datetime:
    return value.replace(tzinfo=dt.timezone.utc)


class SqlAlchemySmokingEventRepository(AbstractSmokingEventRepository):
    """SQLAlchemy implementation for SmokingEvent repository."""

    def _to_entity(self, model: SmokingEventModel) -> SmokingEvent:
        return SmokingEvent(
            id=model.id,
            timestamp=from_db_time(model.timestamp),
            trigger_type=TriggerType(model.trigger_type),
            location=model.location or "",
            mood=MoodType(model.mood),
            notes=model.notes or "",
        )

    def add(self, event: SmokingEvent) -> None:
        try:
            with session_scope() as session:
                session.add(
                    SmokingEventModel(
                        id=event.id,
                        timestamp=to_db_time(event.timestamp),
                        trigger_type=event.trigger_type.value,
                        location=event.location,
                        mood=event.mood.value,
                        notes=event.notes,
                    )
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not save smoking event {event.id}: {exc}") from exc

    def list_all(self) -> List[SmokingEvent]:
        try:
            with session_scope() as session:
                models = session.scalars(select(SmokingEventModel).order_by(SmokingEventModel.seq)).all()
                return [self._to_entity(m) for m in models]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not load smoking events: {exc}") from exc
        except ValueError as exc:
            raise PersistenceError(f"corrupt smoking event row: {exc}") from exc


class SqlAlchemyCravingRepository(AbstractCravingRepository):
    """SQLAlchemy implementation for CravingEvent repository."""

    def _to_entity(self, model: CravingModel) -> CravingEvent:
        return CravingEvent(
            id=model.id,
            timestamp=from_db_time(model.timestamp),
            intensity=model.intensity,
            duration=model.duration,
            coping_strategy=model.coping_strategy or "",
            was_successful=bool(model.was_successful),
        )

    def add(self, craving: CravingEvent) -> None:
        try:
            with session_scope() as session:
                session.add(
                    CravingModel(
                        id=craving.id,
                        timestamp=to_db_time(craving.timestamp),
                        intensity=craving.intensity,
                        duration=float(craving.duration),
                        coping_strategy=craving.coping_strategy,
                        was_successful=craving.was_successful,
                    )
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not save craving {craving.id}: {exc}") from exc

    def list_all(self) -> List[CravingEvent]:
        try:
            with session_scope() as session:
                models = session.scalars(select(CravingModel).order_by(CravingModel.seq)).all()
                return [self._to_entity(m) for m in models]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not load cravings: {exc}") from exc
