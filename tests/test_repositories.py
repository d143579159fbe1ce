"""Round-trip tests for the SQLAlchemy persistence adapter"""
import datetime as dt

import pytest
from sqlalchemy import text

from smoke_tracker.core.entities.configuration import Configuration
from smoke_tracker.core.entities.craving import CravingEvent
from smoke_tracker.core.entities.smoking_event import MoodType, SmokingEvent, TriggerType
from smoke_tracker.core.errors import PersistenceError
from smoke_tracker.core.state import TrackerState
from smoke_tracker.dataproviders.db import session_scope
from smoke_tracker.dataproviders.repositories._models import SettingModel
from smoke_tracker.dataproviders.repositories.config_repository import SqlAlchemyConfigurationRepository
from smoke_tracker.dataproviders.repositories.event_repository import (
    SqlAlchemyCravingRepository,
    SqlAlchemySmokingEventRepository,
)
from tests.conftest import DAY0, UTC, at

NOW = at(10)


# ============================================
# Events
# ============================================


def test_smoking_event_round_trip(db):
    repo = SqlAlchemySmokingEventRepository()
    event = SmokingEvent(
        id="e1",
        timestamp=dt.datetime(2025, 1, 3, 21, 15, 7, 123456, tzinfo=UTC),
        trigger_type=TriggerType.BREAK,
        location="Office balcony",
        mood=MoodType.STRESSED,
        notes="deadline",
    )
    repo.add(event)

    assert repo.list_all() == [event]


def test_every_tag_round_trips(db):
    repo = SqlAlchemySmokingEventRepository()
    events = [
        SmokingEvent(id=f"t{i}", timestamp=at(1), trigger_type=trigger, mood=mood)
        for i, (trigger, mood) in enumerate(zip(TriggerType, MoodType))
    ]
    for event in events:
        repo.add(event)

    assert repo.list_all() == events
    with session_scope() as session:
        stored = session.execute(text("SELECT trigger_type, mood FROM smoking_events ORDER BY seq")).all()
    assert [tuple(row) for row in stored] == [(t.value, m.value) for t, m in zip(TriggerType, MoodType)]


def test_insertion_order_is_kept(db):
    repo = SqlAlchemySmokingEventRepository()
    for event_id, day in (("late", 9), ("early", 1), ("middle", 5)):
        repo.add(SmokingEvent(id=event_id, timestamp=at(day), trigger_type=TriggerType.HABIT, mood=MoodType.SAD))

    assert [e.id for e in repo.list_all()] == ["late", "early", "middle"]


def test_non_utc_timestamp_keeps_instant(db):
    repo = SqlAlchemySmokingEventRepository()
    local = dt.datetime(2025, 1, 3, 23, 30, tzinfo=dt.timezone(dt.timedelta(hours=-5)))
    repo.add(SmokingEvent(id="x", timestamp=local, trigger_type=TriggerType.SOCIAL, mood=MoodType.HAPPY))

    assert repo.list_all()[0].timestamp == local


def test_craving_round_trip(db):
    repo = SqlAlchemyCravingRepository()
    cravings = [
        CravingEvent(id="c1", timestamp=at(2, 7), intensity=9, duration=301.25, was_successful=True,
                     coping_strategy="Deep Breathing"),
        CravingEvent(id="c2", timestamp=at(2, 9), intensity=1, duration=0.0, was_successful=False),
    ]
    for craving in cravings:
        repo.add(craving)

    assert repo.list_all() == cravings


def test_duplicate_id_raises_persistence_error(db):
    repo = SqlAlchemyCravingRepository()
    craving = CravingEvent(id="dup", timestamp=at(1), intensity=3, duration=10.0, was_successful=True)
    repo.add(craving)
    with pytest.raises(PersistenceError):
        repo.add(craving)


def test_corrupt_tag_raises_persistence_error(db):
    repo = SqlAlchemySmokingEventRepository()
    repo.add(SmokingEvent(id="x", timestamp=at(1), trigger_type=TriggerType.HABIT, mood=MoodType.SAD))
    with session_scope() as session:
        session.execute(text("UPDATE smoking_events SET trigger_type = 'Coffee'"))

    with pytest.raises(PersistenceError):
        repo.list_all()


# ============================================
# Configuration
# ============================================


def _write_settings(**values):
    with session_scope() as session:
        for key, value in values.items():
            session.merge(SettingModel(key=key, value=value))


def test_configuration_round_trip(db):
    repo = SqlAlchemyConfigurationRepository()
    config = Configuration(quit_date=DAY0, cigarettes_per_day_before=22, price_per_pack=11.5, cigarettes_per_pack=25)
    repo.save(config)

    loaded, complete = repo.load(NOW)
    assert loaded == config
    assert complete


def test_configuration_save_overwrites(db):
    repo = SqlAlchemyConfigurationRepository()
    repo.save(Configuration(quit_date=DAY0))
    repo.save(Configuration(quit_date=at(2), price_per_pack=9.0))

    loaded, _ = repo.load(NOW)
    assert loaded.quit_date == at(2)
    assert loaded.price_per_pack == 9.0


def test_quit_date_stored_as_epoch_seconds(db):
    SqlAlchemyConfigurationRepository().save(Configuration(quit_date=DAY0))
    with session_scope() as session:
        raw = session.get(SettingModel, "quitDate").value
    assert float(raw) == DAY0.timestamp()


def test_empty_store_uses_defaults(db):
    loaded, complete = SqlAlchemyConfigurationRepository().load(NOW)
    assert loaded == Configuration(quit_date=NOW)
    assert not complete


def test_zero_and_garbage_values_use_defaults(db):
    _write_settings(
        quitDate="0",
        cigarettesPerDayBefore="0",
        pricePerPack="not-a-price",
        cigarettesPerPack="25",
    )
    loaded, complete = SqlAlchemyConfigurationRepository().load(NOW)

    assert loaded == Configuration(quit_date=NOW, cigarettes_per_pack=25)
    assert not complete


# ============================================
# Full state reload
# ============================================


def _load_state(now=NOW):
    return TrackerState.load(
        SqlAlchemySmokingEventRepository(),
        SqlAlchemyCravingRepository(),
        SqlAlchemyConfigurationRepository(),
        tz=UTC,
        now=now,
    )


def test_state_survives_reload(db):
    state = _load_state(now=DAY0)
    session = state.event_log.append(
        SmokingEvent(timestamp=at(3), trigger_type=TriggerType.STRESS, mood=MoodType.STRESSED, notes="traffic")
    )
    craving = state.event_log.append(
        CravingEvent(timestamp=at(4), intensity=7, duration=300.0, was_successful=True)
    )
    state.config_store.update(now=NOW, cigarettes_per_day_before=15)

    reloaded = _load_state()
    assert list(reloaded.event_log.all(SmokingEvent)) == [session]
    assert list(reloaded.event_log.all(CravingEvent)) == [craving]
    assert reloaded.config_store.get() == state.config_store.get()
    assert reloaded.config_store.get().quit_date == DAY0
