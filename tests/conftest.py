"""Shared fixtures and fakes for smoke_tracker tests"""
import datetime as dt

import pytest

from smoke_tracker.core.configuration_store import ConfigurationStore
from smoke_tracker.core.entities.configuration import Configuration
from smoke_tracker.core.errors import PersistenceError
from smoke_tracker.core.event_log import EventLog
from smoke_tracker.core.state import TrackerState
from smoke_tracker.dataproviders.db import init_db

UTC = dt.timezone.utc

# Day 0 of every scenario
DAY0 = dt.datetime(2025, 1, 1, 8, 0, tzinfo=UTC)


def at(day: int, hour: int = 12, minute: int = 0) -> dt.datetime:
    """Instant on scenario day ``day`` (day 0 = 2025-01-01), UTC."""
    return dt.datetime(2025, 1, 1, hour, minute, tzinfo=UTC) + dt.timedelta(days=day)


# ============================================================================
# In-memory repository fakes
# ============================================================================


class FakeEventRepository:
    def __init__(self, fail_on_add: bool = False, fail_on_load: bool = False):
        self.saved = []
        self.fail_on_add = fail_on_add
        self.fail_on_load = fail_on_load

    def add(self, event) -> None:
        if self.fail_on_add:
            raise PersistenceError("disk full")
        self.saved.append(event)

    def list_all(self):
        if self.fail_on_load:
            raise PersistenceError("corrupt log")
        return list(self.saved)


class FakeConfigurationRepository:
    def __init__(self, stored: Configuration | None = None, fail_on_load=False, fail_on_save=False):
        self.stored = stored
        self.saves = 0
        self.fail_on_load = fail_on_load
        self.fail_on_save = fail_on_save

    def load(self, now):
        if self.fail_on_load:
            raise PersistenceError("settings unreadable")
        if self.stored is None:
            return Configuration(quit_date=now), False
        return self.stored, True

    def save(self, config) -> None:
        if self.fail_on_save:
            raise PersistenceError("read-only storage")
        self.stored = config
        self.saves += 1


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def smoking_repo():
    return FakeEventRepository()


@pytest.fixture
def craving_repo():
    return FakeEventRepository()


@pytest.fixture
def config_repo():
    return FakeConfigurationRepository(stored=Configuration(quit_date=DAY0))


@pytest.fixture
def event_log(smoking_repo, craving_repo):
    return EventLog(smoking_repo, craving_repo, UTC)


@pytest.fixture
def tracker(event_log, config_repo):
    """State container with quit date on day 0 and default consumption settings"""
    return TrackerState(
        event_log=event_log,
        config_store=ConfigurationStore(config_repo, config_repo.stored),
        tz=UTC,
    )


@pytest.fixture
def db(tmp_path):
    """Fresh file-backed SQLite database"""
    return init_db(f"sqlite:///{tmp_path / 'tracker.db'}")
