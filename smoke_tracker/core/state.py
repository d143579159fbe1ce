"""Application state container handed to every use case."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from smoke_tracker.core.configuration_store import ConfigurationStore
from smoke_tracker.core.event_log import EventLog
from smoke_tracker.core.interfaces.repositories.config_repo import AbstractConfigurationRepository
from smoke_tracker.core.interfaces.repositories.event_repo import (
    AbstractCravingRepository,
    AbstractSmokingEventRepository,
)


@dataclass(slots=True)
class TrackerState:
    event_log: EventLog
    config_store: ConfigurationStore
    tz: dt.tzinfo

    @classmethod
    def load(
        cls,
        smoking_repo: AbstractSmokingEventRepository,
        craving_repo: AbstractCravingRepository,
        config_repo: AbstractConfigurationRepository,
        tz: dt.tzinfo,
        now: dt.datetime | None = None,
    ) -> "TrackerState":
        return cls(
            event_log=EventLog.load(smoking_repo, craving_repo, tz),
            config_store=ConfigurationStore.load(config_repo, now),
            tz=tz,
        )
