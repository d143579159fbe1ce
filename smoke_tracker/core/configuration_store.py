"""Validated, atomically updated configuration snapshot."""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging

from smoke_tracker.core.entities.configuration import Configuration
from smoke_tracker.core.errors import PersistenceError, ValidationError
from smoke_tracker.core.interfaces.repositories.config_repo import AbstractConfigurationRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Configuration))


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ConfigurationStore:
    def __init__(self, repo: AbstractConfigurationRepository, config: Configuration) -> None:
        self._repo = repo
        self._config = config

    @classmethod
    def load(cls, repo: AbstractConfigurationRepository, now: dt.datetime | None = None) -> "ConfigurationStore":
        """Load stored configuration; a first run persists the defaults.

        An unreadable store degrades to defaults for this session only and is
        never overwritten.
        """
        now = now or _utcnow()
        try:
            config, complete = repo.load(now)
        except PersistenceError as exc:
            logger.warning("Could not load configuration, using defaults for this session: %s", exc)
            return cls(repo, Configuration(quit_date=now))
        store = cls(repo, config)
        if not complete:
            logger.info("Configuration incomplete, persisting defaults")
            try:
                repo.save(config)
            except PersistenceError as exc:
                logger.warning("Could not persist default configuration: %s", exc)
        return store

    def get(self) -> Configuration:
        return self._config

    def update(self, now: dt.datetime | None = None, **changes) -> Configuration:
        """Apply ``changes`` atomically and persist them.

        Raises ValidationError (nothing changes) when a field is unknown or out
        of bounds. A PersistenceError from the save propagates, but the new
        snapshot stays in effect for the running session.
        """
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(unknown[0], "unknown configuration field")

        now = now or _utcnow()
        quit_date = changes.get("quit_date", self._config.quit_date)
        if not isinstance(quit_date, dt.datetime) or quit_date.tzinfo is None:
            raise ValidationError("quit_date", "must be a timezone-aware datetime")

        candidate = dataclasses.replace(self._config, **changes)
        candidate.validate(now)

        self._config = candidate
        self._repo.save(candidate)
        logger.info("Configuration updated: %s", ", ".join(sorted(changes)))
        return candidate
