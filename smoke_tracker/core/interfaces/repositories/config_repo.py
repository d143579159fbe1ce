"""Abstract repository interface for the Configuration entity."""

from __future__ import annotations

import abc
import datetime as dt
from typing import Protocol

from smoke_tracker.core.entities.configuration import Configuration


class AbstractConfigurationRepository(Protocol):
    """Configuration repository contract."""

    @abc.abstractmethod
    def load(self, now: dt.datetime) -> tuple[Configuration, bool]:
        """Return the stored configuration and whether every key was present.

        Absent, zero or undecodable keys fall back to their defaults
        (``now`` for the quit date).
        """

    @abc.abstractmethod
    def save(self, config: Configuration) -> None:
        """Write all keys in a single transaction."""
