"""SQLAlchemy key/value implementation of AbstractConfigurationRepository."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Dict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from smoke_tracker.core.entities.configuration import (
    DEFAULT_CIGARETTES_PER_DAY,
    DEFAULT_CIGARETTES_PER_PACK,
    DEFAULT_PRICE_PER_PACK,
    Configuration,
)
from smoke_tracker.core.errors import PersistenceError
from smoke_tracker.core.interfaces.repositories.config_repo import AbstractConfigurationRepository
from smoke_tracker.dataproviders.db import session_scope
from smoke_tracker.dataproviders.repositories._models import SettingModel

logger = logging.getLogger(__name__)

# Storage keys
QUIT_DATE = "quitDate"
CIGARETTES_PER_DAY_BEFORE = "cigarettesPerDayBefore"
PRICE_PER_PACK = "pricePerPack"
CIGARETTES_PER_PACK = "cigarettesPerPack"


def _epoch_to_datetime(raw: str) -> dt.datetime:
    return dt.datetime.fromtimestamp(float(raw), tz=dt.timezone.utc)


class SqlAlchemyConfigurationRepository(AbstractConfigurationRepository):
    """Stores each configuration field under its own key."""

    def _read_keys(self) -> Dict[str, str]:
        try:
            with session_scope() as session:
                return {m.key: m.value for m in session.scalars(select(SettingModel)).all()}
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not load settings: {exc}") from exc

    @staticmethod
    def _decode(raw: Dict[str, str], key: str, parse: Callable[[str], object], default: object) -> tuple[object, bool]:
        """Return (value, present); absent, zero or unparsable values use the default."""
        value = raw.get(key)
        if value is None:
            return default, False
        try:
            parsed = parse(value)
        except (TypeError, ValueError, OverflowError, OSError):
            logger.warning("Ignoring undecodable setting %s=%r", key, value)
            return default, False
        if not parsed:
            return default, False
        return parsed, True

    def load(self, now: dt.datetime) -> tuple[Configuration, bool]:
        raw = self._read_keys()
        quit_date, has_quit = self._decode(raw, QUIT_DATE, _epoch_to_datetime, now)
        if has_quit and quit_date.timestamp() <= 0:
            quit_date, has_quit = now, False
        per_day, has_per_day = self._decode(raw, CIGARETTES_PER_DAY_BEFORE, int, DEFAULT_CIGARETTES_PER_DAY)
        price, has_price = self._decode(raw, PRICE_PER_PACK, float, DEFAULT_PRICE_PER_PACK)
        per_pack, has_per_pack = self._decode(raw, CIGARETTES_PER_PACK, int, DEFAULT_CIGARETTES_PER_PACK)

        config = Configuration(
            quit_date=quit_date,
            cigarettes_per_day_before=per_day,
            price_per_pack=price,
            cigarettes_per_pack=per_pack,
        )
        return config, all((has_quit, has_per_day, has_price, has_per_pack))

    def save(self, config: Configuration) -> None:
        values = {
            QUIT_DATE: repr(config.quit_date.timestamp()),
            CIGARETTES_PER_DAY_BEFORE: str(config.cigarettes_per_day_before),
            PRICE_PER_PACK: repr(float(config.price_per_pack)),
            CIGARETTES_PER_PACK: str(config.cigarettes_per_pack),
        }
        try:
            with session_scope() as session:
                for key, value in values.items():
                    session.merge(SettingModel(key=key, value=value))
        except SQLAlchemyError as exc:
            raise PersistenceError(f"could not save settings: {exc}") from exc
