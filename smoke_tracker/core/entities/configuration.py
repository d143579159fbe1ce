"""User configuration: quit date and pre-quit consumption."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from smoke_tracker.core.errors import ValidationError

DEFAULT_CIGARETTES_PER_DAY = 10
DEFAULT_PRICE_PER_PACK = 8.0
DEFAULT_CIGARETTES_PER_PACK = 20

# Policy bounds (inclusive)
CIGARETTES_PER_DAY_RANGE = (1, 50)
PRICE_PER_PACK_RANGE = (1.0, 50.0)
PRICE_STEP = 0.5
CIGARETTES_PER_PACK_RANGE = (10, 30)


@dataclass(frozen=True, slots=True)
class Configuration:
    quit_date: dt.datetime
    cigarettes_per_day_before: int = DEFAULT_CIGARETTES_PER_DAY
    price_per_pack: float = DEFAULT_PRICE_PER_PACK
    cigarettes_per_pack: int = DEFAULT_CIGARETTES_PER_PACK

    @property
    def price_per_cigarette(self) -> float:
        return self.price_per_pack / self.cigarettes_per_pack

    def validate(self, now: dt.datetime) -> None:
        """Raise ValidationError naming the first field outside its bound."""
        if self.quit_date > now:
            raise ValidationError("quit_date", "must not be in the future")
        _check_int("cigarettes_per_day_before", self.cigarettes_per_day_before, CIGARETTES_PER_DAY_RANGE)
        _check_int("cigarettes_per_pack", self.cigarettes_per_pack, CIGARETTES_PER_PACK_RANGE)

        price = self.price_per_pack
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise ValidationError("price_per_pack", "must be a number")
        low, high = PRICE_PER_PACK_RANGE
        if not low <= price <= high:
            raise ValidationError("price_per_pack", f"must be between {low:g} and {high:g}")
        if (price / PRICE_STEP) != int(price / PRICE_STEP):
            raise ValidationError("price_per_pack", f"must be a multiple of {PRICE_STEP:g}")


def _check_int(name: str, value: object, bounds: tuple[int, int]) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(name, "must be an integer")
    low, high = bounds
    if not low <= value <= high:
        raise ValidationError(name, f"must be between {low} and {high}")
