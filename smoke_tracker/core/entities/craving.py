"""Domain event representing one craving episode and its outcome."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass

from smoke_tracker.core.errors import ValidationError

MIN_INTENSITY = 1
MAX_INTENSITY = 10


@dataclass(frozen=True, slots=True)
class CravingEvent:
    timestamp: dt.datetime  # start of the episode
    intensity: int  # 1-10
    duration: float  # seconds
    was_successful: bool  # False means the user smoked
    coping_strategy: str = ""
    id: str | None = None

    def validate(self) -> None:
        if not isinstance(self.timestamp, dt.datetime):
            raise ValidationError("timestamp", "must be a datetime")
        if isinstance(self.intensity, bool) or not isinstance(self.intensity, int):
            raise ValidationError("intensity", "must be an integer")
        if not MIN_INTENSITY <= self.intensity <= MAX_INTENSITY:
            raise ValidationError("intensity", f"must be between {MIN_INTENSITY} and {MAX_INTENSITY}")
        if isinstance(self.duration, bool) or not isinstance(self.duration, (int, float)):
            raise ValidationError("duration", "must be a number of seconds")
        if math.isnan(self.duration) or self.duration < 0:
            raise ValidationError("duration", "must not be negative")
        if not isinstance(self.was_successful, bool):
            raise ValidationError("was_successful", "must be a boolean")
        if not isinstance(self.coping_strategy, str):
            raise ValidationError("coping_strategy", "must be a string")
