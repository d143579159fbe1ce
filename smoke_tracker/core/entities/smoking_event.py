"""Domain event representing a single logged relapse (smoking session)."""

from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from dataclasses import dataclass

from smoke_tracker.core.errors import ValidationError


class TriggerType(str, enum.Enum):
    """What prompted the cigarette. Values are stable storage tags."""

    STRESS = "Stress"
    SOCIAL = "Social"
    BOREDOM = "Boredom"
    HABIT = "Habit"
    ALCOHOL = "Alcohol"
    BREAK = "Break"


class MoodType(str, enum.Enum):
    HAPPY = "Happy"
    STRESSED = "Stressed"
    ANXIOUS = "Anxious"
    RELAXED = "Relaxed"
    SAD = "Sad"
    NEUTRAL = "Neutral"


def parse_tag(enum_cls: type[enum.Enum], value: object, field_name: str) -> enum.Enum:
    """Accept an enum member or its stable string tag."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        raise ValidationError(field_name, f"unknown {enum_cls.__name__} tag {value!r}") from None


@dataclass(frozen=True, slots=True)
class SmokingEvent:
    timestamp: dt.datetime
    trigger_type: TriggerType
    mood: MoodType
    location: str = ""
    notes: str = ""
    id: str | None = None

    def with_parsed_tags(self) -> SmokingEvent:
        """Copy with string tags turned into enum members."""
        return dataclasses.replace(
            self,
            trigger_type=parse_tag(TriggerType, self.trigger_type, "trigger_type"),
            mood=parse_tag(MoodType, self.mood, "mood"),
        )

    def validate(self) -> None:
        if not isinstance(self.timestamp, dt.datetime):
            raise ValidationError("timestamp", "must be a datetime")
        if not isinstance(self.trigger_type, TriggerType):
            raise ValidationError("trigger_type", f"unknown TriggerType tag {self.trigger_type!r}")
        if not isinstance(self.mood, MoodType):
            raise ValidationError("mood", f"unknown MoodType tag {self.mood!r}")
        for name in ("location", "notes"):
            if not isinstance(getattr(self, name), str):
                raise ValidationError(name, "must be a string")
