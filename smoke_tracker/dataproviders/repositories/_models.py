"""SQLAlchemy ORM models."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smoke_tracker.dataproviders.db import Base


class SmokingEventModel(Base):
    __tablename__ = "smoking_events"

    # seq keeps insertion order; id is the public identifier
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)  # naive UTC
    trigger_type: Mapped[str] = mapped_column(String(16), nullable=False)
    location: Mapped[str] = mapped_column(String, default="")
    mood: Mapped[str] = mapped_column(String(16), nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")


class CravingModel(Base):
    __tablename__ = "cravings"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    timestamp: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)  # naive UTC
    intensity: Mapped[int] = mapped_column(Integer, nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False)
    coping_strategy: Mapped[str] = mapped_column(Text, default="")
    was_successful: Mapped[bool] = mapped_column(Boolean, nullable=False)


class SettingModel(Base):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(String, nullable=False)
