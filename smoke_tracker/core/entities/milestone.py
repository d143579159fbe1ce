"""Static health-recovery milestones, keyed by hours since quitting."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Milestone:
    title: str
    description: str
    hours_required: int
    icon: str


MILESTONES: tuple[Milestone, ...] = (
    Milestone("20 Minutes", "Heart rate returns to normal", 0, "heart"),
    Milestone("12 Hours", "Carbon monoxide levels drop", 12, "lungs"),
    Milestone("24 Hours", "Risk of heart attack decreases", 24, "heart.circle"),
    Milestone("48 Hours", "Nerve endings regrow", 48, "brain"),
    Milestone("72 Hours", "Breathing improves", 72, "wind"),
    Milestone("1 Week", "Taste and smell improve", 168, "nose"),
    Milestone("1 Month", "Circulation improves", 720, "drop"),
    Milestone("3 Months", "Lung function increases", 2160, "lungs.fill"),
    Milestone("1 Year", "Heart disease risk halved", 8760, "star.fill"),
)
