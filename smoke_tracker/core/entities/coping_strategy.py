"""Catalog of coping strategies offered while riding out a craving."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CopingStrategy:
    title: str
    description: str
    icon: str


COPING_STRATEGIES: tuple[CopingStrategy, ...] = (
    CopingStrategy("Deep Breathing", "Take 10 deep breaths", "wind"),
    CopingStrategy("Drink Water", "Hydrate and occupy your mouth", "drop"),
    CopingStrategy("Go for a Walk", "Change your environment", "figure.walk"),
    CopingStrategy("Call Someone", "Connect with support", "phone"),
    CopingStrategy("Chew Gum", "Keep your mouth busy", "mouth"),
    CopingStrategy("Meditate", "Focus on the present", "brain.head.profile"),
)
