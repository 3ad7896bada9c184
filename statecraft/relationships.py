#!/usr/bin/env python3
"""
Relationship scores (0..100 per foreign country) and their effects.

Scores are the single source of truth. Allies and enemies are derived views:
score >= 86 is an ally, score <= 30 is an enemy.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from statecraft.helper.world_helpers import (
    COUNTRIES,
    ALLIED_SCORE,
    FRIENDLY_SCORE,
    NEUTRAL_SCORE,
    COLD_SCORE,
    HOSTILE_CEILING,
    INITIAL_ALLY_SCORE,
    INITIAL_ENEMY_SCORE,
    INITIAL_NEUTRAL_SCORE,
)
from statecraft.models import WorldState


def relationship_level(score: float) -> str:
    if score >= ALLIED_SCORE:
        return "Allied"
    if score >= FRIENDLY_SCORE:
        return "Friendly"
    if score >= NEUTRAL_SCORE:
        return "Neutral"
    if score >= COLD_SCORE:
        return "Cold"
    return "Hostile"


def derive_allies_and_enemies(relationships: Dict[str, float]) -> Tuple[List[str], List[str]]:
    allies: List[str] = []
    enemies: List[str] = []
    for country_id, score in relationships.items():
        if score >= ALLIED_SCORE:
            allies.append(country_id)
        elif score <= HOSTILE_CEILING:
            enemies.append(country_id)
    return allies, enemies


def change_relationship(
    relationships: Dict[str, float], country_id: str, change: float
) -> Dict[str, float]:
    """Return a copy with one score shifted and clamped to [0, 100]."""
    updated = dict(relationships)
    current = updated.get(country_id, INITIAL_NEUTRAL_SCORE)
    updated[country_id] = max(0.0, min(100.0, current + change))
    return updated


# Band moves used by actions that make a country an ally or an enemy outright.
def make_ally(relationships: Dict[str, float], country_id: str) -> Dict[str, float]:
    updated = dict(relationships)
    updated[country_id] = max(updated.get(country_id, INITIAL_NEUTRAL_SCORE), INITIAL_ALLY_SCORE)
    return updated


def make_enemy(relationships: Dict[str, float], country_id: str) -> Dict[str, float]:
    updated = dict(relationships)
    updated[country_id] = min(updated.get(country_id, INITIAL_NEUTRAL_SCORE), INITIAL_ENEMY_SCORE)
    return updated


def clear_enemy(relationships: Dict[str, float], country_id: str) -> Dict[str, float]:
    updated = dict(relationships)
    updated[country_id] = max(updated.get(country_id, INITIAL_NEUTRAL_SCORE), INITIAL_NEUTRAL_SCORE)
    return updated


def break_alliance(relationships: Dict[str, float], country_id: str) -> Dict[str, float]:
    """Drop an ally to the top of the Friendly band."""
    updated = dict(relationships)
    updated[country_id] = min(updated.get(country_id, INITIAL_NEUTRAL_SCORE), ALLIED_SCORE - 1)
    return updated


def tourism_boost(state: WorldState) -> float:
    """Friendly and allied nations send tourists, scaled by their economy."""
    boost = 0.0
    for country_id, score in state.relationships.items():
        profile = COUNTRIES.get(country_id)
        if profile is None:
            continue
        if score >= FRIENDLY_SCORE:
            boost += (score - 70) * (profile.stats.gdp / 1000) * 0.001
    return boost


def trade_boost(state: WorldState) -> float:
    boost = 0.0
    for score in state.relationships.values():
        if score >= FRIENDLY_SCORE:
            boost += (score - 70) * 0.0005
        elif score <= HOSTILE_CEILING:
            boost -= (30 - score) * 0.0008
    return boost


def relationship_happiness(state: WorldState) -> float:
    scores = list(state.relationships.values())
    allied = sum(1 for s in scores if s >= ALLIED_SCORE)
    friendly = sum(1 for s in scores if FRIENDLY_SCORE <= s < ALLIED_SCORE)
    hostile = sum(1 for s in scores if s <= HOSTILE_CEILING)

    happiness = allied * 2 + friendly * 0.5 - hostile * 1.5
    if allied == 0 and friendly == 0:
        happiness -= 5
    return happiness


@dataclass(frozen=True)
class Provocation:
    happiness_loss: float
    tourism_loss: float  # tourism sector levels lost
    reputation_loss: float
    message: str


_PROVOCATION_TIERS = {
    "Allied": (
        15,
        0.20,
        25,
        "Your people are OUTRAGED! You attacked an ally! Tourism collapses, international condemnation!",
    ),
    "Friendly": (
        10,
        0.12,
        15,
        "Your people are upset! You attacked a friend! Tourism damaged, reputation suffers!",
    ),
    "Neutral": (3, 0.05, 5, "Unprovoked aggression! Minor international backlash."),
}


def provocation_consequences(score: float, state: WorldState) -> Provocation:
    """Domestic and international fallout of attacking or sanctioning a country."""
    tier = _PROVOCATION_TIERS.get(relationship_level(score))
    if tier is None:
        return Provocation(0.0, 0.0, 0.0, "Hostile nations expect conflict.")
    happiness_loss, tourism_share, reputation_loss, message = tier
    return Provocation(
        happiness_loss=happiness_loss,
        tourism_loss=state.sector_levels.get("tourism", 0.0) * tourism_share,
        reputation_loss=reputation_loss,
        message=message,
    )
