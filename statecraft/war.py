#!/usr/bin/env python3
"""
War power, declaration requirements and resolution of finished wars.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from statecraft.context import SimContext
from statecraft.helper.world_helpers import COUNTRIES, initial_relations
from statecraft.models import SIM_CONFIG, StateDelta, War, WarResult, WorldState
from statecraft.state_utils import clamp

WAR_CFG = SIM_CONFIG.war
MIN_WIN_PROBABILITY = 10.0
MAX_WIN_PROBABILITY = 90.0
ALLY_CONTRIBUTION = 0.5


@dataclass(frozen=True)
class WarOutlook:
    player_power: float
    enemy_power: float
    win_probability: float  # percent, 10..90


@dataclass
class WarValidation:
    can_declare: bool
    reasons: List[str] = field(default_factory=list)
    war_cost: float = 0.0
    happiness_cost: float = 0.0
    outlook: Optional[WarOutlook] = None


def _ally_power(country_id: str) -> float:
    profile = COUNTRIES.get(country_id)
    if profile is None:
        return 0.0
    return profile.stats.stability * 0.8 + profile.stats.gdp / 1000


def win_probability(player_power: float, enemy_power: float) -> float:
    total = player_power + enemy_power
    if total <= 0:
        return 50.0
    return clamp(100 * player_power / total, MIN_WIN_PROBABILITY, MAX_WIN_PROBABILITY)


def player_power(state: WorldState) -> float:
    power = (
        state.military_strength * 2
        + state.sector_levels.get("military", 0.0)
        + state.gdp / 1000
    )
    for ally_id in state.allies:
        power += _ally_power(ally_id) * ALLY_CONTRIBUTION
    return power


def enemy_power(target_id: str) -> float:
    """Target strength from static data plus half of its data-defined allies."""
    target = COUNTRIES.get(target_id)
    if target is None:
        return 0.0
    power = target.stats.stability * 2 + target.stats.gdp / 1000
    target_allies, _ = initial_relations(target_id)
    for ally_id in target_allies:
        power += _ally_power(ally_id) * ALLY_CONTRIBUTION
    return power


def war_outlook(state: WorldState, target_id: str) -> WarOutlook:
    mine = player_power(state)
    theirs = enemy_power(target_id)
    return WarOutlook(mine, theirs, win_probability(mine, theirs))


def validate_war_declaration(state: WorldState, target_id: str) -> WarValidation:
    target = COUNTRIES.get(target_id)
    if target is None or target_id == state.country.id:
        return WarValidation(False, ["Invalid target country"])

    if target_id in state.allies:
        return WarValidation(
            False,
            [f"Cannot declare war on ally {target.name}! Impose sanctions first to make them an enemy."],
        )

    reasons: List[str] = []
    cooldown = state.cooldowns.get("declare_war", 0)
    if cooldown > 0:
        reasons.append(f"Military on cooldown for {cooldown} more days")
    if target_id in state.warred_countries:
        reasons.append(f"You have already fought {target.name}. A second war is not possible.")

    is_enemy = target_id in state.enemies
    tier = WAR_CFG.enemy if is_enemy else WAR_CFG.neutral
    war_cost = state.gdp * tier.cost_gdp_share

    if state.military_strength < tier.min_military_strength:
        reasons.append(
            f"Military strength too low: {state.military_strength:.0f}% "
            f"(need {tier.min_military_strength:.0f}%)"
        )
    if state.security < tier.min_security:
        reasons.append(
            f"Domestic security too low: {state.security:.0f}% (need {tier.min_security:.0f}%)"
        )
    military_level = state.sector_levels.get("military", 0.0)
    if military_level < tier.min_military_level:
        reasons.append(
            f"Military infrastructure insufficient: Level {military_level:.0f} "
            f"(need Level {tier.min_military_level:.0f})"
        )
    if state.treasury < war_cost:
        reasons.append(
            f"Insufficient treasury: ${state.treasury:.2f}B "
            f"(need {tier.cost_gdp_share * 100:.0f}% of GDP: ${war_cost:.2f}B)"
        )

    return WarValidation(
        can_declare=not reasons,
        reasons=reasons,
        war_cost=war_cost,
        happiness_cost=tier.happiness_loss,
        outlook=war_outlook(state, target_id),
    )


def enemy_of(war: War) -> str:
    return war.defender if war.is_player_attacker else war.attacker


def resolve_war(state: WorldState, war: War, ctx: SimContext) -> Tuple[WarResult, StateDelta]:
    """
    Roll a finished player war and return the result plus its delta.
    All values are relative to `state` (the snapshot the tick started from).
    """
    enemy_id = enemy_of(war)
    profile = COUNTRIES.get(enemy_id)
    enemy_name = profile.name if profile else enemy_id
    outlook = war_outlook(state, enemy_id)
    player_won = ctx.random() * 100 < outlook.win_probability

    if player_won:
        changes: StateDelta = {
            "gdp": state.gdp * 1.15,
            "military_strength": min(100.0, state.military_strength + 20),
            "global_reputation": min(100.0, state.global_reputation + 30),
            "treasury": state.treasury + state.gdp * 0.10,
            "happiness": max(0.0, state.happiness - 5),
        }
    else:
        changes = {
            "gdp": state.gdp * 0.75,
            "military_strength": max(10.0, state.military_strength - 40),
            "security": max(10.0, state.security - 30),
            "happiness": max(0.0, state.happiness - 20),
            "treasury": max(0.0, state.treasury - state.gdp * 0.20),
            "debt": state.debt + state.gdp * 0.30,
            "global_reputation": max(0.0, state.global_reputation - 40),
        }
    return WarResult(player_won=player_won, enemy_name=enemy_name), changes
