#!/usr/bin/env python3
"""
Economic model: pure functions of a WorldState.

Nothing here mutates state or draws randomness. The tick engine and the
command layer combine these values into deltas.
"""
from __future__ import annotations

from dataclasses import dataclass

from statecraft.helper.world_helpers import COUNTRIES, potential_multiplier
from statecraft.models import SIM_CONFIG, SECTOR_NAMES, WorldState
from statecraft.relationships import relationship_happiness, tourism_boost, trade_boost
from statecraft.state_utils import clamp

BASE_GROWTH = 2.0
SECTOR_BOOST_FACTOR = 0.02

UPRISING_THRESHOLD = SIM_CONFIG.uprising.happiness_threshold
UPRISING_MAX_DAILY_CHANCE = SIM_CONFIG.uprising.max_daily_chance

# Happiness weights for sectors falling below their starting level
SECTOR_DECLINE_WEIGHTS = {
    "health": 0.5,
    "education": 0.4,
    "housing": 0.6,
    "security": 0.5,
    "infrastructure": 0.6,
}
SECTOR_REWARD_MARGIN = 30.0
SECTOR_REWARD_RATE = 0.05
SECTOR_REWARD_CAP = 2.0

REVENUE_SECTORS = ("tourism", "sports", "transportation", "housing")
LONGTERM_SECTORS = ("education", "health")
INFRASTRUCTURE_SECTORS = ("infrastructure", "agriculture")
SECURITY_SECTORS = ("military", "security")


def _difficulty(state: WorldState):
    return SIM_CONFIG.difficulty_presets[state.country.difficulty]


def sector_boost(state: WorldState) -> float:
    if state.country.id not in COUNTRIES:
        return 0.0
    boost = 0.0
    for sector in SECTOR_NAMES:
        level = state.sector_levels.get(sector, 0.0)
        boost += level * potential_multiplier(state.country.id, sector) * SECTOR_BOOST_FACTOR
    return boost


def war_growth_penalty(war_count: int) -> float:
    """Simultaneous wars hurt more than linearly."""
    return 2 * war_count + 0.5 * war_count * (war_count - 1)


def gdp_growth_rate(state: WorldState) -> float:
    growth = BASE_GROWTH

    rate = state.interest_rate
    if rate > 7:
        growth -= 0.5 * 3 + 0.8 * (rate - 7)
    elif rate >= 4:
        growth -= 0.5 * (rate - 4)
    elif rate < 1:
        growth -= 0.3 * (1 - rate)

    ratio = state.debt_to_gdp_ratio
    if ratio > 100:
        growth -= 2 * ((ratio - 100) / 100) ** 1.5
    if ratio > 60:
        growth -= 0.01 * (ratio - 60)

    inflation = state.inflation_rate
    if inflation > 10:
        growth -= 0.5 * (inflation - 10) ** 1.3
    elif inflation > 5:
        growth -= 0.4 * (inflation - 5)

    growth -= 0.1 * (state.unemployment_rate - 4)
    growth += 0.03 * (state.happiness - 50)
    growth -= war_growth_penalty(len(state.active_wars))
    growth -= 0.5 * len(state.sanctions_on_us)
    if state.has_defaulted:
        growth -= 3
    growth += sector_boost(state)
    growth += trade_boost(state)
    return round(growth, 2)


def daily_revenue(state: WorldState) -> float:
    revenue = state.gdp * 0.00001
    revenue += state.gdp_growth_rate * 0.01
    revenue -= 0.01 * len(state.sanctions_on_us)
    revenue += tourism_boost(state)
    return round(revenue, 4)


def money_printing_shock(amount: float, gdp: float) -> float:
    if amount <= 0 or gdp <= 0:
        return 0.0
    return (amount / gdp) * 10


def inflation_rate(state: WorldState, money_printed: float = 0.0) -> float:
    inflation = state.inflation_rate

    # Mean reversion: high inflation is sticky and drifts to 5, not 2
    if inflation > 10:
        inflation += (5 - inflation) * 0.01
    elif inflation > 5:
        inflation += (3 - inflation) * 0.03
    else:
        inflation += (2 - inflation) * 0.05

    effectiveness = 0.3 if state.inflation_rate > 10 else 0.5
    inflation -= (state.interest_rate - 2) * effectiveness

    unemployment_effect = 0.02 if inflation > 10 else 0.05
    inflation -= (state.unemployment_rate - 5) * unemployment_effect

    inflation += money_printing_shock(money_printed, state.gdp)
    if state.debt_to_gdp_ratio > 150:
        inflation += 0.1

    return round(clamp(inflation, 0, 25), 2)


def unemployment_rate(state: WorldState) -> float:
    unemployment = state.unemployment_rate

    baseline = _difficulty(state).unemployment_baseline
    unemployment += (baseline - unemployment) * 0.02

    unemployment -= state.gdp_growth_rate * 0.2
    unemployment -= (
        state.sector_levels.get("infrastructure", 0.0) + state.sector_levels.get("education", 0.0)
    ) * 0.01

    if state.interest_rate > 6:
        unemployment += 0.4 * (state.interest_rate - 6)
    elif state.interest_rate < 0.5 and state.inflation_rate > 5:
        unemployment += 0.3

    infra_decline = state.initial_stats.sector_levels.get("infrastructure", 0.0) - state.sector_levels.get(
        "infrastructure", 0.0
    )
    if infra_decline > 0:
        unemployment += 0.08 * infra_decline

    unemployment -= 0.3 * len(state.active_wars)
    return round(clamp(unemployment, 1, 40), 2)


def happiness(state: WorldState) -> float:
    """
    Happiness relative to the starting baseline: people react to changes
    from what they are used to, plus a few absolute hardships.
    """
    initial = state.initial_stats
    value = initial.happiness

    if initial.gdp > 0:
        value += ((state.gdp - initial.gdp) / initial.gdp) * 100 * 0.3
    value -= (state.unemployment_rate - initial.unemployment) * 2
    value -= (state.inflation_rate - initial.inflation) * 1.5
    value += (state.security - initial.security) * 0.5
    value += (state.military_strength - initial.military_strength) * 0.2

    if state.gdp < initial.gdp * 0.5:
        value -= 20
    if state.inflation_rate > 15:
        value -= 2 * (state.inflation_rate - 15)
    if state.unemployment_rate > 20:
        value -= 1.5 * (state.unemployment_rate - 20)
    if state.interest_rate > 7:
        value -= 3 * (state.interest_rate - 7)
    elif state.interest_rate < 1 and state.inflation_rate > 5:
        value -= 5

    war_index = 0
    for war in state.active_wars:
        if war.is_player_involved:
            value -= 10 + 2 * war_index
            war_index += 1

    value -= 3 * len(state.sanctions_on_us)

    for sector, weight in SECTOR_DECLINE_WEIGHTS.items():
        start = initial.sector_levels.get(sector, 0.0)
        level = state.sector_levels.get(sector, 0.0)
        if level < start:
            value -= (start - level) * weight
        elif level > start + SECTOR_REWARD_MARGIN:
            value += min(SECTOR_REWARD_CAP, (level - start - SECTOR_REWARD_MARGIN) * SECTOR_REWARD_RATE)

    if state.has_defaulted:
        value -= 25
    value += relationship_happiness(state)
    value -= _difficulty(state).happiness_decay

    return round(clamp(value, 0, 100), 1)


def happiness_gdp_penalty(happiness_value: float) -> float:
    """Daily GDP share lost to unrest, as a fraction (0.01 == 1%)."""
    penalty = 0.0
    if happiness_value < 50:
        penalty += (50 - happiness_value) * 0.02
    if happiness_value < 30:
        penalty += (30 - happiness_value) * 0.03
    if happiness_value < 10:
        penalty += 0.5
    return penalty / 100


def score_change(state: WorldState, previous: WorldState) -> float:
    change = state.gdp_growth_rate * 10
    change += (previous.debt_to_gdp_ratio - state.debt_to_gdp_ratio) * 100
    change += (state.happiness - previous.happiness) * 5
    if state.inflation_rate > 5:
        change -= (state.inflation_rate - 5) * 2
    change += (len(state.allies) - len(previous.allies)) * 20
    change -= (len(state.enemies) - len(previous.enemies)) * 20
    if state.has_defaulted and not previous.has_defaulted:
        change -= 500
    return round(change, 1)


def loan_payment(amount: float, annual_rate: float) -> float:
    """Monthly payment: interest on the principal plus a 10-year straight-line share."""
    monthly_interest = amount * (annual_rate / 100) / 12
    monthly_principal = amount / 120
    return monthly_interest + monthly_principal


def repress_success_chance(military_strength: float, security: float) -> float:
    return round((0.4 * military_strength + 0.6 * security) / 100, 2)


def uprising_chance(happiness_value: float) -> float:
    """Daily odds: 0 at the threshold, rising linearly to the max at zero happiness."""
    if happiness_value >= UPRISING_THRESHOLD:
        return 0.0
    return ((UPRISING_THRESHOLD - happiness_value) / UPRISING_THRESHOLD) * UPRISING_MAX_DAILY_CHANCE


@dataclass(frozen=True)
class SectorSpendingEffect:
    level_increase: float
    happiness_change: float
    gdp_growth_boost: float
    revenue_boost: float
    unemployment_reduction: float
    message: str


def sector_spending_effect(
    sector: str, amount: float, country_id: str, current_level: float
) -> SectorSpendingEffect:
    multiplier = potential_multiplier(country_id, sector)
    level_increase = (amount / 10) * multiplier
    happiness_change = 0.0
    gdp_boost = 0.0
    revenue_boost = 0.0
    unemployment_reduction = 0.0

    if sector in REVENUE_SECTORS:
        revenue_boost = amount * 0.02 * multiplier
        happiness_change = 1 if multiplier > 1 else 0
        gdp_boost = multiplier * 0.05
        if multiplier > 1:
            message = f"{sector} investment generating revenue! Visitors and entertainment boost the economy."
        else:
            message = f"{sector} investment has limited potential in your country."
    elif sector in LONGTERM_SECTORS:
        happiness_change = multiplier * 3
        unemployment_reduction = multiplier * 0.5
        gdp_boost = multiplier * 0.03
        if multiplier > 1:
            message = f"Excellent {sector} investment! Citizens happier and healthier, unemployment falling."
        else:
            message = f"{sector} investment showing modest results."
    elif sector in INFRASTRUCTURE_SECTORS:
        gdp_boost = multiplier * 0.15
        unemployment_reduction = multiplier * 0.3
        happiness_change = 2 if multiplier > 1 else 1
        if multiplier > 1:
            message = f"{sector} development accelerating economic growth!"
        else:
            message = f"{sector} development proceeding."
    else:
        happiness_change = 1 if multiplier > 1 else 0
        message = f"{sector} capabilities strengthened."

    if multiplier < 0:
        level_increase = 0.0
        happiness_change = -3
        gdp_boost = 0.0
        revenue_boost = 0.0
        unemployment_reduction = 0.0
        message = f"Wasted money on {sector}. Your country has no potential here!"

    if current_level > 50:
        level_increase *= 0.5
        happiness_change *= 0.5
        gdp_boost *= 0.5
        revenue_boost *= 0.5

    return SectorSpendingEffect(
        level_increase=round(level_increase, 1),
        happiness_change=round(happiness_change, 1),
        gdp_growth_boost=round(gdp_boost, 2),
        revenue_boost=round(revenue_boost, 2),
        unemployment_reduction=round(unemployment_reduction, 2),
        message=message,
    )
