#!/usr/bin/env python3
"""
Tick engine: advance the world by one simulated day.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List

from statecraft.context import SimContext
from statecraft.decisions import generate_decision
from statecraft.economy import (
    daily_revenue,
    gdp_growth_rate,
    happiness as compute_happiness,
    happiness_gdp_penalty,
    inflation_rate,
    score_change,
    unemployment_rate,
    uprising_chance,
)
from statecraft.events import advice_events, battle_events, warning_events, world_events
from statecraft.helper.world_helpers import HOSTILE_CEILING
from statecraft.models import SIM_CONFIG, SECTOR_NAMES, GameEvent, Loan, StateDelta, WorldState
from statecraft.relationships import change_relationship, derive_allies_and_enemies
from statecraft.state_utils import append_events, apply_delta, clamp
from statecraft.war import resolve_war

LOAN_INTERVAL = SIM_CONFIG.loans.payment_interval_days
UPRISING_THRESHOLD = SIM_CONFIG.uprising.happiness_threshold
SECTOR_CRISIS_ODDS = SIM_CONFIG.event_odds.sector_crisis

SECTOR_DECAY_RATE = 0.003  # share of level lost per day
SECTOR_COLLAPSE_LEVEL = 20.0
PRINT_MONEY_FORGIVENESS_DAYS = 60
RESERVE_ACCRUAL = 0.01  # of daily revenue
RESERVE_CAP = 0.05  # of GDP
TREASURY_ACCRUAL = 0.1  # of daily revenue

# sector: (minimum decline from start, gdp share lost, happiness lost, message)
SECTOR_CRISES = {
    "health": (
        10,
        0.10,
        8,
        "DISEASE OUTBREAK! You let healthcare collapse! -10% GDP, -8 happiness. FIX: Invest in Health sector.",
    ),
    "security": (
        10,
        0.05,
        6,
        "CRIME WAVE! You let security collapse! -5% GDP, -6 happiness. FIX: Invest in Security sector.",
    ),
    "infrastructure": (
        10,
        0.08,
        10,
        "INFRASTRUCTURE COLLAPSE! You let infrastructure decay! -8% GDP, -10 happiness. "
        "FIX: Invest in Infrastructure.",
    ),
}


@dataclass
class LoanServicing:
    loans: List[Loan]
    treasury: float
    reserves: float
    debt: float
    defaulted: bool


def service_loans(
    loans: List[Loan], treasury: float, reserves: float, debt: float, days: int
) -> LoanServicing:
    """
    Count down every loan by `days`. A due payment comes out of the treasury,
    then the reserves; if neither can cover it the country defaults and the
    balance is left untouched. Paid-off loans are dropped.
    """
    defaulted = False
    remaining_loans: List[Loan] = []
    for loan in loans:
        countdown = loan.days_until_next_payment - days
        if countdown > 0:
            remaining_loans.append(replace(loan, days_until_next_payment=countdown))
            continue

        interest = loan.remaining * loan.interest_rate / 100 / 12
        payment = min(loan.monthly_payment, loan.remaining + interest)
        if treasury >= payment:
            treasury -= payment
        elif reserves >= payment:
            reserves -= payment
        else:
            defaulted = True
            remaining_loans.append(replace(loan, days_until_next_payment=LOAN_INTERVAL))
            continue

        principal = max(0.0, payment - interest)
        balance = max(0.0, loan.remaining - principal)
        debt = max(0.0, debt - principal)
        if balance > 1e-9:
            remaining_loans.append(
                replace(loan, remaining=balance, days_until_next_payment=LOAN_INTERVAL)
            )
    return LoanServicing(remaining_loans, treasury, reserves, debt, defaulted)


def advance_world(state: WorldState, ctx: SimContext) -> WorldState:
    """
    Advance the world by one tick (one day times the game speed) and return
    the new snapshot. The input is never modified.

    A snapshot with pending decisions is returned unchanged: the clock does
    not move until the head decision is resolved.
    """
    if state.pending_decisions:
        return state

    speed = state.game_speed
    new_day = state.current_day + speed
    new_events: List[GameEvent] = []

    def log_event(type: str, category: str, message: str) -> None:
        new_events.append(ctx.event(new_day, type, category, message))

    cooldowns = {kind: max(0, days - speed) for kind, days in state.cooldowns.items()}

    # ---- economy, computed from the previous snapshot ----
    growth = gdp_growth_rate(state)
    gdp = state.gdp * (1 + growth / 100 / 365 * speed)
    revenue = daily_revenue(replace(state, gdp=gdp))
    treasury = state.treasury + revenue * TREASURY_ACCRUAL * speed
    inflation = inflation_rate(state)
    unemployment = unemployment_rate(state)
    happiness = compute_happiness(state)

    gdp *= max(0.0, 1 - happiness_gdp_penalty(happiness) * speed)

    print_count = state.recent_print_money_count
    if print_count > 0 and new_day // PRINT_MONEY_FORGIVENESS_DAYS > state.current_day // PRINT_MONEY_FORGIVENESS_DAYS:
        print_count -= 1

    # ---- sectors ----
    sector_levels = dict(state.sector_levels)
    for sector in SECTOR_NAMES:
        level = sector_levels.get(sector, 0.0)
        decayed = max(0.0, level - level * SECTOR_DECAY_RATE * speed)
        sector_levels[sector] = decayed
        if decayed < SECTOR_COLLAPSE_LEVEL <= level:
            log_event("critical", "domestic", f"CRITICAL: {sector.upper()} SECTOR COLLAPSING! Level: {decayed:.0f}")

    for sector, (min_decline, gdp_share, happiness_loss, message) in SECTOR_CRISES.items():
        decline = state.initial_stats.sector_levels.get(sector, 0.0) - sector_levels.get(sector, 0.0)
        if decline > min_decline and ctx.chance(SECTOR_CRISIS_ODDS * speed):
            gdp -= gdp * gdp_share
            happiness = max(0.0, happiness - happiness_loss)
            log_event("critical", "domestic", message)

    debt_ratio = state.debt / gdp * 100 if gdp > 0 else 0.0

    # ---- treasury, reserves and loans ----
    reserves = min(gdp * RESERVE_CAP, state.reserves + revenue * RESERVE_ACCRUAL)
    loans = service_loans(state.borrowed_money, treasury, reserves, state.debt, speed)
    has_defaulted = state.has_defaulted or loans.defaulted
    if loans.debt != state.debt and gdp > 0:
        debt_ratio = loans.debt / gdp * 100

    # ---- uprising ----
    uprising_triggered = state.uprising_triggered
    previous_happiness = state.previous_happiness
    if happiness < UPRISING_THRESHOLD <= state.happiness:
        previous_happiness = state.happiness
    if not uprising_triggered and ctx.chance(uprising_chance(happiness) * speed):
        uprising_triggered = True
        log_event(
            "critical",
            "domestic",
            "UPRISING! The people have risen against your government. Fight back or surrender.",
        )

    ticked = replace(
        state,
        current_day=new_day,
        gdp=gdp,
        gdp_growth_rate=growth,
        debt=loans.debt,
        debt_to_gdp_ratio=debt_ratio,
        inflation_rate=inflation,
        unemployment_rate=unemployment,
        happiness=happiness,
        treasury=loans.treasury,
        revenue=revenue,
        reserves=loans.reserves,
        sector_levels=sector_levels,
        uprising_triggered=uprising_triggered,
        has_defaulted=has_defaulted,
    )
    score = state.score + score_change(ticked, state)

    # ---- events ----
    world_batch = world_events(state, ctx, new_day)
    new_events.extend(world_batch)
    new_events.extend(battle_events(state, ctx, new_day))
    new_events.extend(advice_events(ticked, ctx, new_day))
    warnings, last_warning_day = warning_events(ticked, ctx, new_day)
    new_events.extend(warnings)
    decision = generate_decision(ticked, ctx)

    impact_treasury = impact_happiness = impact_revenue = 0.0
    impact_unemployment = impact_inflation = impact_growth = impact_reputation = 0.0
    relationships: Dict[str, float] = dict(state.relationships)
    sanctions_on_us = list(state.sanctions_on_us)
    for event in world_batch:
        impact = event.impact
        if impact is None:
            continue
        impact_treasury += impact.treasury or 0.0
        impact_happiness += impact.happiness or 0.0
        impact_revenue += impact.revenue or 0.0
        impact_unemployment += impact.unemployment or 0.0
        impact_inflation += impact.inflation or 0.0
        impact_growth += impact.gdp_growth or 0.0
        impact_reputation += impact.global_reputation or 0.0
        for country_id, change in impact.relationship_changes.items():
            relationships = change_relationship(relationships, country_id, change)
        if impact.sanction_from and impact.sanction_from not in sanctions_on_us:
            sanctions_on_us.append(impact.sanction_from)

    sanctions_on_us = [
        cid for cid in sanctions_on_us if relationships.get(cid, 60.0) <= HOSTILE_CEILING
    ]
    allies, enemies = derive_allies_and_enemies(relationships)

    # ---- wars ----
    pending_war_result = state.pending_war_result
    matured = []
    active_wars = []
    for war in state.active_wars:
        remaining = war.duration - speed
        if remaining > 0:
            active_wars.append(replace(war, duration=remaining))
        elif war.is_player_involved:
            matured.append(replace(war, duration=0))

    war_changes: StateDelta = {}
    if matured and pending_war_result is None:
        finished, matured = matured[0], matured[1:]
        pending_war_result, war_changes = resolve_war(state, finished, ctx)
        outcome = "VICTORY" if pending_war_result.player_won else "DEFEAT"
        log_event(
            "critical",
            "military",
            f"WAR OVER: {outcome} against {pending_war_result.enemy_name}!",
        )
    # Finished wars wait here until the current result is acknowledged
    active_wars.extend(matured)

    if has_defaulted and not state.has_defaulted:
        log_event("critical", "economic", "ECONOMIC COLLAPSE! Your country has defaulted on its debts!")

    pending_decisions = list(state.pending_decisions)
    if decision is not None:
        pending_decisions.append(decision)

    new_state = replace(
        ticked,
        cooldowns=cooldowns,
        gdp_growth_rate=round(growth + impact_growth, 2),
        inflation_rate=clamp(inflation + impact_inflation, 0, 25),
        unemployment_rate=clamp(unemployment + impact_unemployment, 1, 40),
        happiness=clamp(happiness + impact_happiness, 0, 100),
        global_reputation=clamp(state.global_reputation + impact_reputation, 0, 100),
        treasury=max(0.0, loans.treasury + impact_treasury),
        revenue=revenue + impact_revenue,
        score=score,
        previous_score=state.score,
        borrowed_money=loans.loans,
        recent_print_money_count=print_count,
        previous_happiness=previous_happiness,
        relationships=relationships,
        allies=allies,
        enemies=enemies,
        sanctions_on_us=sanctions_on_us,
        active_wars=active_wars,
        is_in_war=bool(active_wars),
        pending_war_result=pending_war_result,
        pending_decisions=pending_decisions,
        last_warning_day=last_warning_day,
    )
    # War outcomes override the day's values
    new_state = apply_delta(new_state, war_changes)
    if "gdp" in war_changes or "debt" in war_changes:
        new_state = replace(
            new_state,
            debt_to_gdp_ratio=new_state.debt / new_state.gdp * 100 if new_state.gdp > 0 else 0.0,
        )

    return replace(
        new_state,
        events=append_events(state.events, new_events),
        next_event_id=ctx.issued,
    )
