#!/usr/bin/env python3
"""
Player command layer.

Every command takes the current snapshot plus the SimContext and returns an
ActionResult. Commands never mutate the snapshot; the caller merges
`state_changes` with apply_delta. A rejected command always carries an empty
delta.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional

from statecraft.context import SimContext
from statecraft.economy import loan_payment, money_printing_shock, sector_spending_effect
from statecraft.helper.world_helpers import COUNTRIES
from statecraft.models import (
    SIM_CONFIG,
    SECTOR_NAMES,
    ActionResult,
    GameEvent,
    Loan,
    StateDelta,
    War,
    WorldState,
)
from statecraft.relationships import (
    change_relationship,
    clear_enemy,
    make_ally,
    make_enemy,
    provocation_consequences,
)
from statecraft.state_utils import clamp
from statecraft.war import validate_war_declaration

COOLDOWNS = SIM_CONFIG.cooldowns
LOANS = SIM_CONFIG.loans
WAR_CFG = SIM_CONFIG.war

# Diplomatic micro-actions: share of treasury spent, relationship change
MICRO_ACTION_COSTS = {
    "cultural_exchange": 0.01,
    "trade_agreement": 0.02,
    "military_cooperation": 0.03,
    "denounce_publicly": 0.01,
    "espionage_mission": 0.05,
    "border_agreement": 0.015,
}
REQUEST_AID_ODDS = {"ally": 0.20, "neutral": 0.10, "enemy": 0.005}
ESPIONAGE_SUCCESS_CHANCE = 0.6
MILITARY_COOPERATION_MIN_SCORE = 70


def _percent(value: float) -> float:
    return clamp(value, 0, 100)


def _player_event(ctx: SimContext, state: WorldState, message: str, category: str) -> GameEvent:
    return ctx.event(state.current_day, "player", category, message)


def _critical_event(ctx: SimContext, state: WorldState, message: str, category: str) -> GameEvent:
    return ctx.event(state.current_day, "critical", category, message)


def reject(message: str, events: Optional[List[GameEvent]] = None) -> ActionResult:
    return ActionResult(success=False, message=message, events=events or [], state_changes={})


def _with_cooldown(state: WorldState, kind: str, days: int) -> Dict[str, int]:
    cooldowns = dict(state.cooldowns)
    cooldowns[kind] = days
    return cooldowns


def _cooldown_left(state: WorldState, kind: str) -> int:
    return state.cooldowns.get(kind, 0)


def _standing(state: WorldState, country_id: str) -> str:
    if country_id in state.allies:
        return "ally"
    if country_id in state.enemies:
        return "enemy"
    return "neutral"


# ---------- Economic commands ----------


def adjust_interest_rate(state: WorldState, ctx: SimContext, rate: float) -> ActionResult:
    new_rate = clamp(rate, 0, 10)
    change = new_rate - state.interest_rate
    direction = "increased" if change > 0 else "decreased"
    return ActionResult(
        success=True,
        message=f"Interest rate adjusted to {new_rate}%",
        events=[
            _player_event(
                ctx,
                state,
                f"You {direction} interest rate by {abs(change):.1f}% to {new_rate}%",
                "economic",
            )
        ],
        state_changes={"interest_rate": new_rate},
    )


def print_money(state: WorldState, ctx: SimContext, amount: float) -> ActionResult:
    """
    Print money into the treasury. Each recent use escalates both the
    inflation shock and the political fallout.
    """
    cooldown = _cooldown_left(state, "print_money")
    if cooldown > 0:
        return reject(f"Action on cooldown! Wait {cooldown} more days.")
    if amount <= 0:
        return reject("Invalid amount")

    prior_uses = state.recent_print_money_count
    escalation = 1 + 0.5 * prior_uses
    inflation_increase = money_printing_shock(amount, state.gdp) * escalation

    changes: StateDelta = {
        "treasury": state.treasury + amount,
        "inflation_rate": clamp(state.inflation_rate + inflation_increase, 0, 25),
        "recent_print_money_count": prior_uses + 1,
        "cooldowns": _with_cooldown(state, "print_money", COOLDOWNS.print_money),
    }
    message = f"You printed money. Treasury increased but inflation spiked by {inflation_increase:.1f}%!"
    if prior_uses == 1:
        changes["happiness"] = _percent(state.happiness - 5)
        message += " Citizens are worried about the currency (-5 happiness)."
    elif prior_uses == 2:
        changes["happiness"] = _percent(state.happiness - 10)
        changes["global_reputation"] = _percent(state.global_reputation - 10)
        message += " Markets lose confidence (-10 happiness, -10 reputation)."
    elif prior_uses >= 3:
        changes["happiness"] = _percent(state.happiness - 15)
        changes["global_reputation"] = _percent(state.global_reputation - 20)
        changes["gdp"] = state.gdp * 0.95
        message += " Currency crisis! (-15 happiness, -20 reputation, -5% GDP)."

    return ActionResult(
        success=True,
        message="Printed money but inflation increased significantly!",
        events=[_player_event(ctx, state, message, "economic")],
        state_changes=changes,
    )


def borrow_from_imf(state: WorldState, ctx: SimContext, amount: float) -> ActionResult:
    cooldown = _cooldown_left(state, "borrow_imf")
    if cooldown > 0:
        return reject(f"Cannot borrow again yet! Wait {cooldown} more days.")
    max_share = LOANS.max_gdp_share
    if amount <= 0 or amount > state.gdp * max_share:
        return reject(f"Invalid amount (maximum {max_share * 100:.0f}% of GDP)")

    rate = LOANS.imf_rate
    loan = Loan(
        id=ctx.next_id("imf"),
        amount=amount,
        remaining=amount,
        interest_rate=rate,
        monthly_payment=loan_payment(amount, rate),
        days_until_next_payment=LOANS.payment_interval_days,
        source="IMF",
    )
    return ActionResult(
        success=True,
        message=f"Borrowed from IMF at {rate}% interest",
        events=[
            _player_event(
                ctx,
                state,
                f"You borrowed ${amount:.2f}B from the IMF. Monthly payment: ${loan.monthly_payment:.2f}B.",
                "economic",
            )
        ],
        state_changes={
            "treasury": state.treasury + amount,
            "debt": state.debt + amount,
            "borrowed_money": [*state.borrowed_money, loan],
            "cooldowns": _with_cooldown(state, "borrow_imf", COOLDOWNS.borrow_imf),
        },
    )


def add_to_reserves(state: WorldState, ctx: SimContext, amount: float) -> ActionResult:
    if amount <= 0 or amount > state.treasury:
        return reject("Invalid amount or insufficient treasury funds")
    return ActionResult(
        success=True,
        message="Moved to reserves",
        events=[_player_event(ctx, state, f"You added ${amount:.2f}B to emergency reserves", "economic")],
        state_changes={
            "treasury": state.treasury - amount,
            "reserves": state.reserves + amount,
        },
    )


def pay_off_debt(state: WorldState, ctx: SimContext, amount: float) -> ActionResult:
    if amount <= 0 or amount > state.treasury:
        return reject("Invalid amount or insufficient treasury funds")
    if state.debt <= 0:
        return reject("No debt to pay off")

    payment = min(amount, state.debt)
    return ActionResult(
        success=True,
        message="Paid off debt",
        events=[
            _player_event(ctx, state, f"You paid off ${payment:.2f}B of debt. Debt-to-GDP ratio improved!", "economic")
        ],
        state_changes={
            "treasury": state.treasury - payment,
            "debt": state.debt - payment,
            "global_reputation": _percent(state.global_reputation + 2),
            "happiness": _percent(state.happiness + 1),
        },
    )


def spend_on_sector(state: WorldState, ctx: SimContext, sector: str, amount: float) -> ActionResult:
    if sector not in SECTOR_NAMES:
        return reject(f"Unknown sector: {sector}")
    if amount <= 0 or amount > state.treasury:
        return reject("Invalid amount or insufficient treasury funds")

    current_level = state.sector_levels.get(sector, 0.0)
    effect = sector_spending_effect(sector, amount, state.country.id, current_level)

    sector_levels = dict(state.sector_levels)
    sector_levels[sector] = current_level + effect.level_increase
    changes: StateDelta = {
        "treasury": state.treasury - amount,
        "sector_levels": sector_levels,
        "happiness": _percent(state.happiness + effect.happiness_change),
        "gdp_growth_rate": state.gdp_growth_rate + effect.gdp_growth_boost,
        "revenue": state.revenue + effect.revenue_boost,
        "unemployment_rate": max(1.0, state.unemployment_rate - effect.unemployment_reduction),
    }
    if sector == "military":
        changes["military_strength"] = min(100.0, state.military_strength + effect.level_increase * 0.5)
    elif sector == "security":
        changes["security"] = min(100.0, state.security + effect.level_increase * 0.5)

    return ActionResult(
        success=True,
        message=effect.message,
        events=[_player_event(ctx, state, f"Spent ${amount:.2f}B on {sector}. {effect.message}", "domestic")],
        state_changes=changes,
    )


def repress_uprising(state: WorldState, ctx: SimContext) -> ActionResult:
    """
    Send in the security forces. A coin flip decides it: success restores the
    happiness recorded before the unrest, failure means the government falls.
    """
    if not state.uprising_triggered:
        return reject("No uprising to repress")

    if ctx.chance(SIM_CONFIG.uprising.suppression_chance):
        return ActionResult(
            success=True,
            message="Uprising suppressed!",
            events=[
                _critical_event(
                    ctx,
                    state,
                    "UPRISING SUPPRESSED! Your forces have put down the rebellion. "
                    "Happiness has been restored as a final warning. Do not let this happen again!",
                    "domestic",
                )
            ],
            state_changes={
                "uprising_triggered": False,
                "happiness": state.previous_happiness,
            },
        )
    return ActionResult(
        success=False,
        message="Uprising victorious!",
        events=[
            _critical_event(
                ctx,
                state,
                "UPRISING VICTORIOUS! Your forces have been overwhelmed. "
                "The people have overthrown your government.",
                "domestic",
            )
        ],
        state_changes={"uprising_triggered": False},
    )


# ---------- Foreign commands ----------


def declare_war(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    validation = validate_war_declaration(state, target_id)
    if not validation.can_declare:
        events = [
            _critical_event(ctx, state, f"WAR BLOCKED: {reason}", "military") for reason in validation.reasons
        ]
        return reject(validation.reasons[0], events)

    target = COUNTRIES[target_id]
    is_enemy = target_id in state.enemies
    tier = WAR_CFG.enemy if is_enemy else WAR_CFG.neutral
    provocation = provocation_consequences(state.relationships.get(target_id, 60.0), state)

    duration = ctx.randint(WAR_CFG.min_duration, WAR_CFG.max_duration)
    war = War(
        id=ctx.next_id("war"),
        attacker=state.country.id,
        defender=target_id,
        start_day=state.current_day,
        duration=duration,
        attacker_strength=state.military_strength,
        defender_strength=target.stats.stability,
        is_player_involved=True,
        is_player_attacker=True,
    )

    relationships = change_relationship(state.relationships, target_id, -WAR_CFG.relationship_penalty)
    relationships = make_enemy(relationships, target_id)
    reputation_loss = (
        tier.reputation_loss
        + WAR_CFG.reputation_loss_per_prior_war * len(state.warred_countries)
        + provocation.reputation_loss
    )
    happiness_loss = tier.happiness_loss + provocation.happiness_loss
    sector_levels = dict(state.sector_levels)
    sector_levels["tourism"] = max(0.0, sector_levels.get("tourism", 0.0) - provocation.tourism_loss)
    cooldown_days = COOLDOWNS.declare_war_enemy if is_enemy else COOLDOWNS.declare_war_neutral

    if is_enemy:
        mood = "Your people support this war against a known enemy."
    else:
        mood = f"Your people are shocked by this unprovoked aggression! {provocation.message}"
    return ActionResult(
        success=True,
        message=f"War declared against {target.name}!",
        events=[
            _player_event(
                ctx,
                state,
                f"You declared war on {target.name}! The war is expected to last {duration} days. {mood}",
                "military",
            )
        ],
        state_changes={
            "treasury": state.treasury - validation.war_cost,
            "is_in_war": True,
            "active_wars": [*state.active_wars, war],
            "relationships": relationships,
            "warred_countries": [*state.warred_countries, target_id],
            "global_reputation": _percent(state.global_reputation - reputation_loss),
            "happiness": _percent(state.happiness - happiness_loss),
            "sector_levels": sector_levels,
            "cooldowns": _with_cooldown(state, "declare_war", cooldown_days),
        },
    )


def impose_sanction(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    target = COUNTRIES.get(target_id)
    if target is None or target_id == state.country.id:
        return reject("Invalid target country")
    if target_id in state.sanctions_imposed:
        return reject(
            "Already sanctioning this country",
            [_critical_event(ctx, state, f"You are already sanctioning {target.name}.", "diplomatic")],
        )

    was_ally = target_id in state.allies
    provocation = provocation_consequences(state.relationships.get(target_id, 60.0), state)
    relationships = change_relationship(state.relationships, target_id, -20)
    relationships = make_enemy(relationships, target_id)

    reputation_loss = 5 + provocation.reputation_loss / 2 + (10 if was_ally else 0)
    happiness_loss = provocation.happiness_loss / 2 + (5 if was_ally else 0)
    note = f" This breaks your alliance with {target.name}! They are now your enemy." if was_ally else ""
    return ActionResult(
        success=True,
        message=f"Sanctions imposed on {target.name}",
        events=[_player_event(ctx, state, f"You imposed economic sanctions on {target.name}.{note}", "diplomatic")],
        state_changes={
            "relationships": relationships,
            "sanctions_imposed": [*state.sanctions_imposed, target_id],
            "global_reputation": _percent(state.global_reputation - reputation_loss),
            "happiness": _percent(state.happiness - happiness_loss),
        },
    )


def propose_alliance(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    target = COUNTRIES.get(target_id)
    if target is None or target_id == state.country.id:
        return reject("Invalid target country")
    if target_id in state.allies:
        return reject("Already allied with this country")
    if target_id in state.enemies:
        return reject(
            "Cannot ally with an enemy",
            [_critical_event(ctx, state, f"{target.name} is hostile and will not consider an alliance.", "diplomatic")],
        )

    if ctx.chance(state.global_reputation / 100):
        return ActionResult(
            success=True,
            message=f"Alliance formed with {target.name}!",
            events=[_player_event(ctx, state, f"{target.name} accepted your alliance proposal!", "diplomatic")],
            state_changes={
                "relationships": make_ally(state.relationships, target_id),
                "global_reputation": _percent(state.global_reputation + 10),
            },
        )
    return ActionResult(
        success=False,
        message=f"{target.name} rejected your alliance proposal",
        events=[
            _player_event(
                ctx,
                state,
                f"{target.name} rejected your alliance proposal. Try improving your global reputation.",
                "diplomatic",
            )
        ],
        state_changes={"global_reputation": _percent(state.global_reputation - 2)},
    )


def send_aid(state: WorldState, ctx: SimContext, target_id: str, amount: float) -> ActionResult:
    if amount <= 0 or amount > state.treasury:
        return reject("Invalid amount or insufficient treasury funds")
    target = COUNTRIES.get(target_id)
    if target is None or target_id == state.country.id:
        return reject("Invalid target country")

    standing = _standing(state, target_id)
    total_aid = state.cumulative_aid.get(target_id, 0.0) + amount
    aid_share = (total_aid / state.gdp) * 100 if state.gdp > 0 else 0.0

    cumulative_aid = dict(state.cumulative_aid)
    cumulative_aid[target_id] = total_aid
    changes: StateDelta = {
        "treasury": state.treasury - amount,
        "global_reputation": _percent(state.global_reputation + 5),
        "cumulative_aid": cumulative_aid,
    }
    message = f"Sent ${amount:.2f}B in aid to {target.name}"

    if standing == "enemy":
        if aid_share >= 2:
            changes["relationships"] = clear_enemy(state.relationships, target_id)
            message += f". {target.name} is now NEUTRAL with you! (Total aid: ${total_aid:.2f}B)"
        else:
            remaining = state.gdp * 0.02 - total_aid
            message += f". They remain hostile. (Need ${remaining:.2f}B more for neutral relations)"
    elif standing == "neutral":
        if aid_share >= 5:
            changes["relationships"] = make_ally(state.relationships, target_id)
            changes["global_reputation"] = _percent(state.global_reputation + 15)
            message += f". {target.name} has become your ALLY! (Total aid: ${total_aid:.2f}B)"
        else:
            remaining = state.gdp * 0.05 - total_aid
            message += f". Relations improving. (Need ${remaining:.2f}B more for alliance)"
    else:
        changes["global_reputation"] = _percent(state.global_reputation + 10)
        message += f". Alliance strengthened! (Total aid: ${total_aid:.2f}B)"

    return ActionResult(
        success=True,
        message=message,
        events=[_player_event(ctx, state, message, "diplomatic")],
        state_changes=changes,
    )


def request_aid(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    cooldown = _cooldown_left(state, "request_aid")
    if cooldown > 0:
        return reject(f"Cannot request aid again yet! Wait {cooldown} more days.")
    target = COUNTRIES.get(target_id)
    if target is None or target_id == state.country.id:
        return reject("Invalid target country")

    cooldowns = _with_cooldown(state, "request_aid", COOLDOWNS.request_aid)
    if ctx.chance(REQUEST_AID_ODDS[_standing(state, target_id)]):
        amount = state.gdp * ctx.uniform(0.05, 0.15)
        return ActionResult(
            success=True,
            message=f"{target.name} sent ${amount:.2f}B in aid!",
            events=[
                _player_event(ctx, state, f"{target.name} answered your plea with ${amount:.2f}B in aid!", "diplomatic")
            ],
            state_changes={
                "treasury": state.treasury + amount,
                "happiness": _percent(state.happiness + 5),
                "global_reputation": _percent(state.global_reputation + 3),
                "cooldowns": cooldowns,
            },
        )
    return ActionResult(
        success=False,
        message=f"{target.name} declined your aid request",
        events=[_player_event(ctx, state, f"{target.name} declined your request for aid.", "diplomatic")],
        state_changes={
            "global_reputation": _percent(state.global_reputation - 1),
            "cooldowns": cooldowns,
        },
    )


# ---------- Diplomatic micro-actions ----------


def _micro_target(state: WorldState, target_id: str) -> Optional[ActionResult]:
    if target_id not in COUNTRIES or target_id == state.country.id:
        return reject("Invalid target country")
    if state.treasury <= 0:
        return reject("Insufficient treasury funds")
    return None


def cultural_exchange(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    cost = state.treasury * MICRO_ACTION_COSTS["cultural_exchange"]
    return ActionResult(
        success=True,
        message=f"Cultural exchange with {name} launched",
        events=[_player_event(ctx, state, f"Artists and students travel between your nation and {name}.", "diplomatic")],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, 5),
            "happiness": _percent(state.happiness + 1),
        },
    )


def trade_agreement(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    if target_id in state.enemies:
        return reject(f"{name} refuses to trade with a hostile nation")
    cost = state.treasury * MICRO_ACTION_COSTS["trade_agreement"]
    return ActionResult(
        success=True,
        message=f"Trade agreement signed with {name}",
        events=[_player_event(ctx, state, f"You signed a trade agreement with {name}. Markets cheer.", "economic")],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, 8),
            "gdp_growth_rate": state.gdp_growth_rate + 0.1,
        },
    )


def military_cooperation(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    score = state.relationships.get(target_id, 60.0)
    if score < MILITARY_COOPERATION_MIN_SCORE:
        return reject(
            f"Relationship with {name} too low: {score:.0f} (need {MILITARY_COOPERATION_MIN_SCORE})"
        )
    cost = state.treasury * MICRO_ACTION_COSTS["military_cooperation"]
    return ActionResult(
        success=True,
        message=f"Joint exercises with {name}",
        events=[_player_event(ctx, state, f"Your forces held joint exercises with {name}.", "military")],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, 10),
            "military_strength": min(100.0, state.military_strength + 2),
        },
    )


def denounce_publicly(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    cost = state.treasury * MICRO_ACTION_COSTS["denounce_publicly"]
    return ActionResult(
        success=True,
        message=f"You publicly denounced {name}",
        events=[_player_event(ctx, state, f"You denounced {name} in a televised address. Crowds rally behind you.", "diplomatic")],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, -10),
            "happiness": _percent(state.happiness + 1),
        },
    )


def espionage_mission(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    cost = state.treasury * MICRO_ACTION_COSTS["espionage_mission"]
    if ctx.chance(ESPIONAGE_SUCCESS_CHANCE):
        return ActionResult(
            success=True,
            message=f"Espionage in {name} succeeded",
            events=[_player_event(ctx, state, f"Your agents stole valuable intelligence from {name}.", "military")],
            state_changes={
                "treasury": state.treasury - cost,
                "security": min(100.0, state.security + 3),
                "military_strength": min(100.0, state.military_strength + 1),
            },
        )
    return ActionResult(
        success=False,
        message=f"Spies caught in {name}!",
        events=[
            _critical_event(
                ctx, state, f"Your spies were caught in {name}! A diplomatic scandal erupts.", "diplomatic"
            )
        ],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, -20),
            "global_reputation": _percent(state.global_reputation - 10),
            "happiness": _percent(state.happiness - 3),
        },
    )


def border_agreement(state: WorldState, ctx: SimContext, target_id: str) -> ActionResult:
    rejected = _micro_target(state, target_id)
    if rejected:
        return rejected
    name = COUNTRIES[target_id].name
    cost = state.treasury * MICRO_ACTION_COSTS["border_agreement"]
    return ActionResult(
        success=True,
        message=f"Border agreement signed with {name}",
        events=[_player_event(ctx, state, f"You settled border arrangements with {name}.", "diplomatic")],
        state_changes={
            "treasury": state.treasury - cost,
            "relationships": change_relationship(state.relationships, target_id, 6),
            "security": min(100.0, state.security + 2),
        },
    )


COMMANDS: Dict[str, Callable[..., ActionResult]] = {
    "adjust_interest_rate": adjust_interest_rate,
    "print_money": print_money,
    "borrow_from_imf": borrow_from_imf,
    "add_to_reserves": add_to_reserves,
    "pay_off_debt": pay_off_debt,
    "spend_on_sector": spend_on_sector,
    "repress_uprising": repress_uprising,
    "declare_war": declare_war,
    "impose_sanction": impose_sanction,
    "propose_alliance": propose_alliance,
    "send_aid": send_aid,
    "request_aid": request_aid,
    "cultural_exchange": cultural_exchange,
    "trade_agreement": trade_agreement,
    "military_cooperation": military_cooperation,
    "denounce_publicly": denounce_publicly,
    "espionage_mission": espionage_mission,
    "border_agreement": border_agreement,
}
