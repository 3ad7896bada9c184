#!/usr/bin/env python3
"""
Blocking presidential decisions.

Each generator checks a state guard, rolls its own odds and returns a
Decision whose choice effects are relative adjustments. effect_changes turns
the picked effect into a clamped delta against the snapshot current at
resolution, so commands issued while the decision waits are kept. At most
one decision is produced per attempt.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional

from statecraft.context import SimContext
from statecraft.helper.world_helpers import COUNTRIES
from statecraft.models import (
    SIM_CONFIG,
    Decision,
    DecisionChoice,
    DecisionEffect,
    StateDelta,
    War,
    WorldState,
)
from statecraft.relationships import break_alliance, make_enemy
from statecraft.state_utils import clamp
from statecraft.war import enemy_of

DECISION_ODDS = SIM_CONFIG.event_odds.decision
DECISION_WAR_DURATION = SIM_CONFIG.war.decision_war_duration
DEFAULT_FOREIGN_STRENGTH = 50.0

DecisionGenerator = Callable[[WorldState, SimContext], Optional[Decision]]


# ---------- Effect builders ----------


def _fatal(message: str) -> DecisionEffect:
    return DecisionEffect(message, fatal=True)


def _with_war(
    state: WorldState, ctx: SimContext, effect: DecisionEffect, enemy_id: str, player_attacker: bool
) -> DecisionEffect:
    war = War(
        id=ctx.next_id("war"),
        attacker=state.country.id if player_attacker else enemy_id,
        defender=enemy_id if player_attacker else state.country.id,
        start_day=state.current_day,
        duration=DECISION_WAR_DURATION,
        attacker_strength=state.military_strength if player_attacker else DEFAULT_FOREIGN_STRENGTH,
        defender_strength=DEFAULT_FOREIGN_STRENGTH if player_attacker else state.military_strength,
        is_player_involved=True,
        is_player_attacker=player_attacker,
    )
    return replace(effect, war=war)


def effect_changes(state: WorldState, effect: DecisionEffect) -> StateDelta:
    """Clamped delta that applies `effect` to `state`."""
    if effect.fatal:
        return {"happiness": 0.0}

    changes: StateDelta = {}
    if effect.treasury or effect.treasury_factor != 1.0:
        changes["treasury"] = max(0.0, state.treasury * effect.treasury_factor + effect.treasury)
    if effect.gdp_factor != 1.0:
        changes["gdp"] = state.gdp * effect.gdp_factor
    if effect.debt_factor != 1.0:
        changes["debt"] = state.debt * effect.debt_factor
    if "gdp" in changes or "debt" in changes:
        gdp = changes.get("gdp", state.gdp)
        debt = changes.get("debt", state.debt)
        changes["debt_to_gdp_ratio"] = debt / gdp * 100 if gdp > 0 else 0.0
    if effect.revenue_factor != 1.0:
        changes["revenue"] = state.revenue * effect.revenue_factor
    if effect.happiness:
        changes["happiness"] = clamp(state.happiness + effect.happiness, 0, 100)
    if effect.reputation:
        changes["global_reputation"] = clamp(state.global_reputation + effect.reputation, 0, 100)
    if effect.unemployment:
        changes["unemployment_rate"] = clamp(state.unemployment_rate + effect.unemployment, 1, 40)
    if effect.growth:
        changes["gdp_growth_rate"] = round(state.gdp_growth_rate + effect.growth, 2)
    if effect.military:
        changes["military_strength"] = clamp(state.military_strength + effect.military, 0, 100)
    if effect.sectors:
        levels = dict(state.sector_levels)
        for sector, change in effect.sectors.items():
            levels[sector] = max(0.0, levels.get(sector, 0.0) + change)
        changes["sector_levels"] = levels
    if effect.defaults:
        changes["has_defaulted"] = True

    relationships = state.relationships
    if effect.breaks_alliance_with:
        relationships = break_alliance(relationships, effect.breaks_alliance_with)
    if effect.war is not None:
        enemy_id = enemy_of(effect.war)
        if enemy_id not in _at_war_with(state):
            changes["active_wars"] = [*state.active_wars, replace(effect.war, start_day=state.current_day)]
            changes["is_in_war"] = True
        if enemy_id not in state.warred_countries:
            changes["warred_countries"] = [*state.warred_countries, enemy_id]
        relationships = make_enemy(relationships, enemy_id)
    if relationships is not state.relationships:
        changes["relationships"] = relationships
    return changes


def _choice(
    label: str,
    description: str,
    success: DecisionEffect,
    failure: Optional[DecisionEffect] = None,
    chance: float = 1.0,
) -> DecisionChoice:
    return DecisionChoice(
        label=label,
        description=description,
        success_chance=chance,
        success_effect=success,
        failure_effect=failure,
    )


def _first_known(country_ids: List[str], exclude: List[str]) -> Optional[str]:
    """First country in catalog order that is listed and not excluded."""
    for country_id in COUNTRIES:
        if country_id in country_ids and country_id not in exclude:
            return country_id
    return None


def _at_war_with(state: WorldState) -> List[str]:
    return [w.attacker for w in state.active_wars] + [w.defender for w in state.active_wars]


# ---------- Generators ----------


def enemy_declares_war(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if not state.enemies:
        return None
    if state.global_reputation > 40:
        return None
    if state.military_strength > state.initial_stats.military_strength:
        return None
    if not ctx.chance(0.3):
        return None
    enemy_id = _first_known(state.enemies, state.warred_countries + _at_war_with(state))
    if enemy_id is None:
        return None

    enemy = COUNTRIES[enemy_id].name
    tribute = state.treasury * 0.20
    return Decision(
        id=ctx.next_id("decision"),
        title=f"{enemy} DECLARES WAR!",
        description=(
            f"{enemy} has declared war on {state.country.name}! Your reputation is low "
            f"({state.global_reputation:.0f}) and they see you as weak. How do you respond?"
        ),
        icon="war",
        urgency="critical",
        choices=[
            _choice(
                "Fight Back",
                "Declare war and defend your nation",
                _with_war(
                    state,
                    ctx,
                    DecisionEffect(
                        f"You declared war on {enemy} in self-defense!",
                        treasury=-tribute * 0.5,
                        happiness=-5,
                    ),
                    enemy_id,
                    player_attacker=True,
                ),
            ),
            _choice(
                f"Pay {tribute:.1f}B to Make Deal",
                "Pay tribute to avoid war",
                DecisionEffect(
                    f"You paid {tribute:.1f}B to {enemy} to avoid war. Your people see this as weakness.",
                    treasury=-tribute,
                    happiness=-12,
                    reputation=-15,
                ),
            ),
            _choice(
                "Diplomatic Approach",
                "60% chance of success - negotiate peace",
                DecisionEffect(
                    f"Diplomatic success! You negotiated peace with {enemy}. Reputation improved!",
                    reputation=10,
                    happiness=5,
                ),
                _with_war(
                    state,
                    ctx,
                    DecisionEffect(
                        f"Diplomacy failed! {enemy} attacks anyway!",
                        treasury=-tribute,
                        happiness=-8,
                        reputation=-10,
                    ),
                    enemy_id,
                    player_attacker=False,
                ),
                chance=0.6,
            ),
            _choice(
                "Ignore",
                "40% chance they back down",
                DecisionEffect(
                    f"{enemy} was bluffing! They backed down. But your weakness is noted.",
                    reputation=-5,
                ),
                _with_war(
                    state,
                    ctx,
                    DecisionEffect(
                        f"{enemy} attacks! You're caught completely unprepared!",
                        military=-20,
                        treasury=-tribute,
                        happiness=-15,
                        gdp_factor=0.90,
                    ),
                    enemy_id,
                    player_attacker=False,
                ),
                chance=0.4,
            ),
        ],
    )


def ai_breakthrough(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.sector_levels.get("education", 0.0) < 40:
        return None
    if not ctx.chance(0.4):
        return None

    cost = state.treasury * 0.10
    return Decision(
        id=ctx.next_id("decision"),
        title="AI TECHNOLOGY BREAKTHROUGH!",
        description=(
            "Your scientists have made a major breakthrough in artificial intelligence! This could "
            "revolutionize your economy, but there are concerns about job losses and ethics."
        ),
        icon="ai",
        urgency="medium",
        choices=[
            _choice(
                f"Support Research ({cost:.1f}B)",
                "Fund AI development - boost GDP but increase unemployment",
                DecisionEffect(
                    "AI research funded! Your economy is modernizing rapidly, but some workers are displaced.",
                    treasury=-cost,
                    gdp_factor=1.15,
                    unemployment=3,
                    happiness=5,
                    sectors={"education": 10},
                ),
            ),
            _choice(
                "Ban AI Development",
                "Stop research - protect jobs but fall behind",
                DecisionEffect(
                    "AI development banned. Workers protected, but your country falls behind technologically.",
                    happiness=3,
                    growth=-0.5,
                    reputation=-5,
                ),
            ),
            _choice(
                "Regulate Carefully",
                "Balanced approach - moderate both benefits and risks",
                DecisionEffect(
                    "AI regulations implemented. Balanced growth with worker protections.",
                    gdp_factor=1.07,
                    unemployment=1,
                    happiness=2,
                ),
            ),
        ],
    )


def assassination_plot(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.sector_levels.get("security", 0.0) > 50:
        return None
    if state.happiness > 60:
        return None
    if not ctx.chance(0.35):
        return None

    cost = state.treasury * 0.10
    return Decision(
        id=ctx.next_id("decision"),
        title="ASSASSINATION PLOT DISCOVERED!",
        description=(
            "Your intelligence services have uncovered a plot against your life! Low security and "
            "unhappy citizens have emboldened conspirators. Act quickly!"
        ),
        icon="plot",
        urgency="critical",
        choices=[
            _choice(
                "Ignore",
                "20% risk of GAME OVER!",
                DecisionEffect("False alarm! The plot was exaggerated. But your security is still weak.", happiness=-2),
                _fatal("YOU HAVE BEEN ASSASSINATED! Game Over."),
                chance=0.8,
            ),
            _choice(
                f"Launch Investigation ({cost:.1f}B)",
                "Find and stop the conspirators",
                DecisionEffect(
                    "Conspirators arrested! Security improved, but some innocent people were caught in the dragnet.",
                    treasury=-cost,
                    sectors={"security": 15},
                    happiness=-3,
                ),
                DecisionEffect(
                    "Investigation failed! Conspirators remain at large.",
                    treasury=-cost,
                    happiness=-8,
                    sectors={"security": -5},
                ),
                chance=0.85,
            ),
            _choice(
                "Increase Security",
                "Boost security spending permanently",
                DecisionEffect(
                    "Security forces strengthened! Plot thwarted. Citizens feel safer.",
                    sectors={"security": 20},
                    happiness=5,
                    treasury=-cost * 1.5,
                ),
            ),
        ],
    )


def debt_crisis_ultimatum(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.debt_to_gdp_ratio < 120:
        return None
    if not ctx.chance(0.4):
        return None

    fine = state.gdp * 0.30
    default = DecisionEffect(
        f"Creditors imposed massive {fine:.0f}B sanctions! Economic disaster!",
        treasury=-fine,
        gdp_factor=0.85,
        reputation=-30,
        defaults=True,
    )

    austerity = DecisionEffect(
        "Austerity measures implemented. Debt reduced but all sectors suffer.",
        happiness=-15,
        sectors={"health": -10, "education": -10, "infrastructure": -10},
        debt_factor=0.70,
    )

    raise_taxes = DecisionEffect(
        "Taxes raised! Revenue increased but citizens are FURIOUS. Mass protests.",
        happiness=-20,
        unemployment=4,
        revenue_factor=1.5,
    )

    return Decision(
        id=ctx.next_id("decision"),
        title="DEBT CRISIS ULTIMATUM!",
        description=(
            f"Your debt-to-GDP ratio is {state.debt_to_gdp_ratio:.0f}%! International creditors are "
            "threatening action. You must make a difficult choice."
        ),
        icon="bank",
        urgency="critical",
        choices=[
            _choice("Raise Taxes", "Increase revenue but risk civil unrest", raise_taxes),
            _choice(
                "Ignore Creditors",
                f"30% chance of {fine:.0f}B fine",
                DecisionEffect("Creditors backed down! You called their bluff. But reputation damaged.", reputation=-20),
                default,
                chance=0.7,
            ),
            _choice("Emergency Austerity", "Cut all spending to pay debt", austerity),
        ],
    )


def natural_disaster(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if not ctx.chance(0.3):
        return None

    relief = state.gdp * 0.05
    full_relief = state.gdp * 0.12
    return Decision(
        id=ctx.next_id("decision"),
        title="NATURAL DISASTER STRIKES!",
        description=(
            "A devastating earthquake has hit your nation! Thousands are displaced. Infrastructure "
            "damaged. Your response will define your leadership."
        ),
        icon="disaster",
        urgency="high",
        choices=[
            _choice(
                f"Full Relief ({full_relief:.1f}B)",
                "Comprehensive aid - expensive but saves many lives",
                DecisionEffect(
                    "Full relief deployed! Lives saved, infrastructure quickly rebuilt. People grateful.",
                    treasury=-full_relief,
                    happiness=15,
                    sectors={"infrastructure": -5},
                ),
            ),
            _choice(
                f"Minimal Relief ({relief:.1f}B)",
                "Basic aid only - many suffer",
                DecisionEffect(
                    "Minimal relief provided. Many people left to rebuild on their own. Resentment grows.",
                    treasury=-relief,
                    happiness=-10,
                    sectors={"infrastructure": -15},
                ),
            ),
            _choice(
                "Request International Aid",
                "70% chance of receiving help",
                DecisionEffect(
                    "International community sends aid! Your reputation improves.",
                    happiness=8,
                    reputation=10,
                    sectors={"infrastructure": -8},
                ),
                DecisionEffect(
                    "No help arrived! You look weak on the world stage.",
                    happiness=-15,
                    reputation=-15,
                    sectors={"infrastructure": -20},
                ),
                chance=0.7,
            ),
        ],
    )


def trade_deal_offer(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if not state.allies:
        return None
    if not ctx.chance(0.4):
        return None
    ally_id = _first_known(state.allies, [])
    if ally_id is None:
        return None

    ally = COUNTRIES[ally_id].name
    walked_away = DecisionEffect(
        f"{ally} walked away! Deal canceled. They're insulted.",
        reputation=-10,
        breaks_alliance_with=ally_id,
    )

    return Decision(
        id=ctx.next_id("decision"),
        title=f"{ally} TRADE DEAL OFFER",
        description=(
            f"{ally} proposes a major trade agreement! This could boost your economy significantly "
            "but may hurt some domestic industries."
        ),
        icon="trade",
        urgency="medium",
        choices=[
            _choice(
                "Accept Deal",
                "+12% GDP but +2% unemployment",
                DecisionEffect(
                    f"Trade deal with {ally} signed! Economy booming but some domestic jobs lost.",
                    gdp_factor=1.12,
                    unemployment=2,
                    reputation=8,
                ),
            ),
            _choice(
                "Reject Deal",
                "Protect domestic industry",
                DecisionEffect(
                    "Deal rejected. Domestic industries protected but growth opportunity missed.",
                    happiness=3,
                    growth=-0.3,
                ),
            ),
            _choice(
                "Negotiate Better Terms",
                "50% success - better deal or nothing",
                DecisionEffect(
                    "Negotiation success! Better deal secured with minimal job losses!",
                    gdp_factor=1.15,
                    unemployment=0.5,
                    reputation=12,
                ),
                walked_away,
                chance=0.5,
            ),
        ],
    )


def refugee_crisis(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if not ctx.chance(0.3):
        return None

    cost = state.gdp * 0.08
    return Decision(
        id=ctx.next_id("decision"),
        title="REFUGEE CRISIS AT BORDER",
        description=(
            "100,000 refugees fleeing war and famine are at your border seeking asylum. Your decision "
            "will have major economic and moral consequences."
        ),
        icon="refugees",
        urgency="high",
        choices=[
            _choice(
                f"Accept Refugees ({cost:.1f}B)",
                "Provide asylum - expensive but moral",
                DecisionEffect(
                    "Refugees welcomed! Global praise but short-term costs. Long-term workforce boost.",
                    treasury=-cost,
                    reputation=20,
                    happiness=-5,
                    unemployment=1.5,
                    growth=0.4,
                ),
            ),
            _choice(
                "Close Borders",
                "Refuse entry - protect resources",
                DecisionEffect(
                    "Borders closed. Refugees turned away. International condemnation but domestic support.",
                    reputation=-25,
                    happiness=8,
                ),
            ),
            _choice(
                "Limited Asylum",
                "Accept 20,000 most vulnerable",
                DecisionEffect(
                    "Selective asylum granted. Compromise solution but criticized by both sides.",
                    treasury=-cost * 0.25,
                    reputation=-5,
                    unemployment=0.3,
                ),
            ),
        ],
    )


def corruption_scandal(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.sector_levels.get("security", 0.0) > 60:
        return None
    if not ctx.chance(0.35):
        return None

    return Decision(
        id=ctx.next_id("decision"),
        title="MAJOR CORRUPTION SCANDAL!",
        description=(
            "Evidence emerges that senior officials have been embezzling millions! The public demands "
            "action. Your response will define your integrity."
        ),
        icon="scandal",
        urgency="high",
        choices=[
            _choice(
                "Full Investigation",
                "Prosecute everyone - lose some allies",
                DecisionEffect(
                    "Corruption purge complete! Public trust restored but powerful people now hate you.",
                    happiness=12,
                    reputation=15,
                    treasury=state.gdp * 0.05,
                    sectors={"security": 10},
                ),
            ),
            _choice(
                "Cover It Up",
                "60% chance of success",
                DecisionEffect("Scandal buried. You maintain powerful allies but your soul is tarnished.", reputation=-5),
                DecisionEffect(
                    "Cover-up EXPOSED! Massive scandal! People demand your resignation!",
                    happiness=-30,
                    reputation=-40,
                ),
                chance=0.6,
            ),
            _choice(
                "Scapegoat Low-Level Officials",
                "Blame underlings, protect the powerful",
                DecisionEffect(
                    "Low-level officials prosecuted. Corruption continues but public satisfied for now.",
                    happiness=3,
                    treasury=state.gdp * 0.01,
                ),
            ),
        ],
    )


def economic_boom_opportunity(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.gdp_growth_rate < 2:
        return None
    if not ctx.chance(0.35):
        return None

    cost = state.treasury * 0.25
    return Decision(
        id=ctx.next_id("decision"),
        title="ONCE-IN-A-LIFETIME INVESTMENT!",
        description=(
            "A rare opportunity to invest in a booming sector! Tech giants want to build facilities in "
            "your country. Large upfront cost but massive long-term gains."
        ),
        icon="boom",
        urgency="medium",
        choices=[
            _choice(
                f"Invest Big ({cost:.1f}B)",
                "All-in - huge risk, huge reward",
                DecisionEffect(
                    "JACKPOT! Investment pays off massively! Your economy is booming!",
                    treasury=-cost,
                    gdp_factor=1.30,
                    growth=1.5,
                    unemployment=-5,
                    happiness=15,
                ),
                DecisionEffect(
                    "Investment FAILED! Companies pulled out. Massive losses.",
                    treasury=-cost,
                    happiness=-12,
                    reputation=-10,
                ),
                chance=0.75,
            ),
            _choice(
                "Pass",
                "Too risky - stay safe",
                DecisionEffect(
                    "Opportunity passed. Later you learn it would have made you rich. Regret lingers.",
                    happiness=-5,
                ),
            ),
        ],
    )


def military_coup_attempt(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.military_strength > 60:
        return None
    if state.happiness > 50:
        return None
    if not ctx.chance(0.25):
        return None

    appeased = DecisionEffect(
        "Generals appeased with bribes and promotions. You keep power but are now their puppet.",
        military=10,
        happiness=-8,
        treasury_factor=0.70,
    )

    return Decision(
        id=ctx.next_id("decision"),
        title="MILITARY COUP ATTEMPT!",
        description=(
            "The military is unhappy! Generals are planning a coup! Your weak position has emboldened "
            "them. Act fast or lose power!"
        ),
        icon="coup",
        urgency="critical",
        choices=[
            _choice(
                "Arrest Generals",
                "50% success - risky but ends threat",
                DecisionEffect(
                    "Coup leaders arrested! Military purged and rebuilt. You survive!",
                    military=-30,
                    sectors={"security": 20},
                    happiness=10,
                ),
                _fatal("COUP SUCCESSFUL! You have been overthrown! GAME OVER."),
                chance=0.5,
            ),
            _choice(
                "Negotiate With Generals",
                "Give them concessions",
                appeased,
                _fatal("Negotiations failed! Coup proceeds! GAME OVER."),
                chance=0.8,
            ),
            _choice(
                "Rally Public Support",
                "60% success - people vs military",
                DecisionEffect(
                    "Public rallies behind you! Coup collapses. Democracy wins!",
                    happiness=20,
                    military=-15,
                    reputation=20,
                ),
                _fatal("Public support insufficient! Military takes over! GAME OVER."),
                chance=0.6,
            ),
        ],
    )


def border_dispute(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if not state.enemies:
        return None
    if not ctx.chance(0.35):
        return None
    enemy_id = _first_known(state.enemies, [])
    if enemy_id is None:
        return None

    enemy = COUNTRIES[enemy_id].name
    escalation = DecisionEffect("Both sides fired! Conflict escalates into war!")
    if enemy_id not in state.warred_countries and enemy_id not in _at_war_with(state):
        escalation = _with_war(state, ctx, escalation, enemy_id, player_attacker=True)
    else:
        escalation = DecisionEffect(
            f"Both sides fired! Skirmishes with {enemy} cost lives and money.",
            military=-10,
            happiness=-5,
        )

    return Decision(
        id=ctx.next_id("decision"),
        title=f"BORDER DISPUTE WITH {enemy}",
        description=(
            f"{enemy} claims your territory! They've moved troops to the border. Tensions are high. "
            "One wrong move could start a war."
        ),
        icon="border",
        urgency="high",
        choices=[
            _choice(
                "Send Troops",
                "Show strength - 70% they back down",
                DecisionEffect(
                    f"{enemy} backed down! Your show of force worked. Respect earned.",
                    reputation=8,
                    military=5,
                ),
                escalation,
                chance=0.7,
            ),
            _choice(
                "Diplomatic Solution",
                "Cede disputed land to avoid war",
                DecisionEffect(
                    "Border dispute resolved peacefully. You gave up small territory.",
                    gdp_factor=0.97,
                    happiness=-8,
                    reputation=-5,
                ),
            ),
        ],
    )


def ethnic_conflict(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.happiness > 50:
        return None
    if not ctx.chance(0.3):
        return None

    return Decision(
        id=ctx.next_id("decision"),
        title="ETHNIC CONFLICT ERUPTS!",
        description=(
            "Tensions between communities have boiled over into violence. Unhappy citizens are "
            "turning on each other. You must restore order."
        ),
        icon="conflict",
        urgency="high",
        choices=[
            _choice(
                "Deploy Military",
                "85% success - restore order by force",
                DecisionEffect(
                    "Military deployed. Order restored but at a heavy cost. Some innocents killed.",
                    happiness=-10,
                    sectors={"security": 15},
                    military=-10,
                ),
                DecisionEffect(
                    "Military intervention backfired! Violence spreads! Society fracturing!",
                    happiness=-25,
                    gdp_factor=0.90,
                ),
                chance=0.85,
            ),
            _choice(
                "Mediate Peace",
                "50% success - lasting peace or more violence",
                DecisionEffect(
                    "Peace talks successful! Communities agree to reconciliation process.",
                    happiness=10,
                    reputation=15,
                ),
                DecisionEffect(
                    "Mediation failed! Violence continues to spread!",
                    happiness=-15,
                    gdp_factor=0.93,
                ),
                chance=0.5,
            ),
        ],
    )


def brain_drain(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    if state.sector_levels.get("education", 0.0) > 50:
        return None
    if not ctx.chance(0.35):
        return None

    cost = state.gdp * 0.06
    return Decision(
        id=ctx.next_id("decision"),
        title="BRAIN DRAIN CRISIS",
        description=(
            "Your best doctors, engineers and scientists are emigrating for better opportunities "
            "abroad. Without them, your future looks bleak."
        ),
        icon="brain",
        urgency="medium",
        choices=[
            _choice(
                f"Offer Incentives ({cost:.1f}B)",
                "75% chance to keep them",
                DecisionEffect(
                    "Incentives work! Many skilled workers stay. Education sector strengthened.",
                    treasury=-cost,
                    sectors={"education": 15},
                    growth=0.5,
                ),
                DecisionEffect(
                    "Money not enough! They still leave. Funds wasted.",
                    treasury=-cost,
                    happiness=-5,
                ),
                chance=0.75,
            ),
            _choice(
                "Let Them Go",
                "Save money but lose talent",
                DecisionEffect(
                    "Educated elite leaves. Your country loses its best minds.",
                    sectors={"education": -20},
                    growth=-0.8,
                    unemployment=-1,
                ),
            ),
        ],
    )


def infrastructure_failure(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    decline = state.initial_stats.sector_levels.get("infrastructure", 0.0) - state.sector_levels.get(
        "infrastructure", 0.0
    )
    if decline < 15:
        return None
    if not ctx.chance(0.4):
        return None

    cost = state.gdp * 0.15
    return Decision(
        id=ctx.next_id("decision"),
        title="INFRASTRUCTURE COLLAPSE!",
        description=(
            "Years of neglect have caught up with you. The power grid has failed and a major bridge "
            "has collapsed. Citizens are furious."
        ),
        icon="infrastructure",
        urgency="critical",
        choices=[
            _choice(
                f"Emergency Repairs ({cost:.1f}B)",
                "Fix everything now at full cost",
                DecisionEffect(
                    "Emergency repairs completed! Grid restored. Expensive but effective.",
                    treasury=-cost,
                    sectors={"infrastructure": 25},
                    happiness=8,
                ),
            ),
            _choice(
                f"Gradual Repairs ({cost * 0.5:.1f}B)",
                "Half the cost, months of outages",
                DecisionEffect(
                    "Slow repairs underway. People suffer weeks of blackouts. Deep resentment.",
                    treasury=-cost * 0.5,
                    sectors={"infrastructure": 10},
                    happiness=-12,
                    gdp_factor=0.95,
                ),
            ),
            _choice(
                "Request Foreign Help",
                "60% chance - humiliating but free",
                DecisionEffect(
                    "Foreign engineers fix your infrastructure. Humiliating but effective.",
                    sectors={"infrastructure": 30},
                    reputation=-20,
                    happiness=-5,
                ),
                DecisionEffect(
                    "No one helps! You look weak and incompetent!",
                    happiness=-20,
                    reputation=-15,
                ),
                chance=0.6,
            ),
        ],
    )


DECISION_GENERATORS: List[DecisionGenerator] = [
    enemy_declares_war,
    ai_breakthrough,
    assassination_plot,
    debt_crisis_ultimatum,
    natural_disaster,
    trade_deal_offer,
    refugee_crisis,
    corruption_scandal,
    economic_boom_opportunity,
    military_coup_attempt,
    border_dispute,
    ethnic_conflict,
    brain_drain,
    infrastructure_failure,
]


def generate_decision(state: WorldState, ctx: SimContext) -> Optional[Decision]:
    """
    Roll the daily decision odds, then try the generators in shuffled order
    and return the first one that fires.
    """
    if not ctx.chance(DECISION_ODDS):
        return None
    for generator in ctx.shuffled(DECISION_GENERATORS):
        decision = generator(state, ctx)
        if decision is not None:
            return decision
    return None


def pick_outcome(choice: DecisionChoice, ctx: SimContext) -> Optional[DecisionEffect]:
    """Weighted coin flip for a choice. None means the failure branch has no effect."""
    if ctx.random() < choice.success_chance:
        return choice.success_effect
    return choice.failure_effect
