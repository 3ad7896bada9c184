#!/usr/bin/env python3
"""
Probabilistic world events, throttled warnings, periodic advice and battle
narration.

Generators only read the snapshot and return new GameEvents. Any effect on the
player travels in GameEvent.impact and is summed by the tick engine.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from statecraft.context import SimContext
from statecraft.helper.world_helpers import COUNTRIES, FRIENDLY_SCORE, HOSTILE_CEILING, sector_potential
from statecraft.models import SIM_CONFIG, SECTOR_NAMES, EventImpact, GameEvent, War, WorldState
from statecraft.war import enemy_of

ODDS = SIM_CONFIG.event_odds
WARNING_COOLDOWN = SIM_CONFIG.cooldowns.warning
ADVICE_INTERVAL = 30
ADVICE_START_DAY = 10
MAX_ADVICE = 2

BATTLE_LINES = {
    "attack": [
        "launched a devastating missile strike",
        "captured strategic positions",
        "destroyed enemy supply lines",
        "bombed military installations",
        "launched a successful offensive",
        "seized key infrastructure",
        "conducted precision airstrikes",
        "breached enemy defenses",
    ],
    "defend": [
        "repelled enemy advances",
        "fortified defensive positions",
        "shot down enemy aircraft",
        "intercepted enemy missiles",
        "held the frontlines",
        "evacuated civilians from combat zones",
        "reinforced strategic locations",
        "countered the enemy offensive",
    ],
    "casualties": [
        "heavy casualties reported",
        "military forces diminished",
        "significant losses sustained",
        "troops decimated in fierce battle",
        "a devastating blow to military strength",
    ],
    "victories": [
        "achieved a tactical victory",
        "gained a strategic advantage",
        "broke through enemy lines",
        "secured a major win",
        "dominated the battlefield",
    ],
}

WAR_REASONS = [
    "over territorial disputes",
    "citing border violations",
    "following failed diplomatic negotiations",
    "over resource access",
    "in response to military buildups",
]
ALLIANCE_REASONS = [
    "to strengthen mutual defense",
    "for economic cooperation",
    "to counter regional threats",
    "following successful trade negotiations",
    "to promote shared interests",
]
SANCTION_REASONS = [
    "due to human rights concerns",
    "over nuclear program development",
    "following trade violations",
    "in response to military aggression",
    "over democratic backsliding",
]


def _pair(state: WorldState, ctx: SimContext) -> Optional[Tuple[str, str]]:
    others = [cid for cid in COUNTRIES if cid != state.country.id]
    if len(others) < 2:
        return None
    first = ctx.choice(others)
    second = ctx.choice([cid for cid in others if cid != first])
    return first, second


def _name(country_id: str) -> str:
    return COUNTRIES[country_id].name


# ---------- World events ----------


def _ai_war(state: WorldState, ctx: SimContext, day: int) -> Optional[GameEvent]:
    pair = _pair(state, ctx)
    if pair is None:
        return None
    attacker, defender = pair
    reason = ctx.choice(WAR_REASONS)

    attacker_ally, defender_ally = attacker in state.allies, defender in state.allies
    attacker_enemy, defender_enemy = attacker in state.enemies, defender in state.enemies
    if attacker_ally and defender_enemy:
        note = "Your ally fights your enemy - this benefits you!"
    elif defender_ally and attacker_enemy:
        note = "Your ally is under attack by your enemy - consider supporting them!"
    elif attacker_ally or defender_ally:
        note = "Your ally is at war - this may affect trade and your security."
    elif attacker_enemy or defender_enemy:
        note = "Your enemy is distracted by war - an opportunity for you."
    else:
        note = "Regional instability may affect global markets."
    return ctx.event(
        day,
        "world",
        "military",
        f"{_name(attacker)} declared war on {_name(defender)} {reason}. {note}",
    )


def _ai_alliance(state: WorldState, ctx: SimContext, day: int) -> Optional[GameEvent]:
    pair = _pair(state, ctx)
    if pair is None:
        return None
    first, second = pair
    reason = ctx.choice(ALLIANCE_REASONS)

    first_ally, second_ally = first in state.allies, second in state.allies
    first_enemy, second_enemy = first in state.enemies, second in state.enemies
    if first_ally and second_ally:
        note = "Both are your allies - strengthens your alliance network!"
    elif first_enemy and second_enemy:
        note = "Your enemies unite - you should strengthen your military!"
    elif (first_ally and second_enemy) or (second_ally and first_enemy):
        note = "Your ally partnered with your enemy - diplomacy is shifting!"
    elif first_ally or second_ally:
        note = "Your ally gains a new partner - this may benefit you."
    elif first_enemy or second_enemy:
        note = "Your enemy gains a new ally - monitor this carefully."
    else:
        note = "This reshapes regional power dynamics."

    first_score = state.relationships.get(first, 60.0)
    second_score = state.relationships.get(second, 60.0)
    changes: Dict[str, float] = {}
    if first_score >= FRIENDLY_SCORE and second_score >= FRIENDLY_SCORE:
        changes = {first: 2.0, second: 2.0}
    elif first_score >= FRIENDLY_SCORE and second_score <= HOSTILE_CEILING:
        changes = {first: -2.0}
    elif second_score >= FRIENDLY_SCORE and first_score <= HOSTILE_CEILING:
        changes = {second: -2.0}

    return ctx.event(
        day,
        "world",
        "diplomatic",
        f"{_name(first)} and {_name(second)} formed an alliance {reason}. {note}",
        impact=EventImpact(relationship_changes=changes) if changes else None,
    )


def _ai_sanction(state: WorldState, ctx: SimContext, day: int) -> Optional[GameEvent]:
    pair = _pair(state, ctx)
    if pair is None:
        return None
    sanctioner, sanctioned = pair
    reason = ctx.choice(SANCTION_REASONS)

    hostile = state.relationships.get(sanctioner, 60.0) <= HOSTILE_CEILING
    if (
        hostile
        and sanctioner not in state.sanctions_on_us
        and ctx.chance(ODDS.sanction_targets_player)
    ):
        return ctx.event(
            day,
            "critical",
            "diplomatic",
            f"{_name(sanctioner)} imposed sanctions on {state.country.name} {reason}! "
            "Trade and growth will suffer until relations improve.",
            impact=EventImpact(sanction_from=sanctioner),
        )

    sanctioner_ally, sanctioned_ally = sanctioner in state.allies, sanctioned in state.allies
    sanctioner_enemy, sanctioned_enemy = sanctioner in state.enemies, sanctioned in state.enemies
    if sanctioned_ally and not sanctioner_enemy:
        note = "Your ally is sanctioned - this may hurt your economy too."
    elif sanctioned_enemy and sanctioner_ally:
        note = "Your ally sanctions your enemy - this weakens your adversary!"
    elif sanctioned_enemy:
        note = "Your enemy is weakened by sanctions - an advantage for you."
    elif sanctioner_ally:
        note = "Your ally takes strong diplomatic action."
    else:
        note = "International tensions rise, affecting global trade."
    return ctx.event(
        day,
        "world",
        "diplomatic",
        f"{_name(sanctioner)} imposed sanctions on {_name(sanctioned)} {reason}. {note}",
    )


def _economic_shock(state: WorldState, ctx: SimContext, day: int) -> Optional[GameEvent]:
    """Weighted draw from the shock table; the residual weight means nothing happens."""
    roll = ctx.random()
    cumulative = 0.0
    for shock in SIM_CONFIG.economic_shocks:
        cumulative += shock.weight
        if roll < cumulative:
            hit = shock.impact
            impact = EventImpact(
                gdp_growth=hit.gdp_growth or None,
                happiness=hit.happiness or None,
                treasury=(state.gdp * hit.treasury_pct / 100) or None,
                revenue=hit.revenue or None,
                unemployment=hit.unemployment or None,
                inflation=hit.inflation or None,
            )
            return ctx.event(day, "world", "economic", shock.message, impact=impact)
    return None


def _ally_aid(state: WorldState, ctx: SimContext, day: int) -> Optional[GameEvent]:
    if not state.allies:
        return None
    ally = ctx.choice(state.allies)
    amount = state.gdp * ctx.uniform(0.05, 0.15)
    return ctx.event(
        day,
        "world",
        "diplomatic",
        f"{_name(ally)} sent ${amount:.2f}B in aid to support your nation!",
        impact=EventImpact(treasury=amount, happiness=3.0),
    )


def world_events(state: WorldState, ctx: SimContext, day: int) -> List[GameEvent]:
    """
    Independent Bernoulli trials for each kind of world event. Odds scale
    with game speed so the expected rate per simulated day is constant.
    """
    speed = state.game_speed
    rolls = (
        (ODDS.ai_war, _ai_war),
        (ODDS.ai_alliance, _ai_alliance),
        (ODDS.ai_sanction, _ai_sanction),
        (ODDS.economic_shock, _economic_shock),
        (ODDS.ally_aid, _ally_aid),
    )
    events: List[GameEvent] = []
    for odds, generator in rolls:
        if ctx.chance(odds * speed):
            event = generator(state, ctx, day)
            if event is not None:
                events.append(event)
    return events


# ---------- Warnings ----------


def _due(state: WorldState, kind: str, day: int) -> bool:
    return day - state.last_warning_day.get(kind, -999) >= WARNING_COOLDOWN


def warning_events(
    state: WorldState, ctx: SimContext, day: int
) -> Tuple[List[GameEvent], Dict[str, int]]:
    """
    Threshold alerts, each kind at most once per warning cooldown. Returns the
    events and the updated last-warning map. The uprising alert is never
    throttled.
    """
    events: List[GameEvent] = []
    last_warning = dict(state.last_warning_day)
    initial_treasury = state.initial_stats.gdp * 0.05

    checks = (
        (
            "low_happiness",
            state.happiness < SIM_CONFIG.uprising.happiness_threshold,
            "domestic",
            f"UPRISING RISK: Public happiness has fallen to {state.happiness:.0f}%! "
            "Citizens are on the verge of revolt.",
        ),
        (
            "debt_ratio",
            state.debt_to_gdp_ratio > 150,
            "economic",
            f"CRITICAL: Debt-to-GDP ratio at {state.debt_to_gdp_ratio:.0f}%! Economic collapse risk!",
        ),
        (
            "inflation",
            state.inflation_rate > 10,
            "economic",
            f"CRITICAL: Hyperinflation detected at {state.inflation_rate:.1f}%! Economy at risk!",
        ),
        (
            "unemployment",
            state.unemployment_rate > 15,
            "economic",
            f"CRITICAL: Unemployment at {state.unemployment_rate:.1f}%! Social unrest growing!",
        ),
        (
            "high_interest",
            state.interest_rate > 8,
            "economic",
            f"WARNING: Interest rate at {state.interest_rate:.1f}%! "
            "High rates slow economic growth and increase debt costs.",
        ),
        (
            "low_treasury",
            state.treasury < initial_treasury * 0.25,
            "economic",
            f"ALERT: Treasury critically low at ${state.treasury:.2f}B! "
            f"You started with ${initial_treasury:.2f}B. Replenish funds soon!",
        ),
    )
    for kind, triggered, category, message in checks:
        if triggered and _due(state, kind, day):
            events.append(ctx.event(day, "critical", category, message))
            last_warning[kind] = day

    if state.uprising_triggered:
        events.append(
            ctx.event(
                day,
                "critical",
                "domestic",
                "UPRISING IN PROGRESS! The people have taken to the streets. "
                "Fight the uprising or surrender power.",
            )
        )
    return events, last_warning


# ---------- Advice ----------


def advice_events(state: WorldState, ctx: SimContext, day: int) -> List[GameEvent]:
    """Diagnostic tips every 30 days after day 10, at most two, in priority order."""
    if day < ADVICE_START_DAY or day % ADVICE_INTERVAL != 0:
        return []

    tips: List[Tuple[str, str]] = []
    initial_treasury = state.initial_stats.gdp * 0.05

    if state.debt_to_gdp_ratio > 100:
        tips.append(
            (
                "economic",
                f"ECONOMIC ADVISOR: Your debt-to-GDP ratio is {state.debt_to_gdp_ratio:.0f}%! "
                "Pay off debt before it triggers an economic collapse.",
            )
        )
    if state.inflation_rate > 7:
        tips.append(
            (
                "economic",
                f"ECONOMIC ADVISOR: Inflation at {state.inflation_rate:.1f}%! Raise interest rates "
                "to cool the economy and avoid printing money until inflation is under control.",
            )
        )
    if state.gdp_growth_rate < 1 and state.debt_to_gdp_ratio < 80:
        tips.append(
            (
                "economic",
                f"ECONOMIC ADVISOR: GDP growth is stagnant at {state.gdp_growth_rate:.1f}%. "
                "Invest in infrastructure, education and long-term sectors to boost growth.",
            )
        )
    if state.unemployment_rate > 12:
        tips.append(
            (
                "domestic",
                f"ECONOMIC ADVISOR: Unemployment at {state.unemployment_rate:.1f}%! "
                "Education, health and infrastructure spending create jobs.",
            )
        )
    if state.happiness < 35:
        tips.append(
            (
                "domestic",
                f"SOCIAL ADVISOR: Happiness at {state.happiness:.0f}%! Invest in health, education, "
                "housing and sports to improve quality of life.",
            )
        )
    if len(state.active_wars) >= 2:
        tips.append(
            (
                "military",
                f"DEFENSE ADVISOR: You are fighting {len(state.active_wars)} wars at once! "
                "Each extra war drains the economy faster than the last.",
            )
        )
    if len(state.warred_countries) >= 2 and state.global_reputation < 40:
        tips.append(
            (
                "diplomatic",
                "DIPLOMATIC ADVISOR: Your wars have made the world wary of you. Send aid and "
                "sign agreements to rebuild your reputation.",
            )
        )
    if not state.allies:
        tips.append(
            (
                "diplomatic",
                "DIPLOMATIC ADVISOR: You have no allies. Propose alliances or send aid to "
                "friendly nations; citizens dislike isolation.",
            )
        )
    elif len(state.allies) >= 5:
        tips.append(
            (
                "diplomatic",
                f"DIPLOMATIC ADVISOR: Your {len(state.allies)} allies are a strength. "
                "Request aid or military cooperation when times get hard.",
            )
        )
    for sector in SECTOR_NAMES:
        if sector_potential(state.country.id, sector) == "very-low" and state.sector_levels.get(sector, 0.0) > 25:
            tips.append(
                (
                    "domestic",
                    f"SECTOR ADVISOR: {sector.capitalize()} has very low potential in {state.country.name}. "
                    "This is a bad investment! Focus on higher-potential sectors instead.",
                )
            )
            break
    if state.treasury < initial_treasury * 0.3 and state.debt < state.gdp * 0.5:
        tips.append(
            (
                "economic",
                f"FISCAL ADVISOR: Treasury is running low at ${state.treasury:.2f}B. You started with "
                f"${initial_treasury:.2f}B. Revenue sectors or careful borrowing can help.",
            )
        )
    if state.enemies and state.military_strength < 30:
        tips.append(
            (
                "military",
                f"DEFENSE ADVISOR: You have enemies but military strength is only "
                f"{state.military_strength:.0f}%! Invest in military and security.",
            )
        )

    return [ctx.event(day, "advice", category, message) for category, message in tips[:MAX_ADVICE]]


# ---------- Battle narration ----------


def _war_progress(war: War, day: int) -> float:
    elapsed = max(0, day - war.start_day)
    total = elapsed + max(war.duration, 0)
    if total <= 0:
        return 1.0
    return elapsed / total


def battle_events(state: WorldState, ctx: SimContext, day: int) -> List[GameEvent]:
    """Flavor text for the player's wars. No effect on state."""
    events: List[GameEvent] = []
    for war in state.active_wars:
        if not war.is_player_involved:
            continue
        if not ctx.chance(ODDS.battle_narration * state.game_speed):
            continue

        enemy = COUNTRIES.get(enemy_of(war))
        enemy_name = enemy.name if enemy else "Enemy"
        progress = _war_progress(war, day)

        if progress < 0.25:
            if war.is_player_attacker:
                line = ctx.choice(BATTLE_LINES["attack"])
                events.append(ctx.event(day, "player", "military", f"Your forces {line} against {enemy_name}!"))
            else:
                line = ctx.choice(BATTLE_LINES["defend"])
                events.append(ctx.event(day, "critical", "military", f"{enemy_name} attacks! Your forces {line}."))
        elif progress < 0.75:
            if war.is_player_attacker:
                ahead = war.attacker_strength > war.defender_strength
            else:
                ahead = war.defender_strength > war.attacker_strength
            if ahead:
                line = ctx.choice(BATTLE_LINES["victories"])
                events.append(ctx.event(day, "player", "military", f"Your forces {line} against {enemy_name}!"))
            else:
                line = ctx.choice(BATTLE_LINES["casualties"])
                events.append(ctx.event(day, "critical", "military", f"{enemy_name} counterattack! {line.capitalize()}."))
        elif ctx.chance(ODDS.late_war_narration):
            events.append(
                ctx.event(
                    day,
                    "player",
                    "military",
                    f"War with {enemy_name} nearing conclusion. Final battles underway...",
                )
            )
    return events
