from typing import Dict, List, Tuple

from statecraft.models import SIM_CONFIG, COUNTRY_CATALOG, SECTOR_NAMES
from statecraft.models import (
    CountryProfile,
    Country,
    CountryStats,
    InitialStats,
    WorldState,
)
from statecraft.context import SimContext

# Static reference data, keyed by country id
COUNTRIES: Dict[str, CountryProfile] = {c.id: c for c in COUNTRY_CATALOG.countries}

POTENTIAL_MULTIPLIERS: Dict[str, float] = {
    "very-high": 2.0,
    "high": 1.5,
    "mid": 1.0,
    "low": 0.3,
    "very-low": -0.5,
}

# Relationship bands
ALLIED_SCORE = 86
FRIENDLY_SCORE = 71
NEUTRAL_SCORE = 51
COLD_SCORE = 31
HOSTILE_CEILING = 30

INITIAL_ALLY_SCORE = 90.0
INITIAL_ENEMY_SCORE = 20.0
INITIAL_NEUTRAL_SCORE = 60.0

INITIAL_INTEREST_RATE = 2.5
INITIAL_DEBT_RATIO = 60.0
WARNING_KINDS = (
    "debt_ratio",
    "inflation",
    "unemployment",
    "low_happiness",
    "high_interest",
    "low_treasury",
)
COOLDOWN_KINDS = ("print_money", "borrow_imf", "declare_war", "request_aid")


def get_country_profile(country_id: str) -> CountryProfile:
    profile = COUNTRIES.get(country_id)
    if profile is None:
        raise ValueError(f"unknown country id: {country_id!r}")
    return profile


def country_name(country_id: str) -> str:
    profile = COUNTRIES.get(country_id)
    return profile.name if profile else country_id


def sector_potential(country_id: str, sector: str) -> str:
    profile = COUNTRIES.get(country_id)
    if profile is None:
        return "mid"
    return profile.sector_potentials.get(sector, "mid")


def potential_multiplier(country_id: str, sector: str) -> float:
    return POTENTIAL_MULTIPLIERS[sector_potential(country_id, sector)]


def initial_relations(country_id: str) -> Tuple[List[str], List[str]]:
    """Data-defined allies and enemies of a country."""
    profile = get_country_profile(country_id)
    return list(profile.allies), list(profile.enemies)


def initialize_relationships(country_id: str) -> Dict[str, float]:
    allies, enemies = initial_relations(country_id)
    relationships: Dict[str, float] = {}
    for other_id in COUNTRIES:
        if other_id == country_id:
            continue
        if other_id in allies:
            relationships[other_id] = INITIAL_ALLY_SCORE
        elif other_id in enemies:
            relationships[other_id] = INITIAL_ENEMY_SCORE
        else:
            relationships[other_id] = INITIAL_NEUTRAL_SCORE
    return relationships


def initialize_world_state(
    country_id: str,
    game_length: int,
    ctx: SimContext,
) -> WorldState:
    """
    Build the opening WorldState for a country and a game length in years.
    Raises ValueError for an unknown country or an unsupported length.
    """
    if game_length not in SIM_CONFIG.game_lengths:
        raise ValueError(
            f"game_length must be one of {SIM_CONFIG.game_lengths}, got {game_length}"
        )
    profile = get_country_profile(country_id)
    preset = SIM_CONFIG.difficulty_presets[profile.difficulty]
    gdp = profile.stats.gdp
    debt = gdp * INITIAL_DEBT_RATIO / 100
    security = profile.stats.stability
    sector_levels = {s: SIM_CONFIG.initial_sector_levels.get(s, 0.0) for s in SECTOR_NAMES}

    country = Country(
        id=profile.id,
        name=profile.name,
        code=profile.code,
        difficulty=profile.difficulty,
        stats=CountryStats(**profile.stats.model_dump()),
    )
    relationships = initialize_relationships(country_id)
    allies, enemies = initial_relations(country_id)
    started = ctx.event(
        0,
        "world",
        "system",
        f"Game started! You are now leading {profile.name}. "
        f"Your goal: survive {game_length} years and maximize your score.",
    )

    return WorldState(
        country=country,
        current_day=0,
        total_days=game_length * 365,
        game_length=game_length,
        initial_stats=InitialStats(
            gdp=gdp,
            happiness=profile.stats.happiness,
            unemployment=preset.unemployment,
            inflation=preset.inflation,
            security=security,
            military_strength=preset.military_strength,
            debt=debt,
            debt_to_gdp_ratio=INITIAL_DEBT_RATIO,
            sector_levels=dict(sector_levels),
        ),
        gdp=gdp,
        gdp_growth_rate=preset.gdp_growth,
        debt=debt,
        debt_to_gdp_ratio=INITIAL_DEBT_RATIO,
        inflation_rate=preset.inflation,
        unemployment_rate=preset.unemployment,
        interest_rate=INITIAL_INTEREST_RATE,
        treasury=gdp * 0.05,
        revenue=gdp * 0.0001,
        reserves=gdp * 0.02,
        happiness=profile.stats.happiness,
        security=security,
        military_strength=preset.military_strength,
        global_reputation=preset.reputation,
        is_playing=True,
        game_speed=1,
        cooldowns={kind: 0 for kind in COOLDOWN_KINDS},
        relationships=relationships,
        allies=[cid for cid in allies if cid in relationships],
        enemies=[cid for cid in enemies if cid in relationships],
        sector_levels=sector_levels,
        previous_happiness=profile.stats.happiness,
        last_warning_day={kind: -999 for kind in WARNING_KINDS},
        events=[started],
        next_event_id=ctx.issued,
    )
