from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict

from typing_extensions import TypedDict


@dataclass
class CountryStats:
    gdp: float  # billions
    population: float  # millions
    stability: float  # 0..100
    happiness: float  # 0..100


@dataclass
class Country:
    id: str
    name: str
    code: str
    difficulty: str  # "easy" | "medium" | "hard"
    stats: CountryStats


@dataclass
class InitialStats:
    """Baseline captured at game start. Never mutated afterwards."""

    gdp: float
    happiness: float
    unemployment: float
    inflation: float
    security: float
    military_strength: float
    debt: float
    debt_to_gdp_ratio: float
    sector_levels: Dict[str, float]


@dataclass
class Loan:
    id: str
    amount: float  # original principal
    remaining: float
    interest_rate: float  # annual, percent
    monthly_payment: float
    days_until_next_payment: int
    source: str = "IMF"  # "IMF" or a country id


@dataclass
class War:
    id: str
    attacker: str  # country id
    defender: str  # country id
    start_day: int
    duration: int  # days until resolution
    attacker_strength: float
    defender_strength: float
    is_player_involved: bool = False
    is_player_attacker: bool = False


@dataclass
class EventImpact:
    gdp_growth: Optional[float] = None
    happiness: Optional[float] = None
    treasury: Optional[float] = None
    revenue: Optional[float] = None
    unemployment: Optional[float] = None
    inflation: Optional[float] = None
    global_reputation: Optional[float] = None
    relationship_changes: Dict[str, float] = field(default_factory=dict)
    sanction_from: Optional[str] = None  # a foreign country sanctioning the player


@dataclass
class GameEvent:
    id: str
    day: int
    timestamp: datetime
    type: str  # "world" | "player" | "critical" | "advice"
    category: str  # "economic" | "military" | "diplomatic" | "domestic" | "system"
    message: str
    icon: Optional[str] = None
    impact: Optional[EventImpact] = None


@dataclass
class WarResult:
    player_won: bool
    enemy_name: str


class StateDelta(TypedDict, total=False):
    """Sparse partial WorldState. A present key always overwrites."""

    current_day: int
    total_days: int
    game_length: int
    is_playing: bool
    game_speed: int
    cooldowns: Dict[str, int]
    gdp: float
    gdp_growth_rate: float
    debt: float
    debt_to_gdp_ratio: float
    inflation_rate: float
    unemployment_rate: float
    interest_rate: float
    treasury: float
    revenue: float
    reserves: float
    borrowed_money: List[Loan]
    happiness: float
    security: float
    military_strength: float
    global_reputation: float
    score: float
    previous_score: float
    relationships: Dict[str, float]
    allies: List[str]
    enemies: List[str]
    sanctions_on_us: List[str]
    sanctions_imposed: List[str]
    cumulative_aid: Dict[str, float]
    warred_countries: List[str]
    sector_levels: Dict[str, float]
    is_in_war: bool
    active_wars: List[War]
    uprising_triggered: bool
    previous_happiness: float
    has_defaulted: bool
    pending_war_result: Optional[WarResult]
    recent_print_money_count: int
    last_warning_day: Dict[str, int]
    events: List[GameEvent]
    next_event_id: int


@dataclass
class DecisionEffect:
    """
    Relative adjustments, applied to the snapshot current when the choice is
    resolved. `fatal` ends the game.
    """

    message: str
    treasury: float = 0.0  # billions added (negative spends)
    treasury_factor: float = 1.0
    gdp_factor: float = 1.0
    debt_factor: float = 1.0
    revenue_factor: float = 1.0
    happiness: float = 0.0
    reputation: float = 0.0
    unemployment: float = 0.0
    growth: float = 0.0
    military: float = 0.0
    sectors: Dict[str, float] = field(default_factory=dict)
    war: Optional[War] = None
    breaks_alliance_with: Optional[str] = None
    defaults: bool = False
    fatal: bool = False


@dataclass
class DecisionChoice:
    label: str
    description: str
    success_chance: float  # 0..1
    success_effect: DecisionEffect
    failure_effect: Optional[DecisionEffect] = None


@dataclass
class Decision:
    id: str
    title: str
    description: str
    icon: str
    urgency: str  # "low" | "medium" | "high" | "critical"
    choices: List[DecisionChoice]


@dataclass
class WorldState:
    country: Country
    current_day: int
    total_days: int
    game_length: int
    initial_stats: InitialStats

    gdp: float
    gdp_growth_rate: float
    debt: float
    debt_to_gdp_ratio: float
    inflation_rate: float
    unemployment_rate: float
    interest_rate: float

    # Treasury & revenue (billions)
    treasury: float
    revenue: float  # daily
    reserves: float

    happiness: float
    security: float
    military_strength: float
    global_reputation: float

    is_playing: bool = False
    game_speed: int = 1  # 1 | 3
    cooldowns: Dict[str, int] = field(default_factory=dict)
    borrowed_money: List[Loan] = field(default_factory=list)

    score: float = 0.0
    previous_score: float = 0.0

    # Relationship scores are canonical; allies/enemies are derived views.
    relationships: Dict[str, float] = field(default_factory=dict)
    allies: List[str] = field(default_factory=list)
    enemies: List[str] = field(default_factory=list)
    sanctions_on_us: List[str] = field(default_factory=list)
    sanctions_imposed: List[str] = field(default_factory=list)
    cumulative_aid: Dict[str, float] = field(default_factory=dict)
    warred_countries: List[str] = field(default_factory=list)

    sector_levels: Dict[str, float] = field(default_factory=dict)

    is_in_war: bool = False
    active_wars: List[War] = field(default_factory=list)
    uprising_triggered: bool = False
    previous_happiness: float = 0.0
    has_defaulted: bool = False
    pending_war_result: Optional[WarResult] = None
    recent_print_money_count: int = 0
    pending_decisions: List[Decision] = field(default_factory=list)

    last_warning_day: Dict[str, int] = field(default_factory=dict)
    events: List[GameEvent] = field(default_factory=list)
    next_event_id: int = 0


@dataclass
class ActionResult:
    """Outcome of a player command. Rejections carry an empty delta."""

    success: bool
    message: str
    events: List[GameEvent] = field(default_factory=list)
    state_changes: StateDelta = field(default_factory=StateDelta)


@dataclass
class ScoreboardEntry:
    country_id: str
    country_name: str
    final_score: float
    final_day: int
    total_days: int
    final_gdp: float
    final_happiness: float
    final_debt: float  # debt-to-GDP ratio, percent
    timestamp: datetime
