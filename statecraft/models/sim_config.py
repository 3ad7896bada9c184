from pathlib import Path
from pydantic import BaseModel, PositiveInt, PositiveFloat
from pydantic import Field  # type: ignore
from typing import Annotated, List, Dict, Literal, Optional

# # NOTE: Loaded once per process at import. Every module reads the same
# # validated instance; nothing writes back to it.

Probability = Annotated[float, Field(ge=0, le=1)]
NonNegativeFloat = Annotated[float, Field(ge=0)]


class TimingSettings(BaseModel):
    tick_interval_ms: PositiveInt
    fast_tick_interval_ms: PositiveInt
    autosave_seconds: PositiveFloat


class EventOdds(BaseModel):
    ai_war: Probability
    ai_alliance: Probability
    ai_sanction: Probability
    economic_shock: Probability
    ally_aid: Probability
    sanction_targets_player: Probability
    battle_narration: Probability
    late_war_narration: Probability
    sector_crisis: Probability
    decision: Probability


class CooldownSettings(BaseModel):
    print_money: PositiveInt
    borrow_imf: PositiveInt
    declare_war_enemy: PositiveInt
    declare_war_neutral: PositiveInt
    request_aid: PositiveInt
    warning: PositiveInt


class LoanSettings(BaseModel):
    imf_rate: PositiveFloat
    payment_interval_days: PositiveInt
    max_gdp_share: Probability


class WarTier(BaseModel):
    min_military_strength: NonNegativeFloat
    min_security: NonNegativeFloat
    min_military_level: NonNegativeFloat
    cost_gdp_share: Probability
    reputation_loss: NonNegativeFloat
    happiness_loss: NonNegativeFloat


class WarSettings(BaseModel):
    min_duration: PositiveInt
    max_duration: PositiveInt
    decision_war_duration: PositiveInt
    enemy: WarTier
    neutral: WarTier
    reputation_loss_per_prior_war: NonNegativeFloat
    relationship_penalty: NonNegativeFloat


class UprisingSettings(BaseModel):
    happiness_threshold: PositiveFloat
    max_daily_chance: Probability
    suppression_chance: Probability


class DifficultyPreset(BaseModel):
    inflation: NonNegativeFloat
    unemployment: NonNegativeFloat
    unemployment_baseline: NonNegativeFloat
    military_strength: Annotated[float, Field(ge=0, le=100)]
    reputation: Annotated[float, Field(ge=0, le=100)]
    gdp_growth: float
    happiness_decay: NonNegativeFloat


class ShockImpact(BaseModel):
    gdp_growth: float = 0.0
    happiness: float = 0.0
    treasury_pct: float = 0.0
    revenue: float = 0.0
    inflation: float = 0.0
    unemployment: float = 0.0


class EconomicShock(BaseModel):
    weight: Probability
    message: Annotated[str, Field(min_length=1)]
    impact: ShockImpact


class SimulationSettings(BaseModel):
    sim_seed: Optional[int]
    game_lengths: Annotated[List[PositiveInt], Field(min_length=1)]
    event_log_cap: PositiveInt

    timing: TimingSettings
    event_odds: EventOdds
    cooldowns: CooldownSettings
    loans: LoanSettings
    war: WarSettings
    uprising: UprisingSettings

    difficulty_presets: Dict[Literal["easy", "medium", "hard"], DifficultyPreset]
    initial_sector_levels: Dict[str, NonNegativeFloat]
    economic_shocks: List[EconomicShock]


_BASE_DIR = Path(__file__).resolve().parents[1]
_CONFIG_PATH = _BASE_DIR / "config" / "sim_config.json"

SIM_CONFIG = SimulationSettings.model_validate_json(
    _CONFIG_PATH.read_text(encoding="utf-8")
)
