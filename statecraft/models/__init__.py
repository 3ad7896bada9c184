from .sim_config import SIM_CONFIG, SimulationSettings
from .country_config import COUNTRY_CATALOG, CountryProfile, SECTOR_NAMES
from .world_config import (
    CountryStats,
    Country,
    InitialStats,
    Loan,
    War,
    EventImpact,
    GameEvent,
    WarResult,
    StateDelta,
    DecisionEffect,
    DecisionChoice,
    Decision,
    WorldState,
    ActionResult,
    ScoreboardEntry,
)
from .redis_config import REDIS_SETTINGS, RedisSettings

__all__ = [
    "SIM_CONFIG",
    "SimulationSettings",
    "COUNTRY_CATALOG",
    "CountryProfile",
    "SECTOR_NAMES",
    "CountryStats",
    "Country",
    "InitialStats",
    "Loan",
    "War",
    "EventImpact",
    "GameEvent",
    "WarResult",
    "StateDelta",
    "DecisionEffect",
    "DecisionChoice",
    "Decision",
    "WorldState",
    "ActionResult",
    "ScoreboardEntry",
    "REDIS_SETTINGS",
    "RedisSettings",
]
