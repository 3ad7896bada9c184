from pathlib import Path
from pydantic import BaseModel, PositiveFloat, model_validator
from pydantic import Field  # type: ignore
from typing import Annotated, Dict, List, Literal

Difficulty = Literal["easy", "medium", "hard"]
SectorPotential = Literal["very-low", "low", "mid", "high", "very-high"]
SectorName = Literal[
    "health",
    "education",
    "military",
    "infrastructure",
    "housing",
    "agriculture",
    "transportation",
    "security",
    "tourism",
    "sports",
]

SECTOR_NAMES: tuple[str, ...] = (
    "health",
    "education",
    "military",
    "infrastructure",
    "housing",
    "agriculture",
    "transportation",
    "security",
    "tourism",
    "sports",
)

Percentage = Annotated[float, Field(ge=0, le=100)]


class CountryStatsConfig(BaseModel):
    gdp: PositiveFloat  # billions
    population: PositiveFloat  # millions
    stability: Percentage
    happiness: Percentage


class CountryProfile(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: str
    code: Annotated[str, Field(min_length=2, max_length=2)]
    difficulty: Difficulty
    stats: CountryStatsConfig
    sector_potentials: Dict[SectorName, SectorPotential]
    allies: List[str] = []
    enemies: List[str] = []

    @model_validator(mode="after")
    def _check_sectors(self) -> "CountryProfile":
        missing = set(SECTOR_NAMES) - set(self.sector_potentials)
        if missing:
            raise ValueError(
                f"{self.id}: missing sector potentials {sorted(missing)}"
            )
        if set(self.allies) & set(self.enemies):
            raise ValueError(f"{self.id}: a country cannot be both ally and enemy")
        return self


class CountryCatalog(BaseModel):
    countries: Annotated[List[CountryProfile], Field(min_length=2)]

    @model_validator(mode="after")
    def _check_references(self) -> "CountryCatalog":
        ids = [c.id for c in self.countries]
        if len(ids) != len(set(ids)):
            raise ValueError("country ids must be unique")
        known = set(ids)
        for profile in self.countries:
            unknown = [cid for cid in profile.allies + profile.enemies if cid not in known]
            if unknown:
                raise ValueError(f"{profile.id}: unknown related countries {unknown}")
        return self


_BASE_DIR = Path(__file__).resolve().parents[1]
_CATALOG_PATH = _BASE_DIR / "config" / "countries.json"

COUNTRY_CATALOG = CountryCatalog.model_validate_json(
    _CATALOG_PATH.read_text(encoding="utf-8")
)
