from statecraft.helper.world_helpers import (
    COUNTRIES,
    get_country_profile,
    country_name,
    sector_potential,
    potential_multiplier,
    initial_relations,
    initialize_relationships,
    initialize_world_state,
)


__all__ = [
    "COUNTRIES",
    "get_country_profile",
    "country_name",
    "sector_potential",
    "potential_multiplier",
    "initial_relations",
    "initialize_relationships",
    "initialize_world_state",
]
