#!/usr/bin/env python3
"""
Helpers for merging deltas into WorldState snapshots and for (de)serializing them.
"""
from __future__ import annotations

from dataclasses import fields, replace
from datetime import datetime
from typing import Iterable, List

from pydantic import TypeAdapter

from statecraft.models import SIM_CONFIG, GameEvent, ScoreboardEntry, StateDelta, WorldState
from statecraft.relationships import derive_allies_and_enemies

EVENT_LOG_CAP = SIM_CONFIG.event_log_cap

_STATE_ADAPTER = TypeAdapter(WorldState)
_WORLD_FIELDS = frozenset(f.name for f in fields(WorldState))


def apply_delta(state: WorldState, delta: StateDelta) -> WorldState:
    """
    Merge a sparse delta over a snapshot and return the new snapshot.

    Last writer wins: every key present in the delta overwrites the field.
    When the delta touches relationships, allies/enemies are re-derived from
    the merged scores.
    """
    unknown = set(delta) - _WORLD_FIELDS
    if unknown:
        raise ValueError(f"unknown WorldState fields in delta: {sorted(unknown)}")
    merged = replace(state, **delta)
    if "relationships" in delta:
        allies, enemies = derive_allies_and_enemies(merged.relationships)
        merged = replace(merged, allies=allies, enemies=enemies)
    return merged


def append_events(
    events: List[GameEvent], new_events: Iterable[GameEvent], cap: int = EVENT_LOG_CAP
) -> List[GameEvent]:
    """Append to a copy of the log, keeping only the most recent `cap` entries."""
    combined = list(events)
    combined.extend(new_events)
    return combined[-cap:]


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def dump_state(state: WorldState) -> str:
    return _STATE_ADAPTER.dump_json(state).decode("utf-8")


def load_state(raw: str | bytes) -> WorldState:
    """Raises pydantic.ValidationError on a corrupt payload."""
    return _STATE_ADAPTER.validate_json(raw)


def snapshot_from_state(state: WorldState) -> dict:
    """
    Compact summary for log lines and scoreboards.
    """
    return {
        "country_id": state.country.id,
        "country_name": state.country.name,
        "day": state.current_day,
        "total_days": state.total_days,
        "score": round(state.score),
        "gdp": round(state.gdp, 2),
        "happiness": state.happiness,
        "allies": len(state.allies),
        "enemies": len(state.enemies),
        "active_wars": len(state.active_wars),
        "pending_decisions": len(state.pending_decisions),
    }


def scoreboard_entry(state: WorldState, timestamp: datetime) -> ScoreboardEntry:
    return ScoreboardEntry(
        country_id=state.country.id,
        country_name=state.country.name,
        final_score=round(state.score),
        final_day=state.current_day,
        total_days=state.total_days,
        final_gdp=state.gdp,
        final_happiness=state.happiness,
        final_debt=state.debt_to_gdp_ratio,
        timestamp=timestamp,
    )
