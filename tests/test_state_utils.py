from dataclasses import replace
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from statecraft import state_utils, world
from statecraft.decisions import generate_decision
from statecraft.models import War

from conftest import FIXED_TIME, scripted_ctx


def test_apply_delta_overwrites_present_keys(usa):
    merged = state_utils.apply_delta(usa, {"treasury": 1.0, "happiness": 12.0})
    assert merged.treasury == 1.0
    assert merged.happiness == 12.0
    assert merged.gdp == usa.gdp
    assert usa.treasury != 1.0


def test_apply_delta_rederives_relations(usa):
    merged = state_utils.apply_delta(usa, {"relationships": {**usa.relationships, "uk": 10.0, "brazil": 95.0}})
    assert "uk" in merged.enemies
    assert "brazil" in merged.allies
    assert "uk" not in merged.allies


def test_apply_delta_rejects_unknown_fields(usa):
    with pytest.raises(ValueError):
        state_utils.apply_delta(usa, {"mana": 5})


def test_event_log_is_capped(usa, ctx):
    flood = [ctx.event(1, "world", "system", f"event {i}") for i in range(150)]
    log = state_utils.append_events(usa.events, flood)
    assert len(log) == 100
    assert log[-1].message == "event 149"
    assert log[0].message == "event 50"


def test_round_trip_preserves_everything(usa):
    ctx = scripted_ctx(fallback=0.0, next_id=usa.next_event_id)
    war = War("war-9", "usa", "russia", 0, 10, 70, 65, True, True)
    state = replace(usa, active_wars=[war], is_in_war=True)
    state = world.advance_world(state, ctx)
    decision = generate_decision(state, ctx)
    state = replace(state, pending_decisions=[decision])

    restored = state_utils.load_state(state_utils.dump_state(state))
    assert restored == state
    assert restored.events[-1].timestamp == FIXED_TIME
    assert restored.events[-1].timestamp.tzinfo is not None


def test_corrupt_payload_raises(usa):
    with pytest.raises(ValidationError):
        state_utils.load_state('{"country": 3}')
    with pytest.raises(ValidationError):
        state_utils.load_state("not json")


def test_scoreboard_entry(usa):
    stamp = datetime(2030, 5, 1, tzinfo=timezone.utc)
    entry = state_utils.scoreboard_entry(replace(usa, score=1234.6, current_day=400), stamp)
    assert entry.final_score == 1235
    assert entry.final_day == 400
    assert entry.final_debt == usa.debt_to_gdp_ratio
    assert entry.timestamp == stamp


def test_snapshot_summary(usa):
    summary = state_utils.snapshot_from_state(usa)
    assert summary["country_id"] == "usa"
    assert summary["allies"] == 6
    assert summary["enemies"] == 4
