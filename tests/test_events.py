from dataclasses import replace

from statecraft import events
from statecraft.models import War

from conftest import scripted_ctx


def _war(attacker="usa", defender="russia", player=True, start_day=0, duration=40):
    return War(
        id="war-1",
        attacker=attacker,
        defender=defender,
        start_day=start_day,
        duration=duration,
        attacker_strength=70,
        defender_strength=65,
        is_player_involved=player,
        is_player_attacker=player and attacker == "usa",
    )


def test_world_events_quiet_day(usa, quiet_ctx):
    assert events.world_events(usa, quiet_ctx, 1) == []


def test_world_events_all_fire(usa, lucky_ctx):
    batch = events.world_events(usa, lucky_ctx, 1)
    assert len(batch) == 5
    sanctions = [e for e in batch if e.impact is not None and e.impact.sanction_from]
    assert [e.impact.sanction_from for e in sanctions] == ["china"]
    assert sanctions[0].type == "critical"
    aid = batch[-1]
    assert aid.impact.treasury == usa.gdp * 0.05
    assert aid.impact.happiness == 3.0


def test_economic_shock_uses_first_weight_band(usa):
    shock = events._economic_shock(usa, scripted_ctx(values=[0.0]), 1)
    assert shock.message.startswith("Global oil prices surge")
    assert shock.impact.gdp_growth == -0.3


def test_economic_shock_residual_weight_is_a_quiet_day(usa):
    assert events._economic_shock(usa, scripted_ctx(values=[0.9999]), 1) is None


def test_warning_is_throttled_per_kind(usa, ctx):
    hot = replace(usa, inflation_rate=12)
    first, seen = events.warning_events(hot, ctx, 100)
    assert len(first) == 1
    assert first[0].message.startswith("CRITICAL: Hyperinflation")
    assert seen["inflation"] == 100

    hot = replace(hot, last_warning_day=seen)
    again, seen = events.warning_events(hot, ctx, 150)
    assert again == []
    assert seen["inflation"] == 100

    later, seen = events.warning_events(hot, ctx, 190)
    assert len(later) == 1
    assert seen["inflation"] == 190


def test_warning_kinds_are_independent(usa, ctx):
    state = replace(usa, inflation_rate=12, unemployment_rate=20, last_warning_day={
        **usa.last_warning_day, "inflation": 95})
    batch, seen = events.warning_events(state, ctx, 100)
    assert len(batch) == 1
    assert "Unemployment" in batch[0].message
    assert seen["inflation"] == 95


def test_uprising_alert_is_never_throttled(usa, ctx):
    rioting = replace(usa, uprising_triggered=True)
    for day in (10, 11):
        batch, _ = events.warning_events(rioting, ctx, day)
        assert any("UPRISING IN PROGRESS" in e.message for e in batch)


def test_advice_cadence(usa, ctx):
    troubled = replace(usa, debt_to_gdp_ratio=120, inflation_rate=9, unemployment_rate=15)
    assert events.advice_events(troubled, ctx, 0) == []
    assert events.advice_events(troubled, ctx, 31) == []

    tips = events.advice_events(troubled, ctx, 30)
    assert len(tips) == 2
    assert all(t.type == "advice" for t in tips)
    assert "debt-to-GDP" in tips[0].message
    assert "Inflation" in tips[1].message


def test_advice_on_quiet_economy(usa, ctx):
    assert len(events.advice_events(usa, ctx, 60)) <= 2


def test_battle_narration_only_for_player_wars(usa, lucky_ctx):
    ai = replace(usa, active_wars=[_war("china", "india", player=False)])
    assert events.battle_events(ai, lucky_ctx, 5) == []


def test_battle_narration_by_phase(usa, lucky_ctx):
    state = replace(usa, active_wars=[_war(start_day=0, duration=40)])
    early = events.battle_events(state, lucky_ctx, 1)
    assert early[0].message.startswith("Your forces")
    assert "Russia" in early[0].message

    # elapsed 20 of 40 total
    mid_state = replace(usa, active_wars=[_war(start_day=0, duration=20)])
    mid = events.battle_events(mid_state, lucky_ctx, 20)
    assert early and mid
    assert mid[0].type == "player"  # attacker_strength 70 > 65

    late_state = replace(usa, active_wars=[_war(start_day=0, duration=2)])
    late = events.battle_events(late_state, lucky_ctx, 38)
    assert "nearing conclusion" in late[0].message


def test_defending_war_narration_is_critical(usa, lucky_ctx):
    state = replace(usa, active_wars=[_war("china", "usa", player=True)])
    batch = events.battle_events(state, lucky_ctx, 1)
    assert batch[0].type == "critical"
    assert batch[0].message.startswith("China attacks!")
