from dataclasses import replace

import pytest

from statecraft import war
from statecraft.models import War

from conftest import scripted_ctx


def test_win_probability_is_clamped():
    assert war.win_probability(0, 100) == 10
    assert war.win_probability(100, 0) == 90
    assert war.win_probability(0, 0) == 50
    assert war.win_probability(50, 50) == 50


def test_win_probability_grows_with_player_power():
    odds = [war.win_probability(p, 100) for p in (10, 50, 100, 200, 400)]
    assert odds == sorted(odds)
    assert all(10 <= o <= 90 for o in odds)


def test_allies_add_power(usa):
    alone = replace(usa, allies=[])
    assert war.player_power(usa) > war.player_power(alone)


def test_cannot_declare_on_ally(usa):
    check = war.validate_war_declaration(usa, "uk")
    assert not check.can_declare
    assert "sanctions" in check.reasons[0]


def test_invalid_targets(usa):
    assert not war.validate_war_declaration(usa, "atlantis").can_declare
    assert not war.validate_war_declaration(usa, "usa").can_declare


def test_enemy_requirements_met(usa):
    check = war.validate_war_declaration(usa, "russia")
    assert check.can_declare
    assert check.reasons == []
    assert check.war_cost == pytest.approx(usa.gdp * 0.02)
    assert 10 <= check.outlook.win_probability <= 90


def test_neutral_requirements_collect_every_reason(usa):
    check = war.validate_war_declaration(usa, "brazil")
    assert not check.can_declare
    # military level 20 < 30 and treasury 1250 < 8% of GDP
    assert len(check.reasons) == 2
    assert any("Military infrastructure" in r for r in check.reasons)
    assert any("Insufficient treasury" in r for r in check.reasons)


def test_second_war_and_cooldown_block(usa):
    state = replace(usa, warred_countries=["russia"], cooldowns={**usa.cooldowns, "declare_war": 12})
    check = war.validate_war_declaration(state, "russia")
    assert not check.can_declare
    assert any("12 more days" in r for r in check.reasons)
    assert any("already fought" in r for r in check.reasons)


def _player_war():
    return War(
        id="war-1",
        attacker="usa",
        defender="russia",
        start_day=0,
        duration=0,
        attacker_strength=70,
        defender_strength=65,
        is_player_involved=True,
        is_player_attacker=True,
    )


def test_resolve_war_victory(usa):
    result, changes = war.resolve_war(usa, _player_war(), scripted_ctx(fallback=0.0))
    assert result.player_won
    assert result.enemy_name == "Russia"
    assert changes["gdp"] == pytest.approx(usa.gdp * 1.15)
    assert changes["military_strength"] == 90
    assert changes["treasury"] == pytest.approx(usa.treasury + usa.gdp * 0.10)


def test_resolve_war_defeat(usa):
    result, changes = war.resolve_war(usa, _player_war(), scripted_ctx(fallback=0.99))
    assert not result.player_won
    assert changes["gdp"] == pytest.approx(usa.gdp * 0.75)
    assert changes["military_strength"] == 30
    assert changes["security"] == 45
    assert changes["debt"] == pytest.approx(usa.debt + usa.gdp * 0.30)
    assert changes["treasury"] == 0


def test_enemy_of_defending_war():
    defending = replace(_player_war(), attacker="china", defender="usa", is_player_attacker=False)
    assert war.enemy_of(defending) == "china"
