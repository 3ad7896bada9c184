from dataclasses import replace

import pytest

from statecraft import decisions
from statecraft.models import DecisionChoice, DecisionEffect, War

from conftest import scripted_ctx


@pytest.fixture
def always():
    return scripted_ctx(fallback=0.0)


def test_no_decision_when_daily_odds_fail(usa, quiet_ctx):
    assert decisions.generate_decision(usa, quiet_ctx) is None


def test_decision_when_every_roll_passes(usa, always):
    decision = decisions.generate_decision(usa, always)
    assert decision is not None
    assert decision.choices
    assert decision.id.startswith("decision-")


def test_daily_odds_pass_but_generators_decline(usa):
    ctx = scripted_ctx(values=[0.0], fallback=0.99)
    assert decisions.generate_decision(usa, ctx) is None


def test_every_generator_fires_or_declines_cleanly(usa, always):
    stressed = replace(
        usa,
        global_reputation=30,
        military_strength=40,
        happiness=30,
        debt_to_gdp_ratio=150,
        unemployment_rate=14,
        sector_levels={**usa.sector_levels, "education": 45, "infrastructure": 10},
    )
    for generator in decisions.DECISION_GENERATORS:
        decision = generator(stressed, always)
        if decision is not None:
            assert 2 <= len(decision.choices) <= 4
            assert all(0 < c.success_chance <= 1 for c in decision.choices)


def test_assassination_plot_guards(usa, always):
    secure = replace(usa, sector_levels={**usa.sector_levels, "security": 60}, happiness=40)
    assert decisions.assassination_plot(secure, always) is None
    content = replace(usa, happiness=70)
    assert decisions.assassination_plot(content, always) is None

    plot = decisions.assassination_plot(replace(usa, happiness=40), always)
    ignore = plot.choices[0]
    assert ignore.success_chance == 0.8
    assert ignore.failure_effect.fatal
    assert decisions.effect_changes(usa, ignore.failure_effect) == {"happiness": 0.0}


def test_enemy_declares_war_needs_a_weak_reputation(usa, always):
    assert decisions.enemy_declares_war(usa, always) is None

    weak = replace(usa, global_reputation=30)
    decision = decisions.enemy_declares_war(weak, always)
    assert decision is not None
    assert decision.urgency == "critical"

    fight = decisions.effect_changes(weak, decision.choices[0].success_effect)
    war = fight["active_wars"][-1]
    assert war.defender == "china"
    assert war.is_player_attacker
    assert war.duration == 180
    assert "china" in fight["warred_countries"]


def test_enemy_declares_war_skips_former_opponents(usa, always):
    weak = replace(usa, global_reputation=30, warred_countries=["china", "russia", "iran", "northkorea"])
    assert decisions.enemy_declares_war(weak, always) is None


def test_trade_deal_walkout_breaks_alliance(usa, always):
    decision = decisions.trade_deal_offer(usa, always)
    negotiate = decision.choices[2]
    ally = next(cid for cid in decisions.COUNTRIES if cid in usa.allies)
    assert negotiate.failure_effect.breaks_alliance_with == ally
    walked = decisions.effect_changes(usa, negotiate.failure_effect)
    assert walked["relationships"][ally] == 85


def test_military_coup_has_fatal_branches(usa, always):
    assert decisions.military_coup_attempt(usa, always) is None
    coup = decisions.military_coup_attempt(replace(usa, military_strength=40, happiness=40), always)
    for choice in coup.choices:
        assert choice.failure_effect.fatal
        assert not choice.success_effect.fatal
    appeased = decisions.effect_changes(usa, coup.choices[1].success_effect)
    assert appeased["treasury"] == pytest.approx(usa.treasury * 0.7)


def test_debt_crisis_only_when_deep_in_debt(usa, always):
    assert decisions.debt_crisis_ultimatum(usa, always) is None
    crisis = decisions.debt_crisis_ultimatum(replace(usa, debt_to_gdp_ratio=130), always)
    ignore = crisis.choices[1]
    assert decisions.effect_changes(usa, ignore.failure_effect)["has_defaulted"] is True


def test_effects_are_clamped(usa, always):
    strained = replace(usa, happiness=95, treasury=10.0)
    disaster = decisions.natural_disaster(strained, always)
    full_relief = decisions.effect_changes(strained, disaster.choices[0].success_effect)
    assert full_relief["happiness"] == 100
    assert full_relief["treasury"] == 0


def test_pick_outcome():
    win = DecisionEffect("won")
    lose = DecisionEffect("lost")
    choice = DecisionChoice("Gamble", "coin flip", 0.5, win, lose)
    assert decisions.pick_outcome(choice, scripted_ctx(values=[0.3])) is win
    assert decisions.pick_outcome(choice, scripted_ctx(values=[0.7])) is lose

    no_failure = DecisionChoice("Gamble", "coin flip", 0.5, win)
    assert decisions.pick_outcome(no_failure, scripted_ctx(values=[0.7])) is None


def test_war_effect_does_not_duplicate_an_active_war(usa, always):
    weak = replace(usa, global_reputation=30)
    fight = decisions.enemy_declares_war(weak, always).choices[0].success_effect
    already = War("war-1", "usa", "china", 0, 50, 60, 60, True, True)
    changes = decisions.effect_changes(replace(weak, active_wars=[already]), fight)
    assert "active_wars" not in changes
    assert changes["relationships"]["china"] <= 20


def test_war_effect_starts_on_resolution_day(usa, always):
    weak = replace(usa, global_reputation=30)
    fight = decisions.enemy_declares_war(weak, always).choices[0].success_effect
    changes = decisions.effect_changes(replace(weak, current_day=40), fight)
    assert changes["active_wars"][-1].start_day == 40
    assert changes["is_in_war"] is True


def test_austerity_rescales_debt_ratio(usa, always):
    indebted = replace(usa, debt=usa.gdp * 1.3, debt_to_gdp_ratio=130)
    crisis = decisions.debt_crisis_ultimatum(indebted, always)
    changes = decisions.effect_changes(indebted, crisis.choices[2].success_effect)
    assert changes["debt"] == pytest.approx(usa.gdp * 1.3 * 0.7)
    assert changes["debt_to_gdp_ratio"] == pytest.approx(91.0)


def test_effects_apply_to_the_state_they_are_given(usa):
    effect = DecisionEffect("mixed", treasury=-100, sectors={"health": 10}, reputation=5)
    later = replace(usa, treasury=400.0, sector_levels={**usa.sector_levels, "health": 55})
    changes = decisions.effect_changes(later, effect)
    assert changes["treasury"] == 300
    assert changes["sector_levels"]["health"] == 65
    assert changes["global_reputation"] == usa.global_reputation + 5
