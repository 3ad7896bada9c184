from dataclasses import replace

import pytest

from statecraft import economy
from statecraft.models import War


def _war(player=True):
    return War(
        id="war-x",
        attacker="usa",
        defender="russia",
        start_day=0,
        duration=30,
        attacker_strength=70,
        defender_strength=65,
        is_player_involved=player,
        is_player_attacker=player,
    )


def test_happiness_at_start_reflects_relationships(usa):
    # 6 allies (+12), 4 hostile (-6), easy decay 0.02
    assert economy.happiness(usa) == 76.0


def test_happiness_is_clamped(usa):
    awful = replace(usa, inflation_rate=25, unemployment_rate=40, has_defaulted=True, gdp=1.0)
    assert economy.happiness(awful) == 0
    great = replace(usa, gdp=usa.gdp * 10, security=100, military_strength=100)
    assert economy.happiness(great) == 100


def test_player_wars_lower_happiness(usa):
    at_war = replace(usa, active_wars=[_war(), _war()])
    # first war -10, second -12
    assert economy.happiness(usa) - economy.happiness(at_war) == pytest.approx(22)
    ai_war = replace(usa, active_wars=[_war(player=False)])
    assert economy.happiness(ai_war) == economy.happiness(usa)


def test_war_growth_penalty_is_superlinear():
    assert economy.war_growth_penalty(0) == 0
    assert economy.war_growth_penalty(1) == 2
    assert economy.war_growth_penalty(2) == 5
    assert economy.war_growth_penalty(3) == 9


def test_growth_falls_with_interest_rate(usa):
    rates = [2.5, 4.0, 6.0, 7.0, 7.5, 10.0]
    growth = [economy.gdp_growth_rate(replace(usa, interest_rate=r)) for r in rates]
    assert growth == sorted(growth, reverse=True)
    # no jump at the 7% boundary
    just_over = economy.gdp_growth_rate(replace(usa, interest_rate=7.01))
    at_seven = economy.gdp_growth_rate(replace(usa, interest_rate=7.0))
    assert at_seven - just_over < 0.05


def test_growth_penalties(usa):
    base = economy.gdp_growth_rate(usa)
    assert economy.gdp_growth_rate(replace(usa, has_defaulted=True)) == pytest.approx(base - 3, abs=0.02)
    sanctioned = replace(usa, sanctions_on_us=["china", "russia"])
    assert economy.gdp_growth_rate(sanctioned) == pytest.approx(base - 1, abs=0.02)
    assert economy.gdp_growth_rate(replace(usa, debt_to_gdp_ratio=200)) < base


def test_inflation_bounds_and_money_printing(usa):
    assert 0 <= economy.inflation_rate(replace(usa, inflation_rate=30)) <= 25
    assert economy.inflation_rate(replace(usa, inflation_rate=0, interest_rate=10)) == 0
    printed = economy.inflation_rate(usa, money_printed=usa.gdp * 0.01)
    assert printed == pytest.approx(economy.inflation_rate(usa) + 0.1, abs=0.01)
    assert economy.money_printing_shock(250, 25000) == pytest.approx(0.1)
    assert economy.money_printing_shock(-5, 25000) == 0


def test_higher_rates_cool_inflation(usa):
    low = economy.inflation_rate(replace(usa, interest_rate=1))
    high = economy.inflation_rate(replace(usa, interest_rate=6))
    assert high < low


def test_unemployment_bounds(usa):
    assert economy.unemployment_rate(replace(usa, unemployment_rate=60, interest_rate=10)) == 40
    assert economy.unemployment_rate(replace(usa, unemployment_rate=0, gdp_growth_rate=30)) == 1


def test_happiness_gdp_penalty():
    assert economy.happiness_gdp_penalty(60) == 0
    assert economy.happiness_gdp_penalty(40) == pytest.approx(0.002)
    assert economy.happiness_gdp_penalty(5) == pytest.approx((45 * 0.02 + 25 * 0.03 + 0.5) / 100)


def test_loan_payment():
    assert economy.loan_payment(1200, 4.5) == pytest.approx(14.5)
    assert economy.loan_payment(1200, 0) == pytest.approx(10)


def test_uprising_chance():
    assert economy.uprising_chance(15) == 0
    assert economy.uprising_chance(50) == 0
    assert economy.uprising_chance(5) == pytest.approx((10 / 15) * 0.02)
    assert economy.uprising_chance(0) == pytest.approx(0.02)


def test_repress_success_chance():
    assert economy.repress_success_chance(50, 50) == 0.5
    assert economy.repress_success_chance(100, 0) == 0.4


def test_score_change_punishes_default(usa):
    defaulted = replace(usa, has_defaulted=True)
    assert economy.score_change(defaulted, usa) - economy.score_change(usa, usa) == pytest.approx(-500)


def test_sector_spending_high_potential():
    effect = economy.sector_spending_effect("education", 100, "usa", 20)
    assert effect.level_increase == 20
    assert effect.happiness_change == 6
    assert effect.unemployment_reduction == 1.0


def test_sector_spending_diminishes_above_level_50():
    fresh = economy.sector_spending_effect("education", 100, "usa", 20)
    mature = economy.sector_spending_effect("education", 100, "usa", 60)
    assert mature.level_increase == fresh.level_increase / 2
    assert mature.happiness_change == fresh.happiness_change / 2


def test_sector_spending_wasted_on_very_low_potential():
    effect = economy.sector_spending_effect("tourism", 100, "somalia", 10)
    assert effect.level_increase == 0
    assert effect.happiness_change == -3
    assert "Wasted" in effect.message
