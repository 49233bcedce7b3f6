"""
Tests for Value Calculator

Player valuation: age factor, development and position multipliers,
missing-data defaults and the no-intermediate-rounding rule.
"""

import pytest

from trade_analysis.config import LeagueConfig, ValuationSettings
from trade_analysis.models import DevTrait, Player
from trade_analysis.value_calculator import ValueCalculator, round_half_up


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def calculator():
    """Value calculator with the reference league config"""
    return ValueCalculator()


# ============================================================================
# TESTS
# ============================================================================

class TestRoundHalfUp:
    """Rounding used for every final value"""

    def test_half_rounds_up(self):
        assert round_half_up(84.5) == 85
        assert round_half_up(0.5) == 1

    def test_below_half_rounds_down(self):
        assert round_half_up(121.49) == 121

    def test_differs_from_bankers_rounding(self):
        """Python's round() gives 84 here; trade values must give 85"""
        assert round(84.5) == 84
        assert round_half_up(84.5) == 85


class TestAgeFactor:
    """Age multiplier: floored at 0.7, uncapped above 1.0"""

    def test_pivot_age_is_neutral(self, calculator):
        assert calculator.age_factor(22) == 1.0

    def test_young_player_above_one(self, calculator):
        assert calculator.age_factor(18) > 1.0
        assert calculator.age_factor(18) == pytest.approx(1.08)

    def test_old_player_floored(self, calculator):
        assert calculator.age_factor(50) == 0.7

    def test_decay_per_year(self, calculator):
        assert calculator.age_factor(25) == pytest.approx(0.94)
        assert calculator.age_factor(30) == pytest.approx(0.84)

    def test_unknown_age_is_neutral(self, calculator):
        assert calculator.age_factor(None) == 1.0

    def test_non_positive_age_is_neutral(self, calculator):
        assert calculator.age_factor(0) == 1.0
        assert calculator.age_factor(-3) == 1.0


class TestPlayerValuation:
    """Full value calculation"""

    def test_worked_example_star_qb(self, calculator):
        """OVR 90, age 25, Star QB: 90 x 0.94 x 1.2 x 1.2 = 121.824 → 122"""
        player = Player(player_id=1, position="QB", team_id=1, overall=90, age=25, dev_trait="Star")

        breakdown = calculator.calculate(player)

        assert breakdown.age_factor == pytest.approx(0.94)
        assert breakdown.after_age == pytest.approx(84.6)
        assert breakdown.after_dev == pytest.approx(101.52)
        assert breakdown.dev_multiplier == 1.2
        assert breakdown.position_multiplier == 1.2
        assert breakdown.final_value == 122

    def test_no_intermediate_rounding(self):
        """
        OVR 81, age 23, position multiplier 3.0:
        exact 81 x 0.98 x 3.0 = 238.14 → 238, whereas rounding after the age
        stage would give 79 x 3.0 = 237.
        """
        config = LeagueConfig(valuation=ValuationSettings(position_multipliers={"WR": 3.0}))
        calc = ValueCalculator(config)
        player = Player(player_id=2, position="WR", team_id=1, overall=81, age=23)

        breakdown = calc.calculate(player)

        assert breakdown.after_age == pytest.approx(79.38)
        assert breakdown.after_age_display == 79.38
        assert breakdown.final_value == 238

    def test_missing_overall_uses_default(self, calculator):
        player = Player(player_id=3, position="RB", team_id=1, overall=None, age=22)

        breakdown = calculator.calculate(player)

        assert breakdown.base_rating == 75
        assert breakdown.final_value == 75

    def test_negative_overall_clamped(self, calculator):
        player = Player(player_id=4, position="RB", team_id=1, overall=-10, age=22)

        assert calculator.calculate_value(player) == 0

    def test_unknown_position_defaults_to_one(self, calculator):
        player = Player(player_id=5, position="LS", team_id=1, overall=70, age=22)

        breakdown = calculator.calculate(player)

        assert breakdown.position_multiplier == 1.0
        assert breakdown.final_value == 70

    def test_unknown_dev_trait_is_normal(self, calculator):
        player = Player(player_id=6, position="RB", team_id=1, overall=70, age=22, dev_trait="Legendary")

        assert player.dev_trait == DevTrait.NORMAL
        assert calculator.calculate(player).dev_multiplier == 1.0

    def test_long_position_names_normalized(self, calculator):
        player = Player(player_id=7, position="quarterback", team_id=1, overall=80, age=22)

        breakdown = calculator.calculate(player)

        assert breakdown.position == "QB"
        assert breakdown.final_value == 96

    def test_values_never_negative(self, calculator):
        """Every combination of extreme inputs stays non-negative"""
        for overall in (None, -50, 0, 1, 99):
            for age in (None, -1, 18, 40, 60):
                for trait in ("Normal", "Star", "Superstar", "Hidden", None):
                    player = Player(player_id=8, position="P", team_id=1,
                                    overall=overall, age=age, dev_trait=trait)
                    assert calculator.calculate_value(player) >= 0


class TestCalculationSteps:
    """Structured audit steps"""

    def test_five_ordered_steps(self, calculator):
        player = Player(player_id=1, position="QB", team_id=1, overall=90, age=25, dev_trait="Star")

        steps = calculator.calculate(player).steps

        assert [s.label for s in steps] == [
            "Base rating", "Age factor", "After age", "Development", "Position"
        ]
        assert steps[0].result == 90.0
        assert steps[2].result == 84.6
        assert steps[3].result == 101.52
        assert steps[-1].result == 122.0

    def test_breakdown_serializes(self, calculator):
        player = Player(player_id=1, position="QB", team_id=1, overall=90, age=25, dev_trait="Star")

        data = calculator.calculate(player).to_dict()

        assert data["final_value"] == 122
        assert data["after_dev"] == 101.52
        assert len(data["steps"]) == 5
        assert data["steps"][0] == {"label": "Base rating", "formula": "OVR 90", "result": 90.0}

    def test_calculate_all_preserves_order(self, calculator, team_one_roster):
        values = [b.final_value for b in calculator.calculate_all(team_one_roster)]

        assert values == [103, 79, 76, 74, 63]


class TestCustomConfiguration:
    """League-tunable multipliers"""

    def test_custom_position_multiplier(self):
        config = LeagueConfig(valuation=ValuationSettings(position_multipliers={"QB": 2.0}))
        calc = ValueCalculator(config)
        player = Player(player_id=1, position="QB", team_id=1, overall=80, age=22)

        assert calc.calculate_value(player) == 160

    def test_custom_default_overall(self):
        config = LeagueConfig(valuation=ValuationSettings(default_overall=60))
        calc = ValueCalculator(config)
        player = Player(player_id=1, position="RB", team_id=1, overall=None, age=22)

        assert calc.calculate_value(player) == 60
