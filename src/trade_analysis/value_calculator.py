"""
Value Calculator

Scores a single player into a final trade value with an itemized breakdown.

Value Formula (stages feed each other, no intermediate rounding):
    after_age  = base_rating * age_factor
    after_dev  = after_age * dev_multiplier
    final      = round_half_up(after_dev * position_multiplier)

Missing attributes degrade to neutral defaults; the calculator never raises.
"""

import logging
import math
from typing import Iterable, List, Optional

from trade_analysis.config import LeagueConfig, ValuationSettings
from trade_analysis.models import CalculationStep, Player, ValueBreakdown


logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero for non-negative values.

    Python's round() uses banker's rounding (round(84.5) == 84); trade values
    must round 84.5 up to 85 so every consumer reproduces the same number.
    """
    return int(math.floor(value + 0.5))


class ValueCalculator:
    """
    Calculates trade values for players.

    Stateless apart from its (immutable) league configuration, so one instance
    can be shared across evaluations.
    """

    def __init__(self, config: Optional[LeagueConfig] = None):
        """
        Initialize calculator.

        Args:
            config: League configuration (defaults to the reference league)
        """
        self.config = config or LeagueConfig.create_default()

    @property
    def settings(self) -> ValuationSettings:
        return self.config.valuation

    def age_factor(self, age: Optional[int]) -> float:
        """
        Age multiplier: 1.0 at the pivot age, 0.02 per year lost after it.

        Floored at 0.7 but deliberately uncapped above 1.0, so players younger
        than the pivot are worth more than their rating alone.
        Unknown (None) or non-positive ages return 1.0.
        """
        if age is None or age <= 0:
            return 1.0
        s = self.settings
        return max(s.age_factor_floor, 1.0 - (age - s.age_pivot) * s.age_decay_per_year)

    def base_rating(self, player: Player) -> int:
        """Overall rating used for valuation (default when missing, never negative)."""
        if player.overall is None:
            logger.debug(
                f"Player {player.player_id} has no overall rating, using {self.settings.default_overall}"
            )
            return self.settings.default_overall
        return max(0, player.overall)

    def calculate(self, player: Player) -> ValueBreakdown:
        """
        Calculate the full value breakdown for a player.

        Args:
            player: Player snapshot

        Returns:
            ValueBreakdown with calculation steps and final integer value
        """
        base = self.base_rating(player)
        age_factor = self.age_factor(player.age)
        dev_multiplier = self.settings.dev_multiplier(player.dev_trait)
        position_multiplier = self.settings.position_multiplier(player.position)

        after_age = base * age_factor
        after_dev = after_age * dev_multiplier
        final_value = max(0, round_half_up(after_dev * position_multiplier))

        steps = (
            CalculationStep("Base rating", f"OVR {base}", float(base)),
            CalculationStep(
                "Age factor",
                self._age_formula(player.age, age_factor),
                round(age_factor, 4),
            ),
            CalculationStep(
                "After age",
                f"{base} x {age_factor:.2f}",
                round(after_age, 2),
            ),
            CalculationStep(
                "Development",
                f"{round(after_age, 2)} x {dev_multiplier} ({player.dev_trait.value})",
                round(after_dev, 2),
            ),
            CalculationStep(
                "Position",
                f"{round(after_dev, 2)} x {position_multiplier} ({player.position or 'unknown'})",
                float(final_value),
            ),
        )

        return ValueBreakdown(
            player_id=player.player_id,
            position=player.position,
            base_rating=base,
            age_factor=age_factor,
            dev_multiplier=dev_multiplier,
            position_multiplier=position_multiplier,
            after_age=after_age,
            after_dev=after_dev,
            steps=steps,
            final_value=final_value,
        )

    def calculate_value(self, player: Player) -> int:
        """Final trade value only."""
        return self.calculate(player).final_value

    def calculate_all(self, players: Iterable[Player]) -> List[ValueBreakdown]:
        """Value breakdowns for several players, in input order."""
        return [self.calculate(player) for player in players]

    def _age_formula(self, age: Optional[int], factor: float) -> str:
        if age is None or age <= 0:
            return "age unknown"
        s = self.settings
        return (
            f"max({s.age_factor_floor}, 1.0 - ({age} - {s.age_pivot}) x {s.age_decay_per_year})"
        )
