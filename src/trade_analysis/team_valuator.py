"""
Team Valuator

Sums player values for one side of a trade.
"""

from typing import Iterable, Optional, Sequence, Union

from trade_analysis.models import Player, ValueBreakdown
from trade_analysis.value_calculator import ValueCalculator


class TeamValuator:
    """Aggregates ValueCalculator output for a list of players."""

    def __init__(self, calculator: Optional[ValueCalculator] = None):
        self.calculator = calculator or ValueCalculator()

    def total_value(self, items: Iterable[Union[Player, ValueBreakdown]]) -> int:
        """
        Sum of final values for players and/or pre-computed breakdowns.

        An empty side is worth 0.
        """
        total = 0
        for item in items:
            if isinstance(item, ValueBreakdown):
                total += item.final_value
            else:
                total += self.calculator.calculate_value(item)
        return total

    @staticmethod
    def total_enhanced(values: Sequence[int]) -> int:
        """Sum of already-adjusted values, in the order given."""
        return sum(values, 0)
