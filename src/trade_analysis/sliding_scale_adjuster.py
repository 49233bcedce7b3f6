"""
Sliding Scale Adjuster

Re-prices incoming players whose arrival improves a position's letter grade.
The bonus grows with the size of the grade jump (C -> A earns more than C -> B).

Only improvements feed pricing; downgrades are informational and never
reduce a player's value here.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from trade_analysis.config import LeagueConfig, SlidingScaleCurve
from trade_analysis.models import (
    Adjustment,
    GradeChange,
    Player,
    SlidingScaleResult,
    ValueBreakdown,
)
from trade_analysis.value_calculator import round_half_up


logger = logging.getLogger(__name__)


class SlidingScaleAdjuster:
    """Applies grade-improvement bonuses to the players responsible."""

    def __init__(self, config: Optional[LeagueConfig] = None):
        self.config = config or LeagueConfig.create_default()

    @property
    def curve(self) -> SlidingScaleCurve:
        return self.config.sliding_scale

    def adjustment_percentage(self, change: GradeChange) -> float:
        """Bonus fraction for a grade change (0.0 unless it is an improvement)."""
        return self.curve.percentage_for(change.rank_change)

    def adjust(
        self,
        improvements: Sequence[GradeChange],
        incoming_players: Sequence[Player],
        base_values: Mapping[int, ValueBreakdown]
    ) -> SlidingScaleResult:
        """
        Build adjustments for incoming players at improved positions.

        Args:
            improvements: Improvements for the team receiving the players
            incoming_players: Players arriving on that team
            base_values: player_id → base ValueBreakdown for every incoming player

        Returns:
            SlidingScaleResult (empty when nothing improved)

        Raises:
            KeyError: If an attributable player has no base value
        """
        adjustments: List[Adjustment] = []
        adjusted_ids = set()

        for change in improvements:
            if not change.is_improvement:
                continue

            percentage = self.adjustment_percentage(change)
            if percentage <= 0:
                continue

            responsible = [
                p for p in incoming_players
                if p.position == change.position and p.player_id not in adjusted_ids
            ]
            for player in responsible:
                base_value = base_values[player.player_id].final_value
                adjusted_value = round_half_up(base_value * (1 + percentage))
                adjustments.append(Adjustment(
                    player_id=player.player_id,
                    player_name=player.display_name,
                    position=change.position,
                    grade_improvement=change.description,
                    adjustment_percentage=percentage,
                    base_value=base_value,
                    adjusted_value=adjusted_value,
                ))
                adjusted_ids.add(player.player_id)
                logger.debug(
                    f"Sliding scale: {player.display_name} ({change.position} {change.description}) "
                    f"+{percentage:.0%} {base_value} -> {adjusted_value}"
                )

        return SlidingScaleResult(adjustments=tuple(adjustments))
