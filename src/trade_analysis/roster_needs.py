"""
Roster Needs Analyzer

Summarizes how a trade reshapes the requesting team's roster and flags weak
positions on the post-trade roster.

A position is weak when its grade is at or below the configured weak grade,
or thin when it carries fewer players than the configured minimum depth.
Depth is counted either over every player at the position ('all') or over
only the best N players ('top_n'); in 'top_n' mode the grade used for the
weak check is also computed from those N players.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from trade_analysis.config import DepthSettings, LeagueConfig
from trade_analysis.models import (
    DepthChange,
    LetterGrade,
    Player,
    PositionGroup,
    PositionRecommendation,
    RecommendationPriority,
    RosterComposition,
    position_sort_key,
)
from trade_analysis.positional_grader import PositionalGrader


class RosterNeedsAnalyzer:
    """Roster composition and position recommendations."""

    REASON_LOW_GRADE = "LOW_GRADE"
    REASON_THIN_DEPTH = "THIN_DEPTH"

    def __init__(
        self,
        config: Optional[LeagueConfig] = None,
        grader: Optional[PositionalGrader] = None
    ):
        self.config = config or LeagueConfig.create_default()
        self.grader = grader or PositionalGrader(self.config)

    @property
    def depth_settings(self) -> DepthSettings:
        return self.config.depth

    def roster_composition(
        self,
        roster_before: Sequence[Player],
        roster_after: Sequence[Player],
        moved_players: Sequence[Player]
    ) -> RosterComposition:
        """
        Roster size and depth changes for every position touched by the trade.

        Args:
            roster_before: Current roster
            roster_after: Roster with the trade applied
            moved_players: Players leaving and arriving
        """
        affected = sorted({p.position for p in moved_players}, key=position_sort_key)
        before_counts = self._counts(roster_before)
        after_counts = self._counts(roster_after)

        return RosterComposition(
            roster_size_before=len(roster_before),
            roster_size_after=len(roster_after),
            positions_affected=tuple(affected),
            depth_changes=tuple(
                DepthChange(
                    position=pos,
                    before=before_counts.get(pos, 0),
                    after=after_counts.get(pos, 0),
                )
                for pos in affected
            ),
        )

    def counted_group(self, group: PositionGroup) -> PositionGroup:
        """
        The slice of a position group used for weak/thin classification.

        In 'top_n' mode only the best N players (highest rating, then lowest
        player id) count toward depth and grade.
        """
        if self.depth_settings.mode != 'top_n':
            return group
        ranked = sorted(
            group.players,
            key=lambda p: (-self.grader.rating_of(p), p.player_id)
        )
        return self.grader.build_group(group.position, ranked[:self.depth_settings.top_n])

    def recommendations(
        self,
        grades: Mapping[str, PositionGroup],
        required_positions: Sequence[str] = ()
    ) -> List[PositionRecommendation]:
        """
        Weak or thin positions, highest priority first.

        Args:
            grades: Post-trade positional grades
            required_positions: Positions that must be staffed; any that are
                                missing from grades are reported as F with depth 0

        Returns:
            PositionRecommendation list sorted by priority, then position order
        """
        settings = self.depth_settings
        recs: List[PositionRecommendation] = []

        for position in required_positions:
            if position not in grades:
                recs.append(PositionRecommendation(
                    position=position,
                    current_grade=LetterGrade.F,
                    target_grade=LetterGrade.F.step_up(),
                    priority=RecommendationPriority.HIGH,
                    reason=self.REASON_THIN_DEPTH,
                    depth=0,
                ))

        for position, group in grades.items():
            counted = self.counted_group(group)
            grade = counted.grade
            depth = counted.total_depth

            is_weak = grade.rank <= settings.weak_grade.rank
            is_thin = depth < settings.min_depth
            if not (is_weak or is_thin):
                continue

            if grade == LetterGrade.F:
                priority = RecommendationPriority.HIGH
            elif is_weak:
                priority = RecommendationPriority.MEDIUM
            else:
                priority = RecommendationPriority.LOW

            recs.append(PositionRecommendation(
                position=position,
                current_grade=grade,
                target_grade=grade.step_up(),
                priority=priority,
                reason=self.REASON_LOW_GRADE if is_weak else self.REASON_THIN_DEPTH,
                depth=depth,
            ))

        priority_rank = {
            RecommendationPriority.HIGH: 0,
            RecommendationPriority.MEDIUM: 1,
            RecommendationPriority.LOW: 2,
        }
        recs.sort(key=lambda r: (priority_rank[r.priority], position_sort_key(r.position)))
        return recs

    @staticmethod
    def _counts(roster: Sequence[Player]) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for player in roster:
            counts[player.position] = counts.get(player.position, 0) + 1
        return counts
