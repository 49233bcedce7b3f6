"""
Grade Delta Analyzer

Diffs two positional grade snapshots for the same team (current roster vs.
roster with the trade applied) into improvement and downgrade lists.

Grades are compared by LetterGrade rank, never by string. A position present
in only one snapshot is treated as an F with a 0.0 average on the missing side,
so emptying a position is a downgrade and filling one is an improvement.
"""

from typing import Dict, List, Mapping, Tuple

from trade_analysis.models import (
    GradeChange,
    GradeDelta,
    LetterGrade,
    PositionGroup,
    position_sort_key,
)


class GradeDeltaAnalyzer:
    """Compares before/after PositionGroup maps."""

    MISSING_GRADE = LetterGrade.F
    MISSING_AVERAGE = 0.0

    def _grade_and_average(
        self,
        groups: Mapping[str, PositionGroup],
        position: str
    ) -> Tuple[LetterGrade, float]:
        group = groups.get(position)
        if group is None:
            return self.MISSING_GRADE, self.MISSING_AVERAGE
        return group.grade, group.average_rating

    def compare_averages(
        self,
        before: Mapping[str, PositionGroup],
        after: Mapping[str, PositionGroup]
    ) -> Dict[str, float]:
        """
        Numeric average-rating delta for every position in either snapshot.

        Includes positions whose letter grade did not change.
        """
        deltas = {}
        for position in self._all_positions(before, after):
            _, before_avg = self._grade_and_average(before, position)
            _, after_avg = self._grade_and_average(after, position)
            deltas[position] = round(after_avg - before_avg, 1)
        return deltas

    def analyze(
        self,
        before: Mapping[str, PositionGroup],
        after: Mapping[str, PositionGroup]
    ) -> GradeDelta:
        """
        Classify grade changes.

        Args:
            before: Grades on the current roster
            after: Grades on the hypothetical post-trade roster

        Returns:
            GradeDelta with improvements (rank strictly up) and downgrades
            (rank strictly down), both in canonical position order.
            Unchanged grades appear in neither list.
        """
        improvements: List[GradeChange] = []
        downgrades: List[GradeChange] = []
        averages = self.compare_averages(before, after)

        for position in self._all_positions(before, after):
            grade_before, _ = self._grade_and_average(before, position)
            grade_after, _ = self._grade_and_average(after, position)
            if grade_after.rank == grade_before.rank:
                continue

            change = GradeChange(
                position=position,
                grade_before=grade_before,
                grade_after=grade_after,
                rating_delta=averages[position],
            )
            if change.is_improvement:
                improvements.append(change)
            else:
                downgrades.append(change)

        return GradeDelta(improvements=tuple(improvements), downgrades=tuple(downgrades))

    @staticmethod
    def _all_positions(
        before: Mapping[str, PositionGroup],
        after: Mapping[str, PositionGroup]
    ) -> List[str]:
        return sorted(set(before) | set(after), key=position_sort_key)
