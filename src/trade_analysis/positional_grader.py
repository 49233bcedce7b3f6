"""
Positional Grader

Groups a roster by position and assigns each position group a letter grade
from its average overall rating. Depth (player count) is reported separately
from the grade so callers can tell "few elite players" from "many mediocre ones".
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from trade_analysis.config import LeagueConfig
from trade_analysis.models import EmptyRosterError, Player, PositionGroup, position_sort_key


logger = logging.getLogger(__name__)


def hypothetical_roster(
    roster: Sequence[Player],
    outgoing_ids: Iterable[int],
    incoming: Sequence[Player]
) -> List[Player]:
    """
    Roster after a trade: outgoing players removed, incoming players appended.

    The input roster is not modified.
    """
    outgoing = set(outgoing_ids)
    return [p for p in roster if p.player_id not in outgoing] + list(incoming)


class PositionalGrader:
    """
    Grades every position group on a roster.

    Grade cutoffs come from the league configuration (GradeScale).
    """

    def __init__(self, config: Optional[LeagueConfig] = None):
        self.config = config or LeagueConfig.create_default()

    def rating_of(self, player: Player) -> int:
        """Rating used for averages (same default as valuation when missing)."""
        if player.overall is None:
            return self.config.valuation.default_overall
        return max(0, player.overall)

    def average_rating(self, players: Sequence[Player]) -> float:
        """
        Average rating of a group.

        Returns 0.0 for an empty group; callers never grade empty groups.
        """
        if not players:
            return 0.0
        return sum(self.rating_of(p) for p in players) / len(players)

    def build_group(self, position: str, players: Sequence[Player]) -> PositionGroup:
        average = self.average_rating(players)
        return PositionGroup(
            position=position,
            players=tuple(players),
            average_rating=average,
            grade=self.config.grades.grade_for(average),
        )

    def grade_roster(
        self,
        roster: Sequence[Player],
        team_id: Optional[int] = None
    ) -> Dict[str, PositionGroup]:
        """
        Grade all positions on a roster.

        Args:
            roster: Every player on the team
            team_id: Team identifier, used for error reporting

        Returns:
            Mapping position → PositionGroup in canonical position order.
            Positions with no players are omitted.

        Raises:
            EmptyRosterError: If the roster has no players
        """
        if not roster:
            raise EmptyRosterError(team_id if team_id is not None else -1)

        buckets: Dict[str, List[Player]] = {}
        for player in roster:
            buckets.setdefault(player.position, []).append(player)

        grades: Dict[str, PositionGroup] = {}
        for position in sorted(buckets, key=position_sort_key):
            grades[position] = self.build_group(position, buckets[position])

        logger.debug(
            f"Graded {len(grades)} positions for team {team_id}: "
            + ", ".join(f"{pos}={group.grade.label}" for pos, group in grades.items())
        )
        return grades
