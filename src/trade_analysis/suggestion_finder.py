"""
Trade Suggestion Finder

Scans the league for single-player returns the requesting team could get for
the players it is offering, keeping only those the evaluator rates acceptable
(Fair by default).

Every candidate is priced through the full TradeEvaluator, so suggestions use
exactly the same valuation, grading and sliding scale as a direct evaluation.
"""

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from trade_analysis.config import LeagueConfig
from trade_analysis.models import (
    EmptyRosterError,
    Player,
    SuggestedTrade,
    TradeProposal,
)
from trade_analysis.trade_evaluator import TradeEvaluator


logger = logging.getLogger(__name__)


class TradeSuggestionFinder:
    """
    Finds fair one-for-N counter offers across the league.

    Strategies:
    - balanced: closest to even value (smallest |net gain|)
    - value: largest net gain for the requesting team
    - youth: youngest incoming player (unknown ages last)

    Ties are always broken by incoming player id, so output is deterministic.
    """

    def __init__(
        self,
        config: Optional[LeagueConfig] = None,
        evaluator: Optional[TradeEvaluator] = None
    ):
        self.config = config or (evaluator.config if evaluator else LeagueConfig.create_default())
        self.evaluator = evaluator or TradeEvaluator(self.config)

    def find_suggestions(
        self,
        team_id: int,
        give: Sequence[int],
        league_rosters: Mapping[int, Sequence[Player]],
        strategy: Optional[str] = None,
        exclude_player_ids: Iterable[int] = (),
        max_suggestions: Optional[int] = None
    ) -> List[SuggestedTrade]:
        """
        Search every other team for acceptable single-player returns.

        Args:
            team_id: Requesting team
            give: Player ids the requesting team offers
            league_rosters: team_id → roster for every team in the league
            strategy: Ranking strategy (defaults to the configured strategy)
            exclude_player_ids: Players never to suggest (e.g. already requested)
            max_suggestions: Result limit (defaults to the configured limit)

        Returns:
            Ranked list of SuggestedTrade, at most max_suggestions long

        Raises:
            EmptyRosterError: If the requesting team has no roster
            ValueError: If the strategy is unknown
            TradeEvaluationError: If the offered players are not valid for the team
        """
        settings = self.config.suggestions
        strategy = strategy or settings.strategy
        limit = settings.max_suggestions if max_suggestions is None else max_suggestions
        sort_key = self._sort_key(strategy)

        team_roster = league_rosters.get(team_id) or []
        if not team_roster:
            raise EmptyRosterError(team_id)

        excluded = set(exclude_player_ids)
        offered = tuple(give)
        candidates: List[Tuple[SuggestedTrade, Player]] = []

        for other_team_id in sorted(league_rosters):
            if other_team_id == team_id:
                continue
            other_roster = league_rosters[other_team_id]
            if not other_roster:
                continue

            for target in sorted(other_roster, key=lambda p: p.player_id):
                if target.player_id in excluded:
                    continue

                proposal = TradeProposal(
                    team_id=team_id,
                    counterparty_team_id=other_team_id,
                    give=offered,
                    receive=(target.player_id,),
                )
                result = self.evaluator.evaluate(proposal, team_roster, other_roster)
                assessment = result.assessment

                if assessment.verdict not in settings.acceptable_verdicts:
                    continue

                candidates.append((
                    SuggestedTrade(
                        target_team_id=other_team_id,
                        players_offered=(target,),
                        verdict=assessment.verdict,
                        net_gain=assessment.net_gain,
                        confidence=assessment.confidence,
                    ),
                    target,
                ))

        candidates.sort(key=lambda item: sort_key(item[0], item[1]))
        suggestions = [suggestion for suggestion, _ in candidates[:limit]]

        logger.info(
            f"Team {team_id}: {len(candidates)} acceptable returns found, "
            f"{len(suggestions)} suggested ({strategy})"
        )
        return suggestions

    def _sort_key(self, strategy: str) -> Callable[[SuggestedTrade, Player], Tuple]:
        strategies: Dict[str, Callable[[SuggestedTrade, Player], Tuple]] = {
            'balanced': lambda s, p: (abs(s.net_gain), p.player_id),
            'value': lambda s, p: (-s.net_gain, p.player_id),
            'youth': lambda s, p: (p.age is None, p.age or 0, p.player_id),
        }
        if strategy not in strategies:
            raise ValueError(
                f"Unknown suggestion strategy {strategy!r}, expected one of {sorted(strategies)}"
            )
        return strategies[strategy]
