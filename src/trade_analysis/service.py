"""
Trade Tool Service

Request/response boundary of the trade analysis engine. Accepts the trade tool
request shape, resolves rosters from a league snapshot, runs the evaluator
(and optionally the suggestion finder) and returns plain dicts ready for JSON.

Request shape:
    {
        "teamId": 7,
        "trade": {"give": [101, 102], "receive": [205]},
        "includeSuggestions": false,
        "counterpartyTeamId": 12,    # optional, inferred from receive players
        "strategy": "balanced"       # optional, suggestion ranking
    }
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from logging_config import log_exception
from trade_analysis.config import LeagueConfig
from trade_analysis.models import (
    MalformedTradeError,
    Player,
    TradeEvaluationError,
    TradeEvaluationResult,
    TradeProposal,
    UnknownPlayerError,
)
from trade_analysis.suggestion_finder import TradeSuggestionFinder
from trade_analysis.trade_evaluator import TradeEvaluator


logger = logging.getLogger(__name__)


def _id_list(values: Any, label: str) -> Tuple[int, ...]:
    if values is None:
        return ()
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise MalformedTradeError(f"'{label}' must be a list of player ids, got {values!r}")
    try:
        return tuple(int(v) for v in values)
    except (TypeError, ValueError):
        raise MalformedTradeError(f"'{label}' contains a non-integer player id: {values!r}")


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _flag(value: Any, label: str) -> bool:
    """Boolean request flag; query-string style "false"/"0" count as False."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise MalformedTradeError(f"'{label}' must be a boolean, got {value!r}")


@dataclass(frozen=True)
class TradeEvaluationRequest:
    """Parsed trade tool request"""

    team_id: int
    give: Tuple[int, ...] = ()
    receive: Tuple[int, ...] = ()
    include_suggestions: bool = False
    counterparty_team_id: Optional[int] = None
    strategy: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TradeEvaluationRequest":
        """
        Parse a request dict (camelCase API names or snake_case).

        Raises:
            MalformedTradeError: If the request is missing fields or has wrong types
        """
        if not isinstance(data, Mapping):
            raise MalformedTradeError(f"Request must be an object, got {type(data).__name__}")

        team_id = data.get("teamId", data.get("team_id"))
        if team_id is None:
            raise MalformedTradeError("Request missing 'teamId'")

        trade = data.get("trade", {})
        if not isinstance(trade, Mapping):
            raise MalformedTradeError("'trade' must be an object with 'give' and 'receive'")

        counterparty = data.get("counterpartyTeamId", data.get("counterparty_team_id"))
        try:
            team_id = int(team_id)
            counterparty = int(counterparty) if counterparty is not None else None
        except (TypeError, ValueError):
            raise MalformedTradeError(f"Team ids must be integers: {team_id!r}, {counterparty!r}")

        return cls(
            team_id=team_id,
            give=_id_list(trade.get("give"), "give"),
            receive=_id_list(trade.get("receive"), "receive"),
            include_suggestions=_flag(
                data.get("includeSuggestions", data.get("include_suggestions")), "includeSuggestions"
            ),
            counterparty_team_id=counterparty,
            strategy=data.get("strategy"),
        )


@dataclass(frozen=True)
class LeagueSnapshot:
    """
    Point-in-time rosters for every team in a league.

    The engine never mutates or persists the snapshot; callers build a new one
    whenever rosters change.
    """

    rosters: Dict[int, Tuple[Player, ...]] = field(default_factory=dict)

    @classmethod
    def from_players(cls, players: Iterable[Union[Player, Mapping[str, Any]]]) -> "LeagueSnapshot":
        """Group players (Player objects or dicts) by their team id."""
        rosters: Dict[int, List[Player]] = {}
        for item in players:
            player = item if isinstance(item, Player) else Player.from_dict(item)
            rosters.setdefault(player.team_id, []).append(player)
        return cls(rosters={team_id: tuple(roster) for team_id, roster in rosters.items()})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LeagueSnapshot":
        """
        Build from either {"players": [...]} or {"teams": {"7": [...], ...}}.

        In the "teams" form, player dicts inherit the team id of their key.
        """
        if "players" in data:
            return cls.from_players(data["players"])

        players: List[Player] = []
        for team_key, roster in data.get("teams", {}).items():
            for item in roster:
                if isinstance(item, Player):
                    players.append(item)
                else:
                    players.append(Player.from_dict({"team_id": int(team_key), **item}))
        return cls.from_players(players)

    @property
    def team_ids(self) -> List[int]:
        return sorted(self.rosters)

    def roster(self, team_id: int) -> Tuple[Player, ...]:
        """Roster for a team (empty for unknown teams)."""
        return self.rosters.get(team_id, ())

    def owner_of(self, player_id: int) -> Optional[int]:
        """Team id currently holding a player, or None."""
        for team_id in self.team_ids:
            if any(p.player_id == player_id for p in self.rosters[team_id]):
                return team_id
        return None


class TradeToolService:
    """
    Serves trade tool requests against a league snapshot.

    Engine errors are logged and re-raised by handle_request(); use
    handle_request_safely() where an error payload is wanted instead.
    """

    def __init__(
        self,
        snapshot: LeagueSnapshot,
        config: Optional[LeagueConfig] = None
    ):
        """
        Initialize service.

        Args:
            snapshot: League rosters used for every request
            config: League configuration (defaults to the reference league)
        """
        self.snapshot = snapshot
        self.config = config or LeagueConfig.create_default()
        self.evaluator = TradeEvaluator(self.config)
        self.suggestion_finder = TradeSuggestionFinder(self.config, self.evaluator)

    def resolve_counterparty(self, request: TradeEvaluationRequest) -> int:
        """
        Counterparty team for a request.

        Uses counterpartyTeamId when given, otherwise the single team that owns
        every player in the receive list.

        Raises:
            MalformedTradeError: If it cannot be inferred or is ambiguous
            UnknownPlayerError: If a receive player is not in the league
        """
        if request.counterparty_team_id is not None:
            return request.counterparty_team_id

        if not request.receive:
            raise MalformedTradeError(
                "counterpartyTeamId is required when the trade receives no players"
            )

        owners = {}
        unknown = []
        for player_id in request.receive:
            owner = self.snapshot.owner_of(player_id)
            if owner is None:
                unknown.append(player_id)
            else:
                owners[player_id] = owner
        if unknown:
            raise UnknownPlayerError(unknown)

        teams = sorted(set(owners.values()))
        if len(teams) > 1:
            raise MalformedTradeError(
                f"Receive players belong to more than one team: {teams}"
            )
        return teams[0]

    def evaluate(self, request: TradeEvaluationRequest) -> TradeEvaluationResult:
        """Evaluate a parsed request."""
        counterparty = self.resolve_counterparty(request)
        proposal = TradeProposal(
            team_id=request.team_id,
            counterparty_team_id=counterparty,
            give=request.give,
            receive=request.receive,
        )
        return self.evaluator.evaluate(
            proposal,
            self.snapshot.roster(request.team_id),
            self.snapshot.roster(counterparty),
        )

    def suggest(self, request: TradeEvaluationRequest) -> List[Dict[str, Any]]:
        """Suggested fair returns for the request's give list."""
        suggestions = self.suggestion_finder.find_suggestions(
            team_id=request.team_id,
            give=request.give,
            league_rosters=self.snapshot.rosters,
            strategy=request.strategy,
            exclude_player_ids=request.receive,
        )
        return [s.to_dict() for s in suggestions]

    def handle_request(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Handle a raw trade tool request.

        Returns:
            TradeEvaluationResult.to_dict(), plus "suggestedTrades" when requested

        Raises:
            TradeEvaluationError: For structural problems with the request or trade
            ValueError: For an unknown suggestion strategy
        """
        context: Dict[str, Any] = {"operation": "trade_evaluation"}
        try:
            request = TradeEvaluationRequest.from_dict(data)
            context.update(team_id=request.team_id, give=list(request.give),
                           receive=list(request.receive))

            response = self.evaluate(request).to_dict()
            if request.include_suggestions:
                response["suggestedTrades"] = self.suggest(request)
            return response

        except TradeEvaluationError as e:
            context["state"] = e.state
            log_exception(logger, e, context=context, level="WARNING")
            raise
        except ValueError as e:
            log_exception(logger, e, context=context)
            raise

    def handle_request_safely(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Like handle_request(), but engine and configuration errors become
        {"error": {"type": ..., "message": ...}} instead of raising.
        """
        try:
            return self.handle_request(data)
        except TradeEvaluationError as e:
            error = {"type": type(e).__name__, "message": str(e)}
            if e.state is not None:
                error["state"] = e.state
            return {"error": error}
        except ValueError as e:
            # ConfigurationError and unknown strategies
            return {"error": {"type": type(e).__name__, "message": str(e)}}
