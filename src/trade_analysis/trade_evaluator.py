"""
Trade Evaluator

Evaluates a trade proposal from the requesting team's perspective, combining
player values, positional grade changes and sliding scale adjustments into a
single auditable result.

Evaluation states:
    RECEIVED → VALIDATED → PRICED → GRADED → ADJUSTED → CLASSIFIED → ASSEMBLED

A structural problem (unknown player, overlapping lists, empty roster) raises a
TradeEvaluationError during validation and the evaluation never reaches
ASSEMBLED. Nothing is retried.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from trade_analysis.config import LeagueConfig
from trade_analysis.grade_delta_analyzer import GradeDeltaAnalyzer
from trade_analysis.models import (
    EmptyRosterError,
    ItemizationBreakdown,
    MalformedTradeError,
    Player,
    PlayerItemization,
    PositionalGradeReport,
    RiskLevel,
    SlidingScaleResult,
    TradeAssessment,
    TradeEvaluationResult,
    TradeProposal,
    UnknownPlayerError,
    ValueBreakdown,
    Verdict,
)
from trade_analysis.positional_grader import PositionalGrader, hypothetical_roster
from trade_analysis.risk_classifier import RiskClassifier
from trade_analysis.roster_needs import RosterNeedsAnalyzer
from trade_analysis.sliding_scale_adjuster import SlidingScaleAdjuster
from trade_analysis.team_valuator import TeamValuator
from trade_analysis.value_calculator import ValueCalculator, round_half_up


logger = logging.getLogger(__name__)


class EvaluationState(Enum):
    """Stages of a single trade evaluation"""
    RECEIVED = "received"
    VALIDATED = "validated"
    PRICED = "priced"
    GRADED = "graded"
    ADJUSTED = "adjusted"
    CLASSIFIED = "classified"
    ASSEMBLED = "assembled"


class TradeEvaluator:
    """
    Orchestrates valuation, grading, adjustment and classification.

    The evaluator holds only immutable configuration, so one instance can
    serve concurrent evaluations; every call allocates its own working data.
    """

    CALCULATION_BASE = "base_value"
    CALCULATION_SLIDING_SCALE = "sliding_scale"

    def __init__(self, config: Optional[LeagueConfig] = None):
        """
        Initialize evaluator and its components.

        Args:
            config: League configuration (defaults to the reference league)
        """
        self.config = config or LeagueConfig.create_default()
        self.calculator = ValueCalculator(self.config)
        self.valuator = TeamValuator(self.calculator)
        self.grader = PositionalGrader(self.config)
        self.delta_analyzer = GradeDeltaAnalyzer()
        self.adjuster = SlidingScaleAdjuster(self.config)
        self.risk_classifier = RiskClassifier(self.config)
        self.needs_analyzer = RosterNeedsAnalyzer(self.config, self.grader)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(
        self,
        proposal: TradeProposal,
        team_roster: Sequence[Player],
        counterparty_roster: Sequence[Player]
    ) -> TradeEvaluationResult:
        """
        Evaluate a trade proposal.

        Args:
            proposal: Give/receive player ids for the two teams
            team_roster: Full current roster of proposal.team_id
            counterparty_roster: Full current roster of proposal.counterparty_team_id

        Returns:
            TradeEvaluationResult

        Raises:
            EmptyRosterError: If either roster has no players
            MalformedTradeError: If the proposal is structurally invalid
            UnknownPlayerError: If a player id is on neither roster
        """
        state = EvaluationState.RECEIVED
        self._log_state(proposal, state)

        # Step 1: Validate structure, resolve ids to players
        outgoing, incoming = self._validate(proposal, team_roster, counterparty_roster)
        state = EvaluationState.VALIDATED
        self._log_state(proposal, state)

        # Step 2: Base value for every moving player
        breakdowns: Dict[int, ValueBreakdown] = {
            p.player_id: self.calculator.calculate(p) for p in outgoing + incoming
        }
        state = EvaluationState.PRICED
        self._log_state(proposal, state)

        # Step 3: Positional grades before/after for both teams
        team_after = hypothetical_roster(team_roster, proposal.give, incoming)
        counterparty_after = hypothetical_roster(counterparty_roster, proposal.receive, outgoing)
        team_grades = self._grade_report(proposal.team_id, team_roster, team_after)
        counterparty_grades = self._grade_report(
            proposal.counterparty_team_id, counterparty_roster, counterparty_after
        )
        state = EvaluationState.GRADED
        self._log_state(proposal, state)

        # Step 4: Sliding scale adjustments
        incoming_adjustments = self.adjuster.adjust(
            team_grades.delta.improvements, incoming, breakdowns
        )
        outgoing_adjustments = SlidingScaleResult()
        if self.config.sliding_scale.adjust_outgoing:
            outgoing_adjustments = self.adjuster.adjust(
                counterparty_grades.delta.improvements, outgoing, breakdowns
            )
        sliding_scale = incoming_adjustments.merged_with(outgoing_adjustments)

        players_out = self._itemize(outgoing, breakdowns, sliding_scale)
        players_in = self._itemize(incoming, breakdowns, sliding_scale)
        team_gives = self.valuator.total_enhanced([p.enhanced_value for p in players_out])
        team_receives = self.valuator.total_enhanced([p.enhanced_value for p in players_in])
        state = EvaluationState.ADJUSTED
        self._log_state(proposal, state)

        # Step 5: Risk, verdict, confidence
        net_gain = team_receives - team_gives
        risk = self.risk_classifier.classify(
            given=team_gives,
            received=team_receives,
            has_downgrades=bool(team_grades.delta.downgrades),
            roster_shrinks=len(team_after) < len(team_roster),
        )
        verdict = self.determine_verdict(net_gain)
        confidence = self.calculate_confidence(net_gain)
        state = EvaluationState.CLASSIFIED
        self._log_state(proposal, state)

        # Step 6: Assemble
        assessment = TradeAssessment(
            verdict=verdict,
            team_gives=team_gives,
            team_receives=team_receives,
            net_gain=net_gain,
            confidence=confidence,
            risk_level=risk.risk_level,
            value_ratio=risk.value_ratio,
        )
        composition = self.needs_analyzer.roster_composition(
            team_roster, team_after, outgoing + incoming
        )
        recommendations = self.needs_analyzer.recommendations(
            team_grades.after_trade, required_positions=list(team_grades.current)
        )

        result = TradeEvaluationResult(
            proposal=proposal,
            assessment=assessment,
            risk=risk,
            team_grades=team_grades,
            counterparty_grades=counterparty_grades,
            sliding_scale=sliding_scale,
            itemization=ItemizationBreakdown(
                players_out=tuple(players_out),
                players_in=tuple(players_in),
            ),
            roster_composition=composition,
            recommendations=tuple(recommendations),
            can_auto_approve=self.can_auto_approve(verdict, confidence, risk.risk_level),
            config_version=self.config.version,
            value_breakdowns=tuple(breakdowns[p.player_id] for p in outgoing + incoming),
        )
        state = EvaluationState.ASSEMBLED
        self._log_state(proposal, state)

        logger.info(
            f"Trade evaluated for team {proposal.team_id} vs {proposal.counterparty_team_id}: "
            f"{verdict.value} (gives {team_gives}, receives {team_receives}, "
            f"net {net_gain:+d}, confidence {confidence}%, risk {risk.risk_level.value})"
        )
        return result

    def determine_verdict(self, net_gain: int) -> Verdict:
        """
        Verdict from the requesting team's perspective.

        Standard mode:
        - |net| <= fair margin → Fair (inclusive)
        - net > fair margin    → You Win
        - net < -fair margin   → You Lose

        Tiered mode additionally reports You Win Big / You Lose Big when
        |net| exceeds the big margin.
        """
        settings = self.config.verdict
        magnitude = abs(net_gain)

        if magnitude <= settings.fair_margin:
            return Verdict.FAIR
        if settings.tiered and magnitude > settings.big_margin:
            return Verdict.YOU_WIN_BIG if net_gain > 0 else Verdict.YOU_LOSE_BIG
        return Verdict.YOU_WIN if net_gain > 0 else Verdict.YOU_LOSE

    def calculate_confidence(self, net_gain: int) -> int:
        """
        Confidence (0-100) in the verdict.

        Grows linearly with the distance between |net| and the fair margin,
        from the configured floor (right at the boundary) to the ceiling
        (saturation margin or more away from it).
        """
        curve = self.config.confidence
        fair_margin = self.config.verdict.fair_margin
        margin = abs(abs(net_gain) - fair_margin)

        decisiveness = min(1.0, margin / curve.saturation_margin)
        confidence = curve.floor + (curve.ceiling - curve.floor) * decisiveness
        return max(curve.floor, min(curve.ceiling, round_half_up(confidence)))

    def can_auto_approve(self, verdict: Verdict, confidence: int, risk_level: RiskLevel) -> bool:
        """
        Auto-approval gate as a pure function of already-computed fields.

        Approves when the verdict is allowed, confidence meets the minimum and
        risk does not exceed the maximum configured level.
        """
        policy = self.config.auto_approval
        return (
            verdict in policy.allowed_verdicts
            and confidence >= policy.min_confidence
            and risk_level.severity <= policy.max_risk_level.severity
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(
        self,
        proposal: TradeProposal,
        team_roster: Sequence[Player],
        counterparty_roster: Sequence[Player]
    ) -> Tuple[List[Player], List[Player]]:
        """
        Validate proposal structure and resolve player ids.

        Returns:
            (outgoing players in give order, incoming players in receive order)
        """
        state = EvaluationState.RECEIVED.value

        if proposal.team_id == proposal.counterparty_team_id:
            raise MalformedTradeError(
                f"Trade must involve two different teams, got team {proposal.team_id} twice",
                state=state
            )
        if not team_roster:
            raise EmptyRosterError(proposal.team_id, state=state)
        if not counterparty_roster:
            raise EmptyRosterError(proposal.counterparty_team_id, state=state)

        if not proposal.give and not proposal.receive:
            raise MalformedTradeError("Trade moves no players", state=state)

        for label, ids in (("give", proposal.give), ("receive", proposal.receive)):
            duplicates = sorted({pid for pid in ids if list(ids).count(pid) > 1})
            if duplicates:
                raise MalformedTradeError(
                    f"Duplicate player id(s) in {label} list: {duplicates}", state=state
                )

        overlap = sorted(set(proposal.give) & set(proposal.receive))
        if overlap:
            raise MalformedTradeError(
                f"Player id(s) in both give and receive lists: {overlap}", state=state
            )

        team_index = {p.player_id: p for p in team_roster}
        counterparty_index = {p.player_id: p for p in counterparty_roster}

        unknown: List[int] = []
        misplaced: List[int] = []
        for pid in proposal.give:
            if pid not in team_index:
                (misplaced if pid in counterparty_index else unknown).append(pid)
        for pid in proposal.receive:
            if pid not in counterparty_index:
                (misplaced if pid in team_index else unknown).append(pid)

        if unknown:
            raise UnknownPlayerError(unknown, state=state)
        if misplaced:
            raise MalformedTradeError(
                f"Player id(s) listed on the wrong side of the trade: {misplaced}", state=state
            )

        outgoing = [team_index[pid] for pid in proposal.give]
        incoming = [counterparty_index[pid] for pid in proposal.receive]
        return outgoing, incoming

    def _grade_report(
        self,
        team_id: int,
        roster_before: Sequence[Player],
        roster_after: Sequence[Player]
    ) -> PositionalGradeReport:
        current = self.grader.grade_roster(roster_before, team_id)
        # A team may trade away its whole roster; grade that as empty
        after_trade = self.grader.grade_roster(roster_after, team_id) if roster_after else {}
        return PositionalGradeReport(
            team_id=team_id,
            current=current,
            after_trade=after_trade,
            delta=self.delta_analyzer.analyze(current, after_trade),
        )

    def _itemize(
        self,
        players: Sequence[Player],
        breakdowns: Dict[int, ValueBreakdown],
        sliding_scale: SlidingScaleResult
    ) -> List[PlayerItemization]:
        items = []
        for player in players:
            base_value = breakdowns[player.player_id].final_value
            adjustment = sliding_scale.for_player(player.player_id)
            if adjustment is None:
                enhanced_value = base_value
                reason = "No positional grade change"
                method = self.CALCULATION_BASE
            else:
                enhanced_value = adjustment.adjusted_value
                reason = (
                    f"{adjustment.position} grade {adjustment.grade_improvement} "
                    f"(+{adjustment.adjustment_percentage:.0%})"
                )
                method = self.CALCULATION_SLIDING_SCALE

            items.append(PlayerItemization(
                player_id=player.player_id,
                name=player.display_name,
                position=player.position,
                ovr=player.overall,
                base_value=base_value,
                enhanced_value=enhanced_value,
                adjustment_reason=reason,
                calculation_method=method,
            ))
        return items

    @staticmethod
    def _log_state(proposal: TradeProposal, state: EvaluationState) -> None:
        logger.debug(
            f"[TRADE_EVAL] team {proposal.team_id} vs {proposal.counterparty_team_id}: {state.value}"
        )
