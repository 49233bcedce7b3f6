"""
Trade Analysis Engine.

Values players, grades positional depth before and after a proposed trade,
applies sliding scale bonuses for grade improvements and produces a fully
itemized verdict with risk and auto-approval flags.

Usage:
    from trade_analysis import (
        # Main engine
        TradeEvaluator,
        TradeToolService,
        # Configuration
        LeagueConfig,
        LeagueConfigLoader,
        # Core models
        Player,
        TradeProposal,
        TradeEvaluationResult,
    )

Example:
    evaluator = TradeEvaluator(LeagueConfigLoader().load("default_league"))
    result = evaluator.evaluate(
        TradeProposal(team_id=1, counterparty_team_id=2, give=[10], receive=[20]),
        team_roster=team_one_players,
        counterparty_roster=team_two_players,
    )
    print(result.assessment.verdict.value, result.assessment.net_gain)
"""

# Main engine
from trade_analysis.trade_evaluator import EvaluationState, TradeEvaluator
from trade_analysis.suggestion_finder import TradeSuggestionFinder
from trade_analysis.service import LeagueSnapshot, TradeEvaluationRequest, TradeToolService

# Components
from trade_analysis.value_calculator import ValueCalculator, round_half_up
from trade_analysis.team_valuator import TeamValuator
from trade_analysis.positional_grader import PositionalGrader, hypothetical_roster
from trade_analysis.grade_delta_analyzer import GradeDeltaAnalyzer
from trade_analysis.sliding_scale_adjuster import SlidingScaleAdjuster
from trade_analysis.risk_classifier import RiskClassifier
from trade_analysis.roster_needs import RosterNeedsAnalyzer

# Configuration
from trade_analysis.config import LeagueConfig, LeagueConfigLoader

# Core models
from trade_analysis.models import (
    Player,
    DevTrait,
    LetterGrade,
    Verdict,
    RiskLevel,
    TradeProposal,
    ValueBreakdown,
    PositionGroup,
    GradeChange,
    Adjustment,
    TradeEvaluationResult,
    SuggestedTrade,
)

# Errors
from trade_analysis.models import (
    TradeEvaluationError,
    UnknownPlayerError,
    MalformedTradeError,
    EmptyRosterError,
    ConfigurationError,
)

__all__ = [
    # Main engine
    "EvaluationState",
    "TradeEvaluator",
    "TradeSuggestionFinder",
    "LeagueSnapshot",
    "TradeEvaluationRequest",
    "TradeToolService",
    # Components
    "ValueCalculator",
    "round_half_up",
    "TeamValuator",
    "PositionalGrader",
    "hypothetical_roster",
    "GradeDeltaAnalyzer",
    "SlidingScaleAdjuster",
    "RiskClassifier",
    "RosterNeedsAnalyzer",
    # Configuration
    "LeagueConfig",
    "LeagueConfigLoader",
    # Core models
    "Player",
    "DevTrait",
    "LetterGrade",
    "Verdict",
    "RiskLevel",
    "TradeProposal",
    "ValueBreakdown",
    "PositionGroup",
    "GradeChange",
    "Adjustment",
    "TradeEvaluationResult",
    "SuggestedTrade",
    # Errors
    "TradeEvaluationError",
    "UnknownPlayerError",
    "MalformedTradeError",
    "EmptyRosterError",
    "ConfigurationError",
]
