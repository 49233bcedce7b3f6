"""
Trade Analysis Data Models

Defines data structures for players, value breakdowns, positional grades,
sliding scale adjustments, itemization and complete trade evaluation results.

All models are built fresh per evaluation call from a roster snapshot and are
never persisted by the engine. Every result model exposes to_dict() producing
the wire shape consumed by the trade tool UI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple


# ============================================================================
# POSITIONS
# ============================================================================

class Position(Enum):
    """Football roster positions in canonical display order."""
    QB = "QB"
    HB = "HB"
    RB = "RB"
    FB = "FB"
    WR = "WR"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    RT = "RT"
    LE = "LE"
    RE = "RE"
    DT = "DT"
    LOLB = "LOLB"
    MLB = "MLB"
    ROLB = "ROLB"
    CB = "CB"
    FS = "FS"
    SS = "SS"
    K = "K"
    P = "P"


POSITION_ORDER: Dict[str, int] = {pos.value: index for index, pos in enumerate(Position)}

# Long-form names (lowercase underscore format) → abbreviation
POSITION_ALIASES: Dict[str, str] = {
    "quarterback": "QB",
    "halfback": "HB",
    "running_back": "RB",
    "fullback": "FB",
    "wide_receiver": "WR",
    "tight_end": "TE",
    "left_tackle": "LT",
    "left_guard": "LG",
    "center": "C",
    "right_guard": "RG",
    "right_tackle": "RT",
    "left_end": "LE",
    "left_defensive_end": "LE",
    "right_end": "RE",
    "right_defensive_end": "RE",
    "defensive_tackle": "DT",
    "left_outside_linebacker": "LOLB",
    "middle_linebacker": "MLB",
    "mike_linebacker": "MLB",
    "right_outside_linebacker": "ROLB",
    "cornerback": "CB",
    "free_safety": "FS",
    "strong_safety": "SS",
    "kicker": "K",
    "punter": "P",
}


def normalize_position(position: Optional[str]) -> str:
    """
    Normalize a raw position string to its football abbreviation.

    Converts: "Quarterback", "left tackle", "qb" → "QB", "LT", "QB"
    Unknown positions are kept, upper-cased, so they still group and
    fall back to the default multiplier.

    Args:
        position: Raw position string in any format

    Returns:
        Position abbreviation (empty string for missing input)
    """
    if not position:
        return ""
    cleaned = str(position).strip()
    alias_key = cleaned.lower().replace(' ', '_').replace('-', '_')
    if alias_key in POSITION_ALIASES:
        return POSITION_ALIASES[alias_key]
    return cleaned.upper()


def position_sort_key(position: str) -> Tuple[int, str]:
    """Sort key placing known positions in canonical order, unknown ones after, alphabetically."""
    return (POSITION_ORDER.get(position, len(POSITION_ORDER)), position)


# ============================================================================
# PLAYERS
# ============================================================================

class DevTrait(Enum):
    """Player development trait"""
    NORMAL = "Normal"
    STAR = "Star"
    SUPERSTAR = "Superstar"
    HIDDEN = "Hidden"

    @classmethod
    def parse(cls, value: Any) -> "DevTrait":
        """
        Parse a development trait leniently.

        Unknown or malformed values degrade to NORMAL instead of raising.
        """
        if isinstance(value, DevTrait):
            return value
        if value is None:
            return cls.NORMAL
        text = str(value).strip().lower()
        for trait in cls:
            if trait.value.lower() == text or trait.name.lower() == text:
                return trait
        return cls.NORMAL


def _coerce_optional_int(value: Any) -> Optional[int]:
    """Best-effort int conversion for optional attributes; None when not usable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class Player:
    """Immutable player snapshot used for a single evaluation call"""

    player_id: int
    position: str
    team_id: int
    overall: Optional[int] = None  # 0-99, None = unknown
    age: Optional[int] = None
    dev_trait: DevTrait = DevTrait.NORMAL
    name: Optional[str] = None

    def __post_init__(self):
        """Normalize position and degrade malformed optional attributes"""
        object.__setattr__(self, 'position', normalize_position(self.position))
        object.__setattr__(self, 'overall', _coerce_optional_int(self.overall))
        object.__setattr__(self, 'age', _coerce_optional_int(self.age))
        object.__setattr__(self, 'dev_trait', DevTrait.parse(self.dev_trait))

    @property
    def display_name(self) -> str:
        return self.name or f"Player #{self.player_id}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.player_id,
            "name": self.display_name,
            "position": self.position,
            "ovr": self.overall,
            "age": self.age,
            "dev_trait": self.dev_trait.value,
            "team_id": self.team_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create from dictionary.

        Accepts both the trade tool API field names (id, ovr, devTrait, teamId)
        and snake_case names (player_id, overall, dev_trait, team_id).

        Raises:
            ValueError: If the player id or team id is missing
        """
        player_id = data.get("player_id", data.get("id"))
        team_id = data.get("team_id", data.get("teamId"))
        if player_id is None:
            raise ValueError(f"Player data missing id: {data!r}")
        if team_id is None:
            raise ValueError(f"Player {player_id} missing team id")
        return cls(
            player_id=int(player_id),
            position=data.get("position", ""),
            team_id=int(team_id),
            overall=data.get("overall", data.get("ovr")),
            age=data.get("age"),
            dev_trait=data.get("dev_trait", data.get("devTrait")),
            name=data.get("name"),
        )

    def __str__(self) -> str:
        """Human-readable representation"""
        details = [self.position or "?"]
        if self.overall is not None:
            details.append(f"{self.overall} OVR")
        if self.age is not None:
            details.append(f"Age {self.age}")
        return f"{self.display_name} ({', '.join(details)})"


# ============================================================================
# VALUATION
# ============================================================================

class CalculationStep(NamedTuple):
    """One audited step of a value calculation"""
    label: str
    formula: str
    result: float


@dataclass(frozen=True)
class ValueBreakdown:
    """
    Itemized trade value for a single player.

    Attributes:
        player_id: Player being valued
        position: Normalized position
        base_rating: Overall rating used (75 when missing)
        age_factor: Age multiplier (floored at 0.7, no upper cap)
        dev_multiplier: Development trait multiplier
        position_multiplier: League position multiplier
        after_age: base_rating * age_factor, unrounded
        after_dev: after_age * dev_multiplier, unrounded
        steps: Ordered calculation steps for audit/display
        final_value: Rounded final value, never negative
    """

    player_id: int
    position: str
    base_rating: int
    age_factor: float
    dev_multiplier: float
    position_multiplier: float
    after_age: float
    after_dev: float
    steps: Tuple[CalculationStep, ...]
    final_value: int

    @property
    def after_age_display(self) -> float:
        return round(self.after_age, 2)

    @property
    def after_dev_display(self) -> float:
        return round(self.after_dev, 2)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "position": self.position,
            "base_rating": self.base_rating,
            "age_factor": self.age_factor,
            "dev_multiplier": self.dev_multiplier,
            "position_multiplier": self.position_multiplier,
            "after_age": self.after_age_display,
            "after_dev": self.after_dev_display,
            "steps": [
                {"label": s.label, "formula": s.formula, "result": s.result}
                for s in self.steps
            ],
            "final_value": self.final_value,
        }


# ============================================================================
# POSITIONAL GRADES
# ============================================================================

class LetterGrade(Enum):
    """Positional letter grade with explicit rank (A highest)"""
    A = 5
    B = 4
    C = 3
    D = 2
    F = 1

    @property
    def rank(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return self.name

    def step_up(self) -> "LetterGrade":
        """Next grade up, capped at A"""
        return LetterGrade(min(LetterGrade.A.value, self.value + 1))

    @classmethod
    def parse(cls, value: Any) -> "LetterGrade":
        """
        Parse a grade letter.

        Raises:
            ValueError: If value is not one of A, B, C, D, F
        """
        if isinstance(value, LetterGrade):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown letter grade: {value!r}")


@dataclass(frozen=True)
class PositionGroup:
    """All players a roster carries at one position, with grade"""

    position: str
    players: Tuple[Player, ...]
    average_rating: float  # unrounded
    grade: LetterGrade

    @property
    def total_depth(self) -> int:
        return len(self.players)

    @property
    def average_display(self) -> float:
        return round(self.average_rating, 1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "grade": self.grade.label,
            "avg_ovr": self.average_display,
            "players": [
                {
                    "id": p.player_id,
                    "name": p.display_name,
                    "ovr": p.overall,
                    "age": p.age,
                    "dev_trait": p.dev_trait.value,
                }
                for p in self.players
            ],
            "total_depth": self.total_depth,
        }


@dataclass(frozen=True)
class GradeChange:
    """Letter grade change at one position caused by a trade"""

    position: str
    grade_before: LetterGrade
    grade_after: LetterGrade
    rating_delta: float  # after average - before average

    @property
    def rank_change(self) -> int:
        return self.grade_after.rank - self.grade_before.rank

    @property
    def is_improvement(self) -> bool:
        return self.rank_change > 0

    @property
    def is_downgrade(self) -> bool:
        return self.rank_change < 0

    @property
    def description(self) -> str:
        return f"{self.grade_before.label} -> {self.grade_after.label}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "position": self.position,
            "from": self.grade_before.label,
            "to": self.grade_after.label,
            "ovr_change": self.rating_delta,
        }


@dataclass(frozen=True)
class GradeDelta:
    """Improvements and downgrades for one team"""

    improvements: Tuple[GradeChange, ...] = ()
    downgrades: Tuple[GradeChange, ...] = ()

    @property
    def improved_positions(self) -> List[str]:
        return [change.position for change in self.improvements]


@dataclass(frozen=True)
class PositionalGradeReport:
    """Before/after positional grades for one team"""

    team_id: int
    current: Dict[str, PositionGroup]
    after_trade: Dict[str, PositionGroup]
    delta: GradeDelta

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "team_id": self.team_id,
            "current": {pos: group.to_dict() for pos, group in self.current.items()},
            "afterTrade": {pos: group.to_dict() for pos, group in self.after_trade.items()},
            "improvements": [c.to_dict() for c in self.delta.improvements],
            "downgrades": [c.to_dict() for c in self.delta.downgrades],
        }


# ============================================================================
# SLIDING SCALE
# ============================================================================

@dataclass(frozen=True)
class Adjustment:
    """Value bonus for a player whose arrival improved a positional grade"""

    player_id: int
    player_name: str
    position: str
    grade_improvement: str
    adjustment_percentage: float  # 0.05 = 5%
    base_value: int
    adjusted_value: int

    def __post_init__(self):
        """Validate adjustment never reduces value"""
        if self.adjustment_percentage < 0:
            raise ValueError(
                f"adjustment_percentage must be non-negative, got {self.adjustment_percentage}"
            )
        if self.adjusted_value < self.base_value:
            raise ValueError(
                f"adjusted_value ({self.adjusted_value}) cannot be below base_value ({self.base_value})"
            )

    @property
    def value_increase(self) -> int:
        return self.adjusted_value - self.base_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "position": self.position,
            "grade_improvement": self.grade_improvement,
            "adjustment_percentage": round(self.adjustment_percentage * 100, 1),
            "base_value": self.base_value,
            "adjusted_value": self.adjusted_value,
            "value_increase": self.value_increase,
        }


@dataclass(frozen=True)
class SlidingScaleResult:
    """All sliding scale adjustments applied for one evaluation"""

    adjustments: Tuple[Adjustment, ...] = ()

    @property
    def total_adjustments(self) -> int:
        return len(self.adjustments)

    @property
    def total_value_increase(self) -> int:
        return sum(adj.value_increase for adj in self.adjustments)

    def for_player(self, player_id: int) -> Optional[Adjustment]:
        for adj in self.adjustments:
            if adj.player_id == player_id:
                return adj
        return None

    def merged_with(self, other: "SlidingScaleResult") -> "SlidingScaleResult":
        return SlidingScaleResult(adjustments=self.adjustments + other.adjustments)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_adjustments": self.total_adjustments,
            "total_value_increase": self.total_value_increase,
            "adjustments_applied": [adj.to_dict() for adj in self.adjustments],
        }


# ============================================================================
# ITEMIZATION
# ============================================================================

@dataclass(frozen=True)
class PlayerItemization:
    """Per-player ledger line reconciling base and enhanced value"""

    player_id: int
    name: str
    position: str
    ovr: Optional[int]
    base_value: int
    enhanced_value: int
    adjustment_reason: str
    calculation_method: str

    @property
    def adjustment(self) -> int:
        return self.enhanced_value - self.base_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "position": self.position,
            "ovr": self.ovr,
            "base_value": self.base_value,
            "enhanced_value": self.enhanced_value,
            "adjustment": self.adjustment,
            "adjustment_reason": self.adjustment_reason,
            "calculation_method": self.calculation_method,
        }


@dataclass(frozen=True)
class ItemizationBreakdown:
    """Both sides of a trade, itemized"""

    players_out: Tuple[PlayerItemization, ...]
    players_in: Tuple[PlayerItemization, ...]

    @property
    def total_base_value_out(self) -> int:
        return sum(p.base_value for p in self.players_out)

    @property
    def total_enhanced_value_out(self) -> int:
        return sum(p.enhanced_value for p in self.players_out)

    @property
    def total_base_value_in(self) -> int:
        return sum(p.base_value for p in self.players_in)

    @property
    def total_enhanced_value_in(self) -> int:
        return sum(p.enhanced_value for p in self.players_in)

    @property
    def net_value_change(self) -> int:
        return self.total_enhanced_value_in - self.total_enhanced_value_out

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "players_out": [p.to_dict() for p in self.players_out],
            "players_in": [p.to_dict() for p in self.players_in],
            "summary": {
                "total_base_value_out": self.total_base_value_out,
                "total_enhanced_value_out": self.total_enhanced_value_out,
                "total_base_value_in": self.total_base_value_in,
                "total_enhanced_value_in": self.total_enhanced_value_in,
                "net_value_change": self.net_value_change,
            },
        }


# ============================================================================
# RISK / VERDICT
# ============================================================================

class RiskLevel(Enum):
    """Trade risk level by absolute net value"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def severity(self) -> int:
        return {RiskLevel.LOW: 1, RiskLevel.MEDIUM: 2, RiskLevel.HIGH: 3}[self]


class BalanceLabel(Enum):
    """Trade balance label (same bands as RiskLevel)"""
    BALANCED = "Balanced"
    SLIGHTLY_UNBALANCED = "Slightly Unbalanced"
    UNBALANCED = "Unbalanced"


class RiskFlag(Enum):
    """Structured risk factors reported alongside the risk level"""
    VALUE_IMBALANCE = "VALUE_IMBALANCE"
    POSITIONAL_DOWNGRADE = "POSITIONAL_DOWNGRADE"
    ROSTER_SHRINK = "ROSTER_SHRINK"
    UNDEFINED_RATIO = "UNDEFINED_RATIO"


@dataclass(frozen=True)
class RiskAssessment:
    """Risk level, balance and value ratio of a trade"""

    risk_level: RiskLevel
    balance: BalanceLabel
    value_ratio: Optional[float]  # None when nothing of value is given
    flags: Tuple[RiskFlag, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "risk_level": self.risk_level.value,
            "balance": self.balance.value,
            "value_ratio": None if self.value_ratio is None else round(self.value_ratio, 3),
            "risks": [flag.value for flag in self.flags],
        }


class Verdict(Enum):
    """Trade verdict from the requesting (receiving) team's perspective"""
    FAIR = "Fair"
    YOU_WIN = "You Win"
    YOU_LOSE = "You Lose"
    YOU_WIN_BIG = "You Win Big"
    YOU_LOSE_BIG = "You Lose Big"

    @property
    def is_win(self) -> bool:
        return self in (Verdict.YOU_WIN, Verdict.YOU_WIN_BIG)

    @property
    def is_loss(self) -> bool:
        return self in (Verdict.YOU_LOSE, Verdict.YOU_LOSE_BIG)


# ============================================================================
# PROPOSAL AND RESULTS
# ============================================================================

@dataclass(frozen=True)
class TradeProposal:
    """
    Proposed player exchange between two teams.

    team_id gives the `give` players and receives the `receive` players
    from counterparty_team_id. Structural validation is done by the evaluator.
    """

    team_id: int
    counterparty_team_id: int
    give: Tuple[int, ...]
    receive: Tuple[int, ...]

    def __post_init__(self):
        """Freeze id lists"""
        object.__setattr__(self, 'give', tuple(self.give))
        object.__setattr__(self, 'receive', tuple(self.receive))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "team_id": self.team_id,
            "counterparty_team_id": self.counterparty_team_id,
            "give": list(self.give),
            "receive": list(self.receive),
        }


@dataclass(frozen=True)
class TradeAssessment:
    """Headline verdict of a trade"""

    verdict: Verdict
    team_gives: int
    team_receives: int
    net_gain: int
    confidence: int  # 0-100
    risk_level: RiskLevel
    value_ratio: Optional[float]

    def __post_init__(self):
        """Validate confidence"""
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be 0-100, got {self.confidence}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "verdict": self.verdict.value,
            "team_gives": self.team_gives,
            "team_receives": self.team_receives,
            "net_gain": self.net_gain,
            "confidence": self.confidence,
            "risk_level": self.risk_level.value,
            "value_ratio": None if self.value_ratio is None else round(self.value_ratio, 3),
        }


@dataclass(frozen=True)
class DepthChange:
    """Roster depth at one position before and after a trade"""
    position: str
    before: int
    after: int

    def to_dict(self) -> Dict[str, int]:
        return {"before": self.before, "after": self.after}


@dataclass(frozen=True)
class RosterComposition:
    """How a trade reshapes the requesting team's roster"""

    roster_size_before: int
    roster_size_after: int
    positions_affected: Tuple[str, ...]
    depth_changes: Tuple[DepthChange, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "before": self.roster_size_before,
            "after": self.roster_size_after,
            "positions_affected": list(self.positions_affected),
            "depth_changes": {dc.position: dc.to_dict() for dc in self.depth_changes},
        }


class RecommendationPriority(Enum):
    """Priority of a position recommendation"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class PositionRecommendation:
    """Weak position on the post-trade roster worth addressing"""

    position: str
    current_grade: LetterGrade
    target_grade: LetterGrade
    priority: RecommendationPriority
    reason: str  # machine-readable code, e.g. "LOW_GRADE", "THIN_DEPTH"
    depth: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "position": self.position,
            "current_grade": self.current_grade.label,
            "target_grade": self.target_grade.label,
            "priority": self.priority.value,
            "reason": self.reason,
            "depth": self.depth,
        }


@dataclass(frozen=True)
class TradeEvaluationResult:
    """Complete, auditable result of evaluating one trade proposal"""

    proposal: TradeProposal
    assessment: TradeAssessment
    risk: RiskAssessment
    team_grades: PositionalGradeReport
    counterparty_grades: PositionalGradeReport
    sliding_scale: SlidingScaleResult
    itemization: ItemizationBreakdown
    roster_composition: RosterComposition
    recommendations: Tuple[PositionRecommendation, ...]
    can_auto_approve: bool
    config_version: str
    value_breakdowns: Tuple[ValueBreakdown, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "proposal": self.proposal.to_dict(),
            "tradeAssessment": self.assessment.to_dict(),
            "riskAnalysis": self.risk.to_dict(),
            "positionalGrades": self.team_grades.to_dict(),
            "counterpartyPositionalGrades": self.counterparty_grades.to_dict(),
            "slidingScaleAdjustments": self.sliding_scale.to_dict(),
            "itemizationBreakdown": self.itemization.to_dict(),
            "rosterComposition": self.roster_composition.to_dict(),
            "playerRecommendations": [r.to_dict() for r in self.recommendations],
            "valueBreakdowns": [b.to_dict() for b in self.value_breakdowns],
            "canAutoApprove": self.can_auto_approve,
            "configVersion": self.config_version,
        }


@dataclass(frozen=True)
class SuggestedTrade:
    """A fair counter-offer found by suggestion search"""

    target_team_id: int
    players_offered: Tuple[Player, ...]
    verdict: Verdict
    net_gain: int
    confidence: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "targetTeam": self.target_team_id,
            "verdict": self.verdict.value,
            "tradeValue": self.net_gain,
            "playersOffered": [p.to_dict() for p in self.players_offered],
            "confidence": self.confidence,
        }


# ============================================================================
# ERRORS
# ============================================================================

class TradeEvaluationError(Exception):
    """
    Base class for structural trade evaluation failures.

    Carries the evaluation state that was reached when the failure occurred
    (a value of EvaluationState, as a string) so callers can report where the
    pipeline stopped.
    """

    def __init__(self, message: str, state: Optional[str] = None):
        super().__init__(message)
        self.state = state


class UnknownPlayerError(TradeEvaluationError):
    """Raised when a referenced player id is not on either supplied roster"""

    def __init__(self, player_ids: Sequence[int], state: Optional[str] = None):
        self.player_ids = tuple(player_ids)
        super().__init__(
            f"Unknown player id(s): {', '.join(str(pid) for pid in self.player_ids)}",
            state=state
        )


class MalformedTradeError(TradeEvaluationError):
    """Raised when a proposal is structurally invalid (overlapping, duplicate or misplaced ids)"""
    pass


class EmptyRosterError(TradeEvaluationError):
    """Raised when a roster snapshot contains no players"""

    def __init__(self, team_id: int, state: Optional[str] = None):
        self.team_id = team_id
        super().__init__(f"Roster for team {team_id} has no players", state=state)


class ConfigurationError(ValueError):
    """Raised when league configuration is missing, malformed or inconsistent"""
    pass
