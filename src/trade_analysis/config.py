"""
League Configuration for Trade Analysis

Versioned, league-tunable configuration for the valuation and grading engine:
position multipliers, development multipliers, letter grade cutoffs, sliding
scale bonus curve, verdict/risk/confidence thresholds, auto-approval policy,
depth policy and suggestion search limits.

Configurations live as JSON files under src/config/trade_analysis/ so leagues
can tune them without code changes. Missing sections fall back to the defaults
in trade_analysis.constants.

Usage:
    from trade_analysis.config import LeagueConfig, LeagueConfigLoader

    config = LeagueConfig.create_default()
    custom = LeagueConfigLoader().load("default_league")
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from trade_analysis import constants
from trade_analysis.models import (
    ConfigurationError,
    DevTrait,
    LetterGrade,
    RiskLevel,
    Verdict,
    normalize_position,
)


def _frozen_table(table: Mapping[Any, Any]) -> Mapping[Any, Any]:
    """Read-only view so a shared config cannot be edited in place."""
    return MappingProxyType(dict(table))


def _position_table(raw: Mapping[str, Any]) -> Dict[str, float]:
    table: Dict[str, float] = {}
    sources: Dict[str, str] = {}
    for key, mult in raw.items():
        position = normalize_position(key)
        if not position:
            raise ConfigurationError(f"Empty position key in position multipliers: {key!r}")
        if position in table:
            raise ConfigurationError(
                f"Position multiplier keys {sources[position]!r} and {key!r} both mean {position}"
            )
        table[position] = float(mult)
        sources[position] = key
    return table


def _dev_trait_table(raw: Mapping[str, Any]) -> Dict[str, float]:
    # Strict: DevTrait.parse would turn a typo into NORMAL
    names = {}
    for trait in DevTrait:
        names[trait.value.lower()] = trait
        names[trait.name.lower()] = trait

    table: Dict[str, float] = {}
    for key, mult in raw.items():
        trait = key if isinstance(key, DevTrait) else names.get(str(key).strip().lower())
        if trait is None:
            raise ConfigurationError(
                f"Unknown development trait {key!r} in dev multipliers, "
                f"expected one of {[t.value for t in DevTrait]}"
            )
        if trait.value in table:
            raise ConfigurationError(f"Development trait {trait.value} listed more than once")
        table[trait.value] = float(mult)
    return table


@dataclass(frozen=True)
class ValuationSettings:
    """Inputs for single-player valuation"""

    position_multipliers: Mapping[str, float] = field(
        default_factory=lambda: dict(constants.POSITION_MULTIPLIERS)
    )
    default_position_multiplier: float = constants.DEFAULT_POSITION_MULTIPLIER
    dev_multipliers: Mapping[str, float] = field(
        default_factory=lambda: dict(constants.DEV_TRAIT_MULTIPLIERS)
    )
    default_overall: int = constants.ValuationDefaults.DEFAULT_OVERALL
    age_pivot: int = constants.ValuationDefaults.AGE_PIVOT
    age_decay_per_year: float = constants.ValuationDefaults.AGE_DECAY_PER_YEAR
    age_factor_floor: float = constants.ValuationDefaults.AGE_FACTOR_FLOOR

    def __post_init__(self):
        """Normalize table keys and validate multipliers."""
        object.__setattr__(self, 'position_multipliers', _frozen_table(
            _position_table(self.position_multipliers)
        ))
        object.__setattr__(self, 'dev_multipliers', _frozen_table(
            _dev_trait_table(self.dev_multipliers)
        ))
        for pos, mult in self.position_multipliers.items():
            if mult < 0:
                raise ConfigurationError(f"Position multiplier for {pos} must be non-negative, got {mult}")
        for trait, mult in self.dev_multipliers.items():
            if mult < 0:
                raise ConfigurationError(f"Dev multiplier for {trait} must be non-negative, got {mult}")
        if self.default_position_multiplier < 0:
            raise ConfigurationError("default_position_multiplier must be non-negative")
        if not 0.0 <= self.age_factor_floor:
            raise ConfigurationError(f"age_factor_floor must be non-negative, got {self.age_factor_floor}")

    def position_multiplier(self, position: str) -> float:
        return self.position_multipliers.get(position, self.default_position_multiplier)

    def dev_multiplier(self, trait: DevTrait) -> float:
        return self.dev_multipliers.get(trait.value, 1.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "position_multipliers": dict(self.position_multipliers),
            "default_position_multiplier": self.default_position_multiplier,
            "dev_multipliers": dict(self.dev_multipliers),
            "default_overall": self.default_overall,
            "age_pivot": self.age_pivot,
            "age_decay_per_year": self.age_decay_per_year,
            "age_factor_floor": self.age_factor_floor,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValuationSettings":
        """Create from dictionary."""
        defaults = cls()
        return cls(
            position_multipliers=data.get("position_multipliers", defaults.position_multipliers),
            default_position_multiplier=data.get(
                "default_position_multiplier", defaults.default_position_multiplier
            ),
            dev_multipliers=data.get("dev_multipliers", defaults.dev_multipliers),
            default_overall=data.get("default_overall", defaults.default_overall),
            age_pivot=data.get("age_pivot", defaults.age_pivot),
            age_decay_per_year=data.get("age_decay_per_year", defaults.age_decay_per_year),
            age_factor_floor=data.get("age_factor_floor", defaults.age_factor_floor),
        )


@dataclass(frozen=True)
class GradeScale:
    """
    Average rating → letter grade cutoffs.

    Cutoffs give the minimum average for A, B, C and D; anything below the D
    cutoff is an F. Cutoffs must strictly decrease from A to D.
    """

    cutoffs: Mapping[str, float] = field(default_factory=lambda: dict(constants.GRADE_CUTOFFS))

    def __post_init__(self):
        """Validate cutoffs are complete and monotone."""
        try:
            normalized = {
                LetterGrade.parse(letter).label: float(value)
                for letter, value in self.cutoffs.items()
            }
        except ValueError as e:
            raise ConfigurationError(f"Invalid grade cutoffs: {e}")

        required = ['A', 'B', 'C', 'D']
        missing = [letter for letter in required if letter not in normalized]
        if missing:
            raise ConfigurationError(f"Grade cutoffs missing letters: {missing}")
        normalized.pop('F', None)

        for higher, lower in zip(required, required[1:]):
            if normalized[higher] <= normalized[lower]:
                raise ConfigurationError(
                    f"Grade cutoff for {higher} ({normalized[higher]}) must exceed "
                    f"cutoff for {lower} ({normalized[lower]})"
                )
        object.__setattr__(self, 'cutoffs', _frozen_table(
            {letter: normalized[letter] for letter in required}
        ))

    def grade_for(self, average_rating: float) -> LetterGrade:
        """Map an average rating to its letter grade."""
        for letter in ('A', 'B', 'C', 'D'):
            if average_rating >= self.cutoffs[letter]:
                return LetterGrade[letter]
        return LetterGrade.F

    def to_dict(self) -> Dict[str, float]:
        return dict(self.cutoffs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradeScale":
        return cls(cutoffs=dict(data))


@dataclass(frozen=True)
class SlidingScaleCurve:
    """
    Bonus percentage by number of letters a position grade improves.

    Must be non-negative and strictly increasing in the jump size. Jumps larger
    than the biggest configured one use the biggest configured bonus.

    Attributes:
        bonus_by_jump: letters gained → bonus fraction (0.05 = 5%)
        adjust_outgoing: Also re-price players the requesting team gives away
                         when they improve the counterparty's grades
    """

    bonus_by_jump: Mapping[int, float] = field(
        default_factory=lambda: dict(constants.SLIDING_SCALE_BONUS)
    )
    adjust_outgoing: bool = True

    def __post_init__(self):
        """Validate curve is monotone increasing."""
        try:
            curve = {int(jump): float(pct) for jump, pct in self.bonus_by_jump.items()}
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid sliding scale curve: {e}")
        if not curve:
            raise ConfigurationError("Sliding scale curve must have at least one entry")

        jumps = sorted(curve)
        if jumps[0] < 1:
            raise ConfigurationError(f"Sliding scale jumps must be >= 1, got {jumps[0]}")
        previous = None
        for jump in jumps:
            pct = curve[jump]
            if pct < 0:
                raise ConfigurationError(f"Sliding scale bonus for jump {jump} must be non-negative")
            if previous is not None and pct <= previous:
                raise ConfigurationError(
                    f"Sliding scale bonus must increase with jump size (jump {jump}: {pct} <= {previous})"
                )
            previous = pct
        object.__setattr__(self, 'bonus_by_jump', _frozen_table(
            {jump: curve[jump] for jump in jumps}
        ))

    def percentage_for(self, rank_jump: int) -> float:
        """Bonus fraction for a grade improvement of rank_jump letters (0 for no improvement)."""
        if rank_jump <= 0:
            return 0.0
        eligible = [jump for jump in self.bonus_by_jump if jump <= rank_jump]
        if not eligible:
            return 0.0
        return self.bonus_by_jump[max(eligible)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bonus_by_jump": {str(jump): pct for jump, pct in self.bonus_by_jump.items()},
            "adjust_outgoing": self.adjust_outgoing,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SlidingScaleCurve":
        defaults = cls()
        return cls(
            bonus_by_jump=data.get("bonus_by_jump", defaults.bonus_by_jump),
            adjust_outgoing=data.get("adjust_outgoing", defaults.adjust_outgoing),
        )


@dataclass(frozen=True)
class VerdictSettings:
    """Verdict thresholds (receiving side's perspective)"""

    fair_margin: int = constants.VerdictThresholds.FAIR_MARGIN
    big_margin: int = constants.VerdictThresholds.BIG_MARGIN
    tiered: bool = False

    def __post_init__(self):
        if self.fair_margin < 0:
            raise ConfigurationError(f"fair_margin must be non-negative, got {self.fair_margin}")
        if self.big_margin <= self.fair_margin:
            raise ConfigurationError(
                f"big_margin ({self.big_margin}) must exceed fair_margin ({self.fair_margin})"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"fair_margin": self.fair_margin, "big_margin": self.big_margin, "tiered": self.tiered}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VerdictSettings":
        defaults = cls()
        return cls(
            fair_margin=data.get("fair_margin", defaults.fair_margin),
            big_margin=data.get("big_margin", defaults.big_margin),
            tiered=data.get("tiered", defaults.tiered),
        )


@dataclass(frozen=True)
class RiskSettings:
    """Absolute net value bands for risk and balance"""

    low_threshold: int = constants.RiskThresholds.LOW
    medium_threshold: int = constants.RiskThresholds.MEDIUM

    def __post_init__(self):
        if not 0 <= self.low_threshold < self.medium_threshold:
            raise ConfigurationError(
                f"Risk thresholds must satisfy 0 <= low < medium, "
                f"got low={self.low_threshold}, medium={self.medium_threshold}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {"low_threshold": self.low_threshold, "medium_threshold": self.medium_threshold}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskSettings":
        defaults = cls()
        return cls(
            low_threshold=data.get("low_threshold", defaults.low_threshold),
            medium_threshold=data.get("medium_threshold", defaults.medium_threshold),
        )


@dataclass(frozen=True)
class ConfidenceSettings:
    """Confidence curve bounds"""

    floor: int = constants.ConfidenceCurve.FLOOR
    ceiling: int = constants.ConfidenceCurve.CEILING
    saturation_margin: int = constants.ConfidenceCurve.SATURATION_MARGIN

    def __post_init__(self):
        if not 0 <= self.floor <= self.ceiling <= 100:
            raise ConfigurationError(
                f"Confidence bounds must satisfy 0 <= floor <= ceiling <= 100, "
                f"got floor={self.floor}, ceiling={self.ceiling}"
            )
        if self.saturation_margin <= 0:
            raise ConfigurationError(f"saturation_margin must be positive, got {self.saturation_margin}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "floor": self.floor,
            "ceiling": self.ceiling,
            "saturation_margin": self.saturation_margin,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfidenceSettings":
        defaults = cls()
        return cls(
            floor=data.get("floor", defaults.floor),
            ceiling=data.get("ceiling", defaults.ceiling),
            saturation_margin=data.get("saturation_margin", defaults.saturation_margin),
        )


def _parse_verdicts(values: Any) -> Tuple[Verdict, ...]:
    try:
        return tuple(Verdict(v) if not isinstance(v, Verdict) else v for v in values)
    except ValueError as e:
        raise ConfigurationError(f"Invalid verdict in configuration: {e}")


@dataclass(frozen=True)
class AutoApprovalSettings:
    """Policy gate for approving trades without review"""

    allowed_verdicts: Tuple[Verdict, ...] = field(
        default_factory=lambda: _parse_verdicts(constants.AutoApprovalPolicy.ALLOWED_VERDICTS)
    )
    min_confidence: int = constants.AutoApprovalPolicy.MIN_CONFIDENCE
    max_risk_level: RiskLevel = RiskLevel(constants.AutoApprovalPolicy.MAX_RISK_LEVEL)

    def __post_init__(self):
        object.__setattr__(self, 'allowed_verdicts', _parse_verdicts(self.allowed_verdicts))
        if not isinstance(self.max_risk_level, RiskLevel):
            try:
                object.__setattr__(self, 'max_risk_level', RiskLevel(self.max_risk_level))
            except ValueError as e:
                raise ConfigurationError(f"Invalid max_risk_level: {e}")
        if not 0 <= self.min_confidence <= 100:
            raise ConfigurationError(f"min_confidence must be 0-100, got {self.min_confidence}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed_verdicts": [v.value for v in self.allowed_verdicts],
            "min_confidence": self.min_confidence,
            "max_risk_level": self.max_risk_level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AutoApprovalSettings":
        defaults = cls()
        return cls(
            allowed_verdicts=data.get("allowed_verdicts", defaults.allowed_verdicts),
            min_confidence=data.get("min_confidence", defaults.min_confidence),
            max_risk_level=data.get("max_risk_level", defaults.max_risk_level),
        )


@dataclass(frozen=True)
class DepthSettings:
    """
    Depth policy for weak/strong position classification.

    Attributes:
        mode: 'all' counts every player at the position; 'top_n' only the best top_n
        top_n: Players considered in 'top_n' mode
        min_depth: Positions with fewer counted players are flagged thin
        weak_grade: Positions graded at or below this are flagged weak
    """

    VALID_MODES = ('all', 'top_n')

    mode: str = constants.DepthPolicy.MODE
    top_n: int = constants.DepthPolicy.TOP_N
    min_depth: int = constants.DepthPolicy.MIN_DEPTH
    weak_grade: LetterGrade = LetterGrade[constants.DepthPolicy.WEAK_GRADE]

    def __post_init__(self):
        if self.mode not in self.VALID_MODES:
            raise ConfigurationError(f"depth mode must be one of {self.VALID_MODES}, got {self.mode!r}")
        if self.top_n < 1:
            raise ConfigurationError(f"top_n must be >= 1, got {self.top_n}")
        if self.min_depth < 0:
            raise ConfigurationError(f"min_depth must be non-negative, got {self.min_depth}")
        try:
            object.__setattr__(self, 'weak_grade', LetterGrade.parse(self.weak_grade))
        except ValueError as e:
            raise ConfigurationError(str(e))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "top_n": self.top_n,
            "min_depth": self.min_depth,
            "weak_grade": self.weak_grade.label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DepthSettings":
        defaults = cls()
        return cls(
            mode=data.get("mode", defaults.mode),
            top_n=data.get("top_n", defaults.top_n),
            min_depth=data.get("min_depth", defaults.min_depth),
            weak_grade=data.get("weak_grade", defaults.weak_grade),
        )


@dataclass(frozen=True)
class SuggestionSettings:
    """Trade suggestion search limits"""

    VALID_STRATEGIES = ('balanced', 'value', 'youth')

    max_suggestions: int = constants.SuggestionDefaults.MAX_SUGGESTIONS
    acceptable_verdicts: Tuple[Verdict, ...] = field(
        default_factory=lambda: _parse_verdicts(constants.SuggestionDefaults.ACCEPTABLE_VERDICTS)
    )
    strategy: str = constants.SuggestionDefaults.STRATEGY

    def __post_init__(self):
        object.__setattr__(self, 'acceptable_verdicts', _parse_verdicts(self.acceptable_verdicts))
        if self.max_suggestions < 0:
            raise ConfigurationError(f"max_suggestions must be non-negative, got {self.max_suggestions}")
        if self.strategy not in self.VALID_STRATEGIES:
            raise ConfigurationError(
                f"strategy must be one of {self.VALID_STRATEGIES}, got {self.strategy!r}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_suggestions": self.max_suggestions,
            "acceptable_verdicts": [v.value for v in self.acceptable_verdicts],
            "strategy": self.strategy,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SuggestionSettings":
        defaults = cls()
        return cls(
            max_suggestions=data.get("max_suggestions", defaults.max_suggestions),
            acceptable_verdicts=data.get("acceptable_verdicts", defaults.acceptable_verdicts),
            strategy=data.get("strategy", defaults.strategy),
        )


@dataclass(frozen=True)
class LeagueConfig:
    """
    Complete, versioned configuration for one league.

    Every section is immutable once constructed, so a single config instance
    can be shared by concurrent evaluations.
    """

    version: str = "1.0"
    name: str = "default"
    valuation: ValuationSettings = field(default_factory=ValuationSettings)
    grades: GradeScale = field(default_factory=GradeScale)
    sliding_scale: SlidingScaleCurve = field(default_factory=SlidingScaleCurve)
    verdict: VerdictSettings = field(default_factory=VerdictSettings)
    risk: RiskSettings = field(default_factory=RiskSettings)
    confidence: ConfidenceSettings = field(default_factory=ConfidenceSettings)
    auto_approval: AutoApprovalSettings = field(default_factory=AutoApprovalSettings)
    depth: DepthSettings = field(default_factory=DepthSettings)
    suggestions: SuggestionSettings = field(default_factory=SuggestionSettings)

    @classmethod
    def create_default(cls) -> "LeagueConfig":
        """Factory for the reference league configuration."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "version": self.version,
            "name": self.name,
            "valuation": self.valuation.to_dict(),
            "grade_cutoffs": self.grades.to_dict(),
            "sliding_scale": self.sliding_scale.to_dict(),
            "verdict": self.verdict.to_dict(),
            "risk": self.risk.to_dict(),
            "confidence": self.confidence.to_dict(),
            "auto_approval": self.auto_approval.to_dict(),
            "depth": self.depth.to_dict(),
            "suggestions": self.suggestions.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeagueConfig":
        """
        Create from dictionary. Missing sections use defaults.

        Raises:
            ConfigurationError: If any section is invalid
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"League config must be a JSON object, got {type(data).__name__}")
        try:
            return cls(
                version=str(data.get("version", "1.0")),
                name=str(data.get("name", "default")),
                valuation=ValuationSettings.from_dict(data.get("valuation", {})),
                grades=GradeScale.from_dict(data.get("grade_cutoffs", constants.GRADE_CUTOFFS)),
                sliding_scale=SlidingScaleCurve.from_dict(data.get("sliding_scale", {})),
                verdict=VerdictSettings.from_dict(data.get("verdict", {})),
                risk=RiskSettings.from_dict(data.get("risk", {})),
                confidence=ConfidenceSettings.from_dict(data.get("confidence", {})),
                auto_approval=AutoApprovalSettings.from_dict(data.get("auto_approval", {})),
                depth=DepthSettings.from_dict(data.get("depth", {})),
                suggestions=SuggestionSettings.from_dict(data.get("suggestions", {})),
            )
        except (TypeError, AttributeError) as e:
            raise ConfigurationError(f"Malformed league config: {e}")


class LeagueConfigLoader:
    """
    Loads league configurations from JSON files with caching.

    Each league config is a single JSON file named <config_name>.json in the
    config directory (defaults to src/config/trade_analysis/).
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize loader with config directory path.

        Args:
            config_dir: Directory containing league config files
        """
        if config_dir is None:
            current_file = Path(__file__)
            src_dir = current_file.parent.parent
            config_dir = src_dir / "config" / "trade_analysis"

        self.config_dir = Path(config_dir)
        self._cache: Dict[str, LeagueConfig] = {}

    def available_configs(self) -> List[str]:
        """Names of all league configs in the config directory."""
        if not self.config_dir.exists():
            return []
        return sorted(path.stem for path in self.config_dir.glob("*.json"))

    def load(self, config_name: str = "default_league", force_reload: bool = False) -> LeagueConfig:
        """
        Load a league configuration by name.

        Args:
            config_name: File name without .json extension
            force_reload: If True, reload from file even if cached

        Returns:
            LeagueConfig instance

        Raises:
            FileNotFoundError: If the config file does not exist
            ConfigurationError: If the file is not valid JSON or has invalid values
        """
        if config_name in self._cache and not force_reload:
            return self._cache[config_name]

        config = self.load_file(self.config_dir / f"{config_name}.json")
        self._cache[config_name] = config
        return config

    @staticmethod
    def load_file(path: Path) -> LeagueConfig:
        """Load a league configuration from an explicit file path."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"League config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path.name}: {e}")

        return LeagueConfig.from_dict(data)
