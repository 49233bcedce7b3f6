"""
Trade Analysis Constants

Reference values for the default league configuration. Leagues override any of
these through JSON config files (see trade_analysis.config); nothing in the
engine reads these classes directly except LeagueConfig.create_default().

Usage:
    from trade_analysis.constants import VerdictThresholds

    if abs(net_gain) <= VerdictThresholds.FAIR_MARGIN:
        # Fair trade
"""


class ValuationDefaults:
    """Player valuation inputs used when attributes are missing."""

    DEFAULT_OVERALL = 75
    """Overall rating assumed for players with no rating"""

    AGE_PIVOT = 22
    """Age at which the age factor is exactly 1.0"""

    AGE_DECAY_PER_YEAR = 0.02
    """Age factor lost per year above AGE_PIVOT (gained per year below it)"""

    AGE_FACTOR_FLOOR = 0.7
    """
    Minimum age factor.

    There is no ceiling: players younger than AGE_PIVOT get a factor above 1.0.
    """


POSITION_MULTIPLIERS = {
    # Offense - skill positions
    'QB': 1.2,
    'HB': 1.0,
    'RB': 1.0,
    'WR': 1.1,
    'TE': 0.9,

    # Offensive line
    'LT': 0.8,
    'LG': 0.7,
    'C': 0.7,
    'RG': 0.7,
    'RT': 0.8,

    # Defensive line
    'LE': 0.9,
    'RE': 0.9,
    'DT': 0.8,

    # Linebackers
    'LOLB': 0.9,
    'MLB': 1.0,
    'ROLB': 0.9,

    # Secondary
    'CB': 1.0,
    'FS': 0.9,
    'SS': 0.9,

    # Special teams
    'K': 0.5,
    'P': 0.4,
}

DEFAULT_POSITION_MULTIPLIER = 1.0

DEV_TRAIT_MULTIPLIERS = {
    'Normal': 1.0,
    'Star': 1.2,
    'Superstar': 1.3,
    'Hidden': 1.1,
}

# Minimum average rating for each letter grade (F is everything below D)
GRADE_CUTOFFS = {
    'A': 85.0,
    'B': 78.0,
    'C': 70.0,
    'D': 62.0,
}

# Sliding scale bonus by number of letters gained (2 = C -> A)
SLIDING_SCALE_BONUS = {
    1: 0.05,
    2: 0.12,
    3: 0.20,
    4: 0.30,
}


class VerdictThresholds:
    """Net value thresholds for trade verdicts."""

    FAIR_MARGIN = 15
    """|net gain| at or below this is a Fair trade (inclusive)"""

    BIG_MARGIN = 30
    """|net gain| above this is a Big win/loss in tiered mode"""


class RiskThresholds:
    """Absolute net value bands for risk level and balance label."""

    LOW = 10
    """|net gain| below this → Low risk / Balanced"""

    MEDIUM = 25
    """|net gain| below this → Medium risk / Slightly Unbalanced; otherwise High"""


class ConfidenceCurve:
    """
    Confidence (0-100) as a function of how decisively thresholds are cleared.

    confidence = FLOOR + (CEILING - FLOOR) * min(1, margin / SATURATION_MARGIN)
    where margin is the distance between |net gain| and the fair threshold.
    """

    FLOOR = 50
    CEILING = 95
    SATURATION_MARGIN = 30


class AutoApprovalPolicy:
    """Default gate for approving trades without commissioner review."""

    ALLOWED_VERDICTS = ('Fair',)
    MIN_CONFIDENCE = 60
    MAX_RISK_LEVEL = 'Low'


class DepthPolicy:
    """How depth is counted when classifying weak positions."""

    MODE = 'all'
    """'all' counts every player; 'top_n' considers only the best TOP_N players"""

    TOP_N = 2

    MIN_DEPTH = 1
    """Positions with fewer players than this are flagged as thin"""

    WEAK_GRADE = 'D'
    """Positions graded at or below this are flagged as weak"""


class SuggestionDefaults:
    """Trade suggestion search limits."""

    MAX_SUGGESTIONS = 5
    ACCEPTABLE_VERDICTS = ('Fair',)
    STRATEGY = 'balanced'
