"""
Risk Classifier

Maps a trade's net value and value ratio into a risk level, a balance label
and a set of structured risk flags.
"""

from typing import List, Optional

from trade_analysis.config import LeagueConfig
from trade_analysis.models import BalanceLabel, RiskAssessment, RiskFlag, RiskLevel


class RiskClassifier:
    """
    Classifies trade risk by absolute net value.

    Bands (reference league):
    - |net| < 10  → Low / Balanced
    - |net| < 25  → Medium / Slightly Unbalanced
    - otherwise   → High / Unbalanced
    """

    def __init__(self, config: Optional[LeagueConfig] = None):
        self.config = config or LeagueConfig.create_default()

    @staticmethod
    def value_ratio(given: float, received: float) -> Optional[float]:
        """
        Received / given.

        Returns None (undefined) when nothing of value is given instead of
        raising or producing infinity.
        """
        if given == 0:
            return None
        return received / given

    def risk_level(self, net_gain: float) -> RiskLevel:
        magnitude = abs(net_gain)
        if magnitude < self.config.risk.low_threshold:
            return RiskLevel.LOW
        elif magnitude < self.config.risk.medium_threshold:
            return RiskLevel.MEDIUM
        else:
            return RiskLevel.HIGH

    def balance_label(self, net_gain: float) -> BalanceLabel:
        return {
            RiskLevel.LOW: BalanceLabel.BALANCED,
            RiskLevel.MEDIUM: BalanceLabel.SLIGHTLY_UNBALANCED,
            RiskLevel.HIGH: BalanceLabel.UNBALANCED,
        }[self.risk_level(net_gain)]

    def classify(
        self,
        given: int,
        received: int,
        has_downgrades: bool = False,
        roster_shrinks: bool = False
    ) -> RiskAssessment:
        """
        Classify a trade.

        Args:
            given: Total value the requesting team gives up
            received: Total value the requesting team receives
            has_downgrades: Requesting team loses a positional grade
            roster_shrinks: Requesting team ends with fewer players

        Returns:
            RiskAssessment (never raises for a zero given value)
        """
        net_gain = received - given
        ratio = self.value_ratio(given, received)
        level = self.risk_level(net_gain)

        flags: List[RiskFlag] = []
        if level == RiskLevel.HIGH:
            flags.append(RiskFlag.VALUE_IMBALANCE)
        if has_downgrades:
            flags.append(RiskFlag.POSITIONAL_DOWNGRADE)
        if roster_shrinks:
            flags.append(RiskFlag.ROSTER_SHRINK)
        if ratio is None:
            flags.append(RiskFlag.UNDEFINED_RATIO)

        return RiskAssessment(
            risk_level=level,
            balance=self.balance_label(net_gain),
            value_ratio=ratio,
            flags=tuple(flags),
        )
