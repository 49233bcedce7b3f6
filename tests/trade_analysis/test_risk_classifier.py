"""
Tests for Risk Classifier
"""

import pytest

from trade_analysis.config import LeagueConfig, RiskSettings
from trade_analysis.models import BalanceLabel, RiskFlag, RiskLevel
from trade_analysis.risk_classifier import RiskClassifier


@pytest.fixture
def classifier():
    return RiskClassifier()


class TestRiskBands:
    """|net| bands: < 10 Low, < 25 Medium, otherwise High"""

    @pytest.mark.parametrize("given,received,level,balance", [
        (100, 100, RiskLevel.LOW, BalanceLabel.BALANCED),
        (100, 109, RiskLevel.LOW, BalanceLabel.BALANCED),
        (100, 91, RiskLevel.LOW, BalanceLabel.BALANCED),
        (100, 110, RiskLevel.MEDIUM, BalanceLabel.SLIGHTLY_UNBALANCED),
        (100, 76, RiskLevel.MEDIUM, BalanceLabel.SLIGHTLY_UNBALANCED),
        (100, 125, RiskLevel.HIGH, BalanceLabel.UNBALANCED),
        (100, 40, RiskLevel.HIGH, BalanceLabel.UNBALANCED),
    ])
    def test_bands(self, classifier, given, received, level, balance):
        assessment = classifier.classify(given, received)

        assert assessment.risk_level == level
        assert assessment.balance == balance

    def test_custom_thresholds(self):
        classifier = RiskClassifier(LeagueConfig(risk=RiskSettings(low_threshold=5, medium_threshold=8)))

        assert classifier.risk_level(6) == RiskLevel.MEDIUM
        assert classifier.risk_level(-8) == RiskLevel.HIGH


class TestValueRatio:
    """received / given, undefined when nothing is given"""

    def test_ratio(self, classifier):
        assert classifier.classify(80, 100).value_ratio == pytest.approx(1.25)

    def test_zero_given_does_not_raise(self, classifier):
        assessment = classifier.classify(0, 63)

        assert assessment.value_ratio is None
        assert RiskFlag.UNDEFINED_RATIO in assessment.flags
        assert assessment.to_dict()["value_ratio"] is None

    def test_both_sides_zero(self, classifier):
        assessment = classifier.classify(0, 0)

        assert assessment.value_ratio is None
        assert assessment.risk_level == RiskLevel.LOW


class TestRiskFlags:
    """Structured risk factors"""

    def test_balanced_trade_has_no_flags(self, classifier):
        assert classifier.classify(100, 102).flags == ()

    def test_all_flags(self, classifier):
        assessment = classifier.classify(0, 50, has_downgrades=True, roster_shrinks=True)

        assert assessment.flags == (
            RiskFlag.VALUE_IMBALANCE,
            RiskFlag.POSITIONAL_DOWNGRADE,
            RiskFlag.ROSTER_SHRINK,
            RiskFlag.UNDEFINED_RATIO,
        )
        assert assessment.to_dict()["risks"] == [
            "VALUE_IMBALANCE", "POSITIONAL_DOWNGRADE", "ROSTER_SHRINK", "UNDEFINED_RATIO"
        ]
