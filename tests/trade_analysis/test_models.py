"""
Tests for Trade Analysis Models

Player normalization, lenient attribute parsing, model validation and errors.
"""

import pytest

from trade_analysis.models import (
    Adjustment,
    DevTrait,
    EmptyRosterError,
    LetterGrade,
    MalformedTradeError,
    Player,
    RiskLevel,
    TradeAssessment,
    TradeEvaluationError,
    TradeProposal,
    UnknownPlayerError,
    Verdict,
    normalize_position,
)


class TestPositionNormalization:
    """Raw position strings → abbreviations"""

    @pytest.mark.parametrize("raw,expected", [
        ("QB", "QB"),
        ("qb", "QB"),
        ("Quarterback", "QB"),
        ("left tackle", "LT"),
        ("wide-receiver", "WR"),
        ("mike_linebacker", "MLB"),
        ("  cb ", "CB"),
        ("long_snapper", "LONG_SNAPPER"),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_position(raw) == expected


class TestPlayer:
    """Player snapshot construction"""

    def test_optional_attributes_degrade(self):
        player = Player(player_id=1, position="wr", team_id=3, overall="81", age="abc", dev_trait="bogus")

        assert player.position == "WR"
        assert player.overall == 81
        assert player.age is None
        assert player.dev_trait == DevTrait.NORMAL

    @pytest.mark.parametrize("value", ["inf", float("inf"), "-inf", 1e400, "nan", float("nan")])
    def test_non_finite_attributes_degrade(self, value):
        player = Player(player_id=1, position="QB", team_id=1, overall=value, age=value)

        assert player.overall is None
        assert player.age is None

    def test_non_finite_attributes_in_league_data(self):
        player = Player.from_dict({"id": 4, "position": "QB", "teamId": 1, "ovr": float("inf"), "age": "inf"})

        assert player.overall is None
        assert player.age is None

    def test_dev_trait_case_insensitive(self):
        assert DevTrait.parse("superstar") == DevTrait.SUPERSTAR
        assert DevTrait.parse("STAR") == DevTrait.STAR
        assert DevTrait.parse(None) == DevTrait.NORMAL

    def test_from_api_dict(self):
        player = Player.from_dict({
            "id": 7, "name": "Elijah Ford", "position": "WR", "ovr": 82,
            "age": 24, "devTrait": "Star", "teamId": 2,
        })

        assert player.player_id == 7
        assert player.team_id == 2
        assert player.overall == 82
        assert player.dev_trait == DevTrait.STAR

    def test_from_dict_round_trip(self):
        player = Player(player_id=5, position="TE", team_id=1, overall=70, age=28, name="Jonah Reyes")

        assert Player.from_dict(player.to_dict()) == player

    def test_from_dict_requires_ids(self):
        with pytest.raises(ValueError):
            Player.from_dict({"position": "QB", "team_id": 1})
        with pytest.raises(ValueError):
            Player.from_dict({"id": 1, "position": "QB"})

    def test_display_name_fallback(self):
        assert Player(player_id=9, position="K", team_id=1).display_name == "Player #9"

    def test_str(self):
        player = Player(player_id=1, position="QB", team_id=1, overall=88, age=27, name="Marcus Hale")

        assert str(player) == "Marcus Hale (QB, 88 OVR, Age 27)"


class TestLetterGrade:
    """Ordered letter grades"""

    def test_rank_order(self):
        ranks = [LetterGrade.A.rank, LetterGrade.B.rank, LetterGrade.C.rank,
                 LetterGrade.D.rank, LetterGrade.F.rank]

        assert ranks == sorted(ranks, reverse=True)

    def test_step_up_capped_at_a(self):
        assert LetterGrade.F.step_up() == LetterGrade.D
        assert LetterGrade.A.step_up() == LetterGrade.A

    def test_parse(self):
        assert LetterGrade.parse("b") == LetterGrade.B
        with pytest.raises(ValueError):
            LetterGrade.parse("E")


class TestModelValidation:
    """__post_init__ checks"""

    def test_adjustment_cannot_reduce_value(self):
        with pytest.raises(ValueError):
            Adjustment(
                player_id=1, player_name="X", position="WR", grade_improvement="C -> B",
                adjustment_percentage=0.05, base_value=100, adjusted_value=99,
            )

    def test_adjustment_percentage_non_negative(self):
        with pytest.raises(ValueError):
            Adjustment(
                player_id=1, player_name="X", position="WR", grade_improvement="C -> B",
                adjustment_percentage=-0.05, base_value=100, adjusted_value=100,
            )

    def test_confidence_range(self):
        with pytest.raises(ValueError):
            TradeAssessment(
                verdict=Verdict.FAIR, team_gives=10, team_receives=10, net_gain=0,
                confidence=101, risk_level=RiskLevel.LOW, value_ratio=1.0,
            )

    def test_proposal_freezes_lists(self):
        proposal = TradeProposal(team_id=1, counterparty_team_id=2, give=[1, 2], receive=[3])

        assert proposal.give == (1, 2)
        assert proposal.to_dict()["give"] == [1, 2]

    def test_verdict_direction(self):
        assert Verdict.YOU_WIN_BIG.is_win
        assert Verdict.YOU_LOSE.is_loss
        assert not Verdict.FAIR.is_win and not Verdict.FAIR.is_loss


class TestErrors:
    """Error hierarchy"""

    def test_structural_errors_share_base(self):
        for error in (UnknownPlayerError([1]), MalformedTradeError("x"), EmptyRosterError(4)):
            assert isinstance(error, TradeEvaluationError)

    def test_unknown_player_message(self):
        error = UnknownPlayerError([101, 205], state="received")

        assert str(error) == "Unknown player id(s): 101, 205"
        assert error.state == "received"
