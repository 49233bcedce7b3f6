"""
Tests for Grade Delta Analyzer

Improvements iff the letter grade strictly rises, downgrades iff it strictly
falls, unchanged grades in neither list.
"""

import pytest

from trade_analysis.grade_delta_analyzer import GradeDeltaAnalyzer
from trade_analysis.models import LetterGrade
from trade_analysis.positional_grader import PositionalGrader


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def analyzer():
    return GradeDeltaAnalyzer()


@pytest.fixture
def grader():
    return PositionalGrader()


def _grades(grader, make_player, ratings):
    """position → list of overall ratings → graded groups"""
    roster = []
    next_id = 1
    for position, overalls in ratings.items():
        for overall in overalls:
            roster.append(make_player(next_id, position, overall=overall))
            next_id += 1
    return grader.grade_roster(roster)


# ============================================================================
# TESTS
# ============================================================================

class TestGradeDelta:
    """Improvement/downgrade classification"""

    def test_improvement_and_downgrade(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"QB": [72], "WR": [88]})
        after = _grades(grader, make_player, {"QB": [86], "WR": [80]})

        delta = analyzer.analyze(before, after)

        assert [c.position for c in delta.improvements] == ["QB"]
        assert delta.improvements[0].grade_before == LetterGrade.C
        assert delta.improvements[0].grade_after == LetterGrade.A
        assert delta.improvements[0].rank_change == 2
        assert [c.position for c in delta.downgrades] == ["WR"]
        assert delta.downgrades[0].description == "A -> B"

    def test_unchanged_grade_in_neither_list(self, analyzer, grader, make_player):
        """Average moves but the letter stays C"""
        before = _grades(grader, make_player, {"RB": [70]})
        after = _grades(grader, make_player, {"RB": [70, 76]})

        delta = analyzer.analyze(before, after)

        assert delta.improvements == ()
        assert delta.downgrades == ()

    def test_emptied_position_is_downgrade(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"RB": [76], "QB": [80]})
        after = _grades(grader, make_player, {"QB": [80]})

        delta = analyzer.analyze(before, after)

        assert len(delta.downgrades) == 1
        change = delta.downgrades[0]
        assert change.position == "RB"
        assert change.grade_after == LetterGrade.F
        assert change.rating_delta == -76.0

    def test_new_position_is_improvement(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"QB": [80]})
        after = _grades(grader, make_player, {"QB": [80], "K": [81]})

        delta = analyzer.analyze(before, after)

        assert [c.position for c in delta.improvements] == ["K"]
        assert delta.improvements[0].description == "F -> B"

    def test_new_position_still_failing_is_unchanged(self, analyzer, grader, make_player):
        """Missing counts as F, so adding an F-rated player changes nothing"""
        before = _grades(grader, make_player, {"QB": [80]})
        after = _grades(grader, make_player, {"QB": [80], "K": [55]})

        delta = analyzer.analyze(before, after)

        assert delta.improvements == ()
        assert delta.downgrades == ()

    def test_improvement_iff_rank_strictly_increases(self, analyzer, grader, make_player):
        """Exhaustive check over every before/after rating pair"""
        ratings = [55, 64, 72, 80, 90]
        for before_rating in ratings:
            for after_rating in ratings:
                before = _grades(grader, make_player, {"CB": [before_rating]})
                after = _grades(grader, make_player, {"CB": [after_rating]})

                delta = analyzer.analyze(before, after)

                rank_up = after["CB"].grade.rank > before["CB"].grade.rank
                rank_down = after["CB"].grade.rank < before["CB"].grade.rank
                assert bool(delta.improvements) == rank_up
                assert bool(delta.downgrades) == rank_down

    def test_lists_in_canonical_order(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"CB": [60], "QB": [60], "WR": [60]})
        after = _grades(grader, make_player, {"CB": [90], "QB": [90], "WR": [90]})

        delta = analyzer.analyze(before, after)

        assert delta.improved_positions == ["QB", "WR", "CB"]


class TestCompareAverages:
    """Numeric average deltas for every position"""

    def test_includes_unchanged_grades(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"RB": [70], "QB": [80]})
        after = _grades(grader, make_player, {"RB": [70, 76], "QB": [80]})

        deltas = analyzer.compare_averages(before, after)

        assert deltas == {"QB": 0.0, "RB": 3.0}

    def test_change_serializes(self, analyzer, grader, make_player):
        before = _grades(grader, make_player, {"WR": [72]})
        after = _grades(grader, make_player, {"WR": [72, 88]})

        data = analyzer.analyze(before, after).improvements[0].to_dict()

        assert data == {"position": "WR", "from": "C", "to": "B", "ovr_change": 8.0}
