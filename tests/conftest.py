"""
Pytest configuration for test discovery and imports.

Provides fixtures for testing including:
- Player factory
- Two-team league with hand-computed player values
- Default league configuration
"""

import sys
from pathlib import Path
import pytest


# Determine paths
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
tests_path = project_root / "tests"


def pytest_configure(config):
    """Configure pytest - runs very early in startup.

    src/ must come first so trade_analysis and logging_config import
    without installation.
    """
    new_path = [p for p in dict.fromkeys(sys.path) if p != str(tests_path)]
    for path in [str(src_path), str(project_root)]:
        if path in new_path:
            new_path.remove(path)

    new_path.insert(0, str(src_path))
    new_path.insert(1, str(project_root))

    sys.path[:] = new_path


# ============================================================================
# PLAYER FIXTURES
# ============================================================================

@pytest.fixture
def make_player():
    """
    Factory for Player snapshots.

    Defaults to a 22-year-old Normal player, whose age factor and dev
    multiplier are both exactly 1.0.
    """
    from trade_analysis.models import Player

    def _make(player_id, position, team_id=1, overall=75, age=22, dev_trait="Normal", name=None):
        return Player(
            player_id=player_id,
            position=position,
            team_id=team_id,
            overall=overall,
            age=age,
            dev_trait=dev_trait,
            name=name or f"Player {player_id}",
        )

    return _make


@pytest.fixture
def team_one_roster(make_player):
    """
    Requesting team (ID 1).

    Values (default config):
        11 QB 86 → 103   12 WR 72 → 79   13 RB 76 → 76
        14 CB 74 → 74    15 TE 70 → 63

    Grades: QB A, WR C, RB C, CB C, TE C
    """
    return [
        make_player(11, "QB", team_id=1, overall=86),
        make_player(12, "WR", team_id=1, overall=72),
        make_player(13, "RB", team_id=1, overall=76),
        make_player(14, "CB", team_id=1, overall=74),
        make_player(15, "TE", team_id=1, overall=70),
    ]


@pytest.fixture
def team_two_roster(make_player):
    """
    Counterparty team (ID 2).

    Values (default config):
        21 QB 78 → 94    22 WR 88 → 97   23 RB 70 → 70
        24 CB 80 → 80    25 TE 70 → 63

    Grades: QB B, WR A, RB C, CB B, TE C
    """
    return [
        make_player(21, "QB", team_id=2, overall=78),
        make_player(22, "WR", team_id=2, overall=88),
        make_player(23, "RB", team_id=2, overall=70),
        make_player(24, "CB", team_id=2, overall=80),
        make_player(25, "TE", team_id=2, overall=70),
    ]


@pytest.fixture
def team_three_roster(make_player):
    """
    Third team (ID 3).

    Values (default config):
        31 TE 70 age 21 → 64   32 K 60 age 30 → 25
    """
    return [
        make_player(31, "TE", team_id=3, overall=70, age=21),
        make_player(32, "K", team_id=3, overall=60, age=30),
    ]


@pytest.fixture
def league_rosters(team_one_roster, team_two_roster, team_three_roster):
    """team_id → roster for the three-team test league"""
    return {1: team_one_roster, 2: team_two_roster, 3: team_three_roster}


# ============================================================================
# CONFIG FIXTURES
# ============================================================================

@pytest.fixture
def default_config():
    """Reference league configuration"""
    from trade_analysis.config import LeagueConfig
    return LeagueConfig.create_default()
