#!/usr/bin/env python3
"""
Trade Evaluator CLI

Evaluates a single trade proposal against a league roster file and prints the
verdict, itemized values, grade changes and (optionally) suggested returns.

League file format (JSON):
    {"players": [{"id": 101, "name": "...", "position": "QB", "ovr": 88,
                  "age": 27, "devTrait": "Star", "teamId": 1}, ...]}
or
    {"teams": {"1": [{"id": 101, ...}, ...], "2": [...]}}

Usage:
    # Team 1 gives player 101 and receives player 205
    PYTHONPATH=src python scripts/evaluate_trade.py --league-file demos/sample_league.json \
        --team-id 1 --give 101 --receive 205

    # Use a named league config and include suggestions
    PYTHONPATH=src python scripts/evaluate_trade.py --league-file demos/sample_league.json \
        --team-id 1 --give 101 --receive 205 --config dynasty_tiered --suggestions

    # Raw JSON output
    PYTHONPATH=src python scripts/evaluate_trade.py --league-file demos/sample_league.json \
        --team-id 1 --give 101 --receive 205 --json
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Dict, Optional


# Add project paths
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from logging_config import (
    get_logger,
    setup_development_logging,
    setup_logging,
    setup_production_logging,
    setup_testing_logging,
    setup_trade_analysis_logging,
)
from trade_analysis.config import LeagueConfigLoader
from trade_analysis.models import ConfigurationError, TradeEvaluationError
from trade_analysis.service import LeagueSnapshot, TradeToolService


logger = get_logger("evaluate_trade")

# --log-preset name → logging_config preset function
LOG_PRESETS = {
    "production": lambda log_dir: setup_production_logging(log_dir=log_dir),
    "development": lambda log_dir: setup_development_logging(log_dir=log_dir),
    "testing": lambda log_dir: setup_testing_logging(),
}


def configure_logging(preset: Optional[str], level: str, log_dir: str) -> None:
    """Apply a named logging preset, or console-only logging at the given level."""
    if preset:
        LOG_PRESETS[preset](log_dir)
    else:
        setup_logging(level=level, enable_file=False)
        setup_trade_analysis_logging(level=level)


def load_league(path: str) -> LeagueSnapshot:
    """
    Load a league snapshot from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or has malformed players
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in league file {path}: {e}")
    snapshot = LeagueSnapshot.from_dict(data)
    logger.info(f"Loaded league file {path}: {len(snapshot.team_ids)} teams")
    return snapshot


def print_report(response: Dict[str, Any]) -> None:
    """Print a human-readable evaluation report."""
    assessment = response["tradeAssessment"]
    risk = response["riskAnalysis"]
    itemization = response["itemizationBreakdown"]
    grades = response["positionalGrades"]

    print(f"Verdict:      {assessment['verdict']}")
    print(f"You give:     {assessment['team_gives']}")
    print(f"You receive:  {assessment['team_receives']}")
    print(f"Net gain:     {assessment['net_gain']:+d}")
    print(f"Confidence:   {assessment['confidence']}%")
    print(f"Risk:         {risk['risk_level']} ({risk['balance']})")
    if risk["risks"]:
        print(f"Risk flags:   {', '.join(risk['risks'])}")
    print(f"Auto-approve: {'yes' if response['canAutoApprove'] else 'no'}")
    print()

    for label, key in (("OUTGOING", "players_out"), ("INCOMING", "players_in")):
        print(f"{label}:")
        for item in itemization[key]:
            print(
                f"  {item['name']:<24} {item['position']:<5} "
                f"base {item['base_value']:>4}  enhanced {item['enhanced_value']:>4}  "
                f"({item['adjustment_reason']})"
            )
        if not itemization[key]:
            print("  (none)")
    print()

    if grades["improvements"] or grades["downgrades"]:
        print("GRADE CHANGES:")
        for change in grades["improvements"] + grades["downgrades"]:
            print(
                f"  {change['position']:<5} {change['from']} -> {change['to']} "
                f"(avg {change['ovr_change']:+.1f})"
            )
        print()

    if response["playerRecommendations"]:
        print("NEEDS AFTER TRADE:")
        for rec in response["playerRecommendations"]:
            print(
                f"  [{rec['priority']}] {rec['position']:<5} grade {rec['current_grade']} "
                f"depth {rec['depth']} ({rec['reason']})"
            )
        print()

    if "suggestedTrades" in response:
        print("SUGGESTED RETURNS:")
        for suggestion in response["suggestedTrades"]:
            names = ", ".join(p["name"] for p in suggestion["playersOffered"])
            print(
                f"  Team {suggestion['targetTeam']}: {names} "
                f"({suggestion['verdict']}, net {suggestion['tradeValue']:+d})"
            )
        if not response["suggestedTrades"]:
            print("  (none found)")
        print()


def main():
    """Main entry point for the trade evaluator."""
    parser = argparse.ArgumentParser(
        description="Evaluate a trade proposal against a league roster file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    PYTHONPATH=src python scripts/evaluate_trade.py --league-file demos/sample_league.json \\
        --team-id 1 --give 101 --receive 205

    PYTHONPATH=src python scripts/evaluate_trade.py --league-file demos/sample_league.json \\
        --team-id 1 --give 101 --receive 205 --config dynasty_tiered --suggestions
        """
    )
    parser.add_argument(
        '--league-file',
        required=True,
        help='JSON file with league rosters'
    )
    parser.add_argument(
        '--team-id',
        type=int,
        required=True,
        help='Requesting team ID'
    )
    parser.add_argument(
        '--give',
        type=int,
        nargs='*',
        default=[],
        help='Player IDs the requesting team gives up'
    )
    parser.add_argument(
        '--receive',
        type=int,
        nargs='*',
        default=[],
        help='Player IDs the requesting team receives'
    )
    parser.add_argument(
        '--counterparty-id',
        type=int,
        help='Counterparty team ID (default: inferred from --receive players)'
    )
    parser.add_argument(
        '--config',
        default='default_league',
        help='League config name in src/config/trade_analysis/ (default: default_league)'
    )
    parser.add_argument(
        '--suggestions',
        action='store_true',
        help='Include suggested fair returns from other teams'
    )
    parser.add_argument(
        '--strategy',
        choices=['balanced', 'value', 'youth'],
        help='Suggestion ranking strategy (default: from league config)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the raw JSON response instead of a report'
    )
    parser.add_argument(
        '--log-level',
        default='WARNING',
        help='Console log level when no preset is given (default: WARNING)'
    )
    parser.add_argument(
        '--log-preset',
        choices=sorted(LOG_PRESETS),
        help='Logging preset (production and development also write log files)'
    )
    parser.add_argument(
        '--log-dir',
        default='logs',
        help='Directory for log files written by a preset (default: logs)'
    )
    args = parser.parse_args()

    configure_logging(args.log_preset, args.log_level, args.log_dir)

    request = {
        "teamId": args.team_id,
        "trade": {"give": args.give, "receive": args.receive},
        "includeSuggestions": args.suggestions,
    }
    if args.counterparty_id is not None:
        request["counterpartyTeamId"] = args.counterparty_id
    if args.strategy:
        request["strategy"] = args.strategy

    try:
        config = LeagueConfigLoader().load(args.config)
        service = TradeToolService(load_league(args.league_file), config)
        response = service.handle_request(request)

    except (FileNotFoundError, ConfigurationError) as e:
        print(f"\n❌ CONFIG ERROR: {e}")
        return 1
    except TradeEvaluationError as e:
        print(f"\n❌ INVALID TRADE: {e}")
        return 1
    except ValueError as e:
        print(f"\n❌ ERROR: {e}")
        return 1

    if args.json:
        print(json.dumps(response, indent=2))
        return 0

    print("=" * 70)
    print(f"TRADE EVALUATION - TEAM {args.team_id} (config {response['configVersion']})")
    print("=" * 70)
    print()
    print_report(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
