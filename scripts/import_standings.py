#!/usr/bin/env python3
"""
Import EventLink Standings
Parses an EventLink standings report and adds its points to the league scoreboard
"""
import argparse
import sys
import os

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.parsers.eventlink_parser import EventLinkParser, EmptyInputError
from backend.db.league_client import LeagueClient
from backend.league import record_report
from backend.logging_config import setup_logging


def print_report(report: dict):
    """Print what was extracted from a report"""
    event_info = report.get('event_info', {})
    players = report.get('players', [])

    print(f"\nEvent: {event_info.get('event_name', 'Unknown')}")
    print(f"Event ID: {event_info.get('event_id', 'Unknown')}")
    print(f"Date: {event_info.get('event_date', 'Unknown')}")
    print(f"Format: {event_info.get('format', 'Unknown')}")
    if event_info.get('additional_info'):
        print(f"Information: {event_info['additional_info']}")
    print(f"Found {len(players)} players")

    for player in players:
        print(f"  {player['rank']:>3}. {player['name']:<25} "
              f"{player['points']:>3} pts  "
              f"OMW {player['omw_percentage']}%  GW {player['gw_percentage']}%  "
              f"OGW {player['ogw_percentage']}%")


def import_standings(source: str, dry_run: bool = False, month: str = None):
    """
    Import an EventLink standings report

    Args:
        source: Path or URL of the .txt export
        dry_run: If True, parse but don't insert into database
        month: YYYY-MM to record the scores under instead of the event month
    """
    print(f"Parsing EventLink report from: {source}")

    parser = EventLinkParser()
    try:
        if source.startswith('http://') or source.startswith('https://'):
            report = parser.parse_url(source)
        else:
            report = parser.parse_file(source)
    except EmptyInputError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error reading report: {e}")
        sys.exit(1)

    print_report(report)

    if not report['players']:
        print("\nNo player data found. Make sure the report is in the correct format.")
        sys.exit(1)

    if dry_run:
        print("\n--- DRY RUN MODE - Not inserting into database ---")
        return

    print("\nInserting scores into database...")
    try:
        client = LeagueClient()
        summary = record_report(client, report, month=month)
    except Exception as e:
        print(f"\n✗ Error importing scores: {e}")
        sys.exit(1)

    print(f"\n✓ Added {summary['players_inserted']}/{summary['players_processed']} player results "
          f"to {summary['month']} ({summary['format']})")
    for name in summary['errors']:
        print(f"  ✗ Could not store score for {name}")


def main():
    parser = argparse.ArgumentParser(
        description='Import an EventLink standings report into the league scoreboard'
    )
    parser.add_argument(
        'source',
        help='Path or URL to the EventLink .txt export'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Parse the report but do not insert into database'
    )
    parser.add_argument(
        '--month',
        type=str,
        help='Record scores under this month (YYYY-MM) instead of the event month'
    )

    args = parser.parse_args()

    setup_logging()
    import_standings(args.source, dry_run=args.dry_run, month=args.month)


if __name__ == '__main__':
    main()
