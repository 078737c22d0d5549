#!/usr/bin/env python3
"""
Check Setup - Verify the league configuration and the scores table
"""
import os
import sys

# Add parent directory to path to import backend modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.db.league_client import LeagueClient
from backend.logging_config import setup_logging


def check_setup() -> bool:
    """Report on .env, Supabase credentials and the scores table"""
    print("=" * 60)
    print("League Setup Check")
    print("=" * 60)

    print(f"\n.env file found: {os.path.exists('.env')}")

    try:
        client = LeagueClient()
    except ValueError as e:
        print(f"✗ {e}")
        print("   SUPABASE_URL=your_supabase_project_url")
        print("   SUPABASE_KEY=your_supabase_anon_key")
        return False

    print(f"✓ Supabase client configured, scores table: '{client.table_name}'")

    if not client.check_table():
        print(f"✗ Could not read table '{client.table_name}' (see the log for the database error)")
        print("   Expected columns: id, user_id, username, month, score, format, event_id, event_name")
        return False

    print(f"✓ Table '{client.table_name}' is readable, standings can be imported")
    return True


def main():
    setup_logging()
    if not check_setup():
        sys.exit(1)


if __name__ == '__main__':
    main()
