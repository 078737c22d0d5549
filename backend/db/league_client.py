"""
League Database Client
Stores per-player, per-month, per-event scores and answers leaderboard queries
"""
from supabase import create_client, Client
from typing import List, Dict, Optional
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class LeagueClient:
    """Client for interacting with league score data in Supabase"""

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            supabase_url = os.getenv('SUPABASE_URL')
            supabase_key = os.getenv('SUPABASE_KEY')

            if not supabase_url or not supabase_key:
                raise ValueError(
                    "SUPABASE_URL and SUPABASE_KEY must be set in environment variables or .env file"
                )

            client = create_client(supabase_url, supabase_key)

        self.client: Client = client
        self.table_name = os.getenv('SCORES_TABLE', 'scores')

    def check_table(self) -> bool:
        """Return True if the scores table can be read"""
        try:
            self.client.table(self.table_name).select('id').limit(1).execute()
            return True
        except Exception as e:
            logger.error(f"Cannot read table '{self.table_name}': {e}")
            return False

    def _match_score_key(self, query, user_id: str, month: str, format: Optional[str], event_id: Optional[str]):
        """Filter a query down to one (user, month, format, event) score row"""
        query = query.eq('user_id', user_id).eq('month', month)
        query = query.eq('format', format) if format is not None else query.is_('format', 'null')
        query = query.eq('event_id', event_id) if event_id is not None else query.is_('event_id', 'null')
        return query

    def add_score(self, user_id: str, username: str, month: str, points: int,
                  format: Optional[str] = None, event_id: Optional[str] = None,
                  event_name: Optional[str] = None) -> bool:
        """
        Add points to a player's score for a month, format and event

        The row is created when it does not exist yet, otherwise its score is
        incremented.

        Args:
            user_id: Player identity (the player name for imported reports)
            username: Display name
            month: Month in YYYY-MM format
            points: Points to add
            format: Game format (Limited, Modern, ...)
            event_id: EventLink event ID
            event_name: EventLink event name

        Returns:
            True if the score was stored
        """
        try:
            existing = self._match_score_key(
                self.client.table(self.table_name).select('id, score'),
                user_id, month, format, event_id
            ).execute()

            if existing.data:
                row = existing.data[0]
                self.client.table(self.table_name).update({
                    'score': (row.get('score') or 0) + points,
                    'username': username,
                    'event_name': event_name
                }).eq('id', row['id']).execute()
            else:
                self.client.table(self.table_name).insert({
                    'user_id': user_id,
                    'username': username,
                    'month': month,
                    'score': points,
                    'format': format,
                    'event_id': event_id,
                    'event_name': event_name
                }).execute()
            return True
        except Exception as e:
            logger.error(f"Error adding score for {username} ({month}, {format}, {event_id}): {e}")
            return False

    def get_scores(self, month: str, limit: int = 20) -> List[Dict]:
        """Get the top scores for a month"""
        try:
            result = (
                self.client.table(self.table_name)
                .select('*')
                .eq('month', month)
                .order('score', desc=True)
                .limit(limit)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            logger.error(f"Error fetching scores for {month}: {e}")
            return []

    def get_event_scores(self, event_id: str) -> List[Dict]:
        """Get all scores recorded for an event, best first"""
        try:
            result = (
                self.client.table(self.table_name)
                .select('*')
                .eq('event_id', event_id)
                .order('score', desc=True)
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            logger.error(f"Error fetching scores for event {event_id}: {e}")
            return []

    def get_format_leaders(self, format: str, start_month: str, end_month: str, limit: int = 10) -> List[Dict]:
        """
        Get the top players for a format over a range of months

        Args:
            format: Game format
            start_month: First month (YYYY-MM), inclusive
            end_month: Last month (YYYY-MM), inclusive
            limit: Maximum number of players to return

        Returns:
            List of {'username', 'score', 'event_count'} sorted by score
        """
        rows = self.get_all_format_scores(format, start_month, end_month)

        player_scores = {}
        for row in rows:
            username = row.get('username')
            if username not in player_scores:
                player_scores[username] = {'username': username, 'score': 0, 'event_count': 0}
            player_scores[username]['score'] += row.get('score') or 0
            # Each row is one event for the player
            player_scores[username]['event_count'] += 1

        leaders = sorted(player_scores.values(), key=lambda p: p['score'], reverse=True)
        return leaders[:limit]

    def get_all_format_scores(self, format: str, start_month: str, end_month: str) -> List[Dict]:
        """Get every score row for a format over a range of months, ordered by month and username"""
        try:
            result = (
                self.client.table(self.table_name)
                .select('*')
                .eq('format', format)
                .gte('month', start_month)
                .lte('month', end_month)
                .order('month')
                .order('username')
                .execute()
            )
            return result.data if result.data else []
        except Exception as e:
            logger.error(f"Error fetching {format} scores from {start_month} to {end_month}: {e}")
            return []

    def find_events(self, format: Optional[str] = None, date: Optional[str] = None) -> List[Dict]:
        """
        Find events by format and/or date

        Args:
            format: Game format to filter by
            date: YYYY-MM-DD or YYYY-MM; only the month part is used

        Returns:
            List of {'event_id', 'month', 'format', 'event_name', 'player_count'},
            most recent month first
        """
        try:
            query = self.client.table(self.table_name).select('event_id, month, format, event_name')
            if format:
                query = query.eq('format', format)
            if date and len(date) in (7, 10):
                query = query.eq('month', date[:7])
            result = query.execute()
            rows = result.data if result.data else []
        except Exception as e:
            logger.error(f"Error finding events (format={format}, date={date}): {e}")
            return []

        events = {}
        for row in rows:
            event_id = row.get('event_id')
            if event_id not in events:
                events[event_id] = {
                    'event_id': event_id,
                    'month': row.get('month'),
                    'format': row.get('format'),
                    'event_name': row.get('event_name'),
                    'player_count': 0
                }
            events[event_id]['player_count'] += 1

        return sorted(events.values(), key=lambda e: e['month'] or '', reverse=True)

    def delete_event(self, event_id: str) -> bool:
        """
        Delete all scores for an event

        Returns:
            True if at least one score was deleted
        """
        try:
            result = self.client.table(self.table_name).delete().eq('event_id', event_id).execute()
        except Exception as e:
            logger.error(f"Error deleting event {event_id}: {e}")
            return False

        deleted = len(result.data) if result.data else 0
        if deleted:
            logger.info(f"Deleted {deleted} scores for event ID {event_id}")
            return True

        logger.warning(f"No scores found for event ID {event_id}")
        return False

    def get_all_scores(self, start_month: str, end_month: str, format: Optional[str] = None) -> List[Dict]:
        """Get all scores in a range of months, optionally for one format"""
        try:
            query = (
                self.client.table(self.table_name)
                .select('*')
                .gte('month', start_month)
                .lte('month', end_month)
            )
            if format:
                query = query.eq('format', format)
            result = query.execute()
            return result.data if result.data else []
        except Exception as e:
            logger.error(f"Error getting scores from {start_month} to {end_month}: {e}")
            return []
