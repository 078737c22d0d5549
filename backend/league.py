"""
League bookkeeping: months, league years, recording parsed reports and CSV export
"""
import csv
import io
import logging
from datetime import datetime
from typing import List, Dict, Optional, Tuple


logger = logging.getLogger(__name__)

# EventLink prints US-style dates (6/10/2025)
EVENT_DATE_FORMATS = ['%m/%d/%Y', '%Y-%m-%d']

CSV_HEADER = ['Username', 'Month', 'Score', 'EventID', 'Format', 'EventCount']


def event_month(event_date: Optional[str]) -> Optional[str]:
    """Convert a report date ('6/10/2025') into its league month ('2025-06')"""
    if not event_date:
        return None

    for date_format in EVENT_DATE_FORMATS:
        try:
            return datetime.strptime(event_date.strip(), date_format).strftime('%Y-%m')
        except ValueError:
            continue

    logger.warning(f"Could not read event date: {event_date}")
    return None


def league_year_range(year: int) -> Tuple[str, str]:
    """
    Months covered by a league year

    The league year runs from June of the previous year to May of the given year.
    """
    return f"{year - 1}-06", f"{year}-05"


def record_report(client, report: Dict, month: Optional[str] = None) -> Dict:
    """
    Add every player of a parsed report to the scoreboard

    Args:
        client: LeagueClient (or anything with the same add_score signature)
        report: Dictionary from the EventLink parser
        month: YYYY-MM override; defaults to the month of the event date

    Returns:
        Summary with month, format and counts of processed/inserted players

    Raises:
        ValueError: if the report has no players or no usable month
    """
    event_info = report.get('event_info', {})
    players = report.get('players', [])

    if not players:
        raise ValueError("No player data found in the report")

    month = month or event_month(event_info.get('event_date'))
    if not month:
        raise ValueError(f"Could not determine the month from event date: {event_info.get('event_date')}")

    format_name = event_info.get('format') or 'Unknown'
    event_id = event_info.get('event_id')
    event_name = event_info.get('event_name')

    inserted = 0
    errors = []
    for player in players:
        logger.debug(f"Processing player: {player['name']}, points: {player['points']}, format: {format_name}")
        if client.add_score(player['name'], player['name'], month, player['points'],
                            format_name, event_id, event_name):
            inserted += 1
        else:
            errors.append(player['name'])

    logger.info(f"Processed {inserted}/{len(players)} players for event {event_id} ({month})")

    return {
        'month': month,
        'format': format_name,
        'event_id': event_id,
        'event_name': event_name,
        'players_processed': len(players),
        'players_inserted': inserted,
        'errors': errors
    }


def build_scores_csv(scores: List[Dict]) -> str:
    """
    Render score rows as CSV

    EventCount is the number of distinct events each username has scores for.
    """
    player_events = {}
    for score in scores:
        events = player_events.setdefault(score.get('username'), set())
        if score.get('event_id'):
            events.add(score['event_id'])

    output = io.StringIO()
    output.write(','.join(CSV_HEADER) + '\n')
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')

    for score in scores:
        writer.writerow([
            score.get('username') or '',
            score.get('month') or '',
            score.get('score') or 0,
            score.get('event_id') or '',
            score.get('format') or '',
            len(player_events.get(score.get('username'))) or 1,
        ])

    return output.getvalue()


def export_filename(format_name: str, year: int) -> str:
    """CSV file name for a format's league year, e.g. 'Duel_Commander_scores_2024-2025.csv'"""
    return f"{format_name.replace(' ', '_')}_scores_{year - 1}-{year}.csv"
