"""
EventLink Standings Parser
Parses "Standings by Rank" reports exported from EventLink
"""
import logging
import math
import re
import requests
from typing import List, Dict, Optional


logger = logging.getLogger(__name__)

# Reports with fewer non-blank lines than this lost their line breaks in transit
MIN_STRUCTURED_LINES = 5

SEPARATOR_LINE = '-' * 79
HEADER_LINE = 'Rank   Name                    Pod    Points'

# Applied in order: section markers first, row boundaries afterwards
SECTION_MARKERS = [
    (re.compile(r'EventLink\s+'), '\nEventLink '),
    (re.compile(r'Report:\s+'), '\nReport: '),
    (re.compile(r'Event:\s+'), '\nEvent: '),
    (re.compile(r'Event Date:\s+'), '\nEvent Date: '),
    (re.compile(r'Event Information:\s+'), '\nEvent Information: '),
    (re.compile(r'Opponents Match Win Percent'), '\nOpponents Match Win Percent'),
    (re.compile(r'Game Win Percent'), '\nGame Win Percent'),
    (re.compile(r'Opponents Game Win Percent'), '\nOpponents Game Win Percent'),
    (re.compile(r'Rank\s+Name\s+Pod\s+Points'), '\n' + HEADER_LINE),
    (re.compile(r'----+'), '\n' + SEPARATOR_LINE),
]

COLLAPSED_ROW_PATTERN = re.compile(
    r'([0-9]+)\s+([A-Za-z\s]+?)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)'
)
COLLAPSED_ROW_REPLACEMENT = r'\n\1      \2           \3      \4      \5     \6     \7'

# rank, name, pod, points, OMW%, GW%, OGW%
PLAYER_ROW_PATTERN = re.compile(
    r"([0-9]+)\s+([A-Za-zÀ-ÿ\s.']+?)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)\s+([0-9]+)"
)

EVENT_PATTERN = re.compile(r'Event:\s+(.*?)\s+\(([0-9]+)\)')
EVENT_DATE_PATTERN = re.compile(r'Event Date:(.*)')
EVENT_INFORMATION_PATTERN = re.compile(r'Event Information:(.*)')

# First match wins, so specialisations must come before their generic form
FORMAT_RULES = [
    (('draft', 'sealed'), 'Limited'),
    (('duel commander',), 'Duel Commander'),
    (('commander',), 'Commander'),
    (('standard',), 'Standard'),
    (('modern',), 'Modern'),
    (('pioneer',), 'Pioneer'),
    (('legacy',), 'Legacy'),
    (('vintage',), 'Vintage'),
]

KNOWN_FORMATS = [
    'Limited', 'Standard', 'Modern', 'Pioneer',
    'Commander', 'Duel Commander', 'Legacy', 'Vintage',
]


class EmptyInputError(ValueError):
    """Raised when a report has no text at all"""


def _non_blank_lines(text: str) -> List[str]:
    return [line for line in text.split('\n') if line.strip()]


def normalize_text(raw_text: Optional[str]) -> str:
    """
    Standardise line endings and rebuild line breaks lost in copy-paste

    Args:
        raw_text: Report text as pasted or uploaded

    Returns:
        Text with one report line per line wherever that could be recovered

    Raises:
        EmptyInputError: if raw_text is None or empty
    """
    if not raw_text:
        logger.error("Empty text provided to the EventLink parser")
        raise EmptyInputError("Empty text provided to parser")

    text = raw_text.replace('\r\n', '\n')

    if len(_non_blank_lines(text)) >= MIN_STRUCTURED_LINES:
        return text

    logger.info("Few line breaks detected, attempting to reconstruct line breaks")

    for pattern, replacement in SECTION_MARKERS:
        text = pattern.sub(replacement, text)

    # Player rows that were glued together, e.g. "... 44 2 Gil Ferrari 1 6 66 66 66"
    text = COLLAPSED_ROW_PATTERN.sub(COLLAPSED_ROW_REPLACEMENT, text)

    logger.info(f"After reconstruction, text has {len(_non_blank_lines(text))} non-empty lines")
    return text


def extract_event_info(normalized_text: str) -> Dict:
    """
    Extract event name, id, date and free-text information from header lines

    Fields that cannot be found are left out of the returned dictionary.
    """
    event_info = {}

    for line in _non_blank_lines(normalized_text):
        if 'Event:' in line:
            event_match = EVENT_PATTERN.search(line)
            if event_match:
                event_info['event_name'] = event_match.group(1).strip()
                event_info['event_id'] = event_match.group(2)
                logger.debug(f"Extracted event name: {event_info['event_name']}, event ID: {event_info['event_id']}")
            else:
                logger.warning(f"Event line found but couldn't extract name/ID: {line}")

        if 'Event Date:' in line:
            event_date = EVENT_DATE_PATTERN.search(line).group(1).strip()
            if event_date:
                event_info['event_date'] = event_date
                logger.debug(f"Extracted event date: {event_date}")
            else:
                logger.warning(f"Event Date line found but it has no date: {line}")

        if 'Event Information:' in line:
            additional_info = EVENT_INFORMATION_PATTERN.search(line).group(1).strip()
            if additional_info:
                event_info['additional_info'] = additional_info

    return event_info


def extract_players(normalized_text: str) -> List[Dict]:
    """
    Extract player rows from the whole report text

    Line boundaries are ignored since they are unreliable even after
    normalization. Rows are returned in order of appearance.
    """
    players = []

    for match in PLAYER_ROW_PATTERN.finditer(normalized_text):
        rank, name, pod, points, omw, gw, ogw = match.groups()
        name = name.strip()

        # Column header picked up as a row
        if name.lower() == 'name':
            continue

        points = int(points)
        players.append({
            'rank': int(rank),
            'name': name,
            'pod': int(pod),
            'points': points,
            'matches_played': math.ceil(points / 3),
            'omw_percentage': int(omw),
            'gw_percentage': int(gw),
            'ogw_percentage': int(ogw),
        })

    logger.info(f"Extracted {len(players)} players from the report")
    return players


def classify_format(event_name: str) -> str:
    """Derive the competitive format from an event name ('Draft Night' -> 'Limited')"""
    lowered = event_name.lower()

    for keywords, format_name in FORMAT_RULES:
        if any(keyword in lowered for keyword in keywords):
            return format_name

    # Unknown format: keep the first word of the name as written
    return event_name.split(' ')[0]


def parse_report(text: Optional[str]) -> Dict:
    """
    Parse an EventLink standings report

    Args:
        text: Raw report text

    Returns:
        Dictionary with 'event_info' (missing fields omitted) and 'players'

    Raises:
        EmptyInputError: if text is None or empty
    """
    normalized_text = normalize_text(text)

    event_info = extract_event_info(normalized_text)
    players = extract_players(normalized_text)

    if 'event_name' in event_info:
        event_info['format'] = classify_format(event_info['event_name'])
        event_info['original_event_name'] = event_info['event_name']
    else:
        logger.warning("No event name found, cannot detect format")

    if not players:
        logger.warning("No player data was extracted from the report")

    logger.info(
        f"Extraction summary: event={event_info.get('event_name', 'not found')}, "
        f"date={event_info.get('event_date', 'not found')}, players={len(players)}"
    )

    return {
        'event_info': event_info,
        'players': players
    }


class EventLinkParser:
    """Parser for EventLink standings reports from text, files or URLs"""

    def parse_text(self, text: str) -> Dict:
        """Parse a report that was pasted as text"""
        return parse_report(text)

    def parse_file(self, file_path: str) -> Dict:
        """
        Parse a report from a local text file

        Args:
            file_path: Path to the .txt export

        Returns:
            Dictionary with 'event_info' and 'players'
        """
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()

        return parse_report(text)

    def parse_url(self, url: str) -> Dict:
        """
        Parse a report from a URL, e.g. an uploaded attachment

        Args:
            url: URL to the .txt export

        Returns:
            Dictionary with 'event_info' and 'players'
        """
        response = requests.get(url)
        response.raise_for_status()

        return parse_report(response.content.decode('utf-8'))
