"""
API Routes for the EventLink league scoreboard
"""
from flask import Response, jsonify, request
from time import time
from functools import wraps
import hashlib
import logging
import os
import re

from backend.league import build_scores_csv, export_filename, league_year_range, record_report
from backend.parsers.eventlink_parser import EmptyInputError, KNOWN_FORMATS, parse_report

logger = logging.getLogger(__name__)

# Simple in-memory cache for read endpoints
# Cache structure: {cache_key: {'data': ..., 'expires_at': timestamp}}
_cache = {}
CACHE_TTL = 300  # Cache for 5 minutes (300 seconds)
# Set ENABLE_CACHE=false to disable caching (enabled by default)
ENABLE_CACHE = os.environ.get('ENABLE_CACHE', 'true').lower() == 'true'

DATE_FILTER_PATTERN = re.compile(r'^\d{4}-\d{2}(-\d{2})?$')
MONTH_PATTERN = re.compile(r'^\d{4}-\d{2}$')
LEADERS_LIMIT = 10


def clear_cache() -> int:
    """Drop every cached response, returning how many entries were removed"""
    cache_size = len(_cache)
    _cache.clear()
    return cache_size


def register_routes(app, db_client):
    """Register all API routes with the Flask app"""

    def generate_cache_key(path, **kwargs):
        """Generate a cache key from path and parameters"""
        key_parts = [path]

        query_params = dict(request.args)
        if query_params:
            key_parts.append(str(tuple(sorted(query_params.items()))))

        if kwargs:
            key_parts.append(str(tuple(sorted(kwargs.items()))))

        key_string = '|'.join(key_parts)
        return hashlib.md5(key_string.encode()).hexdigest()

    def get_cached_data(cache_key):
        """Get data from cache if it exists and hasn't expired"""
        if cache_key in _cache:
            cached = _cache[cache_key]
            if time() < cached['expires_at']:
                return cached['data']
            del _cache[cache_key]
        return None

    def set_cached_data(cache_key, data, ttl=CACHE_TTL):
        """Store data in cache with expiration time"""
        _cache[cache_key] = {
            'data': data,
            'expires_at': time() + ttl
        }

    def to_response(result):
        if isinstance(result, tuple) and len(result) == 2:
            return jsonify(result[0]), result[1]
        return jsonify(result)

    def cached_endpoint(ttl=CACHE_TTL):
        """Decorator to cache successful API endpoint responses"""
        def decorator(f):
            @wraps(f)
            def decorated_function(*args, **kwargs):
                if not ENABLE_CACHE:
                    return to_response(f(*args, **kwargs))

                cache_key = generate_cache_key(request.path, **kwargs)

                cached_result = get_cached_data(cache_key)
                if cached_result is not None:
                    return to_response(cached_result)

                result = f(*args, **kwargs)
                # Errors are returned as (data, status) and are not cached
                if not isinstance(result, tuple):
                    set_cached_data(cache_key, result, ttl=ttl)
                return to_response(result)
            return decorated_function
        return decorator

    def submitted_report_text():
        """Report text from a JSON object body or the 'report' form field"""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            payload = {}
        return payload.get('report') or request.form.get('report')

    def store_report(report):
        """Record a parsed report and describe the outcome"""
        if not report['players']:
            logger.warning("No players found in the report")
            return {'error': "Couldn't find any player data in the report. Make sure it's in the correct format."}, 422

        try:
            summary = record_report(db_client, report)
        except ValueError as e:
            return {'error': str(e)}, 422

        clear_cache()
        return {
            'event_info': report['event_info'],
            'player_count': len(report['players']),
            'summary': summary
        }, 201

    @app.route('/api/reports', methods=['POST'])
    def submit_report():
        """Parse a pasted EventLink report and add its points to the scoreboard"""
        if not db_client:
            return jsonify({'error': 'Database not available'}), 500

        text = submitted_report_text()
        if text is not None and not isinstance(text, str):
            return jsonify({'error': "'report' must be the report text as a string"}), 400
        logger.info(f"Report submitted, text length: {len(text) if text else 0}")

        try:
            report = parse_report(text)
        except EmptyInputError as e:
            return jsonify({'error': str(e)}), 400

        return to_response(store_report(report))

    @app.route('/api/reports/upload', methods=['POST'])
    def upload_report():
        """Parse an uploaded EventLink .txt export and add its points to the scoreboard"""
        if not db_client:
            return jsonify({'error': 'Database not available'}), 500

        file = request.files.get('file')
        if file is None or not file.filename:
            return jsonify({'error': 'No file uploaded'}), 400

        logger.info(f"File uploaded: {file.filename}")
        if not file.filename.endswith('.txt'):
            logger.warning(f"Invalid file type uploaded: {file.filename}")
            return jsonify({'error': 'Please upload a .txt file with the EventLink standings report.'}), 400

        try:
            text = file.read().decode('utf-8')
        except UnicodeDecodeError:
            return jsonify({'error': 'The uploaded file is not valid UTF-8 text.'}), 400

        try:
            report = parse_report(text)
        except EmptyInputError as e:
            return jsonify({'error': str(e)}), 400

        return to_response(store_report(report))

    @app.route('/api/reports/preview', methods=['POST'])
    def preview_report():
        """Parse a report without storing anything"""
        text = submitted_report_text()
        if text is not None and not isinstance(text, str):
            return jsonify({'error': "'report' must be the report text as a string"}), 400

        try:
            report = parse_report(text)
        except EmptyInputError as e:
            return jsonify({'error': str(e)}), 400

        return jsonify(report)

    @app.route('/api/scores')
    @cached_endpoint()
    def get_month_scores():
        """Get the scoreboard for a month (cached)"""
        if not db_client:
            return {'error': 'Database not available'}, 500

        month = request.args.get('month', '')
        if not MONTH_PATTERN.match(month):
            return {'error': 'Please use YYYY-MM format for the month.'}, 400

        return {'month': month, 'scores': db_client.get_scores(month)}

    @app.route('/api/tournament/<event_id>')
    @cached_endpoint()
    def get_tournament_scores(event_id):
        """Get all scores for an EventLink event (cached)"""
        if not db_client:
            return {'error': 'Database not available'}, 500

        rows = db_client.get_event_scores(event_id)
        if not rows:
            return {'error': f'No scores found for tournament ID {event_id}.'}, 404

        return {
            'event_id': event_id,
            'event_name': rows[0].get('event_name') or 'Unknown Tournament',
            'month': rows[0].get('month') or 'Unknown Date',
            'format': rows[0].get('format') or 'Unknown Format',
            'scores': [
                {'position': i, 'username': row.get('username'), 'score': row.get('score')}
                for i, row in enumerate(rows, 1)
            ]
        }

    @app.route('/api/formats/<format_name>/leaders')
    @cached_endpoint()
    def get_format_leaders(format_name):
        """Get the top players of a format over a league year (cached)"""
        if not db_client:
            return {'error': 'Database not available'}, 500
        if format_name not in KNOWN_FORMATS:
            return {'error': f'Unknown format: {format_name}'}, 400

        year = request.args.get('year', type=int)
        if not year:
            return {'error': 'Please provide a valid year in YYYY format.'}, 400

        start_month, end_month = league_year_range(year)
        leaders = db_client.get_format_leaders(format_name, start_month, end_month, LEADERS_LIMIT)

        return {
            'format': format_name,
            'season': f'{year - 1}-{year}',
            'start_month': start_month,
            'end_month': end_month,
            'leaders': leaders
        }

    @app.route('/api/formats/<format_name>/export')
    def export_format_scores(format_name):
        """Download every score of a format over a league year as CSV"""
        if not db_client:
            return jsonify({'error': 'Database not available'}), 500
        if format_name not in KNOWN_FORMATS:
            return jsonify({'error': f'Unknown format: {format_name}'}), 400

        year = request.args.get('year', type=int)
        if not year:
            return jsonify({'error': 'Please provide a valid year in YYYY format.'}), 400

        start_month, end_month = league_year_range(year)
        scores = db_client.get_all_format_scores(format_name, start_month, end_month)
        if not scores:
            return jsonify({'error': f'No scores found for {format_name} from June {year - 1} to May {year}.'}), 404

        return Response(
            build_scores_csv(scores),
            mimetype='text/csv',
            headers={'Content-Disposition': f'attachment; filename={export_filename(format_name, year)}'}
        )

    @app.route('/api/events')
    @cached_endpoint()
    def find_events():
        """Find events by format and/or date (cached)"""
        if not db_client:
            return {'error': 'Database not available'}, 500

        format_name = request.args.get('format')
        date = request.args.get('date')

        if not format_name and not date:
            return {'error': 'Please provide at least a format or date to search for events.'}, 400
        if date and not DATE_FILTER_PATTERN.match(date):
            return {'error': 'Please use YYYY-MM-DD or YYYY-MM format for the date.'}, 400

        events = [e for e in db_client.find_events(format=format_name, date=date) if e.get('event_id')]
        return {'events': events}

    @app.route('/api/events/<event_id>', methods=['DELETE'])
    def delete_event(event_id):
        """Delete an event and all its scores; requires confirm=true"""
        if not db_client:
            return jsonify({'error': 'Database not available'}), 500

        if request.args.get('confirm', 'false').lower() != 'true':
            return jsonify({
                'error': 'Deletion cancelled. Set confirm=true if you want to delete this event.'
            }), 400

        rows = db_client.get_event_scores(event_id)
        if not rows:
            return jsonify({'error': f'No event found with ID {event_id}.'}), 404

        if not db_client.delete_event(event_id):
            return jsonify({'error': f'No event found with ID {event_id} or no scores were deleted.'}), 404

        clear_cache()
        logger.info(f"Deleted event {event_id} ({rows[0].get('event_name')}) with {len(rows)} players")
        return jsonify({
            'event_id': event_id,
            'event_name': rows[0].get('event_name') or 'Unknown Tournament',
            'month': rows[0].get('month') or 'Unknown Date',
            'format': rows[0].get('format') or 'Unknown Format',
            'players': len(rows)
        })

    @app.route('/api/cache/clear')
    def clear_cache_endpoint():
        """Clear the cache (useful for testing or after data updates)"""
        return jsonify({
            'message': 'Cache cleared',
            'cleared_entries': clear_cache()
        })

    @app.route('/api/cache/stats')
    def cache_stats():
        """Get cache statistics"""
        now = time()
        active_entries = sum(1 for value in _cache.values() if now < value['expires_at'])

        return jsonify({
            'total_entries': len(_cache),
            'active_entries': active_entries,
            'expired_entries': len(_cache) - active_entries,
            'cache_ttl_seconds': CACHE_TTL
        })
