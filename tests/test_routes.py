"""
Tests for the HTTP API
"""
import io
from unittest.mock import MagicMock

import pytest

from backend.api import routes
from backend.app import create_app
from backend.db.league_client import LeagueClient


EVENT_ROWS = [
    {'username': 'Alexey Paulot', 'score': 9, 'month': '2025-06', 'format': 'Limited',
     'event_id': '8993570', 'event_name': 'Draft Final Fantasy'},
    {'username': 'Gil Ferrari', 'score': 6, 'month': '2025-06', 'format': 'Limited',
     'event_id': '8993570', 'event_name': 'Draft Final Fantasy'},
]


@pytest.fixture(autouse=True)
def empty_cache():
    routes.clear_cache()
    yield
    routes.clear_cache()


@pytest.fixture
def db_client():
    client = MagicMock(spec=LeagueClient)
    client.add_score.return_value = True
    client.get_event_scores.return_value = EVENT_ROWS
    client.delete_event.return_value = True
    return client


@pytest.fixture
def http(db_client):
    return create_app(db_client=db_client).test_client()


class TestSubmitReport:

    def test_records_players(self, http, db_client, standard_report):
        response = http.post('/api/reports', json={'report': standard_report})

        assert response.status_code == 201
        body = response.get_json()
        assert body['player_count'] == 8
        assert body['event_info']['format'] == 'Limited'
        assert body['summary']['month'] == '2025-06'
        assert db_client.add_score.call_count == 8

    def test_single_line_report(self, http, db_client, single_line_report):
        response = http.post('/api/reports', json={'report': single_line_report})

        assert response.status_code == 201
        assert db_client.add_score.call_count == 8

    def test_form_field(self, http, standard_report):
        response = http.post('/api/reports', data={'report': standard_report})
        assert response.status_code == 201

    def test_empty_report(self, http, db_client):
        response = http.post('/api/reports', json={'report': ''})

        assert response.status_code == 400
        assert 'empty' in response.get_json()['error'].lower()
        db_client.add_score.assert_not_called()

    def test_report_must_be_text(self, http, db_client):
        response = http.post('/api/reports', json={'report': 12345})

        assert response.status_code == 400
        assert 'string' in response.get_json()['error']
        db_client.add_score.assert_not_called()

    def test_body_must_be_an_object(self, http, db_client):
        response = http.post('/api/reports', json=['x'])

        assert response.status_code == 400
        db_client.add_score.assert_not_called()

    def test_report_without_players(self, http, db_client, malformed_report):
        response = http.post('/api/reports', json={'report': malformed_report})

        assert response.status_code == 422
        db_client.add_score.assert_not_called()

    def test_report_without_date(self, http, missing_event_info_report):
        response = http.post('/api/reports', json={'report': missing_event_info_report})

        assert response.status_code == 422
        assert 'month' in response.get_json()['error']

    def test_writes_clear_the_cache(self, http, db_client, standard_report):
        http.get('/api/tournament/8993570')
        http.post('/api/reports', json={'report': standard_report})
        http.get('/api/tournament/8993570')

        assert db_client.get_event_scores.call_count == 2


class TestUploadReport:

    def test_txt_upload(self, http, db_client, standard_report):
        response = http.post(
            '/api/reports/upload',
            data={'file': (io.BytesIO(standard_report.encode('utf-8')), 'standings.txt')},
            content_type='multipart/form-data'
        )

        assert response.status_code == 201
        assert db_client.add_score.call_count == 8

    def test_rejects_other_file_types(self, http, db_client):
        response = http.post(
            '/api/reports/upload',
            data={'file': (io.BytesIO(b'a,b,c'), 'standings.csv')},
            content_type='multipart/form-data'
        )

        assert response.status_code == 400
        assert '.txt' in response.get_json()['error']
        db_client.add_score.assert_not_called()

    def test_missing_file(self, http):
        response = http.post('/api/reports/upload', data={}, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_empty_file(self, http):
        response = http.post(
            '/api/reports/upload',
            data={'file': (io.BytesIO(b''), 'standings.txt')},
            content_type='multipart/form-data'
        )
        assert response.status_code == 400


class TestPreviewReport:

    def test_returns_parsed_report_without_storing(self, http, db_client, standard_report):
        response = http.post('/api/reports/preview', json={'report': standard_report})

        assert response.status_code == 200
        body = response.get_json()
        assert body['event_info']['event_id'] == '8993570'
        assert body['players'][0]['matches_played'] == 3
        db_client.add_score.assert_not_called()

    def test_body_must_be_an_object(self, http):
        response = http.post('/api/reports/preview', json=['x'])
        assert response.status_code == 400

    def test_report_must_be_text(self, http):
        response = http.post('/api/reports/preview', json={'report': ['line one', 'line two']})
        assert response.status_code == 400


class TestReadEndpoints:

    def test_tournament_scores(self, http):
        response = http.get('/api/tournament/8993570')

        body = response.get_json()
        assert response.status_code == 200
        assert body['event_name'] == 'Draft Final Fantasy'
        assert body['scores'][0] == {'position': 1, 'username': 'Alexey Paulot', 'score': 9}

    def test_unknown_tournament(self, http, db_client):
        db_client.get_event_scores.return_value = []
        assert http.get('/api/tournament/1').status_code == 404

    def test_tournament_scores_are_cached(self, http, db_client):
        http.get('/api/tournament/8993570')
        http.get('/api/tournament/8993570')

        assert db_client.get_event_scores.call_count == 1

    def test_month_scores(self, http, db_client):
        db_client.get_scores.return_value = EVENT_ROWS

        response = http.get('/api/scores?month=2025-06')

        assert response.status_code == 200
        db_client.get_scores.assert_called_once_with('2025-06')

    def test_month_scores_bad_month(self, http):
        assert http.get('/api/scores?month=June').status_code == 400

    def test_format_leaders(self, http, db_client):
        db_client.get_format_leaders.return_value = [{'username': 'Alexey Paulot', 'score': 9, 'event_count': 1}]

        response = http.get('/api/formats/Limited/leaders?year=2025')

        body = response.get_json()
        assert response.status_code == 200
        assert body['season'] == '2024-2025'
        db_client.get_format_leaders.assert_called_once_with('Limited', '2024-06', '2025-05', 10)

    def test_format_leaders_invalid_year(self, http):
        assert http.get('/api/formats/Limited/leaders?year=next').status_code == 400

    def test_format_leaders_unknown_format(self, http):
        assert http.get('/api/formats/Pauper/leaders?year=2025').status_code == 400

    def test_export_csv(self, http, db_client):
        db_client.get_all_format_scores.return_value = EVENT_ROWS

        response = http.get('/api/formats/Limited/export?year=2026')

        assert response.status_code == 200
        assert response.mimetype == 'text/csv'
        assert 'Limited_scores_2025-2026.csv' in response.headers['Content-Disposition']
        assert response.get_data(as_text=True).splitlines()[1] == '"Alexey Paulot","2025-06",9,"8993570","Limited",1'

    def test_export_without_scores(self, http, db_client):
        db_client.get_all_format_scores.return_value = []
        assert http.get('/api/formats/Limited/export?year=2026').status_code == 404

    def test_find_events(self, http, db_client):
        db_client.find_events.return_value = [
            {'event_id': '8993570', 'month': '2025-06', 'format': 'Limited', 'event_name': 'Draft', 'player_count': 8},
            {'event_id': None, 'month': '2025-06', 'format': 'Limited', 'event_name': None, 'player_count': 1},
        ]

        response = http.get('/api/events?format=Limited&date=2025-06')

        assert response.status_code == 200
        assert [e['event_id'] for e in response.get_json()['events']] == ['8993570']
        db_client.find_events.assert_called_once_with(format='Limited', date='2025-06')

    def test_find_events_requires_a_filter(self, http):
        assert http.get('/api/events').status_code == 400

    def test_find_events_bad_date(self, http):
        assert http.get('/api/events?date=06/2025').status_code == 400


class TestDeleteEvent:

    def test_requires_confirmation(self, http, db_client):
        response = http.delete('/api/events/8993570')

        assert response.status_code == 400
        db_client.delete_event.assert_not_called()

    def test_deletes_event(self, http, db_client):
        response = http.delete('/api/events/8993570?confirm=true')

        assert response.status_code == 200
        assert response.get_json()['players'] == 2
        db_client.delete_event.assert_called_once_with('8993570')

    def test_unknown_event(self, http, db_client):
        db_client.get_event_scores.return_value = []

        assert http.delete('/api/events/1?confirm=true').status_code == 404
        db_client.delete_event.assert_not_called()


class TestCache:

    def test_stats_and_clear(self, http):
        http.get('/api/tournament/8993570')

        assert http.get('/api/cache/stats').get_json()['active_entries'] == 1
        assert http.get('/api/cache/clear').get_json()['cleared_entries'] == 1
        assert http.get('/api/cache/stats').get_json()['total_entries'] == 0


class TestWithoutDatabase:

    def test_reports_database_unavailable(self, monkeypatch, standard_report):
        monkeypatch.delenv('SUPABASE_URL', raising=False)
        monkeypatch.delenv('SUPABASE_KEY', raising=False)
        http = create_app().test_client()

        assert http.post('/api/reports', json={'report': standard_report}).status_code == 500
        assert http.get('/api/tournament/8993570').status_code == 500
