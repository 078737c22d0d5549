#!/usr/bin/env python3
"""
Flask Web Application for the EventLink league scoreboard
Accepts standings reports and serves leaderboards
"""
import logging
import os
import sys
from flask import Flask

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.api.routes import register_routes
from backend.db.league_client import LeagueClient
from backend.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(db_client=None) -> Flask:
    """Create the Flask app; without a db_client one is built from the environment"""
    app = Flask(__name__)
    app.json.sort_keys = False

    if db_client is None:
        try:
            db_client = LeagueClient()
        except Exception as e:
            logger.warning(f"Could not initialize database client: {e}")
            db_client = None

    register_routes(app, db_client)
    return app


app = create_app()

if __name__ == '__main__':
    setup_logging()

    port = int(os.environ.get('PORT', 5001))
    debug = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'
    host = os.environ.get('HOST', '127.0.0.1')

    print(f"\n{'='*60}")
    print(f"EventLink League Scoreboard")
    print(f"{'='*60}")
    print(f"Server starting on http://{host}:{port}")
    print(f"{'='*60}\n")

    app.run(debug=debug, host=host, port=port)
