#!/usr/bin/env python3
"""
Gaminute Server - HTTP backend for the studio portfolio.
Serves the games list and statistics, relays the contact form by email, and
hosts the single-page frontend with an index.html fallback.
"""

import logging
import argparse
import os
from datetime import datetime, timezone
from typing import Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.utils import safe_join

import gaminute
import database
from app.repositories import GameRepository, DBGameRepository
from app.services import (
    GameService, EmailService, ContactService, ContactValidationError,
    EmailNotConfiguredError, EmailDeliveryError,
)

load_dotenv()

log_level = os.getenv('GAMINUTE_LOG_LEVEL', 'INFO')
gaminute_logger = gaminute.setup_logging(log_level)
server_logger = logging.getLogger('gaminute.server')

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

app = Flask(__name__, static_folder=None)
CORS(app, resources={r"/*": {"origins": "*"}}, send_wildcard=True)

_game_service: Optional[GameService] = None
_contact_service: Optional[ContactService] = None


def build_game_repository(config: Dict):
    """Return the catalogue repository for the configured storage mode.

    Falls back to the in-memory catalogue when the database cannot be used.
    """
    if config.get('storage') == 'database':
        if database.engine is not None:
            try:
                catalog = GameRepository(config.get('catalog_path')).all()
                return DBGameRepository(database, catalog=catalog)
            except Exception as e:
                server_logger.exception('Database catalogue unavailable: %s', e)
        server_logger.warning('Falling back to the in-memory catalogue')
    return GameRepository(config.get('catalog_path'))


def initialize_services(config: Dict) -> None:
    """Create the repository and services and apply *config* to the app."""
    global _game_service, _contact_service
    _game_service = GameService(build_game_repository(config),
                                featured_title=config.get('featured_title'))
    _contact_service = ContactService(EmailService(config))

    static_dir = config.get('static_dir') or 'public'
    if not os.path.isabs(static_dir):
        static_dir = os.path.join(BASE_DIR, static_dir)
    app.config['STATIC_DIR'] = static_dir


initialize_services(gaminute.load_config())


# ===========================================================================================
# Request logging & error handlers
# ===========================================================================================

@app.before_request
def log_request():
    server_logger.info("%s %s", request.method, request.path)


@app.errorhandler(404)
def handle_not_found(e):
    return jsonify({'error': 'Endpoint not found'}), 404


@app.errorhandler(405)
def handle_method_not_allowed(e):
    # Reached only for methods no route accepts, such as TRACE.
    return jsonify({'error': 'Method not allowed'}), 405


@app.errorhandler(500)
def handle_server_error(e):
    server_logger.error(f"Unhandled error on {request.path}: {e}")
    return jsonify({'error': 'Internal server error'}), 500


# ===========================================================================================
# Games & Stats Endpoints
# ===========================================================================================

@app.route('/api/games')
def api_games():
    """List games with optional search/genre/status filters and sort order"""
    try:
        games = _game_service.list_games(
            search=request.args.get('search'),
            genre=request.args.get('genre'),
            status=request.args.get('status'),
            sort=request.args.get('sort'),
        )
        return jsonify(games)
    except Exception as e:
        server_logger.exception(f"Error loading games: {e}")
        return jsonify({'error': 'Failed to load games'}), 500


@app.route('/api/games/<int:game_id>')
def api_game_detail(game_id):
    """Get a single game by id"""
    try:
        game = _game_service.get(game_id)
    except Exception as e:
        server_logger.exception(f"Error loading game {game_id}: {e}")
        return jsonify({'error': 'Failed to load game'}), 500
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game)


@app.route('/api/stats')
def api_stats():
    """Get portfolio statistics"""
    try:
        return jsonify(_game_service.stats())
    except Exception as e:
        server_logger.exception(f"Error calculating stats: {e}")
        return jsonify({'error': 'Failed to load stats'}), 500


# ===========================================================================================
# Contact Endpoint
# ===========================================================================================

@app.route('/api/contact', methods=['POST'])
def api_contact():
    """Relay a contact-form submission to the studio mailbox"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({
            'success': False,
            'error': 'Email and message are required fields.'
        }), 400

    try:
        result = _contact_service.submit(data.get('email'), data.get('message'))
    except ContactValidationError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except EmailNotConfiguredError as e:
        server_logger.error(f"Contact form unavailable: {e}")
        return jsonify({
            'success': False,
            'error': 'Email service is not configured.'
        }), 503
    except EmailDeliveryError:
        return jsonify({
            'success': False,
            'error': 'Failed to send email via SMTP provider.'
        }), 500

    return jsonify(result), 200


# ===========================================================================================
# Health & API Documentation
# ===========================================================================================

@app.route('/api/health')
def api_health():
    """Health check"""
    return jsonify({
        'status': 'ok',
        'mode': _game_service.mode,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'games': _game_service.count(),
        'emailConfigured': _contact_service.email_configured,
    })


@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    try:
        from openapi_spec import build_spec
        server_url = request.url_root.rstrip('/')
        return jsonify(build_spec(server_url=server_url))
    except Exception as e:
        server_logger.error(f"Error building OpenAPI spec: {e}")
        return jsonify({'error': 'Could not generate spec'}), 500


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the Gaminute REST API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Gaminute API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


# ===========================================================================================
# Static files & SPA fallback
# ===========================================================================================

@app.route('/', defaults={'path': ''}, methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
@app.route('/<path:path>', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
def spa_fallback(path):
    """Serve static assets; any other non-API route gets index.html"""
    if path == 'api' or path.startswith('api/'):
        return jsonify({'error': 'Endpoint not found'}), 404

    static_dir = app.config.get('STATIC_DIR')
    if path and request.method == 'GET':
        candidate = safe_join(static_dir, path)
        if candidate and os.path.isfile(candidate):
            return send_from_directory(static_dir, path)

    if os.path.isfile(os.path.join(static_dir, 'index.html')):
        return send_from_directory(static_dir, 'index.html')
    return jsonify({'error': 'Not found'}), 404


def main():
    """Main entry point for the server"""
    parser = argparse.ArgumentParser(description='Gaminute portfolio server')
    parser.add_argument('--config', default='config.json', help='Path to config file')
    parser.add_argument('--host', help='Interface to bind (overrides config)')
    parser.add_argument('--port', type=int, help='Port to listen on (overrides config)')
    parser.add_argument('--storage', choices=('memory', 'database'),
                        help='Catalogue storage (overrides config)')
    args = parser.parse_args()

    config = gaminute.load_config(args.config)
    if args.storage:
        config['storage'] = args.storage
    host = args.host or config['host']
    port = args.port or config['port']

    gaminute.setup_logging(config.get('log_level', 'INFO'))
    try:
        os.makedirs('logs', exist_ok=True)
        fh = logging.FileHandler('logs/gaminute_server.log')
        fh.setFormatter(logging.Formatter('[%(asctime)s] %(levelname)s %(name)s: %(message)s'))
        server_logger.addHandler(fh)
    except OSError:
        server_logger.warning('Could not create log file handler')

    initialize_services(config)

    stats = _game_service.stats()
    server_logger.info(f"Server running on http://{host}:{port}")
    server_logger.info(f"Storage: {_game_service.mode}")
    server_logger.info(f"Total games: {stats['totalGames']}")
    server_logger.info(f"Live games: {stats['liveGames']}")
    server_logger.info(f"In Dev: {stats['inDev']}")
    server_logger.info(f"Concepts: {stats['concepts']}")
    if not _contact_service.email_configured:
        server_logger.warning("EMAIL_USER or EMAIL_PASS missing in .env file. Emails will fail.")

    try:
        app.run(host=host, port=port, debug=False)
    except KeyboardInterrupt:
        server_logger.info("Server stopped")


if __name__ == "__main__":
    main()
