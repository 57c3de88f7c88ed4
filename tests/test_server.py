#!/usr/bin/env python3
"""
Tests for the Flask routes in gaminute_server.py:
* /api/games, /api/games/<id>, /api/stats
* /api/contact
* /api/health, /api/openapi.json, /api/docs
* static files and the index.html fallback

Run with:
    python -m pytest tests/test_server.py
"""
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import MagicMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import gaminute_server
from app.repositories import GameRepository
from app.services import (
    GameService, ContactService, EmailNotConfiguredError, EmailDeliveryError,
)
from openapi_spec import build_spec


class ServerTestCase(unittest.TestCase):
    """Swaps in fresh services and a Flask test client for each test."""

    def setUp(self):
        gaminute_server.app.config['TESTING'] = True
        self.client = gaminute_server.app.test_client()
        self.email = MagicMock()
        self.email.is_configured.return_value = True
        game_service = GameService(GameRepository(), featured_title='Loading Rush')
        contact_service = ContactService(self.email)
        patchers = [
            patch.object(gaminute_server, '_game_service', game_service),
            patch.object(gaminute_server, '_contact_service', contact_service),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

    def get_json(self, url):
        resp = self.client.get(url)
        return resp, json.loads(resp.data)

    def post_contact(self, payload):
        resp = self.client.post('/api/contact', json=payload)
        return resp, json.loads(resp.data)


# ===========================================================================
# Games & stats
# ===========================================================================

class TestGamesRoutes(ServerTestCase):

    def test_default_order(self):
        resp, data = self.get_json('/api/games')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([g['id'] for g in data], [1, 2, 4, 5, 3])

    def test_genre_filter_returns_only_that_genre(self):
        _, data = self.get_json('/api/games?genre=puzzle')
        self.assertEqual(len(data), 2)
        self.assertTrue(all(g['genre'] == 'puzzle' for g in data))

    def test_genre_all(self):
        _, data = self.get_json('/api/games?genre=all')
        self.assertEqual(len(data), 5)

    def test_search(self):
        _, data = self.get_json('/api/games?search=Lava')
        self.assertEqual([g['title'] for g in data], ['TicTacToe Lava'])

    def test_status_filter(self):
        _, data = self.get_json('/api/games?status=Concept')
        self.assertEqual([g['id'] for g in data], [3])

    def test_sort_alpha(self):
        _, data = self.get_json('/api/games?sort=alpha')
        self.assertEqual(data[0]['title'], 'Galaxiko Joystick')

    def test_sort_oldest(self):
        _, data = self.get_json('/api/games?sort=oldest')
        self.assertEqual([g['id'] for g in data], [1, 2, 3, 4, 5])

    def test_no_match_returns_empty_list(self):
        resp, data = self.get_json('/api/games?search=zzzz')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data, [])

    def test_game_fields(self):
        _, data = self.get_json('/api/games')
        for key in ('id', 'title', 'description', 'genre', 'tech', 'version',
                    'status', 'priority', 'url', 'thumb', 'created_at'):
            self.assertIn(key, data[0])

    def test_service_failure_returns_500(self):
        broken = MagicMock()
        broken.list_games.side_effect = RuntimeError('db down')
        with patch.object(gaminute_server, '_game_service', broken):
            resp = self.client.get('/api/games')
        self.assertEqual(resp.status_code, 500)
        self.assertIn('error', json.loads(resp.data))


class TestGameDetailRoute(ServerTestCase):

    def test_existing_game(self):
        resp, data = self.get_json('/api/games/3')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data['title'], 'Neon Coil')

    def test_missing_game_404(self):
        resp, data = self.get_json('/api/games/999')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(data, {'error': 'Game not found'})

    def test_non_numeric_id_404(self):
        resp, data = self.get_json('/api/games/abc')
        self.assertEqual(resp.status_code, 404)
        self.assertIn('error', data)


class TestStatsRoute(ServerTestCase):

    def test_stats(self):
        resp, data = self.get_json('/api/stats')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data, {'totalGames': 5, 'liveGames': 1, 'inDev': 3, 'concepts': 1})


# ===========================================================================
# Contact
# ===========================================================================

class TestContactRoute(ServerTestCase):

    def test_success(self):
        resp, data = self.post_contact({'email': 'fan@example.com',
                                        'message': 'Love your games!'})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(data['success'])
        self.assertEqual(data['message'], 'Email has been sent successfully.')
        self.assertIn('id', data)
        self.email.send_contact.assert_called_once_with('fan@example.com', 'Love your games!')

    def test_missing_fields_400(self):
        resp, data = self.post_contact({'email': 'fan@example.com'})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(data['success'])
        self.assertEqual(data['error'], 'Email and message are required fields.')

    def test_invalid_email_400(self):
        resp, data = self.post_contact({'email': 'not-an-email',
                                        'message': 'Love your games!'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(data['error'], 'Invalid email format provided.')

    def test_short_message_400(self):
        resp, data = self.post_contact({'email': 'fan@example.com', 'message': 'hi'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(data['error'], 'Message must be at least 10 characters long.')

    def test_non_json_body_400(self):
        resp = self.client.post('/api/contact', data='email=x', content_type='text/plain')
        self.assertEqual(resp.status_code, 400)

    def test_not_configured_503(self):
        self.email.send_contact.side_effect = EmailNotConfiguredError('missing')
        resp, data = self.post_contact({'email': 'fan@example.com',
                                        'message': 'Love your games!'})
        self.assertEqual(resp.status_code, 503)
        self.assertFalse(data['success'])

    def test_delivery_failure_500(self):
        self.email.send_contact.side_effect = EmailDeliveryError('smtp down')
        resp, data = self.post_contact({'email': 'fan@example.com',
                                        'message': 'Love your games!'})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(data['error'], 'Failed to send email via SMTP provider.')

    def test_get_contact_is_unknown_endpoint(self):
        resp = self.client.get('/api/contact')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(json.loads(resp.data), {'error': 'Endpoint not found'})

    def test_unrouted_method_is_json_405(self):
        resp = self.client.open('/api/games', method='TRACE')
        self.assertEqual(resp.status_code, 405)
        self.assertEqual(json.loads(resp.data), {'error': 'Method not allowed'})


# ===========================================================================
# Health & docs
# ===========================================================================

class TestHealthAndDocs(ServerTestCase):

    def test_health(self):
        resp, data = self.get_json('/api/health')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data['status'], 'ok')
        self.assertEqual(data['mode'], 'memory')
        self.assertEqual(data['games'], 5)
        self.assertTrue(data['emailConfigured'])
        self.assertIn('timestamp', data)

    def test_openapi(self):
        resp, data = self.get_json('/api/openapi.json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(data['openapi'], '3.0.3')
        self.assertIn('/api/games/{game_id}', data['paths'])

    def test_docs_page(self):
        resp = self.client.get('/api/docs')
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'swagger-ui', resp.data)

    def test_cors_header(self):
        resp = self.client.get('/api/stats', headers={'Origin': 'http://example.com'})
        self.assertEqual(resp.headers.get('Access-Control-Allow-Origin'), '*')


class TestOpenAPISpec(unittest.TestCase):

    def test_documents_every_route(self):
        paths = build_spec()['paths']
        for path in ('/api/games', '/api/games/{game_id}', '/api/stats',
                     '/api/contact', '/api/health', '/api/openapi.json', '/api/docs'):
            self.assertIn(path, paths)

    def test_contact_responses(self):
        responses = build_spec()['paths']['/api/contact']['post']['responses']
        self.assertEqual(set(responses), {'200', '400', '500', '503'})

    def test_server_url(self):
        spec = build_spec(server_url='http://localhost:3000')
        self.assertEqual(spec['servers'][0]['url'], 'http://localhost:3000')


# ===========================================================================
# Static files & SPA fallback
# ===========================================================================

class TestStaticAndFallback(ServerTestCase):

    def setUp(self):
        super().setUp()
        self.static_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.static_dir, True)
        with open(os.path.join(self.static_dir, 'index.html'), 'w') as fh:
            fh.write('<html>portfolio</html>')
        os.makedirs(os.path.join(self.static_dir, 'js'))
        with open(os.path.join(self.static_dir, 'js', 'main.js'), 'w') as fh:
            fh.write('console.log("hi");')
        p = patch.dict(gaminute_server.app.config, {'STATIC_DIR': self.static_dir})
        p.start()
        self.addCleanup(p.stop)

    def test_root_serves_index(self):
        resp = self.client.get('/')
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'portfolio', resp.data)
        resp.close()

    def test_static_asset(self):
        resp = self.client.get('/js/main.js')
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'console.log', resp.data)
        resp.close()

    def test_unknown_route_falls_back_to_index(self):
        resp = self.client.get('/games/loading-rush')
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'portfolio', resp.data)
        resp.close()

    def test_path_traversal_falls_back_to_index(self):
        resp = self.client.get('/../secret.txt')
        self.assertIn(resp.status_code, (200, 404))
        self.assertNotIn(b'secret', resp.data)
        resp.close()

    def test_unknown_api_route_is_json_404(self):
        resp, data = self.get_json('/api/nope')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(data, {'error': 'Endpoint not found'})

    def test_missing_index_is_404(self):
        os.remove(os.path.join(self.static_dir, 'index.html'))
        resp = self.client.get('/anything')
        self.assertEqual(resp.status_code, 404)


if __name__ == '__main__':
    unittest.main()
