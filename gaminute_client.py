#!/usr/bin/env python3
"""
Gaminute Client - talk to the portfolio API from Python or the terminal.

Mirrors what the portfolio frontend does without the DOM: fetches games and
statistics with retry and linear backoff, falls back to stub statistics when
the server is unreachable, validates and submits the contact form, and keeps
a browser-like filter state over the loaded games list.
"""

import argparse
import logging
import sys
import time
from typing import Callable, Dict, List, Optional

import requests
from colorama import init, Fore, Style
from dotenv import load_dotenv

import gaminute
from app.services.contact_service import (
    EMAIL_PATTERN, MAX_MESSAGE_LENGTH, MIN_MESSAGE_LENGTH,
)
from app.services.game_service import filter_games, sort_games

# Initialize colorama for cross-platform colored output
init(autoreset=True)

FALLBACK_STATS = {'totalGames': 5, 'liveGames': 3, 'inDev': 1, 'concepts': 1}

_DEFAULT_TIMEOUT = 10  # seconds


class ContactSubmissionError(Exception):
    """The server refused or failed to deliver a contact submission."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GaminuteAPIClient:
    """Client for the Gaminute portfolio REST API.

    Args:
        base_url:       Server root, e.g. ``http://localhost:3000``.
        retry_attempts: Attempts per request for reads.
        retry_delay:    Base delay in seconds; attempt *n* waits ``n * delay``.
        timeout:        Per-request timeout in seconds.
        sleep:          Sleep function (injected by tests).
    """

    API_PREFIX = '/api'

    def __init__(self, base_url: str = 'http://localhost:3000',
                 retry_attempts: int = 3, retry_delay: float = 1.0,
                 timeout: int = _DEFAULT_TIMEOUT,
                 sleep: Callable[[float], None] = time.sleep):
        self.base_url = base_url.rstrip('/')
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._sleep = sleep
        self._log = logging.getLogger('gaminute.client')
        self.session = requests.Session()
        self.session.headers.update({
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}{self.API_PREFIX}{path}"

    @staticmethod
    def _cache_buster() -> Dict[str, int]:
        return {'t': int(time.time() * 1000)}

    def fetch_with_retry(self, path: str, method: str = 'GET',
                         retries: Optional[int] = None, **kwargs):
        """Request *path* and return the decoded JSON body.

        Transport errors and 5xx responses are retried up to *retries*
        attempts in total, waiting ``retry_delay * attempt`` seconds between
        attempts.  A 4xx response is final and raised straight away.

        Raises:
            requests.RequestException: The last failure once attempts run out,
                or the ``HTTPError`` of a 4xx response.
        """
        attempts = max(1, retries if retries is not None else self.retry_attempts)
        url = self._url(path)
        for attempt in range(1, attempts + 1):
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
                response.raise_for_status()
                return response.json()
            except (requests.RequestException, ValueError) as e:
                status = getattr(getattr(e, 'response', None), 'status_code', None)
                if isinstance(e, requests.HTTPError) and status is not None and 400 <= status < 500:
                    self._log.debug("Request to %s failed with %s, not retrying", url, status)
                    raise
                self._log.debug("Attempt %d/%d failed for %s: %s", attempt, attempts, url, e)
                if attempt == attempts:
                    raise
                self._sleep(self.retry_delay * attempt)

    def fetch_stats(self) -> Dict[str, int]:
        """Return portfolio statistics, or :data:`FALLBACK_STATS` on failure."""
        try:
            data = self.fetch_with_retry('/stats', params=self._cache_buster())
            self._log.debug("Stats loaded: %s", data)
            return data
        except (requests.RequestException, ValueError) as e:
            self._log.warning("Stats fetch failed, using fallback: %s", e)
            return dict(FALLBACK_STATS)

    def fetch_games(self, search: Optional[str] = None, genre: Optional[str] = None,
                    status: Optional[str] = None, sort: Optional[str] = None) -> List[Dict]:
        """Return the games list (server-side filtered), or ``[]`` on failure."""
        params = self._cache_buster()
        for key, value in (('search', search), ('genre', genre),
                           ('status', status), ('sort', sort)):
            if value:
                params[key] = value
        try:
            data = self.fetch_with_retry('/games', params=params)
            self._log.debug("Games loaded: %d", len(data))
            return data
        except (requests.RequestException, ValueError) as e:
            self._log.error("Failed to load games: %s", e)
            return []

    def fetch_game(self, game_id: int) -> Optional[Dict]:
        """Return one game, or ``None`` when it does not exist or cannot be loaded."""
        try:
            return self.fetch_with_retry(f'/games/{int(game_id)}')
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            self._log.error("Failed to load game %s: %s", game_id, e)
            return None
        except (requests.RequestException, ValueError) as e:
            self._log.error("Failed to load game %s: %s", game_id, e)
            return None

    def submit_contact(self, email: str, message: str) -> Dict:
        """Submit the contact form once (never retried).

        Raises:
            ContactSubmissionError: The server rejected the submission or
                could not be reached.
        """
        url = self._url('/contact')
        try:
            response = self.session.post(url, json={'email': email, 'message': message},
                                         timeout=self.timeout)
        except requests.RequestException as e:
            self._log.error("Contact submission failed: %s", e)
            raise ContactSubmissionError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.ok:
            error = body.get('error') if isinstance(body, dict) else None
            raise ContactSubmissionError(
                error or f"HTTP {response.status_code}", status_code=response.status_code)
        self._log.debug("Contact form submitted: %s", body)
        return body


def validate_contact_form(email: Optional[str], message: Optional[str]) -> Dict[str, str]:
    """Validate contact form fields before submission.

    Returns:
        ``{field: error}`` for each invalid field; empty when the form is valid.
    """
    errors: Dict[str, str] = {}
    email = email or ''
    message = (message or '').strip()

    if not email:
        errors['email'] = 'Email is required'
    elif not EMAIL_PATTERN.fullmatch(email):
        errors['email'] = 'Please enter a valid email'

    if not message:
        errors['message'] = 'Message is required'
    elif len(message) < MIN_MESSAGE_LENGTH:
        errors['message'] = f'Message must be at least {MIN_MESSAGE_LENGTH} characters'
    elif len(message) > MAX_MESSAGE_LENGTH:
        errors['message'] = f'Message cannot exceed {MAX_MESSAGE_LENGTH} characters'

    return errors


class PortfolioBrowser:
    """Client-side games list state: loaded games plus the active filters."""

    def __init__(self, client: GaminuteAPIClient,
                 featured_title: Optional[str] = gaminute.FEATURED_TITLE):
        self.client = client
        self.featured_title = featured_title
        self.games: List[Dict] = []
        self.filtered_games: List[Dict] = []
        self.filters: Dict[str, str] = {'search': '', 'genre': 'all', 'status': 'all'}
        self.is_loading = False

    def load(self) -> List[Dict]:
        """Fetch the full games list and apply the current filters."""
        self.is_loading = True
        try:
            self.games = self.client.fetch_games()
        finally:
            self.is_loading = False
        return self.apply_filters()

    def set_search(self, value: str) -> List[Dict]:
        self.filters['search'] = (value or '').lower()
        return self.apply_filters()

    def set_genre(self, genre: str) -> List[Dict]:
        self.filters['genre'] = genre or 'all'
        return self.apply_filters()

    def set_status(self, status: str) -> List[Dict]:
        self.filters['status'] = status or 'all'
        return self.apply_filters()

    def reset_filters(self) -> List[Dict]:
        self.filters = {'search': '', 'genre': 'all', 'status': 'all'}
        return self.apply_filters()

    def apply_filters(self) -> List[Dict]:
        """Recompute :attr:`filtered_games` from :attr:`games` and the filters."""
        filtered = filter_games(self.games, search=self.filters['search'],
                                genre=self.filters['genre'],
                                status=self.filters['status'])
        self.filtered_games = sort_games(filtered, featured_title=self.featured_title)
        return self.filtered_games


# ---------------------------------------------------------------------------
# Terminal rendering
# ---------------------------------------------------------------------------

_STATUS_COLORS = {
    'live': Fore.GREEN,
    'in dev': Fore.YELLOW,
}


def format_game_card(game: Dict) -> str:
    """Render a game as a coloured terminal card."""
    status = game.get('status') or 'Unknown'
    badge_color = _STATUS_COLORS.get(gaminute.normalize_status(status), Fore.MAGENTA)
    url = (game.get('url') or '').strip()

    if url:
        action = f"{Fore.GREEN}Get on Google Play: {Fore.WHITE}{url}"
    elif status == gaminute.STATUS_IN_DEV:
        action = f"{Style.DIM}In Development"
    else:
        action = f"{Style.DIM}Concept Only"

    lines = [
        f"{Fore.CYAN}{'=' * 60}",
        f"{Fore.CYAN}{Style.BRIGHT}🎮 {game.get('title', 'Untitled')}",
        f"{badge_color}[{status}]{Style.RESET_ALL} {Fore.BLUE}[{game.get('genre', '?')}]",
        f"{Fore.WHITE}{game.get('description', '')}",
        action,
    ]
    return "\n".join(lines)


def format_stats(stats: Dict[str, int]) -> str:
    return "\n".join([
        f"{Fore.YELLOW}Games in portfolio: {Fore.WHITE}{stats.get('totalGames', 0)}",
        f"{Fore.YELLOW}Live on Play Store: {Fore.WHITE}{stats.get('liveGames', 0)}",
        f"{Fore.YELLOW}In Development:     {Fore.WHITE}{stats.get('inDev', 0)}",
    ])


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    load_dotenv()
    parser = argparse.ArgumentParser(description='Gaminute portfolio client')
    parser.add_argument('--url', default='http://localhost:3000', help='Server base URL')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')
    sub = parser.add_subparsers(dest='command', required=True)

    games_p = sub.add_parser('games', help='List portfolio games')
    games_p.add_argument('--search', help='Search title and description')
    games_p.add_argument('--genre', help="Genre filter (or 'all')")
    games_p.add_argument('--status', help="Status filter (or 'all')")
    games_p.add_argument('--sort', choices=('priority', 'oldest', 'newest', 'alpha'))

    game_p = sub.add_parser('game', help='Show one game')
    game_p.add_argument('game_id', type=int)

    sub.add_parser('stats', help='Show portfolio statistics')

    contact_p = sub.add_parser('contact', help='Send a message to the studio')
    contact_p.add_argument('--email', required=True)
    contact_p.add_argument('--message', required=True)

    args = parser.parse_args(argv)
    gaminute.setup_logging(args.log_level)
    client = GaminuteAPIClient(args.url)

    if args.command == 'games':
        games = client.fetch_games(search=args.search, genre=args.genre,
                                   status=args.status, sort=args.sort)
        if not games:
            print(f"{Fore.YELLOW}No games found.")
            return 0
        for game in games:
            print(format_game_card(game))
        print(f"{Fore.CYAN}{'=' * 60}")
        return 0

    if args.command == 'game':
        game = client.fetch_game(args.game_id)
        if game is None:
            print(f"{Fore.RED}Game {args.game_id} not found.")
            return 1
        print(format_game_card(game))
        return 0

    if args.command == 'stats':
        print(format_stats(client.fetch_stats()))
        return 0

    errors = validate_contact_form(args.email, args.message)
    if errors:
        for field, error in errors.items():
            print(f"{Fore.RED}{field}: {error}")
        return 2
    try:
        client.submit_contact(args.email, args.message)
    except ContactSubmissionError as e:
        print(f"{Fore.RED}Failed to send message: {e}")
        return 1
    print(f"{Fore.GREEN}Message sent successfully!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
