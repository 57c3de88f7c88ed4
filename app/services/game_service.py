"""Business logic for the portfolio games list: filtering, sorting, stats."""
from typing import Dict, List, Optional

from gaminute import (
    DEFAULT_PRIORITY, STATUS_CONCEPT, STATUS_IN_DEV, STATUS_LIVE,
    normalize_status, status_rank,
)

SEARCH_MAX_LENGTH = 50
SORT_OPTIONS = ('priority', 'oldest', 'newest', 'alpha')


def _is_wildcard(value: Optional[str]) -> bool:
    return value is None or not str(value).strip() or str(value).strip().lower() == 'all'


def _priority(game: Dict) -> int:
    try:
        return int(game.get('priority') or DEFAULT_PRIORITY)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY


def filter_games(games: List[Dict], search: Optional[str] = None,
                 genre: Optional[str] = None,
                 status: Optional[str] = None) -> List[Dict]:
    """Return the games matching every given filter.

    Args:
        games:  Source list (not modified).
        search: Case-insensitive substring of title or description.  Trimmed
                and capped at 50 characters; empty means no filter.
        genre:  Exact genre (case-insensitive); ``None``/``''``/``'all'``
                means no filter.
        status: Status label (case-insensitive); ``None``/``''``/``'all'``
                means no filter.
    """
    results = list(games)

    if not _is_wildcard(genre):
        wanted = str(genre).strip().lower()
        results = [g for g in results if str(g.get('genre') or '').lower() == wanted]

    if not _is_wildcard(status):
        wanted = normalize_status(str(status))
        results = [g for g in results if normalize_status(g.get('status')) == wanted]

    term = (search or '').strip().lower()[:SEARCH_MAX_LENGTH]
    if term:
        results = [
            g for g in results
            if term in str(g.get('title') or '').lower()
            or term in str(g.get('description') or '').lower()
        ]

    return results


def sort_games(games: List[Dict], sort: Optional[str] = None,
               featured_title: Optional[str] = None) -> List[Dict]:
    """Return a new, stably sorted list of *games*.

    ``oldest``/``newest`` order by ``created_at``, ``alpha`` by title.
    Anything else uses the default portfolio order: the featured title
    first, then status rank (Live, In Dev, Concept, Prototype, unknown),
    then priority (lower first, missing counts as 999), then id.
    """
    sort = (sort or '').strip().lower()

    if sort == 'oldest':
        return sorted(games, key=lambda g: g.get('created_at') or '')
    if sort == 'newest':
        return sorted(games, key=lambda g: g.get('created_at') or '', reverse=True)
    if sort == 'alpha':
        return sorted(games, key=lambda g: str(g.get('title') or '').casefold())

    featured = (featured_title or '').strip().casefold()

    def _default_key(game: Dict):
        is_featured = bool(featured) and str(game.get('title') or '').casefold() == featured
        game_id = game.get('id')
        return (
            0 if is_featured else 1,
            status_rank(game.get('status')),
            _priority(game),
            game_id if isinstance(game_id, int) else 0,
        )

    return sorted(games, key=_default_key)


def compute_stats(games: List[Dict]) -> Dict[str, int]:
    """Return the portfolio counters shown in the stats section."""
    statuses = [normalize_status(g.get('status')) for g in games]
    return {
        'totalGames': len(games),
        'liveGames': statuses.count(normalize_status(STATUS_LIVE)),
        'inDev': statuses.count(normalize_status(STATUS_IN_DEV)),
        'concepts': statuses.count(normalize_status(STATUS_CONCEPT)),
    }


class GameService:
    """Serves the portfolio catalogue, delegating storage to a game
    repository (:class:`~app.repositories.game_repository.GameRepository`
    or :class:`~app.repositories.db_game_repository.DBGameRepository`).
    """

    def __init__(self, repository, featured_title: Optional[str] = None) -> None:
        self._repo = repository
        self.featured_title = featured_title

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def mode(self) -> str:
        """Storage mode of the underlying repository."""
        return getattr(self._repo, 'mode', 'unknown')

    def list_games(self, search: Optional[str] = None,
                   genre: Optional[str] = None,
                   status: Optional[str] = None,
                   sort: Optional[str] = None) -> List[Dict]:
        """Return the filtered, sorted games list."""
        games = filter_games(self._repo.all(), search=search, genre=genre,
                             status=status)
        return sort_games(games, sort=sort, featured_title=self.featured_title)

    def get(self, game_id: int) -> Optional[Dict]:
        """Return the game with *game_id*, or ``None`` when it does not exist."""
        return self._repo.find(game_id)

    def stats(self) -> Dict[str, int]:
        """Return aggregate counts over the whole catalogue."""
        return compute_stats(self._repo.all())

    def count(self) -> int:
        return self._repo.count()
