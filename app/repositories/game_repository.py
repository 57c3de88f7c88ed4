"""Repository for the in-memory portfolio catalogue ([game, ...])."""
import copy
from typing import Dict, List, Optional

from gaminute import default_catalog
from .base import BaseRepository


class GameRepository(BaseRepository):
    """Serves the portfolio catalogue from memory.

    The catalogue comes from *file_path* when it holds a JSON list of game
    objects, otherwise from the hardcoded ``PORTFOLIO_GAMES``.

    Schema::

        [{"id": 1, "title": "...", "status": "Live", "priority": 1, ...}, ...]
    """

    mode = 'memory'

    def __init__(self, file_path: Optional[str] = None) -> None:
        super().__init__(file_path)
        raw = self._load(None)
        if raw is None:
            self.data: List[Dict] = default_catalog()
        elif isinstance(raw, list) and all(isinstance(g, dict) and 'id' in g for g in raw):
            self.data = raw
            self._log.info("Loaded %d games from %s", len(raw), file_path)
        else:
            self._log.warning("Ignoring %s: expected a list of game objects", file_path)
            self.data = default_catalog()

    def all(self) -> List[Dict]:
        """Return a copy of every game."""
        return copy.deepcopy(self.data)

    def find(self, game_id: int) -> Optional[Dict]:
        """Return a copy of the game with *game_id*, or ``None``."""
        for game in self.data:
            if game.get('id') == game_id:
                return copy.deepcopy(game)
        return None

    def count(self) -> int:
        return len(self.data)
