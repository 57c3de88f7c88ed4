"""Repository for the database-backed portfolio catalogue."""
from typing import Dict, List, Optional

from gaminute import default_catalog


class DBGameRepository:
    """Serves the portfolio catalogue from the ``games`` table, delegating
    to the ``database`` module's helper functions.

    Each call opens its own session and closes it before returning.
    """

    mode = 'database'

    def __init__(self, db_module, seed: bool = True,
                 catalog: Optional[List[Dict]] = None) -> None:
        """
        Args:
            db_module: The imported ``database`` module (or any object that
                exposes ``SessionLocal``, ``init_db``, ``seed_games``,
                ``get_all_games``, ``get_game_by_id`` and ``count_games``).
            seed:      Create the tables and insert *catalog* when the table
                       is empty.
            catalog:   Games to seed with; defaults to the hardcoded list.
        """
        self._db = db_module
        if seed and self._db.init_db():
            db = self._db.SessionLocal()
            try:
                self._db.seed_games(db, catalog if catalog is not None else default_catalog())
            finally:
                db.close()

    def all(self) -> List[Dict]:
        db = self._db.SessionLocal()
        try:
            return self._db.get_all_games(db)
        finally:
            db.close()

    def find(self, game_id: int) -> Optional[Dict]:
        db = self._db.SessionLocal()
        try:
            return self._db.get_game_by_id(db, game_id)
        finally:
            db.close()

    def count(self) -> int:
        db = self._db.SessionLocal()
        try:
            return self._db.count_games(db)
        finally:
            db.close()
