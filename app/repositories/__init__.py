"""Repository package — expose all concrete repositories from one import."""
from .game_repository import GameRepository
from .db_game_repository import DBGameRepository

__all__ = [
    'GameRepository',
    'DBGameRepository',
]
