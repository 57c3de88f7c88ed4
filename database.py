#!/usr/bin/env python3
"""
Database models and configuration for Gaminute.
Handles the SQLite-backed copy of the portfolio catalogue.
"""

import os
from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime, timezone
import logging

logger = logging.getLogger('gaminute.database')

# Database URL - any SQLAlchemy URL works, SQLite by default
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///gaminute.db')

try:
    _connect_args = {"check_same_thread": False} if DATABASE_URL.startswith('sqlite') else {}
    engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
except Exception as e:
    logger.warning(f"Database engine not available: {e}")
    engine = None
    SessionLocal = None

Base = declarative_base()


class PortfolioGame(Base):
    """A game shown in the portfolio."""
    __tablename__ = "games"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default='')
    genre = Column(String(50), index=True)
    tech = Column(String(50))
    version = Column(String(20))
    status = Column(String(20), index=True)  # 'Live', 'In Dev', 'Concept'
    priority = Column(Integer, default=999)  # lower = shown first
    url = Column(String(500), default='')
    thumb = Column(String(500), default='')
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))


def _parse_timestamp(value):
    """Parse an ISO-8601 string (with optional trailing Z) into a naive UTC datetime."""
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def game_to_dict(game: PortfolioGame) -> dict:
    """Serialise a :class:`PortfolioGame` row into the API dict shape."""
    return {
        'id': game.id,
        'title': game.title,
        'description': game.description or '',
        'genre': game.genre,
        'tech': game.tech,
        'version': game.version,
        'status': game.status,
        'priority': game.priority,
        'url': game.url or '',
        'thumb': game.thumb or '',
        'created_at': game.created_at.strftime('%Y-%m-%dT%H:%M:%SZ') if game.created_at else None,
    }


def get_db():
    """Get database session."""
    if SessionLocal:
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()
    else:
        yield None


def init_db(bind=None):
    """Initialize database tables."""
    target = bind or engine
    if target is None:
        return False
    try:
        Base.metadata.create_all(bind=target)
        logger.info("Database tables initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        return False


def seed_games(db, games: list, replace: bool = False) -> int:
    """Insert *games* into the ``games`` table.

    Args:
        db:      Database session.
        games:   List of game dicts in the API shape.
        replace: When ``True`` existing rows are deleted first; otherwise
                 seeding is skipped if the table already has rows.

    Returns:
        Number of rows inserted.
    """
    if not db:
        return 0
    try:
        if replace:
            db.query(PortfolioGame).delete()
        elif db.query(PortfolioGame).count() > 0:
            return 0

        for game in games:
            db.add(PortfolioGame(
                id=game.get('id'),
                title=game.get('title', ''),
                description=game.get('description', ''),
                genre=game.get('genre'),
                tech=game.get('tech'),
                version=game.get('version'),
                status=game.get('status'),
                priority=game.get('priority') or 999,
                url=game.get('url', ''),
                thumb=game.get('thumb', ''),
                created_at=_parse_timestamp(game.get('created_at')),
            ))
        db.commit()
        logger.info(f"Seeded {len(games)} games")
        return len(games)
    except Exception as e:
        logger.error(f"Error seeding games: {e}")
        db.rollback()
        return 0


def get_all_games(db) -> list:
    """Return every game as a list of dicts, ordered by id."""
    if not db:
        return []
    try:
        rows = db.query(PortfolioGame).order_by(PortfolioGame.id).all()
        return [game_to_dict(row) for row in rows]
    except Exception as e:
        logger.error(f"Error loading games: {e}")
        return []


def get_game_by_id(db, game_id: int):
    """Return the game dict for *game_id*, or ``None``."""
    if not db:
        return None
    try:
        row = db.query(PortfolioGame).filter(PortfolioGame.id == game_id).first()
        return game_to_dict(row) if row else None
    except Exception as e:
        logger.error(f"Error getting game {game_id}: {e}")
        return None


def count_games(db) -> int:
    """Return the number of rows in the ``games`` table."""
    if not db:
        return 0
    try:
        return db.query(PortfolioGame).count()
    except Exception as e:
        logger.error(f"Error counting games: {e}")
        return 0
