#!/usr/bin/env python3
"""
Seeding script for the database-backed catalogue.
Creates the tables and loads the portfolio games (the hardcoded list, or a
JSON catalogue file) into the ``games`` table.
"""

import argparse
import sys
import os

# Add the script directory to the path so we can import the project modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import database
from app.repositories import GameRepository


def seed(catalog_path=None, replace=False, session_factory=None, bind=None):
    """Create tables and seed the catalogue.

    Returns:
        Number of games inserted (0 when the table was already populated
        and *replace* is false), or ``None`` when the database is unavailable.
    """
    session_factory = session_factory or database.SessionLocal
    if session_factory is None or not database.init_db(bind=bind):
        return None

    games = GameRepository(catalog_path).all()
    db = session_factory()
    try:
        return database.seed_games(db, games, replace=replace)
    finally:
        db.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Seed the Gaminute games table')
    parser.add_argument('--catalog', help='JSON catalogue file (defaults to the built-in list)')
    parser.add_argument('--replace', action='store_true',
                        help='Delete existing rows before seeding')
    args = parser.parse_args(argv)

    print("=" * 60)
    print("Gaminute Database Seed")
    print("=" * 60)
    print(f"Database URL: {database.DATABASE_URL}")

    if not database.engine:
        print("✗ Error: Cannot connect to database")
        print("  Make sure DATABASE_URL is set correctly")
        return 1

    inserted = seed(args.catalog, replace=args.replace)
    if inserted is None:
        print("✗ Error: Failed to initialize tables")
        return 1
    if inserted == 0 and not args.replace:
        print("✓ Games table already populated, nothing to do (use --replace to reseed)")
    else:
        print(f"✓ Seeded {inserted} games")
    return 0


if __name__ == '__main__':
    sys.exit(main())
