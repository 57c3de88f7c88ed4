#!/usr/bin/env python3
"""
Gaminute - portfolio catalogue core.

Holds the hardcoded portfolio catalogue, the status vocabulary shared by the
server and the client, logging setup and configuration loading.
"""

import copy
import json
import logging
import os
from typing import Dict, List, Optional


def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root Gaminute logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so library use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('gaminute')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


logger = setup_logging(os.getenv('GAMINUTE_LOG_LEVEL', 'WARNING'))


# Status vocabulary
STATUS_LIVE = 'Live'
STATUS_IN_DEV = 'In Dev'
STATUS_CONCEPT = 'Concept'
STATUS_PROTOTYPE = 'Prototype'  # deprecated, kept for older catalogue files

STATUS_ORDER = {
    'live': 0,
    'in dev': 1,
    'concept': 2,
    'prototype': 3,
}
UNKNOWN_STATUS_RANK = 99
DEFAULT_PRIORITY = 999

FEATURED_TITLE = 'Loading Rush'

PORTFOLIO_GAMES: List[Dict] = [
    {
        'id': 1,
        'title': 'Loading Rush',
        'description': (
            'Hyper-casual reflex test. Tap with millisecond precision to stop the '
            'loading bar at the perfect moment. Features anti-cheat logic, global '
            'leaderboards, and haptic feedback that responds to your accuracy.'
        ),
        'genre': 'arcade',
        'tech': 'canvas',
        'version': '1.0.2',
        'status': STATUS_LIVE,
        'priority': 1,
        'url': 'https://play.google.com/store/apps/details?id=com.jsilb.loadingrush',
        'thumb': 'img/loadingwebimg.webp',
        'created_at': '2024-01-15T10:00:00Z',
    },
    {
        'id': 2,
        'title': 'TicTacToe Lava',
        'description': (
            'Classic logic game with a chaotic twist. The board melts beneath you '
            'as tiles fall due to gravity, and you must survive the rising lava. '
            'Includes Daily Challenges, power-ups, and progressive difficulty modes.'
        ),
        'genre': 'puzzle',
        'tech': 'dom',
        'version': '1.4.5',
        'status': STATUS_IN_DEV,
        'priority': 2,
        'url': '',
        'thumb': 'img/lavawebimg.webp',
        'created_at': '2024-03-20T10:00:00Z',
    },
    {
        'id': 3,
        'title': 'Neon Coil',
        'description': (
            'Modern survival arcade with 360-degree movement mechanics. Navigate '
            'through dynamic obstacles with glowing trail effects and starfield '
            'parallax backgrounds. Built with custom 2D rendering engine for '
            'maximum performance.'
        ),
        'genre': 'arcade',
        'tech': 'canvas',
        'version': '0.9.0',
        'status': STATUS_CONCEPT,
        'priority': 5,
        'url': '',
        'thumb': 'img/backgroundhero.webp',
        'created_at': '2024-05-10T10:00:00Z',
    },
    {
        'id': 4,
        'title': 'Galaxiko Joystick',
        'description': (
            'High-speed 3D tunnel runner using math-based perspective projection. '
            'Test your reflexes in a neon void as the tunnel twists and '
            'accelerates. Features procedural generation and dynamic difficulty '
            'adjustment.'
        ),
        'genre': 'arcade',
        'tech': 'canvas',
        'version': '0.5.0',
        'status': STATUS_IN_DEV,
        'priority': 3,
        'url': '',
        'thumb': 'img/galaxikowebimg.webp',
        'created_at': '2024-08-15T10:00:00Z',
    },
    {
        'id': 5,
        'title': 'Shape Slash',
        'description': (
            'Swipe to connect matching shapes and clear the board in this '
            'fast-paced puzzle game. Unlock special power-ups to freeze time and '
            'create massive combos. Race against the clock to set new high scores '
            'before time runs out.'
        ),
        'genre': 'puzzle',
        'tech': 'canvas',
        'version': '0.8.0',
        'status': STATUS_IN_DEV,
        'priority': 4,
        'url': '',
        'thumb': 'img/shapeslash.webp',
        'created_at': '2024-11-10T10:00:00Z',
    },
]


def default_catalog() -> List[Dict]:
    """Return a deep copy of the hardcoded catalogue."""
    return copy.deepcopy(PORTFOLIO_GAMES)


def normalize_status(status: Optional[str]) -> str:
    """Lower-case and strip a status label; ``None`` becomes ``''``."""
    if not isinstance(status, str):
        return ''
    return status.strip().lower()


def status_rank(status: Optional[str]) -> int:
    """Return the default-sort rank for *status* (unknown statuses rank last)."""
    return STATUS_ORDER.get(normalize_status(status), UNKNOWN_STATUS_RANK)


def is_placeholder_value(value: Optional[str]) -> bool:
    """Return True if *value* is empty or still a template placeholder."""
    if not value:
        return True
    return str(value).strip().upper().startswith('YOUR_')


def parse_bool(value) -> bool:
    """Interpret a config or environment value as a boolean.

    Strings count as true only for ``1``, ``true``, ``yes`` and ``on``
    (case-insensitive), so ``"false"`` from a JSON file stays false.
    """
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CONFIG: Dict = {
    'host': '127.0.0.1',
    'port': 3000,
    'storage': 'memory',
    'catalog_path': None,
    'static_dir': 'public',
    'featured_title': FEATURED_TITLE,
    'email_user': '',
    'email_pass': '',
    'contact_recipient': 'gaminutestudio@gmail.com',
    'smtp_host': 'smtp.gmail.com',
    'smtp_port': 465,
    'smtp_ssl': True,
    'smtp_starttls': False,
    'smtp_timeout': 10,
    'log_level': 'INFO',
}

# env var -> (config key, converter)
_ENV_OVERRIDES = {
    'HOST': ('host', str),
    'PORT': ('port', int),
    'GAMINUTE_STORAGE': ('storage', str),
    'GAMINUTE_CATALOG': ('catalog_path', str),
    'GAMINUTE_STATIC_DIR': ('static_dir', str),
    'GAMINUTE_FEATURED_TITLE': ('featured_title', str),
    'EMAIL_USER': ('email_user', str),
    'EMAIL_PASS': ('email_pass', str),
    'CONTACT_RECIPIENT': ('contact_recipient', str),
    'SMTP_HOST': ('smtp_host', str),
    'SMTP_PORT': ('smtp_port', int),
    'SMTP_SSL': ('smtp_ssl', parse_bool),
    'SMTP_STARTTLS': ('smtp_starttls', parse_bool),
    'GAMINUTE_LOG_LEVEL': ('log_level', str),
}

_BOOL_KEYS = ('smtp_ssl', 'smtp_starttls')


def load_config(config_path: str = 'config.json') -> Dict:
    """Load configuration from defaults, a JSON file and the environment.

    Environment variables take precedence over config file values, which
    take precedence over :data:`DEFAULT_CONFIG`.  A missing config file is
    not an error; an unreadable one is logged and ignored.
    """
    config = dict(DEFAULT_CONFIG)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
            if isinstance(file_config, dict):
                config.update(file_config)
            else:
                logger.warning("Ignoring %s: expected a JSON object", config_path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read config file %s: %s", config_path, e)

    for key in _BOOL_KEYS:
        config[key] = parse_bool(config.get(key))

    for env_name, (key, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == '':
            continue
        try:
            config[key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", env_name, raw)

    if config.get('storage') not in ('memory', 'database'):
        logger.warning("Unknown storage mode %r, using memory", config.get('storage'))
        config['storage'] = 'memory'

    return config
