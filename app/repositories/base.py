"""Repository base class used by the catalogue repositories."""
import json
import logging
import os
from typing import Any, Optional


class BaseRepository:
    """Provides read-only JSON loading for a single catalogue file.

    Sub-classes call :meth:`_load` to read their initial data from disk.
    The catalogue is never written back; edits happen in the source file
    (or the database seeding tool) and are picked up on the next start.
    """

    mode = 'base'

    def __init__(self, file_path: Optional[str] = None) -> None:
        self._path = file_path
        self._log = logging.getLogger(f'gaminute.repository.{type(self).__name__}')

    def _load(self, default: Any) -> Any:
        """Load JSON from *self._path*, returning *default* on missing/corrupt file."""
        if self._path and os.path.exists(self._path):
            try:
                with open(self._path, 'r', encoding='utf-8') as fh:
                    return json.load(fh)
            except (json.JSONDecodeError, IOError) as exc:
                self._log.warning("Could not load %s: %s", self._path, exc)
        return default
