"""
Local JSON persistence for application state.

Two independent records are kept, each in its own file:
- mood_entries.json: the mood journal (newest first)
- location_data.json: the last resolved location
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


# ============================================================================
# CONSTANTS
# ============================================================================

ENTRIES_FILE_NAME = "mood_entries.json"
LOCATION_FILE_NAME = "location_data.json"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class StorageError(Exception):
    """Raised when state cannot be read or written."""
    pass


class StorageConnectionError(StorageError):
    """Raised when the storage backend is unreachable."""
    pass


# ============================================================================
# JSON STORE
# ============================================================================

class JsonStateStore:
    """Stores each state record as a JSON file inside a directory."""

    def __init__(self, directory: str):
        self.directory = directory

    @property
    def entries_path(self) -> str:
        return os.path.join(self.directory, ENTRIES_FILE_NAME)

    @property
    def location_path(self) -> str:
        return os.path.join(self.directory, LOCATION_FILE_NAME)

    def _read(self, path: str) -> Optional[Any]:
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StorageError(f"Read failed for {path}: {e}") from e

    def _write(self, path: str, payload: Any) -> None:
        tmp_path = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StorageError(f"Write failed for {path}: {e}") from e

    def load_entries(self) -> List[Dict[str, Any]]:
        data = self._read(self.entries_path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"{self.entries_path} does not hold a list")
        return data

    def save_entries(self, entries: List[Dict[str, Any]]) -> None:
        self._write(self.entries_path, entries)

    def load_location(self) -> Optional[Dict[str, Any]]:
        data = self._read(self.location_path)
        if data is not None and not isinstance(data, dict):
            raise StorageError(f"{self.location_path} does not hold an object")
        return data

    def save_location(self, location: Dict[str, Any]) -> None:
        self._write(self.location_path, location)
