"""Key-value storage backends for persisted trainer records."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.exceptions import StorageReadFailure, StorageWriteFailure
from .core.interfaces import IKeyValueStorage
from .logger import get_logger

logger = get_logger(__name__)

SETTINGS_KEY = "fretboard-trainer-settings"
STATS_KEY = "fretboard-trainer-stats"


def decode_record(stored: Optional[str]) -> Any:
    """Decode a stored JSON value; None for a missing or empty value.

    Raises:
        StorageReadFailure: If the value is not valid JSON, or nests too deep to decode
    """
    if not stored:
        return None
    try:
        return json.loads(stored)
    except (ValueError, RecursionError) as e:
        raise StorageReadFailure(f"Stored value is not valid JSON: {e}") from e


class JsonFileStorage(IKeyValueStorage):
    """Stores each key as `<directory>/<key>.json`."""

    def __init__(self, directory: Union[str, Path]):
        """Initialize the storage.

        Args:
            directory: Directory holding the record files; created on first write
        """
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadFailure(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as e:
            raise StorageWriteFailure(f"Could not write {path}: {e}") from e
        logger.debug(f"Wrote {len(value)} characters to {path}")

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageWriteFailure(f"Could not remove {path}: {e}") from e


class MemoryStorage(IKeyValueStorage):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
