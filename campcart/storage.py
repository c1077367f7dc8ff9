"""
Local key-value storage

Device-scoped persistent store used for the anonymous cart, the auth token
and the migration flag. Values are JSON documents kept in a single file so
they survive restarts of the client.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class LocalStorage:
    """JSON file-backed key-value store; purely in memory when no path is given"""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read local storage {self.path}: {e}")
            return
        if isinstance(data, dict):
            self._data = data
        else:
            logger.error(f"Ignoring malformed local storage file {self.path}")

    def _flush(self, data: dict[str, Any]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a stored value"""
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Store a JSON-serializable value.

        Memory only changes once the file has been written, so a failed write
        leaves the previous value in place.

        Raises:
            OSError: the storage file could not be written
        """
        data = {**self._data, key: value}
        self._flush(data)
        self._data = data

    def remove(self, key: str) -> None:
        """Delete a key if present"""
        if key in self._data:
            data = {k: v for k, v in self._data.items() if k != key}
            self._flush(data)
            self._data = data

    def __contains__(self, key: str) -> bool:
        return key in self._data
