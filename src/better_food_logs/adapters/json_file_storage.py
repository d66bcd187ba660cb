"""JSON-file backed key/value storage."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from better_food_logs.services.local_store import KeyValueStorage

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStorage(KeyValueStorage):
    """Stores string values in a single JSON document on disk."""

    path: Path

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)

    def _load(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            _logger.warning("Ignoring unreadable local storage file %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
