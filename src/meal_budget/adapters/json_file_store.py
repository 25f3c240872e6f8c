"""Key-value store persisted as a single JSON document on disk."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from meal_budget.adapters.kv_household_repository import KeyValueStore
from meal_budget.domain.errors import StorageError


@dataclass
class JsonFileStore(KeyValueStore):
    """Stores every key in one JSON object, rewritten on each change."""

    path: Path

    def get(self, key: str) -> object | None:
        """Return the value stored under a key."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Store a JSON-serialisable value under a key."""
        data = self._load()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._write(data)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected document in {self.path}")
        return data

    def _write(self, data: dict[str, object]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc
