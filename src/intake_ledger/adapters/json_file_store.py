"""JSON file key-value store for local persistence."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from intake_ledger.services.ledger import KeyValueStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileKeyValueStore(KeyValueStore):
    """Stores every key in a single JSON object on disk."""

    path: Path
    _values: dict[str, object] | None = field(default=None, init=False, repr=False)

    def get(self, key: str) -> object | None:
        """Return the stored value for a key."""
        return self._load().get(key)

    def set(self, key: str, value: object) -> None:
        """Update a key and rewrite the file atomically."""
        values = dict(self._load())
        values[key] = value
        self._write(values)
        self._values = values

    def _load(self) -> dict[str, object]:
        if self._values is None:
            self._values = self._read()
        return self._values

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            _logger.warning("Unreadable ledger file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ledger file %s does not hold an object", self.path)
            return {}
        return data

    def _write(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(values, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
