"""In-memory key-value store."""

import copy
from dataclasses import dataclass, field

from intake_ledger.services.ledger import KeyValueStore


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Ephemeral store; state lives only as long as the process."""

    _values: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        """Return a copy of the stored value."""
        return copy.deepcopy(self._values.get(key))

    def set(self, key: str, value: object) -> None:
        """Store a copy of the value."""
        self._values[key] = copy.deepcopy(value)
