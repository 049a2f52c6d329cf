"""Shared test fixtures."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from intake_ledger.config import Settings
from intake_ledger.services.ledger import KeyValueStore, LedgerService

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def fixed_clock(now: datetime = FIXED_NOW) -> Callable[[], datetime]:
    """Return a clock that always reports the given instant."""
    return lambda: now


@dataclass
class RecordingKeyValueStore(KeyValueStore):
    """In-memory store that records every write."""

    values: dict[str, object] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get(self, key: str) -> object | None:
        return self.values.get(key)

    def set(self, key: str, value: object) -> None:
        self.writes.append(key)
        self.values[key] = value


@dataclass
class FailingKeyValueStore(KeyValueStore):
    """Store whose writes always fail."""

    attempts: int = 0

    def get(self, key: str) -> object | None:
        return None

    def set(self, key: str, value: object) -> None:
        self.attempts += 1
        raise OSError("disk full")


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("intake_ledger")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_path=None, timezone="UTC", environment="test")


@pytest.fixture
def store() -> RecordingKeyValueStore:
    return RecordingKeyValueStore()


@pytest.fixture
def ledger(store: RecordingKeyValueStore) -> LedgerService:
    return LedgerService.load(store, clock=fixed_clock())
