"""Dependency container wiring for the application."""

from dataclasses import dataclass

from intake_ledger.adapters.json_file_store import JsonFileKeyValueStore
from intake_ledger.adapters.memory_store import InMemoryKeyValueStore
from intake_ledger.app_logging import configure_logging
from intake_ledger.config import Settings
from intake_ledger.services.ledger import KeyValueStore, LedgerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    ledger_service: LedgerService


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    if settings.storage_path is None:
        return InMemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.storage_path.expanduser())


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    store = build_store(resolved_settings)
    ledger_service = LedgerService.load(store, timezone_name=resolved_settings.timezone)
    return AppContainer(
        settings=resolved_settings,
        store=store,
        ledger_service=ledger_service,
    )
