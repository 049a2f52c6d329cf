"""Daily intake ledger: goals, per-day totals and progress."""

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from intake_ledger.domain.models import DailyLogEntry, Goal, Progress
from intake_ledger.domain.records import decode_entries, decode_goal, encode_entries

DAILY_LOGS_KEY = "dailyLogs"
PROTEIN_GOAL_KEY = "proteinGoal"
CALORIE_GOAL_KEY = "calorieGoal"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface for ledger state."""

    def get(self, key: str) -> object | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-compatible value under a key."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class LedgerHistory:
    """Snapshot of ledger entries, iterated in day order."""

    entries: tuple[DailyLogEntry, ...]
    descending: bool = False

    def __iter__(self) -> Iterator[DailyLogEntry]:
        yield from sorted(
            self.entries, key=lambda entry: entry.day, reverse=self.descending
        )

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class LedgerService:
    """Owns the goal and daily entries and persists them after each change."""

    store: KeyValueStore
    timezone_name: str = "UTC"
    clock: Callable[[], datetime] = _utc_now
    goal: Goal = field(default_factory=Goal)
    entries: list[DailyLogEntry] = field(default_factory=list)
    _zone: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._zone = ZoneInfo(self.timezone_name)

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        timezone_name: str = "UTC",
        clock: Callable[[], datetime] = _utc_now,
    ) -> "LedgerService":
        """Build a ledger from persisted state, or defaults when none exists."""
        goal = Goal(
            protein_g=decode_goal(store.get(PROTEIN_GOAL_KEY)),
            calories=decode_goal(store.get(CALORIE_GOAL_KEY)),
        )
        entries = decode_entries(
            store.get(DAILY_LOGS_KEY), zone=ZoneInfo(timezone_name)
        )
        _logger.info(
            "Ledger loaded: entries=%s protein_goal=%s calorie_goal=%s",
            len(entries),
            goal.protein_g,
            goal.calories,
        )
        return cls(
            store=store,
            timezone_name=timezone_name,
            clock=clock,
            goal=goal,
            entries=entries,
        )

    @property
    def goals_set(self) -> bool:
        """Return True once the user has configured any goal."""
        return self.goal.is_set

    def today(self) -> date:
        """Return the current calendar day in the ledger timezone."""
        return self.clock().astimezone(self._zone).date()

    def set_goals(
        self, protein_goal: object = None, calorie_goal: object = None
    ) -> Goal:
        """Update goals, ignoring fields that are not non-negative numbers."""
        protein = _accepted_amount(protein_goal)
        calories = _accepted_amount(calorie_goal)
        updated = Goal(
            protein_g=self.goal.protein_g if protein is None else protein,
            calories=self.goal.calories if calories is None else calories,
        )
        if updated == self.goal:
            return self.goal

        self.goal = updated
        _logger.info(
            "Goals updated: protein_g=%s calories=%s",
            updated.protein_g,
            updated.calories,
        )
        self._persist(PROTEIN_GOAL_KEY, updated.protein_g)
        self._persist(CALORIE_GOAL_KEY, updated.calories)
        return updated

    def record_intake(
        self,
        protein: object = None,
        calories: object = None,
        on: date | datetime | None = None,
    ) -> DailyLogEntry:
        """Add intake to the day's running totals, creating the day if needed."""
        day = self._as_day(on) if on is not None else self.today()
        protein_g = _accepted_amount(protein) or 0.0
        kcal = _accepted_amount(calories) or 0.0

        index = self._index_of(day)
        if index is None:
            entry = DailyLogEntry(day=day, protein_g=protein_g, calories=kcal)
            self.entries.append(entry)
        else:
            current = self.entries[index]
            entry = replace(
                current,
                protein_g=_finite_sum(current.protein_g, protein_g),
                calories=_finite_sum(current.calories, kcal),
            )
            self.entries[index] = entry

        _logger.info(
            "Intake recorded: day=%s protein_g=%s calories=%s",
            day,
            entry.protein_g,
            entry.calories,
        )
        self._persist_entries()
        return entry

    def delete_entry(self, day: date | datetime) -> bool:
        """Remove the entry for a day; return whether one existed."""
        index = self._index_of(self._as_day(day))
        if index is None:
            return False
        removed = self.entries.pop(index)
        _logger.info("Entry deleted: day=%s", removed.day)
        self._persist_entries()
        return True

    def entry_for(self, day: date | datetime) -> DailyLogEntry | None:
        """Return the entry for a day, if any."""
        index = self._index_of(self._as_day(day))
        return None if index is None else self.entries[index]

    def progress_for_today(self) -> Progress:
        """Return today's intake and its ratios against the goal."""
        day = self.today()
        entry = self.entry_for(day) or DailyLogEntry(day=day)
        return Progress(
            day=day,
            protein_ratio=_ratio(entry.protein_g, self.goal.protein_g),
            calorie_ratio=_ratio(entry.calories, self.goal.calories),
            protein_value=entry.protein_g,
            calorie_value=entry.calories,
            protein_goal=self.goal.protein_g,
            calorie_goal=self.goal.calories,
        )

    def list_history(self, descending: bool = False) -> LedgerHistory:
        """Return the current entries ordered by day."""
        return LedgerHistory(entries=tuple(self.entries), descending=descending)

    def _as_day(self, value: date | datetime) -> date:
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.date()
            return value.astimezone(self._zone).date()
        return value

    def _index_of(self, day: date) -> int | None:
        for index, entry in enumerate(self.entries):
            if entry.day == day:
                return index
        return None

    def _persist_entries(self) -> None:
        self._persist(DAILY_LOGS_KEY, encode_entries(self.entries))

    def _persist(self, key: str, value: object) -> None:
        try:
            self.store.set(key, value)
        except OSError as exc:
            _logger.warning("Failed to persist %s: %s", key, exc)


def _accepted_amount(value: object) -> float | None:
    """Return the value as a float when it is a finite non-negative number."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        amount = float(value)
    except OverflowError:
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


def _finite_sum(total: float, amount: float) -> float:
    """Add an amount to a total, keeping the total when the sum overflows."""
    result = total + amount
    return result if math.isfinite(result) else total


def _ratio(value: float, goal: float) -> float:
    if goal <= 0:
        return 0.0
    return min(max(value / goal, 0.0), 1.0)
