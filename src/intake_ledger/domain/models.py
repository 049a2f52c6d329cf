"""Domain models for the intake ledger."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Goal:
    """Daily nutrition targets. Zero means the target is not set."""

    protein_g: float = 0.0
    calories: float = 0.0

    @property
    def is_set(self) -> bool:
        """Return True when at least one target has been configured."""
        return self.protein_g > 0 or self.calories > 0


@dataclass(frozen=True)
class DailyLogEntry:
    """Accumulated intake for a single calendar day."""

    day: date
    protein_g: float = 0.0
    calories: float = 0.0


@dataclass(frozen=True)
class Progress:
    """Today's intake measured against the current goal."""

    day: date
    protein_ratio: float
    calorie_ratio: float
    protein_value: float
    calorie_value: float
    protein_goal: float
    calorie_goal: float
