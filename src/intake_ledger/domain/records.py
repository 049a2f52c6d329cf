"""Pydantic models for persisted ledger state."""

import json
import logging
import math
from datetime import UTC, date, datetime, timedelta, tzinfo

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from intake_ledger.domain.models import DailyLogEntry

_logger = logging.getLogger(__name__)

# Reference date used by the mobile app's original date encoding.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=UTC)


class DailyLogRecord(BaseModel):
    """Stored form of a daily log entry."""

    model_config = ConfigDict(populate_by_name=True)

    day: date = Field(alias="date")
    protein_intake: float = Field(alias="proteinIntake", ge=0, allow_inf_nan=False)
    calorie_intake: float = Field(alias="calorieIntake", ge=0, allow_inf_nan=False)

    @field_validator("day", mode="before")
    @classmethod
    def _coerce_day(cls, value: object, info: ValidationInfo) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            value = REFERENCE_DATE + timedelta(seconds=value)
        elif isinstance(value, str) and "T" in value:
            value = datetime.fromisoformat(value)
        if not isinstance(value, datetime):
            return value
        zone = (info.context or {}).get("zone")
        if value.tzinfo is not None and zone is not None:
            value = value.astimezone(zone)
        return value.date()

    @classmethod
    def from_entry(cls, entry: DailyLogEntry) -> "DailyLogRecord":
        """Build a record from a domain entry."""
        return cls(
            day=entry.day,
            protein_intake=entry.protein_g,
            calorie_intake=entry.calories,
        )

    def to_entry(self) -> DailyLogEntry:
        """Convert the record into a domain entry."""
        return DailyLogEntry(
            day=self.day,
            protein_g=self.protein_intake,
            calories=self.calorie_intake,
        )


def encode_entries(entries: list[DailyLogEntry]) -> list[dict[str, object]]:
    """Serialize entries into JSON-compatible records."""
    return [
        DailyLogRecord.from_entry(entry).model_dump(mode="json", by_alias=True)
        for entry in entries
    ]


def decode_entries(raw: object, zone: tzinfo = UTC) -> list[DailyLogEntry]:
    """Parse stored records, skipping malformed ones.

    Instants are assigned to their calendar day in `zone`, the same rule the
    ledger applies to aware datetimes.

    Older app versions appended one record per intake event holding the running
    total for the day, so when a day repeats the last record wins.
    """
    if raw is None:
        return []
    if isinstance(raw, bytes | str):
        try:
            raw = json.loads(raw)
        except ValueError:
            _logger.warning("Stored daily logs are not valid JSON; ignoring them")
            return []
    if not isinstance(raw, list):
        _logger.warning("Stored daily logs have unexpected type %s", type(raw).__name__)
        return []

    by_day: dict[date, DailyLogEntry] = {}
    for index, item in enumerate(raw):
        try:
            record = DailyLogRecord.model_validate(item, context={"zone": zone})
        except (ValidationError, ValueError, OverflowError):
            _logger.warning("Skipping malformed daily log record at index %s", index)
            continue
        if record.day in by_day:
            _logger.warning("Collapsing duplicate daily log for %s", record.day)
            del by_day[record.day]
        by_day[record.day] = record.to_entry()
    return list(by_day.values())


def decode_goal(raw: object) -> float:
    """Parse a stored goal value, defaulting to zero."""
    if isinstance(raw, bool) or not isinstance(raw, int | float | str):
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value
