"""
Domain models for salon scheduling: catalog records, appointments and time ranges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

import pendulum
from pendulum import DateTime

logger = logging.getLogger(__name__)


# Sunday-first, matching the weekday keys stored with employee working hours.
WEEKDAY_KEYS = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

DEFAULT_TIMEZONE = "America/Sao_Paulo"


def parse_clock(value: Any) -> Optional[time]:
    """
    Parse an "HH:MM" string into a time of day.

    Returns None for anything that is not a valid clock time.
    """
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        return None

    parts = value.strip().split(":")
    if len(parts) < 2:
        return None

    try:
        hour, minute = int(parts[0]), int(parts[1])
        return time(hour=hour, minute=minute)
    except ValueError:
        return None


def weekday_index(day: date) -> int:
    """Return the Sunday-first weekday index (0=Sunday, 6=Saturday)."""
    return day.isoweekday() % 7


def at_clock(day: date, clock: time, tz: str = DEFAULT_TIMEZONE) -> DateTime:
    """Anchor a time of day on a calendar date."""
    return pendulum.datetime(
        day.year, day.month, day.day, clock.hour, clock.minute, tz=tz
    )


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    @classmethod
    def starting_at(cls, start: DateTime, minutes: int) -> "TimeRange":
        """Build a range of the given length from a start datetime."""
        return cls(start=start, end=start.add(minutes=minutes))

    def overlaps(self, other: "TimeRange") -> bool:
        """Half-open overlap check: touching endpoints do not overlap."""
        return self.start < other.end and self.end > other.start


class SchedulingType(str, Enum):
    """How booking conflicts are scoped inside a tenant."""
    INDIVIDUAL = "individual"
    SHARED = "shared"

    @classmethod
    def parse(cls, value: Any) -> "SchedulingType":
        """Anything other than exactly "individual" is treated as shared."""
        if isinstance(value, cls):
            return value
        if value == cls.INDIVIDUAL.value:
            return cls.INDIVIDUAL
        return cls.SHARED


class PaymentMethod(str, Enum):
    """Payment method recorded with an appointment."""
    PIX = "pix"
    CARD = "card"
    DEBIT = "debit"
    LOCAL = "local"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "PaymentMethod":
        """
        Missing values default to CARD. Unrecognised values map to OTHER,
        which carries no processing fee.
        """
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.CARD
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Shift:
    """A contiguous working interval within one day."""
    start: time
    end: time

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Shift start {self.start} must be before end {self.end}")

    def on(self, day: date, tz: str = DEFAULT_TIMEZONE) -> TimeRange:
        """Return this shift as a concrete range on a calendar date."""
        return TimeRange(start=at_clock(day, self.start, tz), end=at_clock(day, self.end, tz))


@dataclass
class WeeklySchedule:
    """
    Working hours of one employee, keyed by Sunday-first weekday index.
    """
    shifts: Dict[int, Tuple[Shift, ...]] = field(default_factory=dict)

    def shifts_for(self, day: date) -> Tuple[Shift, ...]:
        """Return the shifts for the weekday of ``day`` (possibly empty)."""
        return self.shifts.get(weekday_index(day), ())

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[Any, Any]]) -> "WeeklySchedule":
        """
        Build a schedule from raw records.

        Keys may be weekday names ("monday") or indices (0=Sunday). Each value
        is a list of {"start": "HH:MM", "end": "HH:MM"} entries; malformed
        entries are skipped.
        """
        shifts: Dict[int, Tuple[Shift, ...]] = {}

        for key, entries in (data or {}).items():
            index = _resolve_weekday_key(key)
            if index is None:
                logger.warning("Ignoring unknown weekday key in working hours: %r", key)
                continue

            day_shifts = []
            for entry in entries or []:
                try:
                    start = parse_clock(entry.get("start"))
                    end = parse_clock(entry.get("end"))
                    if start is None or end is None:
                        raise ValueError(f"invalid clock time in {entry!r}")
                    day_shifts.append(Shift(start=start, end=end))
                except (AttributeError, ValueError) as exc:
                    logger.warning("Skipping malformed shift for %s: %s", WEEKDAY_KEYS[index], exc)

            shifts[index] = tuple(day_shifts)

        return cls(shifts=shifts)


def _resolve_weekday_key(key: Any) -> Optional[int]:
    if isinstance(key, int):
        return key if 0 <= key <= 6 else None
    if isinstance(key, str):
        normalized = key.strip().lower()
        if normalized in WEEKDAY_KEYS:
            return WEEKDAY_KEYS.index(normalized)
        if normalized.isdigit():
            return _resolve_weekday_key(int(normalized))
    return None


@dataclass(frozen=True)
class Tenant:
    """One salon account."""
    id: str
    name: str = ""
    slug: str = ""
    scheduling_type: SchedulingType = SchedulingType.SHARED
    timezone: str = DEFAULT_TIMEZONE


@dataclass(frozen=True)
class Service:
    """A bookable service from the tenant catalog."""
    id: str
    tenant_id: str
    name: str
    duration: int
    buffer_before: int = 0
    buffer_after: int = 0
    price: float = 0.0

    @property
    def total_minutes(self) -> int:
        """Minutes blocked on the agenda, buffers included."""
        return self.buffer_before + self.duration + self.buffer_after


@dataclass
class Employee:
    """A professional with weekly working hours."""
    id: str
    tenant_id: str
    name: str
    working_hours: WeeklySchedule = field(default_factory=WeeklySchedule)
    commission_rate: Optional[float] = None  # percent


@dataclass(frozen=True)
class Appointment:
    """
    An existing booking.

    ``time`` is kept as the raw "HH:MM" string so a malformed value can be
    ignored at evaluation time instead of failing the whole snapshot.
    """
    id: str
    tenant_id: str
    staff_id: str
    date: date
    time: str
    duration: int
    status: str = "confirmed"
    service_id: Optional[str] = None
    price: float = 0.0
    payment_method: PaymentMethod = PaymentMethod.CARD

    def window(self, tz: str = DEFAULT_TIMEZONE) -> Optional[TimeRange]:
        """Return the booked range, or None if time or duration is unusable."""
        clock = parse_clock(self.time)
        if clock is None or self.duration <= 0:
            return None
        return TimeRange.starting_at(at_clock(self.date, clock, tz), self.duration)
