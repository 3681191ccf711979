"""Calendar and shift-window value types for duty schedules."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Optional, Union

from farmaguardia.config import local_tz

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)
MONTH_ABBREVIATIONS = tuple(name[:3] for name in MONTH_NAMES)

# Monday first, matching ``date.weekday()``.
WEEKDAY_NAMES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")

MINUTES_PER_DAY = 24 * 60

_HOURS_RE = re.compile(
    r"(?P<h0>\d{1,2})(?::(?P<m0>\d{2}))?\s*h?\s*[-‐–a]\s*(?P<h1>\d{1,2})(?::(?P<m1>\d{2}))?\s*h",
    re.IGNORECASE,
)
_FULL_DAY_RE = re.compile(r"\b24\s*h", re.IGNORECASE)

TimeOfDay = Union[time, datetime]


def month_number(name: str) -> Optional[int]:
    """Return 1-12 for a Spanish month name or three-letter abbreviation."""

    token = (name or "").strip().lower().rstrip(".")
    if token in MONTH_NAMES:
        return MONTH_NAMES.index(token) + 1
    if token in MONTH_ABBREVIATIONS:
        return MONTH_ABBREVIATIONS.index(token) + 1
    # printed calendars also use "sept"
    if token == "sept":
        return 9
    return None


def _minute_of_day(value: TimeOfDay) -> float:
    return value.hour * 60 + value.minute + value.second / 60.0 + value.microsecond / 60_000_000.0


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Clock-time window in minutes after midnight; ``end`` may be 1440."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < MINUTES_PER_DAY:
            raise ValueError(f"start out of range: {self.start}")
        if not 0 < self.end <= MINUTES_PER_DAY:
            raise ValueError(f"end out of range: {self.end}")

    @property
    def crosses_midnight(self) -> bool:
        return self.end <= self.start

    @property
    def is_full_day(self) -> bool:
        return self.start == 0 and self.end == MINUTES_PER_DAY

    def contains(self, value: TimeOfDay) -> bool:
        """Return ``True`` when ``value``'s time of day falls in ``[start, end)``."""

        minute = _minute_of_day(value)
        if self.crosses_midnight:
            return minute >= self.start or minute < self.end
        return self.start <= minute < self.end

    @property
    def label(self) -> str:
        if self.is_full_day:
            return "24h"
        return f"{_format_hour(self.start)}-{_format_hour(self.end)}"

    @classmethod
    def parse(cls, text: str) -> Optional["TimeRange"]:
        """Parse annotations such as ``"10h-22h"``, ``"10:15h-22h"`` or ``"24h"``."""

        if not text:
            return None
        match = _HOURS_RE.search(text)
        if match:
            start = int(match.group("h0")) * 60 + int(match.group("m0") or 0)
            end = int(match.group("h1")) * 60 + int(match.group("m1") or 0)
            if start >= MINUTES_PER_DAY or end > MINUTES_PER_DAY or end == 0:
                return None
            return cls(start, end)
        if _FULL_DAY_RE.search(text):
            return FULL_DAY_HOURS
        return None


def _format_hour(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if mins:
        return f"{hours}:{mins:02d}h"
    return f"{hours}h"


FULL_DAY_HOURS = TimeRange(0, MINUTES_PER_DAY)


class DutyTimeSpan(Enum):
    """Closed set of shift windows a schedule entry can be keyed by."""

    FULL_DAY = ("full-day", 0, MINUTES_PER_DAY, "Guardia de 24 horas")
    CAPITAL_DAY = ("capital-day", 10 * 60 + 15, 22 * 60, "Guardia diurna")
    CAPITAL_NIGHT = ("capital-night", 22 * 60, 10 * 60 + 15, "Guardia nocturna")
    RURAL_DAYTIME = ("rural-daytime", 10 * 60, 20 * 60, "Guardia diurna")
    RURAL_EXTENDED_DAYTIME = ("rural-extended-daytime", 10 * 60, 22 * 60, "Guardia diurna extendida")

    def __init__(self, key: str, start: int, end: int, label: str) -> None:
        self.key = key
        self.hours = TimeRange(start, end)
        self.label = label

    @property
    def crosses_midnight(self) -> bool:
        return self.hours.crosses_midnight

    def contains(self, instant: TimeOfDay) -> bool:
        return self.hours.contains(instant)

    def duty_date_for(self, instant: datetime) -> date:
        """Return the calendar day whose entry owns ``instant`` under this span.

        Early-morning instants of a midnight-crossing span belong to the
        entry of the previous calendar day.
        """

        if self.crosses_midnight and _minute_of_day(instant) < self.hours.end:
            return instant.date() - timedelta(days=1)
        return instant.date()

    @property
    def display_hours(self) -> str:
        start = self.hours.start
        end = self.hours.end
        return f"{start // 60:02d}:{start % 60:02d} - {end // 60:02d}:{end % 60:02d}"

    @classmethod
    def from_key(cls, key: str) -> "DutyTimeSpan":
        for member in cls:
            if member.key == key:
                return member
        raise KeyError(key)

    @classmethod
    def for_hours(cls, hours: Optional[TimeRange]) -> "DutyTimeSpan":
        """Map an operating-hours range to the span that models it."""

        if hours is None or hours.is_full_day:
            return cls.FULL_DAY
        for member in (cls.RURAL_DAYTIME, cls.RURAL_EXTENDED_DAYTIME, cls.CAPITAL_DAY, cls.CAPITAL_NIGHT):
            if member.hours == hours:
                return member
        raise ValueError(f"No duty span covers {hours.label}")


@dataclass(frozen=True, slots=True)
class DutyDate:
    """A calendar day as printed in a duty calendar.

    ``year`` stays ``None`` until it is inferred; :meth:`to_date` refuses to
    guess it.
    """

    day_of_week: str
    day: int
    month: str
    year: Optional[int] = None

    def __post_init__(self) -> None:
        number = month_number(self.month)
        if number is None:
            raise ValueError(f"Unknown month: {self.month!r}")
        object.__setattr__(self, "month", MONTH_NAMES[number - 1])
        object.__setattr__(self, "day_of_week", (self.day_of_week or "").strip().lower())
        # Leap year stand-in keeps 29-feb valid while the year is unknown.
        limit = calendar.monthrange(self.year if self.year is not None else 2024, number)[1]
        if not 1 <= self.day <= limit:
            raise ValueError(f"Invalid day {self.day} for {self.month}")

    @classmethod
    def from_date(cls, value: date) -> "DutyDate":
        return cls(
            day_of_week=WEEKDAY_NAMES[value.weekday()],
            day=value.day,
            month=MONTH_NAMES[value.month - 1],
            year=value.year,
        )

    @classmethod
    def from_parts(cls, day: int, month: int, year: Optional[int]) -> "DutyDate":
        weekday = ""
        if year is not None:
            weekday = WEEKDAY_NAMES[date(year, month, day).weekday()]
        return cls(day_of_week=weekday, day=day, month=MONTH_NAMES[month - 1], year=year)

    @property
    def month_number(self) -> int:
        return MONTH_NAMES.index(self.month) + 1

    @property
    def month_abbreviation(self) -> str:
        return MONTH_ABBREVIATIONS[self.month_number - 1]

    def with_year(self, year: int) -> "DutyDate":
        return DutyDate.from_parts(self.day, self.month_number, year)

    def to_date(self) -> date:
        if self.year is None:
            raise ValueError(f"Year not resolved for {self.day} {self.month}")
        return date(self.year, self.month_number, self.day)

    def to_timestamp(self, tz: Optional[tzinfo] = None) -> float:
        """Return the POSIX timestamp of midnight on this day in ``tz`` (default: duty zone)."""

        midnight = datetime.combine(self.to_date(), time.min, tzinfo=tz or local_tz())
        return midnight.timestamp()

    def is_same_day(self, value: date) -> bool:
        return (
            self.year == value.year
            and self.month_number == value.month
            and self.day == value.day
        )

    def __str__(self) -> str:
        weekday = self.day_of_week.capitalize() if self.day_of_week else ""
        year = f" {self.year}" if self.year is not None else ""
        prefix = f"{weekday}, " if weekday else ""
        return f"{prefix}{self.day} de {self.month}{year}"


__all__ = [
    "MONTH_NAMES",
    "MONTH_ABBREVIATIONS",
    "WEEKDAY_NAMES",
    "MINUTES_PER_DAY",
    "FULL_DAY_HOURS",
    "TimeRange",
    "DutyTimeSpan",
    "DutyDate",
    "month_number",
]
