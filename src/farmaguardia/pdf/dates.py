"""Spanish calendar date tokens and year inference for duty calendars."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Pattern

from farmaguardia.config import local_now
from farmaguardia.model.duty import DutyDate, month_number

LOGGER = logging.getLogger(__name__)

_HYPHENS = "-‐‑‒–"
# Weekday prefixes, full or abbreviated: "lun 1 ene", "martes, 2-ene".
_WEEKDAYS = "lun|mar|mi[eé]|jue|vie|s[aá]b|dom"

_SHORT_DATE_RE = re.compile(
    rf"^\s*(?:(?P<weekday>{_WEEKDAYS})[^\W\d_]*\.?\s*,?\s+)?"
    rf"(?P<day>\d{{1,2}})\s*[{_HYPHENS}/ ]\s*(?P<month>[^\W\d_]{{3,10}})\.?"
    rf"(?:\s*[{_HYPHENS}/ ]\s*(?P<year>\d{{4}}|\d{{2}}))?\s*$",
    re.IGNORECASE,
)
_LONG_DATE_RE = re.compile(
    r"^\s*(?:(?P<weekday>[^\W\d_]+)\s*,?\s*)?(?P<day>\d{1,2})\s+de\s+(?P<month>[^\W\d_]+)"
    r"(?:\s*,?\s+(?:de(?:l)?\s+)?(?P<year>\d{4}))?\s*$",
    re.IGNORECASE,
)
_DATE_PATTERNS: Iterable[Pattern[str]] = (_SHORT_DATE_RE, _LONG_DATE_RE)

# A ``dd-mon`` token anywhere in a line, as printed by the market-town calendars.
DATE_TOKEN_RE = re.compile(rf"(?<!\d)(\d{{1,2}})[{_HYPHENS}]([^\W\d_]{{3}})(?![^\W\d_])")

_YEAR_RE = re.compile(r"\b(20[2-3]\d)(?:\s*-\s*20[2-3]\d)?\b")
_URL_YEAR_RE = re.compile(r"(?<!\d)(20[2-3]\d)(?!\d)")
_DECEMBER_TOKEN_RE = re.compile(rf"\b\d{{1,2}}[{_HYPHENS}]dic\b", re.IGNORECASE)

_DECEMBER_WINDOW = 500
_MAX_YEAR_DISTANCE = 2


@dataclass(frozen=True, slots=True)
class DateParts:
    day: int
    month: int
    year: Optional[int] = None


def parse_date_parts(raw: str) -> Optional[DateParts]:
    """Split ``raw`` into day, month and the explicit year if one is printed."""

    if not raw:
        return None
    text = " ".join(raw.split())
    for pattern in _DATE_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        month = month_number(match.group("month"))
        if month is None:
            return None
        day = int(match.group("day"))
        year_token = match.group("year")
        year: Optional[int] = None
        if year_token:
            year = int(year_token)
            if len(year_token) == 2:
                year += 2000
        return DateParts(day=day, month=month, year=year)
    return None


def parse_date(
    raw: str,
    *,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> Optional[DutyDate]:
    """Parse ``[lun] dd-mon[-yy[yy]]`` or ``lunes, 1 de enero [2025]`` into a ``DutyDate``.

    A printed year wins; otherwise ``year`` is used, then the current year.
    Returns ``None`` for anything that is not a real calendar day.
    """

    parts = parse_date_parts(raw)
    if parts is None:
        return None
    resolved = parts.year or year
    if resolved is None:
        resolved = (today or local_now().date()).year
    try:
        return DutyDate.from_parts(parts.day, parts.month, resolved)
    except ValueError:
        LOGGER.debug("Rejected impossible date %r", raw)
        return None


def format_duty_date(value: DutyDate) -> str:
    """Return the canonical ``dd-mon-yyyy`` form (``dd-mon`` without a year)."""

    base = f"{value.day:02d}-{value.month_abbreviation}"
    if value.year is None:
        return base
    return f"{base}-{value.year:04d}"


def find_date_tokens(line: str) -> List[str]:
    """Return every ``dd-mon`` token in ``line`` in reading order."""

    return [match.group(0) for match in DATE_TOKEN_RE.finditer(line)]


class YearTracker:
    """Monotonic year assignment while walking a document top to bottom.

    The year moves forward on an explicit marker newer than the current one
    or on a December to January crossing, and never moves back.
    """

    def __init__(self, start_year: int) -> None:
        self.year = start_year
        self._last_month: Optional[int] = None

    def marker(self, year: int) -> int:
        if year > self.year:
            self.year = year
        elif year < self.year:
            LOGGER.debug("Ignoring year marker %s older than %s", year, self.year)
        self._last_month = None
        return self.year

    def resolve(self, day: int, month: int, explicit_year: Optional[int] = None) -> int:
        if explicit_year is not None:
            self.marker(explicit_year)
        elif self._last_month == 12 and month == 1:
            self.year += 1
            LOGGER.debug("Year rollover to %s at %02d-%02d", self.year, day, month)
        self._last_month = month
        return self.year

    def duty_date(self, parts: DateParts) -> Optional[DutyDate]:
        year = self.resolve(parts.day, parts.month, parts.year)
        try:
            return DutyDate.from_parts(parts.day, parts.month, year)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class YearDetection:
    year: int
    source: str
    warning: Optional[str] = None


def _year_distance_warning(year: int, current_year: int) -> tuple[bool, Optional[str]]:
    difference = abs(year - current_year)
    if difference > _MAX_YEAR_DISTANCE:
        return False, f"Year {year} is outside the valid range (±{_MAX_YEAR_DISTANCE} years from {current_year})"
    if difference == _MAX_YEAR_DISTANCE:
        return True, f"Year {year} is at the edge of the valid range (±{_MAX_YEAR_DISTANCE} years from {current_year})"
    return True, None


def _starts_in_december(text: str) -> bool:
    return bool(_DECEMBER_TOKEN_RE.search(text[:_DECEMBER_WINDOW]))


def detect_year(
    text: str,
    *,
    url: Optional[str] = None,
    today: Optional[date] = None,
) -> YearDetection:
    """Infer the year of the first entries of a calendar document.

    The first year printed in ``text`` is tried first, then the rightmost
    plausible year in ``url``. A calendar whose text opens with December dates
    started in the year before the one it is titled with.
    """

    current_year = (today or local_now().date()).year
    december = _starts_in_december(text or "")

    candidates = []
    match = _YEAR_RE.search(text or "")
    if match:
        candidates.append(("extracted", int(match.group(1))))
    if url:
        url_years = [int(token) for token in _URL_YEAR_RE.findall(url)]
        candidates.extend(("url", year) for year in reversed(url_years))

    for source, year in candidates:
        valid, warning = _year_distance_warning(year, current_year)
        if not valid:
            LOGGER.info("Discarding %s year %s: %s", source, year, warning)
            continue
        if december:
            adjusted = year - 1
            return YearDetection(
                year=adjusted,
                source=source,
                warning=f"Found year {year}, adjusted to {adjusted} for December dates at the start",
            )
        return YearDetection(year=year, source=source, warning=warning)

    if december:
        return YearDetection(
            year=current_year - 1,
            source="fallback_december",
            warning=f"No explicit year found; inferred {current_year - 1} from December dates",
        )
    return YearDetection(
        year=current_year,
        source="fallback_current",
        warning=f"No explicit year found; using current year {current_year}",
    )


__all__ = [
    "DATE_TOKEN_RE",
    "DateParts",
    "parse_date_parts",
    "parse_date",
    "format_duty_date",
    "find_date_tokens",
    "YearTracker",
    "YearDetection",
    "detect_year",
]
