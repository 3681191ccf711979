"""Text-based strategy shared by the market-town rotation calendars.

These calendars run multi-day blocks: a row lists several ``dd-mon`` dates
and the pharmacy code covering all of them, either on the same line or on a
following line. Every date becomes its own full-day entry.
"""

from __future__ import annotations

import logging
import re
from typing import List, Mapping, Optional, Pattern, Sequence

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from farmaguardia.model.duty import MONTH_ABBREVIATIONS, MONTH_NAMES, WEEKDAY_NAMES, DutyTimeSpan
from farmaguardia.model.pharmacy import PharmacySchedule
from farmaguardia.pdf.dates import DATE_TOKEN_RE, YearTracker, find_date_tokens, parse_date_parts
from farmaguardia.pdf.document import iter_pages, page_text

from .base import DocumentStrategy, ParseReport, sort_schedules
from .directory import DirectoryEntry, lookup

LOGGER = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"[\s\u00A0\u2000-\u200A\u2028\u2029\u202F\u205F\u3000]+")

_WEEKDAYS_PATTERN = "|".join(WEEKDAY_NAMES + ("miercoles", "sabado"))
_MONTHS_PATTERN = "|".join(MONTH_NAMES + ("setiembre",) + MONTH_ABBREVIATIONS + ("sept",))

FURNITURE_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"COLEGIO", re.IGNORECASE),
    re.compile(r"TURNOS", re.IGNORECASE),
    re.compile(rf"^(?:(?:{_WEEKDAYS_PATTERN})\b[\s,.]*){{2,}}$", re.IGNORECASE),
    re.compile(rf"^(?:{_MONTHS_PATTERN})\.?(?:\s+(?:de\s+)?\d{{4}})?$", re.IGNORECASE),
    re.compile(r"^(?:p[áa]g(?:ina)?\.?\s*)?\d{1,3}(?:\s*(?:/|de)\s*\d{1,3})?$", re.IGNORECASE),
)

# Remainders that are never pharmacy codes: weekday words, connectors, punctuation.
_NOISE_RE = re.compile(rf"\b(?:{_WEEKDAYS_PATTERN}|y|al|del|de)\b|[^\w]", re.IGNORECASE)
_MIN_CODE_LETTERS = 3


def normalize_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text or "").strip()


def is_furniture(line: str) -> bool:
    return any(pattern.search(line) for pattern in FURNITURE_PATTERNS)


class MarketTownStrategy(DocumentStrategy):
    """Dates followed by a pharmacy code, resolved through a static directory."""

    directory: Mapping[str, DirectoryEntry] = {}
    # Remainders matching this are place names, not pharmacy codes.
    location_re: Optional[Pattern[str]] = None

    def match_code(self, line: str) -> Optional[str]:
        """Return the directory code ``line`` refers to, if any."""

        lowered = line.lower()
        for code in self.directory:
            if normalize_whitespace(code).lower() in lowered:
                return code
        return None

    def unknown_code(self, remainder: str) -> Optional[str]:
        """Return ``remainder`` as a raw code when it reads like one."""

        if self.location_re is not None and self.location_re.search(remainder):
            return None
        letters = sum(1 for ch in _NOISE_RE.sub("", remainder) if ch.isalpha())
        if letters < _MIN_CODE_LETTERS:
            return None
        return remainder

    def parse_document(self, doc: "fitz.Document", report: ParseReport) -> List[PharmacySchedule]:
        tracker: Optional[YearTracker] = None
        schedules: List[PharmacySchedule] = []
        pending: List[str] = []

        for page in iter_pages(doc):
            text = page_text(page)
            if tracker is None:
                tracker = YearTracker(self.detect_start_year(text))
            for raw_line in text.splitlines():
                pending = self._consume_line(raw_line, pending, tracker, schedules, report)

        if pending:
            report.drop("dates without a pharmacy", pending)
        return sort_schedules(schedules)

    def parse_lines(
        self,
        lines: Sequence[str],
        start_year: int,
        report: Optional[ParseReport] = None,
    ) -> List[PharmacySchedule]:
        """Parse already-extracted text lines, starting at ``start_year``."""

        report = report if report is not None else ParseReport(self.region_id)
        tracker = YearTracker(start_year)
        schedules: List[PharmacySchedule] = []
        pending: List[str] = []
        for raw_line in lines:
            pending = self._consume_line(raw_line, pending, tracker, schedules, report)
        if pending:
            report.drop("dates without a pharmacy", pending)
        return sort_schedules(schedules)

    def _consume_line(
        self,
        raw_line: str,
        pending: List[str],
        tracker: YearTracker,
        schedules: List[PharmacySchedule],
        report: ParseReport,
    ) -> List[str]:
        line = normalize_whitespace(raw_line)
        if not line or is_furniture(line):
            return pending

        tokens = find_date_tokens(line)
        remainder = normalize_whitespace(DATE_TOKEN_RE.sub(" ", line)).strip(" .,;:-")

        if tokens:
            if pending:
                report.drop("dates without a pharmacy", pending)
            pending = tokens

        code = self.match_code(line)
        if code is None and tokens and remainder:
            code = self.unknown_code(remainder)
            if code is not None:
                LOGGER.info("[%s] unknown pharmacy code %r", self.region_id, code)

        if code is None or not pending:
            return pending

        schedules.extend(self._expand(pending, code, tracker, report))
        return []

    def _expand(
        self,
        tokens: Sequence[str],
        code: str,
        tracker: YearTracker,
        report: ParseReport,
    ) -> List[PharmacySchedule]:
        pharmacy = lookup(self.directory, code).to_pharmacy()
        expanded: List[PharmacySchedule] = []
        for token in tokens:
            parts = parse_date_parts(token)
            duty_date = tracker.duty_date(parts) if parts is not None else None
            if duty_date is None:
                report.drop("unparseable date", token)
                continue
            expanded.append(PharmacySchedule(date=duty_date, shifts={DutyTimeSpan.FULL_DAY: (pharmacy,)}))
        report.keep(len(expanded))
        return expanded


__all__ = ["WHITESPACE_RE", "FURNITURE_PATTERNS", "normalize_whitespace", "is_furniture", "MarketTownStrategy"]
