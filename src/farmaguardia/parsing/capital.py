"""Segovia Capital: date / day-shift / night-shift column calendar."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Set

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from farmaguardia.model.duty import DutyTimeSpan, TimeRange
from farmaguardia.model.pharmacy import PLACEHOLDER_PHONE, Pharmacy, PharmacySchedule
from farmaguardia.model.regions import SEGOVIA_CAPITAL
from farmaguardia.pdf.columns import align_bands, extract_columns
from farmaguardia.pdf.dates import YearTracker, parse_date_parts
from farmaguardia.pdf.document import iter_pages, page_text
from farmaguardia.pdf.scanner import GeometricTextScanner

from .base import DocumentStrategy, ParseReport, sort_schedules

LOGGER = logging.getLogger(__name__)

PHARMACY_MARKER = "FARMACIA"

_PHONE_RE = re.compile(r"Tfno\.?\s*:?\s*(?P<phone>\d{3}\s*\d{3}\s*\d{3}|\d{3}\s*\d{6})", re.IGNORECASE)
_DIGIT_RE = re.compile(r"\d")


def parse_pharmacy_cells(
    lines: Sequence[str],
    report: Optional[ParseReport] = None,
    *,
    band: str = "",
) -> List[Pharmacy]:
    """Group a pharmacy band into pharmacies.

    Each cell reads top to bottom as name (containing ``FARMACIA``), address
    and an info line carrying the phone. Lines before the first name are
    column headers.
    """

    groups: List[List[str]] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        if PHARMACY_MARKER in line.upper():
            groups.append([line])
        elif groups:
            groups[-1].append(line)
        else:
            LOGGER.debug("Skipping %s band header line %r", band or "pharmacy", line)

    pharmacies: List[Pharmacy] = []
    for group in groups:
        if len(group) < 2:
            if report is not None:
                report.drop(f"incomplete {band or 'pharmacy'} cell", group)
            continue
        name, address = group[0], group[1]
        info = " ".join(group[2:]).strip()
        pharmacies.append(_build_pharmacy(name, address, info))
    return pharmacies


def _build_pharmacy(name: str, address: str, info: str) -> Pharmacy:
    phone = PLACEHOLDER_PHONE
    additional = info
    match = _PHONE_RE.search(info)
    if match:
        phone = "".join(match.group("phone").split())
        additional = (info[: match.start()] + info[match.end():]).strip(" -,;")
    return Pharmacy(
        name=name,
        address=address,
        phone=phone,
        additional_info=additional or None,
        operating_hours=TimeRange.parse(additional) if additional else None,
    )


class CapitalStrategy(DocumentStrategy):
    """One entry per printed date with a day and a night pharmacy."""

    region_id = SEGOVIA_CAPITAL.id
    column_count = 3

    def parse_document(self, doc: "fitz.Document", report: ParseReport) -> List[PharmacySchedule]:
        current_year = self.today().year
        tracker: Optional[YearTracker] = None
        schedules: List[PharmacySchedule] = []

        for page_index, page in enumerate(iter_pages(doc)):
            if tracker is None:
                tracker = YearTracker(self.detect_start_year(page_text(page)))

            scanner = GeometricTextScanner(page)
            extraction = extract_columns(
                page,
                self.column_count,
                current_year=current_year,
                scanner=scanner,
            )
            day_pharmacies = parse_pharmacy_cells(extraction.bands[1], report, band="day")
            night_pharmacies = parse_pharmacy_cells(extraction.bands[2], report, band="night")

            seen: Set = set()
            dates = []
            for raw in extraction.dates:
                parts = parse_date_parts(raw)
                if parts is None:
                    if _DIGIT_RE.search(raw):
                        report.drop(f"unparseable date on page {page_index + 1}", raw)
                    else:
                        LOGGER.debug("Skipping date band text %r", raw)
                    continue
                duty_date = tracker.duty_date(parts)
                if duty_date is None:
                    report.drop(f"impossible date on page {page_index + 1}", raw)
                    continue
                key = duty_date.to_date()
                if key in seen:
                    LOGGER.debug("Repeated date %s on page %s", key, page_index + 1)
                    continue
                seen.add(key)
                dates.append(duty_date)
            for year in extraction.year_markers:
                tracker.marker(year)

            rows, excess = align_bands(dates, day_pharmacies, night_pharmacies)
            for band_index, count in excess.items():
                label = ("date", "day", "night")[band_index]
                for _ in range(count):
                    report.drop(f"unmatched {label} entry on page {page_index + 1}")

            for duty_date, day_pharmacy, night_pharmacy in rows:
                schedules.append(
                    PharmacySchedule(
                        date=duty_date,
                        shifts={
                            DutyTimeSpan.CAPITAL_DAY: (day_pharmacy,),
                            DutyTimeSpan.CAPITAL_NIGHT: (night_pharmacy,),
                        },
                    )
                )
            report.keep(len(rows))

        return sort_schedules(schedules)


__all__ = ["PHARMACY_MARKER", "parse_pharmacy_cells", "CapitalStrategy"]
