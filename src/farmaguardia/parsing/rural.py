"""Segovia Rural: one row per date, one fixed-position cell per health zone.

Rows are found by scanning for the first row whose date cell holds a
``dd-mon-yy`` date and then walking the empty/text transitions down the page.
Each zone cell is read between its row start and the next row start, so a
cell spilling over two lines is still attributed to a single date.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from farmaguardia.model.duty import DutyDate, month_number
from farmaguardia.model.pharmacy import Pharmacy, ZBSSchedule
from farmaguardia.model.regions import SEGOVIA_RURAL, ZBS, ZBS_CATALOGUE
from farmaguardia.pdf.document import iter_pages
from farmaguardia.pdf.rows import CellScanArea, RowCells, detect_row_boundaries, find_first_coherent_row, scan_row
from farmaguardia.pdf.scanner import GeometricTextScanner

from .base import DocumentStrategy, ParseReport, sort_schedules
from .directory import (
    CANTALEJO_CODES,
    LA_GRANJA_DOLORES,
    LA_GRANJA_VALENCIANA,
    RURAL_ALIASES,
    RURAL_PHARMACIES,
    lookup,
)
from .market import normalize_whitespace

LOGGER = logging.getLogger(__name__)

ROW_INCREMENT = 8.0
CELL_ROWS = 3

DATE_AREA = CellScanArea(x=42.0, width=42.0, rows=CELL_ROWS, increment=ROW_INCREMENT)

# Zone id -> printed column; zones absent here are not printed in the calendar.
ZONE_AREAS: Dict[str, CellScanArea] = {
    "riaza-sepulveda": CellScanArea(x=175.0, width=200.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "la-granja": CellScanArea(x=390.0, width=100.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "la-sierra": CellScanArea(x=500.0, width=70.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "fuentidueña": CellScanArea(x=570.0, width=50.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "carbonero": CellScanArea(x=620.0, width=80.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "navas-asuncion": CellScanArea(x=700.0, width=65.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
    "villacastin": CellScanArea(x=770.0, width=60.0, rows=CELL_ROWS, increment=ROW_INCREMENT),
}

RURAL_DATE_RE = re.compile(r"(?<!\d)(\d{1,2})\s*-\s*(ene|feb|mar|abr|may|jun|jul|ago|sep|oct|nov|dic)\s*-\s*(\d{2})(?!\d)", re.IGNORECASE)

# The two La Granja pharmacies alternate weekly; week 0 starts on this Monday.
LA_GRANJA_EPOCH = date(2024, 12, 30)

# A Riaza cell can list the Soria pharmacy and Sepúlveda on one line.
_SPLIT_CODES: Dict[str, Tuple[str, ...]] = {
    "S.E. GORMAZ (SORIA) SEPÚLVEDA": ("S.E. GORMAZ (SORIA)", "SEPÚLVEDA"),
}


def parse_rural_date(text: str) -> Optional[DutyDate]:
    """Return the ``dd-mon-yy`` date found in ``text``, if it is a real day."""

    match = RURAL_DATE_RE.search(text or "")
    if not match:
        return None
    day, month_token, year_token = match.groups()
    month = month_number(month_token)
    if month is None:
        return None
    try:
        return DutyDate.from_parts(int(day), month, 2000 + int(year_token))
    except ValueError:
        return None


def la_granja_code(day: date) -> str:
    weeks = (day - LA_GRANJA_EPOCH).days // 7
    return LA_GRANJA_DOLORES if weeks % 2 == 0 else LA_GRANJA_VALENCIANA


def split_codes(cell_text: str) -> List[str]:
    """Turn a zone cell into directory codes."""

    text = normalize_whitespace(cell_text).upper()
    if not text:
        return []
    if text in _SPLIT_CODES:
        return list(_SPLIT_CODES[text])
    return [RURAL_ALIASES.get(text, text)]


def zone_pharmacy(code: str, zone: ZBS) -> Pharmacy:
    entry = lookup(RURAL_PHARMACIES, code)
    if code not in RURAL_PHARMACIES:
        LOGGER.info("[%s] unknown pharmacy code %r in %s", SEGOVIA_RURAL.id, code, zone.id)
    return entry.to_pharmacy(
        additional_info=f"Horario: {zone.hours.label} - ZBS: {zone.name}",
        operating_hours=zone.hours,
        zone_id=zone.id,
    )


def _row_has_date(cells: RowCells) -> bool:
    return bool(cells) and parse_rural_date(" ".join(cells[0])) is not None


class RuralStrategy(DocumentStrategy):
    """One ``ZBSSchedule`` per printed date, every catalogue zone present."""

    region_id = SEGOVIA_RURAL.id
    zones: Sequence[ZBS] = ZBS_CATALOGUE

    def parse_document(self, doc: "fitz.Document", report: ParseReport) -> List[ZBSSchedule]:
        schedules: List[ZBSSchedule] = []
        seen: Set[date] = set()
        areas = self.cell_areas()

        for page_index, page in enumerate(iter_pages(doc)):
            scanner = GeometricTextScanner(page)
            boundaries = self.row_starts(scanner)
            if not boundaries:
                LOGGER.info("[%s] no dated rows on page %s", self.region_id, page_index + 1)
                continue

            for index, row_y in enumerate(boundaries):
                end_y = boundaries[index + 1] if index + 1 < len(boundaries) else scanner.height
                cells = scan_row(scanner, areas, row_y, end_y)
                schedule = self.build_schedule(cells, report, page_index)
                if schedule is None:
                    continue
                day = schedule.date.to_date()
                if day in seen:
                    LOGGER.debug("Repeated date %s on page %s", day, page_index + 1)
                    continue
                seen.add(day)
                schedules.append(schedule)
                report.keep()

        return sort_schedules(schedules)

    def cell_areas(self) -> List[CellScanArea]:
        """Date cell first, then the printed zones in catalogue order."""

        return [DATE_AREA] + [ZONE_AREAS[zone.id] for zone in self.zones if zone.id in ZONE_AREAS]

    def row_starts(self, scanner: GeometricTextScanner) -> List[float]:
        first_row = find_first_coherent_row(
            scanner, self.cell_areas(), 0.0, scanner.height, ROW_INCREMENT, _row_has_date
        )
        if first_row is None:
            return []
        return detect_row_boundaries(scanner, first_row, scanner.height, ROW_INCREMENT, ROW_INCREMENT)

    def build_schedule(
        self,
        cells: RowCells,
        report: ParseReport,
        page_index: int = 0,
    ) -> Optional[ZBSSchedule]:
        """Map one scanned row (date cell first, then printed zones) to a schedule."""

        date_text = " ".join(cells[0]) if cells else ""
        duty_date = parse_rural_date(date_text)
        if duty_date is None:
            if any(ch.isdigit() for ch in date_text):
                report.drop(f"unparseable date on page {page_index + 1}", date_text)
            else:
                LOGGER.debug("Skipping undated row %r", cells)
            return None

        printed = [zone for zone in self.zones if zone.id in ZONE_AREAS]
        cell_text = {zone.id: " ".join(lines) for zone, lines in zip(printed, cells[1:])}

        day = duty_date.to_date()
        zones: Dict[str, Tuple[Pharmacy, ...]] = {}
        for zone in self.zones:
            if zone.id == "la-granja":
                codes = [la_granja_code(day)]
            elif zone.id == "cantalejo":
                codes = list(CANTALEJO_CODES)
            else:
                codes = split_codes(cell_text.get(zone.id, ""))
            zones[zone.id] = tuple(zone_pharmacy(code, zone) for code in codes)
        return ZBSSchedule.from_zones(duty_date, zones)


__all__ = [
    "DATE_AREA",
    "ZONE_AREAS",
    "LA_GRANJA_EPOCH",
    "parse_rural_date",
    "la_granja_code",
    "split_codes",
    "zone_pharmacy",
    "RuralStrategy",
]
