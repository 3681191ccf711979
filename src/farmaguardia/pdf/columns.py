"""Fixed-ratio column extraction for calendar pages laid out as vertical bands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

try:  # pragma: no cover - optional dependency when tests run without PyMuPDF
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from .dates import parse_date_parts
from .geometry import rect_from_origin
from .scanner import GeometricTextScanner

LOGGER = logging.getLogger(__name__)

PAGE_MARGIN = 40.0
DATE_COLUMN_WIDTH_RATIO = 0.22
COLUMN_GAP = 5.0

_SUPPORTED_COLUMN_COUNTS = (2, 3)


@dataclass(slots=True)
class ColumnBand:
    index: int
    x0: float
    width: float

    @property
    def x1(self) -> float:
        return self.x0 + self.width


@dataclass(slots=True)
class ColumnExtraction:
    """Per-band line sequences for one page; bands are sized independently.

    ``year_markers`` holds year lines left pending at the bottom of the date
    band; they apply to the dates that follow on later pages.
    """

    bands: List[List[str]]
    columns: List[ColumnBand]
    scan_height: float
    increment: float
    year_markers: List[int] = field(default_factory=list)

    @property
    def dates(self) -> List[str]:
        return self.bands[0]


def column_layout(page_width: float, column_count: int) -> List[ColumnBand]:
    """Return the date band followed by equal-width data bands."""

    if column_count not in _SUPPORTED_COLUMN_COUNTS:
        raise ValueError(f"column_count must be one of {_SUPPORTED_COLUMN_COUNTS}, got {column_count}")

    content_width = page_width - 2 * PAGE_MARGIN
    date_width = content_width * DATE_COLUMN_WIDTH_RATIO
    data_width = (content_width - date_width) / (column_count - 1)

    columns = [ColumnBand(index=0, x0=PAGE_MARGIN, width=date_width)]
    for index in range(1, column_count):
        previous = columns[-1]
        columns.append(ColumnBand(index=index, x0=previous.x1 + COLUMN_GAP, width=data_width))
    return columns


def scan_column(
    scanner: GeometricTextScanner,
    column: ColumnBand,
    scan_height: float,
    increment: float,
) -> List[Tuple[float, str]]:
    """Scan ``column`` top to bottom and return ``(y, text)`` hits."""

    if increment <= 0:
        raise ValueError("increment must be positive")

    hits: List[Tuple[float, str]] = []
    step = 0
    while True:
        y = step * increment
        if y >= scanner.height:
            break
        text = scanner.text_in_rect(rect_from_origin(column.x0, y, column.width, scan_height))
        if text:
            hits.append((y, text))
        step += 1
    return hits


def remove_adjacent_duplicates(lines: Sequence[str]) -> List[str]:
    """Collapse runs of identical consecutive lines; later repeats survive."""

    result: List[str] = []
    for line in lines:
        if result and result[-1] == line:
            continue
        result.append(line)
    return result


def apply_pending_year(lines: Sequence[str], current_year: int) -> Tuple[List[str], List[int]]:
    """Fold standalone year lines into the next date line.

    Only the current and next calendar year count as markers. A marker is
    appended to the next line that parses as a date without a printed year;
    a dated line consumes it unchanged. Returns the lines plus the markers
    that never reached a date line, so callers can carry them forward.
    """

    accepted = {str(current_year), str(current_year + 1)}
    pending: Optional[str] = None
    output: List[str] = []
    for line in lines:
        stripped = line.strip()
        if stripped in accepted:
            if pending is not None:
                LOGGER.debug("Year marker %s superseded by %s", pending, stripped)
            pending = stripped
            continue
        parts = parse_date_parts(stripped) if pending is not None else None
        if parts is not None:
            output.append(stripped if parts.year is not None else f"{stripped} {pending}")
            pending = None
            continue
        output.append(stripped)
    return output, [int(pending)] if pending is not None else []


def extract_columns(
    page: "fitz.Page",
    column_count: int,
    *,
    current_year: int,
    scanner: Optional[GeometricTextScanner] = None,
) -> ColumnExtraction:
    """Return band texts for ``page`` split into ``column_count`` bands."""

    scanner = scanner or GeometricTextScanner(page)
    columns = column_layout(scanner.width, column_count)

    scan_height = scanner.smallest_font_size()
    increment = scan_height / 2.0

    bands: List[List[str]] = []
    for column in columns:
        hits = scan_column(scanner, column, scan_height, increment)
        bands.append(remove_adjacent_duplicates([text for _, text in hits]))

    dates, markers = apply_pending_year(bands[0], current_year)
    bands[0] = dates

    LOGGER.debug(
        "Extracted %s bands (lines=%s) scan_height=%.2f increment=%.2f",
        column_count,
        [len(band) for band in bands],
        scan_height,
        increment,
    )
    return ColumnExtraction(
        bands=bands,
        columns=columns,
        scan_height=scan_height,
        increment=increment,
        year_markers=markers,
    )


def align_bands(*sequences: Sequence) -> Tuple[List[Tuple], Dict[int, int]]:
    """Zip ``sequences`` by index up to the shortest one.

    Returns the aligned rows plus ``{band_index: excess_count}`` for every
    longer band, so callers can report the mismatch instead of hiding it.
    """

    if not sequences:
        return [], {}
    shortest = min(len(seq) for seq in sequences)
    rows = list(zip(*(seq[:shortest] for seq in sequences)))
    excess = {
        index: len(seq) - shortest
        for index, seq in enumerate(sequences)
        if len(seq) > shortest
    }
    return rows, excess


__all__ = [
    "PAGE_MARGIN",
    "DATE_COLUMN_WIDTH_RATIO",
    "COLUMN_GAP",
    "ColumnBand",
    "ColumnExtraction",
    "column_layout",
    "scan_column",
    "remove_adjacent_duplicates",
    "apply_pending_year",
    "extract_columns",
    "align_bands",
]
