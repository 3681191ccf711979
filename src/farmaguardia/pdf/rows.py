"""Row-oriented scanning for tables whose rows have uneven heights."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from .geometry import rect_from_origin
from .scanner import GeometricTextScanner

RowCells = List[List[str]]
RowValidator = Callable[[RowCells], bool]

DEFAULT_ROW_INCREMENT = 8.0


@dataclass(slots=True)
class CellScanArea:
    """A fixed-width cell scanned in ``rows`` stacked strips of ``increment``."""

    x: float
    width: float
    rows: int = 1
    increment: float = DEFAULT_ROW_INCREMENT


def _as_scanner(page) -> GeometricTextScanner:
    if isinstance(page, GeometricTextScanner):
        return page
    return GeometricTextScanner(page)


def _frange(start: float, stop: float, step: float):
    if step <= 0:
        raise ValueError("increment must be positive")
    index = 0
    while True:
        value = start + index * step
        if value >= stop:
            return
        yield value
        index += 1


def scan_row(
    page: "fitz.Page | GeometricTextScanner",
    cell_areas: Sequence[CellScanArea],
    row_y: float,
    end_y: Optional[float] = None,
) -> RowCells:
    """Return the text lines of every cell in the row starting at ``row_y``.

    Strips at or below ``end_y`` are skipped so a tall cell never reads into
    the following row.
    """

    scanner = _as_scanner(page)
    cells: RowCells = []
    for area in cell_areas:
        lines: List[str] = []
        for row_index in range(area.rows):
            scan_y = row_y + row_index * area.increment
            if end_y is not None and scan_y >= end_y:
                break
            height = area.increment
            if end_y is not None:
                height = min(height, end_y - scan_y)
            text = scanner.text_in_rect(rect_from_origin(area.x, scan_y, area.width, height))
            if text:
                lines.append(text)
        cells.append(lines)
    return cells


def detect_row_boundaries(
    page: "fitz.Page | GeometricTextScanner",
    start_y: float,
    end_y: float,
    scan_height: float,
    increment: float,
) -> List[float]:
    """Return the y offsets where a full-width strip goes from empty to text."""

    scanner = _as_scanner(page)
    starts: List[float] = []
    had_content = False
    for y in _frange(start_y, end_y, increment):
        has_content = scanner.has_text(rect_from_origin(0.0, y, scanner.width, scan_height))
        if has_content and not had_content:
            starts.append(y)
        had_content = has_content
    return starts


def find_first_coherent_row(
    page: "fitz.Page | GeometricTextScanner",
    cell_areas: Sequence[CellScanArea],
    start_y: float,
    end_y: float,
    search_increment: float,
    validator: RowValidator,
) -> Optional[float]:
    """Return the first y in ``[start_y, end_y)`` whose row passes ``validator``."""

    scanner = _as_scanner(page)
    for y in _frange(start_y, end_y, search_increment):
        if validator(scan_row(scanner, cell_areas, y)):
            return y
    return None


__all__ = [
    "DEFAULT_ROW_INCREMENT",
    "CellScanArea",
    "RowCells",
    "RowValidator",
    "scan_row",
    "detect_row_boundaries",
    "find_first_coherent_row",
]
