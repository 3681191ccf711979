from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from farmaguardia.parsing.rural import RuralStrategy  # noqa: E402
from farmaguardia.pdf.rows import (  # noqa: E402
    CellScanArea,
    detect_row_boundaries,
    find_first_coherent_row,
    scan_row,
)
from farmaguardia.pdf.scanner import GeometricTextScanner  # noqa: E402

from .fixtures.synth import SyntheticPage, rural_document, span  # noqa: E402


def _stacked_page() -> SyntheticPage:
    return SyntheticPage(
        spans=[
            span("A", 10.0, 0.0),
            span("B", 10.0, 8.0),
            span("C", 10.0, 16.0),
            span("Z", 210.0, 0.0),
        ],
        width=300.0,
        height=100.0,
    )


def test_scan_row_reads_each_cell_top_to_bottom():
    areas = [CellScanArea(x=0.0, width=100.0, rows=3), CellScanArea(x=200.0, width=50.0, rows=3)]
    assert scan_row(_stacked_page(), areas, 0.0) == [["A", "B", "C"], ["Z"]]


def test_scan_row_stops_at_next_row():
    areas = [CellScanArea(x=0.0, width=100.0, rows=3)]
    assert scan_row(_stacked_page(), areas, 0.0, end_y=16.0) == [["A", "B"]]


def test_row_boundaries_follow_empty_to_text_transitions():
    page = SyntheticPage(
        spans=[span("one", 10.0, 10.0), span("two", 10.0, 40.0), span("wrap", 10.0, 48.0)],
        height=100.0,
    )
    # "two" and "wrap" touch, so they form a single row.
    assert detect_row_boundaries(page, 0.0, 100.0, 8.0, 8.0) == [8.0, 40.0]


def test_first_coherent_row_uses_validator():
    page = _stacked_page()
    areas = [CellScanArea(x=0.0, width=100.0, rows=1)]
    found = find_first_coherent_row(page, areas, 0.0, 100.0, 4.0, lambda cells: cells[0] == ["B"])
    assert found == 8.0
    assert find_first_coherent_row(page, areas, 0.0, 100.0, 4.0, lambda cells: False) is None


def test_non_positive_increment_rejected():
    with pytest.raises(ValueError):
        detect_row_boundaries(_stacked_page(), 0.0, 100.0, 8.0, 0.0)


def test_rural_page_row_starts():
    scanner = GeometricTextScanner(rural_document().load_page(0))
    assert RuralStrategy().row_starts(scanner) == [104.0, 144.0]


def test_rural_wrapped_cell_stays_in_its_row():
    scanner = GeometricTextScanner(rural_document().load_page(0))
    strategy = RuralStrategy()
    cells = scan_row(scanner, strategy.cell_areas(), 144.0, scanner.height)
    assert cells[0] == ["02-ene-25"]
    assert cells[1] == ["S.E. GORMAZ (SORIA)", "SEPÚLVEDA"]
