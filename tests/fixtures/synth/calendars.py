"""Synthetic calendars laid out like the published capital and rural PDFs."""

from __future__ import annotations

from .pages import SyntheticDocument, SyntheticPage, span

CAPITAL_PAGE_WIDTH = 600.0
RURAL_PAGE_WIDTH = 842.0
RURAL_PAGE_HEIGHT = 595.0

# Column x positions inside the 3-band layout of a 600pt wide page.
_DATE_X = 45.0
_DAY_X = 165.0
_NIGHT_X = 372.0


def _capital_entry(y: float, date_text: str, day: tuple, night: tuple) -> list:
    day_name, day_address, day_phone = day
    night_name, night_address, night_phone = night
    return [
        span(date_text, _DATE_X, y, width=100.0),
        span(day_name, _DAY_X, y),
        span(day_address, _DAY_X, y + 12),
        span(f"Tfno: {day_phone}", _DAY_X, y + 24),
        span(night_name, _NIGHT_X, y),
        span(night_address, _NIGHT_X, y + 12),
        span(f"Tfno: {night_phone}", _NIGHT_X, y + 24),
    ]


def capital_document(
    dates=("miércoles, 1 de enero", "jueves, 2 de enero"),
    *,
    title: str = "CALENDARIO GUARDIAS SEGOVIA CAPITAL 2025",
    year_line: str = "2025",
) -> SyntheticDocument:
    """One capital entry per date line, 60pt apart.

    Entry ``n`` has day pharmacy ``FARMACIA <2n>`` and night pharmacy
    ``FARMACIA <2n+1>`` lettered from A, so the defaults give 1 and 2
    January 2025 with day A/C and night B/D.
    """

    spans = [span(title, 170.0, 30.0, size=10.0)]
    if year_line:
        spans.append(span(year_line, 50.0, 80.0, width=20.0))
    for index, date_text in enumerate(dates):
        day_number, night_number = 2 * index + 1, 2 * index + 2
        spans += _capital_entry(
            100.0 + 60.0 * index,
            date_text,
            (f"FARMACIA {chr(64 + day_number)}", f"C/ Real {day_number}", f"921 000 {day_number:03d}"),
            (f"FARMACIA {chr(64 + night_number)}", f"C/ Real {night_number}", f"921 000 {night_number:03d}"),
        )
    return SyntheticDocument(pages=[SyntheticPage(spans=spans, width=CAPITAL_PAGE_WIDTH)])


def _rural_cell(text: str, x: float, y: float) -> tuple:
    return span(text, x, y, size=6.0)


def rural_document() -> SyntheticDocument:
    """Two rural rows; the second Riaza cell wraps over two lines."""

    spans = [
        span("SERVICIOS DE URGENCIA RURALES 2025", 300.0, 20.0, size=10.0),
        _rural_cell("FECHA", 44.0, 60.0),
        _rural_cell("RIAZA SEPÚLVEDA", 180.0, 60.0),
        # 1 January: carbonero left blank.
        _rural_cell("01-ene-25", 44.0, 101.0),
        _rural_cell("RIAZA", 180.0, 101.0),
        _rural_cell("C/ Valenciana", 395.0, 101.0),
        _rural_cell("PRÁDENA", 502.0, 101.0),
        _rural_cell("TORRECELLA", 572.0, 101.0),
        _rural_cell("COCA", 702.0, 101.0),
        _rural_cell("VILLACASTÍN", 772.0, 101.0),
        # 2 January
        _rural_cell("02-ene-25", 44.0, 141.0),
        _rural_cell("S.E. GORMAZ (SORIA)", 180.0, 141.0),
        _rural_cell("SEPÚLVEDA", 180.0, 151.0),
        _rural_cell("Plaza los Dolores", 395.0, 141.0),
        _rural_cell("ARCONES", 502.0, 141.0),
        _rural_cell("OLOMBRADA", 572.0, 141.0),
        _rural_cell("CARBONERO M", 622.0, 141.0),
        _rural_cell("NIEVA", 702.0, 141.0),
        _rural_cell("MAELLO (ÁVILA)", 772.0, 141.0),
    ]
    page = SyntheticPage(spans=spans, width=RURAL_PAGE_WIDTH, height=RURAL_PAGE_HEIGHT)
    return SyntheticDocument(pages=[page])


__all__ = ["capital_document", "rural_document"]
