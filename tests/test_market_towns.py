from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from farmaguardia.model.duty import DutyTimeSpan  # noqa: E402
from farmaguardia.model.pharmacy import PLACEHOLDER_ADDRESS  # noqa: E402
from farmaguardia.parsing.base import ParseReport  # noqa: E402
from farmaguardia.parsing.cuellar import CuellarStrategy  # noqa: E402
from farmaguardia.parsing.el_espinar import ElEspinarStrategy  # noqa: E402
from farmaguardia.parsing.market import is_furniture, normalize_whitespace  # noqa: E402

from .fixtures.synth import text_document  # noqa: E402

CUELLAR_LINES = [
    "TURNOS DE GUARDIA CUÉLLAR 2025",
    "lunes martes miércoles",
    "30-dic 31-dic 01-ene C/ RESINA",
    "02-ene 03-ene",
    "STA. MARINA",
    "04-ene C/ NUEVA 3",
    "05-ene CUÉLLAR",
    "06-ene Av C.J. CELA",
    "enero 2025",
    "Página 2",
]


def _by_day(schedules):
    return {s.date.to_date(): s.pharmacies(DutyTimeSpan.FULL_DAY)[0] for s in schedules}


def test_cuellar_rotation_lines():
    report = ParseReport("cuellar")
    schedules = CuellarStrategy().parse_lines(CUELLAR_LINES, 2024, report)
    by_day = _by_day(schedules)

    assert list(by_day) == [
        date(2024, 12, 30),
        date(2024, 12, 31),
        date(2025, 1, 1),
        date(2025, 1, 2),
        date(2025, 1, 3),
        date(2025, 1, 4),
        date(2025, 1, 6),
    ]
    assert by_day[date(2025, 1, 1)].address.startswith("C. Resina")
    assert by_day[date(2025, 1, 3)].phone == "921140606"
    assert by_day[date(2025, 1, 6)].name == "Farmacia Fernando Redondo"
    assert all(s.spans == frozenset({DutyTimeSpan.FULL_DAY}) for s in schedules)
    assert report.kept == 7


def test_unknown_code_becomes_placeholder_entry():
    schedules = CuellarStrategy().parse_lines(["04-ene C/ NUEVA 3"], 2025)
    (pharmacy,) = schedules[0].pharmacies(DutyTimeSpan.FULL_DAY)
    assert pharmacy.name == "C/ NUEVA 3"
    assert pharmacy.address == PLACEHOLDER_ADDRESS
    assert not pharmacy.has_phone


def test_dates_without_pharmacy_are_counted():
    report = ParseReport("cuellar")
    CuellarStrategy().parse_lines(CUELLAR_LINES, 2024, report)
    assert report.dropped == 1
    assert "05-ene" in report.warnings[0]


def test_impossible_date_is_dropped():
    report = ParseReport("cuellar")
    schedules = CuellarStrategy().parse_lines(["30-feb 01-mar STA. MARINA"], 2025, report)
    assert [s.date.to_date() for s in schedules] == [date(2025, 3, 1)]
    assert report.dropped == 1


@pytest.mark.parametrize(
    "line, expected",
    [
        ("TURNOS 2025", True),
        ("COLEGIO OFICIAL DE FARMACÉUTICOS", True),
        ("lunes martes miércoles jueves", True),
        ("Septiembre de 2025", True),
        ("12 / 14", True),
        ("pág. 3", True),
        ("30-dic C/ RESINA", False),
        ("STA. MARINA", False),
    ],
)
def test_furniture_lines(line, expected):
    assert is_furniture(line) is expected


def test_normalize_whitespace_handles_pdf_spaces():
    assert normalize_whitespace("  C/ RESINA  14 ") == "C/ RESINA 14"


@pytest.mark.parametrize(
    "line, code",
    [
        ("AV. HONTANILLA", "AV. HONTANILLA 18"),
        ("Hontanilla 18", "AV. HONTANILLA 18"),
        ("C/ MARQUÉS DE PERALES", "C/ MARQUES PERALES"),
        ("marques perales", "C/ MARQUES PERALES"),
        ("07-ene SAN RAFAEL", "SAN RAFAEL"),
        ("EL ESPINAR / SAN RAFAEL 2025", None),
        ("EL ESPINAR", None),
        ("EL ESPINAR / SAN RAFAEL", None),
        ("02-ene EL ESPINAR - SAN RAFAEL", None),
    ],
)
def test_el_espinar_codes(line, code):
    assert ElEspinarStrategy().match_code(line) == code


def test_el_espinar_document():
    document = text_document(
        "GUARDIAS EL ESPINAR / SAN RAFAEL 2025\n"
        "30-dic 31-dic 01-ene HONTANILLA\n"
        "02-ene 03-ene\n"
        "MARQUES DE PERALES\n"
        "04-ene SAN RAFAEL\n"
        "05-ene EL ESPINAR\n"
    )
    strategy = ElEspinarStrategy(today=lambda: date(2025, 1, 15))
    report = ParseReport(strategy.region_id)
    schedules = strategy.parse(document, report)
    by_day = _by_day(schedules)

    # The document opens in December, so the titled year is the following one.
    assert min(by_day) == date(2024, 12, 30)
    assert by_day[date(2025, 1, 1)].phone == "921181011"
    assert by_day[date(2025, 1, 3)].name == "Farmacia Lda M J. Bartolomé Sánchez"
    assert by_day[date(2025, 1, 4)].address.endswith("40410 San Rafael, Segovia")
    assert date(2025, 1, 5) not in by_day
    assert (report.kept, report.dropped) == (6, 1)


def test_el_espinar_title_between_dates_and_pharmacy():
    lines = ["06-ene 07-ene", "EL ESPINAR / SAN RAFAEL", "SAN RAFAEL"]
    strategy = ElEspinarStrategy()
    report = ParseReport(strategy.region_id)
    by_day = _by_day(strategy.parse_lines(lines, 2025, report))

    assert sorted(by_day) == [date(2025, 1, 6), date(2025, 1, 7)]
    assert all(entry.phone == "921171105" for entry in by_day.values())
    assert (report.kept, report.dropped) == (2, 0)
