"""Shared contract and bookkeeping for the per-region parsing strategies."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Protocol, runtime_checkable

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from farmaguardia.config import local_now
from farmaguardia.model.pharmacy import PharmacySchedule
from farmaguardia.pdf.dates import detect_year
from farmaguardia.pdf.document import DocumentLike, DocumentReadError, open_document

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ParseReport:
    """Row-level outcome of one parse; dropped rows are counted, never raised."""

    region_id: str
    kept: int = 0
    dropped: int = 0
    warnings: List[str] = field(default_factory=list)

    def keep(self, count: int = 1) -> None:
        self.kept += count

    def drop(self, reason: str, detail: object = None) -> None:
        self.dropped += 1
        message = reason if detail is None else f"{reason}: {detail!r}"
        self.warnings.append(message)
        LOGGER.warning("[%s] dropped row, %s", self.region_id, message)

    def note(self, message: str) -> None:
        self.warnings.append(message)
        LOGGER.warning("[%s] %s", self.region_id, message)

    @property
    def summary_line(self) -> str:
        return f"Region:{self.region_id} Kept:{self.kept} Dropped:{self.dropped} Warnings:{len(self.warnings)}"


@runtime_checkable
class ParsingStrategy(Protocol):
    """Turn one calendar document into dated duty entries."""

    region_id: str

    def parse(
        self,
        document: DocumentLike,
        report: Optional[ParseReport] = None,
    ) -> List[PharmacySchedule]:
        ...


class DocumentStrategy:
    """Base for strategies that read a whole PDF through PyMuPDF.

    Subclasses implement :meth:`parse_document`; an unreadable document turns
    into an empty result noted on the report.
    """

    region_id = ""

    def __init__(
        self,
        *,
        today: Optional[Callable[[], date]] = None,
        source_url: Optional[str] = None,
    ) -> None:
        self._today = today or (lambda: local_now().date())
        self.source_url = source_url

    def parse(
        self,
        document: DocumentLike,
        report: Optional[ParseReport] = None,
    ) -> List[PharmacySchedule]:
        report = report if report is not None else ParseReport(self.region_id)
        try:
            with open_document(document) as doc:
                schedules = self.parse_document(doc, report)
        except DocumentReadError as exc:
            report.note(f"document unreadable: {exc}")
            return []

        if not schedules:
            report.note("no schedules extracted")
        LOGGER.info(report.summary_line)
        return schedules

    def parse_document(self, doc: "fitz.Document", report: ParseReport) -> List[PharmacySchedule]:
        raise NotImplementedError

    def today(self) -> date:
        return self._today()

    def detect_start_year(self, first_page_text: str) -> int:
        detection = detect_year(first_page_text, url=self.source_url, today=self.today())
        if detection.warning:
            LOGGER.info("[%s] %s", self.region_id, detection.warning)
        LOGGER.debug("[%s] start year %s (%s)", self.region_id, detection.year, detection.source)
        return detection.year


def sort_schedules(schedules: List[PharmacySchedule]) -> List[PharmacySchedule]:
    """Return ``schedules`` ordered by date; stable for same-day entries."""

    return sorted(schedules, key=lambda schedule: schedule.date.to_date())


__all__ = ["ParseReport", "ParsingStrategy", "DocumentStrategy", "sort_schedules"]
