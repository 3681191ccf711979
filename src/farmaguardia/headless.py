"""Headless duty lookup used by the CLI: parse one calendar, resolve an instant."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from farmaguardia.config import local_now
from farmaguardia.engine.resolve import resolve, zone_pharmacies_at
from farmaguardia.logs.rotating import get_logger, log_dir as default_log_dir, log_path
from farmaguardia.model.pharmacy import Pharmacy, PharmacySchedule
from farmaguardia.model.regions import SEGOVIA_RURAL, region_by_id, zbs_by_id
from farmaguardia.parsing.base import ParseReport
from farmaguardia.parsing.capital import CapitalStrategy
from farmaguardia.parsing.registry import StrategyRegistry, default_registry
from farmaguardia.parsing.rural import ZONE_AREAS, RuralStrategy
from farmaguardia.pdf.columns import column_layout
from farmaguardia.pdf.dates import format_duty_date
from farmaguardia.pdf.document import DocumentReadError, iter_pages, open_document
from farmaguardia.pdf.qa_overlay import column_highlights, draw_overlay, row_highlights
from farmaguardia.pdf.scanner import GeometricTextScanner

LOGGER = logging.getLogger(__name__)

EXIT_ON_DUTY = 0
EXIT_FAILURE = 1
EXIT_NO_DUTY = 2


@dataclass(slots=True)
class HeadlessOptions:
    """Configuration for one headless lookup."""

    input_pdf: Path
    region: str
    at: Optional[datetime] = None
    zone: Optional[str] = None
    list_entries: bool = False
    qa_png: Optional[Path] = None
    log_dir: Optional[Path] = None
    log_file: Optional[Path] = None
    trace: bool = False


@dataclass(slots=True)
class HeadlessResult:
    exit_code: int
    region_id: str
    at: datetime
    lines: List[str]
    warnings: List[str]
    summary_line: str
    log_file: Path
    pharmacies: List[Pharmacy] = field(default_factory=list)
    qa_paths: List[Path] = field(default_factory=list)


def execute_headless(
    options: HeadlessOptions,
    registry: Optional[StrategyRegistry] = None,
) -> HeadlessResult:
    """Parse ``options.input_pdf`` and report who is on duty at ``options.at``."""

    input_pdf = options.input_pdf.expanduser().resolve()
    if not input_pdf.exists():
        raise FileNotFoundError(f"Input PDF not found: {input_pdf}")

    try:
        region = region_by_id(options.region)
    except KeyError as exc:
        raise ValueError(f"Unknown region: {options.region}") from exc
    if options.zone is not None:
        if region.id != SEGOVIA_RURAL.id:
            raise ValueError("--zone only applies to the segovia-rural region")
        try:
            zbs_by_id(options.zone)
        except KeyError as exc:
            raise ValueError(f"Unknown zone: {options.zone}") from exc

    logs_dir = (options.log_dir or default_log_dir()).expanduser().resolve()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = (options.log_file or (logs_dir / _default_log_name())).expanduser().resolve()
    _configure_logging(log_file, trace=options.trace)

    at = options.at or local_now()
    LOGGER.info("Headless start: %s region=%s at=%s", input_pdf, region.id, at.isoformat())
    LOGGER.debug("Rotating log at %s", log_path())

    registry = registry or default_registry()
    strategy = registry.strategy_for(region)
    report = ParseReport(region.id)
    try:
        schedules = strategy.parse(input_pdf, report)
    except Exception:  # pragma: no cover - last-resort guard for the CLI
        LOGGER.exception("Headless parse raised an unexpected error")
        return HeadlessResult(
            exit_code=EXIT_FAILURE,
            region_id=region.id,
            at=at,
            lines=[],
            warnings=["Parser failed; see logs for details"],
            summary_line=f"ERROR region={region.id} parse failed",
            log_file=log_file,
        )

    lines: List[str] = []
    if options.list_entries:
        lines.extend(_listing(schedules))

    if options.zone is not None:
        pharmacies = _zone_lookup(schedules, options.zone, at)
        heading = f"{region.name} / {zbs_by_id(options.zone).name}"
    else:
        resolved = resolve(schedules, at, region)
        pharmacies = list(resolved[0].pharmacies(resolved[1])) if resolved else []
        heading = f"{region.name} {resolved[1].label} ({resolved[1].display_hours})" if resolved else region.name

    if pharmacies:
        lines.append(f"{heading} @ {at.isoformat(timespec='minutes')}")
        lines.extend(_describe(pharmacy) for pharmacy in pharmacies)
        exit_code = EXIT_ON_DUTY
    else:
        reason = "no data" if not schedules else "no pharmacy on duty"
        lines.append(f"{heading} @ {at.isoformat(timespec='minutes')}: {reason}")
        exit_code = EXIT_NO_DUTY

    qa_paths: List[Path] = []
    if options.qa_png is not None:
        try:
            qa_paths = write_scan_overlays(input_pdf, strategy, options.qa_png.expanduser())
        except DocumentReadError:
            LOGGER.warning("QA overlay skipped: document unreadable", exc_info=True)
        for qa_path in qa_paths:
            lines.append(f"QA: {qa_path}")

    summary_line = f"{report.summary_line} Entries:{len(schedules)} OnDuty:{len(pharmacies)}"
    LOGGER.info("Headless run completed exit_code=%s", exit_code)
    return HeadlessResult(
        exit_code=exit_code,
        region_id=region.id,
        at=at,
        lines=lines,
        warnings=list(report.warnings),
        summary_line=summary_line,
        log_file=log_file,
        pharmacies=pharmacies,
        qa_paths=qa_paths,
    )


def write_scan_overlays(input_pdf: Path, strategy: object, target: Path) -> List[Path]:
    """Render one overlay PNG per page showing the rects ``strategy`` scans."""

    if isinstance(strategy, CapitalStrategy):
        labels: Sequence[str] = ("date", "day", "night")
    elif isinstance(strategy, RuralStrategy):
        labels = ["date"] + [zone.id for zone in strategy.zones if zone.id in ZONE_AREAS]
    else:
        LOGGER.info("No scan geometry for %s; text calendars are read whole", type(strategy).__name__)
        return []

    written: List[Path] = []
    with open_document(input_pdf) as doc:
        for page_index, page in enumerate(iter_pages(doc)):
            scanner = GeometricTextScanner(page)
            if isinstance(strategy, CapitalStrategy):
                highlights = column_highlights(
                    page_index, column_layout(scanner.width, strategy.column_count), scanner.height, labels
                )
            else:
                highlights = row_highlights(
                    page_index, strategy.cell_areas(), strategy.row_starts(scanner), scanner.height, labels
                )
            path = draw_overlay(page.get_pixmap(), highlights, target)
            if path is not None:
                written.append(path)
    return written


def _zone_lookup(schedules: Sequence[PharmacySchedule], zone_id: str, at: datetime) -> List[Pharmacy]:
    return list(zone_pharmacies_at(schedules, zone_id, at) or ())


def _listing(schedules: Sequence[PharmacySchedule]) -> List[str]:
    rendered = []
    for schedule in schedules:
        for span, pharmacies in schedule.shifts.items():
            names = ", ".join(pharmacy.name for pharmacy in pharmacies) or "-"
            rendered.append(f"{format_duty_date(schedule.date)} {span.key}: {names}")
    return rendered


def _describe(pharmacy: Pharmacy) -> str:
    parts = [pharmacy.name, pharmacy.address, pharmacy.formatted_phone]
    if pharmacy.additional_info:
        parts.append(pharmacy.additional_info)
    return "  " + " | ".join(parts)


def _configure_logging(log_file: Path, *, trace: bool = False) -> logging.Logger:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    base_logger = get_logger()
    level = logging.DEBUG if trace else logging.INFO
    base_logger.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(type(handler) is logging.StreamHandler for handler in root_logger.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.WARNING)
        root_logger.addHandler(stream_handler)

    existing_paths = {
        getattr(handler, "baseFilename", None)
        for handler in base_logger.handlers
        if hasattr(handler, "baseFilename")
    }
    if str(log_file) not in existing_paths:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
        )
        base_logger.addHandler(file_handler)

    return base_logger


def _default_log_name() -> str:
    return f"headless_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"


__all__ = [
    "EXIT_ON_DUTY",
    "EXIT_FAILURE",
    "EXIT_NO_DUTY",
    "HeadlessOptions",
    "HeadlessResult",
    "execute_headless",
    "write_scan_overlays",
]
