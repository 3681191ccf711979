"""QA overlay rendering using PIL on MuPDF pixmaps.

The overlay shows where the scanner looked: column bands for the column
calendars, and the per-row cells for the rural table. Pixmaps are rendered
at 72 dpi so page points map one-to-one onto pixels.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

try:
    from PIL import Image, ImageDraw, ImageFont
except ImportError:  # pragma: no cover - optional dependency in headless automation
    Image = None  # type: ignore[assignment]
    ImageDraw = None  # type: ignore[assignment]
    ImageFont = None  # type: ignore[assignment]

try:  # pragma: no cover - optional dependency during docs builds
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from .columns import ColumnBand
from .geometry import Rect, rect_from_origin
from .rows import CellScanArea

Color = Tuple[int, int, int, int]

_BAND_FILL: Color = (32, 120, 240, 48)
_BAND_OUTLINE: Color = (32, 120, 240, 180)
_ROW_LINE: Color = (240, 96, 32, 200)
_CELL_OUTLINE: Color = (250, 192, 0, 220)
_LABEL_TEXT: Color = (40, 40, 40, 255)


@dataclass(slots=True)
class LabeledRect:
    bbox: Rect
    label: str = ""


@dataclass(slots=True)
class ScanHighlights:
    """Drawing primitives for one page."""

    page_index: int
    bands: List[LabeledRect] = field(default_factory=list)
    row_starts: List[float] = field(default_factory=list)
    cells: List[LabeledRect] = field(default_factory=list)


def column_highlights(
    page_index: int,
    columns: Sequence[ColumnBand],
    page_height: float,
    labels: Sequence[str] = (),
) -> ScanHighlights:
    bands = [
        LabeledRect(
            bbox=rect_from_origin(column.x0, 0.0, column.width, page_height),
            label=labels[column.index] if column.index < len(labels) else f"band {column.index}",
        )
        for column in columns
    ]
    return ScanHighlights(page_index=page_index, bands=bands)


def row_highlights(
    page_index: int,
    areas: Sequence[CellScanArea],
    row_starts: Sequence[float],
    page_height: float,
    labels: Sequence[str] = (),
) -> ScanHighlights:
    cells: List[LabeledRect] = []
    for index, row_y in enumerate(row_starts):
        end_y = row_starts[index + 1] if index + 1 < len(row_starts) else page_height
        for area_index, area in enumerate(areas):
            height = min(area.rows * area.increment, end_y - row_y)
            label = labels[area_index] if index == 0 and area_index < len(labels) else ""
            cells.append(LabeledRect(rect_from_origin(area.x, row_y, area.width, height), label))
    return ScanHighlights(page_index=page_index, row_starts=list(row_starts), cells=cells)


def overlay_path(target: Path, page_index: int) -> Path:
    """Output file for page ``page_index``.

    A ``.png`` target names the first page; later pages get ``_p<page>``
    appended to its stem. Any other target is a directory of ``qa_p<page>.png``.
    """

    target = Path(target)
    if target.suffix.lower() != ".png":
        return target / f"qa_p{page_index}.png"
    if page_index == 0:
        return target
    return target.with_name(f"{target.stem}_p{page_index}{target.suffix}")


def draw_overlay(
    pixmap: "fitz.Pixmap",
    highlights: ScanHighlights,
    target: Path,
) -> Optional[Path]:
    """Render ``highlights`` over ``pixmap`` and save it at ``overlay_path``."""

    if Image is None or ImageDraw is None or ImageFont is None:
        print("QA_OVERLAY_SKIP reason=PILUnavailable")
        return None

    output_path = overlay_path(target, highlights.page_index)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        png_bytes = pixmap.tobytes("png")
        image = Image.open(io.BytesIO(png_bytes)).convert("RGBA")
    except (OSError, RuntimeError, ValueError) as exc:
        print(f"QA_OVERLAY_SKIP reason={exc.__class__.__name__}: {exc}")
        return None

    draw = ImageDraw.Draw(image, "RGBA")
    font = ImageFont.load_default()
    _draw_bands(draw, highlights.bands, font)
    _draw_row_lines(draw, image.size, highlights.row_starts)
    _draw_cells(draw, highlights.cells, font)

    image.save(output_path, format="PNG")
    return output_path


def _draw_bands(draw: "ImageDraw.ImageDraw", bands: Sequence[LabeledRect], font) -> None:
    for band in bands:
        x0, y0, x1, y1 = (round(value, 1) for value in band.bbox)
        draw.rectangle((x0, y0, x1, y1), outline=_BAND_OUTLINE, fill=_BAND_FILL, width=2)
        if band.label:
            draw.text((x0 + 4, y0 + 4), band.label, fill=_LABEL_TEXT, font=font)


def _draw_row_lines(draw: "ImageDraw.ImageDraw", image_size: Tuple[int, int], rows: Sequence[float]) -> None:
    for y in rows:
        draw.line(((0.0, float(y)), (float(image_size[0]), float(y))), fill=_ROW_LINE, width=1)


def _draw_cells(draw: "ImageDraw.ImageDraw", cells: Sequence[LabeledRect], font) -> None:
    for cell in cells:
        x0, y0, x1, y1 = cell.bbox
        draw.rectangle((x0, y0, x1, y1), outline=_CELL_OUTLINE, width=1)
        if cell.label:
            draw.text((x0 + 2, y0 - 10), cell.label, fill=_LABEL_TEXT, font=font)


__all__ = [
    "LabeledRect",
    "ScanHighlights",
    "column_highlights",
    "row_highlights",
    "overlay_path",
    "draw_overlay",
]
