"""Rect-based text lookup over a PyMuPDF page.

Every strategy that reads a calendar by position goes through
:class:`GeometricTextScanner`. The page's span dictionary is read once; each
query then selects the spans whose centre lies inside the requested rect,
which keeps stacked scan rects from reporting the same span twice.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

try:  # pragma: no cover - PyMuPDF optional for unit tests
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

from .geometry import Point, Rect, contains_point, normalize_rect, rect_center

LOGGER = logging.getLogger(__name__)

DEFAULT_MIN_FONT_SIZE = 5.0

_LINE_TOLERANCE = 1.5
_SPACE_RUN_RE = re.compile(r"[ \t]+")


@dataclass(slots=True)
class TextSpan:
    text: str
    bbox: Rect
    size: float

    @property
    def center(self) -> Point:
        return rect_center(self.bbox)


class GeometricTextScanner:
    """Answer "what text is inside this rect" for one page."""

    def __init__(self, page: "fitz.Page") -> None:
        rect = getattr(page, "rect", None)
        self.width = float(rect.width) if rect is not None else 0.0
        self.height = float(rect.height) if rect is not None else 0.0
        self.spans: List[TextSpan] = list(_iter_page_spans(page))

    def spans_in_rect(self, rect: Rect) -> List[TextSpan]:
        area = normalize_rect(rect)
        return [span for span in self.spans if contains_point(area, span.center)]

    def text_in_rect(self, rect: Rect) -> str:
        """Return the trimmed text inside ``rect``; lines joined by ``\\n``."""

        selected = self.spans_in_rect(rect)
        if not selected:
            return ""
        selected.sort(key=lambda span: (span.center[1], span.bbox[0]))

        lines: List[List[TextSpan]] = []
        line_y: Optional[float] = None
        for span in selected:
            cy = span.center[1]
            if line_y is None or cy - line_y > _LINE_TOLERANCE:
                lines.append([])
                line_y = cy
            lines[-1].append(span)

        rendered = []
        for line in lines:
            line.sort(key=lambda span: span.bbox[0])
            joined = _SPACE_RUN_RE.sub(" ", " ".join(span.text.strip() for span in line)).strip()
            if joined:
                rendered.append(joined)
        return "\n".join(rendered).strip()

    def has_text(self, rect: Rect) -> bool:
        return bool(self.text_in_rect(rect))

    def smallest_font_size(self, default: float = DEFAULT_MIN_FONT_SIZE) -> float:
        """Return the smallest positive font size on the page, or ``default``."""

        sizes = [span.size for span in self.spans if span.size > 0]
        if not sizes:
            return default
        return min(sizes)


def _iter_page_spans(page: "fitz.Page") -> Iterable[TextSpan]:
    try:
        text_dict = page.get_text("dict")
    except RuntimeError:
        LOGGER.warning("Span extraction failed; treating page as empty", exc_info=True)
        return

    for block in text_dict.get("blocks", []):
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                raw_text = span.get("text", "")
                span_bbox = span.get("bbox")
                if not raw_text or not str(raw_text).strip() or not span_bbox:
                    continue
                sx0, sy0, sx1, sy1 = map(float, span_bbox)
                yield TextSpan(
                    text=str(raw_text),
                    bbox=normalize_rect((sx0, sy0, sx1, sy1)),
                    size=float(span.get("size", 0.0) or 0.0),
                )


__all__ = ["DEFAULT_MIN_FONT_SIZE", "TextSpan", "GeometricTextScanner"]
