"""Minimal page and document shims that mimic the PyMuPDF API used by the parsers."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence, Tuple

SpanSpec = Tuple[str, float, float, float, float, float]


def span(text: str, x: float, y: float, *, width: Optional[float] = None, size: float = 8.0) -> SpanSpec:
    """A span whose bbox starts at ``(x, y)`` and is ``size`` points tall."""

    w = width if width is not None else max(len(text) * size * 0.5, size)
    return (text, x, y, x + w, y + size, size)


@dataclass
class SyntheticPage:
    """Page shim answering ``get_text("dict")`` and ``get_text("text")``."""

    spans: Sequence[SpanSpec] = ()
    width: float = 595.0
    height: float = 842.0
    text: Optional[str] = None
    fail: bool = False

    @property
    def rect(self) -> SimpleNamespace:
        return SimpleNamespace(width=self.width, height=self.height)

    def get_text(self, kind: str = "text", clip: Any = None) -> Any:
        if self.fail:
            raise RuntimeError("synthetic extraction failure")
        if kind == "dict":
            return self._as_dict()
        if kind == "text":
            if self.text is not None:
                return self.text
            ordered = sorted(self.spans, key=lambda item: (item[2], item[1]))
            return "\n".join(item[0] for item in ordered)
        raise ValueError(f"unsupported text kind: {kind}")

    def _as_dict(self) -> Dict[str, Any]:
        spans = [
            {"text": text, "bbox": [x0, y0, x1, y1], "size": size}
            for text, x0, y0, x1, y1, size in self.spans
        ]
        return {"blocks": [{"lines": [{"spans": spans}]}]}

    def get_pixmap(self) -> Any:  # pragma: no cover - overlays are not rendered in tests
        raise RuntimeError("synthetic pages cannot be rendered")


@dataclass
class SyntheticDocument:
    pages: List[SyntheticPage] = field(default_factory=list)
    closed: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def load_page(self, index: int) -> SyntheticPage:
        return self.pages[index]

    def close(self) -> None:
        self.closed = True


def text_document(*pages: str) -> SyntheticDocument:
    """Document whose pages only carry plain text."""

    return SyntheticDocument(pages=[SyntheticPage(text=page) for page in pages])
