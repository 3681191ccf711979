"""PyMuPDF document access for the parsing strategies."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

try:  # pragma: no cover - optional dependency during docs builds
    import fitz  # type: ignore
except ImportError:  # pragma: no cover
    fitz = None  # type: ignore

LOGGER = logging.getLogger(__name__)

DocumentLike = Union[str, Path, "fitz.Document"]


class DocumentReadError(RuntimeError):
    """The calendar document could not be opened or read."""


@contextmanager
def open_document(source: DocumentLike) -> Iterator["fitz.Document"]:
    """Yield an open document for ``source`` and close it when done.

    Already-open documents are yielded untouched and left open for the caller.
    """

    if not isinstance(source, (str, Path)):
        yield source
        return

    if fitz is None:
        raise DocumentReadError("PyMuPDF (fitz) is required to read calendar PDFs")

    path = Path(source)
    try:
        doc = fitz.open(str(path))
    except (OSError, RuntimeError, ValueError) as exc:
        raise DocumentReadError(f"Unable to open {path}: {exc}") from exc

    try:
        LOGGER.debug("Opened %s (%s pages)", path, doc.page_count)
        yield doc
    finally:
        doc.close()


def iter_pages(doc: "fitz.Document") -> Iterator["fitz.Page"]:
    for page_index in range(doc.page_count):
        yield doc.load_page(page_index)


def page_text(page: "fitz.Page") -> str:
    """Return the page's plain text in reading order, ``""`` on extraction errors."""

    try:
        return str(page.get_text("text") or "")
    except RuntimeError:
        LOGGER.warning("Text extraction failed on page", exc_info=True)
        return ""


__all__ = ["DocumentLike", "DocumentReadError", "open_document", "iter_pages", "page_text"]
