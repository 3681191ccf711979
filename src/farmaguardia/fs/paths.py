"""Filesystem helpers for the cached calendar documents."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Final

from farmaguardia.config import data_home

_LOGGER = logging.getLogger(__name__)

_SAFE_CHAR_RE: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9._\-]+")
_DOUBLE_DOT_RE: Final[re.Pattern[str]] = re.compile(r"\.{2,}")

_MAX_STEM_LEN: Final[int] = 80


def documents_dir() -> Path:
    """Return the default documents directory, creating it if needed."""
    path = data_home() / "documents"
    path.mkdir(parents=True, exist_ok=True)
    return path


def qa_dir() -> Path:
    """Return the default directory for scan overlay PNGs, creating it if needed."""
    path = data_home() / "qa"
    path.mkdir(parents=True, exist_ok=True)
    return path


def document_stem(region_id: str) -> str:
    """Return a filesystem-safe stem for ``region_id``.

    Region identifiers may carry accents (``fuentidueña``) so everything
    outside ``[a-zA-Z0-9._-]`` collapses to ``_``.
    """
    stem = _SAFE_CHAR_RE.sub("_", (region_id or "").strip())
    stem = _DOUBLE_DOT_RE.sub(".", stem).strip(" ._")
    if not stem:
        stem = "region"
    return stem[:_MAX_STEM_LEN]


def atomic_write_bytes(path: Path, payload: bytes) -> Path:
    """Write ``payload`` to ``path`` through a sibling temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_name, path)
    except OSError:
        _LOGGER.warning("atomic write failed for %s", path)
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return path


def atomic_write_text(path: Path, text: str) -> Path:
    return atomic_write_bytes(path, text.encode("utf-8"))


__all__ = ["documents_dir", "qa_dir", "document_stem", "atomic_write_bytes", "atomic_write_text"]
