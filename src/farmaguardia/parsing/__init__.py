"""Per-region strategies turning calendar PDFs into duty schedules."""

from __future__ import annotations

__all__ = [
    "base",
    "directory",
    "capital",
    "market",
    "cuellar",
    "el_espinar",
    "rural",
    "registry",
]
