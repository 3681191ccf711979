"""PDF-related helpers for reading duty calendars."""

from __future__ import annotations

__all__ = [
    "geometry",
    "document",
    "scanner",
    "columns",
    "rows",
    "dates",
    "qa_overlay",
]
