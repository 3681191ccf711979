"""Geometry helpers for PDF coordinate normalization."""

from __future__ import annotations

from typing import Tuple

Rect = Tuple[float, float, float, float]
Point = Tuple[float, float]


def normalize_rect(rect: Rect) -> Rect:
    """Return ``rect`` with coordinates sorted so that x1 >= x0 and y1 >= y0."""

    x0, y0, x1, y1 = rect
    if x1 < x0:
        x0, x1 = x1, x0
    if y1 < y0:
        y0, y1 = y1, y0
    return float(x0), float(y0), float(x1), float(y1)


def rect_from_origin(x: float, y: float, width: float, height: float) -> Rect:
    """Return an ``(x0, y0, x1, y1)`` rect from an origin and a size."""

    return normalize_rect((x, y, x + width, y + height))


def rect_center(rect: Rect) -> Point:
    x0, y0, x1, y1 = normalize_rect(rect)
    return (x0 + x1) / 2.0, (y0 + y1) / 2.0


def contains_point(rect: Rect, point: Point) -> bool:
    """Half-open containment so stacked scan rects never share a point."""

    x0, y0, x1, y1 = normalize_rect(rect)
    px, py = point
    return x0 <= px < x1 and y0 <= py < y1
