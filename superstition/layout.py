"""Triangular layout and marker geometry.

Countries are sorted by value (ties by name) and dealt into rows 1..rows, row r
holding r markers. With spacing = min(width, height) / (rows + 1), row r sits at
y = spacing * r and its items are centered on width / 2, one spacing apart.
All functions here are pure: they return new records and never mutate inputs.
"""
from __future__ import annotations

import math
from dataclasses import replace
from collections.abc import Iterable, Sequence

import numpy as np

from superstition.records import CountryRecord, LayoutPosition

DEFAULT_ROWS = 5
MARKER_FRACTION = 0.4
LABEL_GAP = 25.0
YEAR_LABEL_GAP = 10.0
CIRCLE_SEGMENTS = 48


class LayoutError(ValueError):
    """Raised when the records cannot fill the triangle exactly."""


def triangle_size(rows: int) -> int:
    return rows * (rows + 1) // 2


def row_spacing(width: float, height: float, rows: int = DEFAULT_ROWS) -> float:
    return min(width, height) / (rows + 1)


def marker_radius(spacing: float) -> float:
    return spacing * MARKER_FRACTION


def sort_records(records: Iterable[CountryRecord]) -> list[CountryRecord]:
    return sorted(records, key=lambda rec: (rec.value, rec.country))


def triangular_layout(
    records: Sequence[CountryRecord],
    width: float,
    height: float,
    rows: int = DEFAULT_ROWS,
) -> list[CountryRecord]:
    """Place pre-sorted records into the triangle, top row first."""
    expected = triangle_size(rows)
    if len(records) != expected:
        raise LayoutError(f"triangular layout with {rows} rows needs {expected} records, got {len(records)}")
    if width <= 0 or height <= 0:
        raise LayoutError(f"canvas must be positive, got {width}x{height}")
    spacing = row_spacing(width, height, rows)
    center_x = width / 2
    out: list[CountryRecord] = []
    idx = 0
    for r in range(1, rows + 1):
        for i in range(r):
            x = center_x + (i - (r - 1) / 2) * spacing
            out.append(replace(records[idx], position=LayoutPosition(x=x, y=spacing * r)))
            idx += 1
    return out


class LinearScale:
    """Map a numeric domain linearly onto a range."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return r0
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


def radius_scale(global_max: float, spacing: float) -> LinearScale:
    return LinearScale((0.0, global_max or 1.0), (0.0, marker_radius(spacing)))


def _angles(n: int) -> np.ndarray:
    if n <= 0:
        return np.array([])
    return 2 * math.pi / n * np.arange(n) - math.pi / 2


def _radii(values: Sequence[float], scale: LinearScale) -> np.ndarray:
    vals = np.nan_to_num(np.asarray(values, dtype=float), nan=0.0)
    return np.array([scale(v) for v in vals])


def radial_vertices(x: float, y: float, values: Sequence[float], scale: LinearScale,
                    gap: float = 0.0) -> list[tuple[float, float]]:
    """Vertex i sits at angle 2*pi*i/n - pi/2 (first one straight up in screen space)."""
    angles = _angles(len(values))
    radii = _radii(values, scale) + gap
    return [(x + r * math.cos(a), y + r * math.sin(a)) for r, a in zip(radii, angles)]


def radial_polygon(x: float, y: float, values: Sequence[float], scale: LinearScale) -> list[tuple[float, float]]:
    """Closed outline through every vertex and the marker center."""
    pts = radial_vertices(x, y, values, scale)
    pts.append((x, y))
    pts.append(pts[0])
    return pts


def radial_spokes(x: float, y: float, values: Sequence[float], scale: LinearScale) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    return [((x, y), tip) for tip in radial_vertices(x, y, values, scale)]


def year_label_anchors(x: float, y: float, values: Sequence[float], scale: LinearScale) -> list[tuple[float, float]]:
    return radial_vertices(x, y, values, scale, gap=YEAR_LABEL_GAP)


def label_anchor(record: CountryRecord, scale: LinearScale) -> tuple[float, float]:
    return record.x, record.y + scale(record.value) + LABEL_GAP


def circle_path(x: float, y: float, radius: float, segments: int = CIRCLE_SEGMENTS) -> list[tuple[float, float]]:
    """Closed polygon approximating a circle, in data units."""
    angles = 2 * math.pi / segments * np.arange(segments + 1)
    return [(x + radius * math.cos(a), y + radius * math.sin(a)) for a in angles]


__all__ = [
    "DEFAULT_ROWS",
    "LayoutError",
    "LinearScale",
    "circle_path",
    "label_anchor",
    "marker_radius",
    "radial_polygon",
    "radial_spokes",
    "radial_vertices",
    "radius_scale",
    "row_spacing",
    "sort_records",
    "triangle_size",
    "triangular_layout",
    "year_label_anchors",
]
