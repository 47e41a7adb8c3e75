"""Tooltip text shared by the overview markers and the popup charts."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import pandas as pd

from superstition.records import CountryRecord

SPREADSHEET = "spreadsheet"
TABULAR = "tabular"


@dataclass(frozen=True)
class TooltipContent:
    lines: tuple

    def html(self) -> str:
        return "<br>".join(self.lines)

    def __str__(self) -> str:
        return "\n".join(self.lines)


def format_value(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return "n/a"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def marker_tooltip(record: CountryRecord, year: int) -> TooltipContent:
    return TooltipContent((f"Index({year}): {format_value(record.value)}",))


def point_tooltip(point: Mapping[str, Any], source: str = TABULAR) -> TooltipContent:
    """Series/Year/Index for spreadsheet points, Year/Index for tabular ones."""
    lines = []
    if source == SPREADSHEET:
        lines.append(f"Series: {point.get('Series')}")
    lines.append(f"Year: {format_value(point.get('Year'))}")
    lines.append(f"Index: {format_value(point.get('Index'))}")
    return TooltipContent(tuple(lines))


__all__ = [
    "SPREADSHEET",
    "TABULAR",
    "TooltipContent",
    "format_value",
    "marker_tooltip",
    "point_tooltip",
]
