"""Record types shared by the loader, layout engine and popup builder.

Series observations are carried as pandas DataFrames with the POINT_COLUMNS
schema (one row per point); the small dataclasses below describe the countries
being laid out.
"""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

POINT_COLUMNS = ["Year", "Index", "Series"]
INDEX_COLUMN = "Superstition Index"


def empty_points() -> pd.DataFrame:
    return pd.DataFrame({
        "Year": pd.Series(dtype="int64"),
        "Index": pd.Series(dtype="float64"),
        "Series": pd.Series(dtype="object"),
    })


@dataclass(frozen=True)
class LayoutPosition:
    x: float
    y: float


@dataclass(frozen=True)
class CountryRecord:
    country: str
    value: float
    position: LayoutPosition | None = None

    @property
    def x(self) -> float:
        if self.position is None:
            raise AttributeError(f"{self.country} has not been laid out")
        return self.position.x

    @property
    def y(self) -> float:
        if self.position is None:
            raise AttributeError(f"{self.country} has not been laid out")
        return self.position.y


__all__ = [
    "POINT_COLUMNS",
    "INDEX_COLUMN",
    "empty_points",
    "LayoutPosition",
    "CountryRecord",
]
