"""Per-country data sources.

Every source normalizes its input into the point schema
(columns Year, Index, Series). Files are resolved below a data root which may be
a local directory or an http(s) URL; remote files are fetched with requests.

Failure policy: `DataSource.load` never raises. A missing or malformed file is
logged and the country gets an empty dataset.
"""
from __future__ import annotations

import logging
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from io import BytesIO
from typing import Any
from urllib.parse import quote

import numpy as np
import pandas as pd
import requests

from superstition.countries import continent_of
from superstition.records import INDEX_COLUMN, POINT_COLUMNS, empty_points

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def is_remote(root: str) -> bool:
    return root.lower().startswith(("http://", "https://"))


def resolve_location(root: str, relative: str) -> str:
    if is_remote(root):
        parts = [quote(seg) for seg in relative.split("/") if seg]
        return root.rstrip("/") + "/" + "/".join(parts)
    return os.path.join(root, *relative.split("/"))


def read_bytes(location: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    if is_remote(location):
        r = requests.get(location, timeout=timeout)
        r.raise_for_status()
        return r.content
    with open(location, "rb") as fh:
        return fh.read()


def melt_sheet(raw: Sequence[Sequence[Any]]) -> pd.DataFrame:
    """Flatten spreadsheet rows into one point per (series, year) cell.

    Row 0 holds year labels in columns 1..M; every later row is one series
    whose name sits in column 0. Points come out series-major, years in header
    order. Header cells that are not numeric are skipped; missing trailing
    cells become NaN.
    """
    if not raw:
        return empty_points()
    header = list(raw[0])
    years: list[tuple[int, int]] = []
    for j in range(1, len(header)):
        year = pd.to_numeric(header[j], errors="coerce")
        if pd.isna(year):
            logger.debug("Skipping non-numeric header cell %r", header[j])
            continue
        years.append((j, int(year)))

    rows: list[dict[str, Any]] = []
    for row in raw[1:]:
        row = list(row)
        if not row:
            continue
        name = row[0]
        if name is None or (isinstance(name, float) and np.isnan(name)):
            continue
        for j, year in years:
            cell = row[j] if j < len(row) else None
            rows.append({
                "Year": year,
                "Index": pd.to_numeric(cell, errors="coerce") if cell is not None else np.nan,
                "Series": str(name),
            })
    if not rows:
        return empty_points()
    out = pd.DataFrame(rows, columns=POINT_COLUMNS)
    out["Index"] = out["Index"].astype(float)
    return out


def _tabular_points(df: pd.DataFrame, series: str) -> pd.DataFrame:
    year_col = next((c for c in df.columns if str(c).strip().lower() == "year"), None)
    val_col = next((c for c in df.columns if str(c).strip().lower() == INDEX_COLUMN.lower()), None)
    if not year_col or not val_col:
        raise ValueError(f"expected columns 'Year' and '{INDEX_COLUMN}', got {list(df.columns)}")
    out = pd.DataFrame({
        "Year": pd.to_numeric(df[year_col], errors="coerce"),
        "Index": pd.to_numeric(df[val_col], errors="coerce"),
    })
    out = out.dropna(subset=["Year"])
    out["Year"] = out["Year"].astype(int)
    out["Series"] = series
    return out.reset_index(drop=True)[POINT_COLUMNS]


class DataSource(ABC):
    """One kind of per-country input file."""

    kind = "source"

    def __init__(self, data_root: str, template: str, *, timeout: float = DEFAULT_TIMEOUT):
        self.data_root = data_root
        self.template = template
        self.timeout = timeout

    def relative_path(self, country: str) -> str:
        return self.template.format(country=country, continent=continent_of(country))

    def location(self, country: str) -> str:
        return resolve_location(self.data_root, self.relative_path(country))

    @abstractmethod
    def fetch(self, country: str) -> pd.DataFrame:
        """Read and normalize the country's file; may raise."""

    def load(self, country: str) -> pd.DataFrame:
        try:
            return self.fetch(country)
        except Exception as exc:
            logger.warning("No %s data for %s (%s): %s", self.kind, country, self.location(country), exc)
            return empty_points()


class SpreadsheetSource(DataSource):
    """First worksheet of {Continent}_{Country}.xlsx, one series per row."""

    kind = "spreadsheet"

    def fetch(self, country: str) -> pd.DataFrame:
        data = read_bytes(self.location(country), timeout=self.timeout)
        sheet = pd.read_excel(BytesIO(data), sheet_name=0, header=None)
        raw = sheet.astype(object).where(sheet.notna(), None).values.tolist()
        return melt_sheet(raw)


class TabularSource(DataSource):
    """{Country}_Superstition_Index.csv, a single series named after the country."""

    kind = "tabular"

    def fetch(self, country: str) -> pd.DataFrame:
        data = read_bytes(self.location(country), timeout=self.timeout)
        return _tabular_points(pd.read_csv(BytesIO(data)), country)


class DebugTabularSource(DataSource):
    """A single CSV shared by every country.

    With a Country column the rows are split per country; without one every
    row belongs to `default_country`.
    """

    kind = "debug"

    def __init__(self, data_root: str, template: str, *, default_country: str = "Korea",
                 timeout: float = DEFAULT_TIMEOUT):
        super().__init__(data_root, template, timeout=timeout)
        self.default_country = default_country
        self._table: pd.DataFrame | None = None
        self._lock = threading.Lock()

    def relative_path(self, country: str) -> str:
        return self.template

    def _read_table(self) -> pd.DataFrame:
        with self._lock:
            if self._table is None:
                data = read_bytes(self.location(self.default_country), timeout=self.timeout)
                self._table = pd.read_csv(BytesIO(data))
            return self._table

    def fetch(self, country: str) -> pd.DataFrame:
        table = self._read_table()
        country_col = next((c for c in table.columns if str(c).strip().lower() == "country"), None)
        if country_col is None:
            if country != self.default_country:
                return empty_points()
            return _tabular_points(table, country)
        rows = table[table[country_col].astype(str).str.strip() == country]
        return _tabular_points(rows, country)


def sources_for_config(cfg: dict[str, Any]) -> tuple[DataSource | None, DataSource]:
    """Return (spreadsheet source or None, tabular source) for the configured variant."""
    root = str(cfg.get("data_root") or ".")
    paths = cfg.get("paths") or {}
    if cfg.get("variant") == "debug":
        return None, DebugTabularSource(root, paths.get("debug", "superstition_idx_korea.csv"))
    spreadsheet = SpreadsheetSource(root, paths.get("spreadsheet", "{country}/{continent}_{country}.xlsx"))
    tabular = TabularSource(root, paths.get("tabular", "{country}/{country}_Superstition_Index.csv"))
    return spreadsheet, tabular


__all__ = [
    "DataSource",
    "SpreadsheetSource",
    "TabularSource",
    "DebugTabularSource",
    "melt_sheet",
    "read_bytes",
    "resolve_location",
    "sources_for_config",
]
