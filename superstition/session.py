"""Loaded state for one visualization run.

A Session owns the two per-country caches. `load_all` runs one task per
country on a thread pool and joins them all before returning, so nothing is
laid out or drawn from a partial load. Each task writes only its own country's
entries; after loading the caches are read-only.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd

from superstition.countries import COUNTRIES
from superstition.records import CountryRecord, empty_points
from superstition.sources import DataSource, sources_for_config

logger = logging.getLogger(__name__)


class Session:
    def __init__(
        self,
        tabular: DataSource,
        spreadsheet: DataSource | None = None,
        *,
        countries: Sequence[str] = COUNTRIES,
        max_workers: int = 4,
    ):
        self.tabular_source = tabular
        self.spreadsheet_source = spreadsheet
        self.countries = list(countries)
        self.max_workers = max(1, int(max_workers))
        self._spreadsheet: dict[str, pd.DataFrame] = {}
        self._tabular: dict[str, pd.DataFrame] = {}
        self.loaded = False

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> Session:
        spreadsheet, tabular = sources_for_config(cfg)
        return cls(tabular, spreadsheet, max_workers=cfg.get("max_workers", 4))

    @property
    def spreadsheet_by_country(self) -> Mapping[str, pd.DataFrame]:
        return MappingProxyType(self._spreadsheet)

    @property
    def tabular_by_country(self) -> Mapping[str, pd.DataFrame]:
        return MappingProxyType(self._tabular)

    @property
    def has_spreadsheet(self) -> bool:
        return self.spreadsheet_source is not None

    def _load_country(self, country: str) -> None:
        if self.spreadsheet_source is not None:
            self._spreadsheet[country] = self.spreadsheet_source.load(country)
        self._tabular[country] = self.tabular_source.load(country)

    def load_all(self) -> Session:
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(self._load_country, c): c for c in self.countries}
            for fut in as_completed(futures):
                country = futures[fut]
                try:
                    fut.result()
                except Exception:
                    logger.exception("Data load error for %s", country)
                    self._spreadsheet[country] = empty_points()
                    self._tabular[country] = empty_points()
        self.loaded = True
        empty = [c for c in self.countries if self.tabular(c).empty]
        if empty:
            logger.info("Loaded %d countries, %d without tabular data: %s",
                        len(self.countries), len(empty), ", ".join(empty))
        else:
            logger.info("Loaded %d countries", len(self.countries))
        return self

    def spreadsheet(self, country: str) -> pd.DataFrame:
        self._check_country(country)
        return self._spreadsheet.get(country, empty_points())

    def tabular(self, country: str) -> pd.DataFrame:
        self._check_country(country)
        return self._tabular.get(country, empty_points())

    def _check_country(self, country: str) -> None:
        if country not in self.countries:
            raise KeyError(f"Unknown country '{country}'")

    def years(self) -> list[int]:
        years: set = set()
        for c in self.countries:
            years.update(int(y) for y in self.tabular(c)["Year"].dropna())
        return sorted(years)

    def value_for(self, country: str, year: int) -> float:
        df = self.tabular(country)
        vals = pd.to_numeric(df.loc[df["Year"] == year, "Index"], errors="coerce").dropna()
        if vals.empty:
            return 0.0
        val = float(vals.max())
        return val if np.isfinite(val) else 0.0

    def country_records(self, year: int) -> list[CountryRecord]:
        """One record per roster country; countries without data get value 0."""
        return [CountryRecord(country=c, value=self.value_for(c, year)) for c in self.countries]

    def global_max(self) -> float:
        best = 0.0
        for c in self.countries:
            vals = pd.to_numeric(self.tabular(c)["Index"], errors="coerce").dropna()
            if not vals.empty:
                best = max(best, float(vals.max()))
        return best or 1.0


__all__ = ["Session"]
