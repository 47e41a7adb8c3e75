import pandas as pd
import pytest

from superstition.countries import COUNTRIES
from superstition.layout import sort_records, triangular_layout
from superstition.records import empty_points
from superstition.session import Session
from superstition.sources import DataSource


class FakeSource(DataSource):
    kind = "fake"

    def __init__(self, values, failing=()):
        super().__init__(".", "{country}.csv")
        self.values = values
        self.failing = set(failing)

    def fetch(self, country):
        if country in self.failing:
            raise IOError("simulated fetch failure")
        rows = [{"Year": y, "Index": v, "Series": country} for y, v in self.values.get(country, [])]
        return pd.DataFrame(rows, columns=["Year", "Index", "Series"]) if rows else empty_points()


def _values():
    return {c: [(2021, float(i)), (2022, float(i) * 2)] for i, c in enumerate(COUNTRIES)}


def test_load_all_fills_both_caches():
    session = Session(FakeSource(_values()), FakeSource({}), max_workers=3).load_all()
    assert session.loaded
    assert set(session.tabular_by_country) == set(COUNTRIES)
    assert set(session.spreadsheet_by_country) == set(COUNTRIES)
    assert session.tabular("Japan")["Index"].tolist() == [1.0, 2.0]
    assert session.spreadsheet("Japan").empty


def test_fetch_failure_gives_empty_cache_and_zero_value():
    session = Session(FakeSource(_values(), failing={"Mexico"})).load_all()
    assert session.tabular_by_country["Mexico"].empty

    records = session.country_records(2022)
    mexico = next(r for r in records if r.country == "Mexico")
    assert mexico.value == 0.0

    laid_out = triangular_layout(sort_records(records), 1200, 900)
    assert len(laid_out) == 15
    assert any(r.country == "Mexico" and r.position is not None for r in laid_out)


def test_unexpected_task_error_is_logged_not_raised(caplog):
    class Exploding(FakeSource):
        def load(self, country):
            if country == "UK":
                raise RuntimeError("boom")
            return super().load(country)

    session = Session(Exploding(_values())).load_all()
    assert session.tabular("UK").empty
    assert "UK" in caplog.text


def test_value_is_max_for_year_and_zero_when_missing():
    values = _values()
    values["Korea"] = [(2022, 10.0), (2022, 70.0), (2020, 99.0)]
    session = Session(FakeSource(values)).load_all()
    assert session.value_for("Korea", 2022) == 70.0
    assert session.value_for("Korea", 1999) == 0.0
    assert session.years() == [2020, 2021, 2022]
    assert session.global_max() == 99.0


def test_unknown_country_raises():
    session = Session(FakeSource({})).load_all()
    with pytest.raises(KeyError):
        session.tabular("Atlantis")
    assert session.global_max() == 1.0


def test_caches_are_read_only():
    session = Session(FakeSource(_values())).load_all()
    with pytest.raises(TypeError):
        session.tabular_by_country["Korea"] = empty_points()
