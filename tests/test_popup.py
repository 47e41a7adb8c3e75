import pandas as pd
import pytest

from superstition.countries import COUNTRIES
from superstition.popup import build_popup, dynamic_range, group_series, year_domain
from superstition.records import empty_points
from superstition.session import Session
from superstition.sources import DataSource
from superstition.styling import NEUTRAL_COLOR, PALETTE, series_colors


class FrameSource(DataSource):
    kind = "frames"

    def __init__(self, frames):
        super().__init__(".", "{country}")
        self.frames = frames

    def fetch(self, country):
        return self.frames.get(country, empty_points())


def _points(series, pairs):
    return pd.DataFrame([{"Year": y, "Index": v, "Series": series} for y, v in pairs])


def _sheet(n_series):
    parts = [_points(f"S{i}", [(2016, i), (2018, i + 1)]) for i in range(n_series)]
    return pd.concat(parts, ignore_index=True)


def _session(sheet=None, table=None, with_sheet=True):
    tab = FrameSource({"Korea": table if table is not None else _points("Korea", [(2019, 40), (2022, 55)])})
    spread = FrameSource({"Korea": sheet if sheet is not None else _sheet(3)}) if with_sheet else None
    return Session(tab, spread).load_all()


def test_comparison_popup_has_two_panels_sharing_year_domain():
    spec = build_popup("Korea", _session())
    fig = spec.figure
    assert spec.year_domain == (2016, 2022)
    assert list(fig.layout.xaxis.range) == [2016, 2022]
    assert list(fig.layout.xaxis2.range) == [2016, 2022]
    assert list(fig.layout.yaxis.range) == [0, 100]
    assert list(fig.layout.yaxis2.range) == [0, 100]
    assert [t.name for t in fig.data if t.xaxis == "x"] == ["S0", "S1", "S2"]
    assert [t.line.color for t in fig.data if t.xaxis == "x2"] == ["red"]


def test_neutral_palette_slot_is_skipped():
    spec = build_popup("Korea", _session(sheet=_sheet(9)))
    colors = [t.line.color.lower() for t in spec.figure.data]
    assert NEUTRAL_COLOR not in colors
    # the eighth series lands on the gray slot and is left out
    assert "S7" not in spec.series
    assert len(spec.series) == 8


def test_series_colors_follow_palette_positions():
    colors = series_colors(["a", "b"])
    assert colors == {"a": PALETTE[0], "b": PALETTE[1]}


def test_hover_shows_series_year_index():
    spec = build_popup("Korea", _session())
    sheet_trace = spec.figure.data[0]
    assert sheet_trace.hovertemplate == "%{text}<extra></extra>"
    assert sheet_trace.text[0] == "Series: S0<br>Year: 2016<br>Index: 0"
    table_trace = spec.figure.data[-1]
    assert table_trace.text[0] == "Year: 2019<br>Index: 40"
    assert sheet_trace.line.shape == "spline"


def test_single_source_popup_uses_padded_range():
    spec = build_popup("Korea", _session(with_sheet=False))
    fig = spec.figure
    assert len(fig.data) == 1
    assert list(fig.layout.yaxis.range) == pytest.approx([0.0, 60.5])
    assert spec.year_domain == (2019, 2022)


def test_empty_country_popup_still_builds():
    session = _session()
    spec = build_popup("Norway", session)
    assert len(spec.figure.data) == 0
    assert spec.year_domain is None
    assert dynamic_range(empty_points()) == (0.0, 1.0)


def test_group_series_keeps_first_appearance_order():
    pts = pd.concat([_points("b", [(1, 1)]), _points("a", [(1, 2)]), _points("b", [(2, 3)])])
    assert [name for name, _ in group_series(pts)] == ["b", "a"]
    assert year_domain(empty_points()) is None


def test_roster_is_fifteen():
    assert len(COUNTRIES) == 15
