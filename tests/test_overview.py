import pandas as pd
import pytest

from superstition.countries import COUNTRIES, FLAG_COLORS
from superstition.interaction import InteractionHandler
from superstition.overview import build_overview, layout_for_year
from superstition.records import CountryRecord
from superstition.records import empty_points
from superstition.session import Session
from superstition.sources import DataSource


class YearSource(DataSource):
    kind = "years"

    def __init__(self, table):
        super().__init__(".", "{country}")
        self.table = table

    def fetch(self, country):
        rows = [{"Year": y, "Index": v, "Series": country} for y, v in self.table.get(country, [])]
        return pd.DataFrame(rows) if rows else empty_points()


def _session(with_sheet, korea_2022=10.0):
    table = {
        "Korea": [(2021, 80.0), (2022, korea_2022)],
        "Japan": [(2021, 5.0), (2022, 90.0)],
        "US": [(2021, 40.0), (2022, 40.0)],
    }
    sheet = YearSource({}) if with_sheet else None
    return Session(YearSource(table), sheet).load_all()


def test_layout_for_year_ranks_by_that_year():
    session = _session(with_sheet=True)
    top_2022 = layout_for_year(session, 2022, 1200, 900)[-1]
    top_2021 = layout_for_year(session, 2021, 1200, 900)[-1]
    assert top_2022.country == "Japan"
    assert top_2021.country == "Korea"


def test_polygon_overview_traces():
    fig = build_overview(_session(with_sheet=True), 2022, 1200, 900)
    fills = [t for t in fig.data if t.fill == "toself"]
    assert len(fills) == len(COUNTRIES)
    korea = next(t for t in fills if t.name == "Korea")
    assert korea.fillcolor == FLAG_COLORS["Korea"]
    assert korea.meta["country"] == "Korea"
    assert korea.text == "Index(2022): 10"
    assert list(fig.layout.yaxis.range) == [900, 0]


def test_circle_overview_has_one_button_per_year():
    fig = build_overview(_session(with_sheet=False), 2022, 1200, 900)
    menu = fig.layout.updatemenus[0]
    assert [b.label for b in menu.buttons] == ["2021", "2022"]
    assert menu.active == 1
    circles = [t for t in fig.data if t.fill == "toself"]
    assert [t.meta["country"] for t in circles] == list(COUNTRIES)
    assert all(t.hoveron == "fills" for t in circles)
    assert not fig.layout.shapes
    update = menu.buttons[0].args[0]
    assert len(update["x"]) == len(update["text"]) == len(COUNTRIES)
    korea = COUNTRIES.index("Korea")
    assert update["text"][korea] == "Index(2021): 80"


def test_circle_hit_area_is_the_drawn_radius():
    fig = build_overview(_session(with_sheet=False), 2022, 1200, 900)
    korea = next(t for t in fig.data if t.name == "Korea")
    rec = next(r for r in layout_for_year(_session(with_sheet=False), 2022, 1200, 900) if r.country == "Korea")
    # spacing = 900 / 6, radius = spacing * 0.4
    assert max(korea.x) - rec.x == pytest.approx(60.0)
    assert max(korea.y) - rec.y == pytest.approx(60.0, abs=0.5)


def test_marker_text_comes_from_on_hover():
    session = _session(with_sheet=True, korea_2022=33.3333333)
    handler = InteractionHandler(session, 2022)
    fig = build_overview(session, 2022, 1200, 900, handler=handler)
    korea = next(t for t in fig.data if t.fill == "toself" and t.name == "Korea")
    expected = handler.on_hover(CountryRecord("Korea", session.value_for("Korea", 2022))).html()
    assert korea.text == expected == "Index(2022): 33.3333333"


def test_country_labels_use_default_color():
    fig = build_overview(_session(with_sheet=True), 2022, 1200, 900)
    labels = fig.data[-1]
    assert set(labels.text) == set(COUNTRIES)
    assert labels.textfont.color is None
