from collections import defaultdict

import pytest

from superstition.countries import COUNTRIES
from superstition.layout import (
    LayoutError,
    LinearScale,
    circle_path,
    marker_radius,
    radial_polygon,
    radial_spokes,
    row_spacing,
    sort_records,
    triangular_layout,
)
from superstition.records import CountryRecord


def _records(values=None):
    values = values or {c: float(i) for i, c in enumerate(COUNTRIES)}
    return sort_records(CountryRecord(country=c, value=values[c]) for c in COUNTRIES)


def test_layout_fills_rows_one_to_five():
    out = triangular_layout(_records(), 1200, 900)
    assert len(out) == 15
    assert len({(r.x, r.y) for r in out}) == 15

    rows = defaultdict(list)
    for rec in out:
        rows[rec.y].append(rec.x)
    assert sorted(len(xs) for xs in rows.values()) == [1, 2, 3, 4, 5]

    spacing = row_spacing(1200, 900)
    assert spacing == pytest.approx(150.0)
    assert sorted(rows) == pytest.approx([spacing * r for r in range(1, 6)])


def test_each_row_is_centered():
    width = 1000
    out = triangular_layout(_records(), width, 700)
    rows = defaultdict(list)
    for rec in out:
        rows[rec.y].append(rec.x)
    for xs in rows.values():
        offsets = sorted(x - width / 2 for x in xs)
        assert offsets == pytest.approx([-o for o in reversed(offsets)])


def test_top_row_holds_lowest_value():
    out = triangular_layout(_records(), 1200, 900)
    assert out[0].country == "Korea"
    assert out[0].x == pytest.approx(600.0)
    assert out[-1].country == "Australia"


def test_layout_is_deterministic_and_does_not_mutate():
    recs = _records()
    a = triangular_layout(recs, 800, 600)
    b = triangular_layout(recs, 800, 600)
    assert a == b
    assert all(r.position is None for r in recs)


def test_ties_break_by_name():
    values = {c: 1.0 for c in COUNTRIES}
    ordered = [r.country for r in _records(values)]
    assert ordered == sorted(COUNTRIES)


def test_wrong_record_count_fails_loudly():
    with pytest.raises(LayoutError, match="needs 15 records, got 14"):
        triangular_layout(_records()[:14], 800, 600)


def test_linear_scale_and_polygon():
    spacing = 100.0
    scale = LinearScale((0, 50), (0, marker_radius(spacing)))
    assert scale(25) == pytest.approx(20.0)
    assert LinearScale((3, 3), (1, 9))(3) == 1.0

    poly = radial_polygon(0.0, 0.0, [50, 50, 50, 50], scale)
    # four vertices, the center, then back to the first vertex
    assert len(poly) == 6
    assert poly[0] == pytest.approx((0.0, -40.0))
    assert poly[1] == pytest.approx((40.0, 0.0))
    assert poly[4] == (0.0, 0.0)
    assert poly[-1] == poly[0]
    assert len(radial_spokes(0.0, 0.0, [10, 20], scale)) == 2


def test_nan_values_collapse_to_center():
    scale = LinearScale((0, 10), (0, 10))
    poly = radial_polygon(5.0, 5.0, [float("nan")], scale)
    assert poly[0] == pytest.approx((5.0, 5.0))


def test_circle_path_is_closed_at_radius():
    path = circle_path(100.0, 50.0, 60.0)
    assert path[0] == pytest.approx(path[-1])
    for x, y in path:
        assert ((x - 100.0) ** 2 + (y - 50.0) ** 2) ** 0.5 == pytest.approx(60.0)
