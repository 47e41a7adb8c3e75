"""Per-country popup charts.

The comparison popup puts the spreadsheet series (one line per Series) next to
the single tabular series. Both panels share the year domain spanning every
year either source reports and use a fixed [0, 100] index range. Without a
spreadsheet source the popup has one panel whose range follows the data.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from superstition.session import Session
from superstition.styling import series_colors, style_figure
from superstition.tooltips import SPREADSHEET, TABULAR, TooltipContent, point_tooltip

INDEX_RANGE = (0.0, 100.0)
RANGE_PADDING = 1.1
TABULAR_COLOR = "red"
HOVER_TEMPLATE = "%{text}<extra></extra>"

HoverFn = Callable[[Mapping[str, Any], str], TooltipContent]


@dataclass
class PopupSpec:
    country: str
    figure: go.Figure
    year_domain: tuple[int, int] | None
    series: list[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.figure.layout.title.text or self.country


def year_domain(*frames: pd.DataFrame) -> tuple[int, int] | None:
    parts = [f["Year"] for f in frames if not f.empty]
    if not parts:
        return None
    years = pd.to_numeric(pd.concat(parts, ignore_index=True), errors="coerce").dropna()
    if years.empty:
        return None
    return int(years.min()), int(years.max())


def group_series(points: pd.DataFrame) -> list[tuple[str, pd.DataFrame]]:
    if points.empty:
        return []
    return [(str(name), grp) for name, grp in points.groupby("Series", sort=False)]


def dynamic_range(points: pd.DataFrame) -> tuple[float, float]:
    vals = pd.to_numeric(points["Index"], errors="coerce").dropna()
    top = float(vals.max()) if not vals.empty else 0.0
    if not np.isfinite(top) or top <= 0:
        return 0.0, 1.0
    return 0.0, top * RANGE_PADDING


def hover_texts(points: pd.DataFrame, source: str, hover: HoverFn = point_tooltip) -> list[str]:
    return [hover(row, source).html() for row in points.to_dict("records")]


def _series_trace(name: str, grp: pd.DataFrame, color: str, hover: HoverFn) -> go.Scatter:
    return go.Scatter(
        x=grp["Year"],
        y=grp["Index"],
        text=hover_texts(grp, SPREADSHEET, hover),
        name=name,
        mode="lines+markers",
        line={"color": color, "width": 1, "shape": "spline"},
        marker={"color": color, "size": 8},
        hovertemplate=HOVER_TEMPLATE,
    )


def _tabular_trace(country: str, points: pd.DataFrame, hover: HoverFn) -> go.Scatter:
    return go.Scatter(
        x=points["Year"],
        y=points["Index"],
        text=hover_texts(points, TABULAR, hover),
        name=f"{country} (index)",
        mode="lines+markers",
        line={"color": TABULAR_COLOR, "width": 2, "shape": "spline"},
        marker={"color": TABULAR_COLOR, "size": 8},
        hovertemplate=HOVER_TEMPLATE,
    )


def _year_axis(fig: go.Figure, domain: tuple[int, int] | None) -> None:
    opts = {"tickformat": "d", "nticks": 6, "title_text": "Year", "showgrid": False}
    if domain is not None:
        opts["range"] = [domain[0], domain[1]]
    fig.update_xaxes(**opts)


def build_comparison_popup(country: str, session: Session, hover: HoverFn = point_tooltip) -> PopupSpec:
    sheet = session.spreadsheet(country)
    table = session.tabular(country)
    domain = year_domain(sheet, table)

    fig = make_subplots(
        rows=1,
        cols=2,
        subplot_titles=("By category (spreadsheet)", "Superstition Index (CSV)"),
        horizontal_spacing=0.12,
    )
    groups = group_series(sheet)
    colors = series_colors([name for name, _ in groups])
    drawn: list[str] = []
    for name, grp in groups:
        color = colors.get(name)
        if color is None:
            continue
        fig.add_trace(_series_trace(name, grp, color, hover), row=1, col=1)
        drawn.append(name)
    if not table.empty:
        fig.add_trace(_tabular_trace(country, table, hover), row=1, col=2)

    _year_axis(fig, domain)
    fig.update_yaxes(range=list(INDEX_RANGE), title_text="Index", row=1, col=1)
    fig.update_yaxes(range=list(INDEX_RANGE), row=1, col=2)
    fig.update_layout(title_text=f"{country}: spreadsheet vs. index")
    style_figure(fig)
    return PopupSpec(country=country, figure=fig, year_domain=domain, series=drawn)


def build_single_popup(country: str, session: Session, hover: HoverFn = point_tooltip) -> PopupSpec:
    table = session.tabular(country)
    domain = year_domain(table)
    fig = go.Figure()
    if not table.empty:
        fig.add_trace(_tabular_trace(country, table, hover))
    _year_axis(fig, domain)
    fig.update_yaxes(range=list(dynamic_range(table)), title_text="Index")
    fig.update_layout(title_text=f"{country}: Superstition Index")
    style_figure(fig, legend=False)
    return PopupSpec(country=country, figure=fig, year_domain=domain, series=[country] if not table.empty else [])


def build_popup(country: str, session: Session, hover: HoverFn = point_tooltip) -> PopupSpec:
    """`hover(point, source)` supplies each chart point's tooltip."""
    if session.has_spreadsheet:
        return build_comparison_popup(country, session, hover)
    return build_single_popup(country, session, hover)


__all__ = [
    "INDEX_RANGE",
    "PopupSpec",
    "build_comparison_popup",
    "build_popup",
    "build_single_popup",
    "dynamic_range",
    "group_series",
    "hover_texts",
    "year_domain",
]
