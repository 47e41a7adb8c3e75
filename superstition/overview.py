"""Overview figure: one marker per country arranged in the triangle.

Coordinates follow screen conventions (origin top-left, y down) so the layout
engine's output is used as is; the y axis is reversed and locked to the x
scale. Every country marker is a filled path carrying
`meta={"country", "outline"}`, which the page script reads for click and
hover handling. Marker tooltips come from `InteractionHandler.on_hover`.
"""
from __future__ import annotations

import logging
from typing import Any

import plotly.graph_objects as go

from superstition.countries import FLAG_COLORS, complement, spoke_color
from superstition.interaction import InteractionHandler
from superstition.layout import (
    DEFAULT_ROWS,
    circle_path,
    label_anchor,
    marker_radius,
    radial_polygon,
    radial_spokes,
    radius_scale,
    row_spacing,
    sort_records,
    triangular_layout,
    year_label_anchors,
)
from superstition.records import CountryRecord
from superstition.session import Session
from superstition.styling import style_figure

logger = logging.getLogger(__name__)


def layout_for_year(session: Session, year: int, width: float, height: float,
                    rows: int = DEFAULT_ROWS) -> list[CountryRecord]:
    return triangular_layout(sort_records(session.country_records(year)), width, height, rows)


def _marker_meta(country: str) -> dict[str, str]:
    return {"country": country, "outline": complement(FLAG_COLORS[country])}


def _canvas_axes(fig: go.Figure, width: float, height: float) -> None:
    fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
    fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True, scaleanchor="x", scaleratio=1)
    fig.update_layout(dragmode=False, plot_bgcolor="white")


def build_polygon_overview(session: Session, year: int, width: float, height: float,
                           rows: int = DEFAULT_ROWS, handler: InteractionHandler | None = None) -> go.Figure:
    """Radial polygon per country built from its whole tabular series."""
    handler = handler or InteractionHandler(session, year)
    records = layout_for_year(session, year, width, height, rows)
    scale = radius_scale(session.global_max(), row_spacing(width, height, rows))
    fig = go.Figure()

    for rec in records:
        points = session.tabular(rec.country)
        values = points["Index"].tolist()
        color = FLAG_COLORS[rec.country]
        meta = _marker_meta(rec.country)
        poly = radial_polygon(rec.x, rec.y, values, scale)
        fig.add_trace(go.Scatter(
            x=[p[0] for p in poly],
            y=[p[1] for p in poly],
            mode="lines",
            fill="toself",
            fillcolor=color,
            line={"width": 0, "color": color},
            hoveron="fills+points",
            hoverinfo="text",
            text=handler.on_hover(rec, year=year).html(),
            name=rec.country,
            meta=meta,
        ))

        xs: list[Any] = []
        ys: list[Any] = []
        for (x0, y0), (x1, y1) in radial_spokes(rec.x, rec.y, values, scale):
            xs += [x0, x1, None]
            ys += [y0, y1, None]
        if xs:
            fig.add_trace(go.Scatter(
                x=xs, y=ys, mode="lines",
                line={"width": 1, "color": spoke_color(rec.country)},
                hoverinfo="skip", showlegend=False, meta=meta,
            ))

        anchors = year_label_anchors(rec.x, rec.y, values, scale)
        if anchors:
            fig.add_trace(go.Scatter(
                x=[a[0] for a in anchors],
                y=[a[1] for a in anchors],
                mode="text",
                text=[str(y) for y in points["Year"].tolist()],
                textfont={"size": 8},
                hoverinfo="skip", showlegend=False,
            ))

    fig.add_trace(go.Scatter(
        x=[label_anchor(rec, scale)[0] for rec in records],
        y=[label_anchor(rec, scale)[1] for rec in records],
        mode="text",
        text=[rec.country for rec in records],
        textfont={"size": 12},
        hoverinfo="skip", showlegend=False,
    ))

    _canvas_axes(fig, width, height)
    style_figure(fig, legend=False)
    fig.update_layout(title_text=f"Superstition Index {year}")
    return fig


def _circle_frame(session: Session, records: list[CountryRecord], year: int, radius: float,
                  handler: InteractionHandler) -> dict[str, Any]:
    """Per-trace paths (in roster order) and label annotations for one year."""
    by_country = {rec.country: rec for rec in records}
    xs, ys, texts = [], [], []
    for country in session.countries:
        rec = by_country[country]
        path = circle_path(rec.x, rec.y, radius)
        xs.append([p[0] for p in path])
        ys.append([p[1] for p in path])
        texts.append(handler.on_hover(rec, year=year).html())
    annotations = [
        {
            "x": rec.x, "y": rec.y + radius + 15,
            "xref": "x", "yref": "y",
            "text": rec.country, "showarrow": False,
            "font": {"size": 12},
        }
        for rec in records
    ]
    return {"x": xs, "y": ys, "text": texts, "annotations": annotations}


def build_circle_overview(session: Session, year: int, width: float, height: float,
                          rows: int = DEFAULT_ROWS, handler: InteractionHandler | None = None) -> go.Figure:
    """Circle per country with a year selector; each year is laid out from its own ranking."""
    handler = handler or InteractionHandler(session, year)
    radius = marker_radius(row_spacing(width, height, rows))
    years = session.years() or [year]
    if year not in years:
        logger.info("Year %s has no data, showing %s", year, years[-1])
        year = years[-1]

    frames = {
        y: _circle_frame(session, layout_for_year(session, y, width, height, rows), y, radius, handler)
        for y in years
    }
    first = frames[year]
    fig = go.Figure()
    for i, country in enumerate(session.countries):
        color = FLAG_COLORS[country]
        fig.add_trace(go.Scatter(
            x=first["x"][i],
            y=first["y"][i],
            mode="lines",
            fill="toself",
            fillcolor=color,
            line={"width": 0, "color": color},
            hoveron="fills",
            hoverinfo="text",
            text=first["text"][i],
            name=country,
            meta=_marker_meta(country),
        ))
    fig.update_layout(annotations=first["annotations"])

    buttons = []
    for y in years:
        fr = frames[y]
        buttons.append({
            "label": str(y),
            "method": "update",
            "args": [
                {"x": fr["x"], "y": fr["y"], "text": fr["text"]},
                {"annotations": fr["annotations"], "title.text": f"Superstition Index {y}"},
            ],
        })
    fig.update_layout(updatemenus=[{
        "type": "dropdown",
        "buttons": buttons,
        "active": years.index(year),
        "x": 0.0, "xanchor": "left",
        "y": 1.08, "yanchor": "top",
    }])

    _canvas_axes(fig, width, height)
    style_figure(fig, legend=False)
    fig.update_layout(title_text=f"Superstition Index {year}")
    return fig


def build_overview(session: Session, year: int, width: float, height: float,
                   rows: int = DEFAULT_ROWS, handler: InteractionHandler | None = None) -> go.Figure:
    if session.has_spreadsheet:
        return build_polygon_overview(session, year, width, height, rows, handler)
    return build_circle_overview(session, year, width, height, rows, handler)


__all__ = [
    "build_circle_overview",
    "build_overview",
    "build_polygon_overview",
    "layout_for_year",
]
