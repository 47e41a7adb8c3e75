"""Assemble the interactive HTML page.

The overview figure is embedded with Plotly's own HTML export. Popup figures
are embedded as JSON and drawn on demand: a click on a country removes any open
popup and builds a fresh one (dimming overlay, panel, close glyph, chart), so at
most one popup element exists at a time.
"""
from __future__ import annotations

import html as html_lib
import json
import logging
import os
from collections.abc import Mapping
from typing import Any

import plotly.graph_objects as go

from superstition.interaction import InteractionHandler
from superstition.overview import build_overview
from superstition.popup import PopupSpec
from superstition.session import Session
from superstition.styling import FONT_FAMILY

logger = logging.getLogger(__name__)

OVERVIEW_DIV = "overview-plot"

PAGE_CSS = """
body { margin: 0; font-family: %(font)s; }
#popup { position: fixed; inset: 0; z-index: 10; }
#popup .overlay { position: absolute; inset: 0; background: black; opacity: 0.3; }
#popup .panel { position: absolute; left: 8.33%%; top: 14.29%%; width: 83.33%%; height: 71.43%%;
  background: white; border: 1px solid #333; border-radius: 10px; }
#popup .close { position: absolute; right: 10px; top: 10px; width: 24px; height: 24px;
  background: #eee; border: 1px solid #333; cursor: pointer; font-size: 19px; line-height: 20px; padding: 0; }
#popup .chart { position: absolute; inset: 40px 20px 20px 20px; }
"""

PAGE_JS = """
(function () {
  var figures = JSON.parse(document.getElementById('popup-figures').textContent);

  function closePopup() {
    var old = document.getElementById('popup');
    if (!old) { return; }
    var chart = old.querySelector('.chart');
    if (chart) { Plotly.purge(chart); }
    old.remove();
  }

  function showPopup(country) {
    var fig = figures[country];
    if (!fig) { return; }
    closePopup();
    var popup = document.createElement('div');
    popup.id = 'popup';
    popup.innerHTML = '<div class="overlay"></div><div class="panel">' +
      '<button class="close" title="Close">\\u00d7</button><div class="chart"></div></div>';
    popup.querySelector('.overlay').addEventListener('click', closePopup);
    popup.querySelector('.close').addEventListener('click', function (e) {
      e.stopPropagation();
      closePopup();
    });
    document.body.appendChild(popup);
    Plotly.newPlot(popup.querySelector('.chart'), fig.data, fig.layout, {responsive: true});
  }

  function countryOf(pt) {
    return pt.data.meta && pt.data.meta.country;
  }

  window.addEventListener('load', function () {
    var gd = document.getElementById('%(div)s');
    gd.on('plotly_click', function (ev) {
      if (ev.points.length) { showPopup(countryOf(ev.points[0])); }
    });
    gd.on('plotly_hover', function (ev) {
      var pt = ev.points[0];
      if (pt && pt.data.fill === 'toself' && pt.data.meta) {
        Plotly.restyle(gd, {'line.width': 2, 'line.color': pt.data.meta.outline}, [pt.curveNumber]);
      }
    });
    gd.on('plotly_unhover', function (ev) {
      var pt = ev.points[0];
      if (pt && pt.data.fill === 'toself') {
        Plotly.restyle(gd, {'line.width': 0}, [pt.curveNumber]);
      }
    });
  });
})();
"""


def _script_json(payload: dict[str, Any]) -> str:
    # Keep "</script>" inside strings from closing the tag
    return json.dumps(payload).replace("</", "<\\/")


def build_page(overview: go.Figure, popups: Mapping[str, PopupSpec], title: str) -> str:
    overview_html = overview.to_html(
        full_html=False,
        include_plotlyjs="cdn",
        div_id=OVERVIEW_DIV,
        config={"responsive": True, "displayModeBar": False},
    )
    figures = {country: json.loads(spec.figure.to_json()) for country, spec in popups.items()}
    return (
        "<!DOCTYPE html>\n<html lang=\"en\">\n<head>\n<meta charset=\"utf-8\">\n"
        f"<title>{html_lib.escape(title)}</title>\n"
        f"<style>{PAGE_CSS % {'font': FONT_FAMILY}}</style>\n</head>\n<body>\n"
        f"<div id=\"overview\">{overview_html}</div>\n"
        f"<script type=\"application/json\" id=\"popup-figures\">{_script_json(figures)}</script>\n"
        f"<script>{PAGE_JS % {'div': OVERVIEW_DIV}}</script>\n"
        "</body>\n</html>\n"
    )


def default_output(cfg: Mapping[str, Any]) -> str:
    return cfg.get("output") or os.path.join("site", "debug.html" if cfg.get("variant") == "debug" else "index.html")


def render_site(cfg: Mapping[str, Any], session: Session | None = None) -> str:
    """Load every country, lay out, build popups, write the page; return its path."""
    if session is None:
        session = Session.from_config(dict(cfg))
    if not session.loaded:
        session.load_all()

    year = int(cfg.get("year", 2022))
    canvas = cfg.get("canvas") or {}
    width = float(canvas.get("width", 1200))
    height = float(canvas.get("height", 900))
    rows = int(cfg.get("rows", 5))

    handler = InteractionHandler(session, year)
    overview = build_overview(session, year, width, height, rows, handler)
    popups: dict[str, PopupSpec] = {}
    for country in session.countries:
        popups[country] = handler.on_select(country)
    handler.dismiss()

    out_path = default_output(cfg)
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    page = build_page(overview, popups, f"Superstition Index {year}")
    with open(out_path, "w", encoding="utf-8") as fh:
        fh.write(page)
    logger.info("Wrote %s (%d popups)", out_path, len(popups))
    return out_path


__all__ = ["build_page", "default_output", "render_site"]
