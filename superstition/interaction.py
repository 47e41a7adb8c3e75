"""Hover and select behavior, independent of how the page draws it."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from superstition.popup import PopupSpec, build_popup
from superstition.records import CountryRecord
from superstition.session import Session
from superstition.tooltips import TABULAR, TooltipContent, marker_tooltip, point_tooltip


class PopupHost:
    """Holds the open popup; opening another one replaces it."""

    def __init__(self) -> None:
        self._current: PopupSpec | None = None

    @property
    def current(self) -> PopupSpec | None:
        return self._current

    @property
    def popups(self) -> list[PopupSpec]:
        return [self._current] if self._current is not None else []

    def open(self, spec: PopupSpec) -> PopupSpec:
        self.dismiss()
        self._current = spec
        return spec

    def dismiss(self) -> None:
        self._current = None


class InteractionHandler:
    def __init__(self, session: Session, year: int, host: PopupHost | None = None):
        self.session = session
        self.year = year
        self.host = host or PopupHost()

    def on_hover(
        self,
        point: CountryRecord | Mapping[str, Any],
        source: str = TABULAR,
        *,
        year: int | None = None,
    ) -> TooltipContent:
        """Tooltip for a country marker or for one chart point.

        Chart points are mappings with Year/Index/Series keys; `source` says
        which dataset they come from, and only spreadsheet points show their
        Series. `year` overrides the handler's year for marker tooltips.
        """
        if isinstance(point, CountryRecord):
            return marker_tooltip(point, self.year if year is None else year)
        return point_tooltip(point, source)

    def on_select(self, country: str) -> PopupSpec:
        if country not in self.session.countries:
            raise KeyError(f"Unknown country '{country}'")
        return self.host.open(build_popup(country, self.session, hover=self.on_hover))

    def dismiss(self) -> None:
        self.host.dismiss()


__all__ = ["InteractionHandler", "PopupHost", "TooltipContent"]
