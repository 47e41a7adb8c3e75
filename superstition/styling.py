"""Shared Plotly styling."""
import plotly.express as px

FONT_FAMILY = "Pretendard, Helvetica, Arial, sans-serif"
PALETTE = list(px.colors.qualitative.D3)
# Gray collides with the panel chrome, so series never use it
NEUTRAL_COLOR = "#7f7f7f"


def style_figure(fig, *, legend: bool = True) -> None:
    fig.update_layout(
        template="plotly_white",
        hovermode="closest",
        showlegend=legend,
        margin={"t": 60, "b": 40, "l": 40, "r": 20},
        font={"family": FONT_FAMILY, "size": 12},
        hoverlabel={"bgcolor": "white", "bordercolor": "#333", "font": {"family": FONT_FAMILY}},
    )
    if legend:
        fig.update_layout(legend={"orientation": "v", "x": -0.12, "xanchor": "right", "y": 0.5, "yanchor": "middle"})


def series_colors(names):
    """Assign palette colors by position, dropping names that land on the neutral slot."""
    out = {}
    for i, name in enumerate(names):
        color = PALETTE[i % len(PALETTE)]
        if color.lower() == NEUTRAL_COLOR:
            continue
        out[name] = color
    return out


__all__ = ["FONT_FAMILY", "NEUTRAL_COLOR", "PALETTE", "series_colors", "style_figure"]
