"""Fixed country roster and the colors used to draw it."""

COUNTRIES = [
    "Korea", "Japan", "US", "Canada", "Finland",
    "Norway", "Sweden", "UK", "France", "Spain",
    "Czech", "Hungary", "Mexico", "Chile", "Australia",
]

# Continent names appear in the spreadsheet file names
CONTINENTS = {
    "Korea": "Asia",
    "Japan": "Asia",
    "US": "NorthAmerica",
    "Canada": "NorthAmerica",
    "Finland": "Europe",
    "Norway": "Europe",
    "Sweden": "Europe",
    "UK": "Europe",
    "France": "Europe",
    "Spain": "Europe",
    "Czech": "Europe",
    "Hungary": "Europe",
    "Mexico": "SouthAmerica",
    "Chile": "SouthAmerica",
    "Australia": "Oceania",
}

FLAG_COLORS = {
    "Korea": "#FF0000",      # red
    "Japan": "#FFA500",      # orange
    "US": "#FFFF00",         # yellow
    "Canada": "#008000",     # green
    "Finland": "#0000FF",    # blue
    "Norway": "#000080",     # navy
    "Sweden": "#800080",     # purple
    "UK": "#A52A2A",         # brown
    "France": "#90EE90",     # lightgreen
    "Spain": "#FFC0CB",      # pink
    "Czech": "#87CEEB",      # skyblue
    "Hungary": "#5CFFD1",    # mint
    "Mexico": "#FF00FF",     # magenta
    "Chile": "#808080",      # gray
    "Australia": "#FBCEB1",  # apricot
}


def continent_of(country: str) -> str:
    try:
        return CONTINENTS[country]
    except KeyError:
        raise KeyError(f"Unknown country '{country}'") from None


def complement(color: str) -> str:
    """Return the RGB complement of a '#RRGGBB' color."""
    raw = color.lstrip("#")
    if len(raw) != 6:
        raise ValueError(f"Expected a #RRGGBB color, got {color!r}")
    r, g, b = (int(raw[i:i + 2], 16) for i in (0, 2, 4))
    return "#{:02X}{:02X}{:02X}".format(255 - r, 255 - g, 255 - b)


def spoke_color(country: str) -> str:
    # Gray's complement is gray again
    if country == "Chile":
        return "#000000"
    return complement(FLAG_COLORS[country])


__all__ = [
    "COUNTRIES",
    "CONTINENTS",
    "FLAG_COLORS",
    "continent_of",
    "complement",
    "spoke_color",
]
