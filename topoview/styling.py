"""Colors: theme, status indicators and interface label classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Theme:
    """Color theme for the canvas."""

    def __init__(
        self,
        background: str = "#1e272e",
        grid_color: str = "#ffffff",
        grid_opacity: float = 0.05,
        text_color: str = "#ecf0f1",
        glyph_text_color: str = "#ffffff",
        selected_color: str = "#f39c12",
        hovered_color: str = "#3498db",
        connection_color: str = "#3498db",
        node_bus_color: str = "#2ecc71",
        bus_bridge_color: str = "#ff9800",
        marker_fill: str = "#ffffff",
        indicator_outline: str = "#ffffff",
        label_text_color: str = "#ffffff",
    ):
        self.background = background
        self.grid_color = grid_color
        self.grid_opacity = grid_opacity
        self.text_color = text_color
        self.glyph_text_color = glyph_text_color
        self.selected_color = selected_color
        self.hovered_color = hovered_color
        self.connection_color = connection_color
        self.node_bus_color = node_bus_color
        self.bus_bridge_color = bus_bridge_color
        self.marker_fill = marker_fill
        self.indicator_outline = indicator_outline
        self.label_text_color = label_text_color


DEFAULT_THEME = Theme()


STATUS_COLORS = {
    "starting": "#e74c3c",
    "stable": "#2ecc71",
    "active": "#2ecc71",
    "error": "#e67e22",
    "stopped": "#95a5a6",
    "inactive": "#95a5a6",
}
DEFAULT_STATUS_COLOR = "#3498db"

# Status that gets the extra in-progress dot on its indicator
STARTING_STATUS = "starting"


def default_status_color(status: str | None) -> str:
    """Indicator color for a status; unknown values get the default blue."""
    return STATUS_COLORS.get(status or "", DEFAULT_STATUS_COLOR)


@dataclass(frozen=True)
class LabelColors:
    """Background and border color of a label badge."""

    background: str
    border: str


class InterfaceCategory(Enum):
    """Groups of interface names that share a badge color."""

    CORE = "core"
    RADIO = "radio"
    DATA = "data"
    DEFAULT = "default"
    NONE = "none"


CORE_INTERFACES = frozenset({"N1", "N2", "N3", "N4"})
RADIO_INTERFACE = "Radio"
DATA_MARKERS = ("SQL", "API")

LABEL_COLORS = {
    InterfaceCategory.CORE: LabelColors("rgba(231, 76, 60, 0.95)", "#c0392b"),
    InterfaceCategory.RADIO: LabelColors("rgba(155, 89, 182, 0.95)", "#8e44ad"),
    InterfaceCategory.DATA: LabelColors("rgba(230, 126, 34, 0.95)", "#d35400"),
    InterfaceCategory.DEFAULT: LabelColors("rgba(52, 152, 219, 0.95)", "#2980b9"),
    InterfaceCategory.NONE: LabelColors("rgba(52, 152, 219, 0.95)", "#2980b9"),
}

NODE_BUS_LABEL = LabelColors("rgba(46, 204, 113, 0.95)", "#27ae60")
BUS_BRIDGE_LABEL = LabelColors("rgba(255, 152, 0, 0.95)", "#e67e22")


def classify_interface(name: str | None) -> tuple[InterfaceCategory, LabelColors]:
    """Classify an interface name and return its badge colors.

    Defined for every input. Empty or missing names map to NONE, which
    callers treat as "no label".
    """
    if not name:
        category = InterfaceCategory.NONE
    elif name in CORE_INTERFACES:
        category = InterfaceCategory.CORE
    elif name == RADIO_INTERFACE:
        category = InterfaceCategory.RADIO
    elif any(marker in name for marker in DATA_MARKERS):
        category = InterfaceCategory.DATA
    else:
        category = InterfaceCategory.DEFAULT
    return category, LABEL_COLORS[category]
