"""Full-frame renderer for topology canvases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .geometry import (
    anchor_points,
    bus_end,
    marker_positions,
    midpoint,
    nearest_point_on_bus,
    node_center,
)
from .models import NODE_HEIGHT, NODE_WIDTH, BusBusLink, NodeBusLink, Point
from .styling import (
    BUS_BRIDGE_LABEL,
    DEFAULT_THEME,
    NODE_BUS_LABEL,
    STARTING_STATUS,
    InterfaceCategory,
    LabelColors,
    Theme,
    classify_interface,
    default_status_color,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .controller import UIState
    from .models import Bus, BusConnection, Connection, Node
    from .store import EntityStore
    from .surface import Surface

logger = logging.getLogger(__name__)

# Layer names in draw order
LAYERS = ("grid", "buses", "bus-connections", "connections", "nodes")


@dataclass
class IconImage:
    """An externally loaded icon; only drawn once ready."""

    href: str
    ready: bool = True


def exclude_kind_pairs(*pairs: tuple[str, str]) -> Callable[[Node, Node], bool]:
    """Build a predicate hiding connection lines between the given node kinds.

    Pairs are unordered: ("NRF", "UDM") also hides UDM -> NRF.
    """
    excluded = {frozenset(pair) for pair in pairs}

    def suppress(source: Node, target: Node) -> bool:
        return frozenset((source.kind, target.kind)) in excluded

    return suppress


@dataclass
class RenderConfig:
    """Sizes and spacings used while drawing."""

    grid_size: float = 50
    marker_spacing: float = 100
    marker_radius: float = 6
    bus_label_size: float = 14
    bus_label_offset: float = 10
    node_label_size: float = 10
    node_label_offset: float = 50  # From node top to name baseline
    icon_size: float = 30
    icon_top: float = 7
    glyph_size: float = 32
    glyph_font_size: float = 16
    indicator_radius: float = 6
    indicator_inset: float = 8
    indicator_glow: float = 4  # Extra halo radius
    border_width: float = 2
    hovered_border_width: float = 3
    selected_border_width: float = 4
    connection_width: float = 3
    node_bus_width: float = 2
    bus_bridge_width: float = 4
    label_font_size: float = 12
    label_padding: float = 14
    label_height: float = 18
    bus_label_font_size: float = 11
    bus_label_padding: float = 12
    bus_label_height: float = 16
    node_fill_opacity: float = 0.125
    bridge_default_label: str | None = None


class DiagramRenderer:
    """Draws buses, links and nodes onto a Surface.

    Every call to render_frame redraws the whole surface in a fixed order:
    grid, buses, bus-connections, node connections, nodes. Later layers
    occlude earlier ones.
    """

    def __init__(
        self,
        theme: Theme | None = None,
        config: RenderConfig | None = None,
        status_color: Callable[[str], str] | None = None,
        icon_source: Callable[[str], IconImage | None] | None = None,
        suppress_connection: Callable[[Node, Node], bool] | None = None,
    ):
        self.theme = theme or DEFAULT_THEME
        self.config = config or RenderConfig()
        self.status_color = status_color or default_status_color
        self.icon_source = icon_source
        self.suppress_connection = suppress_connection

    def render_frame(self, surface: Surface, store: EntityStore, ui_state: UIState | None = None) -> None:
        """Redraw the full frame from the current store snapshot."""
        selected_id = ui_state.selected_id if ui_state else None
        hovered_id = ui_state.hovered_id if ui_state else None

        surface.clear(self.theme.background)

        surface.layer("grid")
        self._draw_grid(surface)

        surface.layer("buses")
        for bus in store.list_buses():
            self._draw_bus(surface, bus)

        surface.layer("bus-connections")
        for link in store.list_bus_connections():
            self._draw_bus_connection(surface, store, link)

        surface.layer("connections")
        for conn in store.list_connections():
            self._draw_connection(surface, store, conn)

        surface.layer("nodes")
        for node in store.list_nodes():
            self._draw_node(surface, node, selected_id, hovered_id)

    def _draw_grid(self, surface: Surface) -> None:
        size = self.config.grid_size
        color = self.theme.grid_color
        opacity = self.theme.grid_opacity

        for x in _grid_steps(surface.width, size):
            surface.line(x, 0, x, surface.height, color=color, width=1, opacity=opacity)
        for y in _grid_steps(surface.height, size):
            surface.line(0, y, surface.width, y, color=color, width=1, opacity=opacity)

    def _draw_bus(self, surface: Surface, bus: Bus) -> None:
        cfg = self.config
        x, y = bus.position.x, bus.position.y
        end = bus_end(bus)

        # Glow under the skeleton line
        surface.line(
            x, y, end.x, end.y,
            color=bus.color, width=bus.thickness + 10, round_cap=True, opacity=0.25,
        )
        surface.line(x, y, end.x, end.y, color=bus.color, width=bus.thickness + 2, round_cap=True)

        if bus.is_horizontal:
            surface.text(
                bus.name, x + cfg.bus_label_offset, y - cfg.bus_label_offset,
                size=cfg.bus_label_size, color=self.theme.text_color,
                anchor="start", baseline="text-after-edge", bold=True,
            )
        else:
            surface.text(
                bus.name, x - cfg.bus_label_offset, y + cfg.bus_label_offset,
                size=cfg.bus_label_size, color=self.theme.text_color,
                anchor="start", baseline="text-after-edge", bold=True, rotate=-90,
            )

        for point in marker_positions(bus, cfg.marker_spacing):
            surface.circle(
                point.x, point.y, cfg.marker_radius,
                fill=self.theme.marker_fill, stroke=bus.color, stroke_width=2,
            )

    def _draw_bus_connection(self, surface: Surface, store: EntityStore, link: BusConnection) -> None:
        if isinstance(link, NodeBusLink):
            self._draw_node_bus_link(surface, store, link)
        elif isinstance(link, BusBusLink):
            self._draw_bus_bridge(surface, store, link)
        else:
            logger.warning(f"Unknown bus connection type {type(link).__name__}")

    def _draw_node_bus_link(self, surface: Surface, store: EntityStore, link: NodeBusLink) -> None:
        node = store.get_node_by_id(link.node_id)
        bus = store.get_bus_by_id(link.bus_id)
        if node is None or bus is None:
            logger.warning(
                f"Bus connection references missing node or bus ({link.node_id} -> {link.bus_id})"
            )
            return

        start = node_center(node)
        end = nearest_point_on_bus(start, bus)
        color = self.theme.node_bus_color

        surface.line(
            start.x, start.y, end.x, end.y,
            color=color, width=self.config.node_bus_width, dash=(5, 5),
        )
        surface.circle(end.x, end.y, 5, fill=color)

        if link.interface_name:
            self._draw_label(
                surface, link.interface_name, midpoint(start, end),
                self._bus_label_colors(link.interface_name, NODE_BUS_LABEL),
                font_size=self.config.bus_label_font_size,
                padding=self.config.bus_label_padding,
                height=self.config.bus_label_height,
            )

    def _draw_bus_bridge(self, surface: Surface, store: EntityStore, link: BusBusLink) -> None:
        source = store.get_bus_by_id(link.source_bus_id)
        target = store.get_bus_by_id(link.target_bus_id)
        if source is None or target is None:
            logger.warning(
                f"Bus-to-bus connection references missing buses "
                f"({link.source_bus_id} -> {link.target_bus_id})"
            )
            return

        start, end = anchor_points(source, target)
        color = self.theme.bus_bridge_color

        surface.line(
            start.x, start.y, end.x, end.y,
            color=color, width=self.config.bus_bridge_width, dash=(10, 5),
        )
        surface.circle(start.x, start.y, 6, fill=color)
        surface.circle(end.x, end.y, 6, fill=color)

        label = link.interface_name or self.config.bridge_default_label
        if label:
            self._draw_label(
                surface, label, midpoint(start, end),
                self._bus_label_colors(label, BUS_BRIDGE_LABEL),
                font_size=self.config.bus_label_font_size,
                padding=self.config.bus_label_padding,
                height=self.config.bus_label_height,
            )

    def _draw_connection(self, surface: Surface, store: EntityStore, conn: Connection) -> None:
        if not conn.show_visual:
            return

        source = store.get_node_by_id(conn.source_id)
        target = store.get_node_by_id(conn.target_id)
        if source is None or target is None:
            logger.warning(
                f"Connection references missing node ({conn.source_id} -> {conn.target_id})"
            )
            return

        if self.suppress_connection and self.suppress_connection(source, target):
            return

        start = node_center(source)
        end = node_center(target)
        surface.line(
            start.x, start.y, end.x, end.y,
            color=self.theme.connection_color, width=self.config.connection_width,
        )

        if conn.interface_name:
            _, colors = classify_interface(conn.interface_name)
            self._draw_label(
                surface, conn.interface_name, midpoint(start, end), colors,
                font_size=self.config.label_font_size,
                padding=self.config.label_padding,
                height=self.config.label_height,
            )

    def _draw_node(
        self,
        surface: Surface,
        node: Node,
        selected_id: str | None,
        hovered_id: str | None,
    ) -> None:
        cfg = self.config
        x, y = node.position.x, node.position.y
        w, h = NODE_WIDTH, NODE_HEIGHT

        surface.rect(x, y, w, h, fill=node.color, fill_opacity=cfg.node_fill_opacity)

        if node.id == selected_id:
            stroke, stroke_width = self.theme.selected_color, cfg.selected_border_width
        elif node.id == hovered_id:
            stroke, stroke_width = self.theme.hovered_color, cfg.hovered_border_width
        else:
            stroke, stroke_width = node.color, cfg.border_width
        surface.rect(x, y, w, h, stroke=stroke, stroke_width=stroke_width)

        if not self._draw_icon(surface, node):
            self._draw_fallback_icon(surface, node)

        surface.text(
            node.name, x + w / 2, y + cfg.node_label_offset,
            size=cfg.node_label_size, color=self.theme.text_color, baseline="alphabetic",
        )

        self._draw_status_indicator(surface, node)

    def _draw_icon(self, surface: Surface, node: Node) -> bool:
        """Draw the node's external icon. Returns False when the fallback is needed."""
        if not node.icon or self.icon_source is None:
            return False

        image = self.icon_source(node.icon)
        if image is None or not image.ready:
            logger.debug(f"Icon for {node.name} not ready, using fallback")
            return False

        size = self.config.icon_size
        try:
            surface.image(
                image.href,
                node.position.x + (NODE_WIDTH - size) / 2,
                node.position.y + self.config.icon_top,
                size, size,
            )
        except Exception:
            logger.exception(f"Error drawing icon for {node.name}")
            return False
        return True

    def _draw_fallback_icon(self, surface: Surface, node: Node) -> None:
        center = node_center(node)
        surface.circle(center.x, center.y, self.config.glyph_size / 2, fill=node.color)
        surface.text(
            node.glyph, center.x, center.y,
            size=self.config.glyph_font_size, color=self.theme.glyph_text_color, bold=True,
        )

    def _draw_status_indicator(self, surface: Surface, node: Node) -> None:
        cfg = self.config
        cx = node.position.x + NODE_WIDTH - cfg.indicator_inset
        cy = node.position.y + cfg.indicator_inset
        color = self.status_color(node.status)

        surface.circle(cx, cy, cfg.indicator_radius + cfg.indicator_glow, fill=color, opacity=0.35)
        surface.circle(
            cx, cy, cfg.indicator_radius,
            fill=color, stroke=self.theme.indicator_outline, stroke_width=2,
        )
        if node.status == STARTING_STATUS:
            surface.circle(cx, cy, cfg.indicator_radius / 3, fill=self.theme.indicator_outline)

    def _draw_label(
        self,
        surface: Surface,
        text: str,
        center: Point,
        colors: LabelColors,
        font_size: float,
        padding: float,
        height: float,
    ) -> None:
        """Draw a padded badge centered on a point."""
        width = surface.measure_text(text, font_size, bold=True) + padding
        surface.rect(
            center.x - width / 2, center.y - height / 2, width, height,
            fill=colors.background, stroke=colors.border, stroke_width=1,
        )
        surface.text(
            text, center.x, center.y,
            size=font_size, color=self.theme.label_text_color, bold=True,
        )

    @staticmethod
    def _bus_label_colors(name: str, fallback: LabelColors) -> LabelColors:
        category, colors = classify_interface(name)
        if category in (InterfaceCategory.DEFAULT, InterfaceCategory.NONE):
            return fallback
        return colors


def _grid_steps(extent: float, size: float) -> Iterable[float]:
    if size <= 0:
        return
    value = 0.0
    while value < extent:
        yield value
        value += size
