"""Tests for the full-frame renderer."""

import logging

import pytest

from topoview.controller import UIState
from topoview.models import Bus, BusBusLink, Connection, Node, NodeBusLink, Orientation, Point
from topoview.renderer import LAYERS, DiagramRenderer, IconImage, RenderConfig, exclude_kind_pairs
from topoview.store import EmptyStore, InMemoryStore
from topoview.styling import BUS_BRIDGE_LABEL, DEFAULT_THEME, NODE_BUS_LABEL, Theme, classify_interface
from topoview.surface import RecordingSurface


def node_borders(surface):
    """Border rects (stroked, unfilled) in the node layer."""
    return [
        c for c in surface.in_layer("nodes")
        if c.op == "rect" and c.kwargs.get("stroke") is not None
    ]


class TestFrameOrder:
    """Tests for layer ordering."""

    def test_layers_in_fixed_order(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        assert surface.calls[0].op == "clear"
        assert surface.layers() == list(LAYERS)

    def test_clear_passes_theme_background(self, surface, amf_store):
        renderer = DiagramRenderer(theme=Theme(background="#fafafa"))
        renderer.render_frame(surface, amf_store)
        assert surface.calls[0].args == ("#fafafa",)

    def test_each_frame_is_a_full_redraw(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        first = list(surface.calls)
        renderer.render_frame(surface, amf_store)
        assert surface.calls == first

    def test_empty_store_draws_only_grid(self, renderer):
        surface = RecordingSurface(100, 60)
        renderer.render_frame(surface, EmptyStore())
        grid = surface.in_layer("grid")
        assert len(grid) == 4
        assert all(c.op == "line" for c in grid)
        for name in LAYERS[1:]:
            assert surface.in_layer(name) == []

    def test_grid_period(self, renderer):
        surface = RecordingSurface(200, 100)
        renderer.render_frame(surface, EmptyStore())
        verticals = [c.args[0] for c in surface.in_layer("grid") if c.args[0] == c.args[2]]
        assert verticals == [0, 50, 100, 150]


class TestConnections:
    """Tests for node-to-node connections."""

    def test_scenario_single_line_with_midpoint_label(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        calls = surface.in_layer("connections")

        lines = [c for c in calls if c.op == "line"]
        assert len(lines) == 1
        assert lines[0].args == (120, 120, 320, 120)

        texts = [c for c in calls if c.op == "text"]
        assert [t.args for t in texts] == [("N2", 220, 120)]

        (badge,) = [c for c in calls if c.op == "rect"]
        x, y, w, h = badge.args
        assert x + w / 2 == pytest.approx(220)
        assert y + h / 2 == pytest.approx(120)

    def test_label_width_is_text_plus_padding(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        (badge,) = [c for c in surface.in_layer("connections") if c.op == "rect"]
        expected = surface.measure_text("N2", renderer.config.label_font_size, bold=True)
        assert badge.args[2] == pytest.approx(expected + renderer.config.label_padding)

    def test_label_uses_classified_colors(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        (badge,) = [c for c in surface.in_layer("connections") if c.op == "rect"]
        _, colors = classify_interface("N2")
        assert badge.kwargs["fill"] == colors.background
        assert badge.kwargs["stroke"] == colors.border

    def test_hidden_connection_is_never_drawn(self, renderer, surface, amf_store):
        amf_store.list_connections()[0].show_visual = False
        renderer.render_frame(surface, amf_store)
        assert surface.in_layer("connections") == []

    def test_no_label_without_interface_name(self, renderer, surface, amf_store):
        amf_store.list_connections()[0].interface_name = ""
        renderer.render_frame(surface, amf_store)
        calls = surface.in_layer("connections")
        assert [c.op for c in calls] == ["line"]

    def test_missing_endpoint_is_skipped(self, renderer, surface, amf_store, caplog):
        amf_store.add_connection(Connection(source_id="1", target_id="ghost", interface_name="N1"))
        with caplog.at_level(logging.WARNING, logger="topoview.renderer"):
            renderer.render_frame(surface, amf_store)
        lines = [c for c in surface.in_layer("connections") if c.op == "line"]
        assert len(lines) == 1
        assert "missing node" in caplog.text

    def test_suppressed_kind_pair(self, surface):
        store = InMemoryStore()
        store.add_node(Node(id="a", name="UDM", kind="UDM", position=Point(0, 0)))
        store.add_node(Node(id="b", name="NRF", kind="NRF", position=Point(200, 0)))
        store.add_node(Node(id="c", name="AMF", kind="AMF", position=Point(400, 0)))
        store.add_connection(Connection(source_id="a", target_id="b", interface_name="Nudm"))
        store.add_connection(Connection(source_id="b", target_id="c", interface_name="Nnrf"))

        renderer = DiagramRenderer(suppress_connection=exclude_kind_pairs(("NRF", "UDM")))
        renderer.render_frame(surface, store)

        lines = [c for c in surface.in_layer("connections") if c.op == "line"]
        assert [line.args for line in lines] == [(220, 20, 420, 20)]
        assert "Nudm" not in surface.texts()


class TestBusConnections:
    """Tests for node-bus and bus-bus links."""

    def test_node_to_bus_anchors_on_nearest_point(self, renderer, surface, bus_store):
        bus_store.add_bus_connection(NodeBusLink(node_id="amf", bus_id="sbi", interface_name="Namf"))
        renderer.render_frame(surface, bus_store)
        calls = surface.in_layer("bus-connections")

        (line,) = [c for c in calls if c.op == "line"]
        assert line.args == (120, 120, 120, 300)
        assert line.kwargs["dash"] == (5, 5)

        (label,) = [c for c in calls if c.op == "text"]
        assert label.args == ("Namf", 120, 210)

    def test_unclassified_bus_label_uses_link_colors(self, renderer, surface, bus_store):
        bus_store.add_bus_connection(NodeBusLink(node_id="amf", bus_id="sbi", interface_name="Namf"))
        renderer.render_frame(surface, bus_store)
        (badge,) = [c for c in surface.in_layer("bus-connections") if c.op == "rect"]
        assert badge.kwargs["fill"] == NODE_BUS_LABEL.background

    def test_classified_bus_label_uses_category_colors(self, renderer, surface, bus_store):
        bus_store.add_bus_connection(NodeBusLink(node_id="amf", bus_id="sbi", interface_name="N3"))
        renderer.render_frame(surface, bus_store)
        (badge,) = [c for c in surface.in_layer("bus-connections") if c.op == "rect"]
        _, core = classify_interface("N3")
        assert badge.kwargs["fill"] == core.background

    def test_bus_bridge_between_midpoints(self, renderer, surface, bus_store):
        bus_store.add_bus_connection(BusBusLink(source_bus_id="sbi", target_bus_id="n3"))
        renderer.render_frame(surface, bus_store)
        calls = surface.in_layer("bus-connections")

        (line,) = [c for c in calls if c.op == "line"]
        assert line.args == (150, 300, 400, 300)
        assert [c.op for c in calls if c.op == "text"] == []

    def test_bus_bridge_default_label(self, surface, bus_store):
        bus_store.add_bus_connection(BusBusLink(source_bus_id="sbi", target_bus_id="n3"))
        renderer = DiagramRenderer(config=RenderConfig(bridge_default_label="BUS BRIDGE"))
        renderer.render_frame(surface, bus_store)
        calls = surface.in_layer("bus-connections")

        (label,) = [c for c in calls if c.op == "text"]
        assert label.args == ("BUS BRIDGE", 275, 300)
        (badge,) = [c for c in calls if c.op == "rect"]
        assert badge.kwargs["fill"] == BUS_BRIDGE_LABEL.background

    def test_unresolved_references_are_skipped(self, renderer, surface, bus_store, caplog):
        bus_store.add_bus_connection(NodeBusLink(node_id="ghost", bus_id="sbi"))
        bus_store.add_bus_connection(BusBusLink(source_bus_id="sbi", target_bus_id="ghost"))
        with caplog.at_level(logging.WARNING, logger="topoview.renderer"):
            renderer.render_frame(surface, bus_store)
        assert surface.in_layer("bus-connections") == []
        assert caplog.text.count("missing") == 2


class TestBuses:
    """Tests for bus drawing."""

    def test_bus_line_label_and_markers(self, renderer, surface):
        store = InMemoryStore()
        store.add_bus(Bus(id="b", name="Backbone", position=Point(0, 100), length=600, color="#123456"))
        renderer.render_frame(surface, store)
        calls = surface.in_layer("buses")

        assert all(c.args == (0, 100, 600, 100) for c in calls if c.op == "line")
        assert surface.texts().count("Backbone") == 1
        markers = [c for c in calls if c.op == "circle"]
        assert len(markers) == 7
        assert all(m.kwargs["stroke"] == "#123456" for m in markers)

    def test_vertical_bus_label_is_rotated(self, renderer, surface):
        store = InMemoryStore()
        store.add_bus(Bus(
            id="b", name="Vert", position=Point(50, 50),
            orientation=Orientation.VERTICAL, length=100,
        ))
        renderer.render_frame(surface, store)
        (label,) = [c for c in surface.in_layer("buses") if c.op == "text"]
        assert label.kwargs["rotate"] == -90


class TestNodes:
    """Tests for node drawing and highlight states."""

    def test_default_border(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        borders = node_borders(surface)
        assert [b.kwargs["stroke"] for b in borders] == ["#000", "#f39c12"]
        assert all(b.kwargs["stroke_width"] == 2 for b in borders)

    def test_selected_border(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store, UIState(selected_id="1"))
        first = node_borders(surface)[0]
        assert first.kwargs["stroke"] == DEFAULT_THEME.selected_color
        assert first.kwargs["stroke_width"] == 4

    def test_hovered_border(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store, UIState(hovered_id="2"))
        second = node_borders(surface)[1]
        assert second.kwargs["stroke"] == DEFAULT_THEME.hovered_color
        assert second.kwargs["stroke_width"] == 3

    def test_selected_wins_over_hovered(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store, UIState(selected_id="1", hovered_id="1"))
        first = node_borders(surface)[0]
        assert first.kwargs["stroke"] == DEFAULT_THEME.selected_color

    def test_stale_selection_draws_no_highlight(self, renderer, surface, amf_store):
        amf_store.remove_node("1")
        renderer.render_frame(surface, amf_store, UIState(selected_id="1", hovered_id="1"))
        borders = node_borders(surface)
        assert len(borders) == 1
        assert borders[0].kwargs["stroke"] == "#f39c12"
        assert borders[0].kwargs["stroke_width"] == renderer.config.border_width

    def test_fallback_glyph_and_name(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        texts = [c.args for c in surface.in_layer("nodes") if c.op == "text"]
        assert ("A", 120, 120) in texts
        assert ("AMF", 120, 150) in texts

    def test_ready_icon_replaces_glyph(self, surface, amf_store):
        amf_store.get_node_by_id("1").icon = "amf"
        renderer = DiagramRenderer(icon_source=lambda ref: IconImage(f"icons/{ref}.svg"))
        renderer.render_frame(surface, amf_store)

        images = surface.ops("image")
        assert [i.args[0] for i in images] == ["icons/amf.svg"]
        texts = [c.args[0] for c in surface.in_layer("nodes") if c.op == "text"]
        assert "A" not in texts

    @pytest.mark.parametrize("image", [None, IconImage("icons/amf.svg", ready=False)])
    def test_unready_icon_falls_back(self, surface, amf_store, image):
        amf_store.get_node_by_id("1").icon = "amf"
        renderer = DiagramRenderer(icon_source=lambda ref: image)
        renderer.render_frame(surface, amf_store)

        assert surface.ops("image") == []
        texts = [c.args[0] for c in surface.in_layer("nodes") if c.op == "text"]
        assert "A" in texts

    def test_failing_image_draw_falls_back(self, amf_store):
        class BrokenImageSurface(RecordingSurface):
            def image(self, href, x, y, w, h):
                raise OSError("cannot decode")

        surface = BrokenImageSurface()
        amf_store.get_node_by_id("1").icon = "amf"
        renderer = DiagramRenderer(icon_source=lambda ref: IconImage("icons/amf.svg"))
        renderer.render_frame(surface, amf_store)

        texts = [c.args[0] for c in surface.in_layer("nodes") if c.op == "text"]
        assert "A" in texts

    def test_status_indicator_colors(self, surface, amf_store):
        renderer = DiagramRenderer(status_color=lambda status: {"active": "#0f0"}.get(status, "#999"))
        renderer.render_frame(surface, amf_store)
        circles = [c for c in surface.in_layer("nodes") if c.op == "circle"]

        # Node 1: glyph, halo, indicator
        assert circles[1].args == (132, 108, 10)
        assert circles[1].kwargs["fill"] == "#0f0"
        assert circles[2].args == (132, 108, 6)
        assert circles[2].kwargs["stroke"] == DEFAULT_THEME.indicator_outline

    def test_starting_status_gets_extra_dot(self, renderer, surface, amf_store):
        renderer.render_frame(surface, amf_store)
        circles = [c for c in surface.in_layer("nodes") if c.op == "circle"]
        # Active node: glyph, halo, indicator. Starting node adds a dot.
        assert len(circles) == 3 + 4
        assert circles[-1].args[:2] == (332, 108)
