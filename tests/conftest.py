"""
Shared test fixtures for topoview tests.

Provides small stores, a draw-call recording surface, and recording
collaborators for controller tests.
"""

import pytest

from topoview.controller import CanvasController
from topoview.models import Bus, Connection, Node, Orientation, Point
from topoview.renderer import DiagramRenderer
from topoview.store import InMemoryStore
from topoview.surface import RecordingSurface


class RecordingMover:
    """Records mutator calls without touching any store."""

    def __init__(self):
        self.calls = []

    def move_node(self, node_id, position):
        self.calls.append(("node", node_id, position))

    def move_bus(self, bus_id, position):
        self.calls.append(("bus", bus_id, position))


class RecordingSink:
    """Records selection notifications."""

    def __init__(self):
        self.events = []

    def on_node_selected(self, node):
        self.events.append(("selected", node.id))

    def on_selection_cleared(self):
        self.events.append(("cleared", None))


class CountingRenderer(DiagramRenderer):
    """Renderer that counts frames."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.frames = 0

    def render_frame(self, surface, store, ui_state=None):
        self.frames += 1
        super().render_frame(surface, store, ui_state)


@pytest.fixture
def amf_store() -> InMemoryStore:
    """Two nodes joined by a visible N2 connection."""
    store = InMemoryStore()
    store.add_node(Node(
        id="1", name="AMF", kind="AMF",
        position=Point(100, 100), color="#000", status="active",
    ))
    store.add_node(Node(
        id="2", name="gNB", kind="gNB",
        position=Point(300, 100), color="#f39c12", status="starting",
    ))
    store.add_connection(Connection(source_id="1", target_id="2", interface_name="N2"))
    return store


@pytest.fixture
def bus_store() -> InMemoryStore:
    """One node above a horizontal bus and one vertical bus."""
    store = InMemoryStore()
    store.add_node(Node(id="amf", name="AMF", kind="AMF", position=Point(100, 100)))
    store.add_bus(Bus(
        id="sbi", name="SBI", position=Point(50, 300),
        orientation=Orientation.HORIZONTAL, length=200, thickness=8,
    ))
    store.add_bus(Bus(
        id="n3", name="N3", position=Point(400, 200),
        orientation=Orientation.VERTICAL, length=200, thickness=8,
    ))
    return store


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface(800, 600)


@pytest.fixture
def renderer() -> DiagramRenderer:
    return DiagramRenderer()


@pytest.fixture
def mover() -> RecordingMover:
    return RecordingMover()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def counting_renderer() -> CountingRenderer:
    return CountingRenderer()


@pytest.fixture
def controller(amf_store, surface, counting_renderer, sink) -> CanvasController:
    """Controller over amf_store that moves entities in the store itself."""
    return CanvasController(
        amf_store,
        renderer=counting_renderer,
        surface=surface,
        sink=sink,
    )
