"""Python DSL for building topologies."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Literal

from .models import Bus, BusBusLink, Connection, Node, NodeBusLink, Orientation, Point
from .store import InMemoryStore

if TYPE_CHECKING:
    from collections.abc import Generator

OrientationLiteral = Literal["horizontal", "vertical"]

# Automatic placement grid for nodes created without a position
AUTO_PER_ROW = 6
AUTO_START = Point(120, 120)
AUTO_STEP_X = 100
AUTO_STEP_Y = 140

_store_stack: list[InMemoryStore] = []


def _current_store() -> InMemoryStore:
    if not _store_stack:
        raise RuntimeError("No active topology; use 'with topology():'")
    return _store_stack[-1]


@contextmanager
def topology(store: InMemoryStore | None = None) -> Generator[InMemoryStore]:
    """Create a topology context.

    Usage:
        with topology() as store:
            amf = node("AMF", at=(100, 100))
            smf = node("SMF", at=(300, 100))
            amf >> smf | "N11"

            sbi = bus("SBI", at=(80, 300), length=500)
            amf >> sbi
            smf >> sbi | "Nsmf"

    Yields:
        The store being populated
    """
    s = store if store is not None else InMemoryStore()
    _store_stack.append(s)
    try:
        yield s
    finally:
        _store_stack.pop()


class LinkContext:
    """A freshly created link; ``| "name"`` sets its interface name."""

    def __init__(self, link: Connection | NodeBusLink | BusBusLink):
        self.link = link

    def __or__(self, interface_name: str) -> LinkContext:
        self.link.interface_name = interface_name
        return self

    def __repr__(self) -> str:
        return repr(self.link)


class NodeContext:
    """Handle to a node in the active topology."""

    def __init__(self, node: Node, store: InMemoryStore):
        self.node = node
        self._store = store

    @property
    def id(self) -> str:
        return self.node.id

    def __rshift__(self, other: NodeContext | BusContext) -> LinkContext:
        if isinstance(other, BusContext):
            return attach(self, other)
        return link(self, other)

    def __repr__(self) -> str:
        return repr(self.node)


class BusContext:
    """Handle to a bus in the active topology."""

    def __init__(self, bus: Bus, store: InMemoryStore):
        self.bus = bus
        self._store = store

    @property
    def id(self) -> str:
        return self.bus.id

    def __rshift__(self, other: NodeContext | BusContext) -> LinkContext:
        if isinstance(other, NodeContext):
            return attach(other, self)
        return bridge(self, other)

    def __repr__(self) -> str:
        return repr(self.bus)


def node(
        name: str,
        kind: str | None = None,
        at: tuple[float, float] | None = None,
        color: str = "#3498db",
        status: str = "stable",
        icon: str | None = None,
        id: str | None = None,
) -> NodeContext:
    """Add a node to the active topology.

    Args:
        name: Label drawn under the node
        kind: Node category; defaults to the name
        at: Top-left position; omitted nodes are placed on an automatic grid
        color: Base color of box and fallback glyph
        status: Service status shown by the indicator
        icon: Icon asset reference
        id: Explicit id; defaults to "<kind>-<n>"

    Returns:
        NodeContext usable with ``>>``
    """
    store = _current_store()
    kind = kind or name
    count = len(store.list_nodes())

    if at is None:
        row, col = divmod(count, AUTO_PER_ROW)
        position = Point(AUTO_START.x + col * AUTO_STEP_X, AUTO_START.y + row * AUTO_STEP_Y)
    else:
        position = Point.of(at)

    if id is None:
        id = _unique_id(store, kind.lower(), count + 1)

    n = Node(id=id, name=name, kind=kind, position=position, color=color, status=status, icon=icon)
    store.add_node(n)
    return NodeContext(n, store)


def bus(
        name: str,
        at: tuple[float, float],
        orientation: OrientationLiteral | Orientation = "horizontal",
        length: float = 600,
        thickness: float = 8,
        color: str = "#3498db",
        id: str | None = None,
) -> BusContext:
    """Add a bus to the active topology."""
    store = _current_store()
    if id is None:
        id = f"bus-{len(store.list_buses()) + 1}"
    b = Bus(
        id=id,
        name=name,
        position=Point.of(at),
        orientation=Orientation(orientation),
        length=length,
        thickness=thickness,
        color=color,
    )
    store.add_bus(b)
    return BusContext(b, store)


def link(
        source: NodeContext,
        target: NodeContext,
        interface: str | None = None,
        visual: bool = True,
) -> LinkContext:
    """Connect two nodes. ``visual=False`` makes a logical, undrawn link."""
    conn = Connection(
        source_id=source.id,
        target_id=target.id,
        interface_name=interface,
        show_visual=visual,
    )
    _current_store().add_connection(conn)
    return LinkContext(conn)


def attach(n: NodeContext, b: BusContext, interface: str | None = None) -> LinkContext:
    """Attach a node to a bus."""
    conn = NodeBusLink(node_id=n.id, bus_id=b.id, interface_name=interface)
    _current_store().add_bus_connection(conn)
    return LinkContext(conn)


def bridge(source: BusContext, target: BusContext, interface: str | None = None) -> LinkContext:
    """Bridge two buses."""
    conn = BusBusLink(source_bus_id=source.id, target_bus_id=target.id, interface_name=interface)
    _current_store().add_bus_connection(conn)
    return LinkContext(conn)


def _unique_id(store: InMemoryStore, prefix: str, start: int) -> str:
    n = start
    while store.get_node_by_id(f"{prefix}-{n}") is not None:
        n += 1
    return f"{prefix}-{n}"
