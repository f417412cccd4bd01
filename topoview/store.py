"""Entity store interfaces.

The renderer and controller only read through :class:`EntityStore`. Hosts
that keep their own data plug an adapter in; :class:`InMemoryStore` is a
complete store for demos, tests and simple embeddings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import Bus, BusBusLink, BusConnection, Connection, Node, NodeBusLink, Point

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


class EntityStore(Protocol):
    """Read access to the current diagram snapshot."""

    def list_nodes(self) -> Sequence[Node]: ...

    def list_buses(self) -> Sequence[Bus]: ...

    def list_connections(self) -> Sequence[Connection]: ...

    def list_bus_connections(self) -> Sequence[BusConnection]: ...

    def get_node_by_id(self, node_id: str) -> Node | None: ...

    def get_bus_by_id(self, bus_id: str) -> Bus | None: ...


@runtime_checkable
class EntityMover(Protocol):
    """Write access used by drag gestures."""

    def move_node(self, node_id: str, position: Point) -> None: ...

    def move_bus(self, bus_id: str, position: Point) -> None: ...


class EmptyStore:
    """A store with nothing in it."""

    def list_nodes(self) -> Sequence[Node]:
        return ()

    def list_buses(self) -> Sequence[Bus]:
        return ()

    def list_connections(self) -> Sequence[Connection]:
        return ()

    def list_bus_connections(self) -> Sequence[BusConnection]:
        return ()

    def get_node_by_id(self, node_id: str) -> Node | None:
        return None

    def get_bus_by_id(self, bus_id: str) -> Bus | None:
        return None


class InMemoryStore:
    """List-backed store with change notifications.

    Entities are kept in insertion order, which is also the draw order and
    the hit-test order used by the controller.
    """

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._buses: list[Bus] = []
        self._connections: list[Connection] = []
        self._bus_connections: list[BusConnection] = []
        self._listeners: list[Callable[[str, object], None]] = []

    # Reads

    def list_nodes(self) -> Sequence[Node]:
        return tuple(self._nodes)

    def list_buses(self) -> Sequence[Bus]:
        return tuple(self._buses)

    def list_connections(self) -> Sequence[Connection]:
        return tuple(self._connections)

    def list_bus_connections(self) -> Sequence[BusConnection]:
        return tuple(self._bus_connections)

    def get_node_by_id(self, node_id: str) -> Node | None:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_bus_by_id(self, bus_id: str) -> Bus | None:
        return next((b for b in self._buses if b.id == bus_id), None)

    def connections_for_node(self, node_id: str) -> list[Connection]:
        return [
            c for c in self._connections
            if c.source_id == node_id or c.target_id == node_id
        ]

    def bus_connections_for_node(self, node_id: str) -> list[NodeBusLink]:
        return [
            c for c in self._bus_connections
            if isinstance(c, NodeBusLink) and c.node_id == node_id
        ]

    def bus_connections_for_bus(self, bus_id: str) -> list[BusConnection]:
        return [c for c in self._bus_connections if _touches_bus(c, bus_id)]

    # Writes

    def add_node(self, node: Node) -> Node:
        if self.get_node_by_id(node.id) is not None:
            raise ValueError(f"Duplicate node id '{node.id}'")
        self._nodes.append(node)
        self._notify("node-added", node)
        return node

    def remove_node(self, node_id: str) -> Node | None:
        node = self.get_node_by_id(node_id)
        if node is None:
            return None
        self._nodes.remove(node)
        self._connections = [
            c for c in self._connections
            if c.source_id != node_id and c.target_id != node_id
        ]
        self._bus_connections = [
            c for c in self._bus_connections
            if not (isinstance(c, NodeBusLink) and c.node_id == node_id)
        ]
        self._notify("node-removed", node)
        return node

    def add_bus(self, bus: Bus) -> Bus:
        if self.get_bus_by_id(bus.id) is not None:
            raise ValueError(f"Duplicate bus id '{bus.id}'")
        self._buses.append(bus)
        self._notify("bus-added", bus)
        return bus

    def remove_bus(self, bus_id: str) -> Bus | None:
        bus = self.get_bus_by_id(bus_id)
        if bus is None:
            return None
        self._buses.remove(bus)
        self._bus_connections = [
            c for c in self._bus_connections if not _touches_bus(c, bus_id)
        ]
        self._notify("bus-removed", bus)
        return bus

    def add_connection(self, connection: Connection) -> Connection:
        self._connections.append(connection)
        self._notify("connection-added", connection)
        return connection

    def remove_connection(self, connection: Connection) -> None:
        if connection in self._connections:
            self._connections.remove(connection)
            self._notify("connection-removed", connection)

    def add_bus_connection(self, connection: BusConnection) -> BusConnection:
        self._bus_connections.append(connection)
        self._notify("bus-connection-added", connection)
        return connection

    def remove_bus_connection(self, connection: BusConnection) -> None:
        if connection in self._bus_connections:
            self._bus_connections.remove(connection)
            self._notify("bus-connection-removed", connection)

    def move_node(self, node_id: str, position: Point) -> None:
        node = self.get_node_by_id(node_id)
        if node is None:
            logger.warning(f"move_node: unknown node '{node_id}'")
            return
        position = Point.of(position)
        if not position.is_finite():
            logger.warning(f"move_node: ignoring non-finite position {position} for '{node_id}'")
            return
        node.position = position
        self._notify("node-updated", node)

    def move_bus(self, bus_id: str, position: Point) -> None:
        bus = self.get_bus_by_id(bus_id)
        if bus is None:
            logger.warning(f"move_bus: unknown bus '{bus_id}'")
            return
        position = Point.of(position)
        if not position.is_finite():
            logger.warning(f"move_bus: ignoring non-finite position {position} for '{bus_id}'")
            return
        bus.position = position
        self._notify("bus-updated", bus)

    def clear(self) -> None:
        self._nodes.clear()
        self._buses.clear()
        self._connections.clear()
        self._bus_connections.clear()
        self._notify("cleared", None)

    # Listeners

    def subscribe(self, callback: Callable[[str, object], None]) -> None:
        """Register callback(event, entity) for every change."""
        self._listeners.append(callback)

    def _notify(self, event: str, entity: object) -> None:
        for callback in self._listeners:
            try:
                callback(event, entity)
            except Exception:
                logger.exception(f"Store listener failed on '{event}'")


def _touches_bus(connection: BusConnection, bus_id: str) -> bool:
    if isinstance(connection, NodeBusLink):
        return connection.bus_id == bus_id
    if isinstance(connection, BusBusLink):
        return bus_id in (connection.source_bus_id, connection.target_bus_id)
    return False
