"""Pointer interaction for a topology canvas.

The controller turns pointer events into selection, hover and drag
changes. It owns the transient UI state, asks the renderer for a full
redraw after every state change, and reports moves and selection to
external collaborators.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from .geometry import point_in_bus, point_in_node
from .models import Point
from .renderer import DiagramRenderer
from .store import EmptyStore, EntityMover

if TYPE_CHECKING:
    from .models import Bus, Node
    from .store import EntityStore
    from .surface import Surface

logger = logging.getLogger(__name__)


class DragKind(Enum):
    NODE = "node"
    BUS = "bus"


@dataclass(frozen=True)
class DragTarget:
    """The entity held by an in-progress drag."""

    kind: DragKind
    entity_id: str


@dataclass
class UIState:
    """Transient interaction state; never persisted."""

    selected_id: str | None = None
    hovered_id: str | None = None
    drag: DragTarget | None = None
    drag_offset: Point = Point(0, 0)

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    def end_drag(self) -> None:
        self.drag = None
        self.drag_offset = Point(0, 0)

    def reset(self) -> None:
        self.selected_id = None
        self.hovered_id = None
        self.end_drag()


class SelectionSink(Protocol):
    """Receives selection changes, e.g. a details panel."""

    def on_node_selected(self, node: Node) -> None: ...

    def on_selection_cleared(self) -> None: ...


class NullSelectionSink:
    def on_node_selected(self, node: Node) -> None:
        pass

    def on_selection_cleared(self) -> None:
        pass


class NullMover:
    """Mover used when the store cannot move entities itself."""

    def move_node(self, node_id: str, position: Point) -> None:
        logger.warning(f"No mover configured, ignoring move of node '{node_id}'")

    def move_bus(self, bus_id: str, position: Point) -> None:
        logger.warning(f"No mover configured, ignoring move of bus '{bus_id}'")


class CanvasController:
    """Pointer state machine bound to one store, renderer and surface.

    States are Idle (``ui_state.drag is None``) and Dragging. All handlers
    take surface-local coordinates and run synchronously.

    Usage:
        controller = CanvasController(store, surface=SvgSurface(800, 600))
        controller.render()
        controller.pointer_down((110, 110))
        controller.pointer_move((160, 130))
        controller.pointer_up((160, 130))
    """

    def __init__(
        self,
        store: EntityStore | None = None,
        renderer: DiagramRenderer | None = None,
        surface: Surface | None = None,
        mover: EntityMover | None = None,
        sink: SelectionSink | None = None,
    ):
        self.store = store if store is not None else EmptyStore()
        self.renderer = renderer or DiagramRenderer()
        self.surface = surface
        if mover is None:
            mover = self.store if isinstance(self.store, EntityMover) else NullMover()
        self.mover = mover
        self.sink = sink or NullSelectionSink()
        self.state = UIState()
        self.cursor = "default"

    # Lifecycle

    def attach_surface(self, surface: Surface) -> None:
        self.surface = surface
        self.render()

    def reset(self) -> None:
        """Drop selection, hover and any drag in progress."""
        self.state.reset()
        self.cursor = "default"

    def resize(self, width: float, height: float) -> None:
        """Resize the surface and redraw. Safe while a drag is in progress."""
        if self.surface is None:
            logger.debug("Resize before surface attached, ignoring")
            return
        self.surface.resize(width, height)
        self.render()

    def render(self) -> None:
        """Redraw the full frame."""
        if self.surface is None:
            logger.debug("Render requested before surface attached, skipping")
            return
        self._prune_stale_state()
        self.renderer.render_frame(self.surface, self.store, self.state)

    # Hit testing

    def node_at(self, p: Point | tuple[float, float]) -> Node | None:
        """First node in store order containing p."""
        p = Point.of(p)
        for node in self.store.list_nodes():
            if point_in_node(p, node):
                return node
        return None

    def bus_at(self, p: Point | tuple[float, float]) -> Bus | None:
        """First bus in store order containing p."""
        p = Point.of(p)
        for bus in self.store.list_buses():
            if point_in_bus(p, bus):
                return bus
        return None

    # Pointer events

    def pointer_down(self, p: Point | tuple[float, float]) -> None:
        """Start dragging the node (or else the bus) under p."""
        p = Point.of(p)

        node = self.node_at(p)
        if node is not None:
            self._begin_drag(DragTarget(DragKind.NODE, node.id), p - node.position)
            return

        bus = self.bus_at(p)
        if bus is not None:
            self._begin_drag(DragTarget(DragKind.BUS, bus.id), p - bus.position)

    def pointer_move(self, p: Point | tuple[float, float]) -> None:
        """Move the dragged entity, or update hover when idle."""
        p = Point.of(p)

        if self.state.drag is not None:
            self._drag_to(p)
            return

        node = self.node_at(p)
        self.state.hovered_id = node.id if node else None
        self.cursor = "pointer" if node else "default"
        self.render()

    def pointer_up(self, p: Point | tuple[float, float] | None = None) -> None:
        """End any drag. No-op when idle."""
        if self.state.drag is None:
            return
        logger.debug(f"Drag of {self.state.drag.kind.value} '{self.state.drag.entity_id}' ended")
        self.state.end_drag()
        self.cursor = "default"

    def click(self, p: Point | tuple[float, float]) -> None:
        """Select the node under p, or clear the selection."""
        node = self.node_at(p)
        if node is not None:
            self.state.selected_id = node.id
            self.render()
            self.sink.on_node_selected(node)
        else:
            self.state.selected_id = None
            self.render()
            self.sink.on_selection_cleared()

    # Internals

    def _begin_drag(self, target: DragTarget, offset: Point) -> None:
        self.state.drag = target
        self.state.drag_offset = offset
        self.cursor = "grabbing"
        logger.debug(f"Drag of {target.kind.value} '{target.entity_id}' started")

    def _drag_to(self, p: Point) -> None:
        target = self.state.drag
        new_position = p - self.state.drag_offset

        if target.kind is DragKind.NODE:
            if self.store.get_node_by_id(target.entity_id) is None:
                self._abandon_drag()
                return
            self.mover.move_node(target.entity_id, new_position)
        else:
            if self.store.get_bus_by_id(target.entity_id) is None:
                self._abandon_drag()
                return
            self.mover.move_bus(target.entity_id, new_position)

        self.render()

    def _abandon_drag(self) -> None:
        logger.debug(f"Dragged entity '{self.state.drag.entity_id}' disappeared")
        self.state.end_drag()
        self.cursor = "default"

    def _prune_stale_state(self) -> None:
        state = self.state
        if state.selected_id is not None and self.store.get_node_by_id(state.selected_id) is None:
            state.selected_id = None
        if state.hovered_id is not None and self.store.get_node_by_id(state.hovered_id) is None:
            state.hovered_id = None
        if state.drag is not None:
            if state.drag.kind is DragKind.NODE:
                alive = self.store.get_node_by_id(state.drag.entity_id) is not None
            else:
                alive = self.store.get_bus_by_id(state.drag.entity_id) is not None
            if not alive:
                self._abandon_drag()
