"""Hit-testing and anchoring geometry.

Every function here is pure: it reads the entity fields it is given and
returns a new value, never touching the store or the drawing surface.
"""

from __future__ import annotations

import math

from .models import NODE_HEIGHT, NODE_WIDTH, Bus, Node, Point


def node_center(node: Node) -> Point:
    """Center of the node's box."""
    return Point(node.position.x + NODE_WIDTH / 2, node.position.y + NODE_HEIGHT / 2)


def point_in_node(p: Point, node: Node) -> bool:
    """Check whether p lies inside the node's box (edges included)."""
    x, y = node.position.x, node.position.y
    return x <= p.x <= x + NODE_WIDTH and y <= p.y <= y + NODE_HEIGHT


def bus_end(bus: Bus) -> Point:
    """Far end of the bus segment."""
    if bus.is_horizontal:
        return Point(bus.position.x + bus.length, bus.position.y)
    return Point(bus.position.x, bus.position.y + bus.length)


def bus_midpoint(bus: Bus) -> Point:
    """Midpoint of the bus segment."""
    return midpoint(bus.position, bus_end(bus))


def nearest_point_on_bus(p: Point, bus: Bus) -> Point:
    """Project p onto the bus segment, clamped to the segment extent."""
    start = bus.position
    if bus.is_horizontal:
        x = min(max(p.x, start.x), start.x + bus.length)
        return Point(x, start.y)
    y = min(max(p.y, start.y), start.y + bus.length)
    return Point(start.x, y)


def point_in_bus(p: Point, bus: Bus) -> bool:
    """Check whether p lies in the capsule of width bus.thickness around the bus."""
    nearest = nearest_point_on_bus(p, bus)
    return distance(p, nearest) <= bus.thickness / 2


def anchor_points(source: Bus, target: Bus) -> tuple[Point, Point]:
    """Endpoints of a bus-to-bus bridge: the midpoint of each bus."""
    return bus_midpoint(source), bus_midpoint(target)


def marker_positions(bus: Bus, spacing: float) -> list[Point]:
    """Connection-point markers along a bus.

    There are floor(length / spacing) + 1 markers, spread evenly so the
    first sits on the anchor and the last on the far end.
    """
    if spacing <= 0:
        return [bus.position]
    intervals = int(bus.length // spacing)
    if intervals == 0:
        return [bus.position]
    step = bus.length / intervals
    if bus.is_horizontal:
        return [Point(bus.position.x + step * i, bus.position.y) for i in range(intervals + 1)]
    return [Point(bus.position.x, bus.position.y + step * i) for i in range(intervals + 1)]


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)

