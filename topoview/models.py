"""Data models for topoview diagrams."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

# Fixed node footprint in surface units
NODE_WIDTH = 40.0
NODE_HEIGHT = 40.0


@dataclass(frozen=True)
class Point:
    """A point (or offset) in surface coordinates."""

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def of(cls, value: Point | tuple[float, float]) -> Point:
        """Coerce an (x, y) tuple into a Point."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))


class Orientation(Enum):
    """Direction a bus runs from its anchor."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class Node:
    """A diagram node with a fixed-size box."""

    id: str
    name: str
    kind: str
    position: Point
    color: str = "#3498db"
    status: str = "stable"
    icon: str | None = None

    def __post_init__(self) -> None:
        self.position = Point.of(self.position)
        if not self.position.is_finite():
            raise ValueError(f"Node '{self.id}' has a non-finite position {self.position}")

    @property
    def glyph(self) -> str:
        """Character shown when the icon is unavailable."""
        return self.kind[:1] or "?"


@dataclass
class Connection:
    """A node-to-node link. Hidden links exist for logical purposes only."""

    source_id: str
    target_id: str
    interface_name: str | None = None
    show_visual: bool = True


@dataclass
class Bus:
    """A shared linear link drawn as a thick line."""

    id: str
    name: str
    position: Point
    orientation: Orientation = Orientation.HORIZONTAL
    length: float = 600.0
    thickness: float = 8.0
    color: str = "#3498db"

    def __post_init__(self) -> None:
        self.position = Point.of(self.position)
        if isinstance(self.orientation, str):
            self.orientation = Orientation(self.orientation)
        if not self.position.is_finite():
            raise ValueError(f"Bus '{self.id}' has a non-finite position {self.position}")
        if not self.length >= 0:
            raise ValueError(f"Bus '{self.id}' length must be >= 0, got {self.length}")
        if not self.thickness > 0:
            raise ValueError(f"Bus '{self.id}' thickness must be > 0, got {self.thickness}")

    @property
    def is_horizontal(self) -> bool:
        return self.orientation is Orientation.HORIZONTAL


@dataclass
class NodeBusLink:
    """A node attached to a bus."""

    node_id: str
    bus_id: str
    interface_name: str | None = None


@dataclass
class BusBusLink:
    """A bridge between two buses."""

    source_bus_id: str
    target_bus_id: str
    interface_name: str | None = None


BusConnection = Union[NodeBusLink, BusBusLink]
