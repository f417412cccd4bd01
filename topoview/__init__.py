"""topoview - interactive topology canvas: rendering and hit-testing.

Example usage:
    from topoview import CanvasController, SvgSurface, topology, node, bus

    with topology() as store:
        amf = node("AMF", at=(100, 100), status="stable")
        smf = node("SMF", at=(300, 100), status="starting")
        amf >> smf | "N11"

        sbi = bus("SBI", at=(60, 300), length=500)
        amf >> sbi

    canvas = CanvasController(store, surface=SvgSurface(800, 600))
    canvas.render()
    canvas.click((120, 120))
    svg = canvas.surface.as_svg()
"""

from .controller import (
    CanvasController,
    DragKind,
    DragTarget,
    NullSelectionSink,
    SelectionSink,
    UIState,
)
from .dsl import (
    attach,
    bridge,
    bus,
    link,
    node,
    topology,
)
from .geometry import (
    anchor_points,
    nearest_point_on_bus,
    node_center,
    point_in_bus,
    point_in_node,
)
from .models import (
    NODE_HEIGHT,
    NODE_WIDTH,
    Bus,
    BusBusLink,
    BusConnection,
    Connection,
    Node,
    NodeBusLink,
    Orientation,
    Point,
)
from .renderer import (
    DiagramRenderer,
    IconImage,
    RenderConfig,
    exclude_kind_pairs,
)
from .store import (
    EmptyStore,
    EntityMover,
    EntityStore,
    InMemoryStore,
)
from .styling import (
    DEFAULT_THEME,
    InterfaceCategory,
    LabelColors,
    Theme,
    classify_interface,
    default_status_color,
)
from .surface import (
    DrawCall,
    RecordingSurface,
    Surface,
)
from .svg import SvgSurface
from .topology import (
    are_linked,
    build_graph,
    neighbors,
    route,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "Point",
    "Node",
    "Bus",
    "Orientation",
    "Connection",
    "NodeBusLink",
    "BusBusLink",
    "BusConnection",
    "NODE_WIDTH",
    "NODE_HEIGHT",
    # Geometry
    "point_in_node",
    "point_in_bus",
    "nearest_point_on_bus",
    "anchor_points",
    "node_center",
    # Store
    "EntityStore",
    "EntityMover",
    "EmptyStore",
    "InMemoryStore",
    # Rendering
    "DiagramRenderer",
    "RenderConfig",
    "IconImage",
    "exclude_kind_pairs",
    "Theme",
    "DEFAULT_THEME",
    "InterfaceCategory",
    "LabelColors",
    "classify_interface",
    "default_status_color",
    # Surfaces
    "Surface",
    "RecordingSurface",
    "DrawCall",
    "SvgSurface",
    # Interaction
    "CanvasController",
    "UIState",
    "DragKind",
    "DragTarget",
    "SelectionSink",
    "NullSelectionSink",
    # Topology queries
    "build_graph",
    "route",
    "are_linked",
    "neighbors",
    # DSL
    "topology",
    "node",
    "bus",
    "link",
    "attach",
    "bridge",
    # Version
    "__version__",
]
