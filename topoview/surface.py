"""Drawing surface protocol and a draw-call recorder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


class Surface(Protocol):
    """Minimal immediate-mode drawing API the renderer targets.

    Coordinates are surface-local. Colors are CSS color strings.
    """

    @property
    def width(self) -> float: ...

    @property
    def height(self) -> float: ...

    def resize(self, width: float, height: float) -> None: ...

    def clear(self, background: str | None = None) -> None:
        """Wipe the surface and fill it with background (the surface default if None)."""
        ...

    def layer(self, name: str) -> None:
        """Start a named layer; later primitives draw above earlier layers."""
        ...

    def line(
        self,
        x1: float, y1: float, x2: float, y2: float,
        *,
        color: str,
        width: float = 1.0,
        dash: Sequence[float] | None = None,
        round_cap: bool = False,
        opacity: float = 1.0,
    ) -> None: ...

    def rect(
        self,
        x: float, y: float, w: float, h: float,
        *,
        fill: str | None = None,
        fill_opacity: float = 1.0,
        stroke: str | None = None,
        stroke_width: float = 1.0,
    ) -> None: ...

    def circle(
        self,
        cx: float, cy: float, r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float = 1.0,
        opacity: float = 1.0,
    ) -> None: ...

    def text(
        self,
        text: str, x: float, y: float,
        *,
        size: float,
        color: str,
        anchor: str = "middle",
        baseline: str = "middle",
        bold: bool = False,
        rotate: float = 0.0,
    ) -> None: ...

    def image(self, href: str, x: float, y: float, w: float, h: float) -> None: ...

    def measure_text(self, text: str, size: float, bold: bool = False) -> float: ...


def estimate_text_width(text: str, size: float, bold: bool = False) -> float:
    """Estimate rendered text width from character count."""
    char_width = size * (0.62 if bold else 0.56)
    return len(text) * char_width


@dataclass
class DrawCall:
    """One recorded drawing operation."""

    op: str
    args: tuple
    kwargs: dict[str, Any] = field(default_factory=dict)


class RecordingSurface:
    """Surface that records every call instead of drawing.

    Used as the draw-call recorder in tests and for debugging render order.
    """

    def __init__(self, width: float = 800, height: float = 600):
        self._width = width
        self._height = height
        self.calls: list[DrawCall] = []

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def resize(self, width: float, height: float) -> None:
        self._width = width
        self._height = height

    def clear(self, background: str | None = None) -> None:
        self.calls = [DrawCall("clear", (background,))]

    def layer(self, name: str) -> None:
        self.calls.append(DrawCall("layer", (name,)))

    def line(self, x1, y1, x2, y2, **kwargs) -> None:
        self.calls.append(DrawCall("line", (x1, y1, x2, y2), kwargs))

    def rect(self, x, y, w, h, **kwargs) -> None:
        self.calls.append(DrawCall("rect", (x, y, w, h), kwargs))

    def circle(self, cx, cy, r, **kwargs) -> None:
        self.calls.append(DrawCall("circle", (cx, cy, r), kwargs))

    def text(self, text, x, y, **kwargs) -> None:
        self.calls.append(DrawCall("text", (text, x, y), kwargs))

    def image(self, href, x, y, w, h) -> None:
        self.calls.append(DrawCall("image", (href, x, y, w, h)))

    def measure_text(self, text: str, size: float, bold: bool = False) -> float:
        return estimate_text_width(text, size, bold)

    def ops(self, op: str) -> list[DrawCall]:
        """All recorded calls of one kind, in order."""
        return [c for c in self.calls if c.op == op]

    def texts(self) -> list[str]:
        return [c.args[0] for c in self.ops("text")]

    def layers(self) -> list[str]:
        return [c.args[0] for c in self.ops("layer")]

    def in_layer(self, name: str) -> list[DrawCall]:
        """Calls recorded between layer(name) and the next layer call."""
        current = None
        result = []
        for call in self.calls:
            if call.op == "layer":
                current = call.args[0]
            elif current == name:
                result.append(call)
        return result
