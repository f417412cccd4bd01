"""SVG surface using drawsvg."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import drawsvg as draw

from .styling import DEFAULT_THEME, Theme
from .surface import estimate_text_width

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

FONT_FAMILY = "Arial, Helvetica, sans-serif"


class SvgSurface:
    """Surface that builds a drawsvg Drawing.

    Each clear() starts a new Drawing filled with the given background, or
    the surface theme's when none is given;
    layer() opens a named <g> group that later primitives go into.
    """

    def __init__(self, width: float = 800, height: float = 600, theme: Theme | None = None):
        self.theme = theme or DEFAULT_THEME
        self._width = width
        self._height = height
        self.drawing: draw.Drawing = draw.Drawing(width, height)
        self._target: draw.Drawing | draw.Group = self.drawing

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def resize(self, width: float, height: float) -> None:
        self._width = width
        self._height = height
        self.clear()

    def clear(self, background: str | None = None) -> None:
        self.drawing = draw.Drawing(self._width, self._height)
        self.drawing.append(
            draw.Rectangle(0, 0, self._width, self._height, fill=background or self.theme.background)
        )
        self._target = self.drawing

    def layer(self, name: str) -> None:
        group = draw.Group(id=f"layer-{name}")
        self.drawing.append(group)
        self._target = group

    def line(
        self,
        x1: float, y1: float, x2: float, y2: float,
        *,
        color: str,
        width: float = 1.0,
        dash: Sequence[float] | None = None,
        round_cap: bool = False,
        opacity: float = 1.0,
    ) -> None:
        attrs = {
            "stroke": color,
            "stroke_width": width,
            "stroke_linecap": "round" if round_cap else "butt",
        }
        if dash:
            attrs["stroke_dasharray"] = ",".join(f"{d:g}" for d in dash)
        if opacity < 1.0:
            attrs["stroke_opacity"] = opacity
        self._target.append(draw.Line(x1, y1, x2, y2, **attrs))

    def rect(
        self,
        x: float, y: float, w: float, h: float,
        *,
        fill: str | None = None,
        fill_opacity: float = 1.0,
        stroke: str | None = None,
        stroke_width: float = 1.0,
    ) -> None:
        self._target.append(
            draw.Rectangle(
                x, y, w, h,
                fill=fill or "none",
                fill_opacity=fill_opacity,
                stroke=stroke or "none",
                stroke_width=stroke_width,
            )
        )

    def circle(
        self,
        cx: float, cy: float, r: float,
        *,
        fill: str | None = None,
        stroke: str | None = None,
        stroke_width: float = 1.0,
        opacity: float = 1.0,
    ) -> None:
        self._target.append(
            draw.Circle(
                cx, cy, r,
                fill=fill or "none",
                stroke=stroke or "none",
                stroke_width=stroke_width,
                opacity=opacity,
            )
        )

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
    ) -> None:
        attrs = {
            "fill": color,
            "font_family": FONT_FAMILY,
            "text_anchor": anchor,
            "dominant_baseline": baseline,
        }
        if bold:
            attrs["font_weight"] = "bold"
        if rotate:
            attrs["transform"] = f"rotate({rotate:g}, {x:g}, {y:g})"
        self._target.append(draw.Text(text, size, x, y, **attrs))

    def image(self, href: str, x: float, y: float, w: float, h: float) -> None:
        self._target.append(draw.Image(x, y, w, h, path=href, embed=False))

    def measure_text(self, text: str, size: float, bold: bool = False) -> float:
        return estimate_text_width(text, size, bold)

    def as_svg(self) -> str:
        return self.drawing.as_svg()

    def save_svg(self, filename: str) -> None:
        self.drawing.save_svg(filename)
        logger.info(f"Saved canvas to {filename}")
