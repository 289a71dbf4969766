"""
Declarative drawing primitives produced by the Skew-T layout.

A RenderScene is an ordered list of primitives in paint order (back to
front) with geometry in pixel coordinates and paint metadata. It has no
behaviour beyond conversion helpers; rasterizing is left to a consumer such
as :class:`skewtlogp.plot.raster.MatplotlibRenderer`.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """Filled axis-aligned rectangle."""
    x: float
    y: float
    width: float
    height: float
    fill: str
    layer: str = ""

    kind = "rect"

    def scaled(self, factor: float) -> "Rect":
        return replace(
            self, x=self.x * factor, y=self.y * factor,
            width=self.width * factor, height=self.height * factor,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind, "layer": self.layer,
            "x": self.x, "y": self.y, "width": self.width, "height": self.height,
            "fill": self.fill,
        }


@dataclass(frozen=True)
class Polyline:
    """Open polyline through an ordered list of points."""
    points: Tuple[Point, ...]
    color: str
    width: float
    dash: Optional[Tuple[float, ...]] = None
    layer: str = ""

    kind = "polyline"

    def scaled(self, factor: float) -> "Polyline":
        return replace(
            self,
            points=tuple((x * factor, y * factor) for x, y in self.points),
            width=self.width * factor,
            dash=_scale_dash(self.dash, factor),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind, "layer": self.layer,
            "points": [list(p) for p in self.points],
            "color": self.color, "width": self.width,
            "dash": list(self.dash) if self.dash else None,
        }


@dataclass(frozen=True)
class Line:
    """Straight line segment."""
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float
    dash: Optional[Tuple[float, ...]] = None
    layer: str = ""

    kind = "line"

    def scaled(self, factor: float) -> "Line":
        return replace(
            self,
            x1=self.x1 * factor, y1=self.y1 * factor,
            x2=self.x2 * factor, y2=self.y2 * factor,
            width=self.width * factor,
            dash=_scale_dash(self.dash, factor),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind, "layer": self.layer,
            "x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2,
            "color": self.color, "width": self.width,
            "dash": list(self.dash) if self.dash else None,
        }


@dataclass(frozen=True)
class Text:
    """Text label.

    Attributes:
        content: Text to draw
        x: Anchor X [px]
        y: Anchor Y [px]
        font_size: Font size [px]
        color: Fill color
        align: Horizontal alignment: left, center or right
        baseline: Vertical alignment: top, center, baseline or bottom
        rotation: Rotation about the anchor in degrees, clockwise on screen
        font_weight: normal or bold
        font_style: normal or italic
    """
    content: str
    x: float
    y: float
    font_size: float
    color: str = "#000000"
    align: str = "left"
    baseline: str = "baseline"
    rotation: float = 0.0
    font_weight: str = "normal"
    font_style: str = "normal"
    layer: str = ""

    kind = "text"

    def scaled(self, factor: float) -> "Text":
        return replace(
            self, x=self.x * factor, y=self.y * factor,
            font_size=self.font_size * factor,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind, "layer": self.layer,
            "content": self.content, "x": self.x, "y": self.y,
            "font_size": self.font_size, "color": self.color,
            "align": self.align, "baseline": self.baseline,
            "rotation": self.rotation,
            "font_weight": self.font_weight, "font_style": self.font_style,
        }


Primitive = Union[Rect, Polyline, Line, Text]


@dataclass(frozen=True)
class RenderScene:
    """Ordered drawable primitives for one diagram.

    Attributes:
        width: Canvas width [px]
        height: Canvas height [px]
        primitives: Primitives in paint order
    """
    width: float
    height: float
    primitives: Tuple[Primitive, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.primitives)

    def __iter__(self) -> Iterator[Primitive]:
        return iter(self.primitives)

    def by_layer(self, layer: str) -> List[Primitive]:
        """Primitives belonging to one diagram element, in paint order."""
        return [p for p in self.primitives if p.layer == layer]

    def layers(self) -> List[str]:
        """Layer names in order of first appearance."""
        seen = []
        for p in self.primitives:
            if p.layer not in seen:
                seen.append(p.layer)
        return seen

    def scaled(self, factor: float) -> "RenderScene":
        """Copy of the scene with all geometry and sizes multiplied by factor."""
        return RenderScene(
            width=self.width * factor,
            height=self.height * factor,
            primitives=tuple(p.scaled(factor) for p in self.primitives),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert scene to a JSON-serializable dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "primitives": [p.to_dict() for p in self.primitives],
        }


class SceneBuilder:
    """Accumulates primitives in paint order while a scene is laid out."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self._primitives: List[Primitive] = []

    def add(self, primitive: Primitive) -> None:
        self._primitives.append(primitive)

    def extend(self, primitives) -> None:
        self._primitives.extend(primitives)

    def build(self) -> RenderScene:
        return RenderScene(self.width, self.height, tuple(self._primitives))


def _scale_dash(dash: Optional[Tuple[float, ...]], factor: float) -> Optional[Tuple[float, ...]]:
    if not dash:
        return dash
    return tuple(d * factor for d in dash)
