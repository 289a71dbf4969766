"""
Line and text styles for Skew-T diagram elements.

Widths and dash lengths are given for a line scale of 1 and are multiplied
by ``PlotGeometry.line_scale`` at render time.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class LineStyle:
    """Stroke style.

    Attributes:
        color: Hex color string
        width: Base line width [px]
        dash: Base dash pattern [px], or None for solid
    """
    color: str
    width: float
    dash: Optional[Tuple[float, ...]] = None

    def scaled_width(self, line_scale: float) -> float:
        return self.width * line_scale

    def scaled_dash(self, line_scale: float) -> Optional[Tuple[float, ...]]:
        if self.dash is None:
            return None
        return tuple(d * line_scale for d in self.dash)


@dataclass(frozen=True)
class SkewTStyle:
    """Styles for every element of the diagram."""
    background: str = "#ffffff"
    text: str = "#000000"
    dry_adiabat: LineStyle = field(default_factory=lambda: LineStyle("#7f5f3f", 1.0))
    saturated_adiabat: LineStyle = field(default_factory=lambda: LineStyle("#008000", 0.75, (3.0,)))
    mixing_ratio: LineStyle = field(default_factory=lambda: LineStyle("#008080", 0.75, (6.0,)))
    isotherm: LineStyle = field(default_factory=lambda: LineStyle("#000000", 1.25))
    isobar: LineStyle = field(default_factory=lambda: LineStyle("#0000ff", 0.75))
    temperature: LineStyle = field(default_factory=lambda: LineStyle("#000000", 2.0))
    dewpoint: LineStyle = field(default_factory=lambda: LineStyle("#ff0000", 2.0))
    axes: LineStyle = field(default_factory=lambda: LineStyle("#000000", 1.5))
    ticks: LineStyle = field(default_factory=lambda: LineStyle("#000000", 1.5))

    def with_colors(self, colors: Dict[str, str]) -> "SkewTStyle":
        """
        Copy of the style with element colors overridden.

        Args:
            colors: Mapping of element name (e.g. ``"dewpoint"``) to color

        Returns:
            New SkewTStyle
        """
        updates = {}
        for name, color in colors.items():
            current = getattr(self, name, None)
            if isinstance(current, LineStyle):
                updates[name] = replace(current, color=color)
            elif isinstance(current, str):
                updates[name] = color
            else:
                raise ValueError(f"Unknown style element: {name}")
        return replace(self, **updates)


DEFAULT_STYLE = SkewTStyle()
