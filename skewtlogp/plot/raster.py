"""
Rasterize a RenderScene with matplotlib.

The scene is painted onto a figure with one axes spanning the whole canvas
in pixel coordinates (origin top-left, Y down). Pixel sizes are converted to
points using the figure DPI, so a figure saved at that DPI reproduces the
scene at its native size.
"""

import logging
from pathlib import Path
from typing import Optional

from skewtlogp.plot.scene import Line, Polyline, Rect, RenderScene, Text

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("png", "svg", "pdf")

_VERTICAL_ALIGNMENT = {
    "top": "top",
    "center": "center",
    "baseline": "baseline",
    "bottom": "bottom",
}


def _dash_pattern(dash, px_to_pt):
    """Matplotlib on/off dash sequence in points; odd patterns repeat."""
    if not dash:
        return None
    pattern = [d * px_to_pt for d in dash]
    if len(pattern) % 2:
        pattern = pattern * 2
    return (0, tuple(pattern))


class MatplotlibRenderer:
    """Paint RenderScenes onto matplotlib figures.

    Example:
        >>> renderer = MatplotlibRenderer(dpi=100)
        >>> renderer.save(scene, "skewt.png")
    """

    def __init__(self, dpi: float = 100.0):
        if dpi <= 0:
            raise ValueError(f"dpi must be positive, got {dpi}")
        self.dpi = dpi

    def render(self, scene: RenderScene):
        """
        Paint a scene onto a new figure.

        Args:
            scene: Scene to paint

        Returns:
            matplotlib Figure sized to the scene canvas
        """
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.figure import Figure
        from matplotlib.patches import Rectangle

        px_to_pt = 72.0 / self.dpi

        fig = Figure(figsize=(scene.width / self.dpi, scene.height / self.dpi), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, scene.width)
        ax.set_ylim(scene.height, 0)
        ax.axis("off")

        # zorder follows paint order across artist types
        for zorder, prim in enumerate(scene):
            if isinstance(prim, Rect):
                ax.add_patch(Rectangle(
                    (prim.x, prim.y), prim.width, prim.height,
                    facecolor=prim.fill, edgecolor="none", linewidth=0,
                    zorder=zorder, clip_on=False,
                ))
            elif isinstance(prim, Polyline):
                if not prim.points:
                    continue
                xs, ys = zip(*prim.points)
                ax.plot(
                    xs, ys, color=prim.color, linewidth=prim.width * px_to_pt,
                    linestyle=_dash_pattern(prim.dash, px_to_pt) or "solid",
                    zorder=zorder, clip_on=False,
                )
            elif isinstance(prim, Line):
                ax.plot(
                    [prim.x1, prim.x2], [prim.y1, prim.y2],
                    color=prim.color, linewidth=prim.width * px_to_pt,
                    linestyle=_dash_pattern(prim.dash, px_to_pt) or "solid",
                    zorder=zorder, clip_on=False,
                )
            elif isinstance(prim, Text):
                ax.text(
                    prim.x, prim.y, prim.content,
                    fontsize=prim.font_size * px_to_pt,
                    color=prim.color,
                    ha=prim.align,
                    va=_VERTICAL_ALIGNMENT.get(prim.baseline, "baseline"),
                    # Scene rotation is clockwise on screen
                    rotation=-prim.rotation,
                    rotation_mode="anchor",
                    fontweight=prim.font_weight,
                    fontstyle=prim.font_style,
                    zorder=zorder, clip_on=False,
                )
            else:
                raise TypeError(f"Unsupported primitive: {type(prim).__name__}")

        logger.debug(f"Painted {len(scene)} primitives onto {scene.width:.0f}x{scene.height:.0f} figure")
        return fig

    def save(self, scene: RenderScene, output_path: str, format: Optional[str] = None) -> str:
        """
        Rasterize a scene and write it to disk.

        Args:
            scene: Scene to paint
            output_path: Output file path
            format: Image format (png, svg, pdf); taken from the extension
                when not given

        Returns:
            Path to saved file

        Raises:
            ValueError: If format is not supported
        """
        output_path = Path(output_path)
        format = (format or output_path.suffix.lstrip(".")).lower()
        if format not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported image format: {format}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self.render(scene)
        fig.savefig(output_path, format=format, dpi=self.dpi)

        logger.info(f"Saved {format.upper()} image to {output_path}")
        return str(output_path)
