"""
Skew-T/Log-P diagram layout and rendering.

Classes
-------
PlotGeometry
    Canvas size, plot area and the pressure/temperature transform
RenderScene, Rect, Polyline, Line, Text
    Declarative drawing primitives
SkewTStyle, LineStyle
    Colors and line styles
MatplotlibRenderer
    Paints scenes onto matplotlib figures

Functions
---------
render_skewt
    Lay out a diagram for a sounding
render_blank_skewt
    Lay out the empty diagram
"""

from skewtlogp.plot.geometry import (
    PlotGeometry,
    PRES_MIN,
    PRES_BASE,
    PRES_MAX,
    TEMP_MIN,
    TEMP_MAX,
)
from skewtlogp.plot.scene import Rect, Polyline, Line, Text, RenderScene
from skewtlogp.plot.styles import LineStyle, SkewTStyle, DEFAULT_STYLE
from skewtlogp.plot.layout import render_skewt, render_blank_skewt
from skewtlogp.plot.raster import MatplotlibRenderer

__all__ = [
    "PlotGeometry",
    "PRES_MIN",
    "PRES_BASE",
    "PRES_MAX",
    "TEMP_MIN",
    "TEMP_MAX",
    "Rect",
    "Polyline",
    "Line",
    "Text",
    "RenderScene",
    "LineStyle",
    "SkewTStyle",
    "DEFAULT_STYLE",
    "render_skewt",
    "render_blank_skewt",
    "MatplotlibRenderer",
]
