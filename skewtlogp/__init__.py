"""
skewtlogp: Skew-T/Log-P diagrams for atmospheric soundings.

Computes the thermodynamic reference curves of a Skew-T/Log-P diagram and
lays them out, together with a sounding's temperature and dew point traces,
as a resolution-independent scene of drawing primitives.

Modules
-------
thermo
    Saturation physics, dew point, LCL, dry and saturated adiabats,
    stability indices
sounding
    Sounding data model, gridded-data provider and file loaders
plot
    Pressure/temperature transform, diagram layout and matplotlib rendering
config
    Plot configuration (canvas sizes, colors, annotations)
utils
    Constants, missing-value handling and output formatting
"""

__version__ = "0.1.0"
__author__ = "skewtlogp Contributors"

from skewtlogp.sounding import Sounding, SurfaceObservation, SoundingLevel, load_sounding
from skewtlogp.plot import PlotGeometry, RenderScene, render_skewt, render_blank_skewt

__all__ = [
    "__version__",
    "Sounding",
    "SurfaceObservation",
    "SoundingLevel",
    "load_sounding",
    "PlotGeometry",
    "RenderScene",
    "render_skewt",
    "render_blank_skewt",
]
