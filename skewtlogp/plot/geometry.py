"""
Skew-T/Log-P coordinate transform.

Pressure maps logarithmically onto the vertical axis, with the lowest
pressure at the top of the plot area. Temperature maps linearly onto the
horizontal axis, but the temperature window is shifted in proportion to the
vertical distance from the 1000 hPa row, which slants isotherms at 45 deg
for the default aspect ratio. The X coordinate of a point therefore depends
on both its temperature and its already-computed Y coordinate.

Pixel coordinates follow screen conventions: origin at the top-left, Y
increasing downward.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from skewtlogp.utils.constants import C_TO_K, HPA_TO_PA

# Pressure axis limits and skew reference level [Pa]
PRES_MIN = 100 * HPA_TO_PA
PRES_BASE = 1000 * HPA_TO_PA
PRES_MAX = 1050 * HPA_TO_PA

# Temperature axis limits at the base pressure [K]
TEMP_MIN = -50 + C_TO_K
TEMP_MAX = 50 + C_TO_K
TEMP_RANGE = TEMP_MAX - TEMP_MIN

# Plot area as fractions of the canvas
PLOT_X_OFFSET_FRACTION = 0.15
PLOT_X_MAX_FRACTION = 0.90
PLOT_Y_OFFSET_FRACTION = 0.85
PLOT_Y_MAX_FRACTION = 0.10

# Number of steps the plot area is divided into for sizing fonts and offsets
PLOT_MAX_STEPS = 400

_LOG_PRES_MIN = math.log(PRES_MIN)
_LOG_PRES_RANGE = math.log(PRES_MAX) - _LOG_PRES_MIN


@dataclass(frozen=True)
class PlotGeometry:
    """Canvas size and derived plot-area layout for one render.

    Attributes:
        canvas_width: Canvas width [px]
        canvas_height: Canvas height [px]
        line_scale: Factor applied to line widths and dash lengths so that
            high-resolution exports keep the same relative line weight
    """
    canvas_width: float
    canvas_height: float
    line_scale: float = 1.0

    def __post_init__(self):
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas size must be positive, got {self.canvas_width}x{self.canvas_height}"
            )
        if self.line_scale <= 0:
            raise ValueError(f"line_scale must be positive, got {self.line_scale}")

    @classmethod
    def from_canvas(cls, canvas) -> "PlotGeometry":
        """Create geometry from a CanvasConfig."""
        return cls(canvas.width, canvas.height, canvas.line_scale)

    @classmethod
    def for_view(cls, config) -> "PlotGeometry":
        """Geometry for on-screen rendering from a PlotConfig."""
        return cls.from_canvas(config.view)

    @classmethod
    def for_export(cls, config) -> "PlotGeometry":
        """Geometry for high-resolution export from a PlotConfig."""
        return cls.from_canvas(config.export)

    @property
    def plot_x_offset(self) -> float:
        """Left edge of the plot area [px]."""
        return self.canvas_width * PLOT_X_OFFSET_FRACTION

    @property
    def plot_x_max(self) -> float:
        """Right edge of the plot area [px]."""
        return self.canvas_width * PLOT_X_MAX_FRACTION

    @property
    def plot_y_offset(self) -> float:
        """Bottom edge of the plot area (PRES_MAX) [px]."""
        return self.canvas_height * PLOT_Y_OFFSET_FRACTION

    @property
    def plot_y_max(self) -> float:
        """Top edge of the plot area (PRES_MIN) [px]."""
        return self.canvas_height * PLOT_Y_MAX_FRACTION

    @property
    def plot_x_range(self) -> float:
        return abs(self.plot_x_max - self.plot_x_offset)

    @property
    def plot_y_range(self) -> float:
        return abs(self.plot_y_max - self.plot_y_offset)

    @property
    def plot_x_step(self) -> float:
        return self.plot_x_range / PLOT_MAX_STEPS

    @property
    def plot_y_step(self) -> float:
        return self.plot_y_range / PLOT_MAX_STEPS

    @property
    def plot_avg_step(self) -> float:
        """Mean of the X and Y step sizes; the unit for fonts and offsets."""
        return (self.plot_x_step + self.plot_y_step) / 2

    def pres_to_y(self, pres_pa):
        """
        Y coordinate of an isobaric level.

        Parameters
        ----------
        pres_pa : float or np.ndarray
            Pressure [Pa]

        Returns
        -------
        float or np.ndarray
            Y coordinate [px]; larger for higher pressure
        """
        percent = np.abs((np.log(pres_pa) - _LOG_PRES_MIN) / _LOG_PRES_RANGE)
        return self.plot_y_max + percent * self.plot_y_range

    def y_to_pres(self, y):
        """Pressure [Pa] of a Y coordinate inside the plot area."""
        percent = (np.asarray(y, dtype=float) - self.plot_y_max) / self.plot_y_range
        return np.exp(_LOG_PRES_MIN + percent * _LOG_PRES_RANGE)[()]

    def _skewed_temp_min(self, y):
        """Temperature at the left plot edge for a given Y coordinate."""
        y_base = self.pres_to_y(PRES_BASE)
        y_range_new = abs(y_base - self.plot_y_max)
        y_offset = abs(self.plot_y_offset - y_base)
        y_percent_inv = (y + y_offset - self.plot_y_offset) / y_range_new
        return TEMP_MIN + TEMP_RANGE * y_percent_inv

    def temp_y_to_x(self, temp_k, y):
        """
        X coordinate of a temperature on the row at ``y``.

        Parameters
        ----------
        temp_k : float or np.ndarray
            Temperature [K]
        y : float or np.ndarray
            Y coordinate already computed with :meth:`pres_to_y` [px]

        Returns
        -------
        float or np.ndarray
            X coordinate [px]
        """
        temp_percent = (temp_k - self._skewed_temp_min(y)) / TEMP_RANGE
        return temp_percent * self.plot_x_range + self.plot_x_offset

    def x_y_to_temp(self, x, y):
        """Temperature [K] at pixel (x, y); inverse of :meth:`temp_y_to_x`."""
        temp_percent = (x - self.plot_x_offset) / self.plot_x_range
        return self._skewed_temp_min(y) + temp_percent * TEMP_RANGE

    def temp_pres_to_xy(self, temp_k, pres_pa) -> Tuple:
        """Pixel (x, y) for a temperature [K] and pressure [Pa]."""
        y = self.pres_to_y(pres_pa)
        return self.temp_y_to_x(temp_k, y), y

    def contains(self, x: float, y: float) -> bool:
        """Whether a pixel lies inside the plot area."""
        return (
            self.plot_x_offset <= x <= self.plot_x_max
            and self.plot_y_max <= y <= self.plot_y_offset
        )
