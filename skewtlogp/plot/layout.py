"""
Skew-T/Log-P diagram layout.

Turns a Sounding and a PlotGeometry into a RenderScene. Rendering is a pure
function of its arguments: the on-screen view and a high-resolution export
are the same call with different geometry.

Paint order (back to front):

1. background
2. dry adiabats (with labels)
3. saturated adiabats (with labels)
4. mixing-ratio lines (with labels)
5. skewed isotherms
6. isobars
7. temperature and dew point traces
8. masks outside the plot area, axes, ticks, labels and annotations
"""

import logging
import math
from datetime import datetime
from typing import Callable, List, Optional, Sequence

import numpy as np

from skewtlogp.plot.geometry import (
    PRES_BASE,
    PRES_MAX,
    PRES_MIN,
    PlotGeometry,
)
from skewtlogp.plot.scene import Line, Polyline, Rect, RenderScene, SceneBuilder, Text
from skewtlogp.plot.styles import DEFAULT_STYLE, LineStyle, SkewTStyle
from skewtlogp.sounding.models import Sounding
from skewtlogp.thermo.adiabats import (
    calc_sat_pot_temp,
    calc_temp_sat_adiabat,
    temp_from_potential_temperature,
)
from skewtlogp.thermo.saturation import temp_at_mixing_ratio
from skewtlogp.utils.constants import C_TO_K, HPA_TO_PA, is_missing

logger = logging.getLogger(__name__)

# Temperature grid in deg C: isotherms and adiabats start well left of the
# plot area so that the skewed lines fill its upper part
GRID_TEMP_MIN_C = -150
GRID_TEMP_MAX_C = 50
TICK_TEMP_MIN_C = -50
TICK_TEMP_MAX_C = 50

# Pressure decrements used to trace curves [Pa]
DRY_ADIABAT_STEP_PA = 10.0
SAT_ADIABAT_STEP_PA = 100.0

# Mixing ratio lines [g/kg]
MIXING_RATIOS = (0.1, 0.5, 1.0, 1.5, 2.0, 3.0, 4.0, 6.0, 8.0, 10.0, 12.0,
                 15.0, 20.0, 25.0, 30.0, 35.0, 40.0, 45.0)

# Isobars and pressure ticks [Pa]
PRESSURE_LEVELS = tuple(i * 100 * HPA_TO_PA for i in range(1, 11))

# Label positions as (lower, label, upper) pressure [Pa]
DRY_ADIABAT_LABEL_PRES = (22000.0, 21000.0, 20000.0)
SAT_ADIABAT_LABEL_PRES = (28000.0, 27000.0, 26000.0)
MIXING_RATIO_LABEL_PRES = 74000.0

MISSING_TEXT = "--"


def temperature_steps(step_c: int, min_c: int = GRID_TEMP_MIN_C,
                      max_c: int = GRID_TEMP_MAX_C) -> List[float]:
    """Temperatures [K] every ``step_c`` degrees from ``min_c`` to ``max_c``."""
    return [i * step_c + C_TO_K for i in range(min_c // step_c, max_c // step_c + 1)]


def _pressure_trace(step_pa: float) -> np.ndarray:
    """Pressures from PRES_MAX down to PRES_MIN inclusive [Pa]."""
    return np.arange(PRES_MAX, PRES_MIN - step_pa / 2, -step_pa)


def _label_angle(x1: float, y1: float, x2: float, y2: float) -> float:
    """Clockwise rotation [deg] that makes text parallel to a segment."""
    dx = x2 - x1
    if dx == 0:
        return -90.0
    return -math.degrees(math.atan((y1 - y2) / dx))


def _polyline(xs, ys, style: LineStyle, line_scale: float, layer: str) -> Polyline:
    points = tuple(zip(np.asarray(xs, dtype=float).tolist(), np.asarray(ys, dtype=float).tolist()))
    return Polyline(
        points=points,
        color=style.color,
        width=style.scaled_width(line_scale),
        dash=style.scaled_dash(line_scale),
        layer=layer,
    )


def _line(x1, y1, x2, y2, style: LineStyle, line_scale: float, layer: str) -> Line:
    return Line(
        float(x1), float(y1), float(x2), float(y2),
        color=style.color,
        width=style.scaled_width(line_scale),
        dash=style.scaled_dash(line_scale),
        layer=layer,
    )


def _curve_label(geometry: PlotGeometry, temp_at: Callable[[float], float],
                 label_pres: Sequence[float], content: str, color: str,
                 font_scale: float, x_shift: float, layer: str) -> Text:
    """Label placed on a curve and rotated parallel to it."""
    lower, middle, upper = label_pres
    x1, y1 = geometry.temp_pres_to_xy(temp_at(lower), lower)
    x2, y2 = geometry.temp_pres_to_xy(temp_at(upper), upper)
    label_x, label_y = geometry.temp_pres_to_xy(temp_at(middle), middle)
    step = geometry.plot_avg_step
    return Text(
        content=content,
        x=float(label_x) + x_shift * step,
        y=float(label_y),
        font_size=font_scale * step,
        color=color,
        align="center",
        baseline="baseline",
        rotation=_label_angle(x1, y1, x2, y2),
        font_weight="bold",
        layer=layer,
    )


def _draw_background(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    builder.add(Rect(0.0, 0.0, geometry.canvas_width, geometry.canvas_height,
                     fill=style.background, layer="background"))


def _draw_dry_adiabats(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    pressures = _pressure_trace(DRY_ADIABAT_STEP_PA)
    ys = geometry.pres_to_y(pressures)
    line_style = style.dry_adiabat

    for theta in temperature_steps(10):
        temps = temp_from_potential_temperature(theta, pressures)
        builder.add(_polyline(geometry.temp_y_to_x(temps, ys), ys, line_style,
                              geometry.line_scale, "dry_adiabat"))
        builder.add(_curve_label(
            geometry,
            lambda p, theta=theta: temp_from_potential_temperature(theta, p),
            DRY_ADIABAT_LABEL_PRES,
            f"{theta - C_TO_K:.0f} C",
            line_style.color, 5.0, 1.5, "dry_adiabat",
        ))


def _draw_saturated_adiabats(builder: SceneBuilder, geometry: PlotGeometry,
                             style: SkewTStyle) -> None:
    pressures = _pressure_trace(SAT_ADIABAT_STEP_PA)
    ys = geometry.pres_to_y(pressures)
    line_style = style.saturated_adiabat

    steps = np.array(temperature_steps(5))
    os_temps = calc_sat_pot_temp(steps, PRES_BASE)
    # One vectorised search for every adiabat at every pressure
    all_temps = calc_temp_sat_adiabat(os_temps[:, np.newaxis], pressures[np.newaxis, :])

    for step, os_temp, temps in zip(steps, os_temps, all_temps):
        builder.add(_polyline(geometry.temp_y_to_x(temps, ys), ys, line_style,
                              geometry.line_scale, "saturated_adiabat"))
        builder.add(_curve_label(
            geometry,
            lambda p, os_temp=os_temp: calc_temp_sat_adiabat(os_temp, p),
            SAT_ADIABAT_LABEL_PRES,
            f"{step - C_TO_K:.0f} C",
            line_style.color, 5.0, 1.5, "saturated_adiabat",
        ))


def _draw_mixing_ratios(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    line_style = style.mixing_ratio
    step = geometry.plot_avg_step
    label_y = float(geometry.pres_to_y(MIXING_RATIO_LABEL_PRES))

    for w in MIXING_RATIOS:
        x1, y1 = geometry.temp_pres_to_xy(temp_at_mixing_ratio(w, PRES_MAX), PRES_MAX)
        x2, y2 = geometry.temp_pres_to_xy(temp_at_mixing_ratio(w, PRES_MIN), PRES_MIN)
        builder.add(_line(x1, y1, x2, y2, line_style, geometry.line_scale, "mixing_ratio"))

        label_x = x1 + (x2 - x1) * (label_y - y1) / (y2 - y1)
        builder.add(Text(
            content=f"{w:.1f} g/kg",
            x=float(label_x) - 1.5 * step,
            y=label_y,
            font_size=4.0 * step,
            color=line_style.color,
            align="center",
            baseline="baseline",
            rotation=_label_angle(x1, y1, x2, y2),
            font_weight="bold",
            layer="mixing_ratio",
        ))


def _draw_isotherms(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    y1 = geometry.pres_to_y(PRES_MAX)
    y2 = geometry.pres_to_y(PRES_MIN)
    for temp in temperature_steps(10):
        builder.add(_line(
            geometry.temp_y_to_x(temp, y1), y1,
            geometry.temp_y_to_x(temp, y2), y2,
            style.isotherm, geometry.line_scale, "isotherm",
        ))


def _draw_isobars(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    for pres in PRESSURE_LEVELS:
        y = geometry.pres_to_y(pres)
        builder.add(_line(geometry.plot_x_offset, y, geometry.plot_x_max, y,
                          style.isobar, geometry.line_scale, "isobar"))


def _draw_traces(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle,
                 sounding: Sounding) -> None:
    """Temperature and dew point traces; missing samples are skipped per trace."""
    points = sounding.trace_points()

    for attr, line_style, layer in (
        ("temperature_k", style.temperature, "temperature_trace"),
        ("dewpoint_k", style.dewpoint, "dewpoint_trace"),
    ):
        valid = [p for p in points if not is_missing(getattr(p, attr))]
        skipped = len(points) - len(valid)
        if skipped:
            logger.debug(f"Skipped {skipped} missing sample(s) in {layer}")
        if not valid:
            logger.warning(f"No valid samples for {layer}")
            continue

        pressures = np.array([p.pressure_pa for p in valid])
        values = np.array([getattr(p, attr) for p in valid])
        xs, ys = geometry.temp_pres_to_xy(values, pressures)
        builder.add(_polyline(xs, ys, line_style, geometry.line_scale, layer))


def _draw_axes(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    """Clear everything outside the plot area, then draw the axis lines."""
    w, h = geometry.canvas_width, geometry.canvas_height
    left, right = geometry.plot_x_offset, geometry.plot_x_max
    top, bottom = geometry.plot_y_max, geometry.plot_y_offset

    for rect in (
        Rect(0.0, 0.0, w, top, style.background, "mask"),
        Rect(0.0, bottom, w, h - bottom, style.background, "mask"),
        Rect(0.0, top, left, bottom - top, style.background, "mask"),
        Rect(right, top, w - right, bottom - top, style.background, "mask"),
    ):
        builder.add(rect)

    builder.add(_line(left, bottom, left, top, style.axes, geometry.line_scale, "axes"))
    builder.add(_line(left, bottom, right, bottom, style.axes, geometry.line_scale, "axes"))


def _draw_ticks_and_labels(builder: SceneBuilder, geometry: PlotGeometry,
                           style: SkewTStyle) -> None:
    step = geometry.plot_avg_step
    left = geometry.plot_x_offset
    bottom = geometry.plot_y_offset
    y_base = geometry.pres_to_y(PRES_BASE)
    tick_temps = temperature_steps(10, TICK_TEMP_MIN_C, TICK_TEMP_MAX_C)

    for pres in PRESSURE_LEVELS:
        y = geometry.pres_to_y(pres)
        builder.add(_line(left, y, left - 3 * step, y, style.ticks, geometry.line_scale, "ticks"))

    for temp in tick_temps:
        x = geometry.temp_y_to_x(temp, y_base)
        builder.add(_line(x, bottom, x, bottom + 3 * step, style.ticks, geometry.line_scale, "ticks"))

    for pres in PRESSURE_LEVELS:
        builder.add(Text(
            content=f"{pres / HPA_TO_PA:.0f}",
            x=left - 4 * step,
            y=float(geometry.pres_to_y(pres)),
            font_size=7 * step,
            color=style.text,
            align="right",
            baseline="center",
            layer="labels",
        ))

    for temp in tick_temps:
        builder.add(Text(
            content=f"{temp - C_TO_K:.0f}",
            x=float(geometry.temp_y_to_x(temp, y_base)),
            y=bottom + 4 * step,
            font_size=7 * step,
            color=style.text,
            align="center",
            baseline="top",
            layer="labels",
        ))

    axis_label_size = 10 * step
    builder.add(Text(
        content="Pressure (hPa)",
        x=geometry.canvas_width * 0.075 + axis_label_size,
        y=geometry.plot_y_range / 2 + geometry.plot_y_max,
        font_size=axis_label_size,
        color=style.text,
        align="center",
        baseline="center",
        rotation=-90.0,
        layer="labels",
    ))
    builder.add(Text(
        content="Temperature (C)",
        x=geometry.plot_x_range / 2 + geometry.plot_x_offset,
        y=geometry.canvas_height * 0.90 - axis_label_size,
        font_size=axis_label_size,
        color=style.text,
        align="center",
        baseline="center",
        layer="labels",
    ))


def _fmt(value: Optional[float], pattern: str, offset: float = 0.0, divisor: float = 1.0) -> str:
    """Format a value for display, showing missing values as ``--``."""
    if value is None or is_missing(value):
        return MISSING_TEXT
    return format((value - offset) / divisor, pattern)


def _fmt_time(value: Optional[datetime]) -> str:
    return value.isoformat(timespec="minutes") if value is not None else MISSING_TEXT


def _draw_annotations(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle,
                      sounding: Sounding) -> None:
    """Location and time above the plot; surface values and indices below it."""
    step = geometry.plot_avg_step
    center_x = geometry.canvas_width / 2
    top = geometry.plot_y_max
    bottom = geometry.plot_y_offset
    below = geometry.canvas_height - bottom
    meta = sounding.metadata

    def text(content, y, size, font_style="normal"):
        builder.add(Text(
            content=content, x=center_x, y=y, font_size=size * step,
            color=style.text, align="center", baseline="center",
            font_style=font_style, layer="annotation",
        ))

    text(f"Longitude, Latitude: {_fmt(meta.longitude, '.6f')}, {_fmt(meta.latitude, '.6f')}",
         top / 10 * 4.5, 12)
    text(f"Analysis: {_fmt_time(meta.analysis_time)}   Valid: {_fmt_time(meta.valid_time)}",
         top / 10 * 7, 9)
    text(f"Source: {meta.model_name or MISSING_TEXT}", top / 10 * 9, 7, font_style="italic")

    sfc = sounding.surface
    derived = sounding.derived()
    spacer = "     "
    line1 = spacer.join([
        f"Temperature 2m: {_fmt(sfc.temperature_2m_k, '.1f', C_TO_K)} C",
        f"Dew Point 2m: {_fmt(sfc.dewpoint_2m_k, '.1f', C_TO_K)} C",
        f"Pressure Sfc: {_fmt(sfc.pressure_pa, '.0f', divisor=HPA_TO_PA)} hPa",
    ])
    line2 = spacer.join([
        f"LCL: {_fmt(derived.lcl_pressure_pa, '.0f', divisor=HPA_TO_PA)} hPa",
        f"MSL: {_fmt(sfc.mslp_pa, '.0f', divisor=HPA_TO_PA)} hPa",
        f"CAPE: {_fmt(derived.cape_j_kg, '.0f')} J/kg",
        f"CIN: {_fmt(derived.cin_j_kg, '.0f')} J/kg",
    ])
    line3 = spacer.join([
        f"Lifted Index: {_fmt(derived.lifted_index_k, '.1f')}",
        f"K-Index: {_fmt(derived.k_index, '.0f')}",
        f"Total Totals: {_fmt(derived.total_totals, '.0f')}",
        f"SWEAT: {_fmt(derived.sweat, '.0f')}",
    ])

    text(line1, below / 20 * 9 + bottom, 8)
    text(line2, below / 20 * 12 + bottom, 7)
    text(line3, below / 20 * 14 + bottom, 7)


def _draw_grid(builder: SceneBuilder, geometry: PlotGeometry, style: SkewTStyle) -> None:
    _draw_background(builder, geometry, style)
    _draw_dry_adiabats(builder, geometry, style)
    _draw_saturated_adiabats(builder, geometry, style)
    _draw_mixing_ratios(builder, geometry, style)
    _draw_isotherms(builder, geometry, style)
    _draw_isobars(builder, geometry, style)


def render_skewt(
    sounding: Sounding,
    geometry: PlotGeometry,
    style: SkewTStyle = DEFAULT_STYLE,
    annotate: bool = True,
) -> RenderScene:
    """
    Lay out a complete Skew-T diagram for a sounding.

    Args:
        sounding: Sounding to plot
        geometry: Canvas size and line scale for this render
        style: Colors and line styles
        annotate: Include location/time and index summary text

    Returns:
        RenderScene with primitives in paint order
    """
    builder = SceneBuilder(geometry.canvas_width, geometry.canvas_height)
    _draw_grid(builder, geometry, style)
    _draw_traces(builder, geometry, style, sounding)
    _draw_axes(builder, geometry, style)
    _draw_ticks_and_labels(builder, geometry, style)
    if annotate:
        _draw_annotations(builder, geometry, style, sounding)

    scene = builder.build()
    logger.debug(
        f"Rendered Skew-T with {len(scene)} primitives at "
        f"{geometry.canvas_width:.0f}x{geometry.canvas_height:.0f}"
    )
    return scene


def render_blank_skewt(geometry: PlotGeometry, style: SkewTStyle = DEFAULT_STYLE) -> RenderScene:
    """
    Lay out an empty Skew-T diagram (reference lines, axes and labels only).

    Args:
        geometry: Canvas size and line scale for this render
        style: Colors and line styles

    Returns:
        RenderScene with primitives in paint order
    """
    builder = SceneBuilder(geometry.canvas_width, geometry.canvas_height)
    _draw_grid(builder, geometry, style)
    _draw_axes(builder, geometry, style)
    _draw_ticks_and_labels(builder, geometry, style)
    return builder.build()
