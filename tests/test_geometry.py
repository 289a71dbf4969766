"""Tests for the Skew-T coordinate transform."""

import numpy as np
import pytest

from skewtlogp.config import PlotConfig
from skewtlogp.plot.geometry import (
    PRES_BASE,
    PRES_MAX,
    PRES_MIN,
    TEMP_MAX,
    TEMP_MIN,
    PlotGeometry,
)


class TestPlotArea:
    """Tests for plot area layout."""

    @pytest.fixture
    def geometry(self):
        return PlotGeometry(1800.0, 2400.0, 2.0)

    def test_plot_area_fractions(self, geometry):
        assert np.isclose(geometry.plot_x_offset, 270.0)
        assert np.isclose(geometry.plot_x_max, 1620.0)
        assert np.isclose(geometry.plot_y_offset, 2040.0)
        assert np.isclose(geometry.plot_y_max, 240.0)

    def test_plot_steps(self, geometry):
        assert np.isclose(geometry.plot_x_step, 1350.0 / 400)
        assert np.isclose(geometry.plot_y_step, 1800.0 / 400)

    def test_plot_avg_step(self, geometry):
        assert np.isclose(geometry.plot_avg_step, (1350.0 / 400 + 1800.0 / 400) / 2)

    def test_contains(self, geometry):
        assert geometry.contains(900.0, 1000.0)
        assert not geometry.contains(100.0, 1000.0)
        assert not geometry.contains(900.0, 2300.0)

    @pytest.mark.parametrize("width,height,scale", [
        (0.0, 100.0, 1.0),
        (100.0, -5.0, 1.0),
        (100.0, 100.0, 0.0),
    ])
    def test_invalid_geometry(self, width, height, scale):
        with pytest.raises(ValueError):
            PlotGeometry(width, height, scale)

    def test_view_and_export_from_config(self):
        config = PlotConfig()
        view = PlotGeometry.for_view(config)
        export = PlotGeometry.for_export(config)
        assert (view.canvas_width, view.canvas_height, view.line_scale) == (1800.0, 2400.0, 2.0)
        assert (export.canvas_width, export.canvas_height, export.line_scale) == (2400.0, 3600.0, 3.0)


class TestPressureAxis:
    """Tests for the logarithmic pressure axis."""

    @pytest.fixture
    def geometry(self):
        return PlotGeometry(900.0, 1200.0)

    def test_axis_limits(self, geometry):
        assert np.isclose(geometry.pres_to_y(PRES_MIN), geometry.plot_y_max)
        assert np.isclose(geometry.pres_to_y(PRES_MAX), geometry.plot_y_offset)

    def test_monotonic(self, geometry):
        pres = np.linspace(PRES_MIN, PRES_MAX, 500)
        y = geometry.pres_to_y(pres)
        assert np.all(np.diff(y) > 0)

    def test_logarithmic(self, geometry):
        """Equal pressure ratios map to equal distances."""
        d1 = geometry.pres_to_y(40000.0) - geometry.pres_to_y(20000.0)
        d2 = geometry.pres_to_y(100000.0) - geometry.pres_to_y(50000.0)
        assert np.isclose(d1, d2)

    def test_inverse(self, geometry):
        pres = np.linspace(PRES_MIN, PRES_MAX, 50)
        assert np.allclose(geometry.y_to_pres(geometry.pres_to_y(pres)), pres, rtol=1e-12)


class TestTemperatureAxis:
    """Tests for the skewed temperature axis."""

    @pytest.fixture
    def geometry(self):
        return PlotGeometry(1800.0, 2400.0, 2.0)

    def test_base_row_spans_temperature_range(self, geometry):
        y_base = geometry.pres_to_y(PRES_BASE)
        assert np.isclose(geometry.temp_y_to_x(TEMP_MIN, y_base), geometry.plot_x_offset)
        assert np.isclose(geometry.temp_y_to_x(TEMP_MAX, y_base), geometry.plot_x_max)

    def test_isotherms_lean_right(self, geometry):
        """The same temperature sits further right higher up the plot."""
        x_low = geometry.temp_y_to_x(273.15, geometry.pres_to_y(100000.0))
        x_high = geometry.temp_y_to_x(273.15, geometry.pres_to_y(50000.0))
        assert x_high > x_low

    def test_linear_in_temperature(self, geometry):
        y = geometry.pres_to_y(70000.0)
        xs = geometry.temp_y_to_x(np.array([250.0, 260.0, 270.0]), y)
        assert np.isclose(xs[1] - xs[0], xs[2] - xs[1])

    def test_round_trip(self, geometry):
        pres = np.linspace(PRES_MIN, PRES_MAX, 40)
        temps = np.linspace(TEMP_MIN, TEMP_MAX, 40)
        p_grid, t_grid = np.meshgrid(pres, temps)
        y = geometry.pres_to_y(p_grid)
        x = geometry.temp_y_to_x(t_grid, y)
        assert np.max(np.abs(geometry.x_y_to_temp(x, y) - t_grid)) < 1e-6

    def test_temp_pres_to_xy(self, geometry):
        x, y = geometry.temp_pres_to_xy(283.15, 85000.0)
        assert np.isclose(y, geometry.pres_to_y(85000.0))
        assert np.isclose(x, geometry.temp_y_to_x(283.15, y))
