"""Tests for stability indices and derived sounding quantities."""

import math

import numpy as np
import pytest

from skewtlogp.sounding import compute_indices
from skewtlogp.thermo import calc_k_index, calc_sweat, calc_total_totals, wind_from_vector
from skewtlogp.utils.constants import MISSING_VALUE, is_missing

from conftest import SAMPLE_LEVELS, make_sounding


class TestWindFromVector:
    """Tests for wind speed and direction."""

    def test_speed(self):
        speed, _ = wind_from_vector(3.0, 4.0)
        assert np.isclose(speed, 5.0)

    def test_direction_is_math_angle(self):
        _, direction = wind_from_vector(0.0, 10.0)
        assert np.isclose(direction, math.pi / 2)


class TestTotalTotals:
    """Tests for the Total Totals index."""

    def test_reference_value(self):
        tt = calc_total_totals(temp_500=253.15, temp_850=283.15, dewp_500=243.15, dewp_850=278.15)
        assert np.isclose(tt, 65.0)

    def test_missing_input(self):
        assert calc_total_totals(253.15, MISSING_VALUE, 243.15, 278.15) == MISSING_VALUE


class TestKIndex:
    """Tests for the K-Index."""

    def test_reference_value(self):
        k = calc_k_index(
            temp_500=253.15, temp_700=268.15, temp_850=283.15,
            dewp_700=263.15, dewp_850=278.15,
        )
        assert np.isclose(k, 30.0)

    def test_missing_input(self):
        assert is_missing(calc_k_index(253.15, 268.15, 283.15, MISSING_VALUE, 278.15))


class TestSweat:
    """Tests for the SWEAT index."""

    def test_all_terms_positive(self):
        """Veering wind between 850 and 500 hPa adds the shear term."""
        sweat = calc_sweat(
            total_totals=55.0, dewp_850=283.15,
            u_500=0.0, v_500=20.0, u_850=10.0, v_850=0.0,
        )
        expected = 12 * 10.0 + 20 * 6.0 + 2 * 10.0 + 20.0 + 125 * (math.sin(math.pi / 2) + 0.2)
        assert np.isclose(sweat, expected)

    def test_negative_terms_clamped(self):
        sweat = calc_sweat(
            total_totals=40.0, dewp_850=263.15,
            u_500=10.0, v_500=0.0, u_850=0.0, v_850=10.0,
        )
        # Only the wind speed terms survive
        assert np.isclose(sweat, 2 * 10.0 + 10.0)

    def test_never_negative(self):
        sweat = calc_sweat(30.0, 243.15, 0.0, 0.0, 0.0, 0.0)
        assert sweat >= 0.0

    def test_missing_input(self):
        assert calc_sweat(MISSING_VALUE, 283.15, 1.0, 1.0, 1.0, 1.0) == MISSING_VALUE


class TestComputeIndices:
    """Tests for indices derived from a whole sounding."""

    def test_standard_level_indices(self, sounding):
        derived = compute_indices(sounding)
        assert np.isclose(derived.total_totals, (288.15 - 261.15) + (283.15 - 243.15))
        assert np.isclose(derived.k_index, 27.0)

    def test_sweat_from_winds(self, sounding):
        derived = compute_indices(sounding)
        expected = 12 * 10.0 + 20 * (67.0 - 49.0) + 2 * math.hypot(5.0, 10.0) + math.hypot(20.0, 5.0)
        assert np.isclose(derived.sweat, expected)

    def test_lcl_from_surface(self, sounding):
        derived = compute_indices(sounding)
        assert 10000.0 < derived.lcl_pressure_pa < sounding.surface.pressure_pa
        assert derived.lcl_temperature_k < sounding.surface.temperature_2m_k

    def test_model_fields_passed_through(self, sounding):
        derived = compute_indices(sounding)
        assert derived.cape_j_kg == 1200.0
        assert derived.cin_j_kg == -35.0
        assert derived.lifted_index_k == -3.2

    def test_missing_level_gives_missing_index(self):
        levels = [lvl for lvl in SAMPLE_LEVELS if lvl[0] != 50000.0]
        derived = compute_indices(make_sounding(levels=levels))
        assert derived.total_totals == MISSING_VALUE
        assert derived.k_index == MISSING_VALUE
        assert derived.sweat == MISSING_VALUE
        assert not is_missing(derived.lcl_pressure_pa)

    def test_no_winds_gives_missing_sweat(self):
        derived = compute_indices(make_sounding(winds=False))
        assert derived.sweat == MISSING_VALUE
        assert not is_missing(derived.total_totals)

    def test_nearby_level_within_tolerance(self):
        """A 495 hPa level stands in for 500 hPa."""
        levels = [(49500.0, t, d) if p == 50000.0 else (p, t, d) for p, t, d in SAMPLE_LEVELS]
        derived = compute_indices(make_sounding(levels=levels))
        assert not is_missing(derived.total_totals)

    def test_to_dict(self, sounding):
        data = sounding.derived().to_dict()
        assert set(data) == {
            "lcl_pressure_pa", "lcl_temperature_k", "cape_j_kg", "cin_j_kg",
            "lifted_index_k", "total_totals", "k_index", "sweat",
        }
