"""Tests for saturation physics, adiabats and the LCL."""

import logging

import numpy as np
import pytest

from skewtlogp.thermo import (
    saturation_vapor_pressure,
    saturation_mixing_ratio,
    temp_at_mixing_ratio,
    calc_dewp,
    potential_temperature,
    temp_from_potential_temperature,
    calc_sat_pot_temp,
    calc_temp_sat_adiabat,
    calc_lcl,
)
from skewtlogp.utils.constants import MISSING_VALUE, is_missing


class TestSaturation:
    """Tests for saturation vapor pressure and mixing ratio."""

    def test_vapor_pressure_at_freezing(self):
        """Test the 0 deg C reference point (6.1078 hPa)."""
        esat = saturation_vapor_pressure(273.15)
        assert np.isclose(esat, 610.78, rtol=2e-3)

    def test_vapor_pressure_increases_with_temperature(self):
        temps = np.linspace(223.15, 323.15, 50)
        esat = saturation_vapor_pressure(temps)
        assert np.all(np.diff(esat) > 0)

    def test_vapor_pressure_scalar_in_scalar_out(self):
        assert isinstance(saturation_vapor_pressure(290.0), float)

    def test_mixing_ratio_at_20c(self):
        """About 14.7 g/kg at 20 deg C and 1013.25 hPa."""
        w = saturation_mixing_ratio(293.15, 101325.0)
        assert 14.0 < w < 15.5

    def test_mixing_ratio_invalid_temperature_is_zero(self):
        assert saturation_mixing_ratio(999.0, 100000.0) == 0.0
        assert saturation_mixing_ratio(1500.0, 100000.0) == 0.0

    def test_mixing_ratio_array(self):
        temps = np.array([250.0, 280.0, 1000.0])
        w = saturation_mixing_ratio(temps, 85000.0)
        assert w.shape == (3,)
        assert w[0] < w[1]
        assert w[2] == 0.0

    def test_temp_at_mixing_ratio_inverts_saturation(self):
        """Stipanuk inverse recovers temperature within 1 K."""
        for temp in (253.15, 273.15, 293.15, 303.15):
            for pres in (100000.0, 85000.0, 50000.0):
                w = saturation_mixing_ratio(temp, pres)
                assert abs(temp_at_mixing_ratio(w, pres) - temp) < 1.0


class TestDewPoint:
    """Tests for dew point from relative humidity."""

    def test_half_saturated_at_20c(self):
        """20 deg C, sea level, 50% RH gives roughly 282-283 K."""
        dewp = calc_dewp(293.15, 101325.0, 50.0)
        assert 273.15 < dewp < 293.15
        assert 281.5 < dewp < 284.0

    def test_saturated_dewpoint_equals_temperature(self):
        dewp = calc_dewp(293.15, 101325.0, 100.0)
        assert np.isclose(dewp, 293.15, atol=0.5)

    def test_dewpoint_increases_with_humidity(self):
        dewps = [calc_dewp(288.15, 90000.0, rh) for rh in (20.0, 40.0, 60.0, 80.0)]
        assert all(a < b for a, b in zip(dewps, dewps[1:]))

    @pytest.mark.parametrize("temp,pres,rh", [
        (MISSING_VALUE, 100000.0, 50.0),
        (290.0, MISSING_VALUE, 50.0),
        (290.0, 100000.0, MISSING_VALUE),
        (290.0, 100000.0, float("nan")),
    ])
    def test_missing_input_gives_missing(self, temp, pres, rh):
        assert is_missing(calc_dewp(temp, pres, rh))


class TestAdiabats:
    """Tests for dry and saturated adiabats."""

    def test_potential_temperature_at_reference(self):
        assert np.isclose(potential_temperature(290.0, 100000.0), 290.0)

    def test_dry_adiabat_round_trip(self):
        pres = np.linspace(10000.0, 105000.0, 20)
        theta = potential_temperature(260.0, pres)
        assert np.allclose(temp_from_potential_temperature(theta, pres), 260.0)

    def test_sat_pot_temp_exceeds_dry(self):
        """Latent heat makes the saturated potential temperature larger."""
        assert calc_sat_pot_temp(293.15, 100000.0) > potential_temperature(293.15, 100000.0)

    @pytest.mark.parametrize("temp,pres", [
        (288.15, 85000.0),
        (273.15, 70000.0),
        (300.15, 100000.0),
        (250.15, 50000.0),
    ])
    def test_sat_adiabat_recovers_temperature(self, temp, pres):
        os_temp = calc_sat_pot_temp(temp, pres)
        assert abs(calc_temp_sat_adiabat(os_temp, pres) - temp) < 0.1

    def test_sat_adiabat_vector_matches_scalar(self):
        os_temps = calc_sat_pot_temp(np.array([263.15, 283.15, 303.15]), 100000.0)
        pres = np.array([90000.0, 60000.0, 30000.0])

        vector = calc_temp_sat_adiabat(os_temps, pres)
        scalar = [calc_temp_sat_adiabat(o, p) for o, p in zip(os_temps, pres)]
        assert np.allclose(vector, scalar, rtol=0, atol=1e-9)

    def test_sat_adiabat_broadcasts(self):
        os_temps = calc_sat_pot_temp(np.array([273.15, 293.15]), 100000.0)
        pres = np.linspace(100000.0, 20000.0, 5)
        temps = calc_temp_sat_adiabat(os_temps[:, np.newaxis], pres[np.newaxis, :])
        assert temps.shape == (2, 5)
        assert np.all(np.diff(temps, axis=1) < 0)

    def test_sat_adiabat_non_convergence_logged(self, caplog):
        """A -150 C adiabat at 100 hPa lies below the reachable search range."""
        os_temp = calc_sat_pot_temp(123.15, 100000.0)
        with caplog.at_level(logging.DEBUG, logger="skewtlogp.thermo.adiabats"):
            temp = calc_temp_sat_adiabat(os_temp, 10000.0)
        assert temp < 140.0
        assert "used all 13 iterations for 1 point(s)" in caplog.text


class TestLCL:
    """Tests for the lifting condensation level."""

    def test_lcl_bounds(self):
        pres, temp = calc_lcl(298.15, 288.15, 100000.0)
        assert 10000.0 < pres < 100000.0
        assert temp < 298.15

    def test_lcl_near_espy_estimate(self):
        """10 K dew point depression puts the LCL near 1250 m (~863 hPa)."""
        pres, _ = calc_lcl(298.15, 288.15, 100000.0)
        assert 83000.0 < pres < 89000.0

    def test_lcl_on_100pa_grid(self):
        pres, _ = calc_lcl(295.0, 285.0, 98765.0)
        assert np.isclose(pres % 100.0, 0.0)

    def test_saturated_surface_lcl_at_surface(self):
        pres, _ = calc_lcl(298.15, 298.15, 100000.0)
        assert pres >= 99700.0

    def test_missing_input_gives_missing(self):
        pres, temp = calc_lcl(298.15, MISSING_VALUE, 100000.0)
        assert pres == MISSING_VALUE
        assert temp == MISSING_VALUE

    def test_non_convergence_logs_warning(self, caplog):
        """A dew point above the temperature never matches on the way up."""
        with caplog.at_level(logging.WARNING, logger="skewtlogp.thermo.adiabats"):
            pres, temp = calc_lcl(288.15, 298.15, 100000.0)
        assert pres <= 10000.0
        assert temp > 0
        assert "without converging" in caplog.text
