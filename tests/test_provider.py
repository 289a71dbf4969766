"""Tests for the gridded-dataset sounding provider."""

import logging
from datetime import datetime

import numpy as np
import pytest
import xarray as xr

from skewtlogp.sounding import DatasetSoundingProvider, SoundingProvider, VariableMap
from skewtlogp.thermo import calc_dewp
from skewtlogp.utils.constants import MISSING_VALUE, is_missing

LEVELS_HPA = np.array([50.0, 100.0, 250.0, 500.0, 700.0, 850.0, 962.0, 1000.0, 1013.0])
LONS = np.array([-100.0, -99.0, -98.0, -97.0])
LATS = np.array([30.0, 31.0, 32.0])


def make_dataset(with_rh=True) -> xr.Dataset:
    nl, ny, nx = len(LEVELS_HPA), len(LATS), len(LONS)
    shape = (nl, ny, nx)
    temps = np.broadcast_to(
        (288.15 * (LEVELS_HPA / 1000.0) ** 0.19)[:, None, None], shape
    ).copy()
    temps[:, 1, 2] += 2.0

    data_vars = {
        "Temperature_isobaric": (("isobaric", "y", "x"), temps),
        "Temperature_height_above_ground": (("y", "x"), np.full((ny, nx), 295.0)),
        "Dewpoint_temperature_height_above_ground": (("y", "x"), np.full((ny, nx), 285.0)),
        "Pressure_surface": (("y", "x"), np.full((ny, nx), 98000.0)),
        "u-component_of_wind_isobaric": (("isobaric", "y", "x"), np.full(shape, 5.0)),
        "v-component_of_wind_isobaric": (("isobaric", "y", "x"), np.full(shape, 10.0)),
        "Convective_available_potential_energy_surface": (("y", "x"), np.full((ny, nx), 850.0)),
    }
    if with_rh:
        data_vars["Relative_humidity_isobaric"] = (("isobaric", "y", "x"), np.full(shape, 60.0))

    return xr.Dataset(
        data_vars,
        coords={
            "isobaric": ("isobaric", LEVELS_HPA, {"units": "hPa"}),
            "lon": ("x", LONS),
            "lat": ("y", LATS),
            "time": np.datetime64("2016-05-24T06:00:00", "ns"),
        },
        attrs={"reference_time": "2016-05-24T00:00:00", "model": "RAP"},
    )


class TestDatasetSoundingProvider:
    """Tests for DatasetSoundingProvider."""

    @pytest.fixture
    def provider(self):
        return DatasetSoundingProvider(make_dataset())

    def test_satisfies_protocol(self, provider):
        provider_type: SoundingProvider = provider
        assert callable(provider_type.get_sounding)

    def test_rejects_non_dataset(self):
        with pytest.raises(TypeError):
            DatasetSoundingProvider({"Temperature_isobaric": []})

    def test_level_filter(self, provider):
        """Levels outside 100-1000 hPa or off the 25 hPa grid are dropped."""
        expected = np.array([1000.0, 850.0, 700.0, 500.0, 250.0, 100.0]) * 100.0
        assert np.allclose(provider.levels_pa, expected)

    def test_grid_shape(self, provider):
        assert provider.grid_shape == (4, 3)

    def test_sounding_profile(self, provider):
        sounding = provider.get_sounding(2, 1)
        assert sounding.num_levels == 6
        assert np.allclose(sounding.pressures, provider.levels_pa)
        expected = 288.15 * (sounding.pressures / 100000.0) ** 0.19 + 2.0
        assert np.allclose(sounding.temperatures, expected)

    def test_dewpoint_from_humidity(self, provider):
        sounding = provider.get_sounding(0, 0)
        level = sounding.levels[1]
        assert np.isclose(level.dewpoint_k, calc_dewp(level.temperature_k, level.pressure_pa, 60.0))
        assert np.all(sounding.dewpoints < sounding.temperatures)

    def test_surface_and_model_fields(self, provider):
        sounding = provider.get_sounding(0, 0)
        assert sounding.surface.temperature_2m_k == 295.0
        assert sounding.surface.dewpoint_2m_k == 285.0
        assert sounding.surface.pressure_pa == 98000.0
        assert sounding.model_fields.cape_j_kg == 850.0

    def test_absent_variables_are_missing(self, provider, caplog):
        with caplog.at_level(logging.ERROR, logger="skewtlogp.sounding.provider"):
            sounding = provider.get_sounding(0, 0)
        assert sounding.surface.mslp_pa == MISSING_VALUE
        assert sounding.model_fields.cin_j_kg == MISSING_VALUE
        assert "Can't read variable" in caplog.text

    def test_missing_humidity_gives_missing_dewpoints(self):
        provider = DatasetSoundingProvider(make_dataset(with_rh=False))
        sounding = provider.get_sounding(0, 0)
        assert all(is_missing(d) for d in sounding.dewpoints)
        assert not is_missing(sounding.temperatures[0])

    def test_winds(self, provider):
        sounding = provider.get_sounding(0, 0)
        assert len(sounding.winds) == 6
        assert sounding.wind_near(50000.0).v_ms == 10.0

    def test_out_of_grid(self, provider):
        with pytest.raises(IndexError):
            provider.get_sounding(4, 0)

    def test_location(self, provider):
        assert provider.lonlat_from_xy(2, 1) == (-98.0, 31.0)
        assert provider.xy_from_lonlat(-97.9, 31.1) == (2, 1)
        assert provider.xy_from_lonlat(262.1, 31.1) == (2, 1)

    def test_metadata(self, provider):
        meta = provider.get_sounding(2, 1).metadata
        assert meta.longitude == -98.0
        assert meta.latitude == 31.0
        assert meta.analysis_time == datetime(2016, 5, 24, 0, 0)
        assert meta.valid_time == datetime(2016, 5, 24, 6, 0)
        assert meta.model_name == "RAP"

    def test_custom_variable_map(self):
        ds = make_dataset().rename({"Temperature_isobaric": "TMP"})
        provider = DatasetSoundingProvider(ds, VariableMap(temperature="TMP"), model_name="HRRR")
        sounding = provider.get_sounding(0, 0)
        assert not is_missing(sounding.temperatures[0])
        assert sounding.metadata.model_name == "HRRR"

    def test_available_variables(self, provider):
        names = provider.available_variables()
        assert "Temperature_isobaric" in names
        assert "MSLP_Eta_model_reduction_msl" not in names


class TestVariableMap:
    """Tests for VariableMap."""

    def test_from_dict(self):
        mapping = VariableMap.from_dict({"temperature": "t", "dewpoint": "dpt"})
        assert mapping.temperature == "t"
        assert mapping.dewpoint == "dpt"
        assert mapping.isobaric_coord == "isobaric"

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="skewtlogp.sounding.provider"):
            VariableMap.from_dict({"temperature": "t", "ozone": "o3"})
        assert "ozone" in caplog.text
