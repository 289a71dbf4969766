"""Shared fixtures for sounding and diagram tests."""

from datetime import datetime

import pytest

from skewtlogp.sounding import (
    ModelFields,
    Sounding,
    SoundingLevel,
    SoundingMetadata,
    SurfaceObservation,
    WindLevel,
)

# (pressure [Pa], temperature [K], dew point [K])
SAMPLE_LEVELS = [
    (100000.0, 297.15, 290.15),
    (92500.0, 292.15, 287.15),
    (85000.0, 288.15, 283.15),
    (70000.0, 278.15, 268.15),
    (50000.0, 261.15, 243.15),
    (40000.0, 251.15, 233.15),
    (30000.0, 237.15, 218.15),
    (25000.0, 228.15, 210.15),
    (20000.0, 219.15, 203.15),
    (15000.0, 213.15, 198.15),
    (10000.0, 208.15, 193.15),
]


def make_sounding(levels=None, winds=True, **kwargs) -> Sounding:
    levels = SAMPLE_LEVELS if levels is None else levels
    wind_levels = (
        WindLevel(85000.0, 5.0, 10.0),
        WindLevel(70000.0, 10.0, 8.0),
        WindLevel(50000.0, 20.0, 5.0),
    ) if winds else ()
    defaults = dict(
        levels=tuple(SoundingLevel(p, t, d) for p, t, d in levels),
        surface=SurfaceObservation(
            temperature_2m_k=298.15,
            dewpoint_2m_k=291.15,
            pressure_pa=98500.0,
            mslp_pa=101200.0,
        ),
        winds=wind_levels,
        model_fields=ModelFields(cape_j_kg=1200.0, cin_j_kg=-35.0, lifted_index_k=-3.2),
        metadata=SoundingMetadata(
            longitude=-97.5,
            latitude=35.4,
            analysis_time=datetime(2016, 5, 24, 0, 0),
            valid_time=datetime(2016, 5, 24, 6, 0),
            model_name="RAP",
        ),
    )
    defaults.update(kwargs)
    return Sounding(**defaults)


@pytest.fixture
def sounding():
    return make_sounding()
