"""
Atmospheric thermodynamics.

Pure functions for saturation physics, dew point, lifting condensation
level, dry and saturated adiabats, and stability indices. Temperatures are
in K, pressures in Pa, mixing ratios in g/kg and angles in radians.

Functions
---------
saturation_vapor_pressure
    Bolton-type saturation vapor pressure
saturation_mixing_ratio
    Saturation mixing ratio (0 for invalid temperatures)
temp_at_mixing_ratio
    Stipanuk inverse of the saturation mixing ratio
calc_dewp
    Dew point from relative humidity
potential_temperature, temp_from_potential_temperature
    Dry adiabat conversions
calc_sat_pot_temp, calc_temp_sat_adiabat
    Saturated adiabat conversions
calc_lcl
    Iterative lifting condensation level
calc_total_totals, calc_k_index, calc_sweat, wind_from_vector
    Stability indices
"""

from skewtlogp.thermo.saturation import (
    saturation_vapor_pressure,
    saturation_mixing_ratio,
    temp_at_mixing_ratio,
    calc_dewp,
)
from skewtlogp.thermo.adiabats import (
    potential_temperature,
    temp_from_potential_temperature,
    calc_sat_pot_temp,
    calc_temp_sat_adiabat,
    calc_lcl,
)
from skewtlogp.thermo.indices import (
    wind_from_vector,
    calc_total_totals,
    calc_k_index,
    calc_sweat,
)

__all__ = [
    "saturation_vapor_pressure",
    "saturation_mixing_ratio",
    "temp_at_mixing_ratio",
    "calc_dewp",
    "potential_temperature",
    "temp_from_potential_temperature",
    "calc_sat_pot_temp",
    "calc_temp_sat_adiabat",
    "calc_lcl",
    "wind_from_vector",
    "calc_total_totals",
    "calc_k_index",
    "calc_sweat",
]
