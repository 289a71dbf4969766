"""
Physical constants and unit conversions for sounding calculations.

All constants are in SI units unless otherwise specified.
"""

import numpy as np

# Unit conversions
C_TO_K = 273.15  # K offset from Celsius
HPA_TO_PA = 100.0  # Pa per hPa

# Reference pressure for potential temperature [Pa]
REFERENCE_PRESSURE = 100000.0

# Poisson exponent R/cp for dry air (2/7)
KAPPA = 2.0 / 7.0

# Coefficient of the saturated potential temperature exponent
SAT_POT_TEMP_COEFF = -2.6518986

# Ratio of molecular weights times 1000 (g/kg)
EPSILON_G_KG = 621.97

# Magnus/Bolton saturation vapor pressure coefficients
ESAT_A = 6.1078  # hPa
ESAT_B = 17.2693882
ESAT_C = 237.3  # deg C

# Temperatures at or above this are treated as invalid input [K]
INVALID_TEMPERATURE = 999.0

# Sentinel used by data providers for values that could not be read
MISSING_VALUE = -99999.0

# Anything at or below this magnitude is considered missing
MISSING_THRESHOLD = -9999.0

# Standard isobaric levels used by stability indices [Pa]
LEVEL_500 = 50000.0
LEVEL_700 = 70000.0
LEVEL_850 = 85000.0


def is_missing(value) -> bool:
    """Return True if a value is the missing-data sentinel (or NaN/None)."""
    if value is None:
        return True
    value = float(value)
    return bool(np.isnan(value)) or value <= MISSING_THRESHOLD


def any_missing(*values) -> bool:
    """Return True if any of the values is missing."""
    return any(is_missing(v) for v in values)


def missing_mask(values: np.ndarray) -> np.ndarray:
    """Boolean mask of missing entries in an array."""
    values = np.asarray(values, dtype=float)
    return np.isnan(values) | (values <= MISSING_THRESHOLD)


def kelvin_to_celsius(temp_k):
    """Convert temperature from K to deg C."""
    return temp_k - C_TO_K


def pa_to_hpa(pres_pa):
    """Convert pressure from Pa to hPa."""
    return pres_pa / HPA_TO_PA
