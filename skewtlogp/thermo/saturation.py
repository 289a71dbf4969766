"""
Saturation physics and moisture conversions.

Implements the Bolton-type saturation vapor pressure, saturation mixing
ratio, and the Stipanuk inverse used for dew points and mixing-ratio lines.
All functions accept floats or numpy arrays.

References
----------
- Bolton, D. (1980). The computation of equivalent potential temperature.
  Mon. Wea. Rev., 108, 1046-1053.
- Stipanuk, G. S. (1973). Algorithms for generating a Skew-T, log p diagram
  and computing selected meteorological quantities. ECOM-5515.
"""

import numpy as np

from skewtlogp.utils.constants import (
    C_TO_K,
    HPA_TO_PA,
    EPSILON_G_KG,
    ESAT_A,
    ESAT_B,
    ESAT_C,
    INVALID_TEMPERATURE,
    MISSING_VALUE,
    any_missing,
)


def saturation_vapor_pressure(temp_k):
    """
    Calculate saturation vapor pressure over water.

    Parameters
    ----------
    temp_k : float or np.ndarray
        Temperature [K]

    Returns
    -------
    float or np.ndarray
        Saturation vapor pressure [Pa]
    """
    temp_c = np.asarray(temp_k, dtype=float) - C_TO_K
    esat_hpa = ESAT_A * np.exp(ESAT_B * temp_c / (temp_c + ESAT_C))
    return (esat_hpa * HPA_TO_PA)[()]


def saturation_mixing_ratio(temp_k, pres_pa):
    """
    Calculate saturation mixing ratio of moist air.

    Temperatures at or above 999 K are treated as invalid and give 0.

    Parameters
    ----------
    temp_k : float or np.ndarray
        Temperature [K]
    pres_pa : float or np.ndarray
        Pressure [Pa]

    Returns
    -------
    float or np.ndarray
        Saturation mixing ratio [g/kg]
    """
    temp = np.asarray(temp_k, dtype=float)
    pres_hpa = np.asarray(pres_pa, dtype=float) / HPA_TO_PA
    valid = temp < INVALID_TEMPERATURE

    esat_hpa = saturation_vapor_pressure(np.where(valid, temp, C_TO_K)) / HPA_TO_PA
    with np.errstate(divide="ignore", invalid="ignore"):
        w = EPSILON_G_KG * esat_hpa / (pres_hpa - esat_hpa)
    return np.where(valid, w, 0.0)[()]


def temp_at_mixing_ratio(w_g_kg, pres_pa):
    """
    Temperature at which the saturation mixing ratio equals ``w``.

    Empirical inverse from Stipanuk (1973). Used both for dew points and
    for drawing mixing-ratio lines.

    Parameters
    ----------
    w_g_kg : float or np.ndarray
        Mixing ratio [g/kg]
    pres_pa : float or np.ndarray
        Pressure [Pa]

    Returns
    -------
    float or np.ndarray
        Temperature [K]
    """
    w = np.asarray(w_g_kg, dtype=float)
    pres_hpa = np.asarray(pres_pa, dtype=float) / HPA_TO_PA
    with np.errstate(divide="ignore", invalid="ignore"):
        x = np.log10(w * pres_hpa / (622.0 + w))
    result = (
        10.0 ** (0.0498646455 * x + 2.4082965)
        - 7.07475
        + 38.9114 * (10.0 ** (0.0915 * x) - 1.2035) ** 2
    )
    return result[()]


def calc_dewp(temp_k: float, pres_pa: float, rh_pct: float) -> float:
    """
    Calculate dew point from temperature, pressure and relative humidity.

    Returns the missing-value sentinel if any input is missing.

    Args:
        temp_k: Temperature [K]
        pres_pa: Pressure [Pa]
        rh_pct: Relative humidity [%]

    Returns:
        Dew point [K]
    """
    if any_missing(temp_k, pres_pa, rh_pct):
        return MISSING_VALUE
    w = saturation_mixing_ratio(temp_k, pres_pa) * (rh_pct / 100.0)
    return float(temp_at_mixing_ratio(w, pres_pa))
