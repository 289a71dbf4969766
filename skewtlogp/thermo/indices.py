"""
Stability and severe-weather indices.

Total Totals, K-Index and SWEAT from temperatures and dew points at the
standard 500/700/850 hPa levels. Inputs are in K and m/s; any missing input
makes the index missing.
"""

import math
from typing import Tuple

from skewtlogp.utils.constants import C_TO_K, MISSING_VALUE, any_missing


def wind_from_vector(u_ms: float, v_ms: float) -> Tuple[float, float]:
    """
    Wind speed and direction from zonal and meridional components.

    The direction is the mathematical angle ``atan2(v, u)`` in radians, not
    a meteorological bearing. Components from a grid that is rotated with
    respect to true north give a correspondingly rotated direction.

    Args:
        u_ms: Zonal wind component [m/s]
        v_ms: Meridional wind component [m/s]

    Returns:
        Tuple of (speed [m/s], direction [rad])
    """
    speed = math.sqrt(u_ms ** 2 + v_ms ** 2)
    direction = math.atan2(v_ms, u_ms)
    return speed, direction


def calc_total_totals(temp_500: float, temp_850: float,
                      dewp_500: float, dewp_850: float) -> float:
    """Total Totals index: vertical totals plus cross totals [K]."""
    if any_missing(temp_500, temp_850, dewp_500, dewp_850):
        return MISSING_VALUE
    vertical_totals = temp_850 - temp_500
    cross_totals = dewp_850 - dewp_500
    return vertical_totals + cross_totals


def calc_k_index(temp_500: float, temp_700: float, temp_850: float,
                 dewp_700: float, dewp_850: float) -> float:
    """
    K-Index.

    Args:
        temp_500: Temperature at 500 hPa [K]
        temp_700: Temperature at 700 hPa [K]
        temp_850: Temperature at 850 hPa [K]
        dewp_700: Dew point at 700 hPa [K]
        dewp_850: Dew point at 850 hPa [K]

    Returns:
        K-Index, computed in deg C
    """
    if any_missing(temp_500, temp_700, temp_850, dewp_700, dewp_850):
        return MISSING_VALUE

    t500 = temp_500 - C_TO_K
    t700 = temp_700 - C_TO_K
    t850 = temp_850 - C_TO_K
    d700 = dewp_700 - C_TO_K
    d850 = dewp_850 - C_TO_K

    return (t850 - t500) + (d850 - (t700 - d700))


def calc_sweat(total_totals: float, dewp_850: float,
               u_500: float, v_500: float, u_850: float, v_850: float) -> float:
    """
    Severe WEAther Threat (SWEAT) index.

    Sum of five terms, each clamped at zero:
    12*Td850 [C], 20*(TT-49), 2*speed850, speed500 and
    125*(sin(dir500-dir850)+0.2), with wind directions in radians.

    Args:
        total_totals: Total Totals index
        dewp_850: Dew point at 850 hPa [K]
        u_500: u-component of wind at 500 hPa [m/s]
        v_500: v-component of wind at 500 hPa [m/s]
        u_850: u-component of wind at 850 hPa [m/s]
        v_850: v-component of wind at 850 hPa [m/s]

    Returns:
        SWEAT index (dimensionless)
    """
    if any_missing(total_totals, dewp_850, u_500, v_500, u_850, v_850):
        return MISSING_VALUE

    speed_500, dir_500 = wind_from_vector(u_500, v_500)
    speed_850, dir_850 = wind_from_vector(u_850, v_850)

    terms = (
        12.0 * (dewp_850 - C_TO_K),
        20.0 * (total_totals - 49.0),
        2.0 * speed_850,
        speed_500,
        125.0 * (math.sin(dir_500 - dir_850) + 0.2),
    )
    return sum(max(term, 0.0) for term in terms)
