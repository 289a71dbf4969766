"""
Dry and saturated adiabats and the lifting condensation level.

The saturated adiabat routines follow the IDL Skew-T code distributed by
CIMSS (skewt.pro), itself derived from Stipanuk (1973).
"""

import logging
import math
from typing import Tuple

import numpy as np

from skewtlogp.thermo.saturation import saturation_mixing_ratio
from skewtlogp.utils.constants import (
    KAPPA,
    MISSING_VALUE,
    REFERENCE_PRESSURE,
    SAT_POT_TEMP_COEFF,
    any_missing,
)

logger = logging.getLogger(__name__)

# LCL search parameters
LCL_STEP_PA = 100.0
LCL_CONVERGENCE_G_KG = 0.1
LCL_PRESSURE_FLOOR_PA = 10000.0

# Saturated adiabat search parameters
SAT_ADIABAT_FIRST_GUESS_K = 253.15
SAT_ADIABAT_INITIAL_STEP_K = 120.0
SAT_ADIABAT_ITERATIONS = 13
SAT_ADIABAT_TOLERANCE_K = 0.01


def potential_temperature(temp_k, pres_pa):
    """Potential temperature [K] of dry air at temperature [K] and pressure [Pa]."""
    return temp_k * (np.asarray(pres_pa, dtype=float) / REFERENCE_PRESSURE) ** (-KAPPA)


def temp_from_potential_temperature(pot_temp_k, pres_pa):
    """Temperature [K] on the dry adiabat ``pot_temp_k`` at pressure [Pa]."""
    return pot_temp_k * (np.asarray(pres_pa, dtype=float) / REFERENCE_PRESSURE) ** KAPPA


def calc_sat_pot_temp(temp_k, pres_pa):
    """
    Saturated potential temperature of moist air.

    Parameters
    ----------
    temp_k : float or np.ndarray
        Temperature [K]
    pres_pa : float or np.ndarray
        Pressure [Pa]

    Returns
    -------
    float or np.ndarray
        Saturated potential temperature [K]
    """
    pres = np.asarray(pres_pa, dtype=float)
    w = saturation_mixing_ratio(temp_k, pres)
    return temp_k * (REFERENCE_PRESSURE / pres) ** KAPPA / np.exp(SAT_POT_TEMP_COEFF * (w / temp_k))


def calc_temp_sat_adiabat(os_k, pres_pa):
    """
    Temperature on a saturated adiabat at a given pressure.

    Bisection-like search: starting from 253.15 K with a 120 K step, the
    step is halved every iteration and takes the sign of the residual
    ``os*exp(-2.6518986*w(tq,p)/tq) - tq*(100000/p)^(2/7)``. An element stops
    as soon as its residual magnitude drops below 0.01; otherwise the
    search ends after exactly 13 iterations.

    Parameters
    ----------
    os_k : float or np.ndarray
        Saturated potential temperature [K]
    pres_pa : float or np.ndarray
        Pressure [Pa]

    Returns
    -------
    float or np.ndarray
        Temperature [K]
    """
    os_arr, pres = np.broadcast_arrays(
        np.asarray(os_k, dtype=float), np.asarray(pres_pa, dtype=float)
    )
    tq = np.full(pres.shape, SAT_ADIABAT_FIRST_GUESS_K)
    step = np.full(pres.shape, SAT_ADIABAT_INITIAL_STEP_K)
    active = np.ones(pres.shape, dtype=bool)
    pres_factor = (REFERENCE_PRESSURE / pres) ** KAPPA

    for _ in range(SAT_ADIABAT_ITERATIONS):
        step = step / 2.0
        residual = (
            os_arr * np.exp(SAT_POT_TEMP_COEFF * saturation_mixing_ratio(tq, pres) / tq)
            - tq * pres_factor
        )
        active &= ~(np.abs(residual) < SAT_ADIABAT_TOLERANCE_K)
        if not active.any():
            break
        step = np.copysign(step, residual)
        tq = np.where(active, tq + step, tq)

    unconverged = int(np.count_nonzero(active))
    if unconverged:
        logger.debug(
            f"Saturated adiabat search used all {SAT_ADIABAT_ITERATIONS} iterations "
            f"for {unconverged} point(s)"
        )

    return tq[()]


def calc_lcl(temp_2m_k: float, dewp_2m_k: float, pres_sfc_pa: float) -> Tuple[float, float]:
    """
    Lifting condensation level by following the dry adiabat upward.

    Starting from the surface pressure rounded up to the nearest 100 Pa, the
    pressure is decreased in 100 Pa steps. At each step the parcel
    temperature on the surface dry adiabat is computed, and the search stops
    once its saturation mixing ratio is within 0.1 g/kg of the mixing ratio
    of the surface dew point, or the pressure reaches 10000 Pa.

    Args:
        temp_2m_k: 2 m temperature [K]
        dewp_2m_k: 2 m dew point [K]
        pres_sfc_pa: Surface pressure [Pa]

    Returns:
        Tuple of (LCL pressure [Pa], LCL temperature [K]); both are the
        missing-value sentinel if any input is missing
    """
    if any_missing(temp_2m_k, dewp_2m_k, pres_sfc_pa):
        return MISSING_VALUE, MISSING_VALUE

    pot_temp = float(potential_temperature(temp_2m_k, pres_sfc_pa))
    w_surface = float(saturation_mixing_ratio(dewp_2m_k, pres_sfc_pa))

    delta = LCL_STEP_PA * 10.0
    lcl_pres = math.ceil(pres_sfc_pa / 100.0) * 100.0
    lcl_temp = 0.0
    while abs(delta) > LCL_CONVERGENCE_G_KG and lcl_pres > LCL_PRESSURE_FLOOR_PA:
        lcl_pres -= LCL_STEP_PA
        lcl_temp = float(temp_from_potential_temperature(pot_temp, lcl_pres))
        delta = float(saturation_mixing_ratio(lcl_temp, lcl_pres)) - w_surface

    if abs(delta) > LCL_CONVERGENCE_G_KG:
        logger.warning(
            f"LCL search reached {lcl_pres:.0f} Pa without converging "
            f"(mixing ratio difference {delta:.3f} g/kg)"
        )

    return lcl_pres, lcl_temp
