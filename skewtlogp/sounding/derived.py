"""
Derived quantities for a sounding.

Computes the LCL and the standard-level stability indices, and passes the
model-computed CAPE, CIN and lifted index through. Nothing here is stored
on the Sounding; indices are recomputed on demand.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict

from skewtlogp.thermo.adiabats import calc_lcl
from skewtlogp.thermo.indices import calc_k_index, calc_sweat, calc_total_totals
from skewtlogp.utils.constants import (
    LEVEL_500,
    LEVEL_700,
    LEVEL_850,
    MISSING_VALUE,
)

logger = logging.getLogger(__name__)

# Maximum distance between a requested standard level and the level used [Pa]
LEVEL_TOLERANCE_PA = 5000.0


@dataclass(frozen=True)
class DerivedIndices:
    """Derived sounding quantities; missing values use the sentinel.

    Attributes:
        lcl_pressure_pa: Lifting condensation level pressure [Pa]
        lcl_temperature_k: Temperature at the LCL [K]
        cape_j_kg: Convective available potential energy [J/kg]
        cin_j_kg: Convective inhibition [J/kg]
        lifted_index_k: Surface lifted index [K]
        total_totals: Total Totals index
        k_index: K-Index
        sweat: SWEAT index
    """
    lcl_pressure_pa: float
    lcl_temperature_k: float
    cape_j_kg: float
    cin_j_kg: float
    lifted_index_k: float
    total_totals: float
    k_index: float
    sweat: float

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)


def _level_values(sounding, pres_pa: float):
    level = sounding.level_near(pres_pa, LEVEL_TOLERANCE_PA)
    if level is None:
        logger.debug(f"No level within {LEVEL_TOLERANCE_PA:.0f} Pa of {pres_pa:.0f} Pa")
        return MISSING_VALUE, MISSING_VALUE
    return level.temperature_k, level.dewpoint_k


def _wind_values(sounding, pres_pa: float):
    wind = sounding.wind_near(pres_pa, LEVEL_TOLERANCE_PA)
    if wind is None:
        return MISSING_VALUE, MISSING_VALUE
    return wind.u_ms, wind.v_ms


def compute_indices(sounding) -> DerivedIndices:
    """
    Compute derived indices for a sounding.

    Args:
        sounding: Sounding to analyse

    Returns:
        DerivedIndices with unavailable quantities set to the sentinel
    """
    surface = sounding.surface
    lcl_pres, lcl_temp = calc_lcl(
        surface.temperature_2m_k, surface.dewpoint_2m_k, surface.pressure_pa
    )

    t500, d500 = _level_values(sounding, LEVEL_500)
    t700, d700 = _level_values(sounding, LEVEL_700)
    t850, d850 = _level_values(sounding, LEVEL_850)
    u500, v500 = _wind_values(sounding, LEVEL_500)
    u850, v850 = _wind_values(sounding, LEVEL_850)

    total_totals = calc_total_totals(t500, t850, d500, d850)
    k_index = calc_k_index(t500, t700, t850, d700, d850)
    sweat = calc_sweat(total_totals, d850, u500, v500, u850, v850)

    return DerivedIndices(
        lcl_pressure_pa=lcl_pres,
        lcl_temperature_k=lcl_temp,
        cape_j_kg=sounding.model_fields.cape_j_kg,
        cin_j_kg=sounding.model_fields.cin_j_kg,
        lifted_index_k=sounding.model_fields.lifted_index_k,
        total_totals=total_totals,
        k_index=k_index,
        sweat=sweat,
    )
