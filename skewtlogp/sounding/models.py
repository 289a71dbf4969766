"""
Sounding data structures.

A Sounding is one vertical profile at a fixed grid point and time. It is
built fresh for every plot request and never modified afterwards; all
classes here are frozen dataclasses.
"""

import bisect
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from skewtlogp.utils.constants import MISSING_VALUE, is_missing


@dataclass(frozen=True)
class SoundingLevel:
    """Single isobaric level.

    Attributes:
        pressure_pa: Pressure [Pa]
        temperature_k: Temperature [K]
        dewpoint_k: Dew point [K]
    """
    pressure_pa: float
    temperature_k: float
    dewpoint_k: float


@dataclass(frozen=True)
class SurfaceObservation:
    """Surface (2 m) values.

    Attributes:
        temperature_2m_k: 2 m temperature [K]
        dewpoint_2m_k: 2 m dew point [K]
        pressure_pa: Surface pressure [Pa]
        mslp_pa: Mean sea level pressure [Pa]
    """
    temperature_2m_k: float
    dewpoint_2m_k: float
    pressure_pa: float
    mslp_pa: float = MISSING_VALUE


@dataclass(frozen=True)
class WindLevel:
    """Wind components on an isobaric level [Pa, m/s]."""
    pressure_pa: float
    u_ms: float
    v_ms: float


@dataclass(frozen=True)
class ModelFields:
    """Indices computed by the forecast model itself.

    Attributes:
        cape_j_kg: Convective available potential energy [J/kg]
        cin_j_kg: Convective inhibition [J/kg]
        lifted_index_k: Surface lifted index [K]
    """
    cape_j_kg: float = MISSING_VALUE
    cin_j_kg: float = MISSING_VALUE
    lifted_index_k: float = MISSING_VALUE


@dataclass(frozen=True)
class SoundingMetadata:
    """Where and when the sounding is valid."""
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    analysis_time: Optional[datetime] = None
    valid_time: Optional[datetime] = None
    model_name: str = ""


@dataclass(frozen=True)
class TracePoint:
    """One sample of the plotted temperature/dew point trace."""
    pressure_pa: float
    temperature_k: float
    dewpoint_k: float
    is_surface: bool = False


@dataclass(frozen=True)
class Sounding:
    """Vertical profile at one grid point.

    Levels are stored by strictly decreasing pressure (surface to top)
    regardless of the order they are given in.

    Attributes:
        levels: Isobaric levels
        surface: Surface (2 m) observation
        winds: Wind components at standard levels
        model_fields: Model-computed CAPE, CIN and lifted index
        metadata: Location, times and source model
    """
    levels: Tuple[SoundingLevel, ...]
    surface: SurfaceObservation
    winds: Tuple[WindLevel, ...] = ()
    model_fields: ModelFields = field(default_factory=ModelFields)
    metadata: SoundingMetadata = field(default_factory=SoundingMetadata)

    def __post_init__(self):
        levels = sorted(self.levels, key=lambda lvl: lvl.pressure_pa, reverse=True)
        object.__setattr__(self, "levels", tuple(levels))
        object.__setattr__(self, "winds", tuple(self.winds))

    @property
    def num_levels(self) -> int:
        """Number of isobaric levels."""
        return len(self.levels)

    @property
    def pressures(self) -> np.ndarray:
        """Get pressure array [Pa]."""
        return np.array([lvl.pressure_pa for lvl in self.levels])

    @property
    def temperatures(self) -> np.ndarray:
        """Get temperature array [K]."""
        return np.array([lvl.temperature_k for lvl in self.levels])

    @property
    def dewpoints(self) -> np.ndarray:
        """Get dew point array [K]."""
        return np.array([lvl.dewpoint_k for lvl in self.levels])

    def level_near(self, pres_pa: float, tolerance_pa: float = 5000.0) -> Optional[SoundingLevel]:
        """Level closest to ``pres_pa``, or None if none lies within tolerance."""
        candidates = [lvl for lvl in self.levels if not is_missing(lvl.pressure_pa)]
        if not candidates:
            return None
        nearest = min(candidates, key=lambda lvl: abs(lvl.pressure_pa - pres_pa))
        if abs(nearest.pressure_pa - pres_pa) > tolerance_pa:
            return None
        return nearest

    def wind_near(self, pres_pa: float, tolerance_pa: float = 5000.0) -> Optional[WindLevel]:
        """Wind level closest to ``pres_pa``, or None if none lies within tolerance."""
        if not self.winds:
            return None
        nearest = min(self.winds, key=lambda wl: abs(wl.pressure_pa - pres_pa))
        if abs(nearest.pressure_pa - pres_pa) > tolerance_pa:
            return None
        return nearest

    def trace_points(self) -> List[TracePoint]:
        """Merged trace ordered from lowest to highest pressure.

        The surface (2 m) temperature and dew point are inserted at the
        sorted position of the surface pressure. Levels with a missing
        pressure are dropped; missing temperatures and dew points are kept
        for the caller to exclude per trace.
        """
        points = [
            TracePoint(lvl.pressure_pa, lvl.temperature_k, lvl.dewpoint_k)
            for lvl in reversed(self.levels)
            if not is_missing(lvl.pressure_pa)
        ]
        if not is_missing(self.surface.pressure_pa):
            pressures = [p.pressure_pa for p in points]
            index = bisect.bisect_left(pressures, self.surface.pressure_pa)
            points.insert(index, TracePoint(
                self.surface.pressure_pa,
                self.surface.temperature_2m_k,
                self.surface.dewpoint_2m_k,
                is_surface=True,
            ))
        return points

    def derived(self):
        """Compute derived indices (see :func:`compute_indices`)."""
        from skewtlogp.sounding.derived import compute_indices
        return compute_indices(self)

    @classmethod
    def from_arrays(
        cls,
        pressures_pa: Sequence[float],
        temperatures_k: Sequence[float],
        surface: SurfaceObservation,
        dewpoints_k: Optional[Sequence[float]] = None,
        relative_humidity_pct: Optional[Sequence[float]] = None,
        **kwargs,
    ) -> "Sounding":
        """Build a sounding from parallel arrays.

        Either dew points or relative humidity must be given; dew points
        are computed from relative humidity when only that is available.

        Args:
            pressures_pa: Level pressures [Pa]
            temperatures_k: Level temperatures [K]
            surface: Surface observation
            dewpoints_k: Level dew points [K]
            relative_humidity_pct: Level relative humidity [%]
            **kwargs: Passed through to the Sounding constructor

        Returns:
            Sounding instance
        """
        from skewtlogp.thermo.saturation import calc_dewp

        if dewpoints_k is None:
            if relative_humidity_pct is None:
                raise ValueError("Either dewpoints_k or relative_humidity_pct is required")
            dewpoints_k = [
                calc_dewp(t, p, rh)
                for t, p, rh in zip(temperatures_k, pressures_pa, relative_humidity_pct)
            ]

        if not (len(pressures_pa) == len(temperatures_k) == len(dewpoints_k)):
            raise ValueError("pressure, temperature and dew point arrays differ in length")

        levels = tuple(
            SoundingLevel(float(p), float(t), float(d))
            for p, t, d in zip(pressures_pa, temperatures_k, dewpoints_k)
        )
        return cls(levels=levels, surface=surface, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sounding":
        """Create a Sounding from a dictionary (see :meth:`to_dict`).

        Level entries may carry ``relative_humidity_pct`` instead of
        ``dewpoint_k``. Absent values become the missing-value sentinel.
        """
        from skewtlogp.thermo.saturation import calc_dewp

        sfc = data.get("surface", {})
        surface = SurfaceObservation(
            temperature_2m_k=_value(sfc, "temperature_2m_k"),
            dewpoint_2m_k=_value(sfc, "dewpoint_2m_k"),
            pressure_pa=_value(sfc, "pressure_pa"),
            mslp_pa=_value(sfc, "mslp_pa"),
        )
        if is_missing(surface.dewpoint_2m_k) and "relative_humidity_2m_pct" in sfc:
            surface = SurfaceObservation(
                temperature_2m_k=surface.temperature_2m_k,
                dewpoint_2m_k=calc_dewp(
                    surface.temperature_2m_k, surface.pressure_pa,
                    _value(sfc, "relative_humidity_2m_pct"),
                ),
                pressure_pa=surface.pressure_pa,
                mslp_pa=surface.mslp_pa,
            )

        levels = []
        winds = []
        for entry in data.get("levels", []):
            pres = _value(entry, "pressure_pa")
            temp = _value(entry, "temperature_k")
            if "dewpoint_k" in entry:
                dewp = _value(entry, "dewpoint_k")
            else:
                dewp = calc_dewp(temp, pres, _value(entry, "relative_humidity_pct"))
            levels.append(SoundingLevel(pres, temp, dewp))
            if "u_ms" in entry and "v_ms" in entry:
                winds.append(WindLevel(pres, _value(entry, "u_ms"), _value(entry, "v_ms")))

        for entry in data.get("winds", []):
            winds.append(WindLevel(
                _value(entry, "pressure_pa"), _value(entry, "u_ms"), _value(entry, "v_ms"),
            ))

        fields_dict = data.get("model_fields", {})
        model_fields = ModelFields(
            cape_j_kg=_value(fields_dict, "cape_j_kg"),
            cin_j_kg=_value(fields_dict, "cin_j_kg"),
            lifted_index_k=_value(fields_dict, "lifted_index_k"),
        )

        meta = data.get("metadata", {})
        metadata = SoundingMetadata(
            longitude=meta.get("longitude"),
            latitude=meta.get("latitude"),
            analysis_time=_parse_time(meta.get("analysis_time")),
            valid_time=_parse_time(meta.get("valid_time")),
            model_name=meta.get("model_name", ""),
        )

        return cls(
            levels=tuple(levels),
            surface=surface,
            winds=tuple(winds),
            model_fields=model_fields,
            metadata=metadata,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert sounding to a dictionary for serialization."""
        return {
            "surface": {
                "temperature_2m_k": self.surface.temperature_2m_k,
                "dewpoint_2m_k": self.surface.dewpoint_2m_k,
                "pressure_pa": self.surface.pressure_pa,
                "mslp_pa": self.surface.mslp_pa,
            },
            "levels": [
                {
                    "pressure_pa": lvl.pressure_pa,
                    "temperature_k": lvl.temperature_k,
                    "dewpoint_k": lvl.dewpoint_k,
                }
                for lvl in self.levels
            ],
            "winds": [
                {"pressure_pa": wl.pressure_pa, "u_ms": wl.u_ms, "v_ms": wl.v_ms}
                for wl in self.winds
            ],
            "model_fields": {
                "cape_j_kg": self.model_fields.cape_j_kg,
                "cin_j_kg": self.model_fields.cin_j_kg,
                "lifted_index_k": self.model_fields.lifted_index_k,
            },
            "metadata": {
                "longitude": self.metadata.longitude,
                "latitude": self.metadata.latitude,
                "analysis_time": _format_time(self.metadata.analysis_time),
                "valid_time": _format_time(self.metadata.valid_time),
                "model_name": self.metadata.model_name,
            },
        }


def _value(mapping: Dict[str, Any], key: str) -> float:
    value = mapping.get(key)
    if value is None or value == "":
        return MISSING_VALUE
    return float(value)


def _parse_time(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None
