"""
Sounding providers for gridded model data.

The provider turns an already-opened gridded dataset into Sounding objects
for single grid points. Decoding GRIB/NetCDF files is left to the caller
(e.g. ``xarray.open_dataset`` with whichever engine suits the file); this
module only reads values out of an in-memory ``xarray.Dataset``.

Variable names differ between forecast models (GFS, NAM, RAP, HRRR) and
between decoders; they are configured through :class:`VariableMap` rather
than hard-coded.

Missing variables never raise: the affected value is replaced by the
missing-value sentinel and an error is logged.
"""

import logging
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Tuple

import numpy as np
import xarray as xr

from skewtlogp.sounding.models import (
    ModelFields,
    Sounding,
    SoundingLevel,
    SoundingMetadata,
    SurfaceObservation,
    WindLevel,
)
from skewtlogp.thermo.saturation import calc_dewp
from skewtlogp.utils.constants import HPA_TO_PA, MISSING_VALUE, is_missing

logger = logging.getLogger(__name__)

# Isobaric levels kept for plotting [Pa]
MIN_LEVEL_PA = 10000.0
MAX_LEVEL_PA = 100000.0
LEVEL_INTERVAL_PA = 2500.0

HPA_UNITS = ("hPa", "hpa", "mb", "mbar", "millibar", "millibars")


class SoundingProvider(Protocol):
    """Anything that can produce a sounding for a grid point."""

    def get_sounding(self, x: int, y: int) -> Sounding:
        ...


@dataclass
class VariableMap:
    """Dataset variable names used to build soundings.

    Defaults follow the names produced by the Unidata NetCDF-Java GRIB
    decoder for NCEP models. Set ``dewpoint`` for models that provide
    isobaric dew point directly (HRRR); otherwise ``relative_humidity`` is
    converted to dew point.

    Attributes:
        isobaric_coord: Name of the isobaric vertical coordinate
        temperature: Isobaric temperature [K]
        relative_humidity: Isobaric relative humidity [%]
        dewpoint: Isobaric dew point [K]
        temperature_2m: 2 m temperature [K]
        dewpoint_2m: 2 m dew point [K]
        relative_humidity_2m: 2 m relative humidity [%]
        surface_pressure: Surface pressure [Pa]
        mslp: Mean sea level pressure [Pa]
        u_wind: Isobaric u-component of wind [m/s]
        v_wind: Isobaric v-component of wind [m/s]
        cape: Surface CAPE [J/kg]
        cin: Surface CIN [J/kg]
        lifted_index: Surface lifted index [K]
        latitude: Latitude variable or coordinate
        longitude: Longitude variable or coordinate
        x_dim: Grid x dimension
        y_dim: Grid y dimension
    """
    isobaric_coord: str = "isobaric"
    temperature: str = "Temperature_isobaric"
    relative_humidity: Optional[str] = "Relative_humidity_isobaric"
    dewpoint: Optional[str] = None
    temperature_2m: str = "Temperature_height_above_ground"
    dewpoint_2m: Optional[str] = "Dewpoint_temperature_height_above_ground"
    relative_humidity_2m: Optional[str] = None
    surface_pressure: str = "Pressure_surface"
    mslp: Optional[str] = "MSLP_Eta_model_reduction_msl"
    u_wind: Optional[str] = "u-component_of_wind_isobaric"
    v_wind: Optional[str] = "v-component_of_wind_isobaric"
    cape: Optional[str] = "Convective_available_potential_energy_surface"
    cin: Optional[str] = "Convective_inhibition_surface"
    lifted_index: Optional[str] = "Surface_lifted_index_isobaric_layer"
    latitude: str = "lat"
    longitude: str = "lon"
    x_dim: str = "x"
    y_dim: str = "y"

    @classmethod
    def from_dict(cls, mapping: Dict[str, Any]) -> "VariableMap":
        """Create a VariableMap, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            logger.warning(f"Ignoring unknown variable map keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in mapping.items() if k in known})


class DatasetSoundingProvider:
    """Sounding provider backed by an in-memory ``xarray.Dataset``.

    Example:
        >>> ds = xr.open_dataset("rap_252_20160524_0000_000.nc")
        >>> provider = DatasetSoundingProvider(ds)
        >>> x, y = provider.xy_from_lonlat(-97.5, 35.4)
        >>> sounding = provider.get_sounding(x, y)
    """

    def __init__(
        self,
        dataset: xr.Dataset,
        variables: Optional[VariableMap] = None,
        model_name: Optional[str] = None,
    ):
        """Initialize the provider.

        Args:
            dataset: Gridded dataset containing the mapped variables
            variables: Variable names to read (defaults to NCEP GRIB names)
            model_name: Name shown as the data source; defaults to the
                dataset's ``model`` or ``title`` attribute
        """
        if not isinstance(dataset, xr.Dataset):
            raise TypeError(f"Expected xarray.Dataset, got {type(dataset)}")
        self.dataset = dataset
        self.variables = variables or VariableMap()
        self.model_name = model_name or str(
            dataset.attrs.get("model", dataset.attrs.get("title", ""))
        )
        self._levels_pa, self._level_indices = self._find_levels()
        logger.debug(f"Number of isobaric levels used: {len(self._levels_pa)}")

    @property
    def levels_pa(self) -> np.ndarray:
        """Isobaric levels used for soundings [Pa], highest pressure first."""
        return self._levels_pa.copy()

    @property
    def grid_shape(self) -> Tuple[int, int]:
        """Grid size as (nx, ny)."""
        return (
            self.dataset.sizes[self.variables.x_dim],
            self.dataset.sizes[self.variables.y_dim],
        )

    def _find_levels(self) -> Tuple[np.ndarray, np.ndarray]:
        """Select isobaric levels in [100, 1000] hPa on a 25 hPa grid."""
        name = self.variables.isobaric_coord
        if name not in self.dataset.coords and name not in self.dataset.variables:
            logger.error(f"Can't read isobaric coordinate: {name}")
            return np.array([]), np.array([], dtype=int)

        coord = self.dataset[name]
        values = np.asarray(coord.values, dtype=float)
        if coord.attrs.get("units") in HPA_UNITS:
            values = values * HPA_TO_PA

        keep = (
            (values >= MIN_LEVEL_PA)
            & (values <= MAX_LEVEL_PA)
            & np.isclose(np.mod(values, LEVEL_INTERVAL_PA), 0.0)
        )
        indices = np.nonzero(keep)[0]
        order = np.argsort(values[indices])[::-1]
        return values[indices][order], indices[order]

    def _read_point(self, name: Optional[str], x: int, y: int) -> Optional[np.ndarray]:
        """Values of a variable at a grid point, reduced to the isobaric axis."""
        if name is None:
            return None
        if name not in self.dataset.variables:
            logger.error(f"Can't read variable: {name}")
            return None

        data = self.dataset[name]
        point = {}
        for dim, index in ((self.variables.x_dim, x), (self.variables.y_dim, y)):
            if dim in data.dims:
                point[dim] = index
        data = data.isel(point)
        extra = {dim: 0 for dim in data.dims if dim != self.variables.isobaric_coord}
        return np.asarray(data.isel(extra).values, dtype=float)

    def _read_scalar(self, name: Optional[str], x: int, y: int) -> float:
        values = self._read_point(name, x, y)
        if values is None:
            return MISSING_VALUE
        value = float(np.ravel(values)[0])
        return MISSING_VALUE if np.isnan(value) else value

    def _read_profile(self, name: Optional[str], x: int, y: int) -> Optional[np.ndarray]:
        values = self._read_point(name, x, y)
        if values is None:
            return None
        if values.ndim != 1:
            logger.error(f"Variable {name} is not a vertical profile at ({x}, {y})")
            return None
        profile = values[self._level_indices]
        return np.where(np.isnan(profile), MISSING_VALUE, profile)

    def get_sounding(self, x: int, y: int) -> Sounding:
        """
        Build the sounding at grid point (x, y).

        Args:
            x: Grid index along ``x_dim``
            y: Grid index along ``y_dim``

        Returns:
            Sounding with missing fields set to the sentinel
        """
        nx, ny = self.grid_shape
        if not (0 <= x < nx and 0 <= y < ny):
            raise IndexError(f"Grid point ({x}, {y}) outside grid of size ({nx}, {ny})")

        var = self.variables
        pressures = self._levels_pa
        n_levels = len(pressures)
        missing = np.full(n_levels, MISSING_VALUE)

        temps = self._read_profile(var.temperature, x, y)
        if temps is None:
            temps = missing

        dewps = self._read_profile(var.dewpoint, x, y) if var.dewpoint else None
        if dewps is None:
            rhs = self._read_profile(var.relative_humidity, x, y)
            if rhs is None:
                dewps = missing
            else:
                dewps = np.array([
                    calc_dewp(t, p, rh) for t, p, rh in zip(temps, pressures, rhs)
                ])

        levels = tuple(
            SoundingLevel(float(p), float(t), float(d))
            for p, t, d in zip(pressures, temps, dewps)
        )

        surface = self._read_surface(x, y)
        winds = self._read_winds(x, y)

        model_fields = ModelFields(
            cape_j_kg=self._read_scalar(var.cape, x, y),
            cin_j_kg=self._read_scalar(var.cin, x, y),
            lifted_index_k=self._read_scalar(var.lifted_index, x, y),
        )

        lon, lat = self.lonlat_from_xy(x, y)
        metadata = SoundingMetadata(
            longitude=lon,
            latitude=lat,
            analysis_time=self.analysis_time,
            valid_time=self.valid_time,
            model_name=self.model_name,
        )

        return Sounding(
            levels=levels,
            surface=surface,
            winds=winds,
            model_fields=model_fields,
            metadata=metadata,
        )

    def _read_surface(self, x: int, y: int) -> SurfaceObservation:
        var = self.variables
        temp_2m = self._read_scalar(var.temperature_2m, x, y)
        pres_sfc = self._read_scalar(var.surface_pressure, x, y)

        if var.dewpoint_2m is not None:
            dewp_2m = self._read_scalar(var.dewpoint_2m, x, y)
        else:
            rh_2m = self._read_scalar(var.relative_humidity_2m, x, y)
            dewp_2m = calc_dewp(temp_2m, pres_sfc, rh_2m)

        return SurfaceObservation(
            temperature_2m_k=temp_2m,
            dewpoint_2m_k=dewp_2m,
            pressure_pa=pres_sfc,
            mslp_pa=self._read_scalar(var.mslp, x, y),
        )

    def _read_winds(self, x: int, y: int) -> Tuple[WindLevel, ...]:
        u = self._read_profile(self.variables.u_wind, x, y)
        v = self._read_profile(self.variables.v_wind, x, y)
        if u is None or v is None:
            return ()
        return tuple(
            WindLevel(float(p), float(uu), float(vv))
            for p, uu, vv in zip(self._levels_pa, u, v)
            if not (is_missing(uu) or is_missing(vv))
        )

    def _lonlat_arrays(self) -> Tuple[Optional[xr.DataArray], Optional[xr.DataArray]]:
        var = self.variables
        if var.longitude not in self.dataset.variables or var.latitude not in self.dataset.variables:
            return None, None
        return self.dataset[var.longitude], self.dataset[var.latitude]

    def lonlat_from_xy(self, x: int, y: int) -> Tuple[Optional[float], Optional[float]]:
        """Longitude and latitude of grid point (x, y), or (None, None)."""
        lon, lat = self._lonlat_arrays()
        if lon is None:
            return None, None
        return (
            float(self._index_coord(lon, x, y)),
            float(self._index_coord(lat, x, y)),
        )

    def _index_coord(self, coord: xr.DataArray, x: int, y: int) -> float:
        point = {}
        for dim, index in ((self.variables.x_dim, x), (self.variables.y_dim, y)):
            if dim in coord.dims:
                point[dim] = index
        return coord.isel(point).values

    def xy_from_lonlat(self, longitude: float, latitude: float) -> Tuple[int, int]:
        """
        Nearest grid point to a longitude/latitude.

        Works for both 1-D (regular lat/lon) and 2-D (projected grid)
        coordinates. Longitudes are compared modulo 360.

        Args:
            longitude: Longitude [deg]
            latitude: Latitude [deg]

        Returns:
            Tuple of grid indices (x, y)
        """
        lon, lat = self._lonlat_arrays()
        if lon is None:
            raise KeyError("Dataset has no longitude/latitude coordinates")

        var = self.variables
        if lon.ndim == 1 and lat.ndim == 1:
            x = int(np.argmin(np.abs(_wrap_lon(lon.values - longitude))))
            y = int(np.argmin(np.abs(lat.values - latitude)))
            return x, y

        lon2d, lat2d = xr.broadcast(lon, lat)
        dist = _wrap_lon(lon2d - longitude) ** 2 + (lat2d - latitude) ** 2
        dist = dist.transpose(var.y_dim, var.x_dim)
        y, x = np.unravel_index(int(np.argmin(dist.values)), dist.shape)
        return int(x), int(y)

    @property
    def analysis_time(self) -> Optional[datetime]:
        """Model analysis (reference) time, if the dataset provides one."""
        for name in ("reftime", "reference_time"):
            if name in self.dataset.variables:
                return _to_datetime(np.ravel(self.dataset[name].values)[0])
            if name in self.dataset.attrs:
                return _to_datetime(self.dataset.attrs[name])
        return None

    @property
    def valid_time(self) -> Optional[datetime]:
        """Forecast valid time; falls back to the analysis time."""
        for name in ("valid_time", "time"):
            if name in self.dataset.variables:
                return _to_datetime(np.ravel(self.dataset[name].values)[0])
        logger.error("Can't read valid time from dataset, returning analysis time")
        return self.analysis_time

    def available_variables(self) -> List[str]:
        """Mapped variable names that are present in the dataset."""
        names = [getattr(self.variables, f.name) for f in fields(self.variables)]
        return [n for n in names if n and n in self.dataset.variables]


def _wrap_lon(delta):
    return (delta + 180.0) % 360.0 - 180.0


def _to_datetime(value) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return np.datetime64(value, "us").astype(datetime)
