"""
Sounding data model and data access.

Classes
-------
Sounding
    Immutable vertical profile at one grid point
SoundingLevel, SurfaceObservation, WindLevel, ModelFields, SoundingMetadata
    Components of a sounding
DerivedIndices
    LCL and stability indices computed from a sounding
SoundingProvider
    Protocol for anything that yields soundings for grid points
DatasetSoundingProvider
    Provider backed by an in-memory xarray Dataset
VariableMap
    Per-model dataset variable names

Functions
---------
compute_indices
    Derived indices for a sounding
load_sounding, save_sounding
    JSON/YAML/CSV sounding files
"""

from skewtlogp.sounding.models import (
    Sounding,
    SoundingLevel,
    SurfaceObservation,
    WindLevel,
    ModelFields,
    SoundingMetadata,
    TracePoint,
)
from skewtlogp.sounding.derived import DerivedIndices, compute_indices
from skewtlogp.sounding.provider import (
    SoundingProvider,
    DatasetSoundingProvider,
    VariableMap,
)
from skewtlogp.sounding.loader import load_sounding, save_sounding

__all__ = [
    "Sounding",
    "SoundingLevel",
    "SurfaceObservation",
    "WindLevel",
    "ModelFields",
    "SoundingMetadata",
    "TracePoint",
    "DerivedIndices",
    "compute_indices",
    "SoundingProvider",
    "DatasetSoundingProvider",
    "VariableMap",
    "load_sounding",
    "save_sounding",
]
