"""
Sounding file loading.

Single soundings can be stored as a JSON/YAML document matching
:meth:`Sounding.to_dict`, or as a CSV table with one row per level.

Expected CSV format:
    level,pressure_pa,temperature_k,dewpoint_k,relative_humidity_pct,u_ms,v_ms
    surface,97120,298.15,288.15,,,
    isobaric,95000,296.4,287.0,,2.1,5.3
    isobaric,92500,294.9,,61.0,4.0,7.2
    ...

The ``level`` column marks the surface (2 m) row, and ``wind`` rows carry
winds at pressures without a level; any other value is an isobaric level.
Either ``dewpoint_k`` or ``relative_humidity_pct`` may be given per row.
The surface row may also hold ``mslp_pa``, the model fields
(``cape_j_kg``, ``cin_j_kg``, ``lifted_index_k``) and the metadata columns
(``longitude``, ``latitude``, ``analysis_time``, ``valid_time``,
``model_name``). Empty cells are treated as missing.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from skewtlogp.sounding.models import Sounding

logger = logging.getLogger(__name__)

SURFACE_LABELS = ("surface", "sfc", "2m")
WIND_LABEL = "wind"
MODEL_FIELD_COLUMNS = ("cape_j_kg", "cin_j_kg", "lifted_index_k")


def load_sounding(path: Union[str, Path]) -> Sounding:
    """
    Load a sounding from a JSON, YAML or CSV file.

    Args:
        path: Path to the sounding file

    Returns:
        Sounding instance

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file extension is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sounding file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        with open(path, "r") as f:
            data = json.load(f)
    elif suffix in (".yaml", ".yml"):
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    elif suffix == ".csv":
        data = _read_csv(path)
    else:
        raise ValueError(f"Unsupported sounding file format: {path.suffix}")

    sounding = Sounding.from_dict(data)
    logger.info(f"Loaded sounding with {sounding.num_levels} levels from {path}")
    return sounding


def _read_csv(path: Path) -> Dict[str, Any]:
    """Convert a level table into the dictionary layout of Sounding.to_dict."""
    surface: Dict[str, Any] = {}
    model_fields: Dict[str, Any] = {}
    metadata: Dict[str, Any] = {}
    levels = []
    winds = []

    with open(path, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            row = {k.strip(): (v.strip() if v is not None else "") for k, v in row.items()}
            label = row.get("level", "").lower()
            if label in SURFACE_LABELS:
                surface = {
                    "temperature_2m_k": row.get("temperature_k"),
                    "pressure_pa": row.get("pressure_pa"),
                    "mslp_pa": row.get("mslp_pa"),
                }
                if row.get("dewpoint_k"):
                    surface["dewpoint_2m_k"] = row["dewpoint_k"]
                elif row.get("relative_humidity_pct"):
                    surface["relative_humidity_2m_pct"] = row["relative_humidity_pct"]
                model_fields = {key: row.get(key) for key in MODEL_FIELD_COLUMNS}
                metadata = _read_metadata(row)
                continue

            if label == WIND_LABEL:
                winds.append({
                    "pressure_pa": row.get("pressure_pa"),
                    "u_ms": row.get("u_ms"),
                    "v_ms": row.get("v_ms"),
                })
                continue

            entry = {
                "pressure_pa": row.get("pressure_pa"),
                "temperature_k": row.get("temperature_k"),
            }
            if row.get("dewpoint_k"):
                entry["dewpoint_k"] = row["dewpoint_k"]
            else:
                entry["relative_humidity_pct"] = row.get("relative_humidity_pct")
            if row.get("u_ms") and row.get("v_ms"):
                entry["u_ms"] = row["u_ms"]
                entry["v_ms"] = row["v_ms"]
            levels.append(entry)

    if not surface:
        logger.warning(f"No surface row in {path}; surface values will be missing")

    return {
        "surface": surface,
        "levels": levels,
        "winds": winds,
        "model_fields": model_fields,
        "metadata": metadata,
    }


def _read_metadata(row: Dict[str, str]) -> Dict[str, Any]:
    """Location, times and source from the surface row; empty cells become None."""
    metadata: Dict[str, Any] = {}
    for key in ("longitude", "latitude"):
        if row.get(key):
            metadata[key] = float(row[key])
    for key in ("analysis_time", "valid_time"):
        if row.get(key):
            metadata[key] = row[key]
    if row.get("model_name"):
        metadata["model_name"] = row["model_name"]
    return metadata


def save_sounding(sounding: Sounding, path: Union[str, Path]) -> str:
    """
    Save a sounding as JSON or YAML.

    Args:
        sounding: Sounding to save
        path: Output path (.json, .yaml or .yml)

    Returns:
        Path to saved file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    data = sounding.to_dict()

    if suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    elif suffix in (".yaml", ".yml"):
        with open(path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)
    else:
        raise ValueError(f"Unsupported sounding file format: {path.suffix}")

    logger.info(f"Saved sounding to {path}")
    return str(path)
