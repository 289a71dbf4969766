"""
Output Formatter for exporting diagrams and sounding reports.

Supports multiple output formats:
- JSON: Render scene or sounding report with metadata
- PNG/SVG/PDF: Rasterized diagram via matplotlib
- CSV: Level table of a sounding, readable by load_sounding
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from skewtlogp.plot.raster import MatplotlibRenderer, SUPPORTED_FORMATS
from skewtlogp.plot.scene import RenderScene
from skewtlogp.sounding.models import Sounding

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"

CSV_COLUMNS = [
    "level", "pressure_pa", "temperature_k", "dewpoint_k", "u_ms", "v_ms",
    "mslp_pa", "cape_j_kg", "cin_j_kg", "lifted_index_k",
    "longitude", "latitude", "analysis_time", "valid_time", "model_name",
]


def _metadata(**extra) -> Dict[str, Any]:
    from skewtlogp import __version__

    return {
        "format_version": FORMAT_VERSION,
        "created": datetime.now().isoformat(),
        "software": "skewtlogp",
        "version": __version__,
        **extra,
    }


class OutputFormatter:
    """Formatter for exporting scenes and soundings to various formats.

    Supports:
    - Scenes: json, png, svg, pdf
    - Soundings: json (with derived indices), csv

    Example:
        >>> formatter = OutputFormatter(dpi=100)
        >>> formatter.save_scene(scene, "skewt.png")
        >>> formatter.save_scene(scene, "skewt.json")
        >>> formatter.save_sounding(sounding, "sounding.csv")
    """

    def __init__(self, dpi: float = 100.0):
        """Initialize the output formatter.

        Args:
            dpi: Resolution for image output
        """
        self.renderer = MatplotlibRenderer(dpi=dpi)

    @staticmethod
    def _resolve(output_path, format):
        output_path = Path(output_path)
        format = (format or output_path.suffix.lstrip(".") or "json").lower()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return output_path, format

    def save_scene(self, scene: RenderScene, output_path: str, format: str = None) -> str:
        """Save a render scene.

        Args:
            scene: RenderScene to save
            output_path: Output file path
            format: json, png, svg or pdf; taken from the extension when
                not given

        Returns:
            Path to saved file

        Raises:
            ValueError: If format is not supported
        """
        output_path, format = self._resolve(output_path, format)

        if format == "json":
            data = {
                "metadata": _metadata(num_primitives=len(scene), layers=scene.layers()),
                "scene": scene.to_dict(),
            }
            with open(output_path, 'w') as f:
                json.dump(data, f, indent=2)
            logger.info(f"Saved JSON scene to {output_path}")
            return str(output_path)
        elif format in SUPPORTED_FORMATS:
            return self.renderer.save(scene, str(output_path), format=format)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def save_sounding(self, sounding: Sounding, output_path: str, format: str = None) -> str:
        """Save a sounding with its derived indices.

        Args:
            sounding: Sounding to save
            output_path: Output file path
            format: json or csv; taken from the extension when not given

        Returns:
            Path to saved file

        Raises:
            ValueError: If format is not supported
        """
        output_path, format = self._resolve(output_path, format)

        if format == "json":
            return self._save_sounding_json(sounding, output_path)
        elif format == "csv":
            return self._save_sounding_csv(sounding, output_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _save_sounding_json(self, sounding: Sounding, output_path: Path, indent: int = 2) -> str:
        data = {
            "metadata": _metadata(num_levels=sounding.num_levels),
            "sounding": sounding.to_dict(),
            "indices": sounding.derived().to_dict(),
        }

        with open(output_path, 'w') as f:
            json.dump(data, f, indent=indent)

        logger.info(f"Saved JSON output to {output_path}")
        return str(output_path)

    def _save_sounding_csv(self, sounding: Sounding, output_path: Path, delimiter: str = ",") -> str:
        """Write the merged trace, surface row included, one row per sample.

        Winds go on the level with the same pressure, or on a ``wind`` row
        when no level matches. The surface row also carries MSLP, the model
        fields and the metadata so that :func:`load_sounding` restores them.
        """
        winds = {wl.pressure_pa: wl for wl in sounding.winds}
        rows = []
        for point in reversed(sounding.trace_points()):
            row = {
                "level": "surface" if point.is_surface else "isobaric",
                "pressure_pa": point.pressure_pa,
                "temperature_k": point.temperature_k,
                "dewpoint_k": point.dewpoint_k,
            }
            if point.is_surface:
                row.update(self._surface_columns(sounding))
            else:
                wind = winds.pop(point.pressure_pa, None)
                if wind is not None:
                    row.update(u_ms=wind.u_ms, v_ms=wind.v_ms)
            rows.append(row)

        for wind in winds.values():
            rows.append({"level": "wind", "pressure_pa": wind.pressure_pa,
                         "u_ms": wind.u_ms, "v_ms": wind.v_ms})

        with open(output_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS, delimiter=delimiter)
            writer.writeheader()
            writer.writerows(rows)

        logger.info(f"Saved CSV output to {output_path}")
        return str(output_path)

    @staticmethod
    def _surface_columns(sounding: Sounding) -> Dict[str, Any]:
        data = sounding.to_dict()
        return {
            "mslp_pa": sounding.surface.mslp_pa,
            **data["model_fields"],
            **{k: ("" if v is None else v) for k, v in data["metadata"].items()},
        }
