"""
Configuration Manager for Skew-T plotting.

Handles loading and validation of plot configurations, and loads the
sounding a configuration refers to.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

from skewtlogp.config.settings import PlotConfig
from skewtlogp.sounding.loader import load_sounding
from skewtlogp.sounding.models import Sounding

logger = logging.getLogger(__name__)


@dataclass
class LoadedConfiguration:
    """Container for fully loaded and validated configuration.

    Attributes:
        config: The plot configuration settings
        sounding: Sounding named by ``sounding_path``, if any
        is_valid: Whether the configuration passed validation
        validation_errors: List of validation error messages
    """
    config: PlotConfig
    sounding: Optional[Sounding]
    is_valid: bool
    validation_errors: list


class ConfigurationManager:
    """Manages plot configurations.

    This class handles:
    - Loading configurations from JSON/YAML/dict
    - Validating canvas sizes, colors and output options
    - Loading the sounding file a configuration refers to

    Example:
        >>> manager = ConfigurationManager()
        >>> loaded = manager.load_config({"view": {"width": 900, "height": 1200}})
        >>> if loaded.is_valid:
        ...     geometry = PlotGeometry.for_view(loaded.config)
    """

    def __init__(self, base_path: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            base_path: Base path for relative file references.
                      Defaults to current working directory.
        """
        self.base_path = Path(base_path) if base_path else Path.cwd()

    def load_config(
        self,
        config_source: Dict[str, Any] | str,
    ) -> LoadedConfiguration:
        """Load and validate a complete configuration.

        Args:
            config_source: Configuration dictionary, JSON path, or YAML path

        Returns:
            LoadedConfiguration with parsed config and sounding
        """
        if isinstance(config_source, dict):
            config = PlotConfig.from_dict(config_source)
        elif isinstance(config_source, (str, Path)):
            path = Path(config_source)
            if path.suffix.lower() == '.json':
                config = PlotConfig.from_json(str(path))
            elif path.suffix.lower() in ('.yaml', '.yml'):
                config = PlotConfig.from_yaml(str(path))
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
        else:
            raise TypeError(f"Invalid config source type: {type(config_source)}")

        validation_errors = config.validate()

        sounding = None
        if config.sounding_path:
            try:
                sounding = self._load_sounding(config)
            except (OSError, ValueError) as e:
                validation_errors.append(f"Sounding loading failed: {e}")

        is_valid = len(validation_errors) == 0

        if not is_valid:
            for error in validation_errors:
                logger.warning(f"Configuration validation error: {error}")

        return LoadedConfiguration(
            config=config,
            sounding=sounding,
            is_valid=is_valid,
            validation_errors=validation_errors,
        )

    def _load_sounding(self, config: PlotConfig) -> Sounding:
        sounding_path = self.resolve_path(config.sounding_path)
        logger.info(f"Loading sounding from {sounding_path}")
        return load_sounding(str(sounding_path))

    def resolve_path(self, path: str) -> Path:
        """Resolve a path relative to base_path.

        Args:
            path: Relative or absolute path string

        Returns:
            Resolved absolute Path
        """
        p = Path(path)
        if p.is_absolute():
            return p
        return (self.base_path / p).resolve()

    @staticmethod
    def create_example_config() -> Dict[str, Any]:
        """Create an example configuration dictionary.

        Returns:
            Example configuration with every section filled in
        """
        return {
            "view": {"width": 1800, "height": 2400, "line_scale": 2},
            "export": {"width": 2400, "height": 3600, "line_scale": 3},
            "style": {
                "colors": {
                    "temperature": "#000000",
                    "dewpoint": "#ff0000",
                },
            },
            "annotations": {"enabled": True},
            "output": {"format": "png", "dpi": 100},
        }

    def save_example_config(self, output_path: str) -> None:
        """Save an example configuration file.

        Args:
            output_path: Path to save the example JSON
        """
        example = self.create_example_config()
        with open(output_path, 'w') as f:
            json.dump(example, f, indent=2)
        logger.info(f"Saved example configuration to {output_path}")
