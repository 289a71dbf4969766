"""
Configuration module for Skew-T plotting.

Handles loading and validating plot configurations from JSON/YAML files.
"""

from skewtlogp.config.settings import (
    PlotConfig,
    CanvasConfig,
    StyleConfig,
    AnnotationConfig,
    OutputConfig,
)
from skewtlogp.config.manager import ConfigurationManager, LoadedConfiguration

__all__ = [
    "PlotConfig",
    "CanvasConfig",
    "StyleConfig",
    "AnnotationConfig",
    "OutputConfig",
    "ConfigurationManager",
    "LoadedConfiguration",
]
