"""
Plot configuration data structures.

Defines the configuration schema for Skew-T rendering: canvas sizes for the
on-screen view and the high-resolution export, color overrides,
annotation switches and output options.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Any
import json
import yaml

from skewtlogp.plot.styles import DEFAULT_STYLE, SkewTStyle

OUTPUT_FORMATS = ["png", "svg", "pdf", "json"]


@dataclass
class CanvasConfig:
    """Canvas size and line weight for one render target.

    Attributes:
        width: Canvas width [px]
        height: Canvas height [px]
        line_scale: Multiplier for line widths and dash lengths
    """
    width: float = 1800.0
    height: float = 2400.0
    line_scale: float = 2.0

    @classmethod
    def from_dict(cls, canvas_dict: Optional[Dict[str, Any]], default: "CanvasConfig") -> "CanvasConfig":
        canvas_dict = canvas_dict or {}
        return cls(
            width=canvas_dict.get("width", default.width),
            height=canvas_dict.get("height", default.height),
            line_scale=canvas_dict.get("line_scale", default.line_scale),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"width": self.width, "height": self.height, "line_scale": self.line_scale}

    def validate(self, name: str) -> list:
        errors = []
        if self.width <= 0 or self.height <= 0:
            errors.append(f"{name} canvas size must be positive")
        if self.line_scale <= 0:
            errors.append(f"{name} line_scale must be positive")
        return errors


def _default_view() -> CanvasConfig:
    return CanvasConfig(width=1800.0, height=2400.0, line_scale=2.0)


def _default_export() -> CanvasConfig:
    return CanvasConfig(width=2400.0, height=3600.0, line_scale=3.0)


@dataclass
class StyleConfig:
    """Color overrides.

    Attributes:
        colors: Mapping of diagram element (e.g. ``dewpoint``,
            ``mixing_ratio``, ``background``) to a color string
    """
    colors: Dict[str, str] = field(default_factory=dict)

    def to_style(self) -> SkewTStyle:
        """Default style with the configured colors applied."""
        return DEFAULT_STYLE.with_colors(self.colors)


@dataclass
class AnnotationConfig:
    """Annotation text settings.

    Attributes:
        enabled: Draw location, times and indices around the plot
    """
    enabled: bool = True


@dataclass
class OutputConfig:
    """Output settings.

    Attributes:
        format: Default output format (png, svg, pdf, json)
        dpi: Resolution used to convert pixel sizes for image output
    """
    format: str = "png"
    dpi: float = 100.0


@dataclass
class PlotConfig:
    """Complete plot configuration.

    Example YAML input:
        view: {width: 900, height: 1200, line_scale: 1}
        export: {width: 2400, height: 3600, line_scale: 3}
        style: {colors: {dewpoint: "#00aa00"}}
        annotations: {enabled: true}
        sounding_path: soundings/payerne.json
    """
    view: CanvasConfig = field(default_factory=_default_view)
    export: CanvasConfig = field(default_factory=_default_export)
    style: StyleConfig = field(default_factory=StyleConfig)
    annotations: AnnotationConfig = field(default_factory=AnnotationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    sounding_path: Optional[str] = None

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "PlotConfig":
        """Create PlotConfig from a dictionary.

        Args:
            config_dict: Configuration dictionary

        Returns:
            PlotConfig instance
        """
        config_dict = config_dict or {}

        view = CanvasConfig.from_dict(config_dict.get("view", {}), _default_view())
        export = CanvasConfig.from_dict(config_dict.get("export", {}), _default_export())

        style_dict = config_dict.get("style") or {}
        style = StyleConfig(colors=dict(style_dict.get("colors") or {}))

        annot_dict = config_dict.get("annotations") or {}
        annotations = AnnotationConfig(enabled=annot_dict.get("enabled", True))

        out_dict = config_dict.get("output") or {}
        output = OutputConfig(
            format=out_dict.get("format", "png"),
            dpi=out_dict.get("dpi", 100.0),
        )

        return cls(
            view=view,
            export=export,
            style=style,
            annotations=annotations,
            output=output,
            sounding_path=config_dict.get("sounding_path"),
        )

    @classmethod
    def from_json(cls, json_path: str) -> "PlotConfig":
        """Load configuration from a JSON file.

        Args:
            json_path: Path to JSON configuration file

        Returns:
            PlotConfig instance
        """
        with open(json_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "PlotConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            PlotConfig instance
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as nested dictionary
        """
        return {
            "view": self.view.to_dict(),
            "export": self.export.to_dict(),
            "style": {"colors": dict(self.style.colors)},
            "annotations": {"enabled": self.annotations.enabled},
            "output": {"format": self.output.format, "dpi": self.output.dpi},
            "sounding_path": self.sounding_path,
        }

    def to_json(self, json_path: str, indent: int = 2) -> None:
        """Save configuration to JSON file.

        Args:
            json_path: Output file path
            indent: JSON indentation level
        """
        with open(json_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=indent)

    def validate(self) -> list:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        errors.extend(self.view.validate("view"))
        errors.extend(self.export.validate("export"))

        # Color overrides must name a style element
        style_elements = {f.name for f in fields(SkewTStyle)}
        for name, color in self.style.colors.items():
            if name not in style_elements:
                errors.append(f"Unknown style element: {name}")
            elif not isinstance(color, str) or not color:
                errors.append(f"Color for {name} must be a non-empty string")

        if self.output.format not in OUTPUT_FORMATS:
            errors.append(f"Invalid output format: {self.output.format}")

        if self.output.dpi <= 0:
            errors.append("dpi must be positive")

        return errors
