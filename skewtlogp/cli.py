"""
Command-line interface for skewtlogp.

Provides CLI commands for:
- Rendering a Skew-T diagram from a sounding file
- Rendering the blank diagram
- Printing derived sounding indices
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from skewtlogp import __version__
from skewtlogp.utils.constants import C_TO_K, HPA_TO_PA, is_missing


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _show(value: float, pattern: str, offset: float = 0.0, divisor: float = 1.0) -> str:
    if is_missing(value):
        return "--"
    return format((value - offset) / divisor, pattern)


def print_indices(sounding) -> None:
    """Print a summary of the sounding and its derived indices."""
    derived = sounding.derived()
    sfc = sounding.surface
    meta = sounding.metadata

    print("\nSounding Summary:")
    if meta.longitude is not None and meta.latitude is not None:
        print(f"  Location: {meta.longitude:.4f}, {meta.latitude:.4f}")
    print(f"  Levels: {sounding.num_levels}")
    print(f"  Surface pressure: {_show(sfc.pressure_pa, '.1f', divisor=HPA_TO_PA)} hPa")
    print(f"  Temperature 2m: {_show(sfc.temperature_2m_k, '.1f', C_TO_K)} C")
    print(f"  Dew point 2m: {_show(sfc.dewpoint_2m_k, '.1f', C_TO_K)} C")
    print("\nDerived Indices:")
    print(f"  LCL: {_show(derived.lcl_pressure_pa, '.0f', divisor=HPA_TO_PA)} hPa, "
          f"{_show(derived.lcl_temperature_k, '.1f', C_TO_K)} C")
    print(f"  Total Totals: {_show(derived.total_totals, '.1f')}")
    print(f"  K-Index: {_show(derived.k_index, '.1f')}")
    print(f"  SWEAT: {_show(derived.sweat, '.1f')}")
    print(f"  CAPE: {_show(derived.cape_j_kg, '.0f')} J/kg")
    print(f"  CIN: {_show(derived.cin_j_kg, '.0f')} J/kg")
    print(f"  Lifted Index: {_show(derived.lifted_index_k, '.1f')}")


def run_plot(args: argparse.Namespace) -> int:
    """Render a Skew-T diagram as requested on the command line."""
    from skewtlogp.config import ConfigurationManager, LoadedConfiguration, PlotConfig
    from skewtlogp.plot import PlotGeometry, render_blank_skewt, render_skewt
    from skewtlogp.sounding import load_sounding
    from skewtlogp.utils.output import OutputFormatter

    # Load configuration
    if args.config:
        loaded = ConfigurationManager().load_config(args.config)
    else:
        loaded = LoadedConfiguration(
            config=PlotConfig(), sounding=None, is_valid=True, validation_errors=[],
        )

    if not loaded.is_valid:
        print("Error: invalid configuration:")
        for error in loaded.validation_errors:
            print(f"  - {error}")
        return 1

    config = loaded.config
    sounding = load_sounding(args.sounding) if args.sounding else loaded.sounding

    if sounding is None and not args.blank:
        print("Error: no sounding given (use --sounding or sounding_path in the config)")
        return 1

    geometry = PlotGeometry.for_export(config) if args.export else PlotGeometry.for_view(config)
    style = config.style.to_style()
    annotate = config.annotations.enabled and not args.no_annotations

    if args.blank:
        scene = render_blank_skewt(geometry, style)
    else:
        scene = render_skewt(sounding, geometry, style, annotate=annotate)

    formatter = OutputFormatter(dpi=config.output.dpi)

    if args.output:
        output_format = args.format
        if output_format is None and not Path(args.output).suffix:
            output_format = config.output.format
        output_path = formatter.save_scene(scene, args.output, format=output_format)
        print(f"Diagram saved to: {output_path}")

    if args.report and sounding is not None:
        report_path = formatter.save_sounding(sounding, args.report)
        print(f"Report saved to: {report_path}")

    if not args.output:
        print(f"\nRendered {len(scene)} primitives on a "
              f"{geometry.canvas_width:.0f}x{geometry.canvas_height:.0f} canvas")
        if sounding is not None:
            print_indices(sounding)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skewtlogp",
        description="skewtlogp: Skew-T/Log-P diagrams for atmospheric soundings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Render a sounding to PNG at view resolution
    skewtlogp --sounding sounding.json --output skewt.png

    # High-resolution export with a config file
    skewtlogp --sounding sounding.csv --config plot.yaml --export -o skewt.pdf

    # Blank diagram as a scene description
    skewtlogp --blank --output blank.json

    # Print derived indices only
    skewtlogp --sounding sounding.yaml
        """,
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"skewtlogp {__version__}",
    )

    # Input options
    parser.add_argument(
        "-s", "--sounding",
        type=str,
        help="Sounding file (JSON, YAML or CSV)",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Plot configuration file (JSON or YAML)",
    )

    # Render options
    parser.add_argument(
        "--export",
        action="store_true",
        help="Use the high-resolution export canvas",
    )
    parser.add_argument(
        "--blank",
        action="store_true",
        help="Render the diagram without a sounding",
    )
    parser.add_argument(
        "--no-annotations",
        action="store_true",
        help="Omit location, time and index text",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        help="Output file path (.json scene, .png, .svg or .pdf)",
    )
    parser.add_argument(
        "-f", "--format",
        type=str,
        choices=["json", "png", "svg", "pdf"],
        help="Output format (defaults to the output file extension, then to output.format "
             "from the configuration)",
    )
    parser.add_argument(
        "-r", "--report",
        type=str,
        help="Also save the sounding and its indices (.json or .csv)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        return run_plot(args)
    except Exception as e:
        logging.exception(f"Rendering failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
