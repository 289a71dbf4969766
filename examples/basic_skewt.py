#!/usr/bin/env python
"""
Basic Skew-T/Log-P example.

This script builds a sounding from a few isobaric levels, prints the
derived stability indices and saves the diagram both as a PNG image and as
a JSON scene description.
"""

from datetime import datetime

from skewtlogp.plot import MatplotlibRenderer, PlotGeometry, render_skewt
from skewtlogp.sounding import Sounding, SoundingMetadata, SurfaceObservation, WindLevel
from skewtlogp.utils.output import OutputFormatter


def main():
    # Isobaric levels [Pa] with temperature [K] and relative humidity [%]
    pressures = [100000, 92500, 85000, 70000, 50000, 40000, 30000, 25000, 20000, 15000, 10000]
    temperatures = [299.0, 294.0, 290.0, 280.0, 262.0, 251.0, 236.0, 228.0, 220.0, 214.0, 208.0]
    humidity = [75, 70, 65, 50, 35, 30, 25, 20, 15, 10, 5]

    surface = SurfaceObservation(
        temperature_2m_k=300.5,
        dewpoint_2m_k=294.0,
        pressure_pa=98800.0,
        mslp_pa=101100.0,
    )

    print("Creating sounding...")
    sounding = Sounding.from_arrays(
        pressures,
        temperatures,
        surface,
        relative_humidity_pct=humidity,
        winds=(
            WindLevel(85000.0, 3.0, 12.0),
            WindLevel(70000.0, 8.0, 10.0),
            WindLevel(50000.0, 18.0, 6.0),
        ),
        metadata=SoundingMetadata(
            longitude=-97.5,
            latitude=35.4,
            analysis_time=datetime(2016, 5, 24, 0, 0),
            valid_time=datetime(2016, 5, 24, 0, 0),
            model_name="Example",
        ),
    )

    # Display derived indices
    indices = sounding.derived()
    print("\n=== Derived Indices ===")
    print(f"LCL: {indices.lcl_pressure_pa / 100:.0f} hPa, {indices.lcl_temperature_k - 273.15:.1f} C")
    print(f"K-Index: {indices.k_index:.0f}")
    print(f"Total Totals: {indices.total_totals:.0f}")
    print(f"SWEAT: {indices.sweat:.0f}")

    # Lay out the diagram on a screen-sized canvas
    geometry = PlotGeometry(900.0, 1200.0, line_scale=1.0)
    scene = render_skewt(sounding, geometry)
    print(f"\nScene primitives: {len(scene)}")
    print(f"Layers: {', '.join(scene.layers())}")

    # Save results
    MatplotlibRenderer(dpi=100).save(scene, "basic_skewt.png")
    OutputFormatter().save_scene(scene, "basic_skewt_scene.json")
    print("\nResults saved to: basic_skewt.png, basic_skewt_scene.json")


if __name__ == "__main__":
    main()
