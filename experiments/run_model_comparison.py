#!/usr/bin/env python3
"""
Model Version Comparison.

Runs both dispersion model versions for a single source at the map center
across every stability class and a sweep of wind speeds, and reports
footprint length, width, area and peak intensity side by side.  Useful
when reviewing how historical predictions stamped with different
``model_version`` tags relate to each other.

Usage:
    uv run python experiments/run_model_comparison.py
    uv run python experiments/run_model_comparison.py --speeds 1 3 5 8 --base-intensity 4
    uv run python experiments/run_model_comparison.py --html comparison.html
"""

import sys
import os
import argparse
from datetime import datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import DEFAULT_BASE_INTENSITY, STABILITY_CLASSES
from data.weather import WeatherObservation
from models.dispersion import ModelVersion, compute_prediction_geometry
from models.intensity import round_intensity
from models.plume_geometry import polygon_area
from visualization.plots import create_footprint_comparison_figure

CENTER = (50.0, 50.0)


def compare(speeds, base_intensity, wind_direction=270.0):
    """Return one row per (speed, stability class, model version)."""
    rows = []
    now = datetime.now(timezone.utc)
    for speed in speeds:
        for sc in STABILITY_CLASSES:
            weather = WeatherObservation(
                site_id="comparison",
                recorded_at=now,
                wind_speed_mps=speed,
                wind_direction_deg=wind_direction,
                stability_class=sc,
            )
            for version in ModelVersion:
                geom = compute_prediction_geometry(version, CENTER, base_intensity, weather)
                rows.append({
                    "wind_speed": speed,
                    "stability_class": sc,
                    "model_version": version.value,
                    "length": geom.length,
                    "max_width": geom.max_width,
                    "area": polygon_area(geom.coordinates),
                    "peak_intensity": round_intensity(geom.peak_intensity),
                    "contours": len(geom.contours),
                })
    return rows


def print_table(rows):
    header = f"{'ws':>5} {'class':>5} {'model':>12} {'length':>8} {'width':>7} {'area':>8} {'peak':>6} {'ctr':>4}"
    print(header)
    print("-" * len(header))
    for r in rows:
        print(
            f"{r['wind_speed']:>5.1f} {r['stability_class']:>5} {r['model_version']:>12} "
            f"{r['length']:>8.2f} {r['max_width']:>7.2f} {r['area']:>8.1f} "
            f"{r['peak_intensity']:>6.1f} {r['contours']:>4d}"
        )


def main():
    parser = argparse.ArgumentParser(description="Compare gaussian-v1 and plume-v2 footprints.")
    parser.add_argument("--speeds", type=float, nargs="+", default=[1.0, 3.0, 5.0],
                        help="Wind speeds to sweep (m/s)")
    parser.add_argument("--base-intensity", type=float, default=DEFAULT_BASE_INTENSITY,
                        help="Source base intensity (1-5)")
    parser.add_argument("--html", help="Write a grouped bar chart of areas at the first speed to this file")
    args = parser.parse_args()

    rows = compare(args.speeds, args.base_intensity)
    print_table(rows)

    if args.html:
        first = [r for r in rows if r["wind_speed"] == args.speeds[0]]
        create_footprint_comparison_figure(first).write_html(args.html)
        print(f"\nWrote {args.html}")


if __name__ == "__main__":
    main()
