#!/usr/bin/env python3
"""
Generate odour predictions for a site from JSON data files.

Loads emission sources and weather snapshots, runs one regeneration pass
and writes the batch to a JSON prediction store.  Intended for schedulers
(cron, CI jobs) and for offline inspection of model output.

Usage:
    uv run python experiments/run_generation.py --site demo-wwtp
    uv run python experiments/run_generation.py --site plant-7 \\
        --sources data/samples/sources.json --weather data/samples/weather.json \\
        --store predictions.json --model gaussian-v1 --validity-hours 2
"""

import sys
import os
import argparse
import json
import logging

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import DEFAULT_MODEL_VERSION, DEFAULT_VALIDITY_HOURS
from data.interfaces import FileSiteDataProvider, MockSiteDataProvider
from data.mock_data import DEMO_SITE_ID
from data.prediction_store import open_store
from models.dispersion import ModelVersion
from predictions.lifecycle import IncompleteWeatherError, PredictionError, generate_predictions

logger = logging.getLogger("run_generation")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate odour dispersion predictions for a site.")
    parser.add_argument("--site", default=DEMO_SITE_ID, help="Site identifier")
    parser.add_argument("--sources", help="JSON file of emission sources (default: built-in demo site)")
    parser.add_argument("--weather", help="JSON file of weather snapshots (required with --sources)")
    parser.add_argument("--store", help="JSON prediction store to update (default: in-memory only)")
    parser.add_argument(
        "--model",
        default=DEFAULT_MODEL_VERSION,
        choices=[v.value for v in ModelVersion],
        help="Dispersion model version",
    )
    parser.add_argument(
        "--validity-hours",
        type=float,
        default=DEFAULT_VALIDITY_HOURS,
        help="Length of the validity window in hours",
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)
    if bool(args.sources) != bool(args.weather):
        parser.error("--sources and --weather must be given together")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.sources:
        provider = FileSiteDataProvider(args.sources, args.weather)
    else:
        provider = MockSiteDataProvider()
    store = open_store(args.store)

    try:
        result = generate_predictions(
            args.site, provider, store,
            validity_hours=args.validity_hours,
            model_version=args.model,
        )
    except IncompleteWeatherError as exc:
        logger.error("No weather data for site %s: %s", args.site, exc)
        return 2
    except PredictionError as exc:
        logger.error("Failed: %s", exc)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result.message)
        if result.weather is not None:
            w = result.weather
            print(
                f"  weather: {w.wind_speed_mps} m/s from {w.wind_direction_deg}°, "
                f"stability {w.stability_class}"
            )
        for pred in result.predictions:
            print(
                f"  {pred.source_id:<20} peak {pred.peak_intensity:>5}  "
                f"contours {len(pred.geometry.contours)}  valid to {pred.valid_to:%H:%M}"
            )
        if result.skipped:
            print(f"  skipped: {', '.join(o.source_id for o in result.skipped)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
