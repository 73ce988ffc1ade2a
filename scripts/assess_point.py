#!/usr/bin/env python3
"""CLI script to assess flood risk at one lon/lat point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Ensure the project source is importable when running the script directly.
_project_root = Path(__file__).resolve().parent.parent
_src = _project_root / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from floodrisk.core.config import Settings  # noqa: E402
from floodrisk.session import HazardSession  # noqa: E402


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Load the flood layers and print the assessment for a point as JSON."
    )
    parser.add_argument("--lon", type=float, required=True, help="Longitude in degrees.")
    parser.add_argument("--lat", type=float, required=True, help="Latitude in degrees.")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the GeoJSON layers (overrides FLOODRISK_DATA_DATA_DIR).",
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Fetch layers over HTTP from this base URL instead of the data directory.",
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()

    # Load settings from environment, then apply command-line overrides.
    settings = Settings()
    if args.data_dir:
        settings.data.data_dir = args.data_dir
    if args.base_url:
        settings.data.base_url = args.base_url

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = HazardSession(settings=settings)
    statuses = await session.load_all()
    for status in statuses:
        if not status.healthy:
            print(f"WARNING: layer {status.service} unavailable", file=sys.stderr)

    assessment = session.assess((args.lon, args.lat))
    print(json.dumps(assessment.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
