"""CLI for looking up historical wind events near an address.

Usage:
    python -m windreport.cli "100 Main St, Riverhead, NY"
    python -m windreport.cli "Suffolk County, NY" --radius 10
    python -m windreport.cli "..." --json
"""

import argparse
import asyncio
import json
import logging
import sys

from windreport.api.schemas import WindReportResponse
from windreport.config import settings
from windreport.data.geocode import NominatimGeocoder
from windreport.data.noaa_files import DatasetFileCache
from windreport.data.storm_events import StormEventService
from windreport.models.storm import WindReport


def print_report(report: WindReport) -> None:
    area = ", ".join(p for p in (report.county, report.state) if p) or "unknown area"
    scope = f"within {report.radius_miles:g} mi" if report.radius_miles else "county-wide"

    print(f"\n{'=' * 60}")
    print(f"  Wind Report: {report.address}")
    print(f"{'=' * 60}")
    print(f"  Area:    {area} ({scope})")
    print(f"  Events:  {len(report.results)}")
    print()

    for r in report.results:
        distance = f"{r.distance_miles:.1f} mi" if r.distance_miles is not None else ""
        print(f"  {r.date}  {r.wind_speed_mph:>4} mph  {r.event_type:<26} {distance}")
    print()


async def main() -> int:
    parser = argparse.ArgumentParser(description="NOAA wind storm history for a US address")
    parser.add_argument("address", help="Street address, city, or county")
    parser.add_argument("--radius", type=float, default=0.0, help="Radius in miles (default: county-wide)")
    parser.add_argument("--json", action="store_true", help="Print the API JSON body instead of a table")
    parser.add_argument("--cache-dir", default=None, help=f"Dataset cache directory (default: {settings.cache_dir})")

    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    address = args.address.strip()
    if not address:
        parser.error("address is required")

    target = await NominatimGeocoder().geocode(address)
    if target is None:
        print("Could not find that address. Try including city and state.", file=sys.stderr)
        return 1

    service = StormEventService(store=DatasetFileCache(cache_dir=args.cache_dir))

    report = await service.build_report(target, max(0.0, args.radius))

    if args.json:
        body = WindReportResponse.from_report(report).model_dump(by_alias=True)
        print(json.dumps(body, indent=2))
    else:
        print_report(report)
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
