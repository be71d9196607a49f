"""Post-processing of matched storm events into the final report.

Order of operations, applied to the events of every scanned year:
  sort (newest first) -> radius filter (optional) -> dedupe -> shape
"""

import math
from dataclasses import replace
from datetime import date

from windreport.models.storm import GeoTarget, StormEvent, WindEventRecord, WindReport

EARTH_RADIUS_MILES = 3958.8
DEFAULT_LOOKBACK_YEARS = 10


def lookback_cutoff(today: date, years: int = DEFAULT_LOOKBACK_YEARS) -> date:
    """Same calendar day `years` earlier; Feb 29 falls back to Feb 28."""
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)


def years_to_scan(cutoff: date, today: date) -> list[int]:
    return list(range(cutoff.year, today.year + 1))


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def format_date(value: date) -> str:
    return value.strftime("%m/%d/%Y")


def sort_events(events: list[StormEvent]) -> list[StormEvent]:
    """Newest first. Stable, so same-day events keep accumulation order."""
    return sorted(events, key=lambda e: e.begin_date, reverse=True)


def apply_radius(events: list[StormEvent], target: GeoTarget, radius_miles: float) -> list[StormEvent]:
    """Keep events within `radius_miles` of the target, with distance attached.

    A radius of zero or less disables filtering and leaves events untouched.
    Events without coordinates cannot be placed and are dropped.
    """
    if not radius_miles or radius_miles <= 0:
        return list(events)

    kept = []
    for event in events:
        if not event.has_coordinates:
            continue
        distance = haversine_miles(target.latitude, target.longitude, event.latitude, event.longitude)
        if distance > radius_miles:
            continue
        kept.append(replace(event, distance_miles=round(distance, 1)))
    return kept


def dedupe_events(events: list[StormEvent]) -> list[StormEvent]:
    """Collapse events sharing (date, wind speed); the first occurrence wins."""
    seen: set[tuple[str, int]] = set()
    unique = []
    for event in events:
        key = (format_date(event.begin_date), event.wind_speed_mph)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def to_record(event: StormEvent) -> WindEventRecord:
    return WindEventRecord(
        date=format_date(event.begin_date),
        wind_speed_mph=event.wind_speed_mph,
        event_type=event.event_type,
        distance_miles=event.distance_miles,
    )


def build_report(events: list[StormEvent], target: GeoTarget, radius_miles: float = 0.0) -> WindReport:
    """Sort, radius-filter, dedupe and shape events for one target."""
    ordered = sort_events(events)
    nearby = apply_radius(ordered, target, radius_miles)
    unique = dedupe_events(nearby)
    return WindReport(
        address=target.display_name,
        county=target.county,
        state=target.state,
        radius_miles=radius_miles if radius_miles and radius_miles > 0 else None,
        results=[to_record(e) for e in unique],
    )
