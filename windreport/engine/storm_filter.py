"""Row-level matching of NOAA Storm Events details records.

Decides whether one CSV row is a wind event near the geocoded target and,
if so, normalizes it into a StormEvent. Checks run in a fixed order and stop
at the first failure:

  event type -> state -> county (fuzzy) -> begin date / cutoff -> magnitude

Coordinates are extracted last and never exclude a row.
"""

import math
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from windreport.models.storm import GeoTarget, RawEventRecord, StormEvent

WIND_EVENT_TYPES: frozenset[str] = frozenset({
    "High Wind",
    "Thunderstorm Wind",
    "Marine Thunderstorm Wind",
    "Marine High Wind",
    "Strong Wind",
    "Tropical Storm",
    "Hurricane",
    "Hurricane (Typhoon)",
})

# MAGNITUDE_TYPE values for gusts reported in knots (estimated / measured)
KNOT_MAGNITUDE_TYPES: frozenset[str] = frozenset({"EG", "MG"})
KNOTS_TO_MPH = 1.15078

MONTHS: dict[str, int] = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})")
_DASH_DATE = re.compile(r"^(\d{1,2})-([A-Z]{3})-(\d{2,4})", re.IGNORECASE)
_COUNTY_SUFFIX = re.compile(r"\s+county$", re.IGNORECASE)
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


class Exclusion(Enum):
    EVENT_TYPE = "event_type"
    STATE = "state"
    COUNTY = "county"
    DATE = "date"
    BEFORE_CUTOFF = "before_cutoff"
    MAGNITUDE = "magnitude"


@dataclass(frozen=True)
class RowOutcome:
    event: StormEvent | None = None
    excluded: Exclusion | None = None

    @property
    def matched(self) -> bool:
        return self.event is not None


def normalize_name(value: str | None) -> str:
    """Lowercase, drop a trailing "county", and reduce punctuation to single spaces."""
    if not value:
        return ""
    name = _COUNTY_SUFFIX.sub("", str(value).lower())
    name = _NON_ALNUM.sub(" ", name)
    return _WHITESPACE.sub(" ", name).strip()


def county_matches(target_county: str, record_county: str) -> bool:
    """Approximate county match between the geocoder's and NOAA's naming.

    Both arguments must already be normalized. Accepts equality, containment
    in either direction, or a shared first word, so "suffolk" matches
    "suffolk co" and "st louis" matches "st louis city". This knowingly
    admits some false positives ("washington" vs "washington parish"), and
    a blank record county is contained in every name so it always matches.
    """
    if not target_county:
        return False
    if record_county == target_county:
        return True
    if target_county in record_county or record_county in target_county:
        return True
    return record_county.split(" ")[0] == target_county.split(" ")[0]


def parse_noaa_date(value: str | None) -> date | None:
    """Parse a NOAA begin date.

    Supports "MM/DD/YYYY ..." and "DD-MON-YY ..." (2 or 4 digit year; 2 digit
    years are 20xx). Anything after the date (time of day) is ignored.
    """
    if not value:
        return None
    text = str(value).strip()

    m = _SLASH_DATE.match(text)
    if m:
        month, day, year = (int(g) for g in m.groups())
        return _safe_date(year, month, day)

    m = _DASH_DATE.match(text)
    if m:
        day_str, month_str, year_str = m.groups()
        month = MONTHS.get(month_str.upper())
        if month is None:
            return None
        year = int(year_str)
        if year < 100:
            year += 2000
        return _safe_date(year, month, int(day_str))

    return None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def wind_speed_mph(magnitude: str | None, magnitude_type: str | None) -> int | None:
    """Convert a MAGNITUDE / MAGNITUDE_TYPE pair to whole miles per hour.

    Knot gust types are converted; everything else is already mph. Returns
    None for missing, non-finite, or non-positive speeds.
    """
    speed = _parse_float(magnitude)
    if speed is None or not math.isfinite(speed):
        return None
    if (magnitude_type or "").strip().upper() in KNOT_MAGNITUDE_TYPES:
        speed *= KNOTS_TO_MPH
    mph = round_half_up(speed)
    if mph <= 0:
        return None
    return mph


def parse_coordinate(value: str | None) -> float | None:
    number = _parse_float(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def evaluate_row(row: RawEventRecord, target: GeoTarget, cutoff: date) -> RowOutcome:
    """Apply the matching rules to one row.

    Returns a RowOutcome holding either the normalized event or the first
    rule that excluded it.
    """
    event_type = (row.get("EVENT_TYPE") or "").strip()
    if event_type not in WIND_EVENT_TYPES:
        return RowOutcome(excluded=Exclusion.EVENT_TYPE)

    target_state = normalize_name(target.state)
    if target_state and normalize_name(row.get("STATE")) != target_state:
        return RowOutcome(excluded=Exclusion.STATE)

    target_county = normalize_name(target.county)
    if target_county and not county_matches(target_county, normalize_name(row.get("CZ_NAME"))):
        return RowOutcome(excluded=Exclusion.COUNTY)

    begin_date = parse_noaa_date(row.get("BEGIN_DATE_TIME") or row.get("BEGIN_DATE"))
    if begin_date is None:
        return RowOutcome(excluded=Exclusion.DATE)
    if begin_date < cutoff:
        return RowOutcome(excluded=Exclusion.BEFORE_CUTOFF)

    mph = wind_speed_mph(row.get("MAGNITUDE"), row.get("MAGNITUDE_TYPE"))
    if mph is None:
        return RowOutcome(excluded=Exclusion.MAGNITUDE)

    return RowOutcome(event=StormEvent(
        begin_date=begin_date,
        wind_speed_mph=mph,
        event_type=event_type,
        latitude=parse_coordinate(row.get("BEGIN_LAT")),
        longitude=parse_coordinate(row.get("BEGIN_LON")),
    ))


def match_row(row: RawEventRecord, target: GeoTarget, cutoff: date) -> StormEvent | None:
    return evaluate_row(row, target, cutoff).event
