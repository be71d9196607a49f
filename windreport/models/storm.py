"""Storm event data types."""

from dataclasses import dataclass
from datetime import date

# One CSV row keyed by header column. Short rows leave missing columns as None.
RawEventRecord = dict[str, str | None]


@dataclass(frozen=True)
class GeoTarget:
    display_name: str
    latitude: float
    longitude: float
    county: str | None = None  # suffix-stripped, e.g. "Suffolk"
    state: str | None = None  # full name, e.g. "New York"


@dataclass(frozen=True)
class StormEvent:
    begin_date: date
    wind_speed_mph: int
    event_type: str
    latitude: float | None = None
    longitude: float | None = None
    distance_miles: float | None = None  # only set by radius filtering

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class DatasetFileRef:
    """One yearly Storm Events details file in the NOAA listing."""
    filename: str
    year: int
    created: str  # YYYYMMDD creation suffix; fixed width so string order is date order


@dataclass(frozen=True)
class WindEventRecord:
    date: str  # MM/DD/YYYY
    wind_speed_mph: int
    event_type: str
    distance_miles: float | None = None


@dataclass(frozen=True)
class WindReport:
    address: str
    county: str | None
    state: str | None
    radius_miles: float | None
    results: list[WindEventRecord]
