"""Shared fixtures for the wind report tests.

Target: Suffolk County, NY. Request date: 2026-10-19, so the lookback
cutoff is 2016-10-19 and years 2016-2026 are scanned.
"""

from datetime import date
from pathlib import Path

import pytest

from windreport.models.storm import DatasetFileRef, GeoTarget

REQUEST_DATE = date(2026, 10, 19)
CUTOFF = date(2016, 10, 19)


def details_filename(year: int, created: str = "20250101") -> str:
    return f"StormEvents_details-ftp_v1.0_d{year}_c{created}.csv.gz"


class StaticDirectory:
    """Resolves years to fixed filenames; years listed in `failing` raise."""

    def __init__(self, years: list[int], failing: set[int] | None = None):
        self.years = set(years)
        self.failing = failing or set()
        self.resolved: list[int] = []

    async def resolve(self, year: int) -> DatasetFileRef | None:
        self.resolved.append(year)
        if year in self.failing:
            raise RuntimeError(f"listing unavailable for {year}")
        if year not in self.years:
            return None
        return DatasetFileRef(filename=details_filename(year), year=year, created="20250101")


class PassthroughStore:
    def __init__(self):
        self.ensured: list[str] = []

    async def ensure(self, filename: str) -> Path:
        self.ensured.append(filename)
        return Path(filename)


class StaticRecordSource:
    """In-memory rows keyed by dataset filename."""

    def __init__(self, rows_by_filename: dict[str, list[dict]]):
        self.rows_by_filename = rows_by_filename

    def iter_records(self, path: Path):
        yield from self.rows_by_filename.get(Path(path).name, [])


@pytest.fixture
def request_date() -> date:
    return REQUEST_DATE


@pytest.fixture
def cutoff() -> date:
    return CUTOFF


@pytest.fixture
def suffolk_target() -> GeoTarget:
    return GeoTarget(
        display_name="Suffolk County, New York, United States",
        latitude=40.9,
        longitude=-72.7,
        county="Suffolk",
        state="New York",
    )


@pytest.fixture
def make_row():
    """Factory for a matching Suffolk County thunderstorm wind row; override any column."""
    def _make(**overrides) -> dict:
        row = {
            "EVENT_TYPE": "Thunderstorm Wind",
            "STATE": "NEW YORK",
            "CZ_NAME": "SUFFOLK",
            "BEGIN_DATE_TIME": "14-AUG-23 15:42:00",
            "MAGNITUDE": "50",
            "MAGNITUDE_TYPE": "EG",
            "BEGIN_LAT": "40.9",
            "BEGIN_LON": "-72.7",
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def static_directory():
    return StaticDirectory


@pytest.fixture
def passthrough_store():
    return PassthroughStore()


@pytest.fixture
def static_records():
    return StaticRecordSource
