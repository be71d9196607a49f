"""End-to-end tests for the storm event service with in-memory collaborators."""

import gzip
from datetime import date

import httpx
import pytest

from windreport.data.noaa_directory import DirectoryListingCache, StormEventsDirectory
from windreport.data.noaa_files import DatasetFileCache
from windreport.data.storm_events import StormEventService
from windreport.engine.storm_filter import WIND_EVENT_TYPES


def _filename(year: int) -> str:
    return f"StormEvents_details-ftp_v1.0_d{year}_c20250101.csv.gz"


@pytest.fixture
def suffolk_rows(make_row):
    """Rows spread over 2019 and 2023; only some match Suffolk County, NY."""
    return {
        _filename(2019): [
            make_row(BEGIN_DATE_TIME="03-MAR-19 08:00:00", MAGNITUDE="45", MAGNITUDE_TYPE="", EVENT_TYPE="High Wind",
                     BEGIN_LAT="", BEGIN_LON=""),
            make_row(BEGIN_DATE_TIME="04-MAR-19 08:00:00", CZ_NAME="NASSAU"),
            make_row(BEGIN_DATE_TIME="05-MAR-19 08:00:00", EVENT_TYPE="Hail"),
        ],
        _filename(2023): [
            make_row(BEGIN_DATE_TIME="14-AUG-23 15:42:00"),  # 58 mph at target
            make_row(BEGIN_DATE_TIME="14-AUG-23 16:10:00", EVENT_TYPE="High Wind"),  # dup of (date, speed)
            make_row(BEGIN_DATE_TIME="20-DEC-23 01:00:00", CZ_NAME="SUFFOLK CO", MAGNITUDE="60", MAGNITUDE_TYPE="MG",
                     BEGIN_LAT="40.9", BEGIN_LON="-72.6"),  # ~5.2 mi east
            make_row(BEGIN_DATE_TIME="01-JUL-23 12:00:00", MAGNITUDE="40", MAGNITUDE_TYPE="",
                     BEGIN_LAT="41.3", BEGIN_LON="-72.7"),  # ~27.6 mi north
            make_row(BEGIN_DATE_TIME="02-JUL-23 12:00:00", STATE="CONNECTICUT"),
        ],
    }


@pytest.fixture
def service(static_directory, passthrough_store, static_records, suffolk_rows, request_date):
    return StormEventService(
        directory=static_directory([2019, 2023]),
        store=passthrough_store,
        records=static_records(suffolk_rows),
        today=lambda: request_date,
    )


class TestFindEvents:
    async def test_scans_every_year_in_window(self, service, suffolk_target):
        await service.find_events(suffolk_target)
        assert service.directory.resolved == list(range(2016, 2027))
        assert service.store.ensured == [_filename(2019), _filename(2023)]

    async def test_only_matching_rows(self, service, suffolk_target, cutoff):
        events = await service.find_events(suffolk_target)
        assert len(events) == 5
        for e in events:
            assert e.begin_date >= cutoff
            assert e.event_type in WIND_EVENT_TYPES
            assert e.wind_speed_mph > 0

    async def test_failing_year_does_not_abort(self, static_directory, passthrough_store, static_records,
                                               suffolk_rows, suffolk_target, request_date):
        service = StormEventService(
            directory=static_directory([2019, 2023], failing={2019, 2020}),
            store=passthrough_store,
            records=static_records(suffolk_rows),
            today=lambda: request_date,
        )
        events = await service.find_events(suffolk_target)
        assert {e.begin_date.year for e in events} == {2023}
        assert service.directory.resolved[-1] == 2026

    async def test_download_failure_counts_as_zero_events(self, static_directory, static_records, suffolk_rows,
                                                          suffolk_target, request_date):
        class FailingStore:
            async def ensure(self, filename):
                if "d2023" in filename:
                    raise OSError("disk full")
                return filename

        service = StormEventService(
            directory=static_directory([2019, 2023]),
            store=FailingStore(),
            records=static_records(suffolk_rows),
            today=lambda: request_date,
        )
        events = await service.find_events(suffolk_target)
        assert [e.begin_date for e in events] == [date(2019, 3, 3)]


class TestBuildReport:
    async def test_county_wide(self, service, suffolk_target):
        report = await service.build_report(suffolk_target)

        assert report.radius_miles is None
        assert report.county == "Suffolk"
        assert report.state == "New York"
        assert [(r.date, r.wind_speed_mph) for r in report.results] == [
            ("12/20/2023", 69),
            ("08/14/2023", 58),
            ("07/01/2023", 40),
            ("03/03/2019", 45),
        ]
        assert report.results[1].event_type == "Thunderstorm Wind"
        assert all(r.distance_miles is None for r in report.results)

    async def test_with_radius(self, service, suffolk_target):
        report = await service.build_report(suffolk_target, radius_miles=10)

        assert report.radius_miles == 10
        assert [(r.date, r.distance_miles) for r in report.results] == [
            ("12/20/2023", 5.2),
            ("08/14/2023", 0.0),
        ]


class TestWithRealCollaborators:
    async def test_gzip_file_from_cache_dir(self, tmp_path, suffolk_target, request_date):
        listing = f'<a href="{_filename(2023)}">{_filename(2023)}</a>'

        def handler(request):
            if request.url.path.endswith("/"):
                return httpx.Response(200, text=listing)
            return httpx.Response(404)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        base_url = "https://noaa.test/csvfiles/"

        cache_dir = tmp_path / "noaa"
        cache_dir.mkdir()
        with gzip.open(cache_dir / _filename(2023), "wt", encoding="utf-8", newline="") as f:
            f.write("EVENT_TYPE,STATE,CZ_NAME,BEGIN_DATE_TIME,MAGNITUDE,MAGNITUDE_TYPE,BEGIN_LAT,BEGIN_LON\n")
            f.write("Thunderstorm Wind,NEW YORK,SUFFOLK,14-AUG-23 15:42:00,50,EG,40.9,-72.7\n")
            f.write("Hail,NEW YORK,SUFFOLK,14-AUG-23 15:42:00,1.00,,40.9,-72.7\n")

        service = StormEventService(
            directory=StormEventsDirectory(DirectoryListingCache(client=client, url=base_url)),
            store=DatasetFileCache(cache_dir=cache_dir, base_url=base_url, client=client),
            today=lambda: request_date,
        )
        report = await service.build_report(suffolk_target)

        assert [(r.date, r.wind_speed_mph, r.event_type) for r in report.results] == [
            ("08/14/2023", 58, "Thunderstorm Wind"),
        ]
