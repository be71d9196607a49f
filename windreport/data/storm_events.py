"""Storm event service: runs the per-year NOAA pipeline for a geocoded target.

Flow per year: directory listing -> dataset download (cached) -> streaming
CSV parse -> row matching. Years run one after another; a failure in one
year is logged and that year contributes no events.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Callable
from datetime import date, datetime, timezone
from pathlib import Path

from windreport.config import settings
from windreport.data.base import DatasetDirectory, DatasetStore, RecordSource
from windreport.data.noaa_directory import StormEventsDirectory
from windreport.data.noaa_files import DatasetFileCache
from windreport.data.records import GzipCsvRecordSource
from windreport.engine.storm_filter import evaluate_row
from windreport.engine.storm_report import build_report, lookback_cutoff, years_to_scan
from windreport.models.storm import GeoTarget, StormEvent, WindReport

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class StormEventService:
    def __init__(
        self,
        directory: DatasetDirectory | None = None,
        store: DatasetStore | None = None,
        records: RecordSource | None = None,
        lookback_years: int | None = None,
        today: Callable[[], date] = utc_today,
    ):
        self.directory = directory or StormEventsDirectory()
        self.store = store or DatasetFileCache()
        self.records = records or GzipCsvRecordSource()
        self.lookback_years = lookback_years or settings.lookback_years
        self.today = today

    async def find_events(self, target: GeoTarget) -> list[StormEvent]:
        """All matching events in the lookback window, in accumulation order."""
        today = self.today()
        cutoff = lookback_cutoff(today, self.lookback_years)

        events: list[StormEvent] = []
        for year in years_to_scan(cutoff, today):
            try:
                year_events = await self.events_for_year(year, target, cutoff)
            except Exception as e:
                logger.warning("Error processing year %d: %s", year, e)
                continue
            logger.info("Year %d: %d events", year, len(year_events))
            events.extend(year_events)
        return events

    async def events_for_year(self, year: int, target: GeoTarget, cutoff: date) -> list[StormEvent]:
        ref = await self.directory.resolve(year)
        if ref is None:
            return []
        path = await self.store.ensure(ref.filename)
        return await asyncio.to_thread(self._scan_file, path, target, cutoff)

    def _scan_file(self, path: Path, target: GeoTarget, cutoff: date) -> list[StormEvent]:
        events = []
        exclusions: Counter = Counter()
        for row in self.records.iter_records(path):
            outcome = evaluate_row(row, target, cutoff)
            if outcome.matched:
                events.append(outcome.event)
            else:
                exclusions[outcome.excluded.value] += 1
        logger.debug("Scanned %s: %d matched, excluded %s", path, len(events), dict(exclusions))
        return events

    async def build_report(self, target: GeoTarget, radius_miles: float = 0.0) -> WindReport:
        events = await self.find_events(target)
        report = build_report(events, target, radius_miles)
        logger.info("Total unique events: %d", len(report.results))
        return report
