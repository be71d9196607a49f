"""NOAA Storm Events directory listing: discovers the current file for each year.

The listing at the bulk CSV directory is plain HTML. Each year can appear
several times when NOAA reprocesses it; the file with the latest creation
suffix is the one to use.
"""

import logging
import re
import time
from collections.abc import Callable

import httpx

from windreport.config import settings
from windreport.models.storm import DatasetFileRef

logger = logging.getLogger(__name__)

DETAILS_FILE_PATTERN = re.compile(r"StormEvents_details-ftp_v1\.0_d(\d{4})_c(\d{8})\.csv\.gz")


def parse_listing(text: str) -> list[DatasetFileRef]:
    """Extract every details file reference from listing text, in first-seen order."""
    refs: dict[str, DatasetFileRef] = {}
    for match in DETAILS_FILE_PATTERN.finditer(text):
        filename = match.group(0)
        if filename not in refs:
            refs[filename] = DatasetFileRef(
                filename=filename,
                year=int(match.group(1)),
                created=match.group(2),
            )
    return list(refs.values())


def latest_for_year(refs: list[DatasetFileRef], year: int) -> DatasetFileRef | None:
    candidates = [r for r in refs if r.year == year]
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.created)


class DirectoryListingCache:
    """Holds the last fetched listing text for `ttl_seconds`.

    A failed fetch raises and leaves the previous state untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        url: str | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.url = url or settings.noaa_dir_url
        self.ttl_seconds = settings.directory_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self._text: str | None = None
        self._fetched_at: float = 0.0

    @property
    def is_fresh(self) -> bool:
        return self._text is not None and self.clock() - self._fetched_at < self.ttl_seconds

    async def get(self) -> str:
        if self.is_fresh:
            logger.debug("Directory listing cache hit")
            return self._text

        now = self.clock()
        text = await self._fetch()
        self._text = text
        self._fetched_at = now
        return text

    async def _fetch(self) -> str:
        logger.info("Fetching NOAA directory listing: %s", self.url)
        if self.client is not None:
            resp = await self.client.get(self.url)
            resp.raise_for_status()
            return resp.text

        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.text


class StormEventsDirectory:
    def __init__(self, listing: DirectoryListingCache | None = None):
        self.listing = listing or DirectoryListingCache()

    async def resolve(self, year: int) -> DatasetFileRef | None:
        """Return the latest details file for `year`, or None if NOAA has none.

        Raises httpx.HTTPStatusError if the listing cannot be fetched.
        """
        text = await self.listing.get()
        ref = latest_for_year(parse_listing(text), year)
        if ref is None:
            logger.info("No Storm Events details file listed for %d", year)
        return ref
