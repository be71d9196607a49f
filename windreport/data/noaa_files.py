"""Local disk cache of NOAA Storm Events dataset files.

Filenames carry NOAA's creation-date suffix, so a cached file is never stale
for its name and is never re-downloaded or evicted.
"""

import logging
import tempfile
from pathlib import Path

import httpx

from windreport.config import settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class DatasetFileCache:
    def __init__(
        self,
        cache_dir: str | Path | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.cache_dir = Path(cache_dir or settings.cache_dir)
        self.base_url = base_url or settings.noaa_dir_url
        self.client = client

    def path_for(self, filename: str) -> Path:
        return self.cache_dir / filename

    async def ensure(self, filename: str) -> Path:
        """Return the cached path for `filename`, downloading it first if missing.

        Raises httpx.HTTPStatusError on a non-success download; nothing is
        left in the cache in that case.
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(filename)
        if path.exists():
            logger.debug("Dataset cache hit: %s", path)
            return path

        logger.info("Downloading %s...", filename)
        if self.client is not None:
            await self._download(self.client, filename, path)
        else:
            async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
                await self._download(client, filename, path)
        logger.info("Downloaded %s", filename)
        return path

    async def _download(self, client: httpx.AsyncClient, filename: str, path: Path) -> None:
        # Each download writes its own temp file; the rename publishes it whole
        with tempfile.NamedTemporaryFile(
            dir=self.cache_dir, prefix=f"{filename}.", suffix=".part", delete=False
        ) as f:
            partial = Path(f.name)
        try:
            async with client.stream("GET", f"{self.base_url}{filename}") as resp:
                resp.raise_for_status()
                with open(partial, "wb") as f:
                    async for chunk in resp.aiter_bytes(CHUNK_SIZE):
                        f.write(chunk)
            partial.replace(path)
        finally:
            partial.unlink(missing_ok=True)
