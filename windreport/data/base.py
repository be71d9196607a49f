"""Protocol definitions for the collaborators of the storm event pipeline.

Concrete implementations live next to this module; tests substitute
in-memory versions.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from windreport.models.storm import DatasetFileRef, GeoTarget, RawEventRecord


@runtime_checkable
class GeocodeSource(Protocol):
    async def geocode(self, address: str) -> GeoTarget | None:
        """Resolve a free-text address, or None if it cannot be found."""
        ...


@runtime_checkable
class DatasetDirectory(Protocol):
    async def resolve(self, year: int) -> DatasetFileRef | None:
        """Return the authoritative dataset file for a year, if any."""
        ...


@runtime_checkable
class DatasetStore(Protocol):
    async def ensure(self, filename: str) -> Path:
        """Make sure a local copy of the dataset file exists and return its path."""
        ...


@runtime_checkable
class RecordSource(Protocol):
    def iter_records(self, path: Path) -> Iterator[RawEventRecord]:
        """Lazily yield rows of a dataset file keyed by header column."""
        ...
