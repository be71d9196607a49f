"""Streaming reader for gzip-compressed NOAA CSV exports.

Rows are decoded and parsed lazily, one at a time; the decompressed file is
never held in memory.
"""

import csv
import gzip
from collections.abc import Iterator
from pathlib import Path

from windreport.models.storm import RawEventRecord

# Extra trailing fields on malformed rows are collected here instead of failing.
EXTRA_FIELDS_KEY = "_extra"

# Narrative columns can exceed the csv module's 128 KiB default
FIELD_SIZE_LIMIT = 10 * 1024 * 1024


class GzipCsvRecordSource:
    """Header-keyed rows from a .csv.gz file.

    Lenient about ragged rows and stray quotes; a corrupt gzip stream raises
    (OSError / EOFError) from the iterator and ends the file.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def iter_records(self, path: Path) -> Iterator[RawEventRecord]:
        if csv.field_size_limit() < FIELD_SIZE_LIMIT:
            csv.field_size_limit(FIELD_SIZE_LIMIT)
        with gzip.open(path, "rt", encoding=self.encoding, errors="replace", newline="") as f:
            reader = csv.DictReader(f, restkey=EXTRA_FIELDS_KEY, strict=False)
            yield from reader
