"""Packager code CSV export."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import IO, Iterable

from packager_codes.common.constants import CSV_HEADERS
from packager_codes.common.errors import WriteError
from packager_codes.common.fs import ensure_dir
from packager_codes.common.models import PackagerCode


def _serialize_row(record: PackagerCode) -> dict:
    row = record.to_dict()
    return {key: row[key] for key in CSV_HEADERS}


def write_packager_codes_csv(stream: IO[str], records: Iterable[PackagerCode]) -> int:
    """Write header plus one row per record, in input order. Returns the row count."""
    count = 0
    try:
        writer = csv.DictWriter(stream, fieldnames=list(CSV_HEADERS), lineterminator="\n")
        writer.writeheader()
        for record in records:
            writer.writerow(_serialize_row(record))
            count += 1
        stream.flush()
    except OSError as exc:
        raise WriteError(f"Failed to write packager codes CSV: {exc}") from exc
    return count


def write_packager_codes_file(path: Path, records: Iterable[PackagerCode]) -> int:
    try:
        ensure_dir(path.parent)
        with path.open("w", encoding="utf-8", newline="") as f:
            return write_packager_codes_csv(f, records)
    except OSError as exc:
        raise WriteError(f"Failed to write packager codes CSV to {path}: {exc}") from exc
