"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

from packager_codes.common.fs import write_json

COUNTER_KEYS = (
    "categories_fetched",
    "categories_valid",
    "establishments",
    "countries",
    "skipped_no_approval",
    "geocode_lookups",
    "geocode_requests",
    "geocode_cache_hits",
    "geocode_errors",
    "skipped_no_coordinates",
    "packager_codes",
)


def build_run_summary(run_id: str, stats: dict, error_code: str | None = None) -> dict:
    counters = {key: int(stats.get(key, 0)) for key in COUNTER_KEYS}
    status = "success"
    if error_code is not None:
        status = "error"
    elif counters["geocode_errors"] > 0:
        status = "partial"
    return {
        "run_id": run_id,
        "status": status,
        "error_code": error_code,
        "counters": counters,
    }


def write_run_summary(path: Path, run_id: str, stats: dict, error_code: str | None = None) -> Path:
    write_json(path, build_run_summary(run_id, stats, error_code=error_code))
    return path
