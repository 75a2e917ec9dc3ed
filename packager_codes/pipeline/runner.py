"""Stage orchestration: categories, establishments, geocode."""

from __future__ import annotations

import logging
import time

from packager_codes.common.constants import DIRECTORY_SOURCE, GEOCODER_SOURCE
from packager_codes.common.logging import log_event
from packager_codes.common.models import PackagerCode
from packager_codes.harvest.categories import fetch_categories, filter_valid_categories
from packager_codes.harvest.establishments import fetch_grouped_establishments
from packager_codes.pipeline.geocode import geocode_establishments


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def run_pipeline(
    client,
    geocoder,
    directory_config: dict,
    logger: logging.Logger,
    stats: dict | None = None,
) -> list[PackagerCode]:
    """Run the fetch and geocode stages, filling ``stats`` as each stage completes."""
    stats = stats if stats is not None else {}

    started = time.monotonic()
    log_event(logger, "stage start", stage="categories", event="STAGE_START", status="ok")
    fetched = fetch_categories(client, directory_config)
    categories = filter_valid_categories(fetched)
    stats["categories_fetched"] = len(fetched)
    stats["categories_valid"] = len(categories)
    log_event(
        logger,
        "stage end",
        stage="categories",
        source=DIRECTORY_SOURCE,
        event="STAGE_END",
        status="ok",
        rows_in=len(fetched),
        rows_out=len(categories),
        duration_ms=_elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", stage="establishments", event="STAGE_START", status="ok")
    grouped = fetch_grouped_establishments(client, categories, directory_config)
    stats["countries"] = len(grouped)
    establishment_count = sum(len(rows) for rows in grouped.values())
    log_event(
        logger,
        "stage end",
        stage="establishments",
        source=DIRECTORY_SOURCE,
        event="STAGE_END",
        status="ok",
        rows_in=len(categories),
        rows_out=establishment_count,
        duration_ms=_elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", stage="geocode", event="STAGE_START", status="ok")
    records, geocode_stats = geocode_establishments(grouped, geocoder, logger=logger)
    stats.update(geocode_stats)
    stats["geocode_requests"] = getattr(geocoder, "requests", stats["geocode_lookups"])
    stats["geocode_cache_hits"] = getattr(geocoder, "hits", 0)
    log_event(
        logger,
        "stage end",
        stage="geocode",
        source=GEOCODER_SOURCE,
        event="STAGE_END",
        status="ok",
        rows_in=establishment_count,
        rows_out=len(records),
        duration_ms=_elapsed_ms(started),
    )
    return records
