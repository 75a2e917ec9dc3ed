"""CLI entrypoint for the packager codes export."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from packager_codes.common.config_loader import apply_overrides, load_config
from packager_codes.common.constants import DIRECTORY_SOURCE, EXIT_HARD_FAIL, EXIT_SUCCESS
from packager_codes.common.errors import PipelineError
from packager_codes.common.http import HttpClient, RetryConfig, TimeoutConfig, TokenBucket
from packager_codes.common.ids import generate_run_id
from packager_codes.common.logging import build_logger, log_event
from packager_codes.pipeline.export import write_packager_codes_csv, write_packager_codes_file
from packager_codes.pipeline.geocode import CachingGeocoder, NominatimGeocoder
from packager_codes.pipeline.reports import write_run_summary
from packager_codes.pipeline.runner import run_pipeline


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--config", default="./config/packager_codes.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--output", default="-", help="CSV destination, '-' for stdout")
    parser.add_argument("--max-pages", type=int, default=None)
    parser.add_argument("--no-geocode-cache", action="store_true")
    parser.add_argument("--summary", default=None, help="write a JSON run summary to this path")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser.parse_args(argv)


def build_http_client(directory_config: dict) -> HttpClient:
    timeout = directory_config["timeout_seconds"]
    retry = directory_config["retry"]
    return HttpClient(
        timeout=TimeoutConfig(connect=float(timeout["connect"]), read=float(timeout["read"])),
        retry=RetryConfig(
            max_attempts=int(retry["max_attempts"]),
            multiplier=float(retry["multiplier"]),
            max_wait=float(retry["max_wait"]),
        ),
        limiters={DIRECTORY_SOURCE: TokenBucket(rate_per_sec=float(directory_config["rate_limit_per_sec"]))},
    )


def build_geocoder(geocoder_config: dict):
    geocoder = NominatimGeocoder(
        user_agent=geocoder_config["user_agent"],
        domain=geocoder_config["domain"],
        timeout=float(geocoder_config["timeout_seconds"]),
        limiter=TokenBucket(rate_per_sec=float(geocoder_config["rate_limit_per_sec"])),
    )
    if geocoder_config["cache"]:
        return CachingGeocoder(geocoder)
    return geocoder


def _write_output(output: str, records) -> int:
    if output == "-":
        return write_packager_codes_csv(sys.stdout, records)
    return write_packager_codes_file(Path(output), records)


def run_command(args: argparse.Namespace, *, client: HttpClient | None = None, geocoder=None) -> int:
    run_id = args.run_id or generate_run_id()
    logger = build_logger(
        run_id,
        level=args.log_level,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    summary_path = Path(args.summary) if args.summary else None
    stats: dict = {}
    started = time.monotonic()

    try:
        cfg = load_config(
            Path(args.config),
            overlay_path=Path(args.overlay_config) if args.overlay_config else None,
        )
        cfg = apply_overrides(
            cfg,
            max_pages=args.max_pages,
            geocode_cache=False if args.no_geocode_cache else None,
        )

        owns_client = client is None
        http_client = client or build_http_client(cfg["directory"])
        try:
            records = run_pipeline(
                http_client,
                geocoder or build_geocoder(cfg["geocoder"]),
                cfg["directory"],
                logger,
                stats=stats,
            )
        finally:
            if owns_client:
                http_client.close()

        log_event(logger, "stage start", stage="export", event="STAGE_START", status="ok")
        written = _write_output(args.output, records)
        log_event(logger, "stage end", stage="export", event="STAGE_END", status="ok", rows_out=written)
    except PipelineError as exc:
        logger.error(
            str(exc),
            extra={"event": "RUN_FAIL", "status": "error", "error_code": exc.error_code},
        )
        if summary_path is not None:
            write_run_summary(summary_path, run_id, stats, error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except Exception as exc:
        logger.error(
            f"unexpected failure: {exc}",
            extra={"event": "RUN_FAIL", "status": "error", "error_code": "UNEXPECTED_ERROR"},
        )
        if summary_path is not None:
            write_run_summary(summary_path, run_id, stats, error_code="UNEXPECTED_ERROR")
        return EXIT_HARD_FAIL

    log_event(
        logger,
        "run complete",
        event="RUN_END",
        status="ok",
        rows_out=len(records),
        duration_ms=int((time.monotonic() - started) * 1000),
    )
    if summary_path is not None:
        write_run_summary(summary_path, run_id, stats)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
