"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

from packager_codes.common.constants import JSON_LOG_FIELDS
from packager_codes.common.fs import ensure_dir
from packager_codes.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            if field not in payload:
                payload[field] = getattr(record, field, None)
        return json.dumps(payload, ensure_ascii=False)


class RunContextFilter(logging.Filter):
    def __init__(self, run_id: str) -> None:
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "run_id", None) is None:
            record.run_id = self.run_id
        return True


def build_logger(run_id: str, level: str = "INFO", log_file: Path | None = None) -> logging.Logger:
    logger = logging.getLogger(f"packager_codes.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.filters.clear()
    logger.addFilter(RunContextFilter(run_id))
    logger.propagate = False

    # stdout carries the CSV.
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if log_file is not None:
        ensure_dir(log_file.parent)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)
