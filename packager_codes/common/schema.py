"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from packager_codes.common.errors import ConfigError

DIRECTORY_KEYS = {
    "base_url",
    "categories",
    "establishments",
    "max_pages",
    "rate_limit_per_sec",
    "timeout_seconds",
    "retry",
}
GEOCODER_KEYS = {"provider", "user_agent", "domain", "timeout_seconds", "rate_limit_per_sec", "cache"}
SUPPORTED_GEOCODERS = {"nominatim"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number, got {value!r}")


def _assert_non_empty_str(value, ctx: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{ctx} must be a non-empty string, got {value!r}")


def _validate_endpoint(cfg: dict, ctx: str, allow_unknown: bool) -> None:
    _assert_required_keys(cfg, {"sort", "page_size"}, ctx)
    _assert_no_unknown_keys(cfg, {"sort", "page_size"}, ctx, allow_unknown)
    if isinstance(cfg["page_size"], bool) or not isinstance(cfg["page_size"], int) or cfg["page_size"] <= 0:
        raise ConfigError(f"{ctx}.page_size must be a positive integer")


def validate_directory_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, DIRECTORY_KEYS, "directory")
    _assert_no_unknown_keys(cfg, DIRECTORY_KEYS, "directory", allow_unknown)
    _assert_non_empty_str(cfg["base_url"], "directory.base_url")
    _validate_endpoint(cfg["categories"], "directory.categories", allow_unknown)
    _validate_endpoint(cfg["establishments"], "directory.establishments", allow_unknown)

    max_pages = cfg["max_pages"]
    if max_pages is not None and (isinstance(max_pages, bool) or not isinstance(max_pages, int) or max_pages <= 0):
        raise ConfigError("directory.max_pages must be null or a positive integer")

    _assert_positive(cfg["rate_limit_per_sec"], "directory.rate_limit_per_sec")
    _assert_required_keys(cfg["timeout_seconds"], {"connect", "read"}, "directory.timeout_seconds")
    _assert_positive(cfg["timeout_seconds"]["connect"], "directory.timeout_seconds.connect")
    _assert_positive(cfg["timeout_seconds"]["read"], "directory.timeout_seconds.read")
    _assert_required_keys(cfg["retry"], {"max_attempts", "multiplier", "max_wait"}, "directory.retry")
    if isinstance(cfg["retry"]["max_attempts"], bool) or not isinstance(cfg["retry"]["max_attempts"], int) or cfg["retry"]["max_attempts"] < 1:
        raise ConfigError("directory.retry.max_attempts must be an integer >= 1")
    _assert_positive(cfg["retry"]["multiplier"], "directory.retry.multiplier")
    _assert_positive(cfg["retry"]["max_wait"], "directory.retry.max_wait")
    return cfg


def validate_geocoder_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, GEOCODER_KEYS, "geocoder")
    _assert_no_unknown_keys(cfg, GEOCODER_KEYS, "geocoder", allow_unknown)
    if cfg["provider"] not in SUPPORTED_GEOCODERS:
        raise ConfigError(f"Unsupported geocoder provider: {cfg['provider']}")
    _assert_non_empty_str(cfg["user_agent"], "geocoder.user_agent")
    _assert_non_empty_str(cfg["domain"], "geocoder.domain")
    _assert_positive(cfg["timeout_seconds"], "geocoder.timeout_seconds")
    _assert_positive(cfg["rate_limit_per_sec"], "geocoder.rate_limit_per_sec")
    if not isinstance(cfg["cache"], bool):
        raise ConfigError("geocoder.cache must be a boolean")
    return cfg


def validate_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"directory", "geocoder"}, "config")
    _assert_no_unknown_keys(cfg, {"directory", "geocoder"}, "config", allow_unknown)
    validate_directory_config(cfg["directory"], allow_unknown=allow_unknown)
    validate_geocoder_config(cfg["geocoder"], allow_unknown=allow_unknown)
    return cfg
