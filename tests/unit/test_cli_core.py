from packager_codes.cli import build_geocoder, build_http_client, parse_args
from packager_codes.common.constants import DIRECTORY_SOURCE
from packager_codes.common.http import TokenBucket
from packager_codes.pipeline.geocode import CachingGeocoder, NominatimGeocoder


def test_parse_args_defaults():
    args = parse_args([])
    assert args.config == "./config/packager_codes.yml"
    assert args.output == "-"
    assert args.max_pages is None
    assert args.no_geocode_cache is False
    assert args.summary is None


def test_parse_args_accepts_overrides():
    args = parse_args(["--max-pages", "1", "--no-geocode-cache", "--output", "codes.csv"])
    assert args.max_pages == 1
    assert args.no_geocode_cache is True
    assert args.output == "codes.csv"


def _geocoder_config(cache: bool) -> dict:
    return {
        "provider": "nominatim",
        "user_agent": "ua",
        "domain": "nominatim.openstreetmap.org",
        "timeout_seconds": 10,
        "rate_limit_per_sec": 1.0,
        "cache": cache,
    }


def test_build_geocoder_wraps_cache_when_enabled():
    assert isinstance(build_geocoder(_geocoder_config(True)), CachingGeocoder)
    assert isinstance(build_geocoder(_geocoder_config(False)), NominatimGeocoder)


def _directory_config(rate: float) -> dict:
    return {
        "base_url": "https://directory.test",
        "categories": {"sort": "country.translation", "page_size": 5},
        "establishments": {"sort": "operatorName", "page_size": 5},
        "max_pages": None,
        "rate_limit_per_sec": rate,
        "timeout_seconds": {"connect": 3, "read": 7},
        "retry": {"max_attempts": 2, "multiplier": 0.5, "max_wait": 4},
    }


def test_build_http_client_installs_directory_limiter():
    client = build_http_client(_directory_config(0.25))
    try:
        limiter = client.limiters[DIRECTORY_SOURCE]
        assert isinstance(limiter, TokenBucket)
        assert limiter.rate_per_sec == 0.25
        assert client.timeout.connect == 3.0
        assert client.retry.max_attempts == 2
    finally:
        client.close()


def test_build_geocoder_installs_its_own_limiter():
    config = _geocoder_config(False)
    config["rate_limit_per_sec"] = 0.5

    geocoder = build_geocoder(config)

    assert isinstance(geocoder.limiter, TokenBucket)
    assert geocoder.limiter.rate_per_sec == 0.5


def test_build_geocoder_cache_wraps_rate_limited_geocoder():
    cached = build_geocoder(_geocoder_config(True))

    assert isinstance(cached.inner, NominatimGeocoder)
    assert cached.inner.limiter.rate_per_sec == 1.0
