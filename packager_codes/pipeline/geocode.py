"""Geocoding enrichment stage: address lookup and packager code synthesis."""

from __future__ import annotations

import logging
from typing import Mapping

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from packager_codes.common.constants import GEOCODER_SOURCE
from packager_codes.common.errors import GeocodeError
from packager_codes.common.http import TokenBucket
from packager_codes.common.models import Establishment, PackagerCode, packager_code
from packager_codes.pipeline.address import build_address

Coordinate = tuple[float, float]
NO_COORDINATE: Coordinate = (0.0, 0.0)


class NominatimGeocoder:
    def __init__(
        self,
        *,
        user_agent: str,
        domain: str = "nominatim.openstreetmap.org",
        timeout: float = 10.0,
        limiter: TokenBucket | None = None,
    ) -> None:
        self.client = Nominatim(user_agent=user_agent, domain=domain, timeout=timeout)
        self.limiter = limiter
        self.requests = 0

    def forward(self, address: str) -> list[Coordinate]:
        if self.limiter is not None:
            self.limiter.acquire()
        self.requests += 1
        try:
            locations = self.client.geocode(address, exactly_one=False)
        except GeopyError as exc:
            raise GeocodeError(f"Geocoding failed for {address!r}: {exc}") from exc
        return [(float(location.latitude), float(location.longitude)) for location in locations or []]


class CachingGeocoder:
    """Memoizes results by exact address string. Failures are not cached."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.cache: dict[str, list[Coordinate]] = {}
        self.hits = 0

    @property
    def requests(self) -> int:
        return getattr(self.inner, "requests", 0)

    def forward(self, address: str) -> list[Coordinate]:
        if address in self.cache:
            self.hits += 1
            return list(self.cache[address])
        result = list(self.inner.forward(address))
        self.cache[address] = result
        return list(result)


def _has_approval_number(establishment: Establishment) -> bool:
    return bool(establishment.approval_number)


def _first_coordinate(results: list[Coordinate]) -> Coordinate:
    if not results:
        return NO_COORDINATE
    return results[0]


def geocode_establishments(
    grouped: Mapping[str, list[Establishment]],
    geocoder,
    logger: logging.Logger | None = None,
) -> tuple[list[PackagerCode], dict[str, int]]:
    stats = {
        "establishments": 0,
        "skipped_no_approval": 0,
        "geocode_lookups": 0,
        "geocode_errors": 0,
        "skipped_no_coordinates": 0,
        "packager_codes": 0,
    }
    records: list[PackagerCode] = []

    for establishments in grouped.values():
        for establishment in establishments:
            stats["establishments"] += 1
            if not _has_approval_number(establishment):
                stats["skipped_no_approval"] += 1
                continue

            address = build_address(establishment)
            stats["geocode_lookups"] += 1
            try:
                results = geocoder.forward(address)
            except GeocodeError as exc:
                stats["geocode_errors"] += 1
                results = []
                if logger is not None:
                    logger.warning(
                        str(exc),
                        extra={
                            "stage": "geocode",
                            "country": establishment.country_code,
                            "source": GEOCODER_SOURCE,
                            "event": "GEOCODE_ERROR",
                            "status": "warning",
                            "error_code": exc.error_code,
                        },
                    )

            lat, lng = _first_coordinate(results)
            if lat <= 0 or lng <= 0:
                stats["skipped_no_coordinates"] += 1
                if logger is not None:
                    logger.debug(
                        f"no usable coordinate for {address!r}",
                        extra={"stage": "geocode", "country": establishment.country_code, "event": "GEOCODE_MISS"},
                    )
                continue

            records.append(
                PackagerCode(
                    name=establishment.operator_name or "",
                    code=packager_code(establishment.country_code, establishment.approval_number),
                    lat=lat,
                    lng=lng,
                )
            )

    stats["packager_codes"] = len(records)
    return records, stats
