"""Free-text address construction for geocoding."""

from __future__ import annotations

from packager_codes.common.models import Establishment

ADDRESS_SEPARATOR = ", "
PLACEHOLDER_STREETS = {"", "."}


def join_address(street: str | None, postal_code: str | None, country_code: str | None) -> str:
    parts: list[str] = []
    if street is not None and street not in PLACEHOLDER_STREETS:
        parts.append(street)
    if postal_code:
        parts.append(postal_code)
    if country_code:
        parts.append(country_code)
    return ADDRESS_SEPARATOR.join(parts)


def build_address(establishment: Establishment) -> str:
    city = establishment.address.city_reference
    return join_address(establishment.address.street.value, city.postal_code, city.country.code)
