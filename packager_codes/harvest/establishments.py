"""Establishment fetch stage, grouped by each establishment's own country."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import quote

from packager_codes.common.constants import DIRECTORY_SOURCE
from packager_codes.common.http import HttpClient
from packager_codes.common.models import CountryCategory, Establishment, decode_list
from packager_codes.harvest.pagination import collect_pages


def establishments_url(base_url: str, country_code: str, section_code: str) -> str:
    return (
        f"{base_url.rstrip('/')}/establishments/"
        f"{quote(country_code, safe='')}/{quote(section_code, safe='')}"
    )


def fetch_establishments_page(
    client: HttpClient,
    directory_config: dict,
    country_code: str,
    section_code: str,
    offset: int,
    max_rows: int,
) -> list[Establishment]:
    payload = client.get_json(
        establishments_url(directory_config["base_url"], country_code, section_code),
        source_type=DIRECTORY_SOURCE,
        params={
            "sort": directory_config["establishments"]["sort"],
            "max": max_rows,
            "offset": offset,
        },
    )
    return decode_list(payload, Establishment.from_dict, "establishments")


def fetch_establishments(
    client: HttpClient,
    directory_config: dict,
    country_code: str,
    section_code: str,
) -> list[Establishment]:
    return collect_pages(
        lambda offset, max_rows: fetch_establishments_page(
            client, directory_config, country_code, section_code, offset, max_rows
        ),
        page_size=int(directory_config["establishments"]["page_size"]),
        max_pages=directory_config.get("max_pages"),
    )


def group_by_country(
    establishments: Iterable[Establishment],
    grouped: dict[str, list[Establishment]] | None = None,
) -> dict[str, list[Establishment]]:
    out = grouped if grouped is not None else {}
    for establishment in establishments:
        # Keyed by the address country, which may differ from the category's.
        out.setdefault(establishment.country_code, []).append(establishment)
    return out


def fetch_grouped_establishments(
    client: HttpClient,
    categories: Iterable[CountryCategory],
    directory_config: dict,
) -> dict[str, list[Establishment]]:
    grouped: dict[str, list[Establishment]] = {}
    for category in categories:
        establishments = fetch_establishments(
            client,
            directory_config,
            category.country.code,
            category.classification_section.code,
        )
        group_by_country(establishments, grouped)
    return grouped
