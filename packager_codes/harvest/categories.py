"""Category fetch stage: (country, classification section) pairs."""

from __future__ import annotations

from packager_codes.common.constants import DIRECTORY_SOURCE
from packager_codes.common.http import HttpClient
from packager_codes.common.models import CountryCategory, decode_list
from packager_codes.harvest.pagination import collect_pages


def is_valid_category(category: CountryCategory) -> bool:
    return category.country.is_valid and category.number_of_establishments > 0


def filter_valid_categories(categories: list[CountryCategory]) -> list[CountryCategory]:
    return [category for category in categories if is_valid_category(category)]


def fetch_categories_page(
    client: HttpClient,
    directory_config: dict,
    offset: int,
    max_rows: int,
) -> list[CountryCategory]:
    payload = client.get_json(
        directory_config["base_url"],
        source_type=DIRECTORY_SOURCE,
        params={
            "sort": directory_config["categories"]["sort"],
            "max": max_rows,
            "offset": offset,
        },
    )
    return decode_list(payload, CountryCategory.from_dict, "country categories")


def fetch_categories(client: HttpClient, directory_config: dict) -> list[CountryCategory]:
    return collect_pages(
        lambda offset, max_rows: fetch_categories_page(client, directory_config, offset, max_rows),
        page_size=int(directory_config["categories"]["page_size"]),
        max_pages=directory_config.get("max_pages"),
    )


def fetch_valid_categories(client: HttpClient, directory_config: dict) -> list[CountryCategory]:
    return filter_valid_categories(fetch_categories(client, directory_config))
