"""Shared directory payload builders and fakes."""

from __future__ import annotations

import copy

import pytest

from packager_codes.common.errors import GeocodeError


def category_payload(country="FR", section="01", status="V", count=1, seq=1):
    return {
        "sequenceNumber": seq,
        "country": {"code": country, "status": {"id": status}},
        "classificationSectionId": {"id": f"S{section}", "code": section},
        "numberOfEstablishments": count,
    }


def establishment_payload(
    operator_id=1,
    name=None,
    approval="AB1",
    street="Rue de Paris",
    postal_code="75000",
    country="FR",
    city_name=None,
):
    payload = {
        "operatorId": operator_id,
        "address": {
            "street": {"value": street},
            "cityReference": {
                "cityId": 100 + operator_id,
                "postalCode": postal_code,
                "name": city_name,
                "country": {"code": country, "status": {"id": "V"}},
            },
        },
        "approvalNumber": approval,
    }
    if name is not None:
        payload["operatorName"] = name
    return payload


class FakeDirectoryClient:
    """Serves categories from the base URL and establishments by URL path."""

    def __init__(self, categories, establishments_by_path):
        self.categories = categories
        self.establishments_by_path = establishments_by_path
        self.calls: list[tuple[str, dict]] = []

    def get_json(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        params = kwargs.get("params") or {}
        offset = int(params.get("offset", 0))
        max_rows = int(params.get("max", 100))
        if "/establishments/" in url:
            path = url.split("/establishments/", 1)[1]
            rows = self.establishments_by_path.get(path, [])
        else:
            rows = self.categories
        return rows[offset : offset + max_rows]

    def close(self):
        return None


class FakeGeocoder:
    def __init__(self, results=None, failures=()):
        self.results = results or {}
        self.failures = set(failures)
        self.requests = 0
        self.queries: list[str] = []

    def forward(self, address: str):
        self.requests += 1
        self.queries.append(address)
        if address in self.failures:
            raise GeocodeError(f"provider failure for {address}")
        return list(self.results.get(address, []))


DIRECTORY_CONFIG = {
    "base_url": "https://directory.test/publication/establishment",
    "categories": {"sort": "country.translation", "page_size": 5},
    "establishments": {"sort": "operatorName", "page_size": 5},
    "max_pages": None,
    "rate_limit_per_sec": 1000.0,
    "timeout_seconds": {"connect": 1, "read": 1},
    "retry": {"max_attempts": 1, "multiplier": 0.01, "max_wait": 0.01},
}


@pytest.fixture
def directory_config():
    return copy.deepcopy(DIRECTORY_CONFIG)


@pytest.fixture
def make_category():
    return category_payload


@pytest.fixture
def make_establishment():
    return establishment_payload


@pytest.fixture
def fake_directory():
    return FakeDirectoryClient


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder
