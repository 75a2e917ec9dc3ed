"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, TypeVar

from packager_codes.common.constants import PACKAGER_CODE_SUFFIX, VALID_COUNTRY_STATUS
from packager_codes.common.errors import DecodeError

T = TypeVar("T")


def _required(payload: dict, key: str, ctx: str) -> Any:
    if not isinstance(payload, dict):
        raise DecodeError(f"Expected an object for {ctx}, got {type(payload).__name__}")
    if key not in payload or payload[key] is None:
        raise DecodeError(f"Missing key in {ctx}: {key}")
    return payload[key]


def _optional_str(payload: dict, key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    return str(value)


def _as_int(value: Any, ctx: str) -> int:
    if isinstance(value, bool):
        raise DecodeError(f"Expected an integer for {ctx}, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise DecodeError(f"Expected an integer for {ctx}, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Expected an integer for {ctx}, got {value!r}") from exc


@dataclass(frozen=True)
class CountryStatus:
    id: str

    @classmethod
    def from_dict(cls, payload: dict) -> "CountryStatus":
        return cls(id=str(_required(payload, "id", "country.status")))


@dataclass(frozen=True)
class Country:
    code: str
    status: CountryStatus

    @property
    def is_valid(self) -> bool:
        return self.status.id == VALID_COUNTRY_STATUS

    @classmethod
    def from_dict(cls, payload: dict) -> "Country":
        return cls(
            code=str(_required(payload, "code", "country")),
            status=CountryStatus.from_dict(_required(payload, "status", "country")),
        )


@dataclass(frozen=True)
class ClassificationSection:
    id: str
    code: str

    @classmethod
    def from_dict(cls, payload: dict) -> "ClassificationSection":
        return cls(
            id=str(_required(payload, "id", "classificationSectionId")),
            code=str(_required(payload, "code", "classificationSectionId")),
        )


@dataclass(frozen=True)
class CountryCategory:
    sequence_number: int
    country: Country
    classification_section: ClassificationSection
    number_of_establishments: int

    @classmethod
    def from_dict(cls, payload: dict) -> "CountryCategory":
        ctx = "countryCategory"
        return cls(
            sequence_number=_as_int(_required(payload, "sequenceNumber", ctx), f"{ctx}.sequenceNumber"),
            country=Country.from_dict(_required(payload, "country", ctx)),
            classification_section=ClassificationSection.from_dict(
                _required(payload, "classificationSectionId", ctx)
            ),
            number_of_establishments=_as_int(
                _required(payload, "numberOfEstablishments", ctx),
                f"{ctx}.numberOfEstablishments",
            ),
        )


@dataclass(frozen=True)
class Street:
    value: str

    @classmethod
    def from_dict(cls, payload: dict) -> "Street":
        return cls(value=str(_required(payload, "value", "street")))


@dataclass(frozen=True)
class City:
    city_id: int
    postal_code: str | None
    name: str | None
    country: Country

    @classmethod
    def from_dict(cls, payload: dict) -> "City":
        return cls(
            city_id=_as_int(_required(payload, "cityId", "cityReference"), "cityReference.cityId"),
            postal_code=_optional_str(payload, "postalCode"),
            name=_optional_str(payload, "name"),
            country=Country.from_dict(_required(payload, "country", "cityReference")),
        )


@dataclass(frozen=True)
class Address:
    street: Street
    city_reference: City

    @classmethod
    def from_dict(cls, payload: dict) -> "Address":
        return cls(
            street=Street.from_dict(_required(payload, "street", "address")),
            city_reference=City.from_dict(_required(payload, "cityReference", "address")),
        )


@dataclass(frozen=True)
class Establishment:
    operator_id: int
    operator_name: str | None
    address: Address
    approval_number: str | None

    @property
    def country_code(self) -> str:
        return self.address.city_reference.country.code

    @classmethod
    def from_dict(cls, payload: dict) -> "Establishment":
        return cls(
            operator_id=_as_int(_required(payload, "operatorId", "establishment"), "establishment.operatorId"),
            operator_name=_optional_str(payload, "operatorName"),
            address=Address.from_dict(_required(payload, "address", "establishment")),
            approval_number=_optional_str(payload, "approvalNumber"),
        )


@dataclass(frozen=True)
class PackagerCode:
    name: str
    code: str
    lat: float
    lng: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def packager_code(country_code: str, approval_number: str) -> str:
    return f"{country_code} {approval_number} {PACKAGER_CODE_SUFFIX}"


def decode_list(payload: Any, factory: Callable[[dict], T], ctx: str) -> list[T]:
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array of {ctx}, got {type(payload).__name__}")
    return [factory(item) for item in payload]
