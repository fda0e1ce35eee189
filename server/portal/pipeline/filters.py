"""
List filters.

Each filter is a set of optional predicates combined with AND. An unset
predicate (None or empty string) matches everything, so the default filter
returns the input unchanged. Filtering never reorders records.
"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, TypeVar

from portal.schemas.entities import Personnel, Vehicle
from portal.store.base import Predicate
from portal.utils.date_parser import iso_date_prefix

T = TypeVar("T")


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    return True


def in_date_range(value: Any, start: Optional[str], end: Optional[str]) -> bool:
    """Inclusive ISO date range; compares the first 10 characters."""
    if not _is_set(start) and not _is_set(end):
        return True
    prefix = iso_date_prefix(value)
    if prefix is None:
        return False
    if _is_set(start) and prefix < iso_date_prefix(start):
        return False
    if _is_set(end) and prefix > iso_date_prefix(end):
        return False
    return True


@dataclass
class PersonnelFilter:
    sector: Optional[str] = None
    rank: Optional[str] = None
    city: Optional[str] = None

    def matches(self, person: Personnel) -> bool:
        if _is_set(self.sector) and person.sector != self.sector:
            return False
        if _is_set(self.rank) and person.rank != self.rank:
            return False
        if _is_set(self.city) and person.city != self.city:
            return False
        return True

    def apply(self, people: Iterable[Personnel]) -> List[Personnel]:
        return [person for person in people if self.matches(person)]


@dataclass
class VehicleFilter:
    city: Optional[str] = None
    vehicle_type: Optional[str] = None
    registration_number: Optional[int] = None
    plate: Optional[str] = None
    inspection_from: Optional[str] = None
    inspection_to: Optional[str] = None

    def __post_init__(self):
        if _is_set(self.plate):
            self.plate = self.plate.strip().upper()
        if _is_set(self.registration_number):
            self.registration_number = int(self.registration_number)

    def matches(self, vehicle: Vehicle) -> bool:
        if _is_set(self.city) and vehicle.city != self.city:
            return False
        if _is_set(self.vehicle_type) and vehicle.vehicle_type != self.vehicle_type:
            return False
        if _is_set(self.registration_number):
            try:
                if int(vehicle.registration_number) != self.registration_number:
                    return False
            except (TypeError, ValueError):
                return False
        if _is_set(self.plate) and (vehicle.plate or "").upper() != self.plate:
            return False
        return in_date_range(vehicle.inspection_date, self.inspection_from, self.inspection_to)

    def apply(self, vehicles: Iterable[Vehicle]) -> List[Vehicle]:
        return [vehicle for vehicle in vehicles if self.matches(vehicle)]

    def to_predicates(self) -> List[Predicate]:
        """Store-side equivalent, for backends that can filter server-side."""
        predicates: List[Predicate] = []
        if _is_set(self.registration_number):
            predicates.append(Predicate("registrationNumber", "eq", self.registration_number))
        if _is_set(self.plate):
            predicates.append(Predicate("plate", "eq", self.plate))
        if _is_set(self.city):
            predicates.append(Predicate("city", "eq", self.city))
        if _is_set(self.vehicle_type):
            predicates.append(Predicate("vehicleType", "eq", self.vehicle_type))
        if _is_set(self.inspection_from):
            predicates.append(Predicate("inspectionDate", "gte", self.inspection_from))
        if _is_set(self.inspection_to):
            predicates.append(Predicate("inspectionDate", "lte", self.inspection_to))
        return predicates
