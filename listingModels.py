"""Domain types for listings, vehicles and listing combinations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# All vehicles share one fixed width, and a listing's rows are exactly one
# vehicle wide, so packing only ever compares lengths.
VEHICLE_WIDTH = 10
ROW_WIDTH = VEHICLE_WIDTH


@dataclass(frozen=True, slots=True)
class Listing:
    """A rentable storage space at a location."""

    id: str
    length: float
    width: float
    location_id: str
    price_in_cents: int

    @property
    def row_count(self) -> int:
        return max(0, int(self.width // ROW_WIDTH))


@dataclass(frozen=True, slots=True)
class Vehicle:
    length: float
    width: float = VEHICLE_WIDTH


@dataclass(frozen=True, slots=True)
class DemandRequest:
    length: float
    quantity: int


@dataclass(frozen=True, slots=True)
class Combination:
    """A subset of one location's listings, in catalog order."""

    listings: Tuple[Listing, ...] = ()

    @property
    def total_price_in_cents(self) -> int:
        return sum(listing.price_in_cents for listing in self.listings)

    @property
    def listing_ids(self) -> list[str]:
        return [listing.id for listing in self.listings]


@dataclass(frozen=True, slots=True)
class LocationResult:
    location_id: str
    listing_ids: list[str]
    total_price_in_cents: int
