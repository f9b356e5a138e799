import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from listingModels import (
    Combination,
    DemandRequest,
    Listing,
    LocationResult,
    Vehicle,
    VEHICLE_WIDTH,
)

logger = logging.getLogger(__name__)

listings_path = "listings.json"

DEFAULT_MAX_LISTINGS_PER_LOCATION = 20


class StorageSearchError(Exception):
    """Base class for errors raised by the storage search engine."""


class NoCombinationsForLocation(StorageSearchError):
    def __init__(self, location_id: str) -> None:
        super().__init__(f"No combinations available for location {location_id!r}")
        self.location_id = location_id


class ListingLimitExceeded(StorageSearchError):
    def __init__(self, location_id: str, count: int, limit: int) -> None:
        super().__init__(
            f"Location {location_id!r} has {count} listings, "
            f"more than the limit of {limit}"
        )
        self.location_id = location_id
        self.count = count
        self.limit = limit


def load_locations(listings_path=listings_path) -> dict[str, list[Listing]]:
    with open(listings_path, encoding="utf-8") as f:
        listings = json.load(f)

    locations: dict[str, list[Listing]] = dict()
    for listing in listings:
        location_id = listing["location_id"]
        locations.setdefault(location_id, []).append(
            Listing(
                id=listing["id"],
                length=listing["length"],
                width=listing["width"],
                location_id=location_id,
                price_in_cents=listing["price_in_cents"],
            )
        )
    logger.info("Loaded %d listings across %d locations from %s",
                len(listings), len(locations), listings_path)
    return locations


def parse_vehicle_query(vehicle_query: Iterable[DemandRequest]) -> list[Vehicle]:
    vehicles = []
    for query_item in vehicle_query:
        vehicles.extend(
            Vehicle(length=query_item.length, width=VEHICLE_WIDTH)
            for _ in range(query_item.quantity)
        )
    return vehicles


def generate_combinations(listings: Sequence[Listing]) -> list[Combination]:
    """Return the power set of ``listings``, 2^n combinations.

    Combination ``k`` holds listing ``i`` exactly when bit ``i`` of ``k`` is
    set, so the empty combination always comes first.
    """
    combinations = [Combination()]
    for listing in listings:
        combinations.extend(
            [Combination(combination.listings + (listing,)) for combination in combinations]
        )
    return combinations


def can_fit(selected_listings: Sequence[Listing], vehicles: Sequence[Vehicle]) -> bool:
    """Greedily pack ``vehicles`` into the rows of ``selected_listings``.

    Listings are filled in order. For each one the remaining vehicles are taken
    longest first, and each goes into the row with the most length left; a
    vehicle that doesn't fit there is skipped and carried to the next listing.
    This is a heuristic, so a False result does not prove no packing exists.
    """
    remaining = list(vehicles)

    for listing in selected_listings:
        space = [listing.length] * listing.row_count
        if not space:
            continue

        remaining.sort(key=lambda vehicle: vehicle.length, reverse=True)

        i = 0
        while i < len(remaining):
            space.sort(reverse=True)
            if space[0] >= remaining[i].length:
                space[0] -= remaining[i].length
                del remaining[i]
            else:
                i += 1

    return not remaining


class CombinationTable:
    """Price-sorted combinations per location, built once and read-only afterwards."""

    def __init__(self, combinations_by_location: Mapping[str, Iterable[Combination]]) -> None:
        self._combinations = MappingProxyType(
            {
                location_id: tuple(combinations)
                for location_id, combinations in combinations_by_location.items()
            }
        )

    @classmethod
    def from_locations(
        cls,
        locations: Mapping[str, Sequence[Listing]],
        max_listings_per_location: int = DEFAULT_MAX_LISTINGS_PER_LOCATION,
        strict: bool = False,
    ) -> "CombinationTable":
        combinations_by_location: dict[str, list[Combination]] = {}
        for location_id, location_listings in locations.items():
            if len(location_listings) > max_listings_per_location:
                if strict:
                    raise ListingLimitExceeded(
                        location_id, len(location_listings), max_listings_per_location
                    )
                logger.warning(
                    "Skipping location %s: %d listings exceeds the limit of %d",
                    location_id, len(location_listings), max_listings_per_location,
                )
                combinations_by_location[location_id] = []
                continue

            combinations = generate_combinations(location_listings)
            combinations.sort(key=lambda combination: combination.total_price_in_cents)
            combinations_by_location[location_id] = combinations

        logger.info(
            "Built combination table: %d locations, %d combinations",
            len(combinations_by_location),
            sum(len(c) for c in combinations_by_location.values()),
        )
        return cls(combinations_by_location)

    def locations(self) -> tuple[str, ...]:
        return tuple(self._combinations)

    def combinations_for(self, location_id: str) -> tuple[Combination, ...]:
        combinations = self._combinations.get(location_id)
        if not combinations:
            raise NoCombinationsForLocation(location_id)
        return combinations


class CombinationSearch:
    def __init__(self, table: CombinationTable) -> None:
        self.table = table

    def cheapest_for_location(
        self, location_id: str, vehicles: Sequence[Vehicle]
    ) -> Combination | None:
        # The table is sorted by price, so the first combination that fits is the cheapest.
        for combination in self.table.combinations_for(location_id):
            if can_fit(combination.listings, vehicles):
                return combination
        return None

    def process_request(self, requests: Iterable[DemandRequest]) -> list[LocationResult]:
        vehicles = parse_vehicle_query(requests)

        results = []
        for location_id in self.table.locations():
            try:
                combination = self.cheapest_for_location(location_id, vehicles)
            except NoCombinationsForLocation:
                logger.debug("Location %s has no combinations", location_id)
                continue
            if combination is None:
                logger.debug("No combination at %s fits %d vehicles", location_id, len(vehicles))
                continue
            results.append(
                LocationResult(
                    location_id=location_id,
                    listing_ids=combination.listing_ids,
                    total_price_in_cents=combination.total_price_in_cents,
                )
            )

        results.sort(key=lambda result: result.total_price_in_cents)
        return results


def build_search(
    listings_path=listings_path,
    max_listings_per_location: int = DEFAULT_MAX_LISTINGS_PER_LOCATION,
    strict: bool = False,
) -> CombinationSearch:
    locations = load_locations(Path(listings_path))
    table = CombinationTable.from_locations(
        locations, max_listings_per_location=max_listings_per_location, strict=strict
    )
    return CombinationSearch(table)
