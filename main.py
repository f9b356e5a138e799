import logging
from contextlib import asynccontextmanager

from pydantic import BaseModel, Field

from fastapi import Depends, FastAPI, Request

from findListings import CombinationSearch, build_search
from listingModels import DemandRequest
from searchConfig import settings

logger = logging.getLogger(__name__)


class VehicleQuery(BaseModel):
    length: float = Field(..., gt=0)
    quantity: int = Field(..., ge=0, le=settings.max_vehicle_quantity)


class LocationResponse(BaseModel):
    location_id: str
    listing_ids: list[str]
    total_price_in_cents: int


def parse_vehicle_queries(vehicle_queries: list[VehicleQuery]) -> list[DemandRequest]:
    parsed = []
    for query in vehicle_queries:
        parsed.append(DemandRequest(length=query.length, quantity=query.quantity))
    return parsed


def get_search(request: Request) -> CombinationSearch:
    return request.app.state.search


def create_app(search: CombinationSearch | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "search", None) is None:
            logging.basicConfig(level=settings.log_level)
            app.state.search = build_search(
                settings.listings_path,
                max_listings_per_location=settings.max_listings_per_location,
                strict=settings.strict_listing_limit,
            )
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.search = search

    @app.get("/")
    async def root(search: CombinationSearch = Depends(get_search)):
        return {
            "service": settings.app_name,
            "status": "running",
            "locations": len(search.table.locations()),
        }

    @app.post("/", response_model=list[LocationResponse])
    def get_items(
        vehicle_queries: list[VehicleQuery],
        search: CombinationSearch = Depends(get_search),
    ) -> list[LocationResponse]:
        parsed_vehicle_queries = parse_vehicle_queries(vehicle_queries)
        logger.info("Searching storage for %d vehicle queries", len(parsed_vehicle_queries))
        results = search.process_request(parsed_vehicle_queries)
        logger.info("Found %d locations with a fitting combination", len(results))
        return [
            LocationResponse(
                location_id=result.location_id,
                listing_ids=result.listing_ids,
                total_price_in_cents=result.total_price_in_cents,
            )
            for result in results
        ]

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
