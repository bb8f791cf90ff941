"""
Listing endpoints with Redis caching on the paginated list.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.db.session import get_db
from pg_finder.core.security import get_current_caller
from pg_finder.schemas.listing import (
    DEFAULT_MAX_PRICE,
    FilterOptions,
    ListingCreate,
    ListingListResponse,
    ListingResponse,
    ListingUpdate,
    PriceRange,
)
from pg_finder.schemas.room import RoomCreate, RoomWithBedsResponse
from pg_finder.schemas.user import CallerSession
from pg_finder.services import listing_service, room_service
from pg_finder.services.cache_service import (
    get_cached_listings,
    set_cached_listings,
    invalidate_listing_cache,
)
from pg_finder.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/listings", tags=["Listings"])


def room_payload(room) -> RoomWithBedsResponse:
    response = RoomWithBedsResponse.model_validate(room)
    response.vacant_beds = room_service.count_vacant_beds(room)
    return response


@router.post("/", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_listing_endpoint(
    listing_data: ListingCreate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Create a listing. Owners only."""
    listing = await listing_service.create_listing(db, caller, listing_data)
    await invalidate_listing_cache()
    return listing


@router.get("/", response_model=ListingListResponse)
async def list_listings_endpoint(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    available_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    """
    List listings with pagination.
    Pages are cached in Redis and invalidated whenever a listing changes.
    """
    cached = await get_cached_listings(page, page_size, available_only)
    if cached:
        logger.info("listings_cache_hit", page=page)
        cached["cached"] = True
        return ListingListResponse(**cached)

    listings, total = await listing_service.list_listings(db, page, page_size, available_only)

    response_data = {
        "listings": [ListingResponse.model_validate(item).model_dump() for item in listings],
        "total": total,
        "page": page,
        "page_size": page_size,
        "cached": False,
    }
    await set_cached_listings(page, page_size, available_only, response_data)

    return ListingListResponse(**response_data)


@router.get("/search", response_model=list[ListingResponse])
async def search_listings_endpoint(
    min_price: int = Query(0, ge=0),
    max_price: int = Query(DEFAULT_MAX_PRICE, ge=0),
    location: str = Query(""),
    gender_preference: Literal["", "male", "female", "any"] = Query(""),
    amenities: Optional[list[str]] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Filter listings by price range, location, gender preference and amenities."""
    try:
        price_range = PriceRange(min=min_price, max=max_price)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e.errors()[0]["msg"]))

    filters = FilterOptions(
        price_range=price_range,
        location=location.strip(),
        gender_preference=gender_preference,
        amenities=set(amenities or []),
    )
    return await listing_service.search_listings(db, filters)


@router.get("/mine", response_model=list[ListingResponse])
async def my_listings_endpoint(
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Listings owned by the caller."""
    return await listing_service.get_owner_listings(db, caller.id)


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing_endpoint(listing_id: int, db: AsyncSession = Depends(get_db)):
    return await listing_service.get_listing(db, listing_id)


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing_endpoint(
    listing_id: int,
    listing_data: ListingUpdate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    listing = await listing_service.update_listing(db, listing_id, caller, listing_data)
    await invalidate_listing_cache()
    return listing


@router.delete("/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_listing_endpoint(
    listing_id: int,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Delete a listing with its rooms, beds and bookings."""
    await listing_service.delete_listing(db, listing_id, caller)
    await invalidate_listing_cache()


@router.post(
    "/{listing_id}/rooms",
    response_model=RoomWithBedsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_room_endpoint(
    listing_id: int,
    room_data: RoomCreate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Add a room; its beds are created automatically."""
    room = await room_service.create_room(db, listing_id, caller, room_data)
    return room_payload(room)


@router.get("/{listing_id}/rooms", response_model=list[RoomWithBedsResponse])
async def list_rooms_endpoint(
    listing_id: int,
    available_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    rooms = await room_service.list_rooms(db, listing_id, available_only)
    return [room_payload(room) for room in rooms]
