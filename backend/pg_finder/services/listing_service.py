"""
Listing service: owner CRUD, pagination and search.
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.core.exceptions import NotFound, Unauthorized
from pg_finder.db.session import commit_session
from pg_finder.core.logging import get_logger
from pg_finder.models.listing import Listing
from pg_finder.schemas.listing import ListingCreate, ListingUpdate, FilterOptions
from pg_finder.schemas.user import CallerSession
from pg_finder.services.listing_filter import filter_listings

logger = get_logger(__name__)


async def create_listing(db: AsyncSession, caller: CallerSession, listing_data: ListingCreate) -> Listing:
    if not caller.is_owner:
        raise Unauthorized("Only owners can create listings")

    listing = Listing(owner_id=caller.id, **listing_data.model_dump())
    db.add(listing)
    await commit_session(db)
    await db.refresh(listing)

    logger.info("listing_created", listing_id=listing.id, owner_id=caller.id, price=listing.price)
    return listing


async def get_listing(db: AsyncSession, listing_id: int) -> Listing:
    result = await db.execute(select(Listing).where(Listing.id == listing_id))
    listing = result.scalar_one_or_none()

    if not listing:
        raise NotFound(f"Listing {listing_id} not found")
    return listing


async def get_owned_listing(db: AsyncSession, listing_id: int, caller: CallerSession) -> Listing:
    """Fetch a listing the caller owns; 403 for anyone else."""
    listing = await get_listing(db, listing_id)
    if listing.owner_id != caller.id:
        logger.warning("listing_access_denied", listing_id=listing_id, caller_id=caller.id)
        raise Unauthorized("You do not own this listing")
    return listing


async def update_listing(
    db: AsyncSession,
    listing_id: int,
    caller: CallerSession,
    listing_data: ListingUpdate,
) -> Listing:
    listing = await get_owned_listing(db, listing_id, caller)

    changes = listing_data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(listing, field, value)
    await commit_session(db)
    await db.refresh(listing)

    logger.info("listing_updated", listing_id=listing.id, fields=sorted(changes))
    return listing


async def delete_listing(db: AsyncSession, listing_id: int, caller: CallerSession) -> None:
    """Delete a listing; rooms, beds and bookings go with it."""
    listing = await get_owned_listing(db, listing_id, caller)
    await db.delete(listing)
    await commit_session(db)
    logger.info("listing_deleted", listing_id=listing_id, owner_id=caller.id)


async def list_listings(
    db: AsyncSession,
    page: int = 1,
    page_size: int = 20,
    available_only: bool = False,
) -> tuple[list[Listing], int]:
    query = select(Listing)
    if available_only:
        query = query.where(Listing.availability.is_(True))

    count_query = select(func.count()).select_from(query.subquery())
    total = (await db.execute(count_query)).scalar()

    result = await db.execute(
        query
        .order_by(Listing.created_at.desc(), Listing.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def get_owner_listings(db: AsyncSession, owner_id: int) -> list[Listing]:
    result = await db.execute(
        select(Listing).where(Listing.owner_id == owner_id).order_by(Listing.id.asc())
    )
    return list(result.scalars().all())


async def search_listings(db: AsyncSession, filters: FilterOptions) -> list[Listing]:
    """
    Apply the listing filter predicate.
    The price range is pushed down to SQL (ix_listings_price); the remaining
    predicates run in Python over that candidate set.
    """
    result = await db.execute(
        select(Listing)
        .where(
            Listing.price >= filters.price_range.min,
            Listing.price <= filters.price_range.max,
        )
        .order_by(Listing.price.asc(), Listing.id.asc())
    )
    candidates = list(result.scalars().all())
    matched = filter_listings(candidates, filters)

    logger.info(
        "listings_searched",
        candidates=len(candidates),
        matched=len(matched),
        location=filters.location or None,
        gender_preference=filters.gender_preference or None,
        amenities=sorted(filters.amenities),
    )
    return matched
