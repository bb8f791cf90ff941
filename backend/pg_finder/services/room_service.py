"""
Room and bed management for listing owners.
"""

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from pg_finder.core.config import get_settings
from pg_finder.core.exceptions import NotFound
from pg_finder.db.session import commit_session
from pg_finder.core.logging import get_logger
from pg_finder.models.booking import Booking
from pg_finder.models.room import Room, Bed
from pg_finder.schemas.room import RoomCreate, BedCreate
from pg_finder.schemas.user import CallerSession
from pg_finder.services.booking_service import count_active_bookings_for_bed
from pg_finder.services.listing_service import get_owned_listing, get_listing

logger = get_logger(__name__)


async def create_room(
    db: AsyncSession,
    listing_id: int,
    caller: CallerSession,
    room_data: RoomCreate,
) -> Room:
    """Create a room and its beds, numbered 1..total_beds, all vacant."""
    settings = get_settings()
    listing = await get_owned_listing(db, listing_id, caller)

    if room_data.total_beds > settings.MAX_BEDS_PER_ROOM:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A room can have at most {settings.MAX_BEDS_PER_ROOM} beds",
        )

    existing = await db.execute(
        select(Room.id).where(Room.listing_id == listing.id, Room.room_number == room_data.room_number)
    )
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Room {room_data.room_number} already exists in this listing",
        )

    room = Room(listing_id=listing.id, **room_data.model_dump())
    room.beds = [Bed(bed_number=n, is_occupied=False) for n in range(1, room_data.total_beds + 1)]
    db.add(room)
    await commit_session(db)
    await db.refresh(room)

    logger.info("room_created", room_id=room.id, listing_id=listing.id, beds=room_data.total_beds)
    return room


async def get_room(db: AsyncSession, room_id: int) -> Room:
    room = await db.get(Room, room_id)
    if room is None:
        raise NotFound(f"Room {room_id} not found")
    return room


async def _get_owned_room(db: AsyncSession, room_id: int, caller: CallerSession) -> Room:
    room = await get_room(db, room_id)
    await get_owned_listing(db, room.listing_id, caller)
    return room


async def list_rooms(db: AsyncSession, listing_id: int, available_only: bool = False) -> list[Room]:
    await get_listing(db, listing_id)

    query = select(Room).where(Room.listing_id == listing_id)
    if available_only:
        query = query.where(Room.availability.is_(True))
    result = await db.execute(query.order_by(Room.room_number.asc()))
    return list(result.scalars().all())


def count_vacant_beds(room: Room) -> int:
    return sum(1 for bed in room.beds if not bed.is_occupied)


async def delete_room(db: AsyncSession, room_id: int, caller: CallerSession) -> None:
    """Delete a room with its beds and every booking that referenced it."""
    room = await _get_owned_room(db, room_id, caller)

    await db.execute(delete(Booking).where(Booking.room_id == room_id))
    await db.delete(room)
    await commit_session(db)
    logger.info("room_deleted", room_id=room_id, listing_id=room.listing_id)


async def add_bed(db: AsyncSession, room_id: int, caller: CallerSession, bed_data: BedCreate) -> Bed:
    """Add a vacant bed; the number defaults to one past the highest in the room."""
    room = await _get_owned_room(db, room_id, caller)

    bed_number = bed_data.bed_number
    if bed_number is None:
        highest = await db.scalar(select(func.max(Bed.bed_number)).where(Bed.room_id == room.id))
        bed_number = (highest or 0) + 1
    else:
        taken = await db.scalar(
            select(Bed.id).where(Bed.room_id == room.id, Bed.bed_number == bed_number)
        )
        if taken is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Bed {bed_number} already exists in room {room.room_number}",
            )

    bed = Bed(room_id=room.id, bed_number=bed_number, is_occupied=False)
    db.add(bed)
    await commit_session(db)
    await db.refresh(bed)

    logger.info("bed_added", bed_id=bed.id, room_id=room.id, bed_number=bed_number)
    return bed


async def delete_bed(db: AsyncSession, bed_id: int, caller: CallerSession) -> None:
    """Delete a bed. Refused while a pending or confirmed booking references it."""
    bed = await db.get(Bed, bed_id)
    if bed is None:
        raise NotFound(f"Bed {bed_id} not found")
    await _get_owned_room(db, bed.room_id, caller)

    if await count_active_bookings_for_bed(db, bed_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This bed has an active booking and cannot be removed",
        )

    await db.execute(delete(Booking).where(Booking.bed_id == bed_id))
    await db.delete(bed)
    await commit_session(db)
    logger.info("bed_deleted", bed_id=bed_id, room_id=bed.room_id)
