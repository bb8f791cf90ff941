"""
Booking endpoints: tenant requests, owner approvals and leaving a PG.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.db.session import get_db
from pg_finder.models.booking import BookingStatus
from pg_finder.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from pg_finder.schemas.listing import ListingResponse
from pg_finder.schemas.room import BedResponse
from pg_finder.schemas.user import CallerSession
from pg_finder.services import booking_service
from pg_finder.services.listing_service import get_listing, get_owned_listing
from pg_finder.core.security import get_current_caller

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=list[BookingResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Request beds in a room. One pending booking is created per bed; the
    owner confirms or rejects each of them.
    """
    return await booking_service.create_bookings(db, caller, booking_data)


@router.get("/", response_model=list[BookingResponse])
async def list_my_bookings(
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Bookings made by the authenticated tenant."""
    return await booking_service.get_tenant_bookings(db, caller.id)


@router.get("/listing/{listing_id}", response_model=list[BookingResponse])
async def list_listing_bookings(
    listing_id: int,
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Bookings for one of the caller's listings."""
    await get_owned_listing(db, listing_id, caller)
    return await booking_service.get_listing_bookings(db, listing_id, status_filter)


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking_detail(
    booking_id: int,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, booking_id)
    await booking_service.authorize_booking_access(db, booking, caller)

    listing = await get_listing(db, booking.listing_id)
    return BookingDetailResponse(
        **BookingResponse.model_validate(booking).model_dump(),
        listing=ListingResponse.model_validate(listing),
        room_number=booking.room.room_number if booking.room else None,
        bed=BedResponse.model_validate(booking.bed) if booking.bed else None,
    )


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """
    Confirm, reject or complete a booking.

    Confirming marks the bed occupied; rejecting a confirmed booking or
    completing it frees the bed. Returns 409 if the bed was taken by another
    booking in the meantime.
    """
    booking = await booking_service.get_booking(db, booking_id)
    await booking_service.authorize_booking_access(db, booking, caller)
    return await booking_service.transition_booking(db, booking_id, update.status, caller)


@router.post("/{booking_id}/leave", response_model=BookingResponse)
async def leave_pg(
    booking_id: int,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Tenant leaves the PG: completes the booking and frees the bed."""
    booking = await booking_service.get_booking(db, booking_id)
    await booking_service.authorize_booking_access(db, booking, caller)
    return await booking_service.transition_booking(
        db, booking_id, BookingStatus.COMPLETED, caller
    )
