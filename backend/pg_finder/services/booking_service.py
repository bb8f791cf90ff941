"""
Booking ledger: booking lifecycle with bed reconciliation.

STATE MACHINE
=============

  pending   -> confirmed   (owner)   bed: occupied by the booking's tenant
  pending   -> rejected    (owner)   bed: untouched
  confirmed -> rejected    (owner)   bed: released
  confirmed -> completed   (tenant)  bed: released ("leave PG")

  rejected and completed are terminal. Requesting the current status is a
  no-op. Everything else is an InvalidTransition.

CONSISTENCY STRATEGY: Conditional updates in one transaction
============================================================

Problem:
  Selecting beds does not reserve them, so two pending bookings can point
  at the same vacant bed. If both are confirmed, the bed ends up
  "occupied" by two tenants.

Solution:
  Every write is a conditional UPDATE that states what it expects to find:

  1. Occupy:  UPDATE beds SET is_occupied = true, tenant_id = :tenant, version = version + 1
              WHERE id = :bed AND is_occupied = false
  2. Release: UPDATE beds SET is_occupied = false, tenant_id = NULL, version = version + 1
              WHERE id = :bed AND tenant_id = :tenant
  3. Status:  UPDATE bookings SET status = :new WHERE id = :id AND status = :current

  rows_affected == 0 on (1) means someone else already holds the bed
  -> AlreadyOccupied. On (3) it means the booking moved underneath us
  -> InvalidTransition. In both cases the session is rolled back, so the
  bed and the booking are never left half-updated.

  Both writes share the request's session and are committed together before
  the booking is returned. A store failure anywhere in that span rolls both
  back and surfaces as StoreUnavailable. No retries are attempted; the
  caller re-issues the action.
"""

import time
from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from pg_finder.core.exceptions import (
    AlreadyOccupied,
    InvalidTransition,
    LedgerError,
    NotFound,
    StoreUnavailable,
    Unauthorized,
)
from pg_finder.db.session import commit_session
from pg_finder.core.logging import get_logger
from pg_finder.core.metrics import (
    booking_transition_latency,
    record_booking_request,
    record_transition,
    store_errors,
)
from pg_finder.models.booking import Booking, BookingStatus
from pg_finder.models.listing import Listing
from pg_finder.models.room import Bed, Room
from pg_finder.schemas.booking import BookingCreate
from pg_finder.schemas.user import CallerSession

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.REJECTED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.REJECTED, BookingStatus.COMPLETED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

# Role that may request each target status
TRANSITION_ROLES: dict[BookingStatus, str] = {
    BookingStatus.CONFIRMED: "owner",
    BookingStatus.REJECTED: "owner",
    BookingStatus.COMPLETED: "tenant",
}

ACTIVE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def validate_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    """
    Check a status change against the table.

    Returns False for a no-op (requested == current), True when the change
    should be applied. Raises InvalidTransition otherwise.
    """
    if requested == current:
        return False
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransition(current.value, requested.value)
    return True


def releases_bed(current: BookingStatus, requested: BookingStatus) -> bool:
    return current == BookingStatus.CONFIRMED and requested in (
        BookingStatus.REJECTED,
        BookingStatus.COMPLETED,
    )


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound(f"Booking {booking_id} not found")
    return booking


async def transition_booking(
    db: AsyncSession,
    booking_id: int,
    requested_status: BookingStatus | str,
    caller: CallerSession,
) -> Booking:
    """
    Move a booking to `requested_status` and reconcile its bed.

    Check order: NotFound, Unauthorized (role), no-op, InvalidTransition.
    Confirming re-validates that the bed is still vacant (AlreadyOccupied).
    """
    requested = BookingStatus(requested_status)
    started = time.perf_counter()

    booking = await get_booking(db, booking_id)
    current = BookingStatus(booking.status)
    bed_id: Optional[int] = booking.bed_id
    tenant_id: int = booking.tenant_id

    required_role = TRANSITION_ROLES.get(requested)
    if required_role is not None and caller.role != required_role:
        record_transition(current.value, requested.value, "unauthorized")
        logger.warning(
            "booking_transition_forbidden",
            booking_id=booking_id,
            to_status=requested.value,
            caller_role=caller.role,
        )
        raise Unauthorized(f"Only an {required_role} can mark a booking {requested.value}")

    try:
        apply = validate_transition(current, requested)
    except InvalidTransition:
        record_transition(current.value, requested.value, "invalid")
        logger.warning(
            "booking_transition_invalid",
            booking_id=booking_id,
            from_status=current.value,
            to_status=requested.value,
        )
        raise

    if not apply:
        record_transition(current.value, requested.value, "noop")
        logger.info("booking_transition_noop", booking_id=booking_id, status=current.value)
        return booking

    try:
        if bed_id is not None:
            if requested == BookingStatus.CONFIRMED:
                await _occupy_bed(db, bed_id, tenant_id)
            elif releases_bed(current, requested):
                await _release_bed(db, bed_id, tenant_id)
        await _write_status(db, booking_id, current, requested)
        await db.commit()
    except LedgerError as e:
        await db.rollback()
        result = "occupied" if isinstance(e, AlreadyOccupied) else "invalid"
        record_transition(current.value, requested.value, result)
        logger.warning(
            "booking_transition_conflict",
            booking_id=booking_id,
            bed_id=bed_id,
            from_status=current.value,
            to_status=requested.value,
            error=e.error_code,
        )
        raise
    except DBAPIError as e:
        await db.rollback()
        store_errors.inc()
        record_transition(current.value, requested.value, "store_error")
        logger.error("booking_transition_store_error", booking_id=booking_id, error=str(e))
        raise StoreUnavailable() from e

    await db.refresh(booking)
    booking_transition_latency.observe(time.perf_counter() - started)
    record_transition(current.value, requested.value, "applied")
    logger.info(
        "booking_transitioned",
        booking_id=booking_id,
        bed_id=bed_id,
        tenant_id=tenant_id,
        from_status=current.value,
        to_status=requested.value,
    )
    return booking


async def _occupy_bed(db: AsyncSession, bed_id: int, tenant_id: int) -> None:
    update_result = await db.execute(
        update(Bed)
        .where(Bed.id == bed_id, Bed.is_occupied.is_(False))
        .values(is_occupied=True, tenant_id=tenant_id, version=Bed.version + 1)
        .execution_options(synchronize_session=False)
    )
    if update_result.rowcount == 0:
        exists = await db.scalar(select(Bed.id).where(Bed.id == bed_id))
        if exists is None:
            raise NotFound(f"Bed {bed_id} not found")
        raise AlreadyOccupied(bed_id)

    await _sync_bed(db, bed_id)


async def _release_bed(db: AsyncSession, bed_id: int, tenant_id: int) -> None:
    update_result = await db.execute(
        update(Bed)
        .where(Bed.id == bed_id, Bed.tenant_id == tenant_id)
        .values(is_occupied=False, tenant_id=None, version=Bed.version + 1)
        .execution_options(synchronize_session=False)
    )
    if update_result.rowcount == 0:
        # The bed is not held by this tenant; releasing would evict someone else
        logger.warning("bed_release_skipped", bed_id=bed_id, tenant_id=tenant_id)
        return

    await _sync_bed(db, bed_id)


async def _write_status(
    db: AsyncSession,
    booking_id: int,
    current: BookingStatus,
    requested: BookingStatus,
) -> None:
    update_result = await db.execute(
        update(Booking)
        .where(Booking.id == booking_id, Booking.status == current.value)
        .values(status=requested.value)
        .execution_options(synchronize_session=False)
    )
    if update_result.rowcount == 0:
        raise InvalidTransition(
            current.value,
            requested.value,
            detail="Booking status changed concurrently, reload and retry",
        )


async def _sync_bed(db: AsyncSession, bed_id: int) -> None:
    # Refresh any copy of the bed already held by this session
    await db.get(Bed, bed_id, populate_existing=True)


async def create_bookings(
    db: AsyncSession,
    caller: CallerSession,
    booking_data: BookingCreate,
) -> list[Booking]:
    """
    Create pending booking requests for a tenant, one per selected bed.

    Without bed_ids a single room-level (or listing-level) request is made.
    The number of beds must match `beds_required`; an under-filled
    selection is rejected here rather than at selection time.
    """
    if not caller.is_tenant:
        record_booking_request(False)
        raise Unauthorized("Only tenants can request bookings")

    listing = await db.get(Listing, booking_data.listing_id)
    if listing is None:
        record_booking_request(False)
        raise NotFound(f"Listing {booking_data.listing_id} not found")
    if not listing.availability:
        record_booking_request(False)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This listing is not accepting bookings",
        )

    room: Optional[Room] = None
    if booking_data.room_id is not None:
        room = await db.get(Room, booking_data.room_id)
        if room is None or room.listing_id != listing.id:
            record_booking_request(False)
            raise NotFound(f"Room {booking_data.room_id} not found in listing {listing.id}")
        if not room.availability:
            record_booking_request(False)
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Room {room.room_number} is not available",
            )

    bed_ids = booking_data.bed_ids
    if room is not None and booking_data.beds_required > 0 and len(bed_ids) != booking_data.beds_required:
        record_booking_request(False)
        plural = "s" if booking_data.beds_required > 1 else ""
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Please select {booking_data.beds_required} bed{plural}",
        )

    if bed_ids:
        await _check_requested_beds(db, caller.id, room, bed_ids)

    targets = bed_ids or [None]
    bookings = [
        Booking(
            tenant_id=caller.id,
            listing_id=listing.id,
            room_id=room.id if room is not None else None,
            bed_id=bed_id,
            status=BookingStatus.PENDING.value,
            booking_date=booking_data.booking_date,
        )
        for bed_id in targets
    ]
    db.add_all(bookings)
    await commit_session(db)
    for booking in bookings:
        await db.refresh(booking)

    record_booking_request(True)
    logger.info(
        "booking_requested",
        tenant_id=caller.id,
        listing_id=listing.id,
        room_id=room.id if room is not None else None,
        bed_ids=bed_ids,
        booking_ids=[b.id for b in bookings],
    )
    return bookings


async def _check_requested_beds(
    db: AsyncSession,
    tenant_id: int,
    room: Room,
    bed_ids: list[int],
) -> None:
    result = await db.execute(select(Bed).where(Bed.id.in_(bed_ids)))
    beds = {bed.id: bed for bed in result.scalars().all()}

    for bed_id in bed_ids:
        bed = beds.get(bed_id)
        if bed is None or bed.room_id != room.id:
            record_booking_request(False)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Bed {bed_id} does not belong to room {room.room_number}",
            )
        if bed.is_occupied:
            record_booking_request(False)
            logger.warning("booking_failed_bed_occupied", bed_id=bed_id, tenant_id=tenant_id)
            raise AlreadyOccupied(bed_id)

    # Idempotency: one active request per tenant per bed
    existing = await db.execute(
        select(Booking.bed_id).where(
            Booking.tenant_id == tenant_id,
            Booking.bed_id.in_(bed_ids),
            Booking.status.in_(ACTIVE_STATUSES),
        )
    )
    duplicate = existing.scalars().first()
    if duplicate is not None:
        record_booking_request(False)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"You already have an active booking for bed {duplicate}",
        )


async def authorize_booking_access(
    db: AsyncSession,
    booking: Booking,
    caller: CallerSession,
) -> None:
    """
    Ownership check for the HTTP layer: owners act on bookings of their own
    listings, tenants on their own bookings.
    """
    if caller.is_tenant:
        if booking.tenant_id != caller.id:
            raise Unauthorized("This booking belongs to another tenant")
        return

    owner_id = await db.scalar(select(Listing.owner_id).where(Listing.id == booking.listing_id))
    if owner_id != caller.id:
        raise Unauthorized("This booking is for a listing you do not own")


async def get_tenant_bookings(db: AsyncSession, tenant_id: int) -> list[Booking]:
    """Get all bookings for a tenant, newest first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.tenant_id == tenant_id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def get_listing_bookings(
    db: AsyncSession,
    listing_id: int,
    status_filter: Optional[BookingStatus] = None,
) -> list[Booking]:
    query = select(Booking).where(Booking.listing_id == listing_id)
    if status_filter is not None:
        query = query.where(Booking.status == status_filter.value)
    result = await db.execute(query.order_by(Booking.created_at.desc(), Booking.id.desc()))
    return list(result.scalars().all())


async def count_active_bookings_for_bed(db: AsyncSession, bed_id: int) -> int:
    return await db.scalar(
        select(func.count())
        .select_from(Booking)
        .where(Booking.bed_id == bed_id, Booking.status.in_(ACTIVE_STATUSES))
    )
