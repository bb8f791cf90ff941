"""
Room and bed endpoints, including bed selection for multi-bed requests.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.db.session import get_db
from pg_finder.core.security import get_current_caller
from pg_finder.schemas.room import BedCreate, BedResponse, BedSelectionResponse
from pg_finder.schemas.user import CallerSession
from pg_finder.services import room_service
from pg_finder.services.bed_selector import get_beds_by_room, select_beds_for_room

router = APIRouter(tags=["Rooms"])


@router.get("/rooms/{room_id}/beds", response_model=list[BedResponse])
async def list_beds_endpoint(room_id: int, db: AsyncSession = Depends(get_db)):
    """Beds of a room with live occupancy."""
    return await get_beds_by_room(db, room_id)


@router.get("/rooms/{room_id}/beds/selection", response_model=BedSelectionResponse)
async def select_beds_endpoint(
    room_id: int,
    required: int = Query(1, ge=1, le=10),
    db: AsyncSession = Depends(get_db),
):
    """
    Offer vacant beds for a request of `required` beds.

    Nothing is reserved; fewer beds than required are returned when the room
    cannot fill the request.
    """
    selection = await select_beds_for_room(db, room_id, required)
    return BedSelectionResponse(
        room_id=room_id,
        required=required,
        policy=selection.policy,
        bed_ids=selection.bed_ids,
        bed_numbers=selection.bed_numbers,
        vacant_count=selection.vacant_count,
    )


@router.post("/rooms/{room_id}/beds", response_model=BedResponse, status_code=status.HTTP_201_CREATED)
async def add_bed_endpoint(
    room_id: int,
    bed_data: BedCreate,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    return await room_service.add_bed(db, room_id, caller, bed_data)


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room_endpoint(
    room_id: int,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    await room_service.delete_room(db, room_id, caller)


@router.delete("/beds/{bed_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bed_endpoint(
    bed_id: int,
    caller: CallerSession = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    await room_service.delete_bed(db, bed_id, caller)
