"""
Bed availability selection.

Given a room's beds and a required count, choose which vacant beds to offer
for a multi-bed booking. Selection is advisory: nothing is locked or
reserved here, so two tenants can be offered the same bed. Contention is
resolved when a booking is confirmed (see booking_service).
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pg_finder.core.exceptions import NotFound
from pg_finder.core.logging import get_logger
from pg_finder.core.metrics import record_bed_selection
from pg_finder.models.room import Bed, Room
from pg_finder.services.interfaces.selection import SelectionPolicy
from pg_finder.services.strategy_factory import get_selection_policy

logger = get_logger(__name__)


@dataclass(frozen=True)
class BedSelection:
    bed_ids: list = field(default_factory=list)
    bed_numbers: list[int] = field(default_factory=list)
    vacant_count: int = 0
    policy: str = ""


def select_available_beds(
    beds: Sequence[Any],
    required: int,
    policy: Optional[SelectionPolicy] = None,
    room_id: Optional[int] = None,
) -> BedSelection:
    """
    Choose min(required, vacant) distinct vacant beds.

    Under-filling is not an error; the caller rejects a booking that does not
    get enough beds. The input beds are never modified.
    """
    if required < 1:
        raise ValueError("required must be at least 1")

    policy = policy or get_selection_policy()
    vacant = [bed for bed in beds if not bed.is_occupied]
    count = min(required, len(vacant))
    chosen = policy.choose(vacant, count, room_id=room_id) if count else []

    record_bed_selection(policy.name, full=count == required)
    logger.debug(
        "beds_selected",
        room_id=room_id,
        policy=policy.name,
        required=required,
        vacant=len(vacant),
        selected=[bed.bed_number for bed in chosen],
    )

    return BedSelection(
        bed_ids=[bed.id for bed in chosen],
        bed_numbers=[bed.bed_number for bed in chosen],
        vacant_count=len(vacant),
        policy=policy.name,
    )


async def get_beds_by_room(db: AsyncSession, room_id: int) -> list[Bed]:
    """All beds of a room ordered by bed number. 404 if the room is unknown."""
    room = await db.get(Room, room_id)
    if room is None:
        raise NotFound(f"Room {room_id} not found")

    result = await db.execute(
        select(Bed).where(Bed.room_id == room_id).order_by(Bed.bed_number.asc())
    )
    return list(result.scalars().all())


async def select_beds_for_room(
    db: AsyncSession,
    room_id: int,
    required: int,
    policy: Optional[SelectionPolicy] = None,
) -> BedSelection:
    beds = await get_beds_by_room(db, room_id)
    return select_available_beds(beds, required, policy=policy, room_id=room_id)
