"""
Rotating selection policy.
Deterministic, but spreads successive selections across the room.
"""

from typing import Any, Optional, Sequence

from pg_finder.services.interfaces.selection import SelectionPolicy


class RotatingSelection(SelectionPolicy):
    """
    Walks the vacant beds (ordered by bed number) from a per-room cursor.

    The cursor advances by the number of beds handed out, so two tenants
    asking for one bed each are offered different beds. State is
    process-local and only affects which beds are *offered*.
    """

    name = "rotating"

    def __init__(self):
        self._cursors: dict[Optional[int], int] = {}

    def choose(self, vacant: Sequence[Any], count: int, room_id: Optional[int] = None) -> list[Any]:
        if count == 0:
            return []
        ordered = sorted(vacant, key=lambda bed: bed.bed_number)
        start = self._cursors.get(room_id, 0) % len(ordered)
        self._cursors[room_id] = start + count
        return [ordered[(start + i) % len(ordered)] for i in range(count)]

    def reset(self, room_id: Optional[int] = None):
        """Forget the cursor for one room, or for all rooms."""
        if room_id is None:
            self._cursors.clear()
        else:
            self._cursors.pop(room_id, None)
