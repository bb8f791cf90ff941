"""
Bed selection policy interface.
Allows swapping how vacant beds are handed out without touching the selector.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


class SelectionPolicy(ABC):
    """
    Interface for choosing which vacant beds satisfy a multi-bed request.

    Implementations:
    - RandomSelection: uniform random sample of the vacant beds
    - RotatingSelection: per-room cursor so consecutive requests start elsewhere

    Policies only pick; they never mark, lock or reserve a bed.
    """

    name: str = "abstract"

    @abstractmethod
    def choose(self, vacant: Sequence[Any], count: int, room_id: Optional[int] = None) -> list[Any]:
        """
        Pick `count` beds from `vacant`.

        Args:
            vacant: Beds known to be unoccupied; never empty when count > 0
            count: Number of beds to return, 0 <= count <= len(vacant)
            room_id: Room the beds belong to, for policies that keep per-room state

        Returns:
            A list of `count` distinct beds taken from `vacant`
        """
        pass
