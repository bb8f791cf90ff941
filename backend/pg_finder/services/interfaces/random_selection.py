"""
Random selection policy - the default.
Avoids always handing out the lowest-numbered beds.
"""

import random
from typing import Any, Optional, Sequence

from pg_finder.services.interfaces.selection import SelectionPolicy


class RandomSelection(SelectionPolicy):
    """
    Uniform random sample without replacement.

    Pass a seeded `random.Random` to make selections reproducible.
    """

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def choose(self, vacant: Sequence[Any], count: int, room_id: Optional[int] = None) -> list[Any]:
        return self._rng.sample(list(vacant), count)
