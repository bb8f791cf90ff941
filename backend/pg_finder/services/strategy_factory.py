"""
Bed selection policy factory.
Configures which selection policy the selector uses.
"""

from typing import Optional

from pg_finder.services.interfaces.selection import SelectionPolicy
from pg_finder.services.interfaces.random_selection import RandomSelection
from pg_finder.services.interfaces.rotating_selection import RotatingSelection
from pg_finder.core.config import get_settings


def build_selection_policy(name: str) -> SelectionPolicy:
    """
    Build a policy by name.

    - random: uniform sample (reference behaviour)
    - rotating: per-room cursor

    Unknown names raise ValueError so a typo in BED_SELECTION_POLICY fails loudly.
    """
    if name == 'random':
        return RandomSelection()
    if name == 'rotating':
        return RotatingSelection()
    raise ValueError(f"Unknown bed selection policy: {name!r}")


# Singleton instance
_policy: Optional[SelectionPolicy] = None


def get_selection_policy() -> SelectionPolicy:
    """Get selection policy singleton."""
    global _policy
    if _policy is None:
        _policy = build_selection_policy(get_settings().BED_SELECTION_POLICY)
    return _policy


def set_selection_policy(policy: Optional[SelectionPolicy]):
    """Replace the singleton (None resets to the configured policy)."""
    global _policy
    _policy = policy
