"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .selection import SelectionPolicy
from .random_selection import RandomSelection
from .rotating_selection import RotatingSelection

__all__ = ['SelectionPolicy', 'RandomSelection', 'RotatingSelection']
