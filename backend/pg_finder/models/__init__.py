from pg_finder.models.user import User
from pg_finder.models.listing import Listing
from pg_finder.models.room import Room, Bed
from pg_finder.models.booking import Booking, BookingStatus

__all__ = ["User", "Listing", "Room", "Bed", "Booking", "BookingStatus"]
