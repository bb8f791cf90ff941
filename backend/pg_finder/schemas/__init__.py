from pg_finder.schemas.user import UserCreate, UserResponse, UserLogin, Token, CallerSession
from pg_finder.schemas.listing import (
    ListingCreate, ListingUpdate, ListingResponse, ListingListResponse, FilterOptions, PriceRange,
)
from pg_finder.schemas.room import (
    RoomCreate, RoomResponse, RoomWithBedsResponse, BedCreate, BedResponse, BedSelectionResponse,
)
from pg_finder.schemas.booking import (
    BookingCreate, BookingResponse, BookingDetailResponse, BookingStatusUpdate,
)

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "Token", "CallerSession",
    "ListingCreate", "ListingUpdate", "ListingResponse", "ListingListResponse",
    "FilterOptions", "PriceRange",
    "RoomCreate", "RoomResponse", "RoomWithBedsResponse", "BedCreate", "BedResponse",
    "BedSelectionResponse",
    "BookingCreate", "BookingResponse", "BookingDetailResponse", "BookingStatusUpdate",
]
