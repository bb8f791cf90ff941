"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from pg_finder.models.booking import BookingStatus
from pg_finder.schemas.listing import ListingResponse
from pg_finder.schemas.room import BedResponse


class BookingCreate(BaseModel):
    listing_id: int
    room_id: Optional[int] = None
    bed_ids: list[int] = Field(default_factory=list)
    beds_required: int = Field(default=1, ge=0, le=10)
    booking_date: date = Field(default_factory=date.today)

    @model_validator(mode="after")
    def check_beds(self) -> "BookingCreate":
        if self.bed_ids and self.room_id is None:
            raise ValueError("room_id is required when bed_ids are given")
        if len(set(self.bed_ids)) != len(self.bed_ids):
            raise ValueError("bed_ids must not repeat")
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingResponse(BaseModel):
    id: int
    tenant_id: int
    listing_id: int
    room_id: Optional[int]
    bed_id: Optional[int]
    status: BookingStatus
    booking_date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingDetailResponse(BookingResponse):
    listing: Optional[ListingResponse] = None
    room_number: Optional[str] = None
    bed: Optional[BedResponse] = None
