"""
Pydantic schemas for rooms, beds and bed selection.
"""

from typing import Optional
from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=50)
    total_beds: int = Field(1, gt=0)
    capacity_per_bed: int = Field(1, gt=0)
    availability: bool = True


class BedResponse(BaseModel):
    id: int
    room_id: int
    bed_number: int
    is_occupied: bool
    tenant_id: Optional[int]

    model_config = {"from_attributes": True}


class RoomResponse(BaseModel):
    id: int
    listing_id: int
    room_number: str
    total_beds: int
    capacity_per_bed: int
    availability: bool
    vacant_beds: int = 0

    model_config = {"from_attributes": True}


class RoomWithBedsResponse(RoomResponse):
    beds: list[BedResponse] = []


class BedCreate(BaseModel):
    bed_number: Optional[int] = Field(None, gt=0)


class BedSelectionResponse(BaseModel):
    room_id: int
    required: int
    policy: str
    bed_ids: list[int]
    bed_numbers: list[int]
    vacant_count: int
