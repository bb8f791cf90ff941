"""
Pydantic schemas for listings and listing search.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

GenderPreference = Literal["male", "female", "any"]

# Price ceiling used by the search sidebar when the caller gives none
DEFAULT_MAX_PRICE = 15000


class ListingCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    address: str = Field(..., min_length=2, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=1000)
    price: int = Field(..., gt=0)
    gender_preference: GenderPreference = "any"
    amenities: list[str] = Field(default_factory=list)
    availability: bool = True


class ListingUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    address: Optional[str] = Field(None, min_length=2, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    image_url: Optional[str] = Field(None, max_length=1000)
    price: Optional[int] = Field(None, gt=0)
    gender_preference: Optional[GenderPreference] = None
    amenities: Optional[list[str]] = None
    availability: Optional[bool] = None


class ListingResponse(BaseModel):
    id: int
    owner_id: int
    name: str
    address: str
    description: Optional[str]
    image_url: Optional[str]
    price: int
    gender_preference: GenderPreference
    amenities: list[str]
    availability: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class ListingListResponse(BaseModel):
    listings: list[ListingResponse]
    total: int
    page: int
    page_size: int
    cached: bool = False


class PriceRange(BaseModel):
    min: int = Field(0, ge=0)
    max: int = Field(DEFAULT_MAX_PRICE, ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "PriceRange":
        if self.min > self.max:
            raise ValueError("price range minimum exceeds maximum")
        return self


class FilterOptions(BaseModel):
    price_range: PriceRange = Field(default_factory=PriceRange)
    location: str = ""
    gender_preference: Literal["", "male", "female", "any"] = ""
    amenities: set[str] = Field(default_factory=set)
