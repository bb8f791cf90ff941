"""
Listing model: an owner's advertised PG property.

Key design decisions:
- `address` is the single location field; location search matches against it
- `amenities` is a JSON list of labels drawn from a fixed vocabulary
- Deleting a listing cascades to rooms, beds and bookings
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Index, CheckConstraint, JSON
from sqlalchemy.orm import relationship

from pg_finder.db.base import Base, TimestampMixin

GENDER_PREFERENCES = ("male", "female", "any")


class Listing(Base, TimestampMixin):
    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    description = Column(String(2000), nullable=True)
    image_url = Column(String(1000), nullable=True)
    price = Column(Integer, nullable=False)
    gender_preference = Column(String(10), nullable=False, default="any")
    amenities = Column(JSON, nullable=False, default=list)
    availability = Column(Boolean, nullable=False, default=True)

    # Relationships
    owner = relationship("User", back_populates="listings")
    rooms = relationship(
        "Room", back_populates="listing", cascade="all, delete-orphan"
    )
    bookings = relationship(
        "Booking", back_populates="listing", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_listing_price_non_negative"),
        CheckConstraint(
            "gender_preference IN ('male', 'female', 'any')", name="check_listing_gender_preference"
        ),
        # Price range is the first predicate of every search
        Index("ix_listings_price", "price"),
    )

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, name={self.name}, owner={self.owner_id})>"
