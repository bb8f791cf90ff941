"""
Booking model representing a tenant's request for a bed.

Key design decisions:
- Status lifecycle: pending -> confirmed | rejected, confirmed -> rejected | completed
- Several bookings may reference one bed; at most one of them is confirmed
- room_id/bed_id are optional so a booking can target a whole room
"""

import enum

from sqlalchemy import Column, Integer, String, Date, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from pg_finder.db.base import Base, TimestampMixin


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    COMPLETED = "completed"


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=True)
    bed_id = Column(Integer, ForeignKey("beds.id", ondelete="CASCADE"), nullable=True, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    booking_date = Column(Date, nullable=False)

    # Relationships
    tenant = relationship("User", back_populates="bookings")
    listing = relationship("Listing", back_populates="bookings")
    room = relationship("Room", lazy="selectin")
    bed = relationship("Bed", lazy="selectin")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'rejected', 'completed')",
            name="check_booking_status",
        ),
        # Owner dashboard: bookings of a listing by status
        Index("ix_bookings_listing_status", "listing_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, tenant={self.tenant_id}, bed={self.bed_id}, status={self.status})>"
