"""
Room and Bed models.

Key design decisions:
- `total_beds` is the declared capacity; bed rows are the source of truth
  for availability
- (room_id, bed_number) is unique so bed numbers read unambiguously
- Bed `version` increments on each occupancy change and backs the
  conditional updates in the booking ledger
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from pg_finder.db.base import Base, TimestampMixin


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False, index=True)
    room_number = Column(String(50), nullable=False)
    total_beds = Column(Integer, nullable=False, default=1)
    capacity_per_bed = Column(Integer, nullable=False, default=1)
    availability = Column(Boolean, nullable=False, default=True)

    # Relationships
    listing = relationship("Listing", back_populates="rooms")
    beds = relationship(
        "Bed",
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="Bed.bed_number",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("listing_id", "room_number", name="uq_listing_room_number"),
        CheckConstraint("total_beds > 0", name="check_room_total_beds_positive"),
        CheckConstraint("capacity_per_bed > 0", name="check_room_capacity_per_bed_positive"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, listing={self.listing_id}, number={self.room_number})>"


class Bed(Base, TimestampMixin):
    __tablename__ = "beds"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    bed_number = Column(Integer, nullable=False)
    is_occupied = Column(Boolean, nullable=False, default=False)
    tenant_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    room = relationship("Room", back_populates="beds")

    __table_args__ = (
        UniqueConstraint("room_id", "bed_number", name="uq_room_bed_number"),
        CheckConstraint("bed_number > 0", name="check_bed_number_positive"),
        # A vacant bed never names a tenant
        CheckConstraint("is_occupied OR tenant_id IS NULL", name="check_vacant_bed_has_no_tenant"),
    )

    def __repr__(self) -> str:
        state = "occupied" if self.is_occupied else "vacant"
        return f"<Bed(id={self.id}, room={self.room_id}, number={self.bed_number}, {state})>"
