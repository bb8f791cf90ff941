"""
User model with secure password storage and a marketplace role.
"""

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint
from sqlalchemy.orm import relationship

from pg_finder.db.base import Base, TimestampMixin

ROLE_TENANT = "tenant"
ROLE_OWNER = "owner"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(150), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_TENANT)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    listings = relationship("Listing", back_populates="owner", lazy="selectin")
    bookings = relationship("Booking", back_populates="tenant", lazy="selectin")

    __table_args__ = (
        CheckConstraint("role IN ('tenant', 'owner')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
