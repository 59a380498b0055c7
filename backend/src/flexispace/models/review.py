"""
Review Model
A guest's rating of a space after a completed booking
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    space_id = Column(UUID(as_uuid=True), ForeignKey("spaces.id"), nullable=False, index=True)
    booking_id = Column(UUID(as_uuid=True), ForeignKey("bookings.id"), unique=True, nullable=False)

    # 1-5
    rating = Column(Integer, nullable=False)
    cleanliness_rating = Column(Integer)
    amenities_rating = Column(Integer)
    location_rating = Column(Integer)
    value_rating = Column(Integer)

    comment = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="reviews")
    space = relationship("Space", back_populates="reviews")
    booking = relationship("Booking", back_populates="review")

    def __repr__(self):
        return f"<Review(space_id='{self.space_id}', rating={self.rating})>"
