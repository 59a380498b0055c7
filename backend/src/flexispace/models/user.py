"""
User Model
Represents guests who book spaces and providers who list them
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime
from sqlalchemy import Enum as SQLEnum
from sqlalchemy import Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from flexispace.database import Base


class UserType(str, enum.Enum):
    """User types in the marketplace"""

    GUEST = "GUEST"  # Books spaces
    PROVIDER = "PROVIDER"  # Lists spaces (and can still book)
    ADMIN = "ADMIN"  # Platform-wide access


class User(Base):
    """
    User Model
    A marketplace account; the same user can book spaces and list their own
    """

    __tablename__ = "users"

    # Primary Key
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    name = Column(String(255), nullable=False)
    phone = Column(String(20))
    company_name = Column(String(255))
    image = Column(String(500))

    user_type = Column(
        SQLEnum(UserType, values_callable=lambda x: [e.value for e in x]),
        default=UserType.GUEST,
        nullable=False,
        index=True,
    )

    # Space ids as strings
    favorite_ids = Column(JSON, default=list)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Security
    last_login = Column(DateTime, nullable=True)
    last_password_change = Column(DateTime, default=datetime.utcnow)
    failed_login_attempts = Column(Integer, default=0)
    locked_until = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    spaces = relationship("Space", back_populates="user", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(email='{self.email}', type='{self.user_type}')>"

    @property
    def is_admin(self) -> bool:
        return self.user_type == UserType.ADMIN

    @property
    def is_provider(self) -> bool:
        return self.user_type in [UserType.PROVIDER, UserType.ADMIN]
