"""User model."""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from minilinkedin.database import Base
from minilinkedin.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Registered member; owns posts."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Relationships
    posts = relationship("Post", back_populates="owner", cascade="all, delete-orphan")
