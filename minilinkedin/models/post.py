"""Post model."""

from sqlalchemy import Column, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship

from minilinkedin.database import Base
from minilinkedin.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """Feed post written by a user."""

    __tablename__ = "posts"
    __table_args__ = (Index("ix_posts_created_at", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)

    # Relationships
    owner = relationship("User", back_populates="posts")
