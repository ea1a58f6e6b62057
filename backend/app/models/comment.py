from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base

MAX_MESSAGE_LENGTH = 500


class Comment(Base):
    """
    Visitor comment with a star rating.

    Name and email are copied from the author at creation time so the
    display stays stable if the user record changes later. Only approved
    comments are publicly listed.
    """

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(String(MAX_MESSAGE_LENGTH), nullable=False)
    rating = Column(Integer, default=5, nullable=False)  # 1-5

    is_approved = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="comments")
