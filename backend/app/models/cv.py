from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.base import Base


class CV(Base):
    """
    Uploaded CV metadata. A user owns at most one CV.

    Re-uploading overwrites this row in place (new file, approval reset)
    rather than inserting a second one.
    """

    __tablename__ = "cvs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Owner identity at upload time
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)

    file_name = Column(String, nullable=False)  # cv-<timestamp>-<random>.<ext>
    original_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False)

    is_approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="cv")
