import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, Index

from app.db.base import Base


class ContactStatus(str, enum.Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactMessage(Base):
    """
    Message sent through the public contact form.

    Not tied to a user. IP address and user agent are kept for audit.
    """

    __tablename__ = "contact_messages"
    __table_args__ = (
        Index("ix_contact_messages_status_created_at", "status", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    message = Column(Text, nullable=False)
    status = Column(
        Enum(ContactStatus, name="contact_status", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=ContactStatus.NEW,
        nullable=False,
    )

    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
