"""
Contact API endpoints.

Public contact form plus the admin inbox. Messages have a free-form status
(new, read, replied, archived) with no transition rules.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.v1.auth import normalize_email, require_admin
from app.api.v1.common import CamelModel
from app.core.errors import NotFound
from app.core.logger import get_logger
from app.db.session import get_db
from app.models import ContactMessage, ContactStatus, User

logger = get_logger("contact")

router = APIRouter()


# ============== Pydantic Schemas ==============


class ContactCreate(CamelModel):
    """Schema for a contact form submission."""

    name: str
    email: str
    message: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 10:
            raise ValueError("Message must be at least 10 characters long")
        return v


class ContactStatusUpdate(CamelModel):
    status: ContactStatus


class ContactResponse(CamelModel):
    id: int
    name: str
    email: str
    message: str
    status: ContactStatus
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ContactSubmitResponse(CamelModel):
    message: str
    success: bool


class ContactListResponse(CamelModel):
    message: str
    data: list[ContactResponse]


class ContactUpdateResponse(CamelModel):
    message: str
    data: ContactResponse
    success: bool = True


# ============== API Endpoints ==============


@router.post("", response_model=ContactSubmitResponse)
async def submit_contact(
    data: ContactCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Store a contact form submission along with the sender's IP and user agent."""
    contact = ContactMessage(
        name=data.name,
        email=data.email,
        message=data.message,
        status=ContactStatus.NEW,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    db.add(contact)
    db.commit()

    logger.info(f"New contact form submission {contact.id} from {data.name} <{data.email}>")

    return ContactSubmitResponse(
        message="Thank you for your message! I will get back to you soon.",
        success=True,
    )


@router.get("/all", response_model=ContactListResponse)
async def list_contacts(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    contacts = (
        db.query(ContactMessage)
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .all()
    )
    return ContactListResponse(
        message="Contact messages retrieved successfully",
        data=[ContactResponse.model_validate(c) for c in contacts],
    )


@router.put("/{contact_id}/status", response_model=ContactUpdateResponse)
async def update_contact_status(
    contact_id: int,
    data: ContactStatusUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """Set any status on a message; every status is reachable from every other."""
    contact = db.query(ContactMessage).filter(ContactMessage.id == contact_id).first()
    if contact is None:
        raise NotFound("Contact message not found")

    contact.status = data.status
    db.commit()
    db.refresh(contact)

    return ContactUpdateResponse(
        message="Contact message status updated successfully",
        data=ContactResponse.model_validate(contact),
    )
