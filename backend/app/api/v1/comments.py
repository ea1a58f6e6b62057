"""
Comments API endpoints.

Visitors post comments with a rating; they stay hidden until an admin
approves them.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import Field, field_validator
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.api.v1.common import AdminUser, ApprovalUpdate, CamelModel, MessageResponse, PublicUser
from app.core.logger import get_logger
from app.db.session import get_db
from app.models import Comment, User
from app.models.comment import MAX_MESSAGE_LENGTH
from app.services import moderation

logger = get_logger("comments")

router = APIRouter()


# ============== Pydantic Schemas ==============


class CommentCreate(CamelModel):
    """Schema for a new comment. Rating defaults to five stars."""

    message: str
    rating: int = Field(5, ge=1, le=5)

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v = v.strip()
        if not 1 <= len(v) <= MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message must be between 1 and {MAX_MESSAGE_LENGTH} characters")
        return v


class PublicComment(CamelModel):
    """Comment as shown on the public page (no email)."""

    id: int
    name: str
    message: str
    rating: int
    is_approved: bool
    created_at: datetime
    user: PublicUser


class AdminComment(PublicComment):
    email: str
    user: AdminUser


# ============== API Endpoints ==============


@router.get("", response_model=list[PublicComment])
async def list_approved_comments(db: Session = Depends(get_db)):
    """Approved comments, newest first."""
    return moderation.list_approved(db, Comment)


@router.post("", response_model=PublicComment, status_code=status.HTTP_201_CREATED)
async def create_comment(
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a comment as the current user.

    New comments always start unapproved, whoever posts them.
    """
    comment = Comment(
        user_id=current_user.id,
        name=current_user.name,
        email=current_user.email,
        message=data.message,
        rating=data.rating,
        is_approved=False,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    logger.info(f"Comment {comment.id} submitted by user {current_user.id}")
    return comment


@router.get("/all", response_model=list[AdminComment])
async def list_all_comments(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """All comments regardless of approval state (admin only)."""
    return moderation.list_all(db, Comment)


@router.put("/{comment_id}/approve", response_model=AdminComment)
async def approve_comment(
    comment_id: int,
    data: ApprovalUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """Approve (``isApproved: true``) or reject (``false``) a comment."""
    return moderation.set_approval(db, Comment, comment_id, data.is_approved)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    moderation.delete_record(db, Comment, comment_id)
    return MessageResponse(message="Comment deleted successfully")
