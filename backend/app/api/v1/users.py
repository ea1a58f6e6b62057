"""
User administration endpoints.

Deleting a user cascades to everything they own: their comments, and their
CV record together with the stored file.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import UserResponse, require_admin
from app.api.v1.common import MessageResponse
from app.core.errors import NotFound, ValidationError
from app.core.logger import get_logger
from app.db.session import get_db
from app.models import CV, Comment, User
from app.services.file_intake import CVStorage, get_cv_storage

logger = get_logger("users")

router = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
    storage: CVStorage = Depends(get_cv_storage),
):
    if user_id == admin.id:
        raise ValidationError("You cannot delete your own account")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")

    cv = db.query(CV).filter(CV.user_id == user_id).first()
    if cv:
        storage.delete_cv(db, cv)

    deleted_comments = (
        db.query(Comment)
        .filter(Comment.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.delete(user)
    db.commit()

    logger.info(f"Deleted user {user_id} with {deleted_comments} comment(s)")
    return MessageResponse(message="User deleted successfully")
