"""
Moderation workflow shared by comments and CVs.

Both entities have the same shape: they start pending (``is_approved`` False),
an admin can approve or reject them any number of times, and deletion removes
the record. Only approved records are publicly visible.
"""

from typing import Union

from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFound
from app.core.logger import get_logger
from app.models import CV, Comment

logger = get_logger("moderation")

Moderated = Union[Comment, CV]
ModeratedModel = Union[type[Comment], type[CV]]


def get_or_404(db: Session, model: ModeratedModel, record_id: int) -> Moderated:
    record = (
        db.query(model)
        .options(joinedload(model.user))
        .filter(model.id == record_id)
        .first()
    )
    if record is None:
        raise NotFound(f"{model.__name__} not found")
    return record


def list_approved(db: Session, model: ModeratedModel) -> list[Moderated]:
    """Publicly visible records, newest first."""
    return (
        db.query(model)
        .options(joinedload(model.user))
        .filter(model.is_approved.is_(True))
        .order_by(model.created_at.desc(), model.id.desc())
        .all()
    )


def list_all(db: Session, model: ModeratedModel) -> list[Moderated]:
    """Every record regardless of approval state, newest first."""
    return (
        db.query(model)
        .options(joinedload(model.user))
        .order_by(model.created_at.desc(), model.id.desc())
        .all()
    )


def set_approval(db: Session, model: ModeratedModel, record_id: int, is_approved: bool) -> Moderated:
    """
    Approve or reject a record.

    Rejecting is allowed from either state and simply clears the flag.
    """
    record = get_or_404(db, model, record_id)
    record.is_approved = is_approved
    db.commit()
    db.refresh(record)

    logger.info(f"{model.__name__} {record.id} {'approved' if is_approved else 'rejected'}")
    return record


def delete_record(db: Session, model: ModeratedModel, record_id: int) -> None:
    """Delete a record that has no stored file attached."""
    record = get_or_404(db, model, record_id)
    db.delete(record)
    db.commit()

    logger.info(f"{model.__name__} {record_id} deleted")
