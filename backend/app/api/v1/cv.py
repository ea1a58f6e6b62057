"""
CV API endpoints.

Each user keeps a single CV. Uploading again replaces the stored file and
sends the CV back to moderation.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.api.v1.common import AdminUser, ApprovalUpdate, CamelModel, MessageResponse
from app.core.errors import EmptyUpload, NotFound
from app.core.logger import get_logger
from app.db.session import get_db
from app.models import CV, User
from app.services import moderation
from app.services.file_intake import CVStorage, get_cv_storage

logger = get_logger("cv")

router = APIRouter()


# ============== Pydantic Schemas ==============


class CVResponse(CamelModel):
    """CV metadata. The server-side path is never exposed."""

    id: int
    name: str
    email: str
    file_name: str
    original_name: str
    file_size: int
    mime_type: str
    is_approved: bool
    created_at: datetime
    updated_at: Optional[datetime] = None


class AdminCVResponse(CVResponse):
    user: AdminUser


# ============== API Endpoints ==============


@router.post(
    "/upload",
    response_model=CVResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Existing CV replaced"}},
)
async def upload_cv(
    response: Response,
    cv: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    storage: CVStorage = Depends(get_cv_storage),
):
    """
    Upload a CV (PDF, DOC or DOCX, at most 5MB) in the multipart field ``cv``.

    Returns 201 for a first upload and 200 when an existing CV was replaced.
    """
    if cv is None or not cv.filename:
        raise EmptyUpload()

    # Read one byte past the limit so oversize files are detected without buffering them whole
    content = await cv.read(storage.max_size + 1)

    record, created = storage.store_cv(
        db,
        owner=current_user,
        content=content,
        mime_type=cv.content_type,
        original_name=cv.filename,
    )

    if not created:
        response.status_code = status.HTTP_200_OK
    return record


@router.get("/my-cv", response_model=CVResponse)
async def get_my_cv(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    cv = db.query(CV).filter(CV.user_id == current_user.id).first()
    if cv is None:
        raise NotFound("CV not found")
    return cv


@router.get("/download/{cv_id}")
async def download_cv(
    cv_id: int,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """Stream the stored file under its original name (admin only)."""
    cv = moderation.get_or_404(db, CV, cv_id)

    if not Path(cv.file_path).exists():
        logger.warning(f"File for CV {cv.id} missing on disk")
        raise NotFound("File not found")

    return FileResponse(
        cv.file_path,
        media_type=cv.mime_type,
        filename=cv.original_name,
    )


@router.get("/all", response_model=list[AdminCVResponse])
async def list_all_cvs(
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    return moderation.list_all(db, CV)


@router.put("/{cv_id}/approve", response_model=AdminCVResponse)
async def approve_cv(
    cv_id: int,
    data: ApprovalUpdate,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
):
    """Approve (``isApproved: true``) or reject (``false``) a CV."""
    return moderation.set_approval(db, CV, cv_id, data.is_approved)


@router.delete("/{cv_id}", response_model=MessageResponse)
async def delete_cv(
    cv_id: int,
    db: Session = Depends(get_db),
    _admin: User = Depends(require_admin),
    storage: CVStorage = Depends(get_cv_storage),
):
    """Delete the CV record and its stored file (admin only)."""
    cv = moderation.get_or_404(db, CV, cv_id)
    storage.delete_cv(db, cv)
    return MessageResponse(message="CV deleted successfully")
