"""
CV File Intake Service.

Validates uploaded CV binaries and keeps exactly one stored file per user.

Replacing a CV writes the new file first, commits the metadata, and only then
removes the previous file. A rejected upload never touches the disk, and a
failed commit removes the new file and leaves the old one in place.
"""

import os
import random
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import EmptyUpload, FileTooLarge, InvalidFileType, ServerError
from app.core.logger import get_logger
from app.models import CV, User

logger = get_logger("file_intake")

# Accepted MIME types and the extension used when the upload name has none
ALLOWED_MIME_TYPES = {
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}

# Conditional replacements retried when another upload of the same user wins the race
MAX_REPLACE_ATTEMPTS = 5


class CVStorage:
    """Filesystem-backed store for uploaded CVs."""

    def __init__(self, upload_dir: str, max_size: int):
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size

    # ============== Validation ==============

    def validate(self, content: bytes, mime_type: Optional[str]) -> None:
        """Reject anything that is not a non-empty PDF/DOC/DOCX within the size limit."""
        if mime_type not in ALLOWED_MIME_TYPES:
            raise InvalidFileType()
        if not content:
            raise EmptyUpload()
        if len(content) > self.max_size:
            raise FileTooLarge(
                f"File too large. Maximum size is {self.max_size // (1024 * 1024)}MB."
            )

    # ============== Filesystem ==============

    def generate_file_name(self, original_name: str, mime_type: str) -> str:
        """Build ``cv-<timestamp>-<random>.<ext>`` for a new upload."""
        ext = os.path.splitext(original_name or "")[1].lower()
        if ext not in ALLOWED_MIME_TYPES.values():
            ext = ALLOWED_MIME_TYPES[mime_type]

        timestamp = int(time.time() * 1000)
        suffix = random.randint(0, 10**9)
        return f"cv-{timestamp}-{suffix}{ext}"

    def write(self, file_name: str, content: bytes) -> Path:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / file_name
        path.write_bytes(content)
        return path

    def remove(self, file_path: str) -> bool:
        """
        Delete a stored file.

        Returns:
            False if the file was already gone, True otherwise
        """
        path = Path(file_path)
        if not path.exists():
            logger.warning(f"Stored file already missing: {path.name}")
            return False
        path.unlink()
        return True

    # ============== CV records ==============

    def _current_cv(self, db: Session, user_id: int) -> Optional[CV]:
        """Newest CV row of a user, re-read from the database."""
        return (
            db.query(CV)
            .populate_existing()
            .filter(CV.user_id == user_id)
            .order_by(CV.id.desc())
            .first()
        )

    def store_cv(
        self,
        db: Session,
        owner: User,
        content: bytes,
        mime_type: Optional[str],
        original_name: str,
    ) -> tuple[CV, bool]:
        """
        Validate and persist an upload, replacing the owner's existing CV if any.

        A replacement only succeeds against the file path it read. If another
        upload swapped the file in between, the row is re-read and the swap is
        retried, so each writer removes exactly the file it replaced.

        Returns:
            The CV record and True if it was newly created, False if replaced
        """
        self.validate(content, mime_type)

        existing = self._current_cv(db, owner.id)
        file_name = self.generate_file_name(original_name, mime_type)
        new_path = self.write(file_name, content)

        replaced_path: Optional[str] = None
        for _ in range(MAX_REPLACE_ATTEMPTS):
            try:
                if existing is None:
                    cv = CV(
                        user_id=owner.id,
                        name=owner.name,
                        email=owner.email,
                        file_name=file_name,
                        original_name=original_name,
                        file_path=str(new_path),
                        file_size=len(content),
                        mime_type=mime_type,
                    )
                    db.add(cv)
                    db.commit()
                    break

                cv_id, old_path = existing.id, existing.file_path
                updated = (
                    db.query(CV)
                    .filter(CV.id == cv_id, CV.file_path == old_path)
                    .update(
                        {
                            CV.file_name: file_name,
                            CV.original_name: original_name,
                            CV.file_path: str(new_path),
                            CV.file_size: len(content),
                            CV.mime_type: mime_type,
                            CV.is_approved: False,
                            CV.updated_at: datetime.utcnow(),
                        },
                        synchronize_session=False,
                    )
                )
                db.commit()
            except Exception:
                db.rollback()
                self.remove(str(new_path))
                raise

            if updated:
                cv = existing
                replaced_path = old_path
                break

            logger.info(f"CV {cv_id} was replaced by a concurrent upload, retrying")
            existing = self._current_cv(db, owner.id)
        else:
            self.remove(str(new_path))
            raise ServerError("Could not store CV, please try again")

        db.refresh(cv)

        if replaced_path and replaced_path != str(new_path):
            self.remove(replaced_path)

        self._drop_stale_duplicates(db, cv)

        logger.info(
            f"{'Replaced' if replaced_path else 'Stored'} CV {cv.id} for user {owner.id} "
            f"({cv.file_size} bytes, {cv.mime_type})"
        )
        return cv, replaced_path is None

    def _drop_stale_duplicates(self, db: Session, cv: CV) -> None:
        """
        Remove older rows left behind by concurrent first uploads of the same user.

        Every writer keeps only the newest row, so concurrent uploads converge
        on a single CV.
        """
        stale = (
            db.query(CV)
            .filter(CV.user_id == cv.user_id, CV.id < cv.id)
            .all()
        )
        for duplicate in stale:
            logger.warning(f"Dropping duplicate CV {duplicate.id} for user {cv.user_id}")
            self.remove(duplicate.file_path)
            db.delete(duplicate)
        if stale:
            db.commit()

    def delete_cv(self, db: Session, cv: CV) -> None:
        """
        Delete the record, then its stored file (a missing file is only a warning).

        The file is removed only after the commit, so a failed commit leaves
        both the record and its file in place.
        """
        cv_id = cv.id
        file_path = cv.file_path
        db.delete(cv)
        db.commit()
        self.remove(file_path)
        logger.info(f"Deleted CV {cv_id}")


def get_cv_storage() -> CVStorage:
    """Dependency returning the storage configured for this process."""
    return CVStorage(settings.UPLOAD_DIR, settings.MAX_CV_SIZE_BYTES)
