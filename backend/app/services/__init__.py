from app.services import moderation
from app.services.file_intake import ALLOWED_MIME_TYPES, CVStorage, get_cv_storage

__all__ = [
    "moderation",
    "ALLOWED_MIME_TYPES",
    "CVStorage",
    "get_cv_storage",
]
