from app.models.user import User, UserRole
from app.models.comment import Comment
from app.models.cv import CV
from app.models.contact import ContactMessage, ContactStatus

__all__ = ["User", "UserRole", "Comment", "CV", "ContactMessage", "ContactStatus"]
