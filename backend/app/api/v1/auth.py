"""
Authentication API endpoints and the authorization gate.

Handles registration and login with JWT token generation, and provides the
``get_current_user`` / ``RoleGuard`` dependencies that protected routes use.
"""

from datetime import datetime
from typing import Optional
import re

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import field_validator
from sqlalchemy.orm import Session

from app.api.v1.common import CamelModel
from app.core.errors import Conflict, Forbidden, Unauthenticated
from app.core.logger import get_logger
from app.core.security import (
    create_access_token,
    get_password_hash,
    get_token_user_id,
    verify_password,
)
from app.db.session import get_db
from app.models import User, UserRole

logger = get_logger("auth")

router = APIRouter()

# Bearer scheme; missing credentials are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"


def normalize_email(v: str) -> str:
    """Trim, validate and lower-case an email address."""
    v = v.strip()
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Please provide a valid email")
    return v.lower()


# ============== Pydantic Schemas ==============


class UserRegister(CamelModel):
    """Schema for user registration."""

    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v


class UserLogin(CamelModel):
    email: str
    password: str


class UserResponse(CamelModel):
    """Schema for user response (without password)."""

    id: int
    name: str
    email: str
    role: UserRole
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    """Token plus the profile it was issued for."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email.strip().lower())
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency resolving the bearer token to a user.

    Raises Unauthenticated if the token is missing, invalid, expired, or
    belongs to a user that no longer exists.
    """
    if credentials is None:
        raise Unauthenticated("Not authorized, no token")

    user_id = get_token_user_id(credentials.credentials)
    if user_id is None:
        raise Unauthenticated("Not authorized, token failed")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("Not authorized, user not found")

    return user


class RoleGuard:
    """
    Dependency that only lets through users whose role is in ``roles``.

    Usage: ``current_user: User = Depends(RoleGuard(UserRole.ADMIN))``.
    """

    def __init__(self, *roles: UserRole):
        self.roles = frozenset(roles)

    async def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in self.roles:
            logger.warning(f"User {current_user.id} ({current_user.role.value}) denied")
            raise Forbidden(
                f"User role {current_user.role.value} is not authorized to access this route"
            )
        return current_user


require_admin = RoleGuard(UserRole.ADMIN)


def build_auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )


# ============== API Endpoints ==============


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user.

    Self-registration always creates a regular ``user``; admins are
    provisioned by the seed script.
    """
    if get_user_by_email(db, user_data.email):
        raise Conflict("User already exists with this email")

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=UserRole.USER,
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    return build_auth_response(new_user)


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange email and password for a JWT access token."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise Unauthenticated("Invalid email or password")

    return build_auth_response(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user profile.

    Requires valid JWT token in Authorization header.
    """
    return current_user
