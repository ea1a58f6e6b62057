"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
"""

from fastapi import APIRouter

from app.api.v1 import auth, comments, cv, contact, users

api_router = APIRouter()

# Include all v1 routers with their prefixes and tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    comments.router,
    prefix="/comments",
    tags=["Comments"],
)

api_router.include_router(
    cv.router,
    prefix="/cv",
    tags=["CV"],
)

api_router.include_router(
    contact.router,
    prefix="/contact",
    tags=["Contact"],
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"],
)
