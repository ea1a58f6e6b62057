"""
Schemas shared by several routers.

Wire names are camelCase (``isApproved``, ``createdAt``) for the web client;
Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PublicUser(CamelModel):
    id: int
    name: str


class AdminUser(PublicUser):
    email: str


class ApprovalUpdate(CamelModel):
    """Body of the approve/reject endpoints."""

    is_approved: bool


class MessageResponse(BaseModel):
    message: str
