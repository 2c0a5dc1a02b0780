"""Pydantic schemas for post requests and responses.

Request fields are optional at the schema level so a missing field is
reported as ``missing_required_field`` by the service, the same way a blank
one is.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PostFieldsRequest(BaseModel):
    """Editable post fields shared by create and update."""

    interest: str | None = Field(
        default=None,
        description="What the poster wants to collaborate on (max 600 characters).",
    )
    location: str | None = Field(
        default=None,
        description="Where the collaboration happens; blank means 'Online'.",
    )
    signal_username: str | None = Field(
        default=None,
        description="Signal handle to get in touch (max 15 characters).",
    )
    alias: str | None = Field(
        default=None,
        description="Optional display name (max 15 characters).",
    )


class PostCreateRequest(PostFieldsRequest):
    password: str | None = Field(
        default=None,
        description="Optional secret; without one the post can never be edited or deleted by its author.",
    )


class PostUpdateRequest(PostFieldsRequest):
    password: str | None = Field(
        default=None,
        description="The post's secret; required. The secret itself cannot be changed.",
    )


class VerifyPasswordRequest(BaseModel):
    id: int | None = Field(default=None, description="Post identifier.")
    password: str | None = Field(default=None, description="The post's secret.")


class DeletePostRequest(BaseModel):
    password: str | None = Field(default=None, description="The post's secret.")


class PostView(BaseModel):
    """Public representation of a post; the password hash is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    interest: str
    location: str
    signal_username: str
    alias: str | None = None
    created_at: datetime
    has_password: bool = Field(
        ...,
        validation_alias=AliasChoices("has_password", "hasPassword"),
        serialization_alias="hasPassword",
        description="True if the post is protected and may be edited with its secret.",
    )


class PostResponse(BaseModel):
    message: Literal["success"] = "success"
    data: PostView


class PostListResponse(BaseModel):
    message: Literal["success"] = "success"
    data: list[PostView] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: Literal["success"] = "success"
