"""Pydantic schemas for admin requests.

Field aliases keep the camelCase names the web client sends.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginRequest(BaseModel):
    password: str | None = None


class ChangeAdminPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")


class AdminDeletePostRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    admin_password: str | None = Field(default=None, alias="adminPassword")
