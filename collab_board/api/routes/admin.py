from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from collab_board.api.dependencies import get_admin_service
from collab_board.schemas.admin import (
    AdminDeletePostRequest,
    AdminLoginRequest,
    ChangeAdminPasswordRequest,
)
from collab_board.schemas.posts import MessageResponse
from collab_board.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["Admin"])

AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]


@router.post("/login", response_model=MessageResponse)
def admin_login(body: AdminLoginRequest, service: AdminServiceDep) -> MessageResponse:
    """Check the admin password. No session is created; the client keeps it."""
    service.login(body.password)
    return MessageResponse()


@router.post("/change-password", response_model=MessageResponse)
def change_admin_password(body: ChangeAdminPasswordRequest, service: AdminServiceDep) -> MessageResponse:
    service.change_password(body.current_password, body.new_password)
    return MessageResponse()


@router.delete("/activists/{post_id}", response_model=MessageResponse)
def admin_delete_post(post_id: int, body: AdminDeletePostRequest, service: AdminServiceDep) -> MessageResponse:
    """Delete any post, whether or not it has its own password."""
    service.delete_post(post_id, body.admin_password)
    return MessageResponse()
