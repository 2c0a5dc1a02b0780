from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from collab_board.api.dependencies import get_post_service
from collab_board.schemas.posts import (
    DeletePostRequest,
    MessageResponse,
    PostCreateRequest,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
    VerifyPasswordRequest,
)
from collab_board.services.post_service import PostService

router = APIRouter(prefix="/activists", tags=["Posts"])

PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@router.get("", response_model=PostListResponse)
def list_posts(
    service: PostServiceDep,
    keyword: Annotated[
        str | None,
        Query(description='Search query: "exact phrase", AND, OR (case-insensitive).'),
    ] = None,
    location: Annotated[str | None, Query(description="Location substring.")] = None,
) -> PostListResponse:
    """List recent posts, newest first.

    Only posts from the last two months (``APP_LISTING_MAX_AGE_DAYS``) are
    returned. Password hashes are never included; ``hasPassword`` tells
    whether a post can be edited by its author.
    """
    return PostListResponse(data=service.search(keyword=keyword, location=location))


@router.post("", response_model=PostResponse)
def create_post(body: PostCreateRequest, service: PostServiceDep) -> PostResponse:
    post = service.create(
        interest=body.interest,
        location=body.location,
        signal_username=body.signal_username,
        alias=body.alias,
        password=body.password,
    )
    return PostResponse(data=post)


@router.post("/verify", response_model=PostResponse)
def verify_post_password(body: VerifyPasswordRequest, service: PostServiceDep) -> PostResponse:
    """Check a post's password and return its fields for editing.

    Failed attempts count towards the post's limit of 5 per hour.
    """
    return PostResponse(data=service.verify(post_id=body.id, password=body.password))


@router.put("/{post_id}", response_model=PostResponse)
def update_post(post_id: int, body: PostUpdateRequest, service: PostServiceDep) -> PostResponse:
    post = service.update(
        post_id,
        interest=body.interest,
        location=body.location,
        signal_username=body.signal_username,
        alias=body.alias,
        password=body.password,
    )
    return PostResponse(data=post)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(post_id: int, body: DeletePostRequest, service: PostServiceDep) -> MessageResponse:
    service.delete(post_id, password=body.password)
    return MessageResponse()
