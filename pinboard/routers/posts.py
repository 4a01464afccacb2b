"""Like, comment and upload routes for pins."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..negotiation import json_response, read_payload, redirect, wants_json
from ..schemas import CommentCreatedResponse, LikeResponse, PostCreatedResponse
from ..services import add_post_comment, create_post_with_image, get_current_user, toggle_post_like

router = APIRouter(tags=["posts"])

logger = logging.getLogger(__name__)


@router.post("/posts/{post_id}/like")
async def like_endpoint(
    request: Request,
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    state = toggle_post_like(db, post_id=post_id, user_id=current_user.id)
    if wants_json(request):
        return json_response(LikeResponse(liked=state.liked, likes_count=state.likes_count))
    return redirect(f"/pin/{post_id}")


@router.post("/posts/{post_id}/comments")
async def comment_endpoint(
    request: Request,
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    payload = await read_payload(request)
    text = payload.get("text")
    comment = add_post_comment(
        db,
        post_id=post_id,
        author=current_user,
        text=text if isinstance(text, str) else None,
    )
    if wants_json(request):
        return json_response(CommentCreatedResponse(comment=comment), status_code=status.HTTP_201_CREATED)
    return redirect(f"/pin/{post_id}")


@router.post("/upload")
async def upload_endpoint(
    request: Request,
    file: UploadFile | None = File(None),
    filetitle: str | None = Form(None),
    filecaption: str | None = Form(None),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        post = await create_post_with_image(
            db,
            owner=current_user,
            title=filetitle,
            description=filecaption,
            file=file,
        )
    except HTTPException as exc:
        if wants_json(request):
            raise
        logger.info("Upload by %s rejected: %s", current_user.username, exc.detail)
        return redirect("/profile", error=str(exc.detail))

    if wants_json(request):
        return json_response(PostCreatedResponse(post=post), status_code=status.HTTP_201_CREATED)
    return redirect("/profile")
