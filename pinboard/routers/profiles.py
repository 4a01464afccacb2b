"""Profile pages, the own-pins listing and profile picture uploads."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from ..negotiation import json_response, redirect, wants_json
from ..schemas import FeedResponse, ProfileImageResponse, ProfilePageResponse
from ..services import (
    build_profile,
    get_current_user,
    get_user_by_username,
    list_user_posts,
    list_user_posts_page,
    normalize_page_params,
    update_profile_image,
)
from ..ui import render_template

router = APIRouter(tags=["profiles"])


def _profile_response(
    request: Request,
    db: Session,
    *,
    owner: User,
    viewer: User,
    active_nav: str | None,
) -> Response:
    profile: dict[str, Any] = build_profile(db, owner, viewer_id=viewer.id)
    posts = list_user_posts(db, owner_id=owner.id, viewer_id=viewer.id)

    if wants_json(request):
        return json_response(ProfilePageResponse(user=profile, posts=posts))

    return render_template(
        request,
        "profile.html",
        {
            "page_title": f"@{owner.username}",
            "active_nav": active_nav,
            "current_user": viewer,
            "profile": profile,
            "posts": posts,
            "pagination": None,
            "error": request.query_params.get("error"),
        },
    )


@router.get("/profile")
async def own_profile_endpoint(
    request: Request,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    return _profile_response(request, db, owner=current_user, viewer=current_user, active_nav="/profile")


@router.get("/users/{username}")
async def public_profile_endpoint(
    request: Request,
    username: str,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    owner = get_user_by_username(db, username)
    return _profile_response(request, db, owner=owner, viewer=current_user, active_nav=None)


@router.get("/allpins")
async def all_pins_endpoint(
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    settings = get_settings()
    page_number, page_size = normalize_page_params(
        page,
        limit,
        default_limit=settings.feed_default_limit,
        max_limit=settings.feed_max_limit,
    )
    result = list_user_posts_page(
        db,
        owner_id=current_user.id,
        viewer_id=current_user.id,
        page=page_number,
        limit=page_size,
    )

    if wants_json(request):
        return json_response(FeedResponse(posts=result.posts, pagination=asdict(result.pagination)))

    return render_template(
        request,
        "pins.html",
        {
            "page_title": "My pins",
            "active_nav": "/allpins",
            "current_user": current_user,
            "posts": result.posts,
            "pagination": result.pagination,
            "query": None,
        },
    )


@router.post("/fileupload")
async def profile_image_endpoint(
    request: Request,
    image: UploadFile | None = File(None),
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    try:
        user = await update_profile_image(db, user=current_user, file=image)
    except HTTPException as exc:
        if wants_json(request):
            raise
        return redirect("/profile", error=str(exc.detail))

    if wants_json(request):
        return json_response(ProfileImageResponse(profile_image=user.profile_image_url))
    return redirect("/profile")
