"""Feed and pin detail pages."""
from __future__ import annotations

from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from ..negotiation import json_response, wants_json
from ..schemas import FeedResponse, PinDetailResponse
from ..services import get_current_user, get_post_detail, list_feed_page, normalize_page_params
from ..ui import render_template

router = APIRouter(tags=["feed"])


@router.get("/feed")
async def feed_endpoint(
    request: Request,
    q: str | None = None,
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
    query = (q or "").strip()
    result = list_feed_page(db, viewer_id=current_user.id, page=page_number, limit=page_size, query=query)

    if wants_json(request):
        return json_response(FeedResponse(posts=result.posts, pagination=asdict(result.pagination)))

    return render_template(
        request,
        "feed.html",
        {
            "page_title": "Feed",
            "active_nav": "/feed",
            "current_user": current_user,
            "posts": result.posts,
            "pagination": result.pagination,
            "query": query,
        },
    )


@router.get("/pin/{post_id}")
async def pin_endpoint(
    request: Request,
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    detail = get_post_detail(db, post_id=post_id, viewer_id=current_user.id)

    if wants_json(request):
        return json_response(PinDetailResponse(post=detail["post"], related=detail["related"]))

    return render_template(
        request,
        "pin.html",
        {
            "page_title": detail["post"]["title"],
            "current_user": current_user,
            "post": detail["post"],
            "related": detail["related"],
        },
    )
