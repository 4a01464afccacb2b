"""Follow toggle route."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..negotiation import json_response, redirect, wants_json
from ..schemas import FollowResponse
from ..services import get_current_user, toggle_follow

router = APIRouter(tags=["follows"])


@router.post("/users/{user_id}/follow")
async def follow_endpoint(
    request: Request,
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    stats = toggle_follow(db, follower=current_user, target_id=user_id)
    if wants_json(request):
        return json_response(
            FollowResponse(
                user_id=stats.user_id,
                following=stats.is_following,
                followers_count=stats.followers_count,
                following_count=stats.following_count,
            )
        )

    target = db.get(User, user_id)
    return redirect(f"/users/{target.username}" if target else "/feed")
