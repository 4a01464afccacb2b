"""Login, registration and logout routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..negotiation import (
    clear_session_cookie,
    json_response,
    read_payload,
    redirect,
    set_session_cookie,
    wants_json,
)
from ..schemas import AuthResponse, LoginRequest, RegisterRequest
from ..services import (
    authenticate_user,
    create_access_token,
    enforce_auth_rate_limit,
    get_optional_user,
    register_user,
)
from ..services.post_service import user_summary
from ..ui import render_template

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


def validation_message(exc: ValidationError) -> str:
    """Collapse the first pydantic error into a short ``field: message`` string."""

    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid value"))
    return f"{field}: {message}" if field else message


def _signed_in(request: Request, user: User, token: str, *, status_code: int = status.HTTP_200_OK) -> Response:
    if wants_json(request):
        response: Response = json_response(
            AuthResponse(access_token=token, user=user_summary(user)),
            status_code=status_code,
        )
    else:
        response = redirect("/feed")
    set_session_cookie(response, token)
    return response


@router.get("/", include_in_schema=False)
@router.get("/login", include_in_schema=False)
async def login_page(
    request: Request,
    viewer: User | None = Depends(get_optional_user),
) -> Response:
    if viewer is not None:
        return redirect("/feed")
    return render_template(
        request,
        "login.html",
        {"page_title": "Log in", "error": request.query_params.get("error")},
    )


@router.post("/register", dependencies=[Depends(enforce_auth_rate_limit)])
async def register_endpoint(request: Request, db: Session = Depends(get_session)) -> Response:
    payload = await read_payload(request)
    try:
        try:
            data = RegisterRequest.model_validate(dict(payload))
        except ValidationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_message(exc)) from exc
        user, token = register_user(db, data)
    except HTTPException as exc:
        if wants_json(request):
            raise
        return redirect("/login", error=str(exc.detail))

    return _signed_in(request, user, token, status_code=status.HTTP_201_CREATED)


@router.post("/login", dependencies=[Depends(enforce_auth_rate_limit)])
async def login_endpoint(request: Request, db: Session = Depends(get_session)) -> Response:
    payload = await read_payload(request)
    try:
        credentials = LoginRequest.model_validate(dict(payload))
    except ValidationError as exc:
        if wants_json(request):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_message(exc)) from exc
        return redirect("/login", error="Username and password are required")

    user = authenticate_user(db, credentials.username, credentials.password)
    if user is None:
        logger.info("Rejected login for %s", credentials.username)
        if wants_json(request):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)
        return redirect("/login", error=INVALID_CREDENTIALS)

    return _signed_in(request, user, create_access_token(user.id))


@router.get("/logout", include_in_schema=False)
async def logout_endpoint() -> Response:
    response = redirect("/")
    clear_session_cookie(response)
    return response
