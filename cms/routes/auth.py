"""
Admin sign-in and session routes.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header
from fastapi.responses import JSONResponse

from cms.auth import SESSION_COOKIE, SessionManager, token_from_request
from cms.config import get_settings
from cms.dependencies import get_session_manager
from cms.errors import AuthenticationError
from cms.schemas import LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/login")
def login(payload: LoginRequest, sessions: SessionManager = Depends(get_session_manager)):
    user = sessions.authenticate(payload.id_token)
    token = sessions.create_session_token(user)
    settings = get_settings()
    response = JSONResponse({"token": token, "user": user.to_dict()})
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        secure=not settings.is_development,
        samesite="lax",
    )
    logger.info("Admin signed in: %s", user.email)
    return response


@router.get("/session")
def session(
    authorization: Optional[str] = Header(default=None),
    cms_session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
    sessions: SessionManager = Depends(get_session_manager),
):
    try:
        user = sessions.admin_from_token(token_from_request(authorization, cms_session))
    except AuthenticationError:
        return {"authenticated": False, "user": None}
    return {"authenticated": True, "user": user.to_dict()}


@router.post("/logout")
def logout():
    response = JSONResponse({"success": True})
    response.delete_cookie(SESSION_COOKIE)
    return response
