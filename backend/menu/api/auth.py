# backend/menu/api/auth.py
import logging

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from menu.core.cookies import delete_session_cookie, set_session_cookie
from menu.core.deps import (
    LOGIN_PATH,
    get_auth_service,
    get_current_user,
    get_session_context,
    get_session_token,
    require_user,
)
from menu.models.user import User
from menu.schemas.auth import UserResponse
from menu.services.auth.service import AuthError, AuthService
from menu.services.auth.sessions import SessionValidationResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/login", response_model=None)
async def login_page(user: User | None = Depends(get_current_user)):
    """Login entry point; signed-in users go straight home."""
    if user:
        return RedirectResponse(url="/", status_code=302)
    return {}


@router.post("/login", response_model=None)
async def login(
    email: str | None = Form(default=None),
    auth: AuthService = Depends(get_auth_service),
):
    """Log in by email and bind the session token to a cookie."""
    if not email:
        return {"error": "Email is required", "email": email}

    try:
        result = await auth.login(email)
    except AuthError as e:
        logger.info(f"Login rejected for {email}: {e.code.value}")
        return {"error": e.message, "code": e.code.value, "email": email}

    redirect = RedirectResponse(url="/", status_code=302)
    set_session_cookie(redirect, result.session_token, result.expires_at)
    return redirect


@router.get("/logout")
async def logout(
    context: SessionValidationResult = Depends(get_session_context),
    session_token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    """Invalidate the current session and clear the cookie."""
    if context.session and session_token:
        try:
            await auth.logout(session_token)
        except AuthError as e:
            logger.error(f"Logout failed: {e.message}")

    redirect = RedirectResponse(url=LOGIN_PATH, status_code=302)
    delete_session_cookie(redirect)
    return redirect


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: User = Depends(require_user)) -> UserResponse:
    """Get current authenticated user info."""
    return UserResponse.model_validate(user)
