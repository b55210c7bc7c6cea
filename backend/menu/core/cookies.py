# backend/menu/core/cookies.py
from datetime import datetime

from fastapi import Response

from menu.core.config import settings


def set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    """Bind a raw session token to the client until ``expires_at``."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        expires=expires_at,
        path="/",
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
    )


def delete_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name, path="/")
