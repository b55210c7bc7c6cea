# backend/tests/test_api_auth.py
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4
from fastapi.responses import RedirectResponse

from menu.api.auth import router, login_page, login, logout, get_current_user_info
from menu.core.config import settings
from menu.models.user import User
from menu.services.auth.service import AuthError, AuthErrorCode, LoginResult
from menu.services.auth.sessions import SessionValidationResult
from menu.utils.datetime import utcnow


def _user() -> User:
    return User(id=uuid4(), username="jane", email="jane@danielokita.com")


def test_router_exists():
    assert "auth" in router.tags


@pytest.mark.asyncio
async def test_login_page_redirects_signed_in_user():
    result = await login_page(user=_user())

    assert isinstance(result, RedirectResponse)
    assert result.headers["location"] == "/"


@pytest.mark.asyncio
async def test_login_page_for_anonymous_user():
    assert await login_page(user=None) == {}


@pytest.mark.asyncio
async def test_login_requires_email():
    auth = MagicMock()
    auth.login = AsyncMock()

    result = await login(email=None, auth=auth)

    assert result["error"] == "Email is required"
    auth.login.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_sets_cookie_and_redirects():
    user = _user()
    auth = MagicMock()
    auth.login = AsyncMock(return_value=LoginResult(
        user=user,
        session_token="tok_abc",
        expires_at=utcnow() + timedelta(days=30),
    ))

    result = await login(email=user.email, auth=auth)

    assert result.status_code == 302
    assert result.headers["location"] == "/"
    cookie = result.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie_name}=tok_abc")
    assert "HttpOnly" in cookie
    assert "Path=/" in cookie


@pytest.mark.asyncio
async def test_login_reports_domain_error():
    auth = MagicMock()
    auth.login = AsyncMock(side_effect=AuthError(
        "Only @danielokita.com emails are allowed",
        AuthErrorCode.INVALID_EMAIL_DOMAIN,
    ))

    result = await login(email="jane@gmail.com", auth=auth)

    assert result == {
        "error": "Only @danielokita.com emails are allowed",
        "code": "INVALID_EMAIL_DOMAIN",
        "email": "jane@gmail.com",
    }


@pytest.mark.asyncio
async def test_logout_invalidates_and_clears_cookie():
    auth = MagicMock()
    auth.logout = AsyncMock()
    context = SessionValidationResult(session=MagicMock(), user=_user())

    result = await logout(context=context, session_token="tok_abc", auth=auth)

    auth.logout.assert_awaited_once_with("tok_abc")
    assert result.status_code == 302
    assert result.headers["location"] == "/login"
    assert result.headers["set-cookie"].startswith(f'{settings.session_cookie_name}=""')


@pytest.mark.asyncio
async def test_logout_without_session_still_redirects():
    auth = MagicMock()
    auth.logout = AsyncMock()
    context = SessionValidationResult(session=None, user=None)

    result = await logout(context=context, session_token=None, auth=auth)

    auth.logout.assert_not_awaited()
    assert result.headers["location"] == "/login"


@pytest.mark.asyncio
async def test_logout_failure_still_clears_cookie():
    auth = MagicMock()
    auth.logout = AsyncMock(side_effect=AuthError("Failed to log out user"))
    context = SessionValidationResult(session=MagicMock(), user=_user())

    result = await logout(context=context, session_token="tok_abc", auth=auth)

    assert result.status_code == 302
    assert "set-cookie" in result.headers


@pytest.mark.asyncio
async def test_get_current_user_info():
    user = _user()

    result = await get_current_user_info(user=user)

    assert result.email == user.email
    assert result.username == "jane"
