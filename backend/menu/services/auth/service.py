# backend/menu/services/auth/service.py
import enum
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from menu.core.config import settings
from menu.core.security import (
    generate_id,
    generate_session_token,
    hash_token,
    username_from_email,
    validate_email,
)
from menu.models.user import User
from menu.services.auth.sessions import SessionStorageError, SessionStore

logger = logging.getLogger(__name__)


class AuthErrorCode(str, enum.Enum):
    INVALID_EMAIL_DOMAIN = "INVALID_EMAIL_DOMAIN"
    USER_EXISTS = "USER_EXISTS"
    USER_CREATE_FAILED = "USER_CREATE_FAILED"
    AUTH_ERROR = "AUTH_ERROR"


class AuthError(Exception):
    """Authentication failure tagged with an ``AuthErrorCode``."""

    def __init__(self, message: str, code: AuthErrorCode = AuthErrorCode.AUTH_ERROR):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class LoginResult:
    user: User
    session_token: str
    expires_at: datetime


class AuthService:
    """Email-domain restricted login and logout."""

    def __init__(self, db: AsyncSession, sessions: SessionStore | None = None):
        self.db = db
        self.sessions = sessions or SessionStore(db)
        self.allowed_domain = settings.allowed_email_domain

    def _domain_error(self) -> AuthError:
        return AuthError(
            f"Only {self.allowed_domain} emails are allowed",
            AuthErrorCode.INVALID_EMAIL_DOMAIN,
        )

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(self, email: str) -> User:
        """Create a user for a permitted email. The username is the email's local part."""
        if not validate_email(email, self.allowed_domain):
            raise self._domain_error()

        if await self.get_user_by_email(email):
            raise AuthError("User already exists", AuthErrorCode.USER_EXISTS)

        user = User(
            id=generate_id(),
            username=username_from_email(email),
            email=email,
        )
        try:
            self.db.add(user)
            await self.db.commit()
        except IntegrityError as e:
            # Another request created the same email between our lookup and insert
            await self.db.rollback()
            raise AuthError("User already exists", AuthErrorCode.USER_EXISTS) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Error creating user {email}: {e}")
            raise AuthError("Failed to create user", AuthErrorCode.USER_CREATE_FAILED) from e

        logger.info(f"Created user {user.id} ({user.username})")
        return user

    async def _find_or_create_user(self, email: str) -> User:
        user = await self.get_user_by_email(email)
        if user:
            return user
        try:
            return await self.create_user(email)
        except AuthError as e:
            if e.code != AuthErrorCode.USER_EXISTS:
                raise
            # Lost a creation race; the winner's row should now be visible
            user = await self.get_user_by_email(email)
            if user is None:
                raise
            return user

    async def login(self, email: str) -> LoginResult:
        """
        Log a user in by email, creating the account on first login.

        Returns the user, the raw session token for the client, and the
        session expiry. The hashed identifier never leaves the server.

        Raises:
            AuthError: INVALID_EMAIL_DOMAIN, USER_EXISTS, USER_CREATE_FAILED
                or AUTH_ERROR for unexpected storage failures
        """
        if not validate_email(email, self.allowed_domain):
            raise self._domain_error()

        try:
            user = await self._find_or_create_user(email)

            session_token = generate_session_token()
            session = await self.sessions.create(hash_token(session_token), user.id)
        except AuthError:
            raise
        except (SQLAlchemyError, SessionStorageError) as e:
            logger.exception(f"Error logging in user {email}: {e}")
            raise AuthError("Failed to log in user") from e

        logger.info(f"User {user.id} logged in")
        return LoginResult(user=user, session_token=session_token, expires_at=session.expires_at)

    async def logout(self, session_token: str) -> None:
        """Invalidate the session for a raw token. Unknown tokens are not an error."""
        try:
            await self.sessions.invalidate(hash_token(session_token))
        except SessionStorageError as e:
            logger.exception(f"Error logging out: {e}")
            raise AuthError("Failed to log out user") from e
