"""Server-side session persistence keyed by the hashed session token."""
import logging
from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from menu.core.config import settings
from menu.core.security import hash_token
from menu.models.session import Session
from menu.models.user import User
from menu.utils.datetime import as_utc, utcnow

logger = logging.getLogger(__name__)


class SessionStorageError(Exception):
    """Session could not be persisted or removed."""
    pass


@dataclass
class SessionValidationResult:
    session: Session | None
    user: User | None

    @property
    def is_valid(self) -> bool:
        return self.session is not None


class SessionStore:
    """
    Create, validate and invalidate sessions.

    Sessions live for ``ttl`` (30 days by default). A validation within the
    trailing ``renewal_window`` (15 days) of expiry pushes the expiry out to a
    full ``ttl`` from now. Expired sessions are deleted when encountered and
    are never returned as valid.
    """

    def __init__(
        self,
        db: AsyncSession,
        ttl: timedelta | None = None,
        renewal_window: timedelta | None = None,
    ):
        self.db = db
        self.ttl = ttl if ttl is not None else timedelta(days=settings.session_expire_days)
        self.renewal_window = (
            renewal_window if renewal_window is not None else timedelta(days=settings.session_renew_days)
        )

    async def create(self, identifier: str, user_id: UUID, ttl: timedelta | None = None) -> Session:
        """Insert a session row expiring ``ttl`` from now."""
        session = Session(
            id=identifier,
            user_id=user_id,
            expires_at=utcnow() + (ttl if ttl is not None else self.ttl),
        )
        try:
            self.db.add(session)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create session for user {user_id}: {e}")
            raise SessionStorageError("Failed to create session") from e
        return session

    async def validate(self, token: str) -> SessionValidationResult:
        """Resolve a raw token to its session and user, renewing or expiring as needed."""
        identifier = hash_token(token)

        result = await self.db.execute(
            select(Session, User)
            .join(User, Session.user_id == User.id)
            .where(Session.id == identifier)
        )
        row = result.first()
        if row is None:
            return SessionValidationResult(session=None, user=None)

        session, user = row
        now = utcnow()
        expires_at = as_utc(session.expires_at)

        if now >= expires_at:
            logger.info(f"Deleting expired session for user {user.id}")
            await self.db.execute(delete(Session).where(Session.id == identifier))
            await self.db.commit()
            return SessionValidationResult(session=None, user=None)

        if now >= expires_at - self.renewal_window:
            logger.debug(f"Renewing session for user {user.id}")
            session.expires_at = now + self.ttl
            await self.db.commit()

        return SessionValidationResult(session=session, user=user)

    async def invalidate(self, identifier: str) -> None:
        """Delete a session. Unknown identifiers are ignored."""
        try:
            await self.db.execute(delete(Session).where(Session.id == identifier))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise SessionStorageError("Failed to invalidate session") from e

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        """Delete every session belonging to a user. Returns the number removed."""
        result = await self.db.execute(delete(Session).where(Session.user_id == user_id))
        await self.db.commit()
        return result.rowcount or 0

    async def purge_expired(self) -> int:
        """Delete all expired sessions. Returns the number removed."""
        result = await self.db.execute(
            delete(Session)
            .where(Session.expires_at <= utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount or 0
