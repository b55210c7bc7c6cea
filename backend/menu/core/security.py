# backend/menu/core/security.py
import base64
import hashlib
import re
import secrets
from uuid import UUID, uuid4

from menu.core.config import settings

# 18 bytes = 144 bits of entropy, 24 base64url characters
SESSION_TOKEN_BYTES = 18

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def generate_session_token() -> str:
    """Generate a secure random session token for the client cookie."""
    return base64.urlsafe_b64encode(secrets.token_bytes(SESSION_TOKEN_BYTES)).decode().rstrip("=")


def hash_token(token: str) -> str:
    """Derive the stored session identifier from a raw token (SHA-256, lowercase hex)."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_id() -> UUID:
    """Random 128-bit row identifier (UUID4, 122 random bits)."""
    return uuid4()


def validate_email(email: str | None, allowed_domain: str | None = None) -> bool:
    """Check address syntax and that the address belongs to the permitted domain."""
    if not email or not isinstance(email, str):
        return False
    domain = allowed_domain if allowed_domain is not None else settings.allowed_email_domain
    return bool(EMAIL_PATTERN.match(email)) and email.endswith(domain)


def username_from_email(email: str) -> str:
    """Local part of an email address."""
    return email.split("@")[0]
