"""Helpers for form-posted values."""
from uuid import UUID


def parse_id(value: str | None) -> UUID | None:
    """Parse a form field as a UUID, returning None when absent or malformed."""
    if not value:
        return None
    try:
        return UUID(value)
    except ValueError:
        return None
