"""Ingredient name validation and normalization."""
import re

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100


def validate_ingredient_name(name: str | None) -> bool:
    if not name or not isinstance(name, str):
        return False
    trimmed = name.strip()
    return MIN_NAME_LENGTH <= len(trimmed) <= MAX_NAME_LENGTH


def normalize_ingredient_name(name: str) -> str:
    """Lowercase, collapse whitespace and keep only ``[a-z0-9 -]``."""
    normalized = re.sub(r"\s+", " ", name.strip().lower())
    return re.sub(r"[^a-z0-9\s-]", "", normalized)
