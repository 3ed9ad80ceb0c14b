"""Target identifier generation. Single function pair, uuid4."""

import uuid


def generate_identifier() -> str:
    """Generate a new target identifier. 32 hex chars, no separators."""
    return uuid.uuid4().hex


def normalize_identifier(value: str | None) -> str:
    """Return identifier in stored form: lowercase hex with separators stripped.

    Args:
        value: Raw identifier, possibly with dashes or braces, or empty.

    Returns:
        Normalized identifier, or empty string when value is empty.

    Raises:
        ValueError: If value is non-empty and not a valid UUID.
    """
    if not value:
        return ""
    return uuid.UUID(value.strip()).hex
