"""Text processing utilities."""

import re


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length with suffix.

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: Suffix to add when truncating

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def generate_slug(text: str) -> str:
    """
    Build a URL slug from a title.

    Args:
        text: Title to convert

    Returns:
        Lower-case slug with words joined by dashes
    """
    text = text.lower().strip()
    # Replace whitespace runs with a dash
    text = re.sub(r"\s+", "-", text)
    # Drop anything that is not a word character or dash (accents survive)
    text = re.sub(r"[^\w-]+", "", text)
    # Remove multiple dashes
    text = re.sub(r"-{2,}", "-", text)
    return text


def collapse_whitespace(text: str) -> str:
    """Collapse internal whitespace runs to single spaces."""
    return re.sub(r"\s+", " ", text).strip()
