"""Common utilities for the condominium backend."""

import re
from datetime import datetime, timezone

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE_RUN = re.compile(r"\s+")


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def digits_only(value: str | None) -> str:
    """Strip every non-digit character, e.g. '(11) 99999-9999' -> '11999999999'."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def filename_slug(value: str) -> str:
    """Lowercase a display name and replace whitespace runs with underscores."""
    return _WHITESPACE_RUN.sub("_", value.strip()).lower()
