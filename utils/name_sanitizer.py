import re
from typing import Any, Optional

FOLDER_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
FILE_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


def _has_traversal(value: str) -> bool:
    return ".." in value or "/" in value or "\\" in value


def _sanitize(raw: Any, pattern: "re.Pattern[str]") -> Optional[str]:
    if not isinstance(raw, str):
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    # fullmatch, so a trailing newline can't sneak past the way "$" would allow
    if not pattern.fullmatch(trimmed):
        return None
    if _has_traversal(trimmed):
        return None
    return trimmed


def sanitize_folder_name(raw: Any) -> Optional[str]:
    """Trimmed folder name, or None if it is not plain letters, digits, _ and -."""
    return _sanitize(raw, FOLDER_PATTERN)


def sanitize_file_name(raw: Any) -> Optional[str]:
    """Trimmed file name (dots allowed, never ".."), or None if unsafe."""
    return _sanitize(raw, FILE_PATTERN)
