"""Containment checks for every path built from request input.

Sanitized names should already be unable to escape, this is the second,
independent check: the joined path is canonicalized (symlinks followed) and
must sit under the trusted parent directory.
"""
import os
from pathlib import Path
from typing import Union

from errors import ErrorKind, UploadServiceError


def resolve_within(root: Union[str, Path], name: str, allow_root: bool = True) -> Path:
    """Resolve ``root/name`` and verify it stays inside ``root``.

    With ``allow_root`` False the result must be strictly below ``root``
    (used for file-within-folder lookups).
    Raises ``UploadServiceError(INVALID_PATH)`` on escape.
    """
    base = Path(root).resolve()
    target = (base / name).resolve()

    base_str = str(base)
    target_str = str(target)
    if target_str == base_str:
        if allow_root:
            return target
    elif target_str.startswith(base_str.rstrip(os.sep) + os.sep):
        return target

    raise UploadServiceError(
        ErrorKind.INVALID_PATH,
        "Invalid folder path." if allow_root else "Invalid file path.",
    )
