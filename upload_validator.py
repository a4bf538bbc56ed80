# upload_validator.py
import os
from dataclasses import dataclass
from typing import BinaryIO, Optional

from config import DEFAULT_MAX_FILE_SIZE
from errors import ErrorKind, UploadFailure

ALLOWED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})


@dataclass(frozen=True)
class UploadedFileDescriptor:
    """One incoming file, held only until it is validated and stored."""
    extension: str
    content_type: str
    size: int
    handle: BinaryIO
    filename: str = ""  # client name, for log lines only

    @classmethod
    def from_stream(cls, filename: Optional[str], content_type: Optional[str], handle: BinaryIO) -> "UploadedFileDescriptor":
        handle.seek(0, os.SEEK_END)
        size = handle.tell()
        handle.seek(0)
        name = filename or ""
        return cls(
            extension=os.path.splitext(name)[1].lower(),
            content_type=(content_type or "").lower(),
            size=size,
            handle=handle,
            filename=name,
        )


def is_allowed_type(descriptor: UploadedFileDescriptor) -> bool:
    # Extension and declared content-type both come from the client, so both must agree
    ext_ok = descriptor.extension.lower() in ALLOWED_EXTENSIONS
    mime_ok = descriptor.content_type.lower() in ALLOWED_MIME_TYPES
    return ext_ok and mime_ok


def too_large_message(max_file_size: int) -> str:
    mb = max_file_size / (1024 * 1024)
    label = f"{int(mb)}MB" if mb.is_integer() else f"{max_file_size} bytes"
    return f"File too large. Max allowed size is {label}."


def validate_upload(descriptor: UploadedFileDescriptor, max_file_size: int = DEFAULT_MAX_FILE_SIZE) -> Optional[UploadFailure]:
    """Return None when the file may be stored, else the failure explaining why."""
    if not is_allowed_type(descriptor):
        return UploadFailure(
            ErrorKind.UNSUPPORTED_TYPE,
            "Only image files (jpg, jpeg, png, webp) are allowed.",
        )
    if descriptor.size > max_file_size:
        return UploadFailure(ErrorKind.TOO_LARGE, too_large_message(max_file_size))
    return None
