"""Error kinds shared by the validation/storage core and the HTTP layer."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_FOLDER = "InvalidFolder"
    INVALID_FILE_NAME = "InvalidFileName"
    INVALID_PATH = "InvalidPath"
    NO_FILES = "NoFiles"
    UNSUPPORTED_TYPE = "UnsupportedType"
    TOO_LARGE = "TooLarge"
    NOT_FOUND = "NotFound"
    STORAGE_ERROR = "StorageError"


STATUS_CODES = {
    ErrorKind.INVALID_FOLDER: 400,
    ErrorKind.INVALID_FILE_NAME: 400,
    ErrorKind.INVALID_PATH: 400,
    ErrorKind.NO_FILES: 400,
    ErrorKind.UNSUPPORTED_TYPE: 400,
    ErrorKind.TOO_LARGE: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE_ERROR: 500,
}

DEFAULT_MESSAGES = {
    ErrorKind.INVALID_FOLDER: "Invalid folder name.",
    ErrorKind.INVALID_FILE_NAME: "Invalid filename.",
    ErrorKind.INVALID_PATH: "Invalid path.",
    ErrorKind.NO_FILES: "No image files uploaded. Use field name images[].",
    ErrorKind.UNSUPPORTED_TYPE: "Only image files (jpg, jpeg, png, webp) are allowed.",
    ErrorKind.TOO_LARGE: "File too large.",
    ErrorKind.NOT_FOUND: "Not found.",
    ErrorKind.STORAGE_ERROR: "Storage failure.",
}


@dataclass(frozen=True)
class UploadFailure:
    kind: ErrorKind
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class UploadServiceError(Exception):
    """Raised inside the core; turned into an UploadFailure at the request boundary."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def failure(self) -> UploadFailure:
        return UploadFailure(self.kind, self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]
