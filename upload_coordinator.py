# upload_coordinator.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import PUBLIC_PREFIX, Settings
from errors import ErrorKind, UploadFailure, UploadServiceError
from storage import StorageGateway
from upload_validator import UploadedFileDescriptor, validate_upload
from utils.log_setup import get_logger
from utils.name_sanitizer import sanitize_folder_name

logger = get_logger("upload_coordinator")


def public_url(base_url: str, folder: str, filename: str) -> str:
    return f"{base_url.rstrip('/')}{PUBLIC_PREFIX}/{folder}/{filename}"


@dataclass
class UploadOutcome:
    ok: bool
    folder: Optional[str] = None
    files: List[str] = field(default_factory=list)
    failure: Optional[UploadFailure] = None

    @classmethod
    def failed(cls, failure: UploadFailure, folder: Optional[str] = None) -> "UploadOutcome":
        return cls(ok=False, folder=folder, failure=failure)


class UploadCoordinator:
    """Runs one upload request: folder check, batch validation, then writes."""

    def __init__(self, gateway: StorageGateway, settings: Settings):
        self.gateway = gateway
        self.settings = settings

    def _discard(self, folder: str, names: List[str]) -> None:
        # a failed batch leaves no files behind
        for name in names:
            try:
                self.gateway.delete(folder, name)
            except UploadServiceError as e:
                logger.warning(f"Could not remove {folder}/{name} after failed upload: {e.message}")

    def run(self, raw_folder, files: Sequence[UploadedFileDescriptor], base_url: str) -> UploadOutcome:
        folder = sanitize_folder_name(raw_folder)
        if not folder:
            logger.warning(f"Rejected upload: invalid folder {raw_folder!r}")
            return UploadOutcome.failed(UploadFailure(
                ErrorKind.INVALID_FOLDER,
                "Invalid folder name. Use only letters, numbers, _ and -.",
            ))

        try:
            self.gateway.ensure_folder(folder)
        except UploadServiceError as e:
            return UploadOutcome.failed(e.failure, folder)

        if not files:
            return UploadOutcome.failed(UploadFailure(
                ErrorKind.NO_FILES,
                "No image files uploaded. Use field name images[].",
            ), folder)

        # The whole batch is checked before the first write
        for idx, descriptor in enumerate(files, 1):
            failure = validate_upload(descriptor, self.settings.max_file_size)
            if failure:
                logger.warning(
                    f"Rejected upload batch for {folder}: file {idx} ({descriptor.filename!r}) {failure.kind.value}"
                )
                return UploadOutcome.failed(failure, folder)

        stored = []
        try:
            for descriptor in files:
                stored.append(self.gateway.store(folder, descriptor))
        except UploadServiceError as e:
            logger.error(f"Upload to {folder} failed after {len(stored)} of {len(files)} files: {e.message}")
            self._discard(folder, stored)
            return UploadOutcome.failed(e.failure, folder)

        base = self.settings.base_url or base_url
        logger.info(f"Uploaded {len(stored)} file(s) to {folder}")
        return UploadOutcome(
            ok=True,
            folder=folder,
            files=[public_url(base, folder, name) for name in stored],
        )
