import shutil
import uuid
from pathlib import Path
from typing import List

from config import Settings
from errors import ErrorKind, UploadServiceError
from upload_validator import UploadedFileDescriptor
from utils.log_setup import get_logger
from utils.name_sanitizer import sanitize_file_name, sanitize_folder_name
from utils.path_resolver import resolve_within

# Local filesystem storage. The only module that touches the uploads directory.

logger = get_logger("storage")

COPY_CHUNK_SIZE = 1024 * 1024


def listing_key(name: str):
    # case-insensitive first, code point order breaks ties
    return (name.casefold(), name)


def generate_file_name(extension: str) -> str:
    # random UUID4 name; only the lowercased extension survives from the client
    return f"{uuid.uuid4().hex}{extension.lower()}"


class StorageGateway:
    def __init__(self, settings: Settings):
        self.root = settings.storage_root
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, f"Cannot create storage root: {e.strerror}")

    # --- Path helpers ---

    def _folder_path(self, folder: str) -> Path:
        safe_folder = sanitize_folder_name(folder)
        if not safe_folder:
            raise UploadServiceError(ErrorKind.INVALID_FOLDER)
        return resolve_within(self.root, safe_folder)

    def _existing_folder(self, folder: str) -> Path:
        folder_path = self._folder_path(folder)
        if not folder_path.is_dir():
            raise UploadServiceError(ErrorKind.NOT_FOUND, "Folder not found.")
        return folder_path

    # --- Operations ---

    def ensure_folder(self, folder: str) -> Path:
        folder_path = self._folder_path(folder)
        try:
            folder_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.exception(f"Failed to create folder {folder}")
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, "Failed to create folder.") from e
        return folder_path

    def store(self, folder: str, descriptor: UploadedFileDescriptor) -> str:
        folder_path = self._existing_folder(folder)
        name = generate_file_name(descriptor.extension)
        target = resolve_within(folder_path, name, allow_root=False)

        created = False
        try:
            descriptor.handle.seek(0)
            # "xb" so a name clash fails loudly instead of overwriting
            with open(target, "xb") as out_f:
                created = True
                shutil.copyfileobj(descriptor.handle, out_f, COPY_CHUNK_SIZE)
        except OSError as e:
            logger.exception(f"Failed to write upload into {folder}")
            if created:
                # remove partial file
                target.unlink(missing_ok=True)
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, "Failed to save file.") from e

        logger.info(f"Stored {descriptor.filename or '<unnamed>'} -> {folder}/{name} (size={descriptor.size})")
        return name

    def list_folders(self) -> List[str]:
        try:
            folders = [entry.name for entry in self.root.iterdir() if entry.is_dir()]
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.exception("Failed to list storage root")
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, "Failed to list folders.") from e
        return sorted(folders, key=listing_key)

    def list_files(self, folder: str) -> List[str]:
        folder_path = self._existing_folder(folder)
        try:
            files = [entry.name for entry in folder_path.iterdir() if entry.is_file()]
        except FileNotFoundError:
            raise UploadServiceError(ErrorKind.NOT_FOUND, "Folder not found.")
        except OSError as e:
            logger.exception(f"Failed to list folder {folder}")
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, "Failed to list files.") from e
        return sorted(files, key=listing_key)

    def delete(self, folder: str, filename: str) -> None:
        safe_name = sanitize_file_name(filename)
        if not safe_name:
            raise UploadServiceError(ErrorKind.INVALID_FILE_NAME)
        folder_path = self._existing_folder(folder)
        file_path = resolve_within(folder_path, safe_name, allow_root=False)

        # never removes directories
        if not file_path.is_file():
            raise UploadServiceError(ErrorKind.NOT_FOUND, "File not found.")
        try:
            file_path.unlink()
        except FileNotFoundError:
            # lost a delete race
            raise UploadServiceError(ErrorKind.NOT_FOUND, "File not found.")
        except OSError as e:
            logger.exception(f"Failed to delete {folder}/{safe_name}")
            raise UploadServiceError(ErrorKind.STORAGE_ERROR, "Failed to delete file.") from e

        logger.info(f"Deleted {folder}/{safe_name}")
