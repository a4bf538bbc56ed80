from typing import List, Optional, Tuple

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import PUBLIC_PREFIX, UPLOAD_FIELD, Settings, load_settings
from errors import ErrorKind, UploadServiceError
from storage import StorageGateway
from upload_coordinator import UploadCoordinator, public_url
from upload_validator import UploadedFileDescriptor
from utils.log_setup import get_logger, set_level
from utils.name_sanitizer import sanitize_file_name, sanitize_folder_name

logger = get_logger("upload_service")


class UploadResponse(BaseModel):
    success: bool = True
    folder: str
    files: List[str]


class FolderListResponse(BaseModel):
    success: bool = True
    folders: List[str]


class FileListResponse(BaseModel):
    success: bool = True
    folder: str
    files: List[str]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
    folder: str
    filename: str


class MessageResponse(BaseModel):
    success: bool
    message: str


def _error(status_code: int, message: str, log: bool = True) -> JSONResponse:
    # 5xx are ours, everything else is the client's
    if log and status_code >= 500:
        logger.error(f"internal error: {message}")
    elif log:
        logger.warning(f"request error: {message}")
    return JSONResponse(
        status_code=status_code,
        content=MessageResponse(success=False, message=message).model_dump(),
    )


def sanitize_delete_target(folder, filename) -> Tuple[str, str]:
    safe_folder = sanitize_folder_name(folder)
    safe_name = sanitize_file_name(filename)
    if not safe_folder:
        raise UploadServiceError(ErrorKind.INVALID_FOLDER, "Invalid folder or filename.")
    if not safe_name:
        raise UploadServiceError(ErrorKind.INVALID_FILE_NAME, "Invalid folder or filename.")
    return safe_folder, safe_name


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    set_level(settings.log_level)

    gateway = StorageGateway(settings)
    coordinator = UploadCoordinator(gateway, settings)

    app = FastAPI(title="Image Upload Server")
    app.state.settings = settings
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def base_url_for(request: Request) -> str:
        return (settings.base_url or str(request.base_url)).rstrip("/")

    # --- Error handlers ---

    @app.exception_handler(UploadServiceError)
    async def upload_error_handler(request: Request, exc: UploadServiceError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request.")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, f"Not Found - {request.url.path}")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal Server Error", log=False)

    # --- Routes ---

    @app.get("/health", response_model=MessageResponse)
    async def health():
        return MessageResponse(success=True, message="Upload server is running")

    @app.post("/upload", response_model=UploadResponse)
    async def upload_images(
        request: Request,
        folder: Optional[str] = Form(None),
        images: Optional[List[UploadFile]] = File(None, alias=UPLOAD_FIELD),
    ):
        uploads = images or []
        try:
            descriptors = [
                UploadedFileDescriptor.from_stream(u.filename, u.content_type, u.file)
                for u in uploads
            ]
            outcome = await run_in_threadpool(
                coordinator.run, folder, descriptors, base_url_for(request)
            )
        finally:
            for u in uploads:
                await u.close()

        if not outcome.ok:
            return _error(outcome.failure.status_code, outcome.failure.message)
        return UploadResponse(folder=outcome.folder, files=outcome.files)

    @app.get("/folders", response_model=FolderListResponse)
    async def list_folders():
        folders = await run_in_threadpool(gateway.list_folders)
        return FolderListResponse(folders=folders)

    @app.get("/folders/{folder}/files", response_model=FileListResponse)
    async def list_files(folder: str, request: Request):
        safe_folder = sanitize_folder_name(folder)
        if not safe_folder:
            raise UploadServiceError(ErrorKind.INVALID_FOLDER, "Invalid folder name.")
        names = await run_in_threadpool(gateway.list_files, safe_folder)
        base = base_url_for(request)
        return FileListResponse(
            folder=safe_folder,
            files=[public_url(base, safe_folder, name) for name in names],
        )

    @app.delete("/folders/{folder}/files/{filename}", response_model=DeleteResponse)
    async def delete_file(folder: str, filename: str):
        safe_folder, safe_name = sanitize_delete_target(folder, filename)
        await run_in_threadpool(gateway.delete, safe_folder, safe_name)
        return DeleteResponse(
            message="File deleted successfully.",
            folder=safe_folder,
            filename=safe_name,
        )

    app.mount(PUBLIC_PREFIX, StaticFiles(directory=str(settings.storage_root)), name="uploads")

    logger.info(f"Serving uploads from {settings.storage_root}")
    return app


def main():
    settings = load_settings()
    logger.info(f"[upload-server] running on port {settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
